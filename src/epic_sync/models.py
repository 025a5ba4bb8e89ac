from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

OPEN = "open"
CLOSED = "closed"
STATES = (OPEN, CLOSED)


@dataclass(frozen=True)
class TaskRecord:
    """Live snapshot of a task issue."""

    number: int
    title: str
    state: str = OPEN

    @property
    def closed(self) -> bool:
        return self.state == CLOSED

    @classmethod
    def from_issue(cls, issue: Dict[str, Any]) -> "TaskRecord":
        return cls(
            number=int(issue["number"]),
            title=issue.get("title") or "",
            state=issue.get("state") or OPEN,
        )


@dataclass(frozen=True)
class EpicRecord:
    """Live snapshot of an Epic issue. The body is never edited in place."""

    number: int
    title: str
    body: str = ""
    state: str = OPEN

    @property
    def closed(self) -> bool:
        return self.state == CLOSED

    @classmethod
    def from_issue(cls, issue: Dict[str, Any]) -> "EpicRecord":
        return cls(
            number=int(issue["number"]),
            title=issue.get("title") or "",
            body=issue.get("body") or "",
            state=issue.get("state") or OPEN,
        )


@dataclass(frozen=True)
class CrossReference:
    source_kind: str
    source_record: EpicRecord
