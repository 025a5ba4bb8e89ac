from __future__ import annotations

from typing import List, Optional, Protocol

from .models import CrossReference, TaskRecord


class IssueStore(Protocol):
    """Everything the synchronizers need from the outside world."""

    def get_task(self, number: int) -> Optional[TaskRecord]:
        ...

    def update_task_state(self, number: int, state: str) -> None:
        ...

    def add_comment(self, number: int, text: str) -> None:
        ...

    def update_epic_body(self, number: int, text: str) -> None:
        ...

    def update_epic_state(self, number: int, state: str) -> None:
        ...

    def list_cross_references(self, task_number: int) -> List[CrossReference]:
        ...
