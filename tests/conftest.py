import sys
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from epic_sync.config import SyncConfig  # noqa: E402
from epic_sync.errors import CollaboratorFailure  # noqa: E402
from epic_sync.models import CrossReference, EpicRecord, TaskRecord  # noqa: E402


class FakeIssueStore:
    """In-memory issue store that records every mutation."""

    def __init__(self) -> None:
        self.tasks: Dict[int, TaskRecord] = {}
        self.epics: Dict[int, EpicRecord] = {}
        self.refs: Dict[int, List[CrossReference]] = {}
        self.calls: List[Tuple] = []
        self.failures: Set[Tuple[str, int]] = set()

    def add_task(self, number: int, title: str, state: str = "open") -> TaskRecord:
        task = TaskRecord(number=number, title=title, state=state)
        self.tasks[number] = task
        return task

    def add_epic(self, number: int, title: str, body: str, state: str = "open") -> EpicRecord:
        epic = EpicRecord(number=number, title=title, body=body, state=state)
        self.epics[number] = epic
        return epic

    def reference(self, task_number: int, epic_number: int, kind: str = "issue") -> None:
        self.refs.setdefault(task_number, []).append(
            CrossReference(source_kind=kind, source_record=self.epics[epic_number])
        )

    def fail(self, method: str, number: int) -> None:
        """Make the given call raise CollaboratorFailure after being recorded."""
        self.failures.add((method, number))

    def _record(self, call: Tuple) -> None:
        self.calls.append(call)
        if (call[0], call[1]) in self.failures:
            raise CollaboratorFailure(f"{call[0]} failed for issue #{call[1]}")

    @property
    def mutations(self) -> List[Tuple]:
        return [c for c in self.calls if c[0] != "get_task" and c[0] != "list_cross_references"]

    def get_task(self, number: int) -> Optional[TaskRecord]:
        self._record(("get_task", number))
        return self.tasks.get(number)

    def update_task_state(self, number: int, state: str) -> None:
        self._record(("update_task_state", number, state))
        task = self.tasks[number]
        self.tasks[number] = TaskRecord(number=number, title=task.title, state=state)

    def add_comment(self, number: int, text: str) -> None:
        self._record(("add_comment", number, text))

    def update_epic_body(self, number: int, text: str) -> None:
        self._record(("update_epic_body", number, text))
        epic = self.epics[number]
        self.epics[number] = EpicRecord(number=number, title=epic.title, body=text, state=epic.state)

    def update_epic_state(self, number: int, state: str) -> None:
        self._record(("update_epic_state", number, state))
        epic = self.epics[number]
        self.epics[number] = EpicRecord(number=number, title=epic.title, body=epic.body, state=state)

    def list_cross_references(self, task_number: int) -> List[CrossReference]:
        self._record(("list_cross_references", task_number))
        return list(self.refs.get(task_number, []))


@pytest.fixture
def store() -> FakeIssueStore:
    return FakeIssueStore()


@pytest.fixture
def config() -> SyncConfig:
    return SyncConfig(epic_prefix="Epic:", tasks_marker="Workload", close_completed_epics=True)
