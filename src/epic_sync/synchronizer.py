from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Set

from .checklist import locate_workload_section, split_lines, strip_terminator
from .completion import COMPLETION_COMMENT, is_complete
from .config import SyncConfig
from .errors import ReferencedTaskNotFound
from .models import CLOSED, EpicRecord, TaskRecord
from .reconcile import Direction, reconcile
from .store import IssueStore

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Counts of the mutations issued during one run."""

    updated_lines: int = 0
    updated_bodies: int = 0
    task_state_changes: int = 0
    comments: int = 0
    closed_epics: List[int] = field(default_factory=list)

    @property
    def mutations(self) -> int:
        return self.updated_bodies + self.task_state_changes + self.comments + len(self.closed_epics)

    def summary(self) -> str:
        return (
            f"lines={self.updated_lines} bodies={self.updated_bodies} "
            f"task_states={self.task_state_changes} comments={self.comments} "
            f"closed_epics={self.closed_epics}"
        )


class _Synchronizer:
    def __init__(self, store: IssueStore, config: SyncConfig) -> None:
        self.store = store
        self.config = config

    def _close_if_complete(self, epic: EpicRecord, body: str, report: SyncReport) -> None:
        if not self.config.close_completed_epics or epic.closed:
            return
        if not is_complete(body, self.config.tasks_marker):
            return
        logger.info("All tasks of Epic #%s are closed, closing it", epic.number)
        self.store.update_epic_state(epic.number, CLOSED)
        self.store.add_comment(epic.number, COMPLETION_COMMENT)
        report.comments += 1
        report.closed_epics.append(epic.number)


class EpicBodySynchronizer(_Synchronizer):
    """Handles edits to an Epic: its checklist drives the state of the tasks."""

    def sync(self, epic: EpicRecord, report: SyncReport | None = None) -> SyncReport:
        report = report or SyncReport()
        logger.info("Synchronizing Epic #%s '%s'", epic.number, epic.title)
        lines = split_lines(epic.body)
        section = locate_workload_section(lines, self.config.tasks_marker)
        if not section.tasks:
            logger.info("Epic #%s has no tasks under a '%s' heading", epic.number, self.config.tasks_marker)
            return report

        for index, line in section.tasks:
            task = self.store.get_task(line.task_number)
            if task is None:
                raise ReferencedTaskNotFound(epic.number, line.task_number)
            result = reconcile(line, task, Direction.EPIC_IS_AUTHORITATIVE)
            if result is None:
                continue
            if result.task_state is not None:
                logger.info("Setting task #%s to %s from Epic #%s", task.number, result.task_state, epic.number)
                self.store.update_task_state(task.number, result.task_state)
                report.task_state_changes += 1
            if result.comment:
                self.store.add_comment(task.number, result.comment)
                report.comments += 1
            _, terminator = strip_terminator(lines[index])
            if result.new_line != line.raw_text:
                lines[index] = result.new_line + terminator
                report.updated_lines += 1

        body = "".join(lines)
        if body != epic.body:
            logger.info("Updating body of Epic #%s", epic.number)
            self.store.update_epic_body(epic.number, body)
            report.updated_bodies += 1
        self._close_if_complete(epic, body, report)
        return report


class TaskDrivenSynchronizer(_Synchronizer):
    """Handles edits to a task: the task drives its line in every Epic listing it."""

    def referencing_epics(self, task: TaskRecord) -> List[EpicRecord]:
        epics: List[EpicRecord] = []
        seen: Set[int] = set()
        for ref in self.store.list_cross_references(task.number):
            if ref.source_kind != "issue":
                continue
            epic = ref.source_record
            if epic.number in seen or not epic.title.startswith(self.config.epic_prefix):
                continue
            seen.add(epic.number)
            epics.append(epic)
        return epics

    def sync(self, task: TaskRecord, report: SyncReport | None = None) -> SyncReport:
        report = report or SyncReport()
        epics = self.referencing_epics(task)
        if not epics:
            logger.info("Task #%s is not referenced by any Epic", task.number)
            return report
        for epic in epics:
            self.sync_epic(task, epic, report)
        return report

    def sync_epic(self, task: TaskRecord, epic: EpicRecord, report: SyncReport) -> None:
        lines = split_lines(epic.body)
        section = locate_workload_section(lines, self.config.tasks_marker)
        found = section.find(task.number)
        if found is None:
            logger.debug("Task #%s is not in the workload of Epic #%s", task.number, epic.number)
            return
        index, line = found
        result = reconcile(line, task, Direction.TASK_IS_AUTHORITATIVE)
        if result is None:
            logger.debug("Epic #%s already up to date for task #%s", epic.number, task.number)
            self._close_if_complete(epic, epic.body, report)
            return

        _, terminator = strip_terminator(lines[index])
        lines[index] = result.new_line + terminator
        body = "".join(lines)
        logger.info("Updating task #%s in Epic #%s", task.number, epic.number)
        self.store.update_epic_body(epic.number, body)
        report.updated_lines += 1
        report.updated_bodies += 1
        if result.comment:
            self.store.add_comment(epic.number, result.comment)
            report.comments += 1
        self._close_if_complete(epic, body, report)
