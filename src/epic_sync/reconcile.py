from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .checklist import ChecklistLine
from .models import CLOSED, OPEN, TaskRecord

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "Automated update:"


class Direction(enum.Enum):
    EPIC_IS_AUTHORITATIVE = "epic"
    TASK_IS_AUTHORITATIVE = "task"


@dataclass(frozen=True)
class ReconciliationResult:
    """What a single checklist line needs after comparing it with its task.

    ``comment`` is meant for the Epic when the task is authoritative and for
    the task when the Epic is. ``task_state`` is only set when the task must
    be opened or closed to follow the checklist.
    """

    new_line: str
    comment: Optional[str] = None
    task_state: Optional[str] = None


def _status_word(closed: bool) -> str:
    return "closed" if closed else "reopened"


def _task_comment(line: ChecklistLine, task: TaskRecord, state_differs: bool, title_differs: bool) -> str:
    number = task.number
    status = _status_word(task.closed)
    if state_differs and title_differs:
        return (
            f"{COMMENT_PREFIX} task #{number} was {status} and its title was refreshed "
            f"from \"{line.title}\" to \"{task.title}\" in the workload checklist."
        )
    if state_differs:
        return f"{COMMENT_PREFIX} task #{number} was {status}; the workload checklist now shows it as {task.state}."
    return f"{COMMENT_PREFIX} the title of task #{number} was refreshed from \"{line.title}\" to \"{task.title}\"."


def reconcile(line: ChecklistLine, task: TaskRecord, direction: Direction) -> Optional[ReconciliationResult]:
    """Compare a checklist line with its task and work out the required change.

    Titles always flow from the task into the checklist. The open/closed state
    flows from whichever side triggered the pass. Returns None when the line
    and the task already agree.

    When the Epic is authoritative the line keeps its own state, but a stale
    title is still replaced by the task's title rather than left as written.
    """
    state_differs = line.closed != task.closed
    title_differs = line.title != task.title
    if not state_differs and not title_differs:
        return None

    if direction is Direction.TASK_IS_AUTHORITATIVE:
        updated = line.with_values(closed=task.closed, title=task.title)
        logger.debug("Task #%s is authoritative: %r -> %r", task.number, line.raw_text, updated.raw_text)
        return ReconciliationResult(
            new_line=updated.raw_text,
            comment=_task_comment(line, task, state_differs, title_differs),
        )

    updated = line.with_values(closed=line.closed, title=task.title)
    if not state_differs:
        logger.debug("Refreshing title of task #%s in checklist", task.number)
        return ReconciliationResult(new_line=updated.raw_text)

    target = CLOSED if line.closed else OPEN
    logger.debug("Checklist is authoritative: task #%s should be %s", task.number, target)
    return ReconciliationResult(
        new_line=updated.raw_text,
        comment=f"{COMMENT_PREFIX} this task was {_status_word(line.closed)} to match its entry in the Epic workload checklist.",
        task_state=target,
    )
