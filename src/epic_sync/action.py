from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .config import SyncConfig
from .errors import ConfigurationError
from .models import EpicRecord, TaskRecord
from .store import IssueStore
from .synchronizer import EpicBodySynchronizer, SyncReport, TaskDrivenSynchronizer

logger = logging.getLogger(__name__)


def load_event(path: Optional[str] = None) -> Dict[str, Any]:
    """Read the webhook payload that triggered the run."""
    path = path or os.getenv("GITHUB_EVENT_PATH")
    if not path:
        raise ConfigurationError("No event payload given (--event or GITHUB_EVENT_PATH)")
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"Event payload not found: {path}")
    with p.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Event payload {path} is not valid JSON: {e}") from e


def is_epic(issue: Dict[str, Any], config: SyncConfig) -> bool:
    return (issue.get("title") or "").startswith(config.epic_prefix)


def handle_event(payload: Dict[str, Any], store: IssueStore, config: SyncConfig) -> SyncReport:
    """Route an issue event to the Epic or task synchronizer."""
    issue = payload.get("issue")
    if not issue:
        logger.info("Event carries no issue, nothing to do")
        return SyncReport()

    if is_epic(issue, config):
        epic = EpicRecord.from_issue(issue)
        return EpicBodySynchronizer(store, config).sync(epic)

    task = TaskRecord.from_issue(issue)
    logger.info("Synchronizing task #%s '%s'", task.number, task.title)
    return TaskDrivenSynchronizer(store, config).sync(task)
