import argparse
import logging
import os
import sys
from typing import List, Optional

from .action import handle_event, load_event
from .config import load_config, resolve_repo, resolve_token
from .errors import ConfigurationError, EpicSyncError
from .github_client import GitHubClient

logger = logging.getLogger("epic_sync.cli")


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else os.environ.get("EPIC_SYNC_LOG", "INFO").upper()
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="epic-sync",
        description="Keep an Epic's workload checklist in sync with its task issues",
    )
    p.add_argument("--event", help="Path to the issue event JSON (default: $GITHUB_EVENT_PATH)")
    p.add_argument("-c", "--config", help="Optional YAML file with epic_prefix / tasks_marker / close_completed_epics")
    p.add_argument("--repo", help="GitHub repo in owner/name format (default: $GITHUB_REPOSITORY)")
    p.add_argument("--token", help="GitHub token (or INPUT_SECRET-TOKEN / GITHUB_TOKEN env)")
    p.add_argument("--epic-prefix", help="Title prefix identifying Epic issues")
    p.add_argument("--tasks-marker", help="Suffix of the heading above the task checklist")
    p.add_argument(
        "--close-completed-epics",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Close an Epic once every listed task is closed",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(
            args.config,
            epic_prefix=args.epic_prefix,
            tasks_marker=args.tasks_marker,
            close_completed_epics=args.close_completed_epics,
        )
        token = resolve_token(args.token)
        repo = resolve_repo(args.repo)
        payload = load_event(args.event)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    gh = GitHubClient(token=token, repo=repo)
    try:
        report = handle_event(payload, gh, config)
    except EpicSyncError as e:
        logger.error("Synchronization failed: %s", e)
        return 1
    print(f"epic-sync: {report.summary()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
