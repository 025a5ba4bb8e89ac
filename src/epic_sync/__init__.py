"""Keep an Epic issue's workload checklist in sync with the tasks it lists.

Main entrypoints:
- epic_sync.synchronizer.EpicBodySynchronizer
- epic_sync.synchronizer.TaskDrivenSynchronizer
- epic_sync.github_client.GitHubClient

CLI:
- epic-sync (epic_sync.cli:main)
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
