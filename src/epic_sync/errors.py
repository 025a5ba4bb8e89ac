class EpicSyncError(RuntimeError):
    """Base class for failures that abort a synchronization run."""


class ConfigurationError(EpicSyncError):
    """Raised when a required setting is missing or empty."""


class CollaboratorFailure(EpicSyncError):
    """Raised when a call to the issue store fails."""


class ReferencedTaskNotFound(EpicSyncError):
    """Raised when an Epic checklist references a task that does not exist."""

    def __init__(self, epic_number: int, task_number: int) -> None:
        self.epic_number = epic_number
        self.task_number = task_number
        super().__init__(
            f"Epic #{epic_number} references task #{task_number}, which could not be found"
        )
