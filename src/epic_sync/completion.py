from .checklist import find_workload_section

COMPLETION_COMMENT = "Automated update: every task in the workload checklist is closed, so this Epic is now closed."


def is_complete(body: str, marker: str) -> bool:
    """True when the workload section lists at least one task and all are closed."""
    section = find_workload_section(body, marker)
    if not section.tasks:
        return False
    for _, line in section.tasks:
        if not line.closed:
            return False
    return True
