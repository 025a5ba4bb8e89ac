"""Parsing and locating task lines inside an Epic body.

A task line looks like ``  - [x] #42 Some title``. Only the lines of the
workload section (the block under a heading ending with the configured marker)
are considered; everything else in the body is left untouched.

Known limitation: the title is simply the rest of the line after the number
and one separating space. Titles containing text such as ``- [ ] #`` are not
escaped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

CLOSED_MARK = "x"
OPEN_MARK = " "

TASK_LINE_RE = re.compile(r"^(?P<indent> *)- \[(?P<status>.)\] #(?P<number>\d+) (?P<title>.*)$")
HEADING_RE = re.compile(r"^#+")
LINE_BREAK_RE = re.compile(r"(?<=\n)")


@dataclass(frozen=True)
class ChecklistLine:
    indent: str
    closed: bool
    task_number: int
    title: str
    raw_text: str

    def render(self) -> str:
        mark = CLOSED_MARK if self.closed else OPEN_MARK
        return f"{self.indent}- [{mark}] #{self.task_number} {self.title}"

    def with_values(self, *, closed: bool, title: str) -> "ChecklistLine":
        updated = replace(self, closed=closed, title=title)
        return replace(updated, raw_text=updated.render())


def parse_task_line(text: str) -> Optional[ChecklistLine]:
    """Decompose one line (without its line terminator), or return None."""
    m = TASK_LINE_RE.match(text)
    if not m:
        return None
    number = int(m.group("number"))
    if number <= 0:
        return None
    return ChecklistLine(
        indent=m.group("indent"),
        closed=m.group("status") == CLOSED_MARK,
        task_number=number,
        title=m.group("title"),
        raw_text=text,
    )


def split_lines(body: str) -> List[str]:
    """Split on \\n only, keeping terminators. Other Unicode breaks stay in the line."""
    return [line for line in LINE_BREAK_RE.split(body) if line]


def strip_terminator(line: str) -> Tuple[str, str]:
    """Split a line into its text and its line terminator."""
    for terminator in ("\r\n", "\n"):
        if line.endswith(terminator):
            return line[: -len(terminator)], terminator
    return line, ""


def _heading_text(text: str) -> Optional[str]:
    m = HEADING_RE.match(text)
    if not m:
        return None
    return text[m.end():].strip()


@dataclass
class WorkloadSection:
    start: int = 0
    end: int = 0
    tasks: List[Tuple[int, ChecklistLine]] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return self.start == self.end

    def find(self, task_number: int) -> Optional[Tuple[int, ChecklistLine]]:
        for index, line in self.tasks:
            if line.task_number == task_number:
                return index, line
        return None


def locate_workload_section(lines: List[str], marker: str) -> WorkloadSection:
    """Find the workload section in an already split body.

    The marker heading itself is excluded; the section runs until the next
    heading that does not end with the marker, or the end of the body.
    """
    in_section = False
    section = WorkloadSection()
    for index, line in enumerate(lines):
        text, _ = strip_terminator(line)
        heading = _heading_text(text)
        if not in_section:
            if heading is not None and heading.endswith(marker):
                in_section = True
                section.start = section.end = index + 1
            continue
        if heading is not None and not heading.endswith(marker):
            break
        section.end = index + 1
        parsed = parse_task_line(text)
        if parsed is not None:
            section.tasks.append((index, parsed))
    return section


def find_workload_section(body: str, marker: str) -> WorkloadSection:
    return locate_workload_section(split_lines(body), marker)
