"""Unified diff parsing and diff-line to file-line mapping.

The parser keeps only what AI review comments need: the new path of each
file and, per hunk, the header numbers plus the raw ``+``/``-``/`` `` lines.
The mapper turns a line number reported against that diff into a new-file
line number.
"""

import re
from dataclasses import dataclass, field

FILE_MARKER = "diff --git"
NEW_PATH_MARKER = "+++ b/"
HUNK_MARKER = "@@"

# Single-line hunks omit the count: "@@ -3 +3 @@"
HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

ADDITION = "+"
DELETION = "-"
CONTEXT = " "


@dataclass
class DiffHunk:
    """One ``@@`` block of a file diff."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    content: list[str] = field(default_factory=list)


@dataclass
class DiffFile:
    """A file touched by the diff, identified by its new path."""

    path: str = ""
    hunks: list[DiffHunk] = field(default_factory=list)


def parse_hunk_header(line: str) -> DiffHunk | None:
    """Build an empty hunk from an ``@@ -o[,l] +n[,l] @@`` header.

    Args:
        line: Raw header line

    Returns:
        DiffHunk with no content, or None if the header is malformed

    """
    match = HUNK_HEADER_RE.match(line)
    if match is None:
        return None

    old_start, old_lines, new_start, new_lines = match.groups()
    return DiffHunk(
        old_start=int(old_start),
        old_lines=int(old_lines) if old_lines is not None else 1,
        new_start=int(new_start),
        new_lines=int(new_lines) if new_lines is not None else 1,
    )


def parse_diff(diff_text: str) -> list[DiffFile]:
    """Parse unified diff text into files and hunks.

    Content lines seen before any hunk (or after a malformed hunk header)
    are dropped. Text before the first ``diff --git`` line is ignored.

    Args:
        diff_text: Unified diff as produced by ``git diff`` or ``gh pr diff``

    Returns:
        Files in the order they appear in the diff

    """
    files: list[DiffFile] = []
    current_file: DiffFile | None = None
    current_hunk: DiffHunk | None = None

    for line in diff_text.split("\n"):
        if line.startswith(FILE_MARKER):
            if current_file is not None:
                if current_hunk is not None:
                    current_file.hunks.append(current_hunk)
                files.append(current_file)
            current_file = DiffFile()
            current_hunk = None
        elif line.startswith(NEW_PATH_MARKER):
            if current_file is not None:
                current_file.path = line[len(NEW_PATH_MARKER) :]
        elif line.startswith(HUNK_MARKER):
            if current_file is not None and current_hunk is not None:
                current_file.hunks.append(current_hunk)
            current_hunk = parse_hunk_header(line) if current_file is not None else None
        elif current_hunk is not None and line.startswith((ADDITION, DELETION, CONTEXT)):
            current_hunk.content.append(line)

    if current_file is not None:
        if current_hunk is not None:
            current_file.hunks.append(current_hunk)
        files.append(current_file)

    return files


def find_file(files: list[DiffFile], path: str) -> DiffFile | None:
    """Return the first parsed file whose path matches exactly."""
    return next((diff_file for diff_file in files if diff_file.path == path), None)


def _map_content_position(diff_file: DiffFile, position: int) -> int | None:
    """Resolve a 1-based ordinal over all content lines of a file.

    The ordinal runs across hunks; the old/new counters restart per hunk and
    count only the lines seen before the target line.
    """
    seen = 0
    for hunk in diff_file.hunks:
        new_count = 0
        old_count = 0
        for line in hunk.content:
            seen += 1
            if seen == position:
                if line.startswith(DELETION):
                    return hunk.old_start + old_count
                return hunk.new_start + new_count
            if line.startswith((ADDITION, CONTEXT)):
                new_count += 1
            if line.startswith((DELETION, CONTEXT)):
                old_count += 1
    return None


def _map_old_line(diff_file: DiffFile, line_number: int) -> int | None:
    # Linear re-basing; ignores insertions and deletions inside the hunk.
    for hunk in diff_file.hunks:
        if hunk.old_start <= line_number < hunk.old_start + hunk.old_lines:
            return hunk.new_start + (line_number - hunk.old_start)
    return None


def _is_new_line(diff_file: DiffFile, line_number: int) -> bool:
    return any(
        hunk.new_start <= line_number < hunk.new_start + hunk.new_lines
        for hunk in diff_file.hunks
    )


def map_diff_line_to_file_line(files: list[DiffFile], path: str, line_number: int) -> int:
    """Translate a line number reported against a diff into a new-file line.

    Language models asked to number lines in a diff are inconsistent, so the
    number is tried, in order, as:

    1. a 1-based position among the file's diff content lines,
    2. an old-file line inside a hunk's old range,
    3. a new-file line inside a hunk's new range (returned as is).

    The first interpretation that applies wins. This is best-effort: when
    several interpretations apply, the earlier one is chosen even if a later
    one was intended. Unknown paths and numbers that fit no interpretation
    are returned unchanged.

    Args:
        files: Parsed diff
        path: New path of the file the line belongs to
        line_number: Line number as reported

    Returns:
        Best-effort new-file line number

    """
    diff_file = find_file(files, path)
    if diff_file is None:
        return line_number

    mapped = _map_content_position(diff_file, line_number)
    if mapped is not None:
        return mapped

    mapped = _map_old_line(diff_file, line_number)
    if mapped is not None:
        return mapped

    if _is_new_line(diff_file, line_number):
        return line_number

    return line_number
