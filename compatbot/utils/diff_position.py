"""Map post-change line numbers to GitHub review-comment positions.

GitHub anchors an inline review comment with a ``position``: the number of
lines down from the first ``@@`` hunk header of the file's patch. The line
just below that header is position 1, and counting continues through
removed lines and any later hunk headers.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

# Position of the first "@@" header line itself.
FIRST_HUNK_HEADER_POSITION = 0

HUNK_HEADER_PATTERN = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

LineKind = Literal["header", "context", "added", "removed", "marker"]


@dataclass(frozen=True)
class PatchLine:
    """A single line of a patch with its diff position.

    Attributes:
        position: Offset from the first hunk header.
        kind: What the line is in the diff.
        new_line: Line number in the post-change file, or None for lines
            that do not exist there (headers, removals, markers).
        content: Line content without the diff prefix.
    """

    position: int
    kind: LineKind
    new_line: int | None
    content: str


def parse_patch(patch: str | None) -> Iterator[PatchLine]:
    """Walk a unified diff patch, yielding every line after the first header.

    Args:
        patch: Patch text as returned by the GitHub API. May be None or
            empty (binary files, oversized diffs).

    Yields:
        PatchLine records in document order.
    """
    if not patch:
        return

    lines = patch.split("\n")
    # A final newline is not a line of the diff
    if lines and lines[-1] == "":
        lines.pop()

    position: int | None = None
    current_new_line = 0

    for raw_line in lines:
        header_match = HUNK_HEADER_PATTERN.match(raw_line)

        if position is None:
            # Nothing before the first hunk header counts
            if header_match:
                position = FIRST_HUNK_HEADER_POSITION
                current_new_line = int(header_match.group(3))
                yield PatchLine(position, "header", None, raw_line)
            continue

        position += 1

        if header_match:
            current_new_line = int(header_match.group(3))
            yield PatchLine(position, "header", None, raw_line)
        elif raw_line.startswith("+"):
            yield PatchLine(position, "added", current_new_line, raw_line[1:])
            current_new_line += 1
        elif raw_line.startswith("-"):
            yield PatchLine(position, "removed", None, raw_line[1:])
        elif raw_line.startswith("\\"):
            # "\ No newline at end of file"
            yield PatchLine(position, "marker", None, raw_line)
        else:
            # Context line; some tools strip the leading space of blank lines
            yield PatchLine(position, "context", current_new_line, raw_line[1:])
            current_new_line += 1


def resolve_position(patch: str | None, target_line: int) -> int | None:
    """Find the diff position of a post-change line.

    Args:
        patch: Patch text for one file in one commit.
        target_line: 1-based line number in the post-change file.

    Returns:
        The position to pass to the review-comment API, or None when the
        line is not visible in the diff and no comment can be anchored.
    """
    for line in parse_patch(patch):
        if line.new_line == target_line:
            return line.position
    return None


def commentable_lines(patch: str | None) -> set[int]:
    """Get post-change line numbers where review comments can be posted.

    Args:
        patch: Patch text for one file.

    Returns:
        Set of line numbers covered by context or added lines.
    """
    return {line.new_line for line in parse_patch(patch) if line.new_line is not None}
