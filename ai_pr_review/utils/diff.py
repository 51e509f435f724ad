"""
Unified-diff helpers.

Maps GitHub per-file patches to the head-revision line numbers that accept
inline review comments.
"""

import re
from typing import Iterator, Optional

_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def _walk_patch(patch: Optional[str]) -> Iterator[tuple[str, Optional[int]]]:
    """
    Yield each patch line with its head-revision line number.

    Additions and context lines carry their new-file number. Deletions,
    hunk headers, markers such as ``\\ No newline at end of file`` and lines
    outside a parseable hunk carry None.
    """
    if not patch:
        return

    current: Optional[int] = None
    for line in patch.splitlines():
        if line.startswith("@@"):
            match = _HUNK_HEADER_RE.match(line)
            # Malformed header: position unknown until the next good one.
            current = int(match.group(3)) if match else None
            yield line, None
            continue

        if current is not None and line.startswith(("+", " ")):
            yield line, current
            current += 1
        else:
            yield line, None


def extract_valid_lines(patch: Optional[str]) -> list[int]:
    """
    Get the head-revision line numbers an inline comment may target.

    Args:
        patch: Raw unified-diff patch of one file, or None for binary or
            oversized files.

    Returns:
        Line numbers in patch order. Empty when there is no patch.
    """
    return [number for _, number in _walk_patch(patch) if number is not None]


def annotate_patch(patch: Optional[str]) -> str:
    """
    Prefix each patch line with its head-revision line number.

    Deleted lines get a blank gutter so the model only cites lines that
    exist in the new file.
    """
    annotated = []
    for line, number in _walk_patch(patch):
        gutter = f"{number:>5}" if number is not None else " " * 5
        annotated.append(f"{gutter} | {line}")
    return "\n".join(annotated)
