# DEEZ Diff Display
# Unified diff generation between root and Home files

import difflib
from dataclasses import dataclass, field

from deez.errors import DiffEngineError

BINARY_NOTICE = "Binary files differ"
NO_NEWLINE_MARKER = "\\ No newline at end of file"
CR_MARKER = "^M"


@dataclass
class FileDiff:
    """Diff of one entry between the root and Home."""

    path: str
    missing: bool = False
    lines: list[str] = field(default_factory=list)

    @property
    def has_diff(self) -> bool:
        return self.missing or bool(self.lines)


def is_binary(content: bytes) -> bool:
    """Check for a NUL byte, as git does."""
    return b"\0" in content


def _split_lines(text: str) -> list[str]:
    """Split on `\\n` only, keeping terminators. The last line may lack one."""
    lines = [line + "\n" for line in text.split("\n")]
    if lines[-1] == "\n":
        lines.pop()
    else:
        lines[-1] = lines[-1][:-1]
    return lines


def _show_line(line: str) -> list[str]:
    if not line.endswith("\n"):
        return [_show_cr(line), NO_NEWLINE_MARKER]
    return [_show_cr(line[:-1])]


def _show_cr(line: str) -> str:
    if line.endswith("\r"):
        return line[:-1] + CR_MARKER
    return line


def render_diff(
    before: bytes,
    after: bytes,
    *,
    from_label: str = "before",
    to_label: str = "after",
    context_lines: int = 3,
) -> list[str]:
    """
    Generate unified diff lines between two buffers.

    Args:
        before: Original content.
        after: New content.
        from_label: Label of the original side.
        to_label: Label of the new side.
        context_lines: Number of context lines.

    Returns:
        Diff lines without line terminators; empty when equal. A carriage
        return ending a line shows as `^M`, a missing final newline as
        the `\\ No newline at end of file` marker.

    Raises:
        DiffEngineError: If the diff cannot be computed.
    """
    if before == after:
        return []

    if is_binary(before) or is_binary(after):
        return [BINARY_NOTICE]

    before_lines = _split_lines(before.decode("utf-8", errors="replace"))
    after_lines = _split_lines(after.decode("utf-8", errors="replace"))

    try:
        diff = difflib.unified_diff(
            before_lines,
            after_lines,
            fromfile=from_label,
            tofile=to_label,
            lineterm="",
            n=context_lines,
        )
        lines: list[str] = []
        for index, line in enumerate(diff):
            # File headers and hunk headers carry no terminator
            if index < 2 or line.startswith("@@"):
                lines.append(line.rstrip("\n"))
            else:
                lines.extend(_show_line(line))
        return lines
    except (TypeError, ValueError) as e:
        raise DiffEngineError(f"Could not compute diff: {e}") from e
