"""Text helpers: ANSI stripping, trees, boxes, alignment, stacks, styles and sinks."""

from __future__ import annotations

import os
import re
import sys
import threading
from dataclasses import dataclass, replace
from enum import Enum

_ANSI = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b[PX^_][^\x1b]*\x1b\\"
    r"|\x1b[ -/]*[0-~]"
)


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return _ANSI.sub("", text)


class TreeFormatter:
    """Prefixes lines as tree items, truncating beyond a maximum depth."""

    def __init__(self, max_depth: int, unicode: bool) -> None:
        self.max_depth = max_depth
        self.unicode = unicode

    @property
    def _item_prefix(self) -> str:
        return "├─ " if self.unicode else "|- "

    @property
    def _last_prefix(self) -> str:
        return "└─ " if self.unicode else "`- "

    def format_lines(self, lines: list[str], current_depth: int) -> list[str]:
        """Return the lines as tree items, or the first line and an ellipsis."""
        if current_depth >= self.max_depth and len(lines) > 1:
            return [lines[0], f"{self._last_prefix}..."]
        last = len(lines) - 1
        return [
            (self._last_prefix if position == last else self._item_prefix) + line
            for position, line in enumerate(lines)
        ]


@dataclass(frozen=True)
class BoxBuilder:
    """Draws a framed box around a title and lines of content."""

    unicode: bool
    width: int | None = None

    def with_width(self, width: int) -> BoxBuilder:
        return replace(self, width=width)

    def build(self, title: str, content: list[str]) -> list[str]:
        """Return the box as lines: top border, content lines, bottom border."""
        width = self.width
        if width is None:
            widest = max((len(line) for line in content), default=0)
            width = max(len(title), widest) + 4
        if width < 2:
            raise ValueError(f"box width {width} is too small")
        return [
            self._top_border(title, width),
            *(self._content_line(line, width) for line in content),
            self._bottom_border(width),
        ]

    def _top_border(self, title: str, width: int) -> str:
        left, right, h = ("┌", "┐", "─") if self.unicode else ("+", "+", "-")
        if not title:
            return f"{left}{h * (width - 2)}{right}"
        padding = max(width - len(title) - 4, 0)
        left_pad = padding // 2
        right_pad = padding - left_pad
        return f"{left}{h * (left_pad + 1)} {title} {h * (right_pad + 1)}{right}"

    def _content_line(self, content: str, width: int) -> str:
        v = "│" if self.unicode else "|"
        padding = max(width - len(content) - 4, 0)
        return f"{v} {content} {' ' * (padding + 1)}{v}"

    def _bottom_border(self, width: int) -> str:
        left, right, h = ("└", "┘", "─") if self.unicode else ("+", "+", "-")
        return f"{left}{h * (width - 2)}{right}"


class Alignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def align_text(text: str, width: int, alignment: Alignment) -> str:
    """Pad text with spaces to the given width."""
    padding = width - len(text)
    if padding <= 0:
        return text
    if alignment is Alignment.LEFT:
        return text + " " * padding
    if alignment is Alignment.RIGHT:
        return " " * padding + text
    left_pad = padding // 2
    return " " * left_pad + text + " " * (padding - left_pad)


def _lines(text: str) -> list[str]:
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def parse_error_stack(text: str) -> list[str]:
    """Trim stack lines, dropping file:// prefixes and the working directory."""
    try:
        current_dir = os.getcwd()
    except OSError:
        current_dir = ""
    parsed = []
    for line in _lines(text):
        line = line.strip()
        if line.startswith("file://"):
            line = line[len("file://"):]
        if current_dir and line.startswith(current_dir):
            relative = line[len(current_dir):].lstrip("/")
            line = relative or "."
        parsed.append(line)
    return parsed


class AnsiColor(Enum):
    """The sixteen basic terminal colours, valued by foreground SGR code."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37
    BRIGHT_BLACK = 90
    BRIGHT_RED = 91
    BRIGHT_GREEN = 92
    BRIGHT_YELLOW = 93
    BRIGHT_BLUE = 94
    BRIGHT_MAGENTA = 95
    BRIGHT_CYAN = 96
    BRIGHT_WHITE = 97


def colored(text: str, color: AnsiColor) -> str:
    """Prefix text with a foreground colour code."""
    return f"\x1b[{color.value}m{text}"


def dim(text: str) -> str:
    """Prefix text with the dim attribute."""
    return f"\x1b[2m{text}"


def bold(text: str) -> str:
    """Prefix text with the bold attribute."""
    return f"\x1b[1m{text}"


def info_color() -> AnsiColor:
    return AnsiColor.CYAN


def success_color() -> AnsiColor:
    return AnsiColor.GREEN


def warn_color() -> AnsiColor:
    return AnsiColor.YELLOW


def error_color() -> AnsiColor:
    return AnsiColor.RED


def debug_color() -> AnsiColor:
    return AnsiColor.MAGENTA


def trace_color() -> AnsiColor:
    return AnsiColor.BLUE


def _write_bytes(stream, data: bytes) -> None:
    buffer = getattr(stream, "buffer", None)
    if buffer is not None:
        stream.flush()
        buffer.write(data)
    else:
        stream.write(bytes(data).decode("utf-8", errors="replace"))


def _flush_stream(stream) -> None:
    buffer = getattr(stream, "buffer", None)
    stream.flush()
    if buffer is not None:
        buffer.flush()


class StdoutSink:
    """Writes bytes to standard output."""

    def write_all(self, data: bytes) -> None:
        _write_bytes(sys.stdout, data)

    def flush(self) -> None:
        _flush_stream(sys.stdout)


class StderrSink:
    """Writes bytes to standard error."""

    def write_all(self, data: bytes) -> None:
        _write_bytes(sys.stderr, data)

    def flush(self) -> None:
        _flush_stream(sys.stderr)


class TestSink:
    """Collects written bytes in memory."""

    __test__ = False

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._lock = threading.Lock()

    def write_all(self, data: bytes) -> None:
        with self._lock:
            self._buffer.extend(data)

    def flush(self) -> int:
        """Wait for pending writes and return how many bytes are held."""
        with self._lock:
            return len(self._buffer)

    def contents(self) -> str:
        with self._lock:
            return self._buffer.decode("utf-8", errors="replace")

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()