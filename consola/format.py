"""Turning log records into styled text segments."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from datetime import datetime

from wcwidth import wcwidth

from .record import LogRecord

_UNSIGNED = re.compile(r"\+?[0-9]+")
_CAUSE_INDENT = " " * 11


@dataclass
class FormatOptions:
    """Switches controlling what a reporter prints and how."""

    date: bool = True
    colors: bool = True
    compact: bool = False
    columns: int | None = None
    error_level: int = 16
    unicode: bool = True
    show_tag: bool = True
    show_type: bool = True
    show_repetition: bool = True
    show_stack: bool = False
    show_additional: bool = True
    show_meta: bool = True
    force_simple_width: bool = False

    @classmethod
    def adaptive(cls) -> FormatOptions:
        """Defaults adjusted by NO_COLOR, FORCE_COLOR, CONSOLA_COMPACT and the terminal."""
        opts = cls()
        if "NO_COLOR" in os.environ:
            opts.colors = False
        force = os.environ.get("FORCE_COLOR")
        if force is not None and force not in ("", "0"):
            opts.colors = True
        if os.environ.get("CONSOLA_COMPACT") == "1":
            opts.compact = True
        opts.columns = detect_terminal_width()
        return opts


@dataclass
class SegmentStyle:
    """Colours and text attributes of a segment."""

    fg_color: str | None = None
    bg_color: str | None = None
    bold: bool = False
    dim: bool = False
    italic: bool = False
    underline: bool = False


@dataclass
class Segment:
    """A piece of output text with an optional style."""

    text: str
    style: SegmentStyle | None = field(default=None)


def _split_lines(text: str) -> list[str]:
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _normalize_multiline_message(message: str, indent: str) -> str:
    lines = _split_lines(message)
    if len(lines) <= 1:
        return message
    return ("\n" + indent).join(lines)


def _error_segments(record: LogRecord, opts: FormatOptions) -> list[Segment]:
    if record.stack is not None:
        return [
            Segment(
                ("\n" if position == 0 else "") + line,
                SegmentStyle(fg_color="gray", dim=True),
            )
            for position, line in enumerate(record.stack)
        ]
    chain = record.error_chain
    if chain is None:
        return []
    segments = []
    for position, line in enumerate(chain[: opts.error_level]):
        if position == 0:
            text = "\n" + _normalize_multiline_message(line, "")
        else:
            text = _normalize_multiline_message(f"Caused by: {line}", _CAUSE_INDENT)
        segments.append(Segment(text, SegmentStyle(fg_color="red")))
    if len(chain) > opts.error_level:
        segments.append(
            Segment(
                f"\n(+{len(chain) - opts.error_level} more causes)",
                SegmentStyle(fg_color="gray", dim=True),
            )
        )
    return segments


def build_basic_segments(record: LogRecord, opts: FormatOptions) -> list[Segment]:
    """Split a record into the styled segments a reporter prints."""
    segments: list[Segment] = []

    if opts.date:
        stamp = datetime.now().astimezone().isoformat()
        segments.append(Segment(stamp, SegmentStyle(fg_color="gray", dim=True)))

    if opts.show_type:
        segments.append(
            Segment(f"[{record.type_name}]", SegmentStyle(fg_color="cyan", bold=True))
        )

    if opts.show_tag and record.tag is not None:
        segments.append(
            Segment(f"[{record.tag}]", SegmentStyle(fg_color="magenta", italic=True))
        )

    if record.message is not None:
        segments.append(Segment(record.message))

    if opts.show_repetition and record.repetition_count > 1:
        segments.append(
            Segment(
                f" (x{record.repetition_count})", SegmentStyle(fg_color="gray", dim=True)
            )
        )

    if opts.show_additional and record.additional:
        if opts.show_stack:
            segments.extend(_error_segments(record, opts))
        listing = ", ".join(str(arg) for arg in record.additional)
        segments.append(Segment(f" [{listing}]", SegmentStyle(fg_color="cyan", dim=True)))

    if opts.show_meta and record.meta:
        pairs = ", ".join(f"{key}={value}" for key, value in record.meta)
        segments.append(Segment(f" {{{pairs}}}", SegmentStyle(fg_color="yellow", dim=True)))

    return segments


def detect_terminal_width() -> int | None:
    """Terminal width from COLUMNS, else from the terminal on stdout, else None."""
    columns = os.environ.get("COLUMNS")
    if columns is not None and _UNSIGNED.fullmatch(columns):
        number = int(columns)
        if number > 0:
            return number

    stdout = sys.stdout
    try:
        if stdout is None or not stdout.isatty():
            return None
        width = os.get_terminal_size(stdout.fileno()).columns
    except (AttributeError, OSError, ValueError):
        return None
    return width if width > 0 else None


def display_width(text: str, force_simple: bool) -> int:
    """Printed width of text: character count, or terminal cell width."""
    if force_simple:
        return len(text)
    return sum(max(wcwidth(char), 0) for char in text)


def compute_line_width(segments: list[Segment], opts: FormatOptions) -> int:
    """Total printed width of the segments' text."""
    return sum(display_width(segment.text, opts.force_simple_width) for segment in segments)