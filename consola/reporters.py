"""Reporters that render log records to text streams or keep them in memory."""

from __future__ import annotations

import copy
import json
import math
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TextIO

from .format import (
    FormatOptions,
    Segment,
    SegmentStyle,
    build_basic_segments,
    compute_line_width,
    detect_terminal_width,
)
from .record import ArgKind, ArgValue, LogRecord
from .utils import BoxBuilder

JSON_SCHEMA = "consola/v1"

_COLOR_CODES = {
    "gray": "90",
    "red": "31",
    "green": "32",
    "yellow": "33",
    "blue": "34",
    "magenta": "35",
    "cyan": "36",
}

_ICONS = {
    "info": ("ℹ", "i"),
    "success": ("✔", "+"),
    "error": ("✖", "x"),
    "fail": ("✖", "x"),
    "fatal": ("✖", "x"),
    "warn": ("⚠", "!"),
    "debug": ("🐛", "d"),
    "trace": ("↳", ">"),
}

_TYPE_COLORS = {
    "error": "red",
    "fail": "red",
    "fatal": "red",
    "success": "green",
    "warn": "yellow",
    "info": "cyan",
    "debug": "magenta",
    "trace": "blue",
}


def map_color(name: str) -> str | None:
    """SGR foreground code for a colour name, or None if it has none."""
    return _COLOR_CODES.get(name)


def apply_style(text: str, style: SegmentStyle | None) -> str:
    """Wrap text in the ANSI codes of a style."""
    if style is None:
        return text
    codes: list[str] = []
    if style.fg_color is not None:
        code = map_color(style.fg_color)
        if code is not None:
            codes.append(code)
    if style.bold:
        codes.append("1")
    if style.dim:
        codes.append("2")
    if style.italic:
        codes.append("3")
    if style.underline:
        codes.append("4")
    if not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _icon_color(record: LogRecord) -> str:
    return _TYPE_COLORS.get(record.type_name, "white")


def _badge_bg_color(record: LogRecord) -> str:
    return "bg_" + _TYPE_COLORS.get(record.type_name, "white")


def _resolve_width(opts: FormatOptions) -> int | None:
    return opts.columns if opts.columns is not None else detect_terminal_width()


def _write_segments(segments: list[Segment], opts: FormatOptions, stream: TextIO) -> None:
    def paint(segment: Segment) -> str:
        return apply_style(segment.text, segment.style) if opts.colors else segment.text

    width = _resolve_width(opts)
    if width is None or compute_line_width(segments, opts) <= width:
        stream.write(" ".join(paint(segment) for segment in segments) + "\n")
        return

    current = ""
    current_len = 0
    first = True
    for segment in segments:
        piece_len = len(segment.text) + (0 if first else 1)
        if current_len + piece_len > width and current:
            stream.write(current + "\n")
            current = ""
            current_len = 0
            first = True
        if not first:
            current += " "
            current_len += 1
        current += paint(segment)
        current_len += len(segment.text)
        first = False
    if not current.endswith("\n"):
        current += "\n"
    stream.write(current)


class Reporter(ABC):
    """Renders log records."""

    @abstractmethod
    def emit(self, record: LogRecord, stream: TextIO) -> None:
        """Write one record to the stream."""


@dataclass
class BasicReporter(Reporter):
    """Plain one-line output with optional colours and wrapping."""

    opts: FormatOptions = field(default_factory=FormatOptions)

    @classmethod
    def adaptive(cls) -> BasicReporter:
        return cls(opts=FormatOptions.adaptive())

    def emit(self, record: LogRecord, stream: TextIO) -> None:
        _write_segments(build_basic_segments(record, self.opts), self.opts, stream)


@dataclass
class FancyReporter(Reporter):
    """Output with icons, type badges and framed boxes."""

    opts: FormatOptions = field(default_factory=FormatOptions.adaptive)

    @classmethod
    def adaptive(cls) -> FancyReporter:
        return cls(opts=FormatOptions.adaptive())

    def emit(self, record: LogRecord, stream: TextIO) -> None:
        if record.type_name == "box":
            self._emit_box(record, stream)
            return

        segments = build_basic_segments(record, self.opts)
        unicode_icon, ascii_icon = _ICONS.get(record.type_name, ("", ""))
        icon = unicode_icon if self.opts.unicode else ascii_icon
        if icon:
            segments.insert(
                0, Segment(icon, SegmentStyle(fg_color=_icon_color(record), bold=True))
            )

        if self.opts.show_type:
            for segment in segments:
                text = segment.text
                if text.startswith("[") and text.endswith("]") and len(text.encode()) > 2:
                    inner = text[1:-1]
                    if inner.encode().lower() == record.type_name.encode().lower():
                        segment.text = f" {inner.encode().upper().decode()} "
                        if segment.style is None:
                            segment.style = SegmentStyle()
                        segment.style.bold = True
                        segment.style.fg_color = "white"
                        segment.style.bg_color = _badge_bg_color(record)
                    break

        for segment in segments:
            if segment.text.startswith(("(x", " (x")) and segment.style is not None:
                segment.style.dim = True

        _write_segments(segments, self.opts, stream)

    def _emit_box(self, record: LogRecord, stream: TextIO) -> None:
        title = record.message or ""
        content = [str(arg) for arg in record.args]
        width = _resolve_width(self.opts)
        if width is None:
            width = 80
        builder = BoxBuilder(self.opts.unicode).with_width(max(width - 4, 0))
        border_style = SegmentStyle(fg_color="cyan")
        for line in builder.build(title, content):
            text = apply_style(line, border_style) if self.opts.colors else line
            stream.write(text + "\n")


def _json_value(arg: ArgValue) -> Any:
    if arg.kind is ArgKind.NUMBER:
        return arg.value if math.isfinite(arg.value) else None
    return arg.value


@dataclass
class JsonReporter(Reporter):
    """One compact JSON object per record, keys in sorted order."""

    opts: FormatOptions = field(default_factory=FormatOptions)

    @classmethod
    def adaptive(cls) -> JsonReporter:
        return cls(opts=FormatOptions.adaptive())

    def emit(self, record: LogRecord, stream: TextIO) -> None:
        obj: dict[str, Any] = {"schema": JSON_SCHEMA}
        if self.opts.date:
            obj["time"] = datetime.now().astimezone().isoformat()
        obj["level"] = record.level.value
        obj["level_name"] = record.type_name
        obj["type"] = record.type_name
        if record.tag is not None:
            obj["tag"] = record.tag
        if record.message is not None:
            obj["message"] = record.message
        if record.args:
            obj["args"] = [_json_value(arg) for arg in record.args]
        if record.additional is not None:
            obj["additional"] = [_json_value(arg) for arg in record.additional]
        if record.repetition_count > 1:
            obj["repeat"] = record.repetition_count
        if record.stack is not None:
            obj["stack"] = list(record.stack)
        if record.error_chain is not None:
            obj["causes"] = list(record.error_chain)
        if record.meta is not None:
            obj["meta"] = {key: _json_value(value) for key, value in record.meta}
        text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False, sort_keys=True)
        stream.write(text + "\n")


class MemoryReporter(Reporter):
    """Keeps copies of emitted records for inspection."""

    def __init__(self, opts: FormatOptions | None = None) -> None:
        self.opts = opts if opts is not None else FormatOptions()
        self._records: list[LogRecord] = []
        self._lock = threading.Lock()

    def emit(self, record: LogRecord, stream: TextIO | None = None) -> None:
        with self._lock:
            self._records.append(copy.deepcopy(record))

    def get_records(self) -> list[LogRecord]:
        """Copies of all captured records, oldest first."""
        with self._lock:
            return copy.deepcopy(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)