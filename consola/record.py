"""Log records and the argument values they carry."""

from __future__ import annotations

import json
import math
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any

from .error_chain import collect_chain
from .levels import LogLevel, level_for_type


class ArgKind(Enum):
    """The kind of value a log argument holds."""

    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    ERROR = "error"
    OTHER_DEBUG = "other_debug"
    JSON = "json"


def _format_number(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class ArgValue:
    """One argument of a log call."""

    kind: ArgKind
    value: Any

    @classmethod
    def from_value(cls, value: Any) -> ArgValue:
        """Wrap an arbitrary Python value as an argument."""
        if isinstance(value, ArgValue):
            return value
        if isinstance(value, str):
            return cls(ArgKind.STRING, value)
        if isinstance(value, bool):
            return cls(ArgKind.BOOL, value)
        if isinstance(value, (int, float)):
            return cls(ArgKind.NUMBER, float(value))
        if isinstance(value, BaseException):
            return cls(ArgKind.ERROR, str(value))
        if value is None or isinstance(value, (dict, list, tuple)):
            return cls(ArgKind.JSON, value)
        return cls(ArgKind.OTHER_DEBUG, repr(value))

    def __str__(self) -> str:
        if self.kind is ArgKind.NUMBER:
            return _format_number(self.value)
        if self.kind is ArgKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is ArgKind.JSON:
            return json.dumps(self.value, separators=(",", ":"), ensure_ascii=False)
        return str(self.value)


def build_message(args: Iterable[ArgValue]) -> str | None:
    """Join arguments with spaces; None when there are none."""
    parts = [str(arg) for arg in args]
    return " ".join(parts) if parts else None


def _resolve_level(type_name: str) -> LogLevel:
    level = level_for_type(type_name)
    return LogLevel.LOG if level is None else level


def _to_meta(meta: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> list[tuple[str, ArgValue]]:
    items = meta.items() if isinstance(meta, Mapping) else meta
    return [(str(key), ArgValue.from_value(value)) for key, value in items]


@dataclass
class LogRecord:
    """A single log event."""

    timestamp: float
    level: LogLevel
    type_name: str
    tag: str | None = None
    args: list[ArgValue] = field(default_factory=list)
    message: str | None = None
    repetition_count: int = 0
    additional: list[ArgValue] | None = None
    meta: list[tuple[str, ArgValue]] | None = None
    stack: list[str] | None = None
    is_raw: bool = False
    error_chain: list[str] | None = None

    @classmethod
    def new(
        cls,
        type_name: str,
        tag: str | None = None,
        args: Iterable[Any] = (),
        timestamp: float | None = None,
    ) -> LogRecord:
        """Build a record whose message is the arguments joined by spaces."""
        values = [ArgValue.from_value(arg) for arg in args]
        return cls(
            timestamp=time.monotonic() if timestamp is None else timestamp,
            level=_resolve_level(type_name),
            type_name=type_name,
            tag=tag,
            args=values,
            message=build_message(values),
        )

    @classmethod
    def raw(
        cls,
        type_name: str,
        tag: str | None,
        message: str,
        timestamp: float | None = None,
    ) -> LogRecord:
        """Build a record that carries a preformatted message and no arguments."""
        return cls(
            timestamp=time.monotonic() if timestamp is None else timestamp,
            level=_resolve_level(type_name),
            type_name=type_name,
            tag=tag,
            message=message,
            is_raw=True,
        )

    def with_additional(self, additional: Iterable[Any]) -> LogRecord:
        return replace(self, additional=[ArgValue.from_value(a) for a in additional])

    def with_meta(self, meta: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> LogRecord:
        return replace(self, meta=_to_meta(meta))

    def with_stack(self, lines: Iterable[Any]) -> LogRecord:
        return replace(self, stack=[str(line) for line in lines])

    def with_error_chain(self, chain: Iterable[str]) -> LogRecord:
        return replace(self, error_chain=list(chain))

    def attach_error(self, err: BaseException) -> LogRecord:
        """Append an exception to the arguments and record its cause chain."""
        args = [*self.args, ArgValue(ArgKind.ERROR, str(err))]
        chain = self.error_chain if self.error_chain is not None else collect_chain(err)
        return replace(self, args=args, error_chain=chain, message=build_message(args))

    def merge_defaults(self, defaults: RecordDefaults) -> LogRecord:
        """Fill in defaults; values already on the record take precedence."""
        tag = self.tag if self.tag is not None else defaults.tag

        additional = self.additional
        if defaults.additional is not None:
            additional = [*defaults.additional, *(self.additional or [])]

        meta = self.meta
        if defaults.meta is not None:
            if self.meta is None:
                meta = list(defaults.meta)
            else:
                merged = dict(defaults.meta)
                merged.update(self.meta)
                meta = list(merged.items())

        return replace(self, tag=tag, additional=additional, meta=meta)

    @staticmethod
    def normalize_args(args: Iterable[Any]) -> list[ArgValue]:
        """Convert raw values to arguments."""
        return [ArgValue.from_value(arg) for arg in args]


@dataclass
class RecordDefaults:
    """Values merged into records that do not set them."""

    tag: str | None = None
    additional: list[ArgValue] | None = None
    meta: list[tuple[str, ArgValue]] | None = None