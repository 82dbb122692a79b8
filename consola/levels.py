"""Numeric log levels and the registry of named log types."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import ClassVar

_LEVEL_MIN = -(2**15)
_LEVEL_MAX = 2**15 - 1
_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True, order=True)
class LogLevel:
    """A numeric log level; lower values are more severe."""

    value: int

    SILENT: ClassVar[LogLevel]
    FATAL: ClassVar[LogLevel]
    ERROR: ClassVar[LogLevel]
    WARN: ClassVar[LogLevel]
    LOG: ClassVar[LogLevel]
    INFO: ClassVar[LogLevel]
    SUCCESS: ClassVar[LogLevel]
    DEBUG: ClassVar[LogLevel]
    TRACE: ClassVar[LogLevel]
    VERBOSE: ClassVar[LogLevel]

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"log level must be an int, not {type(self.value).__name__}")
        if not _LEVEL_MIN <= self.value <= _LEVEL_MAX:
            raise ValueError(
                f"log level {self.value} outside {_LEVEL_MIN}..{_LEVEL_MAX}"
            )

    def __int__(self) -> int:
        return self.value


LogLevel.SILENT = LogLevel(-99)
LogLevel.FATAL = LogLevel(0)
LogLevel.ERROR = LogLevel(1)
LogLevel.WARN = LogLevel(2)
LogLevel.LOG = LogLevel(3)
LogLevel.INFO = LogLevel(4)
LogLevel.SUCCESS = LogLevel(5)
LogLevel.DEBUG = LogLevel(6)
LogLevel.TRACE = LogLevel(7)
LogLevel.VERBOSE = LogLevel(99)


@dataclass(frozen=True)
class LogTypeSpec:
    """Specification of a named log type."""

    level: LogLevel


_DEFAULT_TYPES = (
    ("silent", LogLevel.SILENT),
    ("fatal", LogLevel.FATAL),
    ("error", LogLevel.ERROR),
    ("warn", LogLevel.WARN),
    ("log", LogLevel.LOG),
    ("info", LogLevel.INFO),
    ("success", LogLevel.SUCCESS),
    ("fail", LogLevel.SUCCESS),
    ("ready", LogLevel.INFO),
    ("start", LogLevel.LOG),
    ("box", LogLevel.LOG),
    ("debug", LogLevel.DEBUG),
    ("trace", LogLevel.TRACE),
    ("verbose", LogLevel.VERBOSE),
)

_registry: dict[str, LogTypeSpec] = {
    name: LogTypeSpec(level) for name, level in _DEFAULT_TYPES
}
_registry_lock = threading.Lock()


def register_type(name: str, spec: LogTypeSpec) -> None:
    """Register a log type, replacing any existing type of the same name."""
    with _registry_lock:
        _registry[name] = spec


def level_for_type(name: str) -> LogLevel | None:
    """Return the level registered for a type name, or None if unknown."""
    with _registry_lock:
        spec = _registry.get(name)
    return None if spec is None else spec.level


def normalize_level(value: str) -> LogLevel | None:
    """Parse a level given as a number or as a registered type name."""
    if _INTEGER.fullmatch(value):
        number = int(value)
        if _LEVEL_MIN <= number <= _LEVEL_MAX:
            return LogLevel(number)
    return level_for_type(value)