"""The logger: level filtering, throttling, pausing and dispatch to a reporter."""

from __future__ import annotations

import sys
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from .clock import Clock, SystemClock
from .levels import LogLevel, normalize_level
from .record import LogRecord, RecordDefaults
from .reporters import BasicReporter, Reporter
from .throttling import ThrottleConfig, Throttler

MockFn = Callable[[LogRecord], object]


@dataclass
class LoggerConfig:
    """Settings of a logger; without a clock the system clock is used."""

    level: LogLevel = LogLevel.VERBOSE
    throttle: ThrottleConfig = field(default_factory=ThrottleConfig)
    queue_capacity: int | None = None
    clock: Clock | None = None


class Logger:
    """Filters records by level, coalesces repeats and hands them to a reporter."""

    def __init__(
        self,
        reporter: Reporter,
        config: LoggerConfig | None = None,
        defaults: RecordDefaults | None = None,
    ) -> None:
        self.reporter = reporter
        self._config = replace(config) if config is not None else LoggerConfig()
        self._throttler = Throttler(replace(self._config.throttle))
        self._defaults = defaults
        self._paused = False
        self._queue: deque[LogRecord] = deque()
        self._system_clock = SystemClock()
        self._mock: MockFn | None = None

    @property
    def level(self) -> LogLevel:
        """The most verbose level that is still reported."""
        return self._config.level

    @property
    def paused(self) -> bool:
        return self._paused

    def set_level(self, level: LogLevel) -> None:
        self._config.level = level

    def _now(self) -> float:
        clock = self._config.clock if self._config.clock is not None else self._system_clock
        return clock.now()

    def _prepare(self, record: LogRecord) -> LogRecord:
        if self._defaults is not None:
            return record.merge_defaults(self._defaults)
        return record

    def _passes_level(self, record: LogRecord) -> bool:
        return record.level <= self._config.level

    def _submit(self, record: LogRecord) -> None:
        if not self._passes_level(record):
            return
        if self._paused:
            self._enqueue(record)
            return
        self._process(record)

    def log(self, type_name: str, *args: Any, tag: str | None = None) -> None:
        """Log the arguments, joined by spaces, under the given type."""
        record = LogRecord.new(type_name, tag, args, self._now())
        self._submit(self._prepare(record))

    def log_raw(self, type_name: str, message: str, tag: str | None = None) -> None:
        """Log a preformatted message under the given type."""
        record = LogRecord.raw(type_name, tag, message, self._now())
        self._submit(self._prepare(record))

    def info_raw(self, message: str) -> None:
        self.log_raw("info", message)

    def warn_raw(self, message: str) -> None:
        self.log_raw("warn", message)

    def error_raw(self, message: str) -> None:
        self.log_raw("error", message)

    def debug_raw(self, message: str) -> None:
        self.log_raw("debug", message)

    def trace_raw(self, message: str) -> None:
        self.log_raw("trace", message)

    def success_raw(self, message: str) -> None:
        self.log_raw("success", message)

    def fail_raw(self, message: str) -> None:
        self.log_raw("fail", message)

    def fatal_raw(self, message: str) -> None:
        self.log_raw("fatal", message)

    def log_type_raw(self, type_name: str, message: str) -> None:
        self.log_raw(type_name, message)

    def info(self, message: Any) -> None:
        self.log("info", str(message))

    def warn(self, message: Any) -> None:
        self.log("warn", str(message))

    def error(self, message: Any) -> None:
        self.log("error", str(message))

    def success(self, message: Any) -> None:
        self.log("success", str(message))

    def debug(self, message: Any) -> None:
        self.log("debug", str(message))

    def trace(self, message: Any) -> None:
        self.log("trace", str(message))

    def set_mock(self, mock_fn: MockFn) -> None:
        """Call ``mock_fn`` with every record just before the reporter sees it."""
        self._mock = mock_fn

    def clear_mock(self) -> None:
        self._mock = None

    def _enqueue(self, record: LogRecord) -> None:
        capacity = self._config.queue_capacity
        if capacity is not None and len(self._queue) >= capacity and self._queue:
            self._queue.popleft()
        self._queue.append(record)

    def _process(self, record: LogRecord) -> None:
        pending: list[LogRecord] = []
        self._throttler.on_record(record, pending.append)
        for item in pending:
            self._emit(item)

    def _emit(self, record: LogRecord) -> None:
        if self._mock is not None:
            self._mock(record)
        stream = sys.stderr if record.level <= LogLevel.ERROR else sys.stdout
        try:
            self.reporter.emit(record, stream)
        except OSError:
            pass

    def flush(self) -> None:
        """Report any repetitions the throttler is still holding back."""
        pending: list[LogRecord] = []
        self._throttler.flush(pending.append)
        for item in pending:
            self._emit(item)

    def pause(self) -> None:
        """Queue records instead of reporting them until resumed."""
        if not self._paused:
            self.flush()
            self._paused = True

    def resume(self) -> None:
        """Report queued records in order and stop queueing."""
        if not self._paused:
            return
        self._paused = False
        self.flush()
        while self._queue:
            record = self._queue.popleft()
            if self._passes_level(record):
                self._process(record)

    def close(self) -> None:
        self.flush()

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class LoggerBuilder:
    """Assembles a logger; explicit settings win over the environment."""

    def __init__(self, reporter_factory: Callable[[], Reporter] = BasicReporter) -> None:
        self._reporter_factory = reporter_factory
        self._reporter: Reporter | None = None
        self._config = LoggerConfig()
        self._defaults = RecordDefaults()

    def with_reporter(self, reporter: Reporter) -> LoggerBuilder:
        self._reporter = reporter
        return self

    def with_level(self, level: LogLevel) -> LoggerBuilder:
        self._config.level = level
        return self

    def with_throttle_config(self, throttle: ThrottleConfig) -> LoggerBuilder:
        self._config.throttle = throttle
        return self

    def with_defaults(self, defaults: RecordDefaults) -> LoggerBuilder:
        self._defaults = defaults
        return self

    def from_env(self) -> LoggerBuilder:
        """Take the level from CONSOLA_LEVEL, as a number or a type name."""
        import os

        value = os.environ.get("CONSOLA_LEVEL")
        if value is not None:
            level = normalize_level(value)
            if level is not None:
                self._config.level = level
        return self

    def build(self) -> Logger:
        reporter = self._reporter if self._reporter is not None else self._reporter_factory()
        return Logger(reporter, config=replace(self._config), defaults=self._defaults)