"""Coalescing of repeated log records within a time window."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from dataclasses import dataclass, replace

from .record import LogRecord


@dataclass
class ThrottleConfig:
    """Window in seconds and the repetition count that triggers an aggregate."""

    window: float = 0.5
    min_count: int = 2


@dataclass
class _ThrottleState:
    fingerprint: bytes | None = None
    first_time: float | None = None
    count: int = 0
    stored: LogRecord | None = None
    emitted: bool = False
    last_emitted_count: int = 0


class Throttler:
    """Suppresses identical consecutive records and reports their repetition."""

    def __init__(self, config: ThrottleConfig | None = None) -> None:
        self.config = config if config is not None else ThrottleConfig()
        self._state = _ThrottleState()

    @staticmethod
    def fingerprint(record: LogRecord) -> bytes:
        """Digest identifying records that count as repetitions of each other."""
        digest = hashlib.blake2b(digest_size=32)
        digest.update(record.type_name.encode())
        if record.tag is not None:
            digest.update(record.tag.encode())
        digest.update(record.level.value.to_bytes(2, "little", signed=True))
        if record.message is not None:
            digest.update(record.message.encode())
        if not record.is_raw:
            for arg in record.args:
                digest.update(repr(arg).encode())
        return digest.digest()

    def on_record(self, record: LogRecord, emit: Callable[[LogRecord], object]) -> None:
        """Feed a record in; ``emit`` receives every record to be shown."""
        fingerprint = self.fingerprint(record)
        now = record.timestamp
        state = self._state
        if (
            state.fingerprint is not None
            and state.first_time is not None
            and now - state.first_time > self.config.window
            and state.count > 0
        ):
            self._flush(emit)
            state = self._state

        if state.fingerprint is not None:
            if state.fingerprint == fingerprint:
                state.count += 1
                if state.stored is not None:
                    state.stored.repetition_count = state.count
                if state.count == self.config.min_count:
                    if state.stored is not None:
                        emit(replace(state.stored))
                        state.last_emitted_count = state.count
                    state.emitted = True
                return
            self._flush(emit)

        stored = replace(record, repetition_count=1)
        self._state = _ThrottleState(
            fingerprint=fingerprint,
            first_time=now,
            count=1,
            stored=stored,
            emitted=True,
            last_emitted_count=1,
        )
        emit(replace(stored))

    def _flush(self, emit: Callable[[LogRecord], object]) -> None:
        state = self._state
        if state.stored is not None and (
            not state.emitted or state.count != state.last_emitted_count
        ):
            emit(replace(state.stored))
        self._state = _ThrottleState()

    def flush(self, emit: Callable[[LogRecord], object]) -> None:
        """Emit any unreported repetitions and start a fresh group."""
        self._flush(emit)