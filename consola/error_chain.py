"""Collecting and formatting chains of exception causes."""

from __future__ import annotations


def _next_cause(err: BaseException) -> BaseException | None:
    if err.__cause__ is not None:
        return err.__cause__
    if err.__suppress_context__:
        return None
    return err.__context__


def collect_chain(err: BaseException) -> list[str]:
    """Return the messages of an exception and its causes, outermost first."""
    messages: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current))
        current = _next_cause(current)
    return messages


def format_chain_lines(chain: list[str], max_depth: int | None) -> list[str]:
    """Format at most ``max_depth`` chain entries, prefixing causes."""
    limited = chain if max_depth is None else chain[: max(max_depth, 0)]
    return [
        message if position == 0 else f"Caused by: {message}"
        for position, message in enumerate(limited)
    ]