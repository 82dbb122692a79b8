"""Interactive prompts with configurable handling of cancellation."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_UNSIGNED = re.compile(r"\+?[0-9]+")
_YES = frozenset({"y", "yes"})
_NO = frozenset({"n", "no"})


class PromptCancelStrategy(Enum):
    """What a prompt yields when the user cancels it."""

    REJECT = "reject"
    DEFAULT = "default"
    UNDEFINED = "undefined"
    NULL = "null"
    SYMBOL = "symbol"


class OutcomeKind(Enum):
    """The kind of result a prompt produced."""

    VALUE = "value"
    UNDEFINED = "undefined"
    NULL_VALUE = "null_value"
    SYMBOL_CANCEL = "symbol_cancel"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PromptOutcome(Generic[T]):
    """Result of a prompt: a value, or one of the cancellation outcomes."""

    kind: OutcomeKind
    value: T | None = None

    def __post_init__(self) -> None:
        if self.kind is not OutcomeKind.VALUE and self.value is not None:
            raise ValueError(f"a {self.kind.value} outcome carries no value")

    def unwrap(self) -> T:
        """Return the value, or raise if the prompt produced none."""
        if self.kind is not OutcomeKind.VALUE:
            raise ValueError("called unwrap() on a prompt outcome without a value")
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` if the prompt produced none."""
        if self.kind is OutcomeKind.VALUE:
            return self.value  # type: ignore[return-value]
        return default

    def is_value(self) -> bool:
        return self.kind is OutcomeKind.VALUE


class PromptError(Exception):
    """A prompt could not be completed."""

    def __init__(self, detail: Any = "") -> None:
        super().__init__(f"prompt error: {detail}")
        self.detail = detail


class PromptCancelled(PromptError):
    """The user cancelled the prompt."""

    def __init__(self) -> None:
        Exception.__init__(self, "prompt cancelled by user")
        self.detail = None


class PromptNotSupported(PromptError):
    """Prompts cannot be shown in this environment."""

    def __init__(self) -> None:
        Exception.__init__(self, "prompts not supported in this environment (browser)")
        self.detail = None


class PromptProvider(ABC):
    """Asks the user for input."""

    @abstractmethod
    def text(self, prompt: str, default: str | None = None) -> PromptOutcome[str]:
        """Ask for a line of text."""

    @abstractmethod
    def confirm(self, prompt: str, default: bool | None = None) -> PromptOutcome[bool]:
        """Ask a yes/no question."""

    @abstractmethod
    def select(self, prompt: str, options: Sequence[str]) -> PromptOutcome[int]:
        """Ask for one option; the outcome holds its zero-based index."""

    @abstractmethod
    def multiselect(self, prompt: str, options: Sequence[str]) -> PromptOutcome[list[int]]:
        """Ask for several options; the outcome holds their zero-based indices."""


def _option_listing(prompt: str, options: Sequence[str], request: str) -> str:
    listing = "".join(f"{number}. {option}\n" for number, option in enumerate(options, 1))
    return f"{prompt}\nOptions:\n{listing}{request}"


def _parse_choice(text: str, count: int) -> int | None:
    text = text.strip()
    if not _UNSIGNED.fullmatch(text):
        return None
    number = int(text)
    return number - 1 if 0 < number <= count else None


class DefaultPrompt(PromptProvider):
    """Line-based prompts read through an input function."""

    def __init__(
        self,
        cancel_strategy: PromptCancelStrategy = PromptCancelStrategy.REJECT,
        input_fn: Callable[[str], str] = input,
    ) -> None:
        self.cancel_strategy = cancel_strategy
        self._input = input_fn

    def map_cancellation(self) -> PromptOutcome[Any]:
        """The outcome the cancellation strategy gives for a cancelled prompt."""
        kind = {
            PromptCancelStrategy.REJECT: OutcomeKind.CANCELLED,
            PromptCancelStrategy.DEFAULT: OutcomeKind.CANCELLED,
            PromptCancelStrategy.UNDEFINED: OutcomeKind.UNDEFINED,
            PromptCancelStrategy.NULL: OutcomeKind.NULL_VALUE,
            PromptCancelStrategy.SYMBOL: OutcomeKind.SYMBOL_CANCEL,
        }[self.cancel_strategy]
        return PromptOutcome(kind)

    def _cancelled_with_default(self, default: Any) -> PromptOutcome[Any]:
        if self.cancel_strategy is PromptCancelStrategy.DEFAULT and default is not None:
            return PromptOutcome(OutcomeKind.VALUE, default)
        return self.map_cancellation()

    def text(self, prompt: str, default: str | None = None) -> PromptOutcome[str]:
        question = f"{prompt} ({default}) " if default is not None else f"{prompt} "
        try:
            answer = self._input(question)
        except (EOFError, KeyboardInterrupt):
            return self._cancelled_with_default(default)
        return PromptOutcome(OutcomeKind.VALUE, answer)

    def confirm(self, prompt: str, default: bool | None = None) -> PromptOutcome[bool]:
        question = f"{prompt} [y/n] "
        try:
            while True:
                answer = self._input(question).strip().lower()
                if answer in _YES:
                    return PromptOutcome(OutcomeKind.VALUE, True)
                if answer in _NO:
                    return PromptOutcome(OutcomeKind.VALUE, False)
        except (EOFError, KeyboardInterrupt):
            return self._cancelled_with_default(default)

    def select(self, prompt: str, options: Sequence[str]) -> PromptOutcome[int]:
        question = _option_listing(prompt, options, "Enter number: ")
        try:
            answer = self._input(question)
        except (EOFError, KeyboardInterrupt):
            return self.map_cancellation()
        choice = _parse_choice(answer, len(options))
        if choice is None:
            return self.map_cancellation()
        return PromptOutcome(OutcomeKind.VALUE, choice)

    def multiselect(self, prompt: str, options: Sequence[str]) -> PromptOutcome[list[int]]:
        question = _option_listing(prompt, options, "Enter numbers (comma-separated): ")
        try:
            answer = self._input(question)
        except (EOFError, KeyboardInterrupt):
            return self.map_cancellation()
        choices = (_parse_choice(part, len(options)) for part in answer.split(","))
        return PromptOutcome(OutcomeKind.VALUE, [c for c in choices if c is not None])