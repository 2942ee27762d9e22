"""Outcomes reported by a repeating probe."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PollContinue:
    """Keep polling."""


@dataclass(frozen=True)
class PollDone:
    """Stop polling; the flow reached its goal."""

    result: object = None


@dataclass(frozen=True)
class PollError:
    """Stop polling; the flow failed."""

    error: Exception


PollOutcome = PollContinue | PollDone | PollError
