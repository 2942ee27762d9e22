"""Transient user-facing status messages."""

import asyncio
from dataclasses import dataclass, field


@dataclass
class StatusMessage:
    """A single status line that can clear itself after a delay."""

    text: str = ""
    _clear_handle: asyncio.TimerHandle | None = field(default=None, repr=False)

    def show(self, text: str, ttl_seconds: float | None = None) -> None:
        """Show a message, optionally clearing it after ``ttl_seconds``."""
        self._cancel_pending_clear()
        self.text = text
        if ttl_seconds is not None:
            loop = asyncio.get_running_loop()
            self._clear_handle = loop.call_later(ttl_seconds, self._expire)

    def clear(self) -> None:
        """Remove the current message immediately."""
        self._cancel_pending_clear()
        self.text = ""

    def _expire(self) -> None:
        self._clear_handle = None
        self.text = ""

    def _cancel_pending_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
