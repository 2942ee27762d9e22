"""Repeating probe used to wait on backend-side work."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from gallery_sync.domain.polling import PollContinue, PollDone, PollError, PollOutcome

_logger = logging.getLogger(__name__)

Probe = Callable[[], Awaitable[PollOutcome]]
CompletionCallback = Callable[[PollDone | PollError], None]


@dataclass(frozen=True)
class PollHandle:
    """Ownership token for one started repetition of a poller."""

    poller: "SessionPoller"
    generation: int

    @property
    def active(self) -> bool:
        """Return True while this repetition is the poller's current one."""
        return self.poller.running and self.poller.generation == self.generation

    def stop(self) -> None:
        """Stop the repetition if it is still the current one."""
        if self.active:
            self.poller.stop()


@dataclass
class SessionPoller:
    """Calls a probe on a fixed period until it reports done or error.

    Only one repetition runs per poller: ``start`` stops the previous one
    first. Probes never overlap; if a probe outlasts the interval the next
    tick fires as soon as it returns. ``stop`` prevents future ticks but
    lets an in-flight probe finish, and its result is discarded. ``aclose``
    cancels and awaits whatever is still running.
    """

    name: str
    generation: int = 0
    _task: asyncio.Task[None] | None = field(default=None, repr=False)
    _probing_generation: int | None = field(default=None, repr=False)
    _retired: set[asyncio.Task[None]] = field(default_factory=set, repr=False)

    @property
    def running(self) -> bool:
        """Return True while a repetition is scheduled."""
        return self._task is not None

    def start(
        self,
        interval_seconds: float,
        probe: Probe,
        on_complete: CompletionCallback,
    ) -> PollHandle:
        """Start polling, replacing any repetition already running."""
        self.stop()
        self.generation += 1
        generation = self.generation
        self._task = asyncio.get_running_loop().create_task(
            self._run(generation, interval_seconds, probe, on_complete),
            name=f"poller:{self.name}:{generation}",
        )
        _logger.debug("Poller %s started (generation %s)", self.name, generation)
        return PollHandle(poller=self, generation=generation)

    def stop(self) -> None:
        """Stop the current repetition; no-op when idle."""
        task = self._task
        if task is None:
            return
        self._task = None
        probing = self._probing_generation == self.generation
        self.generation += 1
        _logger.debug("Poller %s stopped", self.name)
        if task is asyncio.current_task():
            return
        self._retired.add(task)
        task.add_done_callback(self._retired.discard)
        if not probing:
            task.cancel()

    async def aclose(self) -> None:
        """Stop polling and wait for stopped repetitions, cancelling any probe."""
        self.stop()
        tasks = [task for task in self._retired if task is not asyncio.current_task()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _run(
        self,
        generation: int,
        interval_seconds: float,
        probe: Probe,
        on_complete: CompletionCallback,
    ) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + interval_seconds
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            if generation != self.generation:
                return
            next_tick += interval_seconds
            self._probing_generation = generation
            try:
                outcome = await probe()
            except Exception as exc:
                _logger.exception("Poller %s probe failed", self.name)
                outcome = PollError(exc)
            finally:
                if self._probing_generation == generation:
                    self._probing_generation = None
            if generation != self.generation:
                _logger.debug("Poller %s dropped a late result", self.name)
                return
            if isinstance(outcome, PollContinue):
                continue
            self._task = None
            self.generation += 1
            try:
                on_complete(outcome)
            except Exception:
                _logger.exception("Poller %s completion callback failed", self.name)
            return
