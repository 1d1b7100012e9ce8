"""Liveness state machine for a single connection.

Every ``interval`` seconds a probe is sent and a death timer of ``grace``
seconds is armed. An acknowledgement cancels the timer; if the timer fires
first the connection is declared DEAD and ``on_timeout`` runs once.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from direct_chat.domain.value_objects.enums import LivenessState

logger = logging.getLogger(__name__)

ProbeFn = Callable[[], Awaitable[None]]
TimeoutFn = Callable[[], Awaitable[Any]]


class Heartbeat:
    def __init__(
        self,
        probe: ProbeFn,
        on_timeout: TimeoutFn,
        *,
        interval: float,
        grace: float,
        name: str = "heartbeat",
    ) -> None:
        self._probe = probe
        self._on_timeout = on_timeout
        self._interval = interval
        self._grace = grace
        self._name = name
        self.state = LivenessState.ALIVE
        self._probe_task: asyncio.Task[None] | None = None
        self._death_timer: asyncio.TimerHandle | None = None
        self._timeout_task: asyncio.Task[Any] | None = None

    @property
    def awaiting_ack(self) -> bool:
        return self._death_timer is not None

    @property
    def running(self) -> bool:
        return self._probe_task is not None and not self._probe_task.done()

    def start(self) -> None:
        if self._probe_task is not None or self.state is LivenessState.DEAD:
            return
        self._probe_task = asyncio.create_task(self._run(), name=self._name)

    def acknowledge(self) -> None:
        if self._death_timer is not None:
            self._death_timer.cancel()
            self._death_timer = None

    def stop(self) -> None:
        """Cancel the probe loop and any pending death timer. Idempotent."""
        if self._death_timer is not None:
            self._death_timer.cancel()
            self._death_timer = None
        task = self._probe_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while self.state is LivenessState.ALIVE:
            await asyncio.sleep(self._interval)
            # A still-pending timer keeps its original deadline.
            if self._death_timer is None:
                self._death_timer = loop.call_later(self._grace, self._expire)
            try:
                await self._probe()
            except Exception:
                logger.debug("%s: probe send failed", self._name, exc_info=True)

    def _expire(self) -> None:
        self._death_timer = None
        if self.state is LivenessState.DEAD:
            return
        self.state = LivenessState.DEAD
        self.stop()
        self._timeout_task = asyncio.get_running_loop().create_task(
            self._on_timeout(), name=f"{self._name}-timeout",
        )
