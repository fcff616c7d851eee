"""Periodic status polling.

PollingScheduler reads the unit on a fixed period and hands every snapshot
to a StatusListener. It has two states, stopped and running; start() and
stop() are idempotent.

Concurrency notes:
- Each timer tick starts its poll as a separate task, so a slow poll never
  delays the next tick. Polls can therefore overlap, including with polls
  triggered by commands; the listener sees whichever finishes last.
- With single_flight=True at most one poll runs at a time and requests
  that arrive meanwhile collapse into one trailing re-poll. The re-poll
  still runs, in the background, when the poll it was folded into fails.
- stop() cancels the timer only. A poll already in flight still completes
  and may deliver one more snapshot after stop() returns.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Protocol

from .protocol import (
    POLL_INTERVAL,
    STATUS_METRICS,
    CanonicalStatus,
    MetricsClient,
    TransportError,
)
from .translate import translate_status

_LOGGER = logging.getLogger(__name__)


class StatusListener(Protocol):
    """Receiver of status snapshots."""

    def on_status(self, status: CanonicalStatus) -> None: ...


class SchedulerState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


async def read_status(client: MetricsClient) -> CanonicalStatus:
    """Fetch metrics and profile from the unit and translate them.

    Raises:
        TransportError: If either fetch fails
    """
    raw = await client.fetch_metrics(STATUS_METRICS)
    profile = await client.fetch_profile()
    return translate_status(raw, profile, client.profile_table)


class PollingScheduler:
    """Poll a unit on a fixed period and deliver snapshots to a listener.

    Args:
        client: Metrics client for the unit
        listener: Receives every successfully polled snapshot
        interval: Seconds between scheduled polls
        single_flight: Coalesce overlapping polls into one trailing re-poll

    Example:
        scheduler = PollingScheduler(client, listener)
        await scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        client: MetricsClient,
        listener: StatusListener,
        interval: float = POLL_INTERVAL,
        single_flight: bool = False,
    ) -> None:
        self._client = client
        self._listener = listener
        self._interval = interval
        self._single_flight = single_flight
        self._state = SchedulerState.STOPPED
        self._timer: asyncio.Task | None = None
        self._polls: set[asyncio.Task] = set()
        self._in_flight = False
        self._repoll = False

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    async def start(self) -> None:
        """Poll once, then keep polling every interval.

        Does nothing if already running. If the first poll fails the error
        propagates and the scheduler stays stopped.
        """
        if self._state is SchedulerState.RUNNING:
            return
        self._state = SchedulerState.RUNNING
        try:
            await self.poll_and_deliver()
        except BaseException:
            self._state = SchedulerState.STOPPED
            raise

        # stop() may have been called while the first poll was running
        if self._state is SchedulerState.RUNNING and self._timer is None:
            self._timer = asyncio.create_task(self._run())
            _LOGGER.debug("Polling every %ss", self._interval)

    def stop(self) -> None:
        """Stop scheduled polling. Does nothing if already stopped."""
        if self._state is SchedulerState.STOPPED:
            return
        self._state = SchedulerState.STOPPED
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        _LOGGER.debug("Polling stopped")

    async def poll_and_deliver(self) -> CanonicalStatus | None:
        """Read the unit and deliver the snapshot to the listener.

        Returns:
            The delivered snapshot, or None if the request was folded into
            a poll already in flight (single_flight mode only)

        Raises:
            TransportError: If the unit could not be read
        """
        if not self._single_flight:
            return await self._deliver()

        if self._in_flight:
            self._repoll = True
            return None

        self._in_flight = True
        try:
            while True:
                self._repoll = False
                status = await self._deliver()
                if not self._repoll:
                    return status
        except Exception:
            # Callers folded into this poll still expect a delivery
            if self._repoll:
                _LOGGER.debug("Poll failed, running the pending re-poll")
                self._spawn_poll()
            raise
        finally:
            self._in_flight = False

    async def _deliver(self) -> CanonicalStatus:
        status = await read_status(self._client)
        _LOGGER.debug("Delivering status: %s", status)
        self._listener.on_status(status)
        return status

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._spawn_poll()

    def _spawn_poll(self) -> None:
        task = asyncio.create_task(self._tick())
        self._polls.add(task)
        task.add_done_callback(self._polls.discard)

    async def _tick(self) -> None:
        try:
            await self.poll_and_deliver()
        except TransportError as err:
            _LOGGER.warning("Scheduled poll failed: %s", err)
        except Exception:
            _LOGGER.exception("Unexpected error during scheduled poll")
