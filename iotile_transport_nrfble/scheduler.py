"""Periodic and on-demand triggering of discovery cycles.

The scheduler is either idle or running exactly one cycle.  A request that
arrives while a cycle is running does not start a second one in parallel;
instead all such requests share a single trailing cycle that starts as soon
as the current one finishes.  Requesters always get the result of a cycle
that started after they asked, so the adapters they see are never older than
their request.
"""

import asyncio
import logging
from iotile.core.utilities.async_tools import BackgroundEventLoop, SharedLoop
from .exceptions import AdapterDiscoveryError, InternalError


class DiscoveryScheduler:
    """Serialize discovery cycles and run them on a fixed interval.

    Args:
        cycle (callable): Coroutine function that performs one cycle and
            returns its result.
        interval (float): Seconds between timer triggered cycles.
        loop (BackgroundEventLoop): The loop that runs every cycle.
    """

    def __init__(self, cycle, interval=2.0, loop: BackgroundEventLoop = SharedLoop):
        self._cycle = cycle
        self._loop = loop
        self._current = None
        self._trailing = None
        self._task = None
        self.interval = interval

        self._logger = logging.getLogger(__name__)
        self._logger.addHandler(logging.NullHandler())

    @property
    def reconciling(self) -> bool:
        """Whether a cycle is running right now."""

        return self._current is not None

    @property
    def running(self) -> bool:
        """Whether the periodic timer is installed."""

        return self._task is not None

    def trigger(self):
        """Ask for a cycle and get a future for its result.

        Must be called from inside the loop.

        Returns:
            asyncio.Future: Resolves with the cycle's result or its exception.
        """

        if not self._loop.inside_loop():
            raise InternalError("DiscoveryScheduler.trigger() must be called from inside the event loop")

        if self._current is None:
            self._current = self._loop.create_future()
            self._loop.log_coroutine(self._run_cycles)
            return self._current

        if self._trailing is None:
            self._logger.debug("Cycle in progress, queuing one trailing cycle")
            self._trailing = self._loop.create_future()

        return self._trailing

    async def request(self):
        """Trigger a cycle and wait for its result.

        Cancelling the caller does not cancel the cycle itself.
        """

        return await asyncio.shield(self.trigger())

    async def _run_cycles(self):
        while self._current is not None:
            future = self._current

            try:
                result = await self._cycle()
            except asyncio.CancelledError:
                self._abandon()
                raise
            except Exception as err:  #pylint:disable=broad-except;The error is handed to every requester
                if not future.done():
                    future.set_exception(err)
            else:
                if not future.done():
                    future.set_result(result)

            self._current = self._trailing
            self._trailing = None

    def _abandon(self):
        for future in (self._current, self._trailing):
            if future is not None and not future.done():
                future.cancel()

        self._current = None
        self._trailing = None

    def start(self):
        """Install the periodic timer.  The first cycle runs after one interval."""

        if self._task is not None:
            return

        self._task = self._loop.add_task(self._poll_forever(), name="nrfble discovery timer")

    async def stop(self):
        """Stop future timer ticks.  A cycle that is already running finishes normally."""

        if self._task is None:
            return

        task = self._task
        self._task = None
        await task.stop()

    def stop_threadsafe(self):
        """Stop future timer ticks from outside the loop."""

        if self._task is None:
            return

        task = self._task
        self._task = None
        task.stop_threadsafe()

    async def _poll_forever(self):
        while True:
            await asyncio.sleep(self.interval)

            try:
                await self.request()
            except asyncio.CancelledError:
                raise
            except AdapterDiscoveryError as err:
                self._logger.debug("Periodic discovery cycle failed, will retry next tick: %s", err)
            except Exception:  #pylint:disable=broad-except;The timer must keep running
                self._logger.exception("Unexpected error in periodic discovery cycle")
