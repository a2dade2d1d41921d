"""
Cancellable repeating task.

One PollingTask owns exactly one asyncio.Task. Cancelling it (or the owner
being torn down) stops all further polls, including one that is sleeping
between ticks.
"""
import asyncio
from typing import Awaitable, Callable, Optional


class PollingTask:
    """
    Calls `poll` every `interval` seconds until it returns False.

    The first call happens one interval after start().
    """

    def __init__(self, interval: float, poll: Callable[[], Awaitable[bool]]):
        self.interval = interval
        self._poll = poll
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Schedule the loop on the running event loop."""
        if self.active:
            raise RuntimeError("Polling task already running")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if not await self._poll():
                return

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        if self.active:
            self._task.cancel()

    async def wait(self) -> None:
        """Wait until the loop ends, whether it finished or was cancelled."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise
