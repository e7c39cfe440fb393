import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class AsyncioCancellationSignal:
    """asyncio.Event backed cancellation source implementing CancellationPort.

    Once cancelled the signal stays cancelled. `cancel_after` schedules the
    request on the running loop, which makes it usable as a caller-side
    deadline for a whole retry sequence.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if not self._event.is_set():
            logger.debug("[retry:cancel] cancellation requested")
            self._event.set()

    def cancel_after(self, delay_ms: int) -> None:
        """Request cancellation after `delay_ms` milliseconds.

        Must be called from within a running event loop. A later call
        replaces an earlier pending deadline.
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(delay_ms / 1000, self._expire)

    async def wait(self) -> None:
        await self._event.wait()

    def _expire(self) -> None:
        self._timer = None
        self.cancel()
