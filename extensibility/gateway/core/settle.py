"""
Single-assignment completion slot.

Hooks are untrusted: they may call their callback several times, from another
thread, or after raising. SettleOnce latches the first settlement and drops
the rest.
"""

import asyncio
import logging
import threading
from typing import Generic, Optional, TypeVar

logger = logging.getLogger("gateway.settle")

T = TypeVar("T")


class SettleOnce(Generic[T]):
    """
    Guarded flag plus an asyncio future.

    ``settle`` may be called from any thread; the future is always resolved
    on the loop that created the slot.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        self._lock = threading.Lock()
        self._settled = False
        self.discarded = 0

    @property
    def settled(self) -> bool:
        return self._settled

    def settle(self, value: T) -> bool:
        """
        Store ``value`` if nothing was stored yet.

        Returns:
            True when this call won, False when it was discarded
        """
        with self._lock:
            if self._settled:
                self.discarded += 1
                logger.debug("Discarding extra settlement", extra={"discarded": self.discarded})
                return False
            self._settled = True

        if self._loop.is_closed():
            return True
        self._loop.call_soon_threadsafe(self._resolve, value)
        return True

    def _resolve(self, value: T) -> None:
        if not self._future.done():
            self._future.set_result(value)

    async def wait(self) -> T:
        """Suspend until the slot is settled."""
        return await asyncio.shield(self._future)
