import asyncio
from typing import Optional


class CancelToken:
    """One-shot cancellation signal handed to a pending request.

    ``cancel_after`` arms a loop timer; ``disarm`` drops it once the
    request has settled so a late timer never fires into a finished call.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._timer: Optional[asyncio.TimerHandle] = None
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()

    def cancel_after(self, delay: float) -> "CancelToken":
        self.disarm()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(delay, self.cancel, f"no response after {delay:g}s")
        return self

    def disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def wait(self) -> str:
        await self._event.wait()
        return self.reason or "cancelled"
