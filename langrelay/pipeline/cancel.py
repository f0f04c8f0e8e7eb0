# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
import asyncio


class RunInterrupted(Exception):
    """Raised at a cooperative checkpoint once the run has been cancelled."""


class CancelToken:
    """
    Level-triggered cancellation flag shared by every suspension point of a run.
    Once cancelled it stays cancelled.
    """

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RunInterrupted()

    async def sleep(self, seconds: float) -> bool:
        """Sleep up to `seconds`, waking early on cancellation. Returns True if cancelled."""
        if self._event.is_set():
            return True
        if seconds <= 0:
            await asyncio.sleep(0)
            return self._event.is_set()
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
        return self._event.is_set()
