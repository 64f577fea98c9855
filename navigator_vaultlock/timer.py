"""
VaultTimeoutTimer — periodic vault timeout evaluation on the event loop.
"""
import asyncio
import logging
from typing import Optional

from .service import VaultTimeoutService

logger = logging.getLogger("navigator.vaultlock")


class VaultTimeoutTimer:
    """Run ``service.check_vault_timeout()`` every ``interval`` seconds.

    A failing check is logged and the loop keeps going; a half-finished
    lock raises inside the service and is retried on the next tick.
    """

    def __init__(self, service: VaultTimeoutService, interval: float = 10.0):
        if interval <= 0:
            raise ValueError("interval must be greater than zero")
        self._service = service
        self._interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="vault-timeout-timer")
        logger.debug("Vault timeout timer started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Vault timeout timer stopped")

    async def tick(self) -> None:
        """Run one evaluation pass, logging instead of raising."""
        try:
            await self._service.check_vault_timeout()
        except Exception as err:
            logger.exception("Vault timeout check failed: %s", err)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.tick()
