"""
Tick périodique du moteur (tâche asyncio lancée au démarrage de l'app).

- Attend `TICK_STARTUP_GRACE_SECONDS` avant le premier tick.
- Chaque tick s'exécute dans un thread worker (`anyio.to_thread`) : le moteur prend
  son verrou et peut annoncer en WS sans bloquer la boucle.
- La latence d'expiration (vote, timers) est bornée par `TICK_INTERVAL_SECONDS`.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

import anyio

from mystery_host.config.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class Ticker:
    tick: Callable[[], None]
    interval: float = settings.TICK_INTERVAL_SECONDS
    grace: float = settings.TICK_STARTUP_GRACE_SECONDS
    _task: Optional[asyncio.Task] = field(default=None, init=False, repr=False)

    @property
    def running(self) -> bool:
        return bool(self._task and not self._task.done())

    def start(self) -> None:
        if self.running:
            return

        async def _runner():
            try:
                await asyncio.sleep(self.grace)
                while True:
                    try:
                        await anyio.to_thread.run_sync(self.tick)
                    except Exception:
                        # un tick raté ne doit pas arrêter les suivants
                        logger.exception("Tick failed")
                    await asyncio.sleep(self.interval)
            except asyncio.CancelledError:
                return

        self._task = asyncio.create_task(_runner())
        logger.info("Ticker started", extra={"tick_interval": self.interval})

    async def stop(self) -> None:
        """Annule la tâche en cours si nécessaire."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
