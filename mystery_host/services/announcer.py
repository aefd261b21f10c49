"""
Service: announcer.py
Rôle:
- Collaborateur `announce(text, kind)` du moteur : historise l'annonce (bornée),
  la journalise, puis la diffuse en WS (`{"type": "announcement", "payload": {...}}`).

Le moteur ne dépend que de la signature `announce(text, kind=...)` : les tests
injectent un simple enregistreur.
"""
from __future__ import annotations

import logging
from collections import deque
from threading import RLock
from typing import Callable, Deque, List, Protocol

from mystery_host.config.settings import settings
from mystery_host.models.announcement import Announcement
from .ws_manager import ws_broadcast_type_safe

logger = logging.getLogger(__name__)


class AnnounceFunc(Protocol):
    def __call__(self, text: str, kind: str) -> None: ...


def format_announcement(text: str) -> str:
    return f"{settings.ANNOUNCE_PREFIX} {text}" if settings.ANNOUNCE_PREFIX else text


class BroadcastAnnouncer:
    def __init__(
        self,
        broadcast: Callable[[str, dict], None] = ws_broadcast_type_safe,
        history_size: int = settings.ANNOUNCEMENT_HISTORY,
    ) -> None:
        self._broadcast = broadcast
        self._lock = RLock()
        self._history: Deque[Announcement] = deque(maxlen=max(1, history_size))

    def __call__(self, text: str, kind: str) -> None:
        announcement = Announcement(kind=kind, text=format_announcement(text))
        with self._lock:
            self._history.append(announcement)
        logger.info(announcement.text, extra={"announcement_kind": kind})
        try:
            self._broadcast("announcement", announcement.model_dump())
        except Exception:
            # pas de client joignable : l'annonce reste dans l'historique
            logger.warning("Announcement broadcast failed", exc_info=True, extra={"announcement_kind": kind})

    def history(self, limit: int | None = None) -> List[Announcement]:
        with self._lock:
            items = list(self._history)
        return items[-limit:] if limit else items
