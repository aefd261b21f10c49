# mystery_host/services/ws_manager.py
"""
Service: ws_manager.py
- Registre des WebSockets connectés (tableaux de bord hôte + pont chat du client).
- Snapshots immuables pour éviter "set changed size during iteration".
- Helpers sync pour envois typés depuis le code moteur (threads worker).
- Admin: stats(), close_all().
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Awaitable, Callable, Set

import anyio
from starlette.websockets import WebSocket

logger = logging.getLogger(__name__)


@dataclass
class WSManager:
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)
    clients: Set[WebSocket] = field(default_factory=set)

    async def connect(self, ws: WebSocket) -> None:
        """Accepte la connexion WS et l'enregistre."""
        await ws.accept()
        with self._lock:
            self.clients.add(ws)

    def _unlink(self, ws: WebSocket) -> None:
        with self._lock:
            self.clients.discard(ws)

    async def disconnect(self, ws: WebSocket) -> None:
        """Ferme proprement la connexion et nettoie le registre."""
        self._unlink(ws)
        try:
            await ws.close()
        except Exception:
            pass

    async def _send_json_one(self, ws: WebSocket, payload: Any) -> bool:
        """Envoie à un WS; renvoie True si succès, sinon False (et retire le WS mort)."""
        try:
            data = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
            await ws.send_text(data)
            return True
        except Exception:
            self._unlink(ws)
            return False

    async def send_json(self, ws: WebSocket, payload: Any) -> bool:
        return await self._send_json_one(ws, payload)

    def _snapshot(self) -> list[WebSocket]:
        with self._lock:
            return list(self.clients)

    async def broadcast(self, payload: Any) -> int:
        conns = self._snapshot()
        success = 0
        for ws in conns:
            if await self._send_json_one(ws, payload):
                success += 1
        logger.debug("WS broadcast", extra={"ws_success": success, "ws_total": len(conns)})
        return success

    async def broadcast_type(self, event_type: str, payload: Any) -> int:
        return await self.broadcast({"type": event_type, "payload": payload})

    def stats(self) -> dict:
        with self._lock:
            return {"connected_total": len(self.clients)}

    async def close_all(self) -> dict:
        """Ferme TOUTES les sockets."""
        for ws in self._snapshot():
            await self.disconnect(ws)
        return self.stats()


WS = WSManager()

# =====================================================
# WRAPPERS THREAD-SAFE (utilisables depuis le moteur sync)
# =====================================================

def _run_async(factory: Callable[[], Awaitable[Any]]):
    """
    Exécute une coroutine depuis un contexte potentiellement synchrone.
    - anyio.from_thread.run si on est dans un worker anyio (routes sync, tick).
    - Sinon, la loop courante si elle tourne (fire-and-forget), ou une loop dédiée.
    - On reçoit une *fabrique* : chaque branche crée sa propre coroutine.
    """
    try:
        return anyio.from_thread.run(factory)
    except RuntimeError:
        pass
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(factory())
    loop.create_task(factory())
    return None


def ws_broadcast_type_safe(event_type: str, payload: dict):
    """Wrapper synchrone: broadcast typé à tous les clients connectés."""
    _run_async(lambda: WS.broadcast_type(event_type, payload))
