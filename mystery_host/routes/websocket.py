# mystery_host/routes/websocket.py
"""
WebSocket endpoint.

- /ws : flux des annonces (type=announcement) pour les tableaux de bord, et entrée
  des messages de chat poussés par le pont du client hôte :
  {"type": "chat", "payload": {"kind": "tell_incoming", "sender": "...", "message": "..."}}
  L'entrée chat exige le token MJ en query (`/ws?token=...`) ; sinon frame `error`.
- ping/pong pour heartbeat, ACK générique pour le reste.
"""
from __future__ import annotations

import json
from typing import Optional

import anyio
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from mystery_host.deps.auth import mj_token_valid
from mystery_host.models.chat import ChatMessage
from mystery_host.services.mystery_engine import MysteryEngine, get_engine
from mystery_host.services.ws_manager import WS

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(
    ws: WebSocket,
    token: Optional[str] = Query(None),
    engine: MysteryEngine = Depends(get_engine),
):
    # flux d'annonces public ; l'entrée chat exige le token MJ
    chat_allowed = mj_token_valid(token)
    await WS.connect(ws)
    try:
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
            except ValueError:
                # Message non JSON -> ignore
                continue
            if not isinstance(msg, dict):
                continue

            mtype = msg.get("type")
            if mtype == "chat":
                if not chat_allowed:
                    await WS.send_json(ws, {"type": "error", "error": "unauthorized"})
                    continue
                try:
                    chat = ChatMessage.model_validate(msg.get("payload") or {})
                except ValidationError:
                    await WS.send_json(ws, {"type": "error", "error": "invalid chat payload"})
                    continue
                # le moteur ne s'appelle jamais depuis la boucle (verrou + annonces WS)
                accepted = await anyio.to_thread.run_sync(engine.on_chat_message, chat)
                await WS.send_json(ws, {"type": "chat_ack", "accepted": accepted})
            elif mtype == "ping":
                await WS.send_json(ws, {"type": "pong"})
            else:
                await WS.send_json(ws, {"type": "ack", "received": msg})
    except WebSocketDisconnect:
        pass
    finally:
        await WS.disconnect(ws)
