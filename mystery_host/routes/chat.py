"""
Pont chat du client hôte + historique des annonces.

- POST /chat/message : un message de chat reçu par le client (tout type). Seuls les
  whispers entrants pendant un vote sont retenus ; le reste est ignoré sans erreur.
- GET /announcements : dernières annonces émises (vote, indices).
"""
from fastapi import APIRouter, Depends, Query

from mystery_host.deps.auth import mj_required
from mystery_host.models.chat import ChatMessage
from mystery_host.services.announcer import BroadcastAnnouncer
from mystery_host.services.mystery_engine import MysteryEngine, get_engine

router = APIRouter(tags=["chat"], dependencies=[Depends(mj_required)])


@router.post("/chat/message")
def chat_message(payload: ChatMessage, engine: MysteryEngine = Depends(get_engine)):
    return {"ok": True, "accepted": engine.on_chat_message(payload)}


@router.get("/announcements")
def announcements(
    limit: int = Query(50, ge=1, le=1000),
    engine: MysteryEngine = Depends(get_engine),
):
    announcer = engine.announce
    if not isinstance(announcer, BroadcastAnnouncer):
        return {"announcements": []}
    return {"announcements": [a.model_dump() for a in announcer.history(limit)]}
