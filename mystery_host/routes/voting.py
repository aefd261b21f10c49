"""
Routes du vote minuté (scope MJ).
- start : ouvre une fenêtre de 5 minutes (annonce dans le chat).
- stop  : clôture manuelle (ou "reset" après expiration) et range les whispers.
- submit: saisie manuelle d'un whisper par l'hôte (mêmes règles que le chat).
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from mystery_host.deps.auth import mj_required
from mystery_host.services.mystery_engine import MysteryEngine, get_engine

router = APIRouter(prefix="/voting", tags=["voting"], dependencies=[Depends(mj_required)])


class SubmitPayload(BaseModel):
    sender: str = Field(..., min_length=1)
    message: str


@router.get("")
def voting_status(engine: MysteryEngine = Depends(get_engine)):
    return engine.voting_status()


@router.post("/start")
def voting_start(engine: MysteryEngine = Depends(get_engine)):
    if not engine.start_voting():
        return {"ok": False, "error": "no_current_game"}
    return {"ok": True, **engine.voting_status()}


@router.post("/stop")
def voting_stop(engine: MysteryEngine = Depends(get_engine)):
    processed = engine.stop_voting()
    return {"ok": True, "processed": processed}


@router.post("/submit")
def voting_submit(payload: SubmitPayload, engine: MysteryEngine = Depends(get_engine)):
    # un refus n'est pas une erreur : même no-op silencieux que pour le chat
    return {"ok": True, "accepted": engine.submit_whisper(payload.sender, payload.message)}
