"""
Routes des timers d'indices (un par manche, hors manche finale).
- PUT  /timers/{index}       : heure ("m" ou "m:ss") et/ou texte de l'indice
- POST /timers/{index}/start : démarre (durée fournie ou heure enregistrée)
- POST /timers/{index}/stop  : arrête sans toucher au drapeau "notifié"
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from mystery_host.deps.auth import mj_required
from mystery_host.services.mystery_engine import MysteryEngine, get_engine

router = APIRouter(prefix="/timers", tags=["timers"], dependencies=[Depends(mj_required)])


class HintPayload(BaseModel):
    time: Optional[str] = None
    text: Optional[str] = None


class StartPayload(BaseModel):
    duration: Optional[str] = None


def _ensure_game(engine: MysteryEngine) -> None:
    if engine.current_game is None:
        raise HTTPException(status_code=404, detail="no_current_game")


@router.get("")
def list_timers(engine: MysteryEngine = Depends(get_engine)):
    return {"required_rounds": engine.required_rounds(), "timers": engine.timer_status()}


@router.put("/{index}")
def set_hint(index: int, payload: HintPayload, engine: MysteryEngine = Depends(get_engine)):
    _ensure_game(engine)
    if index < 0:
        raise HTTPException(status_code=400, detail="invalid_index")
    if payload.time is not None:
        engine.set_hint_time(index, payload.time)
    if payload.text is not None:
        engine.set_hint_text(index, payload.text)
    return {"ok": True}


@router.post("/{index}/start")
def start_timer(index: int, payload: StartPayload | None = None, engine: MysteryEngine = Depends(get_engine)):
    _ensure_game(engine)
    duration = payload.duration if payload else None
    if not engine.start_timer(index, duration):
        return {"ok": False, "error": "invalid_time_or_index"}
    return {"ok": True}


@router.post("/{index}/stop")
def stop_timer(index: int, engine: MysteryEngine = Depends(get_engine)):
    _ensure_game(engine)
    return {"ok": engine.stop_timer(index)}
