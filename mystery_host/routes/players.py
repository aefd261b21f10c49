"""
Module routes/players.py
Rôle:
- Fiches joueurs de l'hôte : notes libres et whispers rangés par manche.

Intégrations:
- La fiche est créée à la première consultation (comme une sélection dans l'UI).
- Le nombre de slots affichés suit les manches requises de la partie courante.
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from mystery_host.deps.auth import mj_required
from mystery_host.services.mystery_engine import MysteryEngine, get_engine

router = APIRouter(prefix="/players", tags=["players"], dependencies=[Depends(mj_required)])


class NotesPayload(BaseModel):
    notes: str = ""


class WhisperPayload(BaseModel):
    text: str = Field("", max_length=256)


@router.get("/{name}")
def get_player(name: str, engine: MysteryEngine = Depends(get_engine)):
    """Fiche du joueur (créée si absente) + whispers des manches requises."""
    return engine.player_snapshot(name)


@router.patch("/{name}/notes")
def set_notes(name: str, payload: NotesPayload, engine: MysteryEngine = Depends(get_engine)):
    engine.set_notes(name, payload.notes)
    return {"ok": True}


@router.put("/{name}/whispers/{index}")
def set_whisper(name: str, index: int, payload: WhisperPayload, engine: MysteryEngine = Depends(get_engine)):
    """Édition manuelle d'un slot (texte vide = slot libéré)."""
    if not engine.set_whisper(name, index, payload.text):
        raise HTTPException(status_code=400, detail="invalid_index")
    return {"ok": True, "whisper_count": engine.select_player(name).whisper_count}
