"""
Routes de gestion des parties et du roster (scope MJ).

Objectifs :
- Liste / création / sélection / suppression des parties.
- Édition des champs de la partie courante (titre, description, prix, killer).
- Roster : ajout/retrait, statuts mort/emprisonné, désignation du killer.
- Snapshot complet de la partie courante pour l'UI hôte.

Les handlers sont synchrones : FastAPI les exécute dans un worker, ce qui permet au
moteur d'annoncer en WS sans bloquer la boucle.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from mystery_host.deps.auth import mj_required
from mystery_host.services.mystery_engine import MysteryEngine, get_engine

router = APIRouter(prefix="/games", tags=["games"], dependencies=[Depends(mj_required)])


# ---------------------------------------------------------------------------
# Modèles Pydantic
# ---------------------------------------------------------------------------
class GameCreatePayload(BaseModel):
    title: Optional[str] = Field(None, description="Titre (défaut: `New Game N`)")


class GameFieldsPayload(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    prize: Optional[str] = None
    killer: Optional[str] = None


class RosterPayload(BaseModel):
    name: str = Field(..., min_length=1)


def require_game(engine: MysteryEngine):
    game = engine.current_game
    if game is None:
        raise HTTPException(status_code=404, detail="no_current_game")
    return game


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------
@router.get("")
def list_games(engine: MysteryEngine = Depends(get_engine)):
    return {"games": engine.list_games()}


@router.post("")
def create_game(payload: GameCreatePayload | None = None, engine: MysteryEngine = Depends(get_engine)):
    """Crée une partie et la sélectionne."""
    game = engine.new_game(payload.title if payload else None)
    return {"ok": True, "title": game.title, "current_game_index": engine.db.current_game_index}


@router.get("/current")
def current_game(engine: MysteryEngine = Depends(get_engine)):
    """Snapshot de la partie courante (roster + statuts, manches, vote, timers)."""
    return engine.snapshot()


@router.patch("/current")
def update_current_game(payload: GameFieldsPayload, engine: MysteryEngine = Depends(get_engine)):
    require_game(engine)
    engine.update_game_fields(**payload.model_dump(exclude_none=True))
    return {"ok": True}


@router.post("/{index}/select")
def select_game(index: int, engine: MysteryEngine = Depends(get_engine)):
    if not engine.select_game(index):
        raise HTTPException(status_code=404, detail="game_not_found")
    return {"ok": True, "current_game_index": index}


@router.delete("/current")
def remove_current_game(engine: MysteryEngine = Depends(get_engine)):
    """Supprime la partie courante ; la sélection passe à la première partie restante."""
    if not engine.remove_game():
        raise HTTPException(status_code=404, detail="no_current_game")
    return {"ok": True, "current_game_index": engine.db.current_game_index}


@router.delete("/{index}")
def remove_game(index: int, engine: MysteryEngine = Depends(get_engine)):
    if not engine.remove_game(index):
        raise HTTPException(status_code=404, detail="game_not_found")
    return {"ok": True, "current_game_index": engine.db.current_game_index}


# ---------------------------------------------------------------------------
# Roster de la partie courante
# ---------------------------------------------------------------------------
@router.post("/current/roster")
def roster_add(payload: RosterPayload, engine: MysteryEngine = Depends(get_engine)):
    require_game(engine)
    added = engine.add_player(payload.name)
    return {"ok": added, "error": None if added else "already_in_roster"}


@router.delete("/current/roster/{name}")
def roster_remove(name: str, engine: MysteryEngine = Depends(get_engine)):
    require_game(engine)
    if not engine.remove_player(name):
        raise HTTPException(status_code=404, detail="player_not_in_roster")
    return {"ok": True}


@router.post("/current/roster/{name}/dead")
def roster_mark_dead(name: str, engine: MysteryEngine = Depends(get_engine)):
    require_game(engine)
    return {"ok": engine.mark_dead(name)}


@router.post("/current/roster/{name}/imprisoned")
def roster_mark_imprisoned(name: str, engine: MysteryEngine = Depends(get_engine)):
    require_game(engine)
    return {"ok": engine.mark_imprisoned(name)}


@router.delete("/current/roster/{name}/status")
def roster_clear_status(name: str, engine: MysteryEngine = Depends(get_engine)):
    require_game(engine)
    return {"ok": engine.clear_status(name)}


@router.post("/current/roster/{name}/killer")
def roster_set_killer(name: str, engine: MysteryEngine = Depends(get_engine)):
    require_game(engine)
    return {"ok": engine.set_killer(name)}
