"""
Module routes/health.py
Rôle:
- Endpoint de santé (service OK + résumé du moteur).
"""
from fastapi import APIRouter, Depends

from mystery_host.config.settings import settings
from mystery_host.services.mystery_engine import MysteryEngine, get_engine
from mystery_host.services.ws_manager import WS

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health(engine: MysteryEngine = Depends(get_engine)):
    """Renvoie un OK minimal avec le nom de service configuré."""
    return {
        "ok": True,
        "service": settings.APP_NAME,
        "games": len(engine.db.games),
        "pending_save": engine.saver.dirty,
        "ws": WS.stats(),
    }
