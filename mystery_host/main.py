"""
Application FastAPI — Point d'entrée
====================================

Rôle
----
- Instancie l'app FastAPI, configure le CORS pour le front hôte,
- Monte tous les routeurs (REST + WebSocket),
- Démarre le tick périodique du moteur et force une sauvegarde à l'arrêt.

Notes
-----
- Les importations des routeurs sont explicites pour éviter les surprises d'auto-discovery.
- ⚠️ Le middleware CORS doit être ajouté AVANT les include_router.
"""
import anyio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mystery_host.routes.chat import router as chat_router
from mystery_host.routes.games import router as games_router
from mystery_host.routes.health import router as health_router
from mystery_host.routes.players import router as players_router
from mystery_host.routes.timers import router as timers_router
from mystery_host.routes.voting import router as voting_router
from mystery_host.routes.websocket import router as ws_router

from mystery_host.config.settings import settings
from mystery_host.services.mystery_engine import get_engine
from mystery_host.services.ticker import Ticker
from mystery_host.services.ws_manager import WS

# --- App FastAPI principale  ---
app = FastAPI(title=settings.APP_NAME)

# ===========================
# CORS (dev: permissif)
# ===========================
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ===========================
# Montage des routers
# ===========================
# ⚠️ Protections MJ au niveau DES ROUTERS métier, pas de l'app, pour laisser passer les préflights OPTIONS.
app.include_router(health_router)
app.include_router(games_router)
app.include_router(players_router)
app.include_router(voting_router)
app.include_router(timers_router)
app.include_router(chat_router)
app.include_router(ws_router)                  # WebSocket endpoint (/ws)

TICKER = Ticker(tick=lambda: get_engine().tick())


# --- Racine utile pour "ping" simple (sans /health) ---
@app.get("/")
async def root():
    """Ping basique : permet de vérifier que l'app tourne."""
    return {"ok": True, "service": "murder-mystery-host"}


# --- Hooks de cycle de vie ---
@app.on_event("startup")
async def startup():
    """Charge la base (hors boucle) puis lance le tick périodique."""
    engine = await anyio.to_thread.run_sync(get_engine)
    print("== Murder mystery host ==", settings.APP_NAME, f"games={len(engine.db.games)}")
    TICKER.start()


@app.on_event("shutdown")
async def shutdown():
    """Arrête le tick, ferme les sockets et écrit l'état en attente."""
    await TICKER.stop()
    await WS.close_all()
    await anyio.to_thread.run_sync(get_engine().shutdown)
