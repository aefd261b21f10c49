"""
Service: persistence.py
Rôle:
- Charger / sauvegarder la `MysteryDatabase` (fichier JSON unique sous DATA_DIR).
- Throttler les écritures : au plus une écriture par fenêtre `SAVE_THROTTLE_SECONDS`,
  les mutations intermédiaires marquent la base "dirty" et sont vidées au tick suivant.

Contrat:
- `save_database()` renvoie True/False, ne lève jamais : un échec est journalisé et
  l'état mémoire n'est PAS annulé (mémoire et disque divergent jusqu'au prochain succès).
- Un crash entre une mutation et l'écriture perd au plus la dernière rafale d'éditions.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Optional

from mystery_host.config.settings import settings
from .database import MysteryDatabase
from .io_utils import PersistenceError, read_json, write_json

logger = logging.getLogger(__name__)

DATABASE_PATH = Path(settings.DATA_DIR) / settings.DATABASE_FILENAME

SaveFunc = Callable[[Dict[str, Any]], bool]


def load_database(path: Path = DATABASE_PATH) -> MysteryDatabase:
    """Charge la base depuis le disque (base vide si fichier absent ou illisible)."""
    try:
        raw = read_json(path)
    except PersistenceError:
        logger.error("Database unreadable, starting empty", exc_info=True, extra={"db_path": str(path)})
        return MysteryDatabase()
    db = MysteryDatabase.from_dict(raw)
    logger.info(
        "Database loaded",
        extra={
            "db_path": str(path),
            "games_total": len(db.games),
            "players_total": len(db.player_database),
        },
    )
    return db


def save_database(snapshot: Dict[str, Any], path: Path = DATABASE_PATH) -> bool:
    try:
        write_json(path, snapshot)
    except PersistenceError:
        logger.error("Save failed", exc_info=True, extra={"db_path": str(path)})
        return False
    logger.debug("Database saved", extra={"db_path": str(path), "games_total": len(snapshot.get("games", []))})
    return True


def file_saver(path: Path) -> SaveFunc:
    """Fonction `save(snapshot) -> bool` liée à un chemin donné."""
    def _save(snapshot: Dict[str, Any]) -> bool:
        return save_database(snapshot, path)
    return _save


class ThrottledSaver:
    """
    Limiteur d'écritures.
    - request_save(): écrit tout de suite si la fenêtre est passée, sinon marque dirty.
    - flush_if_due(): appelé à chaque tick, écrit un état dirty dès que possible.
    - flush(): écriture forcée (arrêt du service).
    """

    def __init__(
        self,
        db: MysteryDatabase,
        save: SaveFunc,
        throttle_seconds: float = settings.SAVE_THROTTLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.db = db
        self._save = save
        self.throttle_seconds = throttle_seconds
        self._clock = clock
        self._lock = RLock()
        self._last_save: Optional[float] = None
        self.dirty = False

    def _due(self, now: float) -> bool:
        return self._last_save is None or (now - self._last_save) >= self.throttle_seconds

    def _write_nolock(self, now: float) -> bool:
        self._last_save = now
        try:
            ok = bool(self._save(self.db.to_dict()))
        except Exception:
            # collaborateur externe : son échec ne doit pas interrompre la mutation appelante
            logger.exception("Save collaborator raised")
            ok = False
        # en cas d'échec on garde dirty : un tick suivant retentera
        self.dirty = not ok
        return ok

    def request_save(self) -> bool:
        """Retourne True si une écriture a eu lieu et a réussi."""
        with self._lock:
            now = self._clock()
            if not self._due(now):
                self.dirty = True
                return False
            return self._write_nolock(now)

    def flush_if_due(self) -> bool:
        with self._lock:
            now = self._clock()
            if not self.dirty or not self._due(now):
                return False
            return self._write_nolock(now)

    def flush(self) -> bool:
        with self._lock:
            return self._write_nolock(self._clock())
