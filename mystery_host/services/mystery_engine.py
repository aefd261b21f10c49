"""
Service: mystery_engine.py
Rôle:
- Façade unique du moteur de murder mystery pour les collaborateurs (routes, WS, tick).
- Compose : base (parties + fiches joueurs), contrôleur de vote, balayage des timers,
  sauvegarde throttlée et annonceur.

Concurrence:
- UN verrou (RLock) par base : chaque opération publique le prend, mute, puis demande
  une sauvegarde. Le tick et les messages de chat peuvent arriver sur des threads
  différents, ils sont sérialisés ici.
- Les appels au moteur se font depuis des threads worker (routes sync,
  `anyio.to_thread`), jamais depuis la boucle asyncio : l'annonceur peut ainsi
  rejoindre la boucle via `anyio.from_thread` sans interblocage.

Erreurs (contrat public):
- Saisie invalide (durée, index) → False, état inchangé.
- Opération inéligible (whisper refusé, vote sans partie) → False, no-op volontaire.
- Échec de sauvegarde → journalisé par le saver, la mutation reste en mémoire.

API interne exposée aux routes:
- ENGINE.new_game(), select_game(), remove_game(), update_game_fields()
- ENGINE.add_player(), remove_player(), mark_dead(), mark_imprisoned(), clear_status(), set_killer()
- ENGINE.select_player(), set_notes(), set_whisper()
- ENGINE.start_voting(), stop_voting(), submit_whisper(), on_chat_message()
- ENGINE.set_hint_time(), set_hint_text(), start_timer(), stop_timer()
- ENGINE.tick(now), snapshot(now)
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional

from mystery_host.config.settings import settings
from mystery_host.models.chat import ChatMessage
from .announcer import AnnounceFunc, BroadcastAnnouncer
from .database import MysteryDatabase
from .game_session import GameSession
from .hint_timers import TimerSweep
from .persistence import DATABASE_PATH, SaveFunc, ThrottledSaver, file_saver, load_database
from .player_record import PlayerRecord
from .round_sizing import required_rounds, total_rounds
from .voting import VotingController

logger = logging.getLogger(__name__)

GAME_FIELDS = ("title", "description", "prize", "killer")


class MysteryEngine:
    def __init__(
        self,
        db: MysteryDatabase,
        save: SaveFunc,
        announce: AnnounceFunc,
        *,
        voting_duration: float = settings.VOTING_DURATION_SECONDS,
        save_throttle: float = settings.SAVE_THROTTLE_SECONDS,
    ) -> None:
        self.db = db
        self.announce = announce
        self._lock = RLock()
        self.saver = ThrottledSaver(db, save, throttle_seconds=save_throttle)
        self.voting = VotingController(db, announce, duration_seconds=voting_duration)
        self.timers = TimerSweep(db, announce)

    @staticmethod
    def _now(now: Optional[float]) -> float:
        return time.time() if now is None else now

    def _changed(self) -> None:
        self.saver.request_save()

    # -----------------------------
    # Parties
    # -----------------------------
    @property
    def current_game(self) -> Optional[GameSession]:
        return self.db.current_game

    def list_games(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                {"index": i, "title": g.title or f"Game {i + 1}", "current": i == self.db.current_game_index}
                for i, g in enumerate(self.db.games)
            ]

    def new_game(self, title: Optional[str] = None) -> GameSession:
        with self._lock:
            game = self.db.new_game(title)
            self._changed()
            return game

    def select_game(self, index: int) -> bool:
        with self._lock:
            ok = self.db.select_game(index)
            if ok:
                self._changed()
            return ok

    def remove_game(self, index: Optional[int] = None) -> bool:
        with self._lock:
            ok = self.db.remove_game(index)
            if ok:
                self._changed()
            return ok

    def update_game_fields(self, **fields: Optional[str]) -> bool:
        """Met à jour title/description/prize/killer (les valeurs None sont ignorées)."""
        with self._lock:
            game = self.db.current_game
            if game is None:
                return False
            for name, value in fields.items():
                if name in GAME_FIELDS and value is not None:
                    setattr(game, name, value)
            self._changed()
            return True

    # -----------------------------
    # Roster
    # -----------------------------
    def _roster_op(self, op: str, name: str) -> bool:
        with self._lock:
            game = self.db.current_game
            if game is None or not name:
                return False
            result = getattr(game, op)(name)
            ok = result is not False
            if ok:
                self._changed()
            return ok

    def add_player(self, name: str) -> bool:
        return self._roster_op("add_player", name)

    def remove_player(self, name: str) -> bool:
        return self._roster_op("remove_player", name)

    def mark_dead(self, name: str) -> bool:
        return self._roster_op("mark_dead", name)

    def mark_imprisoned(self, name: str) -> bool:
        return self._roster_op("mark_imprisoned", name)

    def clear_status(self, name: str) -> bool:
        return self._roster_op("clear_status", name)

    def set_killer(self, name: str) -> bool:
        return self.update_game_fields(killer=name)

    # -----------------------------
    # Fiches joueurs
    # -----------------------------
    def select_player(self, name: str) -> PlayerRecord:
        """Retourne la fiche (créée à la demande)."""
        with self._lock:
            created = name not in self.db.player_database
            record = self.db.get_or_create_player(name)
            if created:
                self._changed()
            return record

    def set_notes(self, name: str, notes: str) -> None:
        with self._lock:
            self.db.get_or_create_player(name).notes = notes
            self._changed()

    def set_whisper(self, name: str, index: int, value: str) -> bool:
        if index < 0:
            return False
        with self._lock:
            self.db.get_or_create_player(name).set_whisper(index, value)
            self._changed()
            return True

    def player_snapshot(self, name: str) -> Dict[str, Any]:
        with self._lock:
            record = self.select_player(name)
            required = required_rounds(self.db.current_game)
            return {
                "name": record.name,
                "notes": record.notes,
                "whisper_count": record.whisper_count,
                "whispers": [record.get_whisper(i) for i in range(required)],
                "stored_whispers": record.whispers.to_dict(),
                "required_rounds": required,
                "total_rounds": required + 1,
            }

    # -----------------------------
    # Manches
    # -----------------------------
    def required_rounds(self) -> int:
        with self._lock:
            return required_rounds(self.db.current_game)

    def total_rounds(self) -> int:
        with self._lock:
            return total_rounds(self.db.current_game)

    # -----------------------------
    # Vote
    # -----------------------------
    def start_voting(self, now: Optional[float] = None) -> bool:
        with self._lock:
            ok = self.voting.start(self._now(now))
            if ok:
                self._changed()
            return ok

    def stop_voting(self) -> int:
        with self._lock:
            processed = self.voting.close()
            self._changed()
            return processed

    def submit_whisper(self, sender: str, message: str) -> bool:
        with self._lock:
            return self.voting.submit(sender, message)

    def on_chat_message(self, message: ChatMessage) -> bool:
        """Seuls les whispers entrants (tell_incoming) alimentent le vote."""
        if not message.is_whisper:
            return False
        return self.submit_whisper(message.sender, message.message)

    def voting_status(self, now: Optional[float] = None) -> Dict[str, Any]:
        with self._lock:
            current = self._now(now)
            return {
                "active": self.voting.is_active,
                "started_at": self.voting.started_at,
                "remaining_seconds": round(self.voting.remaining(current), 1),
                "collected": dict(self.voting.collected),
            }

    # -----------------------------
    # Timers d'indices
    # -----------------------------
    def set_hint_time(self, index: int, value: str) -> bool:
        return self._round_field("set_hint_time", index, value)

    def set_hint_text(self, index: int, value: str) -> bool:
        return self._round_field("set_hint_text", index, value)

    def _round_field(self, op: str, index: int, value: str) -> bool:
        with self._lock:
            game = self.db.current_game
            if game is None or index < 0:
                return False
            getattr(game, op)(index, value)
            self._changed()
            return True

    def start_timer(self, index: int, duration_text: Optional[str] = None, now: Optional[float] = None) -> bool:
        """Démarre le timer de la manche ; sans texte, utilise l'heure d'indice saisie."""
        with self._lock:
            game = self.db.current_game
            if game is None:
                return False
            text = game.get_hint_time(index) if duration_text is None else duration_text
            ok = self.timers.start_timer(index, text, self._now(now))
            if ok:
                self._changed()
            return ok

    def stop_timer(self, index: int) -> bool:
        with self._lock:
            ok = self.timers.stop_timer(index)
            if ok:
                self._changed()
            return ok

    def timer_status(self, now: Optional[float] = None) -> List[Dict[str, Any]]:
        with self._lock:
            game = self.db.current_game
            if game is None:
                return []
            current = self._now(now)
            rows = []
            for index in range(required_rounds(game)):
                end_time = game.get_timer_end_time(index)
                running = end_time > current
                rows.append({
                    "index": index,
                    "time": game.get_hint_time(index),
                    "text": game.get_hint_text(index),
                    "running": running,
                    "remaining_seconds": round(end_time - current, 1) if running else 0.0,
                    "finished": bool(end_time) and not running,
                    "notified": game.get_timer_notified(index),
                })
            return rows

    # -----------------------------
    # Tick
    # -----------------------------
    def tick(self, now: Optional[float] = None) -> None:
        """Expiration du vote, balayage des timers, puis écriture différée si due."""
        current = self._now(now)
        with self._lock:
            changed = self.voting.tick(current)
            if self.timers.tick(current):
                changed = True
            if changed:
                self._changed()
            self.saver.flush_if_due()

    def shutdown(self) -> bool:
        with self._lock:
            return self.saver.flush()

    # -----------------------------
    # Vue pour l'UI
    # -----------------------------
    def snapshot(self, now: Optional[float] = None) -> Dict[str, Any]:
        with self._lock:
            game = self.db.current_game
            if game is None:
                return {"game": None, "current_game_index": self.db.current_game_index}
            required = required_rounds(game)
            return {
                "current_game_index": self.db.current_game_index,
                "game": {
                    "title": game.title,
                    "description": game.description,
                    "prize": game.prize,
                    "killer": game.killer,
                    "roster": [
                        {"name": name, "status": game.status_of(name)}
                        for name in game.active_players
                    ],
                },
                "required_rounds": required,
                "total_rounds": required + 1,
                "voting": self.voting_status(now),
                "timers": self.timer_status(now),
            }


# -----------------------------
# Singleton (lazy-load)
# -----------------------------
_instance: Optional[MysteryEngine] = None


def build_engine(path: Path = DATABASE_PATH, announce: Optional[AnnounceFunc] = None) -> MysteryEngine:
    """Moteur branché sur un fichier : charge la base et écrit au même endroit."""
    db = load_database(path)
    logger.info(
        "Engine ready",
        extra={"games_total": len(db.games), "players_total": len(db.player_database)},
    )
    return MysteryEngine(db, file_saver(path), announce or BroadcastAnnouncer())


def get_engine() -> MysteryEngine:
    """Garantit une unique instance `MysteryEngine` pour tout le service (dépendance FastAPI)."""
    global _instance
    if _instance is None:
        _instance = build_engine()
    return _instance
