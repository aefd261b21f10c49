"""
Service: hint_timers.py
Rôle:
- Un compte à rebours "one-shot" par manche (sauf la manche finale) : à expiration,
  le texte d'indice de la manche est annoncé une seule fois.

État (dans la partie, donc persisté):
- timer_end_times[i] : fin du timer (0.0 = arrêté)
- timer_notified[i]  : verrou one-shot, passe à True au déclenchement

Saisie de durée: "minutes" ou "minutes:secondes" (entiers). Toute autre forme est
rejetée par un booléen, sans exception ni changement d'état.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from .announcer import AnnounceFunc
from .database import MysteryDatabase
from .game_session import NO_TIME
from .round_sizing import required_rounds

logger = logging.getLogger(__name__)


def _parse_int(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


def parse_time_string(text: Optional[str]) -> Tuple[bool, int, int]:
    """
    "5:30" -> (True, 5, 30) ; "5" -> (True, 5, 0) ;
    "", "5:30:10", "abc" -> (False, 0, 0).
    """
    if not text or not text.strip():
        return False, 0, 0
    parts = text.split(":")
    if len(parts) == 2:
        minutes, seconds = _parse_int(parts[0]), _parse_int(parts[1])
        if minutes is None or seconds is None:
            return False, 0, 0
        return True, minutes, seconds
    if len(parts) == 1:
        minutes = _parse_int(parts[0])
        if minutes is None:
            return False, 0, 0
        return True, minutes, 0
    return False, 0, 0


class TimerSweep:
    def __init__(self, db: MysteryDatabase, announce: AnnounceFunc) -> None:
        self.db = db
        self.announce = announce

    def start_timer(self, index: int, duration_text: str, now: float) -> bool:
        game = self.db.current_game
        if game is None:
            return False
        if not 0 <= index < required_rounds(game):
            logger.warning("Timer index out of range", extra={"timer_index": index})
            return False
        ok, minutes, seconds = parse_time_string(duration_text)
        if not ok:
            logger.warning("Invalid timer duration", extra={"timer_index": index, "duration_text": duration_text})
            return False
        duration = minutes * 60 + seconds
        try:
            end_time = now + duration
        except OverflowError:
            # durée au-delà de ce qu'un timestamp float peut représenter
            logger.warning("Invalid timer duration", extra={"timer_index": index, "duration_text": duration_text})
            return False
        game.set_timer_end_time(index, end_time)
        game.set_timer_notified(index, False)
        logger.info("Timer started", extra={"timer_index": index, "timer_seconds": duration})
        return True

    def stop_timer(self, index: int) -> bool:
        game = self.db.current_game
        if game is None or index < 0:
            return False
        game.set_timer_end_time(index, NO_TIME)
        return True

    def is_running(self, index: int, now: float) -> bool:
        game = self.db.current_game
        return game is not None and game.get_timer_end_time(index) > now

    def tick(self, now: float) -> int:
        """Déclenche les timers expirés non notifiés. Retourne le nombre d'annonces."""
        game = self.db.current_game
        if game is None:
            return 0
        fired = 0
        # snapshot : une annonce peut muter la partie pendant le balayage
        for index, end_time in game.timer_end_times.items():
            if end_time == NO_TIME or now < end_time or game.get_timer_notified(index):
                continue
            text = game.get_hint_text(index)
            self.announce(f"Hint {index + 1} : {text}", kind="hint_fired")
            game.set_timer_notified(index, True)
            fired += 1
            logger.info("Hint fired", extra={"timer_index": index})
        return fired
