"""
Service: voting.py
Rôle:
- Fenêtre de vote minutée (IDLE → ACTIVE → IDLE) qui collecte au plus UN whisper
  par joueur éligible, puis range les whispers dans les fiches joueurs à la clôture.

Règles:
- Éligible = fenêtre active, partie courante, émetteur dans le roster, émetteur ≠ killer,
  et aucun whisper déjà retenu pour lui dans cette fenêtre (premier arrivé gagne).
- Les whispers inéligibles sont ignorés SANS retour à l'émetteur : no-op volontaire.
- Clôture (manuelle ou expiration) : chaque whisper va dans le premier slot vide de la
  fiche du joueur ; on n'écrase jamais un slot rempli, l'historique s'accumule.

L'état de la fenêtre vit ici, pas dans la partie : il n'est pas persisté.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Set

from mystery_host.config.settings import settings
from .announcer import AnnounceFunc
from .database import MysteryDatabase

logger = logging.getLogger(__name__)


class VotingController:
    def __init__(
        self,
        db: MysteryDatabase,
        announce: AnnounceFunc,
        duration_seconds: float = settings.VOTING_DURATION_SECONDS,
    ) -> None:
        self.db = db
        self.announce = announce
        self.duration_seconds = duration_seconds
        self.started_at: Optional[float] = None
        self.collected: Dict[str, str] = {}
        self.seen: Set[str] = set()

    @property
    def is_active(self) -> bool:
        return self.started_at is not None

    def remaining(self, now: float) -> float:
        if self.started_at is None:
            return 0.0
        return max(0.0, self.duration_seconds - (now - self.started_at))

    def start(self, now: float) -> bool:
        """Ouvre une fenêtre (no-op silencieux sans partie courante)."""
        if self.db.current_game is None:
            return False
        self.started_at = now
        self.collected.clear()
        self.seen.clear()
        self.announce("Voting period started! Send your votes via whisper.", kind="voting_started")
        logger.info("Voting started", extra={"voting_started_at": now})
        return True

    def submit(self, sender: str, message: str) -> bool:
        game = self.db.current_game
        if (
            not self.is_active
            or game is None
            or sender not in game.active_players
            or sender == game.killer
            or sender in self.seen
            or sender in self.collected
        ):
            logger.debug("Whisper ignored", extra={"whisper_sender": sender})
            return False
        self.collected[sender] = message
        self.seen.add(sender)
        logger.debug("Whisper captured", extra={"whisper_sender": sender})
        return True

    def tick(self, now: float) -> bool:
        """Clôture automatique à expiration. Retourne True si la fenêtre vient d'être fermée."""
        if self.started_at is None or now - self.started_at < self.duration_seconds:
            return False
        self.announce("Voting period has ended!", kind="voting_ended")
        self.close()
        return True

    def close(self) -> int:
        """Distribue les whispers collectés et repasse en IDLE. Retourne le nombre traité."""
        processed = len(self.collected)
        if processed:
            for name, message in self.collected.items():
                record = self.db.get_or_create_player(name)
                slot = record.append_whisper(message)
                logger.debug("Whisper stored", extra={"whisper_sender": name, "whisper_slot": slot})
            self.announce(f"Processed {processed} whispers from voting period.", kind="voting_processed")
        self.collected.clear()
        self.seen.clear()
        self.started_at = None
        if processed:
            logger.info("Voting closed", extra={"whispers_processed": processed})
        return processed
