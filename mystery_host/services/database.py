"""
Service: database.py
Rôle:
- Contenir la "base" complète de l'hôte : liste ordonnée des parties, index de la
  partie courante, et fiches joueurs indexées par nom.
- Fournir l'aller-retour sans perte vers un dict JSON-able (persistence.py écrit le fichier).

Partie courante:
- Référence faible = index dans la liste + résolveur. Supprimer la partie courante
  re-résout vers la première partie restante, ou aucune.

Format persisté:
{
  "games": [ {...GameSession...} ],
  "current_game_index": 0,          # -1 = aucune
  "player_database": { "<nom>": {...PlayerRecord...} }
}
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .game_session import GameSession
from .player_record import PlayerRecord

logger = logging.getLogger(__name__)

NO_GAME = -1


@dataclass
class MysteryDatabase:
    games: List[GameSession] = field(default_factory=list)
    current_game_index: int = NO_GAME
    player_database: Dict[str, PlayerRecord] = field(default_factory=dict)

    # -----------------------------
    # Partie courante
    # -----------------------------
    @property
    def current_game(self) -> Optional[GameSession]:
        if 0 <= self.current_game_index < len(self.games):
            return self.games[self.current_game_index]
        return None

    def new_game(self, title: Optional[str] = None) -> GameSession:
        """Ajoute une partie (titre par défaut `New Game N`) et la rend courante."""
        game = GameSession(title=title or f"New Game {len(self.games) + 1}")
        self.games.append(game)
        self.current_game_index = len(self.games) - 1
        logger.info(
            "Game created",
            extra={"game_title": game.title, "games_total": len(self.games)},
        )
        return game

    def select_game(self, index: int) -> bool:
        if not 0 <= index < len(self.games):
            return False
        self.current_game_index = index
        return True

    def remove_game(self, index: Optional[int] = None) -> bool:
        """Supprime la partie `index` (par défaut la courante) et re-résout la courante."""
        target = self.current_game_index if index is None else index
        if not 0 <= target < len(self.games):
            return False
        removed = self.games.pop(target)
        if target == self.current_game_index:
            self.current_game_index = 0 if self.games else NO_GAME
        elif target < self.current_game_index:
            self.current_game_index -= 1
        logger.info(
            "Game removed",
            extra={"game_title": removed.title, "games_total": len(self.games)},
        )
        return True

    # -----------------------------
    # Fiches joueurs
    # -----------------------------
    def get_or_create_player(self, name: str) -> PlayerRecord:
        record = self.player_database.get(name)
        if record is None:
            record = PlayerRecord(name=name)
            self.player_database[name] = record
        return record

    # -----------------------------
    # Sérialisation
    # -----------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "games": [game.to_dict() for game in self.games],
            "current_game_index": self.current_game_index if self.current_game is not None else NO_GAME,
            "player_database": {name: record.to_dict() for name, record in self.player_database.items()},
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "MysteryDatabase":
        """Lecture tolérante : entrées invalides ignorées, index courant borné."""
        if not isinstance(raw, dict):
            return cls()
        games = [GameSession.from_dict(g) for g in raw.get("games") or [] if isinstance(g, dict)]
        players: Dict[str, PlayerRecord] = {}
        player_raw = raw.get("player_database")
        if isinstance(player_raw, dict):
            for name, record in player_raw.items():
                if isinstance(record, dict):
                    players[name] = PlayerRecord.from_dict(name, record)
        try:
            index = int(raw.get("current_game_index", NO_GAME))
        except (TypeError, ValueError):
            index = NO_GAME
        if index != NO_GAME and not 0 <= index < len(games):
            index = 0 if games else NO_GAME
        return cls(games=games, current_game_index=index, player_database=players)
