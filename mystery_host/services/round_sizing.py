"""
Calcul du nombre de manches d'une partie.

Recalculé à chaque lecture depuis le roster vivant (jamais mis en cache) :
toute édition du roster change immédiatement le nombre de champs whisper
et de timers présentés.
"""
from __future__ import annotations

from typing import Optional

from .game_session import GameSession


def living_players(session: GameSession) -> int:
    """Joueurs encore en jeu, hors killer. Borné à 0 (éditions manuelles incohérentes)."""
    killer_count = 1 if session.killer else 0
    living = (
        len(session.active_players)
        - killer_count
        - len(session.dead_players)
        - len(session.imprisoned_players)
    )
    return max(0, living)


def required_rounds(session: Optional[GameSession]) -> int:
    """Manches avec whisper + timer : max(1, vivants // 2), ou 0 sans joueur vivant."""
    if session is None or not session.active_players:
        return 0
    living = living_players(session)
    if living <= 0:
        return 0
    return max(1, living // 2)


def total_rounds(session: Optional[GameSession]) -> int:
    """Manches requises + la manche finale de révélation (sans whisper ni timer)."""
    return required_rounds(session) + 1
