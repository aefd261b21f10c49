"""
Service: game_session.py
Rôle:
- État d'une partie de murder mystery : titre/description/prix, roster ordonné,
  statuts (mort / emprisonné), killer désigné, et quatre tables indexées par manche
  (heure d'indice, texte d'indice, fin de timer, drapeau "déjà notifié").

Invariants:
- `active_players` conserve l'ordre d'insertion, sans doublon.
- Un nom n'est jamais à la fois dans `dead_players` et `imprisoned_players`.
- Retirer un joueur du roster efface aussi ses statuts et le killer si c'était lui.
- `killer` peut désigner un nom hors roster (saisie libre de l'hôte).

Aucun verrou ici : la sérialisation des accès est assurée par le moteur.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from .sparse_store import SparseFieldStore

NO_TIME = 0.0  # timestamp "zéro" = timer arrêté

STATUS_DEAD = "dead"
STATUS_IMPRISONED = "imprisoned"
STATUS_KILLER = "killer"
STATUS_ACTIVE = "active"


def _strict_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError("expected a JSON boolean")
    return value


def _text_store() -> SparseFieldStore[str]:
    return SparseFieldStore("")


def _time_store() -> SparseFieldStore[float]:
    return SparseFieldStore(NO_TIME)


def _flag_store() -> SparseFieldStore[bool]:
    return SparseFieldStore(False)


@dataclass
class GameSession:
    title: str = ""
    description: str = ""
    prize: str = ""
    killer: str = ""
    active_players: List[str] = field(default_factory=list)
    dead_players: Set[str] = field(default_factory=set)
    imprisoned_players: Set[str] = field(default_factory=set)
    hint_times: SparseFieldStore[str] = field(default_factory=_text_store)
    hint_texts: SparseFieldStore[str] = field(default_factory=_text_store)
    timer_end_times: SparseFieldStore[float] = field(default_factory=_time_store)
    timer_notified: SparseFieldStore[bool] = field(default_factory=_flag_store)

    # -----------------------------
    # Roster
    # -----------------------------
    def add_player(self, name: str) -> bool:
        if not name or name in self.active_players:
            return False
        self.active_players.append(name)
        return True

    def remove_player(self, name: str) -> bool:
        if name not in self.active_players:
            return False
        self.active_players.remove(name)
        self.dead_players.discard(name)
        self.imprisoned_players.discard(name)
        if self.killer == name:
            self.killer = ""
        return True

    def mark_dead(self, name: str) -> None:
        self.dead_players.add(name)
        self.imprisoned_players.discard(name)  # exclusif

    def mark_imprisoned(self, name: str) -> None:
        self.imprisoned_players.add(name)
        self.dead_players.discard(name)  # exclusif

    def clear_status(self, name: str) -> None:
        self.dead_players.discard(name)
        self.imprisoned_players.discard(name)

    def status_of(self, name: str) -> str:
        """Libellé affiché par l'UI (priorité : mort > emprisonné > killer > actif)."""
        if name in self.dead_players:
            return STATUS_DEAD
        if name in self.imprisoned_players:
            return STATUS_IMPRISONED
        if name and name == self.killer:
            return STATUS_KILLER
        return STATUS_ACTIVE

    # -----------------------------
    # Champs par manche
    # -----------------------------
    def get_hint_time(self, index: int) -> str:
        return self.hint_times.get(index)

    def set_hint_time(self, index: int, value: str) -> None:
        self.hint_times.set(index, value or "")

    def get_hint_text(self, index: int) -> str:
        return self.hint_texts.get(index)

    def set_hint_text(self, index: int, value: str) -> None:
        self.hint_texts.set(index, value or "")

    def get_timer_end_time(self, index: int) -> float:
        return self.timer_end_times.get(index)

    def set_timer_end_time(self, index: int, value: float) -> None:
        self.timer_end_times.set(index, float(value))

    def get_timer_notified(self, index: int) -> bool:
        return self.timer_notified.get(index)

    def set_timer_notified(self, index: int, value: bool) -> None:
        self.timer_notified.set(index, bool(value))

    # -----------------------------
    # Sérialisation
    # -----------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "prize": self.prize,
            "killer": self.killer,
            "active_players": list(self.active_players),
            "dead_players": sorted(self.dead_players),
            "imprisoned_players": sorted(self.imprisoned_players),
            "hint_times": self.hint_times.to_dict(),
            "hint_texts": self.hint_texts.to_dict(),
            "timer_end_times": self.timer_end_times.to_dict(),
            "timer_notified": self.timer_notified.to_dict(),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GameSession":
        active: List[str] = []
        for name in raw.get("active_players") or []:
            if isinstance(name, str) and name and name not in active:
                active.append(name)
        dead = {n for n in raw.get("dead_players") or [] if isinstance(n, str)}
        imprisoned = {n for n in raw.get("imprisoned_players") or [] if isinstance(n, str)}
        # un fichier édité à la main ne doit pas casser l'exclusivité des statuts
        imprisoned -= dead
        return cls(
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            prize=str(raw.get("prize") or ""),
            killer=str(raw.get("killer") or ""),
            active_players=active,
            dead_players=dead,
            imprisoned_players=imprisoned,
            hint_times=SparseFieldStore.from_dict(raw.get("hint_times"), "", str),
            hint_texts=SparseFieldStore.from_dict(raw.get("hint_texts"), "", str),
            timer_end_times=SparseFieldStore.from_dict(raw.get("timer_end_times"), NO_TIME, float),
            timer_notified=SparseFieldStore.from_dict(raw.get("timer_notified"), False, _strict_bool),
        )
