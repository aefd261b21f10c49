"""
Service: player_record.py
Rôle:
- Fiche persistée d'un joueur (identité = nom unique dans la base) :
  notes libres de l'hôte + whispers reçus, un par manche.

Cycle de vie:
- Créée à la demande (sélection dans l'UI ou whisper retenu à la clôture d'un vote),
  jamais supprimée par le moteur.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .sparse_store import SparseFieldStore


def _whisper_store() -> SparseFieldStore[str]:
    return SparseFieldStore("")


@dataclass
class PlayerRecord:
    name: str
    notes: str = ""
    whispers: SparseFieldStore[str] = field(default_factory=_whisper_store)

    def get_whisper(self, index: int) -> str:
        return self.whispers.get(index)

    def set_whisper(self, index: int, value: str) -> None:
        self.whispers.set(index, value or "")

    @property
    def whisper_count(self) -> int:
        return self.whispers.max_index_plus_one()

    def append_whisper(self, value: str) -> int:
        """Range `value` dans le premier slot vide (jamais d'écrasement). Retourne l'index utilisé."""
        slot = self.whispers.first_empty_index()
        self.whispers.set(slot, value)
        return slot

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "notes": self.notes,
            "whispers": self.whispers.to_dict(),
        }

    @classmethod
    def from_dict(cls, name: str, raw: Dict[str, Any]) -> "PlayerRecord":
        return cls(
            name=str(raw.get("name") or name),
            notes=str(raw.get("notes") or ""),
            whispers=SparseFieldStore.from_dict(raw.get("whispers"), "", str),
        )
