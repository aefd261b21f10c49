"""
Sparse field store: petit conteneur indexé par numéro de manche.

- Une clé absente vaut la valeur par défaut (chaîne vide, timestamp 0.0, False).
- Écrire la valeur par défaut SUPPRIME la clé : le store reste minimal.
- Lire une clé absente renvoie le défaut, jamais d'erreur.

Utilisé pour les whispers d'un joueur et pour les quatre tables d'une partie
(heures d'indice, textes d'indice, fins de timer, drapeaux "notifié").
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar

V = TypeVar("V")


class SparseFieldStore(Generic[V]):
    def __init__(self, default: V, items: Optional[Dict[int, V]] = None) -> None:
        self.default = default
        self._data: Dict[int, V] = {}
        for index, value in (items or {}).items():
            self.set(index, value)

    def get(self, index: int) -> V:
        return self._data.get(index, self.default)

    def set(self, index: int, value: V) -> None:
        if value == self.default:
            self._data.pop(index, None)
        else:
            self._data[index] = value

    def __contains__(self, index: object) -> bool:
        return index in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._data))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseFieldStore):
            return NotImplemented
        return self.default == other.default and self._data == other._data

    def __repr__(self) -> str:
        return f"SparseFieldStore(default={self.default!r}, items={self._data!r})"

    def items(self) -> list[Tuple[int, V]]:
        """Copie triée des paires (index, valeur) : sûre à itérer pendant une mutation."""
        return sorted(self._data.items())

    def count(self) -> int:
        return len(self._data)

    def max_index_plus_one(self) -> int:
        return max(self._data) + 1 if self._data else 0

    def first_empty_index(self) -> int:
        """Plus petit index sans valeur, en partant de 0."""
        index = 0
        while index in self._data:
            index += 1
        return index

    # -----------------------------
    # Sérialisation (clés JSON = index décimal)
    # -----------------------------
    def to_dict(self) -> Dict[str, V]:
        return {str(index): value for index, value in sorted(self._data.items())}

    @classmethod
    def from_dict(
        cls,
        raw: Any,
        default: V,
        coerce: Callable[[Any], V],
    ) -> "SparseFieldStore[V]":
        """
        Reconstruit un store depuis un objet JSON.
        Les clés non entières/négatives et les valeurs non convertibles sont ignorées.
        """
        store: SparseFieldStore[V] = cls(default)
        if not isinstance(raw, dict):
            return store
        for key, value in raw.items():
            try:
                index = int(key)
                converted = coerce(value)
            except (TypeError, ValueError):
                continue
            if index < 0:
                continue
            store.set(index, converted)
        return store
