from __future__ import annotations

from typing import List, Tuple

import pytest

from mystery_host.services.database import MysteryDatabase
from mystery_host.services.mystery_engine import MysteryEngine


class AnnounceRecorder:
    """Collaborateur `announce` de test : garde (kind, text) dans l'ordre."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []

    def __call__(self, text: str, kind: str) -> None:
        self.calls.append((kind, text))

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.calls]


class SaveRecorder:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.snapshots: list = []

    def __call__(self, snapshot: dict) -> bool:
        self.snapshots.append(snapshot)
        return self.result


@pytest.fixture
def announce() -> AnnounceRecorder:
    return AnnounceRecorder()


@pytest.fixture
def saved() -> SaveRecorder:
    return SaveRecorder()


@pytest.fixture
def engine(announce, saved) -> MysteryEngine:
    return MysteryEngine(MysteryDatabase(), saved, announce, voting_duration=300.0, save_throttle=0.0)


@pytest.fixture
def game_abc(engine):
    """Partie courante avec A, B, C dans le roster et C désigné killer."""
    game = engine.new_game("Manoir")
    for name in ("A", "B", "C"):
        engine.add_player(name)
    engine.set_killer("C")
    return game
