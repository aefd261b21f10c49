from mystery_host.services.game_session import (
    STATUS_ACTIVE,
    STATUS_DEAD,
    STATUS_IMPRISONED,
    STATUS_KILLER,
    GameSession,
)


def test_roster_keeps_order_and_rejects_duplicates():
    game = GameSession()
    assert game.add_player("Alice") is True
    assert game.add_player("Bob") is True
    assert game.add_player("Alice") is False
    assert game.add_player("") is False
    assert game.active_players == ["Alice", "Bob"]


def test_dead_and_imprisoned_are_exclusive():
    game = GameSession(active_players=["Alice"])
    game.mark_imprisoned("Alice")
    game.mark_dead("Alice")
    assert "Alice" in game.dead_players
    assert "Alice" not in game.imprisoned_players

    game.mark_imprisoned("Alice")
    assert "Alice" in game.imprisoned_players
    assert "Alice" not in game.dead_players

    for op in ("mark_dead", "mark_imprisoned", "mark_dead", "mark_dead", "mark_imprisoned"):
        getattr(game, op)("Alice")
        assert not (game.dead_players & game.imprisoned_players)


def test_clear_status():
    game = GameSession(active_players=["Alice"])
    game.mark_dead("Alice")
    game.clear_status("Alice")
    assert game.status_of("Alice") == STATUS_ACTIVE


def test_remove_player_clears_statuses_and_killer():
    game = GameSession(active_players=["Alice", "Bob"], killer="Bob")
    game.mark_dead("Bob")
    assert game.remove_player("Bob") is True
    assert game.active_players == ["Alice"]
    assert "Bob" not in game.dead_players
    assert game.killer == ""
    assert game.remove_player("Bob") is False


def test_remove_player_keeps_other_killer():
    game = GameSession(active_players=["Alice", "Bob"], killer="Bob")
    game.mark_imprisoned("Alice")
    game.remove_player("Alice")
    assert game.killer == "Bob"
    assert not game.imprisoned_players


def test_status_label_priority():
    game = GameSession(active_players=["A", "B", "C", "D"], killer="C")
    game.mark_dead("A")
    game.mark_imprisoned("B")
    assert [game.status_of(n) for n in game.active_players] == [
        STATUS_DEAD,
        STATUS_IMPRISONED,
        STATUS_KILLER,
        STATUS_ACTIVE,
    ]
    game.mark_dead("C")
    assert game.status_of("C") == STATUS_DEAD


def test_killer_may_be_outside_roster():
    game = GameSession(active_players=["A"], killer="Zed")
    assert game.killer == "Zed"
    assert game.status_of("A") == STATUS_ACTIVE


def test_round_fields_default_and_compaction():
    game = GameSession()
    assert game.get_hint_time(2) == ""
    assert game.get_timer_end_time(2) == 0.0
    assert game.get_timer_notified(2) is False

    game.set_hint_text(2, "Le jardinier ment.")
    game.set_timer_end_time(2, 1234.0)
    game.set_timer_notified(2, True)
    game.set_hint_text(2, "")
    game.set_timer_end_time(2, 0.0)
    game.set_timer_notified(2, False)
    assert len(game.hint_texts) == 0
    assert len(game.timer_end_times) == 0
    assert len(game.timer_notified) == 0


def test_round_trip():
    game = GameSession(title="Manoir", description="Une nuit d'orage", prize="1M gil", killer="C")
    for name in ("A", "B", "C"):
        game.add_player(name)
    game.mark_dead("A")
    game.set_hint_time(0, "1:30")
    game.set_hint_text(0, "Traces de boue")
    game.set_timer_end_time(0, 1700000000.25)
    game.set_timer_notified(0, True)

    restored = GameSession.from_dict(game.to_dict())
    assert restored == game


def test_from_dict_repairs_overlapping_statuses():
    restored = GameSession.from_dict({
        "active_players": ["A", "A", "B"],
        "dead_players": ["A"],
        "imprisoned_players": ["A", "B"],
        "timer_notified": {"0": "yes", "1": True},
    })
    assert restored.active_players == ["A", "B"]
    assert restored.dead_players == {"A"}
    assert restored.imprisoned_players == {"B"}
    assert restored.timer_notified.items() == [(1, True)]
