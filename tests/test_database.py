from mystery_host.services.database import NO_GAME, MysteryDatabase


def test_new_game_default_titles_and_selection():
    db = MysteryDatabase()
    assert db.current_game is None
    first = db.new_game()
    second = db.new_game()
    assert (first.title, second.title) == ("New Game 1", "New Game 2")
    assert db.current_game is second
    assert db.select_game(0) is True
    assert db.current_game is first
    assert db.select_game(5) is False
    assert db.current_game is first


def test_remove_current_falls_back_to_first_remaining():
    db = MysteryDatabase()
    a, b, c = db.new_game("a"), db.new_game("b"), db.new_game("c")
    db.select_game(1)
    assert db.remove_game() is True
    assert db.games == [a, c]
    assert db.current_game is a


def test_remove_last_game_clears_current():
    db = MysteryDatabase()
    db.new_game()
    assert db.remove_game() is True
    assert db.current_game is None
    assert db.current_game_index == NO_GAME
    assert db.remove_game() is False


def test_remove_other_game_keeps_current_reference():
    db = MysteryDatabase()
    a, b, c = db.new_game("a"), db.new_game("b"), db.new_game("c")
    assert db.current_game is c
    db.remove_game(0)
    assert db.current_game is c
    db.remove_game(1)
    assert db.current_game is b


def test_get_or_create_player_is_lazy_and_stable():
    db = MysteryDatabase()
    record = db.get_or_create_player("Alice")
    assert db.get_or_create_player("Alice") is record
    assert list(db.player_database) == ["Alice"]


def test_round_trip_is_lossless():
    db = MysteryDatabase()
    game = db.new_game("Manoir")
    game.add_player("A")
    game.add_player("B")
    game.killer = "B"
    game.mark_imprisoned("A")
    game.set_hint_time(1, "2:00")
    game.set_timer_end_time(0, 1700000000.5)
    db.new_game("Phare")
    db.select_game(0)
    alice = db.get_or_create_player("Alice")
    alice.notes = "hésite beaucoup"
    alice.set_whisper(0, "B")
    alice.set_whisper(3, "A")

    restored = MysteryDatabase.from_dict(db.to_dict())
    assert restored == db
    assert restored.current_game.title == "Manoir"
    assert restored.player_database["Alice"].whisper_count == 4


def test_from_dict_is_tolerant():
    assert MysteryDatabase.from_dict(None) == MysteryDatabase()
    assert MysteryDatabase.from_dict(["not", "a", "dict"]) == MysteryDatabase()

    restored = MysteryDatabase.from_dict({
        "games": [{"title": "ok"}, "garbage"],
        "current_game_index": 7,
        "player_database": {"Bob": {"notes": "n"}, "Eve": 3},
    })
    assert [g.title for g in restored.games] == ["ok"]
    assert restored.current_game_index == 0
    assert list(restored.player_database) == ["Bob"]
    assert restored.player_database["Bob"].name == "Bob"


def test_no_current_game_survives_round_trip():
    restored = MysteryDatabase.from_dict({"games": [{"title": "x"}], "current_game_index": -1})
    assert restored.current_game is None
