from mystery_host.services import persistence
from mystery_host.services.database import MysteryDatabase
from mystery_host.services.persistence import ThrottledSaver, load_database, save_database


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "db" / "mystery_db.json"
    db = MysteryDatabase()
    game = db.new_game("Manoir")
    game.add_player("A")
    game.set_hint_text(0, "Indice ◆ accentué é")
    db.get_or_create_player("A").set_whisper(0, "B")

    assert save_database(db.to_dict(), path) is True
    assert path.exists()
    assert not path.with_name(path.name + ".tmp").exists()
    assert load_database(path) == db


def test_load_missing_file_gives_empty_database(tmp_path):
    assert load_database(tmp_path / "absent.json") == MysteryDatabase()


def test_load_corrupt_file_gives_empty_database(tmp_path):
    path = tmp_path / "mystery_db.json"
    path.write_bytes(b"{ not json")
    assert load_database(path) == MysteryDatabase()


def test_save_failure_is_reported_not_raised(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    # le parent est un fichier : impossible d'y créer un dossier
    assert save_database({"games": []}, blocker / "sub" / "db.json") is False


def test_throttle_defers_then_flushes_on_tick(saved):
    clock = FakeClock()
    saver = ThrottledSaver(MysteryDatabase(), saved, throttle_seconds=2.0, clock=clock)

    assert saver.request_save() is True
    assert len(saved.snapshots) == 1

    clock.now += 0.5
    assert saver.request_save() is False
    assert saver.dirty is True
    assert saver.flush_if_due() is False
    assert len(saved.snapshots) == 1

    clock.now += 2.0
    assert saver.flush_if_due() is True
    assert saver.dirty is False
    assert len(saved.snapshots) == 2
    assert saver.flush_if_due() is False


def test_failed_save_stays_dirty_for_retry(saved):
    clock = FakeClock()
    saved.result = False
    db = MysteryDatabase()
    saver = ThrottledSaver(db, saved, throttle_seconds=1.0, clock=clock)

    db.new_game("en mémoire")
    assert saver.request_save() is False
    assert saver.dirty is True
    assert db.current_game.title == "en mémoire"

    saved.result = True
    clock.now += 1.0
    assert saver.flush_if_due() is True
    assert saved.snapshots[-1]["games"][0]["title"] == "en mémoire"


def test_raising_save_collaborator_is_contained():
    def boom(snapshot):
        raise OSError("disk gone")

    saver = ThrottledSaver(MysteryDatabase(), boom, throttle_seconds=0.0, clock=FakeClock())
    assert saver.request_save() is False
    assert saver.dirty is True


def test_flush_forces_write(saved):
    clock = FakeClock()
    saver = ThrottledSaver(MysteryDatabase(), saved, throttle_seconds=60.0, clock=clock)
    saver.request_save()
    assert saver.flush() is True
    assert len(saved.snapshots) == 2


def test_file_saver_targets_path(tmp_path):
    path = tmp_path / "x.json"
    save = persistence.file_saver(path)
    assert save(MysteryDatabase().to_dict()) is True
    assert load_database(path) == MysteryDatabase()
