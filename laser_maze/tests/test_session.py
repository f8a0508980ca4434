import pytest

from laser_maze.levels import DEFAULT_LEVEL_ROOT, LevelCatalog, LevelDefinition
from laser_maze.progress import MemoryStore
from laser_maze.session import (
    PHASE_ALL_COMPLETE,
    PHASE_LEVEL_COMPLETE,
    PHASE_MENU,
    PHASE_PLAYING,
    GameProgress,
    start_session,
)


def two_level_catalog() -> LevelCatalog:
    return LevelCatalog(
        [
            LevelDefinition.from_rows("one", [">./", "..T"], par=1),
            LevelDefinition.from_rows("two", [">./", "T.\\"], par=2),
        ]
    )


def test_progress_starts_in_menu_with_stored_completions():
    progress = GameProgress(two_level_catalog(), MemoryStore([1]))

    assert progress.phase == PHASE_MENU
    assert progress.session is None
    assert progress.completed == frozenset({1})


def test_start_rejects_unknown_level():
    progress = GameProgress(two_level_catalog(), MemoryStore())

    with pytest.raises(IndexError):
        progress.start(5)


def test_completion_is_recorded_in_store():
    store = MemoryStore()
    progress = GameProgress(two_level_catalog(), store)
    progress.start(0)

    progress.toggle(0, 2)

    assert progress.phase == PHASE_LEVEL_COMPLETE
    assert store.load() == {0}
    assert progress.session.completed_level_ids == frozenset({0})


def test_toggles_ignored_outside_playing_phase():
    progress = GameProgress(two_level_catalog(), MemoryStore())
    progress.start(0)
    progress.toggle(0, 2)

    assert progress.toggle(0, 2) == []
    assert progress.session.move_count == 1


def test_finishing_last_level_reports_all_complete():
    store = MemoryStore([0])
    progress = GameProgress(two_level_catalog(), store)
    progress.start(1)

    progress.toggle(0, 2)
    assert progress.phase == PHASE_PLAYING
    progress.toggle(1, 2)

    assert progress.phase == PHASE_ALL_COMPLETE
    assert progress.all_complete()
    assert store.load() == {0, 1}


def test_next_level_and_menu():
    progress = GameProgress(two_level_catalog(), MemoryStore())

    first = progress.next_level()
    assert first.level_id == 0
    assert progress.level_index == 0

    second = progress.next_level()
    assert second.level_id == 1

    assert progress.next_level() is None
    assert progress.phase == PHASE_MENU


def test_restart_resets_moves():
    progress = GameProgress(two_level_catalog(), MemoryStore())
    assert progress.restart() is None
    progress.start(1)
    progress.toggle(0, 2)

    session = progress.restart()

    assert session.move_count == 0
    assert progress.phase == PHASE_PLAYING


def test_session_completion_needs_store_only_when_complete():
    level = LevelCatalog.load(DEFAULT_LEVEL_ROOT)[0]
    store = MemoryStore()
    session = start_session(level, level_id=0)

    assert session.record_completion(store) == frozenset()
    session.toggle_mirror(1, 2)
    assert session.record_completion(store) == frozenset({0})
    assert store.load() == {0}
