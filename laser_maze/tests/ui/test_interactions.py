"""Headless interaction tests for the pygame board widget and app.

Rendering relies on the fixtures in ``conftest.py`` and uses a fixed
``cell_size`` so pixel positions are predictable.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from laser_maze.game import GridPos, Mirror, MirrorOrientation
from laser_maze.levels import DEFAULT_LEVEL_ROOT, LevelCatalog
from laser_maze.progress import MemoryStore
from laser_maze.session import PHASE_LEVEL_COMPLETE, PHASE_MENU, PHASE_PLAYING, GameProgress
from laser_maze.ui import layout
from laser_maze.ui.main import LaserMazeApp, UIDirectories
from laser_maze.ui.toolkit import LaserMazeUI


CELL = 32


def make_ui(pygame, level_id: int = 0) -> LaserMazeUI:
    progress = GameProgress(LevelCatalog.load(DEFAULT_LEVEL_ROOT), MemoryStore())
    progress.start(level_id)
    level = progress.session.level
    return LaserMazeUI(
        progress,
        cell_size=CELL,
        surface=pygame.Surface((level.cols * CELL, level.rows * CELL)),
    )


def click_at(pygame, row: int, col: int):
    pos = (col * CELL + CELL // 2, row * CELL + CELL // 2)
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pos)


def test_click_toggles_mirror_and_spawns_effects(pygame_module):
    pygame = pygame_module
    ui = make_ui(pygame)

    events = ui.process_events([click_at(pygame, 1, 2)])

    assert ui.session.grid[1][2] == Mirror(MirrorOrientation.BACKSLASH)
    assert ui.session.move_count == 1
    assert ui.selected == GridPos(1, 2)
    assert ui.progress.phase == PHASE_LEVEL_COMPLETE
    assert [event.kind for event in events] == ["target_newly_hit", "reflection"]
    assert [(effect.kind, effect.position) for effect in ui.effects] == [
        ("hit", GridPos(3, 2)),
        ("reflect", GridPos(1, 2)),
        ("complete", None),
    ]


def test_effects_expire_with_time(pygame_module):
    ui = make_ui(pygame_module)
    ui.process_events([click_at(pygame_module, 1, 2)])

    ui.update(1.0)

    assert [effect.kind for effect in ui.effects] == ["complete"]
    ui.update(1.0)
    assert ui.effects == []


def test_right_click_and_wall_click_are_ignored(pygame_module):
    pygame = pygame_module
    ui = make_ui(pygame, level_id=3)

    right = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(80, 48))
    assert ui.process_events([right, click_at(pygame, 1, 3)]) == []
    assert ui.session.move_count == 0
    assert ui.effects == []


def test_wall_event_spawns_wall_effect(pygame_module):
    ui = make_ui(pygame_module, level_id=3)

    ui.handle_click((2 * CELL + 5, 1 * CELL + 5))

    assert ("wall", GridPos(3, 1)) in [(effect.kind, effect.position) for effect in ui.effects]


def test_grid_from_pixel_bounds(pygame_module):
    ui = make_ui(pygame_module)

    assert ui.grid_from_pixel((0, 0)) == GridPos(0, 0)
    assert ui.grid_from_pixel((5 * CELL - 1, 5 * CELL - 1)) == GridPos(4, 4)
    assert ui.grid_from_pixel((5 * CELL, 10)) is None
    assert ui.grid_from_pixel((-1, 10)) is None


def test_render_paints_walls_and_background(pygame_module):
    ui = make_ui(pygame_module, level_id=3)

    surface = ui.render()

    wall_corner = (3 * CELL + 5, 1 * CELL + 5)
    assert tuple(surface.get_at(wall_corner))[:3] == layout.WALL_COLOR
    empty_corner = (5 * CELL + 5, 5 * CELL + 5)
    assert tuple(surface.get_at(empty_corner))[:3] == layout.BOARD_BACKGROUND_COLOR


@pytest.fixture
def app(pygame_module, tmp_path: Path) -> LaserMazeApp:
    directories = UIDirectories(DEFAULT_LEVEL_ROOT, tmp_path / "completed.json")
    return LaserMazeApp(directories=directories, start_level=0)


def test_app_keys_switch_and_restart_levels(pygame_module, app: LaserMazeApp):
    pygame = pygame_module

    app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_RIGHT))
    assert app.ui.session.level_id == 1

    app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT))
    app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT))
    assert app.ui.session.level_id == len(app.catalog) - 1

    app.progress.toggle(1, 4)
    app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_r))
    assert app.ui.session.move_count == 0

    app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert app.progress.phase == PHASE_MENU
    assert app.menu_index == len(app.catalog) - 1
    app.draw()


def test_app_completion_is_persisted(pygame_module, app: LaserMazeApp, tmp_path: Path):
    pygame = pygame_module
    board_x, board_y = app._board_offset()
    cell = app.ui.cell_size
    pos = (board_x + 2 * cell + cell // 2, board_y + 1 * cell + cell // 2)

    app.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pos))

    assert app.progress.phase == PHASE_LEVEL_COMPLETE
    assert (tmp_path / "completed.json").read_text(encoding="utf-8") == "[0]"
    app.draw()

    app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_RETURN))
    assert app.progress.phase == PHASE_PLAYING
    assert app.ui.session.level_id == 1
