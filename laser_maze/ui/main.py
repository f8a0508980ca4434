"""Interactive pygame front end and command line launcher for the laser maze."""

from __future__ import annotations

import argparse
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

import pygame

from ..levels import DEFAULT_LEVEL_ROOT, LevelCatalog
from ..progress import CompletedLevelStore, default_progress_path
from ..session import (
    PHASE_ALL_COMPLETE,
    PHASE_LEVEL_COMPLETE,
    PHASE_MENU,
    PHASE_PLAYING,
    GameProgress,
)
from ..solver import solve
from . import layout
from .toolkit import LaserMazeUI

LEVEL_ENV_VAR = "LASER_MAZE_LEVEL_ROOT"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UIDirectories:
    """Bundle with resolved paths required by the UI."""

    level_root: Path
    progress_path: Path


def _read_directory(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> UIDirectories:
    """Resolve UI paths using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if the level directory
        does not exist on disk.  The progress file is created on first save.
    """

    level_root = _read_directory(LEVEL_ENV_VAR, DEFAULT_LEVEL_ROOT)
    if check_exists and not level_root.exists():
        raise FileNotFoundError(f"Level directory does not exist: {level_root}")
    return UIDirectories(level_root=level_root, progress_path=default_progress_path())


class LaserMazeApp:
    """Pygame driven application for the laser maze."""

    def __init__(
        self,
        *,
        directories: Optional[UIDirectories] = None,
        start_level: Optional[int] = None,
    ) -> None:
        pygame.init()
        pygame.display.set_caption("Laser Maze")
        self.directories = directories or resolve_directories()
        self.catalog = LevelCatalog.load(self.directories.level_root)
        if not len(self.catalog):
            raise RuntimeError("No levels available to load.")
        self.store = CompletedLevelStore(self.directories.progress_path)
        self.progress = GameProgress(self.catalog, self.store)
        self.menu_index = 0

        self.progress.start(start_level or 0)
        if start_level is None:
            self.progress.go_to_menu()

        self.font = pygame.font.SysFont("monospace", 18, bold=True)
        self.small_font = pygame.font.SysFont("monospace", 13)
        self.ui = LaserMazeUI(self.progress)
        self.screen = pygame.display.set_mode(self._window_size())
        self.clock = pygame.time.Clock()
        self.last_time = time.perf_counter()

    def _geometry(self) -> layout.BoardGeometry:
        level = self.ui.session.level
        return layout.compute_geometry(level.rows, level.cols, self.ui.cell_size)

    def _window_size(self) -> Tuple[int, int]:
        geometry = self._geometry()
        menu_height = layout.HEADER_HEIGHT + 28 * len(self.catalog) + layout.GRID_PADDING * 2
        return geometry.window[0], max(geometry.window[1], menu_height)

    # ------------------------------------------------------------------
    # Level handling
    # ------------------------------------------------------------------
    def enter_level(self, level_id: int) -> None:
        level_id %= len(self.catalog)
        logger.debug("entering level %d", level_id)
        self.progress.start(level_id)
        self._on_session_replaced()

    def _on_session_replaced(self) -> None:
        self.ui.reset()
        self.screen = pygame.display.set_mode(self._window_size())
        level = self.ui.session.level
        pygame.display.set_caption(f"Laser Maze - {level.name}")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def draw(self) -> None:
        self.screen.fill(layout.BACKGROUND_COLOR)
        if self.progress.phase == PHASE_MENU:
            self._draw_menu()
        else:
            self._draw_level()
        pygame.display.flip()

    def _blit_text(self, text: str, font, color, pos: Tuple[int, int], align: str = "left") -> None:
        label = font.render(text, True, color)
        rect = label.get_rect()
        if align == "right":
            rect.topright = pos
        elif align == "center":
            rect.midtop = pos
        else:
            rect.topleft = pos
        self.screen.blit(label, rect)

    def _draw_menu(self) -> None:
        width = self.screen.get_width()
        self._blit_text("LASER MAZE", self.font, layout.ACCENT_COLOR, (width // 2, 16), "center")
        y = layout.HEADER_HEIGHT
        for index, level in enumerate(self.catalog):
            done = index in self.progress.completed
            color = layout.ACCENT_COLOR if index == self.menu_index else layout.TEXT_COLOR
            marker = "*" if done else " "
            text = f"{marker} {index + 1:2d}. {level.name}"
            self._blit_text(text, self.small_font, color, (layout.GRID_PADDING, y))
            y += 28

    def _draw_level(self) -> None:
        session = self.ui.session
        geometry = self._geometry()
        width = geometry.window[0]
        padding = layout.GRID_PADDING

        self._blit_text(
            f"Level {session.level_id + 1}", self.font, layout.TEXT_COLOR, (padding, 10)
        )
        self._blit_text(session.level.name, self.small_font, layout.MUTED_TEXT_COLOR, (padding, 34))
        self._blit_text(
            f"Moves: {session.move_count}", self.font, layout.ACCENT_COLOR, (width - padding, 10), "right"
        )
        self._blit_text(
            f"Par: {session.level.par}", self.small_font, layout.MUTED_TEXT_COLOR, (width - padding, 34), "right"
        )

        board_x, board_y, _, _ = geometry.board
        self.screen.blit(self.ui.render(), (board_x, board_y))

        footer_x, footer_y, _, _ = geometry.footer
        if self.progress.phase == PHASE_ALL_COMPLETE:
            message = "ALL LEVELS COMPLETE!  Esc: menu"
        elif self.progress.phase == PHASE_LEVEL_COMPLETE:
            stars = session.star_rating()
            message = f"LEVEL COMPLETE! {'*' * stars}{'-' * (3 - stars)}  Enter: next level"
        else:
            message = session.level.hint or "Click a mirror to rotate it.  R: restart"
        self._blit_text(message, self.small_font, layout.TEXT_COLOR, (width // 2, footer_y + 10), "center")

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------
    def _board_offset(self) -> Tuple[int, int]:
        board_x, board_y, _, _ = self._geometry().board
        return board_x, board_y

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            raise SystemExit
        phase = self.progress.phase
        if phase == PHASE_MENU:
            if event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_DOWN, pygame.K_RIGHT):
                    self.menu_index = (self.menu_index + 1) % len(self.catalog)
                elif event.key in (pygame.K_UP, pygame.K_LEFT):
                    self.menu_index = (self.menu_index - 1) % len(self.catalog)
                elif event.key in (pygame.K_RETURN, pygame.K_SPACE):
                    self.enter_level(self.menu_index)
                elif event.key == pygame.K_ESCAPE:
                    raise SystemExit
            return

        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.menu_index = self.ui.session.level_id
                self.progress.go_to_menu()
            elif event.key == pygame.K_r:
                self.progress.restart()
                self._on_session_replaced()
            elif event.key == pygame.K_RIGHT:
                self.enter_level(self.ui.session.level_id + 1)
            elif event.key == pygame.K_LEFT:
                self.enter_level(self.ui.session.level_id - 1)
            elif event.key in (pygame.K_RETURN, pygame.K_n) and phase == PHASE_LEVEL_COMPLETE:
                if self.progress.next_level() is not None:
                    self._on_session_replaced()
            return

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and phase == PHASE_PLAYING:
            board_x, board_y = self._board_offset()
            local = (event.pos[0] - board_x, event.pos[1] - board_y)
            self.ui.handle_click(local)

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> None:
        while True:
            now = time.perf_counter()
            delta = now - self.last_time
            self.last_time = now
            for event in pygame.event.get():
                try:
                    self.handle_event(event)
                except SystemExit:
                    pygame.quit()
                    return
            self.ui.update(delta)
            self.draw()
            self.clock.tick(60)


def run(start_level: Optional[int] = None) -> None:
    """Entry point helper that instantiates and runs the UI."""

    app = LaserMazeApp(start_level=start_level)
    app.run()


def bootstrap_directories() -> UIDirectories:
    """Return resolved paths and print a short bootstrap message."""

    directories = resolve_directories()
    message = (
        "Laser Maze UI bootstrap\n"
        f"  levels:   {directories.level_root}\n"
        f"  progress: {directories.progress_path}\n"
        "Set the environment variables to point to custom locations if needed."
    )
    print(message)
    return directories


def _list_levels(directories: UIDirectories) -> None:
    catalog = LevelCatalog.load(directories.level_root)
    completed = CompletedLevelStore(directories.progress_path).load()
    print("Available levels:")
    for index, level in enumerate(catalog):
        marker = "*" if index in completed else " "
        print(f" {marker} {index:2d}  {level.name:<20} {level.cols}x{level.rows}  par {level.par}")


def _print_solution(directories: UIDirectories, level_id: int) -> int:
    catalog = LevelCatalog.load(directories.level_root)
    if not 0 <= level_id < len(catalog):
        print(f"No level with id {level_id}")
        return 1
    level = catalog[level_id]
    solution = solve(level)
    if solution is None:
        print(f"{level.name}: no solution")
        return 1
    toggles = ", ".join(f"({pos.row}, {pos.col})" for pos in solution)
    print(f"{level.name}: {len(solution)} move(s), par {level.par}: {toggles or 'already solved'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Laser Maze launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved resource locations and exit without launching the UI.",
    )
    parser.add_argument(
        "--list-levels",
        action="store_true",
        help="List the level catalog and exit.",
    )
    parser.add_argument(
        "--solve",
        type=int,
        metavar="N",
        help="Print the fewest toggles that complete level N and exit.",
    )
    parser.add_argument("--level", type=int, metavar="N", help="Start directly in level N.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.info:
        bootstrap_directories()
        return 0
    directories = resolve_directories()
    if args.list_levels:
        _list_levels(directories)
        return 0
    if args.solve is not None:
        return _print_solution(directories, args.solve)
    if args.level is not None:
        catalog = LevelCatalog.load(directories.level_root)
        if not 0 <= args.level < len(catalog):
            print(f"No level with id {args.level}")
            return 1

    run(start_level=args.level)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    raise SystemExit(main())
