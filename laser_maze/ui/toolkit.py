"""Board renderer and click handling for the laser maze.

Rendering is deterministic so it can be exercised in automated tests using
the SDL ``dummy`` video driver.  The widget never runs the simulation itself:
it forwards clicks to :class:`~laser_maze.session.GameProgress` and turns the
returned events into short-lived effects.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..game import Emitter, GridPos, Mirror, MirrorOrientation, Target, Wall, iter_cells
from ..session import (
    PHASE_ALL_COMPLETE,
    PHASE_LEVEL_COMPLETE,
    BeamTerminatedOnWall,
    Event,
    GameProgress,
    LevelSession,
    ReflectionAt,
    TargetNewlyHit,
)
from . import layout


# The import is performed lazily in ``ensure_pygame`` so test environments can
# control the SDL configuration before pygame initialises.
_PYGAME = None


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
        _PYGAME.font.init()
    return _PYGAME


EFFECT_DURATIONS = {
    "hit": 0.8,
    "reflect": 0.4,
    "wall": 0.5,
    "complete": 1.5,
}


@dataclass
class Effect:
    """Visual feedback spawned from a toggle event."""

    kind: str
    position: Optional[GridPos]
    timer: float = 0.0

    @property
    def duration(self) -> float:
        return EFFECT_DURATIONS.get(self.kind, 0.5)

    @property
    def progress(self) -> float:
        return min(1.0, self.timer / self.duration)

    @property
    def expired(self) -> bool:
        return self.timer >= self.duration


def effects_for_events(events: Iterable[Event]) -> List[Effect]:
    effects: List[Effect] = []
    for event in events:
        if isinstance(event, TargetNewlyHit):
            effects.append(Effect("hit", event.position))
        elif isinstance(event, ReflectionAt):
            effects.append(Effect("reflect", event.position))
        elif isinstance(event, BeamTerminatedOnWall):
            effects.append(Effect("wall", event.position))
    return effects


class LaserMazeUI:
    """Small pygame widget drawing the current session of a ``GameProgress``."""

    def __init__(
        self,
        progress: GameProgress,
        *,
        cell_size: int = layout.TILE_SIZE,
        surface=None,
        origin: Tuple[int, int] = (0, 0),
    ) -> None:
        pygame = ensure_pygame()
        self.progress = progress
        if self.progress.session is None:
            self.progress.start(0)
        self.cell_size = cell_size
        self.origin = origin
        self._owns_surface = surface is None
        self.surface = surface if surface is not None else pygame.Surface(self._board_size())
        self.effects: List[Effect] = []
        self.selected: Optional[GridPos] = None

    @property
    def session(self) -> LevelSession:
        assert self.progress.session is not None
        return self.progress.session

    def _board_size(self) -> Tuple[int, int]:
        level = self.progress.session.level if self.progress.session else None
        if level is None:
            return (self.cell_size, self.cell_size)
        return (level.cols * self.cell_size, level.rows * self.cell_size)

    # ------------------------------------------------------------------
    # Input handling
    def process_events(self, events: Iterable[object]) -> List[Event]:
        pygame = ensure_pygame()
        emitted: List[Event] = []
        for event in events:
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                emitted.extend(self.handle_click(event.pos))
        return emitted

    def grid_from_pixel(self, pos: Tuple[int, int]) -> Optional[GridPos]:
        x = pos[0] - self.origin[0]
        y = pos[1] - self.origin[1]
        if x < 0 or y < 0:
            return None
        position = GridPos(y // self.cell_size, x // self.cell_size)
        level = self.session.level
        if position.row >= level.rows or position.col >= level.cols:
            return None
        return position

    def handle_click(self, pos: Tuple[int, int]) -> List[Event]:
        position = self.grid_from_pixel(pos)
        if position is None:
            return []
        moves_before = self.session.move_count
        events = self.progress.toggle(position.row, position.col)
        if self.session.move_count != moves_before:
            self.selected = position
        self.push_events(events)
        return events

    def push_events(self, events: Iterable[Event]) -> None:
        self.effects.extend(effects_for_events(events))
        if self.progress.phase in (PHASE_LEVEL_COMPLETE, PHASE_ALL_COMPLETE):
            self.effects.append(Effect("complete", None))

    def update(self, delta: float) -> None:
        for effect in self.effects:
            effect.timer += delta
        self.effects = [effect for effect in self.effects if not effect.expired]

    def reset(self) -> None:
        """Drop transient state after the session was replaced."""

        pygame = ensure_pygame()
        self.effects.clear()
        self.selected = None
        if self._owns_surface and self.surface.get_size() != self._board_size():
            self.surface = pygame.Surface(self._board_size())

    # ------------------------------------------------------------------
    # Rendering helpers
    def render(self):
        self.surface.fill(layout.BOARD_BACKGROUND_COLOR)
        self._draw_grid()
        self._draw_cells()
        self._draw_beam()
        self._draw_effects()
        return self.surface

    def cell_rect(self, position: GridPos):
        pygame = ensure_pygame()
        return pygame.Rect(
            self.origin[0] + position.col * self.cell_size,
            self.origin[1] + position.row * self.cell_size,
            self.cell_size,
            self.cell_size,
        )

    def cell_center(self, position: GridPos) -> Tuple[int, int]:
        # Also used for beam ends one step off the board.
        return (
            self.origin[0] + position.col * self.cell_size + self.cell_size // 2,
            self.origin[1] + position.row * self.cell_size + self.cell_size // 2,
        )

    def _draw_grid(self) -> None:
        pygame = ensure_pygame()
        for position, _ in iter_cells(self.session.grid):
            pygame.draw.rect(self.surface, layout.GRID_LINE_COLOR, self.cell_rect(position), 1)

    def _draw_cells(self) -> None:
        pygame = ensure_pygame()
        inset = max(2, self.cell_size // 10)
        radius = max(3, self.cell_size // 4)
        for position, cell in iter_cells(self.session.grid):
            rect = self.cell_rect(position)
            center = self.cell_center(position)
            if isinstance(cell, Wall):
                self.surface.fill(layout.WALL_COLOR, rect.inflate(-2 * inset, -2 * inset))
            elif isinstance(cell, Emitter):
                pygame.draw.circle(self.surface, layout.EMITTER_COLOR, center, radius)
                tip = cell.direction.vector
                end = (center[0] + tip[1] * radius * 2, center[1] + tip[0] * radius * 2)
                pygame.draw.line(self.surface, layout.EMITTER_COLOR, center, end, 3)
            elif isinstance(cell, Target):
                color = layout.TARGET_HIT_COLOR if cell.hit else layout.TARGET_COLOR
                pygame.draw.circle(self.surface, color, center, radius, 2)
                pygame.draw.circle(self.surface, color, center, max(2, radius // 2))
            elif isinstance(cell, Mirror):
                color = layout.MIRROR_FIXED_COLOR if cell.fixed else layout.MIRROR_COLOR
                left, right = rect.left + inset, rect.right - 1 - inset
                top, bottom = rect.top + inset, rect.bottom - 1 - inset
                if cell.orientation is MirrorOrientation.SLASH:
                    start, end = (left, bottom), (right, top)
                else:
                    start, end = (left, top), (right, bottom)
                pygame.draw.line(self.surface, color, start, end, 3)
                if self.selected == position and not cell.fixed:
                    pygame.draw.rect(self.surface, layout.SELECTION_COLOR, rect, 2)

    def _draw_beam(self) -> None:
        pygame = ensure_pygame()
        for segment in self.session.laser_path.segments:
            start = self.cell_center(segment.start)
            end = self.cell_center(segment.end)
            pygame.draw.line(self.surface, layout.BEAM_GLOW_COLOR, start, end, 6)
            pygame.draw.line(self.surface, layout.BEAM_COLOR, start, end, 2)

    def _draw_effects(self) -> None:
        pygame = ensure_pygame()
        for effect in self.effects:
            color = layout.EFFECT_COLORS.get(effect.kind, layout.ACCENT_COLOR)
            if effect.position is None:
                width, height = self.surface.get_size()
                pygame.draw.rect(self.surface, color, (0, 0, width, height), 3)
                continue
            radius = int(self.cell_size // 4 + effect.progress * self.cell_size // 2)
            pygame.draw.circle(self.surface, color, self.cell_center(effect.position), radius, 2)


__all__ = ["Effect", "LaserMazeUI", "effects_for_events"]
