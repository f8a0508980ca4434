"""Level session state machine: toggle, re-trace and re-evaluate."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Protocol, Set, Tuple, Union

from .game import (
    Grid,
    GridPos,
    LaserPath,
    Mirror,
    Wall,
    apply_hits,
    inside,
    is_complete,
    trace,
    trace_outcome,
)
from .levels import LevelCatalog, LevelDefinition, format_grid


logger = logging.getLogger(__name__)

PHASE_MENU = "menu"
PHASE_PLAYING = "playing"
PHASE_LEVEL_COMPLETE = "level_complete"
PHASE_ALL_COMPLETE = "all_complete"


class CompletionStore(Protocol):
    def load(self) -> Set[int]: ...

    def save(self, completed: Iterable[int]) -> None: ...

    def add(self, level_id: int) -> Set[int]: ...


@dataclass(frozen=True)
class TargetNewlyHit:
    position: GridPos
    kind = "target_newly_hit"


@dataclass(frozen=True)
class ReflectionAt:
    position: GridPos
    kind = "reflection"


@dataclass(frozen=True)
class BeamTerminatedOnWall:
    position: GridPos
    kind = "beam_terminated_on_wall"


Event = Union[TargetNewlyHit, ReflectionAt, BeamTerminatedOnWall]


def derive_events(old_path: LaserPath, new_path: LaserPath, grid: Grid) -> List[Event]:
    """Feedback events for a re-trace, computed from the two paths and grid only."""

    events: List[Event] = []
    previous = old_path.hit_positions()
    seen: Set[GridPos] = set()
    for position in new_path.hit_targets:
        if position in previous or position in seen:
            continue
        seen.add(position)
        events.append(TargetNewlyHit(position))

    for segment in new_path.segments:
        end = segment.end
        if inside(grid, end) and isinstance(grid[end.row][end.col], Mirror):
            events.append(ReflectionAt(end))

    end = new_path.end
    if end is not None and inside(grid, end) and isinstance(grid[end.row][end.col], Wall):
        events.append(BeamTerminatedOnWall(end))
    return events


def star_rating(moves: int, par: int) -> int:
    if moves <= par:
        return 3
    if moves <= par + 2:
        return 2
    return 1


@dataclass
class LevelSession:
    """Live state of one level attempt."""

    level_id: int
    level: LevelDefinition
    grid: Grid
    laser_path: LaserPath = field(default_factory=LaserPath)
    move_count: int = 0
    completed_level_ids: FrozenSet[int] = frozenset()

    @property
    def is_complete(self) -> bool:
        return is_complete(self.grid, self.laser_path.hit_targets)

    def _retrace(self) -> LaserPath:
        apply_hits(self.grid, ())
        self.laser_path = trace(self.grid)
        apply_hits(self.grid, self.laser_path.hit_targets)
        return self.laser_path

    def toggle_mirror(self, row: int, col: int) -> Tuple["LevelSession", List[Event]]:
        """Rotate the movable mirror at ``(row, col)``.

        Out of bounds cells, non mirrors and fixed mirrors leave the session
        untouched and produce no events.
        """

        position = GridPos(row, col)
        if not inside(self.grid, position):
            logger.debug("toggle ignored: %s outside board", position)
            return self, []
        cell = self.grid[row][col]
        if not isinstance(cell, Mirror) or cell.fixed:
            logger.debug("toggle ignored: %s holds %s", position, cell.kind)
            return self, []

        old_path = self.laser_path
        self.grid[row][col] = cell.toggled()
        new_path = self._retrace()
        self.move_count += 1
        events = derive_events(old_path, new_path, self.grid)
        logger.debug(
            "toggled %s to %s, move %d, complete=%s",
            position,
            self.grid[row][col].orientation.value,
            self.move_count,
            self.is_complete,
        )
        return self, events

    def restart(self) -> "LevelSession":
        return start_session(self.level, self.completed_level_ids, level_id=self.level_id)

    def star_rating(self) -> int:
        return star_rating(self.move_count, self.level.par)

    def record_completion(self, store: CompletionStore) -> FrozenSet[int]:
        """Add this level to ``store`` when complete; returns the completed set."""

        if self.is_complete:
            stored = store.add(self.level_id)
            self.completed_level_ids = self.completed_level_ids | frozenset(stored)
        return self.completed_level_ids

    def snapshot(self) -> Dict[str, object]:
        return {
            "level": self.level_id,
            "name": self.level.name,
            "moves": self.move_count,
            "par": self.level.par,
            "complete": self.is_complete,
            "grid": format_grid(self.grid),
            "segments": [
                [list(segment.start.as_tuple()), list(segment.end.as_tuple())]
                for segment in self.laser_path.segments
            ],
            "hits": sorted(position.as_tuple() for position in self.laser_path.hit_positions()),
            "outcome": trace_outcome(self.grid, self.laser_path),
        }


def start_session(
    level: LevelDefinition,
    completed: Iterable[int] = (),
    *,
    level_id: int = 0,
) -> LevelSession:
    session = LevelSession(
        level_id=level_id,
        level=level,
        grid=level.working_grid(),
        completed_level_ids=frozenset(completed),
    )
    session._retrace()
    return session


def toggle_mirror(session: LevelSession, row: int, col: int) -> Tuple[LevelSession, List[Event]]:
    return session.toggle_mirror(row, col)


class GameProgress:
    """High level manager walking a catalog and recording completions."""

    def __init__(self, catalog: LevelCatalog, store: CompletionStore):
        self.catalog = catalog
        self.store = store
        self.completed: FrozenSet[int] = frozenset(store.load())
        self.session: Optional[LevelSession] = None
        self.phase = PHASE_MENU
        self.last_events: List[Event] = []

    @property
    def level_index(self) -> Optional[int]:
        return self.session.level_id if self.session else None

    def start(self, level_id: int) -> LevelSession:
        if not 0 <= level_id < len(self.catalog):
            raise IndexError(f"No level with id {level_id}")
        self.completed = self.completed | frozenset(self.store.load())
        self.session = start_session(self.catalog[level_id], self.completed, level_id=level_id)
        self.phase = PHASE_PLAYING
        self.last_events = []
        return self.session

    def restart(self) -> Optional[LevelSession]:
        if self.session is None:
            return None
        return self.start(self.session.level_id)

    def next_level(self) -> Optional[LevelSession]:
        if self.session is None:
            return self.start(0)
        following = self.session.level_id + 1
        if following < len(self.catalog):
            return self.start(following)
        self.go_to_menu()
        return None

    def go_to_menu(self) -> None:
        self.phase = PHASE_MENU

    def all_complete(self) -> bool:
        return all(level_id in self.completed for level_id in range(len(self.catalog)))

    def toggle(self, row: int, col: int) -> List[Event]:
        if self.phase != PHASE_PLAYING or self.session is None:
            return []
        moves_before = self.session.move_count
        self.session, events = self.session.toggle_mirror(row, col)
        self.last_events = events
        if self.session.move_count != moves_before and self.session.is_complete:
            self.completed = self.completed | self.session.record_completion(self.store)
            if self.all_complete():
                self.phase = PHASE_ALL_COMPLETE
            else:
                self.phase = PHASE_LEVEL_COMPLETE
            logger.info(
                "Level %d (%s) complete in %d moves",
                self.session.level_id,
                self.session.level.name,
                self.session.move_count,
            )
        return events
