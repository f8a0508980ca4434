"""Core grid model and beam tracing for the laser maze puzzle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union


logger = logging.getLogger(__name__)

MAX_STEPS = 200


class Direction(Enum):
    """Cardinal directions for the laser beam as ``(drow, dcol)`` vectors."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    @staticmethod
    def from_name(name: str) -> "Direction":
        name = name.upper()
        try:
            return Direction[name]
        except KeyError as exc:
            raise ValueError(f"Unknown direction: {name}") from exc

    @staticmethod
    def from_symbol(symbol: str) -> "Direction":
        mapping = {
            "^": Direction.UP,
            "v": Direction.DOWN,
            "<": Direction.LEFT,
            ">": Direction.RIGHT,
        }
        try:
            return mapping[symbol]
        except KeyError as exc:
            raise ValueError(f"Unknown direction symbol: {symbol!r}") from exc

    @property
    def symbol(self) -> str:
        mapping = {
            Direction.UP: "^",
            Direction.DOWN: "v",
            Direction.LEFT: "<",
            Direction.RIGHT: ">",
        }
        return mapping[self]


class MirrorOrientation(Enum):
    """Diagonal a mirror is set along."""

    SLASH = "/"
    BACKSLASH = "\\"

    def flipped(self) -> "MirrorOrientation":
        if self is MirrorOrientation.SLASH:
            return MirrorOrientation.BACKSLASH
        return MirrorOrientation.SLASH


_REFLECTIONS = {
    MirrorOrientation.SLASH: {
        Direction.UP: Direction.RIGHT,
        Direction.RIGHT: Direction.UP,
        Direction.DOWN: Direction.LEFT,
        Direction.LEFT: Direction.DOWN,
    },
    MirrorOrientation.BACKSLASH: {
        Direction.UP: Direction.LEFT,
        Direction.LEFT: Direction.UP,
        Direction.DOWN: Direction.RIGHT,
        Direction.RIGHT: Direction.DOWN,
    },
}


def reflect(direction: Direction, orientation: MirrorOrientation) -> Direction:
    """Return the outgoing direction of a beam hitting a mirror."""

    return _REFLECTIONS[orientation][direction]


@dataclass(frozen=True)
class GridPos:
    row: int
    col: int

    def step(self, direction: Direction) -> "GridPos":
        drow, dcol = direction.vector
        return GridPos(self.row + drow, self.col + dcol)

    def as_tuple(self) -> Tuple[int, int]:
        return self.row, self.col


@dataclass(frozen=True)
class Empty:
    kind = "empty"


@dataclass(frozen=True)
class Wall:
    """Absorbs the beam."""

    kind = "wall"


@dataclass(frozen=True)
class Emitter:
    """Origin of the beam."""

    direction: Direction = Direction.RIGHT
    kind = "emitter"


@dataclass(frozen=True)
class Mirror:
    """Deflects the beam by 90 degrees; fixed mirrors cannot be rotated."""

    orientation: MirrorOrientation
    fixed: bool = False
    kind = "mirror"

    def reflect(self, direction: Direction) -> Direction:
        return reflect(direction, self.orientation)

    def toggled(self) -> "Mirror":
        return Mirror(self.orientation.flipped(), fixed=self.fixed)


@dataclass(frozen=True)
class Target:
    """Cell the beam has to pass through.  ``hit`` is derived from a trace."""

    hit: bool = False
    kind = "target"


Cell = Union[Empty, Wall, Emitter, Mirror, Target]
Grid = List[List[Cell]]


@dataclass(frozen=True)
class LaserSegment:
    """Single straight hop of the beam between two adjacent grid points."""

    start: GridPos
    end: GridPos


@dataclass
class LaserPath:
    """Ordered beam segments plus every target traversal, in trace order."""

    segments: List[LaserSegment] = field(default_factory=list)
    hit_targets: List[GridPos] = field(default_factory=list)

    def hit_positions(self) -> Set[GridPos]:
        return set(self.hit_targets)

    @property
    def end(self) -> Optional[GridPos]:
        if not self.segments:
            return None
        return self.segments[-1].end


def grid_size(grid: Sequence[Sequence[Cell]]) -> Tuple[int, int]:
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    return rows, cols


def inside(grid: Sequence[Sequence[Cell]], position: GridPos) -> bool:
    rows, cols = grid_size(grid)
    return 0 <= position.row < rows and 0 <= position.col < cols


def iter_cells(grid: Sequence[Sequence[Cell]]) -> Iterable[Tuple[GridPos, Cell]]:
    for row_index, row in enumerate(grid):
        for col_index, cell in enumerate(row):
            yield GridPos(row_index, col_index), cell


def find_emitter(grid: Sequence[Sequence[Cell]]) -> Optional[Tuple[GridPos, Emitter]]:
    # Validated levels hold exactly one emitter; on malformed input the last
    # one in scan order wins.
    found: Optional[Tuple[GridPos, Emitter]] = None
    for position, cell in iter_cells(grid):
        if isinstance(cell, Emitter):
            found = (position, cell)
    return found


def trace(grid: Sequence[Sequence[Cell]], max_steps: int = MAX_STEPS) -> LaserPath:
    """Walk the beam from the emitter until it exits, is absorbed or loops.

    The walk stops without error after ``max_steps`` hops.  A grid without an
    emitter yields an empty path.
    """

    path = LaserPath()
    located = find_emitter(grid)
    if located is None:
        logger.debug("trace: no emitter on grid")
        return path

    cursor, emitter = located
    direction = emitter.direction or Direction.RIGHT
    visited: Set[Tuple[GridPos, Direction]] = set()
    step = 0

    while step < max_steps:
        next_pos = cursor.step(direction)

        if not inside(grid, next_pos):
            path.segments.append(LaserSegment(cursor, next_pos))
            break

        cell = grid[next_pos.row][next_pos.col]
        if isinstance(cell, Wall):
            path.segments.append(LaserSegment(cursor, next_pos))
            break

        signature = (next_pos, direction)
        if signature in visited:
            break
        visited.add(signature)
        path.segments.append(LaserSegment(cursor, next_pos))

        if isinstance(cell, Target):
            path.hit_targets.append(next_pos)
        elif isinstance(cell, Mirror):
            direction = cell.reflect(direction)

        cursor = next_pos
        step += 1

    logger.debug(
        "trace: %d segments, %d target hits, outcome=%s",
        len(path.segments),
        len(path.hit_targets),
        trace_outcome(grid, path, max_steps),
    )
    return path


def trace_outcome(
    grid: Sequence[Sequence[Cell]], path: LaserPath, max_steps: int = MAX_STEPS
) -> str:
    """Classify how ``path`` ended: exit, wall, cycle, exhausted or none."""

    end = path.end
    if end is None:
        return "none"
    if not inside(grid, end):
        return "exit"
    if isinstance(grid[end.row][end.col], Wall):
        return "wall"
    if len(path.segments) >= max_steps:
        return "exhausted"
    return "cycle"


def target_positions(grid: Sequence[Sequence[Cell]]) -> List[GridPos]:
    return [position for position, cell in iter_cells(grid) if isinstance(cell, Target)]


def is_complete(grid: Sequence[Sequence[Cell]], hit_positions: Iterable[GridPos]) -> bool:
    """True when every target on ``grid`` appears in ``hit_positions``."""

    hits = set(hit_positions)
    return all(position in hits for position in target_positions(grid))


def apply_hits(grid: Grid, hit_positions: Iterable[GridPos]) -> None:
    """Re-derive every target's ``hit`` flag in place from a hit set."""

    hits = set(hit_positions)
    for position, cell in iter_cells(grid):
        if isinstance(cell, Target):
            flag = position in hits
            if cell.hit != flag:
                grid[position.row][position.col] = Target(hit=flag)


def copy_grid(grid: Sequence[Sequence[Cell]]) -> Grid:
    # Cells are frozen, so copying the row lists is a full deep copy.
    return [list(row) for row in grid]
