"""Level definitions, the JSON level loader and load-time validation.

Level files hold the board as rows of single character symbols::

    .   empty            #   wall
    >   emitter, right   <   emitter, left
    ^   emitter, up      v   emitter, down
    /   movable mirror   \\   movable mirror
    Z   fixed ``/``      N   fixed ``\\``
    T   target
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .game import (
    Cell,
    Direction,
    Emitter,
    Empty,
    Grid,
    Mirror,
    MirrorOrientation,
    Target,
    Wall,
    copy_grid,
)


logger = logging.getLogger(__name__)

DEFAULT_LEVEL_ROOT = Path(__file__).resolve().parent / "levels"


class LevelFormatError(ValueError):
    """Raised when a level file cannot be parsed."""


class LevelValidationError(ValueError):
    """Raised when a parsed level violates the board invariants."""

    def __init__(self, name: str, problems: Sequence[str]):
        self.name = name
        self.problems = list(problems)
        super().__init__(f"Invalid level {name!r}: " + "; ".join(self.problems))


_FIXED_SYMBOLS = {
    "#": Wall(),
    ".": Empty(),
    "T": Target(),
    "/": Mirror(MirrorOrientation.SLASH),
    "\\": Mirror(MirrorOrientation.BACKSLASH),
    "Z": Mirror(MirrorOrientation.SLASH, fixed=True),
    "N": Mirror(MirrorOrientation.BACKSLASH, fixed=True),
}


def cell_from_symbol(symbol: str) -> Cell:
    cell = _FIXED_SYMBOLS.get(symbol)
    if cell is not None:
        return cell
    try:
        return Emitter(Direction.from_symbol(symbol))
    except ValueError as exc:
        raise LevelFormatError(f"Unknown cell symbol: {symbol!r}") from exc


def symbol_for_cell(cell: Cell) -> str:
    if isinstance(cell, Emitter):
        return cell.direction.symbol
    if isinstance(cell, Mirror):
        if cell.fixed:
            return "Z" if cell.orientation is MirrorOrientation.SLASH else "N"
        return cell.orientation.value
    if isinstance(cell, Target):
        return "T"
    if isinstance(cell, Wall):
        return "#"
    return "."


def parse_grid(rows: Sequence[str]) -> Grid:
    return [[cell_from_symbol(symbol) for symbol in row] for row in rows]


def format_grid(grid: Sequence[Sequence[Cell]]) -> List[str]:
    return ["".join(symbol_for_cell(cell) for cell in row) for row in grid]


@dataclass(frozen=True)
class LevelDefinition:
    """Immutable catalog entry.  Sessions copy ``grid`` before mutating it."""

    name: str
    rows: int
    cols: int
    grid: Tuple[Tuple[Cell, ...], ...]
    par: int
    hint: Optional[str] = None

    @classmethod
    def from_rows(
        cls,
        name: str,
        rows: Sequence[str],
        *,
        par: int = 0,
        hint: Optional[str] = None,
    ) -> "LevelDefinition":
        """Build a definition whose dimensions are taken from ``rows``."""

        grid = parse_grid(rows)
        return cls(
            name=name,
            rows=len(grid),
            cols=len(grid[0]) if grid else 0,
            grid=tuple(tuple(row) for row in grid),
            par=par,
            hint=hint,
        )

    def working_grid(self) -> Grid:
        return copy_grid(self.grid)

    @property
    def metadata(self) -> Dict[str, object]:
        metadata: Dict[str, object] = {
            "name": self.name,
            "dimensions": f"{self.cols}x{self.rows}",
            "par": self.par,
        }
        if self.hint:
            metadata["hint"] = self.hint
        return metadata


def validate_level(level: LevelDefinition) -> None:
    """Reject levels that break the board invariants.

    Every problem found is reported in a single :class:`LevelValidationError`.
    """

    problems: List[str] = []
    if level.rows <= 0 or level.cols <= 0:
        problems.append(f"dimensions must be positive, got {level.rows}x{level.cols}")
    if len(level.grid) != level.rows:
        problems.append(f"expected {level.rows} rows, found {len(level.grid)}")
    for index, row in enumerate(level.grid):
        if len(row) != level.cols:
            problems.append(f"row {index} has {len(row)} cells, expected {level.cols}")
    emitters = sum(
        1 for row in level.grid for cell in row if isinstance(cell, Emitter)
    )
    if emitters != 1:
        problems.append(f"expected exactly one emitter, found {emitters}")
    if level.par < 0:
        problems.append(f"par must not be negative, got {level.par}")
    if problems:
        raise LevelValidationError(level.name, problems)


class LevelLoader:
    """Load level files stored as JSON."""

    def __init__(self, root: Path = DEFAULT_LEVEL_ROOT):
        self.root = Path(root)

    def names(self) -> List[str]:
        return sorted(path.stem for path in self.root.glob("*.json"))

    def load(self, name: str) -> LevelDefinition:
        path = self.root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise LevelFormatError(f"{path}: {exc}") from exc
        return self._parse_level(data, default_name=name)

    def _parse_level(self, data: Dict, default_name: str = "") -> LevelDefinition:
        try:
            rows = data["grid"]
            grid = parse_grid(rows)
            return LevelDefinition(
                name=str(data.get("name", default_name)),
                rows=int(data.get("rows", len(grid))),
                cols=int(data.get("cols", len(grid[0]) if grid else 0)),
                grid=tuple(tuple(row) for row in grid),
                par=int(data.get("par", 0) or 0),
                hint=data.get("hint") or None,
            )
        except (KeyError, TypeError) as exc:
            raise LevelFormatError(f"Malformed level {default_name!r}: {exc}") from exc


class LevelCatalog:
    """Ordered, validated, read-only sequence of levels indexed from 0."""

    def __init__(self, levels: Sequence[LevelDefinition], names: Optional[Sequence[str]] = None):
        for level in levels:
            validate_level(level)
        self._levels: Tuple[LevelDefinition, ...] = tuple(levels)
        self.names: List[str] = list(names) if names is not None else [
            level.name for level in self._levels
        ]

    @classmethod
    def load(cls, root: Path = DEFAULT_LEVEL_ROOT) -> "LevelCatalog":
        loader = LevelLoader(root)
        names = loader.names()
        levels = [loader.load(name) for name in names]
        catalog = cls(levels, names)
        logger.info("Loaded %d levels from %s", len(catalog), loader.root)
        return catalog

    def __len__(self) -> int:
        return len(self._levels)

    def __getitem__(self, level_id: int) -> LevelDefinition:
        return self._levels[level_id]

    def __iter__(self) -> Iterator[LevelDefinition]:
        return iter(self._levels)
