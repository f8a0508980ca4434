"""Exhaustive search for the fewest mirror toggles that complete a level."""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .game import GridPos, Mirror, is_complete, iter_cells, trace
from .levels import LevelDefinition
from .session import start_session


logger = logging.getLogger(__name__)


def movable_mirrors(level: LevelDefinition) -> List[GridPos]:
    return [
        position
        for position, cell in iter_cells(level.grid)
        if isinstance(cell, Mirror) and not cell.fixed
    ]


def solve(level: LevelDefinition, max_toggles: Optional[int] = None) -> Optional[List[GridPos]]:
    """Return the smallest set of movable mirrors to rotate once each.

    Rotating a mirror twice restores it, so every reachable board is some
    subset of mirrors toggled exactly once.  Subsets are tried smallest first,
    which makes the first hit an optimum.  ``None`` means no board completes
    the level.
    """

    candidates = movable_mirrors(level)
    limit = len(candidates) if max_toggles is None else min(max_toggles, len(candidates))
    for size in range(limit + 1):
        for chosen in combinations(candidates, size):
            grid = level.working_grid()
            for position in chosen:
                grid[position.row][position.col] = grid[position.row][position.col].toggled()
            if is_complete(grid, trace(grid).hit_targets):
                logger.debug("solved %s with %d toggles", level.name, size)
                return list(chosen)
    logger.debug("no solution for %s within %d toggles", level.name, limit)
    return None


class SolutionValidator:
    """Replay a list of toggles through a real session."""

    def __init__(self, level: LevelDefinition):
        self.level = level

    def replay(self, toggles: Iterable[Union[GridPos, Sequence[int]]]) -> Tuple[bool, int]:
        """Apply ``toggles`` in order; returns ``(complete, moves)``."""

        session = start_session(self.level)
        for toggle in toggles:
            row, col = toggle.as_tuple() if isinstance(toggle, GridPos) else toggle
            session.toggle_mirror(row, col)
        return session.is_complete, session.move_count

    def validate(self, toggles: Iterable[Union[GridPos, Sequence[int]]]) -> bool:
        complete, _ = self.replay(toggles)
        return complete
