"""Simple command line demo for the laser maze logic."""

from __future__ import annotations

import sys
from typing import Dict, List, Optional, Sequence

from .game import Empty, GridPos, inside
from .levels import LevelCatalog, symbol_for_cell
from .progress import MemoryStore
from .session import GameProgress, LevelSession
from .solver import solve


def render_board(session: LevelSession) -> List[str]:
    """Board symbols with the beam drawn across empty cells."""

    beam: Dict[GridPos, str] = {}
    for segment in session.laser_path.segments:
        for position in (segment.start, segment.end):
            if not inside(session.grid, position):
                continue
            if not isinstance(session.grid[position.row][position.col], Empty):
                continue
            mark = "-" if segment.start.row == segment.end.row else "|"
            previous = beam.get(position)
            beam[position] = "+" if previous and previous != mark else mark
    lines = []
    for row_index, row in enumerate(session.grid):
        lines.append(
            "".join(
                beam.get(GridPos(row_index, col_index), symbol_for_cell(cell))
                for col_index, cell in enumerate(row)
            )
        )
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    level_id = int(args[0]) if args else 0

    catalog = LevelCatalog.load()
    progress = GameProgress(catalog, MemoryStore())
    session = progress.start(level_id)

    print("=== Laser Maze Demo ===")
    print(f"Level {level_id}: {session.level.name} (par {session.level.par})")
    print("\n".join(render_board(session)))

    solution = solve(session.level)
    if solution is None:
        print("No solution found.")
        return 1
    for position in solution:
        events = progress.toggle(position.row, position.col)
        print(f"\nToggle ({position.row}, {position.col}) -> move {session.move_count}")
        for event in events:
            print(f"  {event.kind} at ({event.position.row}, {event.position.col})")
        print("\n".join(render_board(session)))

    print(f"\nComplete: {session.is_complete}  stars: {session.star_rating()}  phase: {progress.phase}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
