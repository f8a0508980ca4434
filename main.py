"""Launch the laser maze from a source checkout."""

from __future__ import annotations

from laser_maze.ui.main import main


if __name__ == "__main__":
    raise SystemExit(main())
