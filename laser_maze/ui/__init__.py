"""User interface package for the laser maze."""

from .main import (
    LEVEL_ENV_VAR,
    LaserMazeApp,
    UIDirectories,
    main,
    resolve_directories,
    run,
)
from .toolkit import Effect, LaserMazeUI

__all__ = [
    "LEVEL_ENV_VAR",
    "UIDirectories",
    "Effect",
    "LaserMazeApp",
    "LaserMazeUI",
    "main",
    "resolve_directories",
    "run",
]
