"""Laser Maze package."""

from .game import (
    MAX_STEPS,
    Direction,
    Emitter,
    Empty,
    GridPos,
    LaserPath,
    LaserSegment,
    Mirror,
    MirrorOrientation,
    Target,
    Wall,
    is_complete,
    reflect,
    trace,
)
from .levels import LevelCatalog, LevelDefinition, LevelLoader, validate_level
from .progress import CompletedLevelStore, MemoryStore
from .session import GameProgress, LevelSession, start_session, toggle_mirror

__all__ = [
    "MAX_STEPS",
    "CompletedLevelStore",
    "Direction",
    "Emitter",
    "Empty",
    "GameProgress",
    "GridPos",
    "LaserPath",
    "LaserSegment",
    "LevelCatalog",
    "LevelDefinition",
    "LevelLoader",
    "LevelSession",
    "MemoryStore",
    "Mirror",
    "MirrorOrientation",
    "Target",
    "Wall",
    "is_complete",
    "reflect",
    "start_session",
    "toggle_mirror",
    "trace",
    "validate_level",
]
