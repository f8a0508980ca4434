"""Layout constants for the laser maze UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Tile metrics
TILE_SIZE: int = 52
GRID_PADDING: int = 20
HEADER_HEIGHT: int = 60
FOOTER_HEIGHT: int = 40
MIN_WINDOW_WIDTH: int = 480

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Tuple[int, int, int] = (10, 10, 46)
BOARD_BACKGROUND_COLOR: Tuple[int, int, int] = (13, 13, 58)
GRID_LINE_COLOR: Tuple[int, int, int] = (38, 44, 92)
TEXT_COLOR: Tuple[int, int, int] = (224, 232, 255)
MUTED_TEXT_COLOR: Tuple[int, int, int] = (150, 160, 200)
ACCENT_COLOR: Tuple[int, int, int] = (255, 204, 0)

WALL_COLOR: Tuple[int, int, int] = (51, 68, 102)
EMITTER_COLOR: Tuple[int, int, int] = (255, 51, 102)
MIRROR_COLOR: Tuple[int, int, int] = (224, 232, 255)
MIRROR_FIXED_COLOR: Tuple[int, int, int] = (136, 153, 187)
TARGET_COLOR: Tuple[int, int, int] = (51, 255, 153)
TARGET_HIT_COLOR: Tuple[int, int, int] = (255, 204, 0)
BEAM_COLOR: Tuple[int, int, int] = (255, 51, 102)
BEAM_GLOW_COLOR: Tuple[int, int, int] = (120, 30, 70)
SELECTION_COLOR: Tuple[int, int, int] = (51, 204, 255)

EFFECT_COLORS = {
    "hit": TARGET_HIT_COLOR,
    "reflect": (255, 102, 153),
    "wall": (255, 140, 60),
    "complete": (51, 255, 153),
}


@dataclass(frozen=True)
class BoardGeometry:
    """Pixel rectangles for the major UI regions."""

    header: Tuple[int, int, int, int]
    board: Tuple[int, int, int, int]
    footer: Tuple[int, int, int, int]
    window: Tuple[int, int]


def compute_geometry(rows: int, cols: int, tile_size: int = TILE_SIZE) -> BoardGeometry:
    """Compute the window layout for a ``rows`` x ``cols`` board."""

    board_width = cols * tile_size
    board_height = rows * tile_size

    window_width = max(MIN_WINDOW_WIDTH, board_width + GRID_PADDING * 2)
    window_height = HEADER_HEIGHT + board_height + GRID_PADDING * 2 + FOOTER_HEIGHT

    board_x = (window_width - board_width) // 2
    board_y = HEADER_HEIGHT + GRID_PADDING

    header_rect = (0, 0, window_width, HEADER_HEIGHT)
    board_rect = (board_x, board_y, board_width, board_height)
    footer_rect = (0, window_height - FOOTER_HEIGHT, window_width, FOOTER_HEIGHT)

    return BoardGeometry(
        header=header_rect,
        board=board_rect,
        footer=footer_rect,
        window=(window_width, window_height),
    )
