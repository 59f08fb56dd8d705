"""
Antymology Voxel Terrain
=========================
Integer-addressed 3D block store the colony lives on.

- Block lookup and mutation by (x, y, z), y is vertical
- Surface discovery (top-down for spawning, windowed for walking)
- Procedural terrain: smoothed height field, container shell,
  scattered mulch and acidic surface blocks
"""

import logging
from typing import Optional

import numpy as np
from scipy.ndimage import gaussian_filter

from .config import BlockKind, TerrainConfig

logger = logging.getLogger("Terrain")


class WorldGrid:
    """
    Voxel block store.

    Blocks are stored as BlockKind values in a (width, height, depth)
    integer array. Reads outside the array return EMPTY; writes outside
    the array are ignored.
    """

    def __init__(self, width: int, height: int, depth: int,
                 config: Optional[TerrainConfig] = None):
        self.width = width
        self.height = height
        self.depth = depth
        self.config = config or TerrainConfig(width=width, height=height, depth=depth)
        self.blocks = np.full((width, height, depth), BlockKind.EMPTY.value, dtype=np.int8)

    @property
    def shape(self):
        return self.blocks.shape

    def in_bounds(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth

    def get_block(self, x: int, y: int, z: int) -> BlockKind:
        if not self.in_bounds(x, y, z):
            return BlockKind.EMPTY
        return BlockKind(int(self.blocks[x, y, z]))

    def set_block(self, x: int, y: int, z: int, kind: BlockKind) -> None:
        if self.in_bounds(x, y, z):
            self.blocks[x, y, z] = kind.value

    def is_surface(self, x: int, y: int, z: int) -> bool:
        """An empty cell resting on a non-empty cell"""
        return (self.get_block(x, y, z) is BlockKind.EMPTY
                and self.get_block(x, y - 1, z) is not BlockKind.EMPTY)

    def find_surface(self, x: int, z: int, start_y: int, window: int = 2) -> Optional[int]:
        """
        Scan layers start_y + window down to start_y - window.

        Returns the first surface layer found, or None when the column
        has no surface inside the window.
        """
        for y in range(start_y + window, start_y - window - 1, -1):
            if self.is_surface(x, y, z):
                return y
        return None

    def surface_height(self, x: int, z: int) -> int:
        """Top-down surface search used for spawning"""
        for y in range(self.config.spawn_scan_height, -1, -1):
            if self.is_surface(x, y, z):
                return y
        return self.config.fallback_surface_height

    def count(self, kind: BlockKind) -> int:
        return int(np.count_nonzero(self.blocks == kind.value))

    def fill_column(self, x: int, z: int, top: int, kind: BlockKind) -> None:
        """Fill y in [0, top) of one column with a single kind"""
        if 0 <= x < self.width and 0 <= z < self.depth:
            self.blocks[x, :max(0, min(top, self.height)), z] = kind.value

    @classmethod
    def flat(cls, width: int, height: int, depth: int, surface_y: int,
             kind: BlockKind = BlockKind.STONE) -> "WorldGrid":
        """Flat world whose walkable surface is layer surface_y everywhere"""
        grid = cls(width, height, depth)
        grid.blocks[:, :surface_y, :] = kind.value
        return grid


def generate_height_field(config: TerrainConfig, rng: np.random.Generator) -> np.ndarray:
    """
    Smoothed random surface heights, shape (width, depth).

    Heights are clipped so every column keeps solid ground and at least
    a few empty layers above it.
    """
    noise = rng.standard_normal((config.width, config.depth))
    smooth = gaussian_filter(noise, sigma=config.smoothing_sigma, mode="wrap")
    std = smooth.std()
    if std > 0:
        smooth = smooth / std
    heights = np.rint(config.base_height + config.height_variation * smooth)
    return np.clip(heights, 2, config.height - 3).astype(int)


def generate_terrain(config: TerrainConfig, rng: np.random.Generator) -> WorldGrid:
    """
    Build a bounded world.

    Layer 0 and the outer columns are container blocks. Columns hold
    stone under a grass layer; the top block of a column is replaced by
    mulch or acidic blocks with the configured probabilities.
    """
    grid = WorldGrid(config.width, config.height, config.depth, config)
    heights = generate_height_field(config, rng)

    for x in range(config.width):
        for z in range(config.depth):
            top = int(heights[x, z])
            grid.fill_column(x, z, top, BlockKind.STONE)
            grass_from = max(1, top - config.grass_depth)
            grid.blocks[x, grass_from:top, z] = BlockKind.GRASS.value

            roll = rng.random()
            if roll < config.mulch_probability:
                grid.set_block(x, top - 1, z, BlockKind.MULCH)
            elif roll < config.mulch_probability + config.acidic_probability:
                grid.set_block(x, top - 1, z, BlockKind.ACIDIC)

    grid.blocks[:, 0, :] = BlockKind.CONTAINER.value
    grid.blocks[0, :, :] = BlockKind.CONTAINER.value
    grid.blocks[-1, :, :] = BlockKind.CONTAINER.value
    grid.blocks[:, :, 0] = BlockKind.CONTAINER.value
    grid.blocks[:, :, -1] = BlockKind.CONTAINER.value

    logger.info(
        f"Generated terrain {config.width}x{config.height}x{config.depth}: "
        f"mulch={grid.count(BlockKind.MULCH)}, acidic={grid.count(BlockKind.ACIDIC)}"
    )
    return grid
