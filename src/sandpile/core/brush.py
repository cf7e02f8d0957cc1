"""
Brush: circular emitter that turns one pointer position into many grains.

Every paint call emits config.strength grains, each at a random angle and a
random distance below size/2 from the brush center, floored to whole
coordinates. Positions are in simulation space (column, height above the
floor); mapping screen coordinates to that space is the caller's job.
"""

from __future__ import annotations
from typing import TYPE_CHECKING
import logging

import numpy as np

from sandpile.core.config import BrushConfig

if TYPE_CHECKING:
    from sandpile.core.simulation import Simulation

logger = logging.getLogger(__name__)


class Brush:
    """Emits seed points around a center, clamped to the simulation bounds."""

    def __init__(
        self,
        resolution: int,
        config: BrushConfig | None = None,
        rng: np.random.Generator | None = None,
        max_height: float | None = None,
    ):
        """
        Args:
            resolution: Number of columns; emitted columns land in [0, resolution)
            config: Brush size and strength
            rng: Random generator (a fresh default_rng() if None)
            max_height: Optional ceiling for emitted heights
        """
        if config is None:
            config = BrushConfig()
        config.validate()
        if resolution < 1:
            raise ValueError(f"Brush needs at least one column, got {resolution}")

        self.resolution = resolution
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_height = max_height

    def emit(self, x: float, y: float) -> list[tuple[int, float]]:
        """
        Seed points for one paint call centered at (x, y).

        Returns:
            config.strength (column, height) pairs
        """
        n = self.config.strength
        angles = self.rng.uniform(0.0, 2 * np.pi, n)
        distances = self.rng.uniform(0.0, self.config.size / 2, n)

        columns = np.floor(x + distances * np.cos(angles))
        heights = np.floor(y + distances * np.sin(angles))

        columns = np.clip(columns, 0, self.resolution - 1).astype(np.int64)
        heights = np.maximum(heights, 0.0)
        if self.max_height is not None:
            heights = np.minimum(heights, self.max_height)

        return [(int(c), float(h)) for c, h in zip(columns, heights)]

    def paint(self, simulation: "Simulation", x: float, y: float) -> int:
        """
        Emit around (x, y) and spawn every seed into the simulation.

        Returns:
            Number of grains spawned
        """
        seeds = self.emit(x, y)
        for column, height in seeds:
            simulation.spawn(column, height)
        logger.debug("Brush painted %d grains at (%.1f, %.1f)", len(seeds), x, y)
        return len(seeds)
