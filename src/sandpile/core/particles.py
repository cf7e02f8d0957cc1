"""
Grains: discrete particles falling onto the pile.

Each grain lives in exactly one column for its whole life. It falls with
semi-implicit Euler integration (position first, then speed) and has no
terminal velocity. When its position drops below the pile height of its
column it is absorbed: the grain is removed and the column grows by one.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator
import math
import numbers

if TYPE_CHECKING:
    from sandpile.core.pile import ColumnGrid


@dataclass
class Grain:
    """One falling grain of sand."""

    y: float  # Height above the floor, same units as pile height
    vertical_speed: float = 0.0  # Downward speed per tick

    def update(self, gravity: float) -> None:
        """Advance one tick: move by the current speed, then accelerate."""
        self.y -= self.vertical_speed
        self.vertical_speed += gravity


class ParticleSet:
    """
    Per-column lists of live grains.

    Column i's grains are only ever compared against pile column i.
    """

    def __init__(self, resolution: int, gravity: float = 0.01):
        if resolution < 1:
            raise ValueError(f"ParticleSet needs at least one column, got {resolution}")
        self.gravity = gravity
        self.columns: list[list[Grain]] = [[] for _ in range(resolution)]

    @property
    def resolution(self) -> int:
        return len(self.columns)

    def __len__(self) -> int:
        return sum(len(column) for column in self.columns)

    def __iter__(self) -> Iterator[tuple[int, Grain]]:
        for i, column in enumerate(self.columns):
            for grain in column:
                yield i, grain

    def spawn(self, column: int, y: float) -> Grain:
        """
        Add a grain at rest at height y in the given column.

        Raises:
            ValueError: if column is not an integer in [0, resolution), or
                y is not a finite number
        """
        if isinstance(column, bool) or not isinstance(column, numbers.Integral):
            raise ValueError(f"Column must be an integer, got {column!r}")
        if not 0 <= column < self.resolution:
            raise ValueError(
                f"Column {column} out of range for {self.resolution} columns"
            )
        if not math.isfinite(y):
            raise ValueError(f"Initial height must be finite, got {y!r}")

        grain = Grain(y=float(y))
        self.columns[int(column)].append(grain)
        return grain

    def step(self) -> None:
        """Apply one gravity step to every live grain."""
        gravity = self.gravity
        for column in self.columns:
            for grain in column:
                grain.update(gravity)

    def absorb(self, grid: "ColumnGrid") -> int:
        """
        Merge grains that have fallen below the pile surface.

        Each grain is tested exactly once, in list order, against the
        column's running height (an absorbed grain raises the surface for
        the grains tested after it). Survivors are collected into a fresh
        list so removals never shift the grains still to be tested.

        Returns:
            Number of grains absorbed
        """
        heights = grid.heights
        absorbed = 0

        for i, column in enumerate(self.columns):
            if not column:
                continue

            height = float(heights[i])
            survivors = []
            for grain in column:
                if grain.y < height:
                    height += 1
                else:
                    survivors.append(grain)

            taken = len(column) - len(survivors)
            if taken:
                heights[i] = height
                self.columns[i] = survivors
                absorbed += taken

        return absorbed

    def positions(self) -> list[tuple[int, float]]:
        """(column, y) for every live grain."""
        return [(i, grain.y) for i, grain in self]
