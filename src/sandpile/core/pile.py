"""
Pile: the column grid of heights and its relaxation rule.

Each tick, every column compares itself with its neighbors:
- Half the height difference (floored) is what it would like to shed
- A side is eligible only if that half-difference exceeds stable_distance
- One eligible side: shed min(delta, max_movable) to it
- Two eligible sides: shed min(sum, 2 * max_movable), floor half to the
  left and ceil half to the right

The new heights are computed from the old ones into a scratch buffer and
the buffers are swapped, so a step is never observed half-applied.
Boundaries are closed: column 0 has no left side, column N-1 no right side.
"""

from __future__ import annotations

import numpy as np


class ColumnGrid:
    """
    Fixed-size array of pile heights, one per column.

    Storage only. The relaxation rule lives in PileSimulator.
    """

    def __init__(self, resolution: int):
        if resolution < 1:
            raise ValueError(f"ColumnGrid needs at least one column, got {resolution}")
        self.heights = np.zeros(resolution, dtype=np.float64)

    @property
    def resolution(self) -> int:
        """Number of columns N."""
        return self.heights.shape[0]

    @property
    def total_mass(self) -> float:
        """Sum of all column heights."""
        return float(self.heights.sum())

    def __len__(self) -> int:
        return self.resolution

    def __getitem__(self, column: int) -> float:
        return float(self.heights[column])

    def __setitem__(self, column: int, height: float) -> None:
        self.heights[column] = height

    def swap(self, buffer: np.ndarray) -> np.ndarray:
        """Install buffer as the current heights and return the previous array."""
        if buffer.shape != self.heights.shape:
            raise ValueError(
                f"Buffer shape {buffer.shape} does not match grid shape {self.heights.shape}"
            )
        previous = self.heights
        self.heights = buffer
        return previous


def half_differences(heights: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Floored half height differences toward each neighbor.

    Returns:
        (delta_left, delta_right). delta_left[0] and delta_right[-1] have no
        neighbor and are left at 0; use eligible_directions() to mask them.
    """
    n = heights.shape[0]
    delta_left = np.zeros(n, dtype=np.float64)
    delta_right = np.zeros(n, dtype=np.float64)
    if n > 1:
        delta_left[1:] = np.floor((heights[1:] - heights[:-1]) / 2)
        delta_right[:-1] = np.floor((heights[:-1] - heights[1:]) / 2)
    return delta_left, delta_right


def eligible_directions(
    heights: np.ndarray,
    stable_distance: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Masks of columns that may shed mass to their left / right neighbor.

    The missing side at each boundary is never eligible.
    """
    delta_left, delta_right = half_differences(heights)
    return _eligible_masks(delta_left, delta_right, stable_distance)


def _eligible_masks(
    delta_left: np.ndarray,
    delta_right: np.ndarray,
    stable_distance: float,
) -> tuple[np.ndarray, np.ndarray]:
    n = delta_left.shape[0]
    left = np.zeros(n, dtype=bool)
    right = np.zeros(n, dtype=bool)
    left[1:] = delta_left[1:] > stable_distance
    right[:-1] = delta_right[:-1] > stable_distance
    return left, right


def compute_transfers(
    heights: np.ndarray,
    stable_distance: float,
    max_movable: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Amount each column sends to its left and right neighbor this step.

    Args:
        heights: Current pile heights
        stable_distance: Eligibility threshold on the half-difference
        max_movable: Per-direction transfer cap

    Returns:
        (to_left, to_right): to_left[i] moves from column i to i-1,
        to_right[i] moves from column i to i+1
    """
    delta_left, delta_right = half_differences(heights)
    left, right = _eligible_masks(delta_left, delta_right, stable_distance)

    to_left = np.zeros_like(delta_left)
    to_right = np.zeros_like(delta_right)

    only_left = left & ~right
    only_right = right & ~left
    both = left & right

    to_left[only_left] = np.minimum(delta_left[only_left], max_movable)
    to_right[only_right] = np.minimum(delta_right[only_right], max_movable)

    # Odd totals give the extra unit to the right neighbor
    moved = np.minimum(delta_left[both] + delta_right[both], 2 * max_movable)
    to_left[both] = np.floor(moved / 2)
    to_right[both] = np.ceil(moved / 2)

    return to_left, to_right


class PileSimulator:
    """
    Applies one relaxation step per tick to a ColumnGrid.

    Owns the grid and a scratch buffer of the same size (double buffer).
    """

    def __init__(
        self,
        grid: ColumnGrid,
        stable_distance: float = 0.5,
        max_movable: float = 10.0,
    ):
        self.grid = grid
        self.stable_distance = stable_distance
        self.max_movable = max_movable
        self._scratch = np.zeros_like(grid.heights)

    @property
    def heights(self) -> np.ndarray:
        """Current heights (the live buffer, not a copy)."""
        return self.grid.heights

    @property
    def scratch(self) -> np.ndarray:
        """The back buffer written by the next step."""
        return self._scratch

    def step(self) -> None:
        """
        Advance the pile by one relaxation step.

        Mass is only moved between adjacent columns, so the total is unchanged.
        """
        heights = self.grid.heights
        to_left, to_right = compute_transfers(heights, self.stable_distance, self.max_movable)

        out = self._scratch
        np.subtract(heights, to_left, out=out)
        out -= to_right
        out[:-1] += to_left[1:]
        out[1:] += to_right[:-1]

        self._scratch = self.grid.swap(out)
