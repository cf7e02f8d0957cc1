"""
Pile profile diagnostics.

These functions read heights but never modify them (except
relax_until_stable, which drives a Simulation forward).
"""

from __future__ import annotations
from typing import TYPE_CHECKING

import numpy as np

from sandpile.core.pile import eligible_directions

if TYPE_CHECKING:
    from sandpile.core.simulation import Simulation


def is_stable(heights: np.ndarray, stable_distance: float = 0.5) -> bool:
    """True if no column has an eligible direction, i.e. a step is a no-op."""
    left, right = eligible_directions(np.asarray(heights, dtype=np.float64), stable_distance)
    return not (left.any() or right.any())


def max_step(heights: np.ndarray) -> float:
    """Largest absolute height difference between adjacent columns."""
    heights = np.asarray(heights, dtype=np.float64)
    if heights.shape[0] < 2:
        return 0.0
    return float(np.abs(np.diff(heights)).max())


def relax_until_stable(simulation: "Simulation", max_ticks: int = 10_000) -> int:
    """
    Tick until the pile is stable and no grains are in flight.

    Args:
        simulation: Simulation to advance
        max_ticks: Upper bound on ticks to run

    Returns:
        Ticks run; equals max_ticks if the pile had not settled by then
    """
    config = simulation.config
    for n in range(max_ticks):
        if simulation.particle_count == 0 and is_stable(
            simulation.pile.heights, config.stable_distance
        ):
            return n
        simulation.tick()
    return max_ticks
