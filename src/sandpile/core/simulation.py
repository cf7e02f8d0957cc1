"""
Simulation: owns the pile and the grains and advances them together.

One tick is, in this order:
1. Pile relaxation (PileSimulator.step)
2. Grain free fall (ParticleSet.step)
3. Absorption against the pile heights produced by step 1

A frame runs config.updates_per_frame ticks back-to-back and then takes a
snapshot for rendering. The only way to add mass from outside is spawn(),
which is called between ticks.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import math

import numpy as np

from sandpile.core.config import SimulationConfig
from sandpile.core.particles import ParticleSet
from sandpile.core.pile import ColumnGrid, PileSimulator

logger = logging.getLogger(__name__)


class SimulationInvariantError(RuntimeError):
    """Raised by tick() when the state is corrupt; nothing is modified."""


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only state handed to a renderer."""

    tick: int
    heights: np.ndarray
    particles: tuple[tuple[int, float], ...] = field(default_factory=tuple)

    @property
    def resolution(self) -> int:
        return self.heights.shape[0]

    @property
    def pile_mass(self) -> float:
        return float(self.heights.sum())


class Simulation:
    """
    The simulation core exposed to a frame driver.

    Usage:
        sim = Simulation(SimulationConfig(resolution=100))
        sim.spawn(50, 80.0)
        snapshot = sim.advance_frame()
    """

    def __init__(self, config: SimulationConfig | None = None):
        if config is None:
            config = SimulationConfig()
        config.validate()
        self.config = config

        grid = ColumnGrid(config.resolution)
        self.pile = PileSimulator(
            grid,
            stable_distance=config.stable_distance,
            max_movable=config.max_movable,
        )
        self.particles = ParticleSet(config.resolution, gravity=config.gravity)

        self.current_tick = 0
        self.absorbed_total = 0

        logger.info(
            "Simulation created: %d columns, stable_distance=%s, max_movable=%s, "
            "gravity=%s, updates_per_frame=%d",
            config.resolution,
            config.stable_distance,
            config.max_movable,
            config.gravity,
            config.updates_per_frame,
        )

    @property
    def resolution(self) -> int:
        return self.config.resolution

    @property
    def particle_count(self) -> int:
        """Number of live grains."""
        return len(self.particles)

    @property
    def total_mass(self) -> float:
        """Pile mass plus one unit per live grain; unchanged by tick()."""
        return self.pile.grid.total_mass + self.particle_count

    def spawn(self, column: int, initial_height: float) -> None:
        """
        Add one grain at rest.

        Raises:
            ValueError: if column is outside [0, resolution) or the height is
                not finite; the simulation is left unchanged
        """
        try:
            self.particles.spawn(column, initial_height)
        except ValueError:
            logger.warning(
                "Rejected spawn at column=%r height=%r (resolution %d)",
                column,
                initial_height,
                self.resolution,
            )
            raise

    def tick(self) -> None:
        """
        Advance relaxation, free fall and absorption by one step.

        Raises:
            SimulationInvariantError: if the state is invalid before the
                step; no buffer, grain or counter is touched in that case
        """
        self._check_invariants()

        self.pile.step()
        self.particles.step()
        absorbed = self.particles.absorb(self.pile.grid)

        self.absorbed_total += absorbed
        self.current_tick += 1

    def run(self, n_ticks: int) -> dict:
        """
        Run n ticks back-to-back.

        Returns:
            Statistics dictionary
        """
        absorbed_before = self.absorbed_total
        for _ in range(n_ticks):
            self.tick()

        return {
            "n_ticks": n_ticks,
            "absorbed": self.absorbed_total - absorbed_before,
            "pile_mass": self.pile.grid.total_mass,
            "live_particles": self.particle_count,
            "max_height": float(self.pile.heights.max()),
        }

    def advance_frame(self) -> FrameSnapshot:
        """Run updates_per_frame ticks and return the resulting snapshot."""
        self.run(self.config.updates_per_frame)
        return self.snapshot()

    def pile_heights(self) -> np.ndarray:
        """Copy of the current heights, marked read-only."""
        heights = self.pile.heights.copy()
        heights.flags.writeable = False
        return heights

    def live_particles(self) -> list[tuple[int, float]]:
        """(column, y) for every live grain."""
        return self.particles.positions()

    def snapshot(self) -> FrameSnapshot:
        """Current state as a FrameSnapshot."""
        return FrameSnapshot(
            tick=self.current_tick,
            heights=self.pile_heights(),
            particles=tuple(self.live_particles()),
        )

    def _check_invariants(self) -> None:
        heights = self.pile.heights
        expected = (self.resolution,)

        problem = None
        if heights.shape != expected or self.pile.scratch.shape != expected:
            problem = (
                f"pile buffers have shapes {heights.shape} / {self.pile.scratch.shape}, "
                f"expected {expected}"
            )
        elif self.particles.resolution != self.resolution:
            problem = (
                f"particle set has {self.particles.resolution} columns, "
                f"expected {self.resolution}"
            )
        elif not np.all(np.isfinite(heights)):
            problem = "pile contains non-finite heights"
        elif np.any(heights < 0):
            problem = "pile contains negative heights"
        else:
            for i, grain in self.particles:
                if not (math.isfinite(grain.y) and math.isfinite(grain.vertical_speed)):
                    problem = f"grain in column {i} has non-finite state {grain!r}"
                    break

        if problem is not None:
            logger.error("Tick %d aborted: %s", self.current_tick, problem)
            raise SimulationInvariantError(problem)
