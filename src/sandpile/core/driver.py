"""
Frame driver: connects an input source and a render sink to the simulation.

Per frame:
1. Spawn every seed point the source supplies
2. Hand the current snapshot to the sink
3. Run updates_per_frame ticks

The sink sees the state before this frame's ticks, so the grains spawned in
a frame are drawn at their starting height once.
"""

from __future__ import annotations
from typing import Iterable, Protocol, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from sandpile.core.brush import Brush
    from sandpile.core.simulation import FrameSnapshot, Simulation

logger = logging.getLogger(__name__)


class SeedSource(Protocol):
    """Supplies (column, height) points where new grains appear."""

    def seeds(self, frame: int) -> Iterable[tuple[int, float]]:
        """
        Seed points for the given frame.

        Args:
            frame: Zero-based frame number

        Returns:
            Iterable of (column, height) pairs, columns already in range
        """
        ...


class FrameSink(Protocol):
    """Receives one snapshot per frame (e.g. a renderer)."""

    def draw(self, snapshot: "FrameSnapshot") -> None:
        ...


class BrushStroke:
    """
    SeedSource driven by a held pointer.

    press()/move() set the brush center, release() lifts it. While lifted
    no seeds are produced.
    """

    def __init__(self, brush: "Brush"):
        self.brush = brush
        self.position: tuple[float, float] | None = None

    @property
    def is_down(self) -> bool:
        return self.position is not None

    def press(self, x: float, y: float) -> None:
        self.position = (x, y)

    def move(self, x: float, y: float) -> None:
        self.position = (x, y)

    def release(self) -> None:
        self.position = None

    def seeds(self, frame: int) -> list[tuple[int, float]]:
        if self.position is None:
            return []
        x, y = self.position
        return self.brush.emit(x, y)


class FrameDriver:
    """
    Runs the simulation frame by frame.

    Both collaborators are optional: without a source no grains are added,
    without a sink nothing is drawn.
    """

    def __init__(
        self,
        simulation: "Simulation",
        source: SeedSource | None = None,
        sink: FrameSink | None = None,
    ):
        self.simulation = simulation
        self.source = source
        self.sink = sink
        self.frame = 0

    def step_frame(self) -> "FrameSnapshot":
        """
        Advance one frame.

        Returns:
            Snapshot after this frame's ticks
        """
        spawned = 0
        if self.source is not None:
            for column, height in self.source.seeds(self.frame):
                self.simulation.spawn(column, height)
                spawned += 1

        if self.sink is not None:
            self.sink.draw(self.simulation.snapshot())

        snapshot = self.simulation.advance_frame()
        logger.debug(
            "Frame %d: spawned %d, live %d, pile mass %.0f",
            self.frame,
            spawned,
            len(snapshot.particles),
            snapshot.pile_mass,
        )
        self.frame += 1
        return snapshot

    def run(self, n_frames: int) -> dict:
        """
        Run n frames.

        Returns:
            Statistics dictionary
        """
        tick_before = self.simulation.current_tick
        for _ in range(n_frames):
            self.step_frame()

        stats = {
            "n_frames": n_frames,
            "n_ticks": self.simulation.current_tick - tick_before,
            "pile_mass": self.simulation.pile.grid.total_mass,
            "live_particles": self.simulation.particle_count,
        }
        logger.info(
            "Ran %d frames (%d ticks): pile mass %.0f, %d grains in flight",
            stats["n_frames"],
            stats["n_ticks"],
            stats["pile_mass"],
            stats["live_particles"],
        )
        return stats
