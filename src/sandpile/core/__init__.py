"""
Core simulation primitives.

This layer knows only columns, heights and grains:
- ColumnGrid: pile height per column
- PileSimulator: double-buffered neighbor relaxation
- ParticleSet / Grain: falling grains and their absorption into the pile
- Simulation: one tick = relax, fall, absorb
- Brush / FrameDriver: input and frame seams around the core

Rendering lives in sandpile.viz, diagnostics in sandpile.analysis.
"""

from sandpile.core.config import SimulationConfig, BrushConfig
from sandpile.core.pile import (
    ColumnGrid,
    PileSimulator,
    compute_transfers,
    eligible_directions,
    half_differences,
)
from sandpile.core.particles import Grain, ParticleSet
from sandpile.core.simulation import FrameSnapshot, Simulation, SimulationInvariantError
from sandpile.core.brush import Brush
from sandpile.core.driver import BrushStroke, FrameDriver, FrameSink, SeedSource

__all__ = [
    "SimulationConfig",
    "BrushConfig",
    "ColumnGrid",
    "PileSimulator",
    "compute_transfers",
    "eligible_directions",
    "half_differences",
    "Grain",
    "ParticleSet",
    "FrameSnapshot",
    "Simulation",
    "SimulationInvariantError",
    "Brush",
    "BrushStroke",
    "FrameDriver",
    "FrameSink",
    "SeedSource",
]
