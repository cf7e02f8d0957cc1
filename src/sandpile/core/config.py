"""
Configuration for the pile simulation and the brush emitter.

Every option is fixed at construction and affects only the step it names:
- resolution: number of columns (pile buffers and particle lists)
- stable_distance / max_movable: pile relaxation
- gravity: grain integration
- updates_per_frame: ticks per rendered frame
"""

from __future__ import annotations
from dataclasses import dataclass
import math
import numbers


@dataclass
class SimulationConfig:
    """Configuration for a 1D sand pile simulation."""

    resolution: int = 200  # Number of columns N
    stable_distance: float = 0.5  # Half-differences at or below this do not flow
    max_movable: float = 10.0  # Per-direction transfer cap per tick
    gravity: float = 0.01  # Speed increment per tick
    updates_per_frame: int = 5  # Ticks run before each snapshot

    def validate(self) -> None:
        """Raise ValueError if any option is outside its usable range."""
        if not isinstance(self.resolution, numbers.Integral) or self.resolution < 1:
            raise ValueError(f"resolution must be a positive integer, got {self.resolution!r}")
        if not math.isfinite(self.stable_distance) or self.stable_distance < 0:
            raise ValueError(f"stable_distance must be finite and >= 0, got {self.stable_distance!r}")
        if not math.isfinite(self.max_movable) or self.max_movable <= 0:
            raise ValueError(f"max_movable must be finite and > 0, got {self.max_movable!r}")
        if not math.isfinite(self.gravity):
            raise ValueError(f"gravity must be finite, got {self.gravity!r}")
        if not isinstance(self.updates_per_frame, numbers.Integral) or self.updates_per_frame < 1:
            raise ValueError(
                f"updates_per_frame must be a positive integer, got {self.updates_per_frame!r}"
            )


@dataclass
class BrushConfig:
    """Configuration for the circular grain emitter."""

    size: float = 5.0  # Brush diameter in columns
    strength: int = 10  # Grains emitted per paint call

    def validate(self) -> None:
        if not math.isfinite(self.size) or self.size < 0:
            raise ValueError(f"brush size must be finite and >= 0, got {self.size!r}")
        if not isinstance(self.strength, numbers.Integral) or self.strength < 0:
            raise ValueError(f"brush strength must be a non-negative integer, got {self.strength!r}")
