"""
Analysis layer: diagnostics computed from pile heights.

- eligible_directions: which columns would shed mass next step
- is_stable: no column would shed mass
- max_step: steepest adjacent height difference
- relax_until_stable: tick until the pile settles and no grains are falling
"""

from sandpile.analysis.profile import (
    eligible_directions,
    is_stable,
    max_step,
    relax_until_stable,
)

__all__ = [
    "eligible_directions",
    "is_stable",
    "max_step",
    "relax_until_stable",
]
