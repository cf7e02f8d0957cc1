"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def small_config():
    """Configuration for a small 10-column simulation."""
    from sandpile.core import SimulationConfig
    return SimulationConfig(
        resolution=10,
        stable_distance=0.5,
        max_movable=10,
        gravity=0.01,
        updates_per_frame=5,
    )


@pytest.fixture
def small_sim(small_config):
    """Fresh simulation on the small configuration."""
    from sandpile.core import Simulation
    return Simulation(small_config)


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)
