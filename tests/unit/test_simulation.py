"""Unit tests for Simulation and FrameSnapshot."""

import logging

import numpy as np
import pytest

from sandpile.core import FrameSnapshot, Simulation, SimulationConfig, SimulationInvariantError


class TestCreation:
    """Tests for Simulation construction."""

    def test_default_config(self):
        sim = Simulation()
        assert sim.resolution == 200
        assert sim.pile.heights.shape == (200,)
        assert np.all(sim.pile.heights == 0)
        assert sim.particle_count == 0
        assert sim.current_tick == 0

    def test_config_passed_through(self, small_config):
        sim = Simulation(small_config)
        assert sim.pile.stable_distance == small_config.stable_distance
        assert sim.pile.max_movable == small_config.max_movable
        assert sim.particles.gravity == small_config.gravity
        assert sim.particles.resolution == small_config.resolution

    def test_invalid_config_rejected(self):
        with pytest.raises(ValueError):
            Simulation(SimulationConfig(resolution=0))


class TestSpawn:
    """Tests for Simulation.spawn."""

    def test_spawn_adds_grain(self, small_sim):
        small_sim.spawn(3, 20.0)
        assert small_sim.live_particles() == [(3, 20.0)]

    def test_out_of_range_raises_and_logs(self, small_sim, caplog):
        with caplog.at_level(logging.WARNING, logger="sandpile"):
            with pytest.raises(ValueError):
                small_sim.spawn(10, 20.0)
        assert "Rejected spawn" in caplog.text
        assert small_sim.particle_count == 0

    def test_negative_column_raises(self, small_sim):
        with pytest.raises(ValueError):
            small_sim.spawn(-1, 20.0)
        assert small_sim.particle_count == 0


class TestTick:
    """Tests for Simulation.tick."""

    def test_tick_counter(self, small_sim):
        small_sim.tick()
        small_sim.tick()
        assert small_sim.current_tick == 2

    def test_absorption_sees_relaxed_pile(self):
        sim = Simulation(SimulationConfig(resolution=3, gravity=0.0))
        sim.pile.heights[:] = [0.0, 0.0, 40.0]
        # Column 1 is at 0 before the tick and 10 after relaxation
        sim.spawn(1, 5.0)
        sim.tick()
        np.testing.assert_array_equal(sim.pile_heights(), [0.0, 11.0, 30.0])
        assert sim.particle_count == 0
        assert sim.absorbed_total == 1

    def test_gravity_applied_before_absorption(self):
        sim = Simulation(SimulationConfig(resolution=1, gravity=1.0))
        sim.pile.heights[0] = 4.0
        sim.spawn(0, 5.5)
        sim.tick()  # y=5.5, v=1
        assert sim.particle_count == 1
        sim.tick()  # y=4.5, v=2
        assert sim.particle_count == 1
        sim.tick()  # y=2.5 < 4
        assert sim.particle_count == 0
        assert sim.pile.heights[0] == 5.0

    def test_total_mass_conserved(self, small_sim, rng):
        for _ in range(50):
            small_sim.spawn(int(rng.integers(0, 10)), float(rng.uniform(0, 30)))
        mass = small_sim.total_mass
        for _ in range(500):
            small_sim.tick()
            assert small_sim.total_mass == mass
        assert small_sim.particle_count == 0
        assert small_sim.pile.grid.total_mass == 50

    def test_grain_lands_in_spawn_column(self):
        sim = Simulation(SimulationConfig(resolution=5, gravity=0.5))
        sim.spawn(4, 10.0)
        sim.run(20)
        assert sim.pile.heights[4] == 1.0
        assert sim.pile.grid.total_mass == 1.0

    def test_boundary_columns_tick_without_error(self):
        sim = Simulation(SimulationConfig(resolution=4))
        sim.pile.heights[:] = [500.0, 0.0, 0.0, 500.0]
        sim.spawn(0, 0.0)
        sim.spawn(3, 0.0)
        sim.run(10)
        assert sim.total_mass == 1002.0


class TestInvariants:
    """Tests for the all-or-nothing tick contract."""

    def test_non_finite_height_leaves_state_untouched(self, small_sim):
        small_sim.spawn(2, 30.0)
        small_sim.pile.heights[5] = np.nan
        before = small_sim.pile.heights.copy()
        scratch = small_sim.pile.scratch

        with pytest.raises(SimulationInvariantError):
            small_sim.tick()

        np.testing.assert_array_equal(small_sim.pile.heights, before)
        assert small_sim.pile.scratch is scratch
        assert small_sim.live_particles() == [(2, 30.0)]
        assert small_sim.particles.columns[2][0].vertical_speed == 0.0
        assert small_sim.current_tick == 0

    def test_negative_height_rejected(self, small_sim):
        small_sim.pile.heights[0] = -1.0
        with pytest.raises(SimulationInvariantError):
            small_sim.tick()

    def test_non_finite_grain_rejected(self, small_sim):
        grain = small_sim.particles.spawn(1, 10.0)
        grain.vertical_speed = float("inf")
        before = small_sim.pile.heights.copy()
        with pytest.raises(SimulationInvariantError):
            small_sim.tick()
        assert grain.y == 10.0
        np.testing.assert_array_equal(small_sim.pile.heights, before)

    def test_wrong_buffer_length_rejected(self, small_sim):
        small_sim.pile.grid.heights = np.zeros(3)
        with pytest.raises(SimulationInvariantError):
            small_sim.tick()

    def test_invariant_error_is_runtime_error(self):
        assert issubclass(SimulationInvariantError, RuntimeError)


class TestSnapshots:
    """Tests for the read-only views."""

    def test_pile_heights_is_read_only_copy(self, small_sim):
        heights = small_sim.pile_heights()
        with pytest.raises(ValueError):
            heights[0] = 5.0
        small_sim.pile.heights[0] = 7.0
        assert heights[0] == 0.0

    def test_snapshot_contents(self, small_sim):
        small_sim.pile.heights[4] = 3.0
        small_sim.spawn(1, 8.0)
        snap = small_sim.snapshot()
        assert isinstance(snap, FrameSnapshot)
        assert snap.tick == 0
        assert snap.resolution == 10
        assert snap.pile_mass == 3.0
        assert snap.particles == ((1, 8.0),)

    def test_advance_frame_runs_updates_per_frame(self, small_sim):
        snap = small_sim.advance_frame()
        assert snap.tick == small_sim.config.updates_per_frame
        assert small_sim.current_tick == 5

    def test_run_statistics(self, small_sim):
        small_sim.pile.heights[0] = 9.0
        small_sim.spawn(0, 0.0)
        stats = small_sim.run(3)
        assert stats["n_ticks"] == 3
        assert stats["absorbed"] == 1
        assert stats["pile_mass"] == 10.0
        assert stats["live_particles"] == 0
        assert stats["max_height"] == small_sim.pile.heights.max()
