#!/usr/bin/env python3
"""
Demo: Pouring Sand onto a Flat Floor

A brush held above the floor emits grains every frame. Grains fall,
merge into the pile, and the pile slumps sideways until every adjacent
pair of columns differs by at most one unit.

1. Pour from a fixed brush position for a number of frames
2. Move the brush and pour a second heap
3. Release the brush and let everything settle
4. Plot the final profile and the height history

Output: output/demo_pour/pile.png, output/demo_pour/history.png
"""

import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from sandpile.core import Brush, BrushConfig, BrushStroke, FrameDriver, Simulation, SimulationConfig
from sandpile.analysis import is_stable, max_step, relax_until_stable
from sandpile.logging_config import setup_logging
from sandpile.viz import FigureSink, save_figure


def main():
    setup_logging(level=logging.INFO)

    print("=" * 60)
    print("  SAND POUR DEMONSTRATION")
    print("=" * 60)

    print("\n1. Setting up simulation...")
    config = SimulationConfig(
        resolution=200,
        stable_distance=0.5,
        max_movable=10,
        gravity=0.01,
        updates_per_frame=5,
    )
    sim = Simulation(config)

    rng = np.random.default_rng(seed=42)
    brush = Brush(config.resolution, BrushConfig(size=5, strength=10), rng=rng)
    stroke = BrushStroke(brush)
    sink = FigureSink()
    driver = FrameDriver(sim, source=stroke, sink=sink)
    print(f"   {config.resolution} columns, {config.updates_per_frame} ticks per frame")

    print("\n2. Pouring at column 60...")
    stroke.press(60, 90)
    stats = driver.run(300)
    print(f"   Pile mass: {stats['pile_mass']:.0f}, grains in flight: {stats['live_particles']}")

    print("\n3. Pouring at column 140...")
    stroke.move(140, 120)
    stats = driver.run(300)
    print(f"   Pile mass: {stats['pile_mass']:.0f}, grains in flight: {stats['live_particles']}")

    print("\n4. Releasing brush and settling...")
    stroke.release()
    ticks = relax_until_stable(sim, max_ticks=50_000)
    driver.run(1)
    heights = sim.pile_heights()
    print(f"   Settled after {ticks} ticks")
    print(f"   Stable: {is_stable(heights, config.stable_distance)}")
    print(f"   Steepest step: {max_step(heights):.0f}")
    print(f"   Total mass: {sim.total_mass:.0f} (grains emitted: {600 * brush.config.strength})")

    print("\n5. Plotting...")
    output_dir = Path("output/demo_pour")

    fig, _ = sink.render(title="Settled Pile")
    save_figure(fig, output_dir / "pile.png")
    print(f"   Saved to: {output_dir / 'pile.png'}")

    fig, _ = sink.render_history()
    save_figure(fig, output_dir / "history.png")
    print(f"   Saved to: {output_dir / 'history.png'}")

    plt.show()

    print("\n" + "=" * 60)
    print("Demo complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
