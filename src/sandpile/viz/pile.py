"""
Offline rendering of pile snapshots with matplotlib.

The pile is drawn as a filled step profile (one flat segment per column)
and falling grains as single-cell markers, sand on a sky background.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

if TYPE_CHECKING:
    from sandpile.core.simulation import FrameSnapshot


SKY_COLOR = "#87CEEB"
SAND_COLOR = "#D2B48C"
CMAP_HEIGHT = "YlOrBr"


def plot_snapshot(
    snapshot: "FrameSnapshot",
    title: str | None = None,
    ax: Axes | None = None,
    figsize: tuple[float, float] = (10, 5),
    ylim: float | None = None,
    grain_size: float = 4.0,
) -> tuple[Figure, Axes]:
    """
    Plot the pile profile and live grains of one snapshot.

    Args:
        snapshot: State to draw
        title: Plot title (defaults to the tick number)
        ax: Existing axes to plot on (creates new figure if None)
        figsize: Figure size if creating new figure
        ylim: Top of the y axis (auto if None)
        grain_size: Marker size for falling grains

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    heights = np.asarray(snapshot.heights, dtype=np.float64)
    n = heights.shape[0]
    edges = np.arange(n + 1)

    ax.set_facecolor(SKY_COLOR)
    ax.stairs(heights, edges, fill=True, color=SAND_COLOR, baseline=0)

    if snapshot.particles:
        cols, ys = zip(*snapshot.particles)
        ax.scatter(
            np.asarray(cols) + 0.5,
            np.asarray(ys),
            s=grain_size,
            color=SAND_COLOR,
            marker="s",
            linewidths=0,
            zorder=3,
        )

    if ylim is None:
        top = heights.max() if n else 0.0
        if snapshot.particles:
            top = max(top, max(y for _, y in snapshot.particles))
        ylim = max(top * 1.05, 1.0)

    ax.set_xlim(0, n)
    ax.set_ylim(0, ylim)
    ax.set_title(title if title is not None else f"Tick {snapshot.tick}")
    ax.set_xlabel("column")
    ax.set_ylabel("height")

    return fig, ax


def plot_height_history(
    history: Sequence[np.ndarray],
    title: str = "Pile Height over Time",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (10, 6),
    colorbar: bool = True,
) -> tuple[Figure, Axes]:
    """
    Plot a sequence of height arrays as a (frame, column) heatmap.

    Args:
        history: One height array per frame, all the same length
        title: Plot title
        ax: Existing axes (creates new if None)
        figsize: Figure size if creating new figure
        colorbar: Whether to add a colorbar

    Returns:
        (fig, ax) tuple
    """
    if len(history) == 0:
        raise ValueError("history is empty")

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    field = np.vstack([np.asarray(h, dtype=np.float64) for h in history])
    im = ax.imshow(field, origin="lower", aspect="auto", cmap=CMAP_HEIGHT)

    if colorbar:
        plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04, label="height")

    ax.set_title(title)
    ax.set_xlabel("column")
    ax.set_ylabel("frame")

    return fig, ax


class FigureSink:
    """
    FrameSink that records snapshots for plotting after the run.

    Args:
        keep_history: Also keep every frame's heights for plot_height_history
    """

    def __init__(self, keep_history: bool = True):
        self.keep_history = keep_history
        self.last: "FrameSnapshot | None" = None
        self.history: list[np.ndarray] = []

    def draw(self, snapshot: "FrameSnapshot") -> None:
        self.last = snapshot
        if self.keep_history:
            self.history.append(snapshot.heights)

    def render(self, **kwargs) -> tuple[Figure, Axes]:
        """Plot the most recent snapshot."""
        if self.last is None:
            raise ValueError("No snapshot has been drawn yet")
        return plot_snapshot(self.last, **kwargs)

    def render_history(self, **kwargs) -> tuple[Figure, Axes]:
        """Plot every recorded frame's heights."""
        return plot_height_history(self.history, **kwargs)


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
