"""
Visualization utilities.

- Pile profile with falling grains
- Height history heatmaps
- FigureSink for collecting frames from a FrameDriver
"""

from sandpile.viz.pile import (
    FigureSink,
    plot_height_history,
    plot_snapshot,
    save_figure,
)

__all__ = [
    "FigureSink",
    "plot_height_history",
    "plot_snapshot",
    "save_figure",
]
