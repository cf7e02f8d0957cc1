"""
sandpile: 1D falling-sand pile simulator

A column grid of pile heights relaxes toward stability by moving mass
between neighboring columns, while grains fall under gravity and merge
into the pile on contact.

Core concepts:
- Pile relaxation: half the height difference flows downhill, capped per tick
- Grains: semi-implicit Euler free fall, one column each, no horizontal motion
- Absorption: a grain below the pile surface becomes one unit of pile height
- Frames: several ticks run back-to-back before each rendered snapshot
"""

__version__ = "0.1.0"
