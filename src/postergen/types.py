"""Type aliases used across the postergen package."""

from typing import Literal, Tuple

# Straight (non-premultiplied) RGBA, 0-255 per channel
RGBA = Tuple[int, int, int, int]

# Horizontal placement of a run inside its line
Alignment = Literal["left", "center", "right"]

# Font variant selectors
Weight = Literal["light", "normal", "bold"]
FontStyle = Literal["normal", "italic"]
