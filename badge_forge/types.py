"""Common type aliases and enumerations.

Colors and icons are addressed by their row position in the source tables;
``ColorIndex`` and ``IconIndex`` are plain integers so they can be formatted
straight into output filenames.
"""

from enum import StrEnum, auto
from typing import Tuple

ColorIndex = int
IconIndex = int

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]

TRANSPARENT: RGBA = (0, 0, 0, 0)


class Affinity(StrEnum):
    """Which layer role a palette color may be used for."""

    PRIMARY = auto()
    SECONDARY = auto()

    @classmethod
    def from_code(cls, code: int) -> "Affinity":
        """Map the numeric ``layer`` column of the color table (0 or 1)."""
        if code == 0:
            return cls.PRIMARY
        if code == 1:
            return cls.SECONDARY
        raise ValueError(f"Unknown color layer code: {code}")


class Layer(StrEnum):
    """Which slot of the badge stack an icon occupies."""

    SYMBOL = auto()
    BORDER = auto()

    @classmethod
    def from_code(cls, code: int) -> "Layer":
        """Map the numeric ``layer`` column of the icon table (0 or 1)."""
        if code == 0:
            return cls.SYMBOL
        if code == 1:
            return cls.BORDER
        raise ValueError(f"Unknown icon layer code: {code}")
