"""components package."""

from .flags import Flags
from .label import Label
from .position import Position
from .size import Size

__all__ = ["Flags", "Label", "Position", "Size"]
