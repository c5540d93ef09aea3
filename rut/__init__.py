"""rut - a small terminal text editor."""

from .buffer import TextBuffer
from .coords import Coord
from .cursor import CursorModel

__all__ = [
    'TextBuffer',
    'Coord',
    'CursorModel',
]
