"""
Horizontal layout of overlapping calendar blocks.

Each weekday is laid out independently: a conflict graph is built, blocks
are assigned display columns, and blocks whose placement is not already
final are widened with a linear program solved by Google OR-Tools.
"""
from .engine import LayoutEngine
from .layout import layout_weekday
from .models import WEEKDAYS, Block, LayoutOptions, LayoutReport, Week

__all__ = [
    "WEEKDAYS",
    "Block",
    "LayoutEngine",
    "LayoutOptions",
    "LayoutReport",
    "Week",
    "layout_weekday",
]
