"""
Box drawing primitives.

Builds the three kinds of box rows from a six-glyph border palette. Widths
are plain len() counts, so wide or combining characters will misalign.
"""

from ...errors import LayoutError


def fill(glyph: str, count: int) -> str:
    """Repeat `glyph` `count` times. A negative count means the box is too narrow."""
    if count < 0:
        raise LayoutError(f"Content exceeds box width by {-count} column(s)")
    return glyph * count


def render_top(title: str | None, palette, width: int) -> str:
    """
    Top row: corner, one horizontal, the title, horizontal fill, corner.

    Without a title the row is just corner, one horizontal, corner.
    """
    row = palette.top_left + palette.horizontal
    if title is not None:
        row += title + fill(palette.horizontal, width - len(title))
    return row + palette.top_right


def render_middle(text: str, palette, width: int) -> str:
    """Content row: vertical, text, space fill plus one padding column, vertical."""
    return palette.vertical + text + fill(" ", width - len(text) + 1) + palette.vertical


def render_bottom(palette, width: int) -> str:
    """Bottom row: corner, one horizontal, `width` horizontals, corner."""
    return palette.bottom_left + palette.horizontal + fill(palette.horizontal, width) + palette.bottom_right
