"""
Draws the box on the terminal and records where each input field starts.
"""

import logging

from .capture import Field
from .layout import BoxGeometry, BoxLayout, ContentLine
from .ui.components import render_bottom, render_middle, render_top

logger = logging.getLogger(__name__)


def render_middle_row(terminal, line: ContentLine, palette, width: int) -> tuple[str, tuple[int, int] | None]:
    """
    Build one content row.

    For a field, the insertion point is taken from the live cursor position,
    since the row's screen column depends on where the box was placed.

    Returns:
        (row text, insertion point or None)
    """
    row = render_middle(line.display_text, palette, width)
    if not line.is_field:
        return row, None
    col, cur_row = terminal.current_cursor_position()
    return row, (col + 1 + len(line.display_text), cur_row)


def render_box(terminal, layout: BoxLayout, geometry: BoxGeometry, palette) -> list[Field]:
    """
    Draw the box: top row at the origin, one row per line below it, then the bottom.

    Returns:
        Fields in the order their rows were drawn
    """
    col, row = geometry.origin
    width = geometry.interior_width
    title = layout.title.display_text if layout.title is not None else None

    terminal.move_cursor(col, row)
    terminal.write_line(render_top(title, palette, width))

    fields = []
    for line in layout.rows:
        row += 1
        terminal.move_cursor(col, row)
        text, insertion_point = render_middle_row(terminal, line, palette, width)
        if insertion_point is not None:
            fields.append(Field(insertion_point=insertion_point))
        terminal.write_line(text)

    terminal.move_cursor(col, row + 1)
    terminal.write_line(render_bottom(palette, width))

    logger.debug("Rendered %d rows, %d field(s)", len(layout.rows) + 2, len(fields))
    return fields
