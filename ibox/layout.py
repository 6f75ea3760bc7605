"""
Box layout for ibox.

Turns the raw query strings into content lines, works out the interior
width, and decides where on screen the box goes.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import PROMPT_MARKER
from .errors import ConfigurationError, EmptyQueryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentLine:
    """One query line. Lines ending in the prompt marker are input fields."""
    text: str

    @property
    def is_field(self) -> bool:
        return self.text.endswith(PROMPT_MARKER)

    @property
    def display_text(self) -> str:
        if self.is_field:
            return self.text[:-len(PROMPT_MARKER)]
        return self.text


@dataclass(frozen=True)
class BoxGeometry:
    origin: tuple[int, int]  # (col, row) of the top-left corner
    interior_width: int


@dataclass(frozen=True)
class BoxLayout:
    """Title (drawn into the top border) and the rows drawn between the borders."""
    title: Optional[ContentLine]
    rows: tuple

    @property
    def lines(self) -> list[ContentLine]:
        return ([self.title] if self.title is not None else []) + list(self.rows)


def build_layout(query: list[str]) -> BoxLayout:
    """First query line is the title, the rest become rows."""
    if not query:
        raise EmptyQueryError("No query specified")
    lines = [ContentLine(text) for text in query]
    return BoxLayout(title=lines[0], rows=tuple(lines[1:]))


def compute_width(lines: list[ContentLine], padding: int) -> int:
    """
    Interior width: longest display text plus padding.

    Raises:
        EmptyQueryError: If there are no lines
        ConfigurationError: If padding is negative
    """
    if not lines:
        raise EmptyQueryError("No query specified")
    if padding < 0:
        raise ConfigurationError(f"Invalid length: {padding}")
    return max(len(line.display_text) for line in lines) + padding


def centered_origin(size: tuple[int, int], width: int, line_count: int) -> tuple[int, int]:
    """Top-left corner that centers the box on a (cols, rows) screen, clamped to 0."""
    cols, rows = size
    col = cols // 2 - width // 2 - 2
    row = rows // 2 - line_count // 2 - 2
    return max(col, 0), max(row, 0)


def compute_geometry(layout: BoxLayout, config, terminal) -> BoxGeometry:
    """
    Work out the interior width and the origin for this run.

    The origin comes from, in order: centering on the terminal, an explicit
    position, or the current cursor position.
    """
    lines = layout.lines
    width = compute_width(lines, config.padding)

    if config.center:
        origin = centered_origin(terminal.terminal_size(), width, len(lines))
    elif config.position is not None:
        origin = config.position
    else:
        origin = terminal.current_cursor_position()

    logger.debug("Box geometry: origin=%s width=%d lines=%d", origin, width, len(lines))
    return BoxGeometry(origin=origin, interior_width=width)
