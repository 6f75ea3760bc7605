"""
Configuration for ibox.

BoxConfig holds everything the command line can set. BorderPalette is the
six-glyph border, either a named preset or six literal characters.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .constants import (
    BORDER_GLYPH_COUNT,
    BORDER_PRESETS,
    DEFAULT_BORDER,
    DEFAULT_PADDING,
)
from .errors import ConfigurationError, EmptyQueryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BorderPalette:
    """Six border glyphs: top-left, horizontal, top-right, vertical, bottom-left, bottom-right."""
    glyphs: tuple

    def __post_init__(self):
        if len(self.glyphs) != BORDER_GLYPH_COUNT:
            raise ConfigurationError(f"Invalid border length: {len(self.glyphs)}")

    @classmethod
    def from_string(cls, value: str) -> "BorderPalette":
        """Build a palette from a preset name or a string of six glyphs."""
        glyphs = BORDER_PRESETS.get(value, value)
        return cls(tuple(glyphs))

    @classmethod
    def default(cls) -> "BorderPalette":
        return cls.from_string(DEFAULT_BORDER)

    def __getitem__(self, index: int) -> str:
        return self.glyphs[index]

    def __len__(self) -> int:
        return len(self.glyphs)

    @property
    def top_left(self) -> str:
        return self.glyphs[0]

    @property
    def horizontal(self) -> str:
        return self.glyphs[1]

    @property
    def top_right(self) -> str:
        return self.glyphs[2]

    @property
    def vertical(self) -> str:
        return self.glyphs[3]

    @property
    def bottom_left(self) -> str:
        return self.glyphs[4]

    @property
    def bottom_right(self) -> str:
        return self.glyphs[5]


@dataclass
class BoxConfig:
    """Parsed command-line configuration."""
    query: list[str] = field(default_factory=list)
    border: BorderPalette = field(default_factory=BorderPalette.default)
    padding: int = DEFAULT_PADDING
    position: Optional[tuple[int, int]] = None  # None = current cursor position
    center: bool = False
    show_help: bool = False
    log_file: Optional[str] = None

    def validate(self):
        """Check invariants that the parser can't express. Help requests skip this."""
        if self.show_help:
            return
        if not self.query:
            raise EmptyQueryError("No query specified")
        if self.padding < 0:
            raise ConfigurationError(f"Invalid length: {self.padding}")


def parse_padding(value: str) -> int:
    """
    Parse the -l value.

    Anything that isn't a non-negative integer falls back to the default
    padding rather than failing.
    """
    try:
        padding = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric length %r, using %d", value, DEFAULT_PADDING)
        return DEFAULT_PADDING
    if padding < 0:
        logger.warning("Ignoring negative length %d, using %d", padding, DEFAULT_PADDING)
        return DEFAULT_PADDING
    return padding


def parse_position(value: str) -> tuple[int, int]:
    """Parse the -p value "X,Y" into a (col, row) pair."""
    x, sep, y = value.partition(",")
    if not sep:
        raise ConfigurationError("Invalid position")
    try:
        col, row = int(x), int(y)
    except ValueError:
        raise ConfigurationError("Invalid position") from None
    if col < 0 or row < 0:
        raise ConfigurationError("Invalid position")
    return col, row
