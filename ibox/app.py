"""
Application controller: lay out the box, draw it, capture the answers.
"""

import logging

from .capture import capture_fields
from .layout import build_layout, compute_geometry
from .render import render_box

logger = logging.getLogger(__name__)


class BoxPrompt:
    """One run of the prompt box."""

    def __init__(self, config, terminal):
        self.config = config
        self.terminal = terminal

    def run(self) -> list[str]:
        """Draw the box and capture every field. Returns the answers in order."""
        layout = build_layout(self.config.query)
        geometry = compute_geometry(layout, self.config, self.terminal)
        fields = render_box(self.terminal, layout, geometry, self.config.border)
        captured = []
        if fields:
            # One raw-mode session for all fields so typed-ahead keys survive
            with self.terminal.session():
                captured = capture_fields(self.terminal, fields)
        logger.info("Captured %d field(s)", len(captured))
        return captured
