"""
Input capture for ibox prompt fields.

Each field goes through IDLE -> CAPTURING -> COMMITTED exactly once, in the
order the fields appear in the box. While capturing, the cursor is pinned to
the end of what has been typed so far and every printable key is echoed in
place. Enter commits the field; so does any other event (see `transition`).
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum

from .errors import FieldSealedError, OutputError

logger = logging.getLogger(__name__)


class FieldState(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    COMMITTED = "committed"


@dataclass
class Field:
    """An input field: where typing is echoed and what has been typed."""
    insertion_point: tuple[int, int]  # (col, row) right after the field's text
    captured_text: str = ""
    state: FieldState = FieldState.IDLE

    @property
    def cursor(self) -> tuple[int, int]:
        """Where the next typed character goes."""
        col, row = self.insertion_point
        return col + len(self.captured_text), row

    def begin(self):
        if self.state is not FieldState.IDLE:
            raise FieldSealedError(f"Cannot start a field in state {self.state.value}")
        self.state = FieldState.CAPTURING

    def append(self, char: str):
        if self.state is not FieldState.CAPTURING:
            raise FieldSealedError(f"Cannot type into a field in state {self.state.value}")
        self.captured_text += char

    def commit(self):
        if self.state is not FieldState.CAPTURING:
            raise FieldSealedError(f"Cannot commit a field in state {self.state.value}")
        self.captured_text += "\n"
        self.state = FieldState.COMMITTED


def transition(event) -> FieldState:
    """
    Next state of a capturing field after `event`.

    Printable keys keep the field capturing. Enter commits it, and so does
    every other event: unknown keys, arrows, backspace, or input closing.
    TODO: decide whether non-printable keys (arrows, Esc, Backspace, Tab)
    should be ignored instead, so that only Enter and non-key events
    (OtherEvent) end the field.
    """
    if getattr(event, "is_printable", False):
        return FieldState.CAPTURING
    return FieldState.COMMITTED


def capture_field(terminal, field: Field) -> str:
    """
    Run one field to completion.

    The cursor position before capture is restored afterwards.

    Returns:
        The committed text, newline included
    """
    saved_position = terminal.current_cursor_position()
    field.begin()

    while field.state is FieldState.CAPTURING:
        terminal.move_cursor_now(*field.cursor)
        event = terminal.next_key_event()
        if transition(event) is FieldState.CAPTURING:
            field.append(event.char)
            terminal.echo(event.char)
        else:
            logger.debug("Field at %s ended by %r", field.insertion_point, event)
            field.commit()

    terminal.move_cursor_now(*saved_position)
    return field.captured_text


def capture_fields(terminal, fields: list[Field]) -> list[str]:
    """Capture every field in order; returns the committed texts in the same order."""
    return [capture_field(terminal, field) for field in fields]


def emit_output(captured: list[str], stream=None):
    """Write all committed answers to stdout in one write."""
    if stream is None:
        stream = sys.stdout
    output = "".join(captured)
    try:
        stream.write(output)
        stream.flush()
    except (OSError, ValueError) as e:
        raise OutputError(f"Failed to write output: {e}") from e
