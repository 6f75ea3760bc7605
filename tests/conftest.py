"""Pytest configuration and fixtures."""

from contextlib import contextmanager

import pytest

from ibox.ui.keyboard import KEY_CHAR, KEY_ENTER, KeyEvent, OtherEvent


class FakeTerminal:
    """
    Stand-in for ibox.ui.terminal.Terminal.

    Records every operation in `ops` and replays scripted key events.
    Writing a row moves the cursor to column 0 of the next row, like a
    real newline does.
    """

    def __init__(self, events=(), cursor=(0, 0), size=(80, 24)):
        self.events = list(events)
        self.cursor = cursor
        self.size = size
        self.ops = []
        self.rows = []

    def move_cursor(self, col, row):
        self.ops.append(("move", col, row))
        self.cursor = (col, row)

    def move_cursor_now(self, col, row):
        self.ops.append(("move_now", col, row))
        self.cursor = (col, row)

    def write_line(self, text):
        self.ops.append(("line", text))
        self.rows.append(text)
        self.cursor = (0, self.cursor[1] + 1)

    def echo(self, text):
        self.ops.append(("echo", text))
        self.cursor = (self.cursor[0] + len(text), self.cursor[1])

    def flush(self):
        self.ops.append(("flush",))

    @contextmanager
    def session(self):
        self.ops.append(("raw_on",))
        try:
            yield self
        finally:
            self.ops.append(("raw_off",))

    def current_cursor_position(self):
        self.ops.append(("query",))
        return self.cursor

    def terminal_size(self):
        return self.size

    def next_key_event(self):
        self.ops.append(("read",))
        if not self.events:
            return OtherEvent("eof")
        return self.events.pop(0)


def keys(text: str, enter: bool = True) -> list:
    """Key events for typing `text`, optionally followed by Enter."""
    events = [KeyEvent(KEY_CHAR, ch) for ch in text]
    if enter:
        events.append(KeyEvent(KEY_ENTER))
    return events


@pytest.fixture
def fake_terminal():
    return FakeTerminal()
