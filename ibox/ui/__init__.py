"""
User interface module.

Handles terminal output, cursor queries and keyboard input.
"""

from .keyboard import (
    KeyEvent,
    OtherEvent,
    raw_terminal,
    read_key_event,
    KEY_CHAR,
    KEY_ENTER,
    KEY_ESC,
    KEY_BACKSPACE,
    KEY_TAB,
    KEY_UP,
    KEY_DOWN,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_UNKNOWN,
)
from .terminal import Terminal

__all__ = [
    # Keyboard
    "KeyEvent",
    "OtherEvent",
    "raw_terminal",
    "read_key_event",
    "KEY_CHAR",
    "KEY_ENTER",
    "KEY_ESC",
    "KEY_BACKSPACE",
    "KEY_TAB",
    "KEY_UP",
    "KEY_DOWN",
    "KEY_LEFT",
    "KEY_RIGHT",
    "KEY_UNKNOWN",
    # Terminal
    "Terminal",
]
