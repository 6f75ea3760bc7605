"""
Keyboard input handling for ibox.

Reads single keystrokes in raw mode and decodes them into key events.
"""

import os
import select
import sys
from contextlib import contextmanager
from dataclasses import dataclass

from ..errors import TerminalQueryError

# Platform-specific imports
if os.name == 'nt':
    import msvcrt
else:
    import termios
    import tty


@contextmanager
def raw_terminal(fd: int | None = None):
    """
    Context manager for raw terminal mode (Unix only, no-op on Windows).

    Switches with TCSANOW so keys typed ahead stay in the input queue.
    """
    if os.name == 'nt':
        yield None
    else:
        if fd is None:
            fd = sys.stdin.fileno()
        try:
            old_settings = termios.tcgetattr(fd)
            tty.setraw(fd, termios.TCSANOW)
        except termios.error as e:
            raise TerminalQueryError(f"Cannot switch terminal to raw mode: {e}") from e
        try:
            yield fd
        finally:
            try:
                termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
            except termios.error as e:
                raise TerminalQueryError(f"Cannot restore terminal mode: {e}") from e


# Special key constants
KEY_CHAR = "KEY_CHAR"
KEY_ENTER = "KEY_ENTER"
KEY_ESC = "KEY_ESC"
KEY_BACKSPACE = "KEY_BACKSPACE"
KEY_TAB = "KEY_TAB"
KEY_UP = "KEY_UP"
KEY_DOWN = "KEY_DOWN"
KEY_LEFT = "KEY_LEFT"
KEY_RIGHT = "KEY_RIGHT"
KEY_PAGE_UP = "KEY_PAGE_UP"
KEY_PAGE_DOWN = "KEY_PAGE_DOWN"
KEY_UNKNOWN = "KEY_UNKNOWN"

CTRL_C = '\x03'

# Escape sequences (after the leading ESC) on Unix terminals
UNIX_ESCAPE_CODES = {
    '[A': KEY_UP,
    '[B': KEY_DOWN,
    '[C': KEY_RIGHT,
    '[D': KEY_LEFT,
    'OA': KEY_UP,
    'OB': KEY_DOWN,
    'OC': KEY_RIGHT,
    'OD': KEY_LEFT,
    '[5~': KEY_PAGE_UP,
    '[6~': KEY_PAGE_DOWN,
}

# Second byte after a 0xe0/0x00 prefix on Windows
WINDOWS_KEY_CODES = {
    'H': KEY_UP,
    'P': KEY_DOWN,
    'K': KEY_LEFT,
    'M': KEY_RIGHT,
    'I': KEY_PAGE_UP,
    'Q': KEY_PAGE_DOWN,
}

UNIX_SPECIAL_CHARS = {
    '\r': KEY_ENTER,
    '\n': KEY_ENTER,
    '\x7f': KEY_BACKSPACE,
    '\x08': KEY_BACKSPACE,
    '\t': KEY_TAB,
}

WINDOWS_SPECIAL_CHARS = {
    '\r': KEY_ENTER,
    '\x08': KEY_BACKSPACE,
    '\t': KEY_TAB,
}


@dataclass(frozen=True)
class KeyEvent:
    """A decoded keystroke. `char` is only set for KEY_CHAR."""
    code: str
    char: str = ""

    @property
    def is_printable(self) -> bool:
        return self.code == KEY_CHAR


@dataclass(frozen=True)
class OtherEvent:
    """Any non-key event, e.g. input closed."""
    reason: str = ""


def decode_unix(ch: str, extra: str = ""):
    """
    Decode one Unix keystroke.

    Args:
        ch: First character read ('' means end of input)
        extra: Characters that followed an ESC within the escape timeout

    Returns:
        KeyEvent or OtherEvent

    Raises:
        KeyboardInterrupt: On Ctrl-C (raw mode disables the usual SIGINT)
    """
    if not ch:
        return OtherEvent("eof")
    if ch == CTRL_C:
        raise KeyboardInterrupt
    if ch in UNIX_SPECIAL_CHARS:
        return KeyEvent(UNIX_SPECIAL_CHARS[ch])
    if ch == '\x1b':
        if not extra:
            return KeyEvent(KEY_ESC)
        return KeyEvent(UNIX_ESCAPE_CODES.get(extra, KEY_UNKNOWN))
    if ch < ' ':
        return KeyEvent(KEY_UNKNOWN)
    return KeyEvent(KEY_CHAR, ch)


def decode_windows(ch: str, extra: str = ""):
    """Decode one Windows keystroke; `extra` is the byte after a 0xe0/0x00 prefix."""
    if not ch:
        return OtherEvent("eof")
    if ch == CTRL_C:
        raise KeyboardInterrupt
    if ch in ('\xe0', '\x00'):
        return KeyEvent(WINDOWS_KEY_CODES.get(extra, KEY_UNKNOWN))
    if ch in WINDOWS_SPECIAL_CHARS:
        return KeyEvent(WINDOWS_SPECIAL_CHARS[ch])
    if ch == '\x1b':
        return KeyEvent(KEY_ESC)
    if ch < ' ':
        return KeyEvent(KEY_UNKNOWN)
    return KeyEvent(KEY_CHAR, ch)


def _utf8_length(lead: int) -> int:
    """Number of bytes in a UTF-8 sequence given its lead byte."""
    if lead < 0x80:
        return 1
    if lead >> 5 == 0b110:
        return 2
    if lead >> 4 == 0b1110:
        return 3
    if lead >> 3 == 0b11110:
        return 4
    return 1


def read_char(fd: int, timeout: float | None = None, pending: list | None = None) -> str:
    """
    Read one (possibly multi-byte) character straight from a file descriptor.

    Characters already queued in `pending` are returned first. Bypasses
    sys.stdin's buffer so select() sees every pending byte.
    Returns '' on end of input or when `timeout` expires.

    Raises:
        TerminalQueryError: If the descriptor can't be read (e.g. hangup)
    """
    if pending:
        return pending.pop(0)
    try:
        if timeout is not None and not select.select([fd], [], [], timeout)[0]:
            return ''
        data = os.read(fd, 1)
        if not data:
            return ''
        for _ in range(_utf8_length(data[0]) - 1):
            more = os.read(fd, 1)
            if not more:
                break
            data += more
    except (OSError, ValueError) as e:
        raise TerminalQueryError(f"Failed to read from terminal: {e}") from e
    return data.decode('utf-8', errors='replace')


def read_escape_sequence(fd: int, timeout: float = 0.02, pending: list | None = None) -> str:
    """Read whatever follows an ESC within `timeout`. Empty means a bare ESC."""
    extra = ''
    while len(extra) < 10:
        ch = read_char(fd, timeout, pending)
        if not ch:
            break
        extra += ch
        # Sequences end on a letter or '~'
        if len(extra) > 1 and (extra[-1].isalpha() or extra[-1] == '~'):
            break
    return extra


def read_key_event(fd: int | None = None, pending: list | None = None):
    """
    Block for the next keystroke and decode it.

    Args:
        fd: Input descriptor (defaults to stdin)
        pending: Characters read earlier but not yet consumed; drained first

    Returns KeyEvent or OtherEvent. Raises KeyboardInterrupt on Ctrl-C and
    TerminalQueryError if the terminal can't be read.
    """
    if os.name == 'nt':
        ch = pending.pop(0) if pending else msvcrt.getwch()
        extra = ''
        if ch in ('\xe0', '\x00'):
            extra = pending.pop(0) if pending else msvcrt.getwch()
        return decode_windows(ch, extra)

    if fd is None:
        fd = sys.stdin.fileno()
    with raw_terminal(fd):
        ch = read_char(fd, pending=pending)
        extra = read_escape_sequence(fd, pending=pending) if ch == '\x1b' else ''
    return decode_unix(ch, extra)
