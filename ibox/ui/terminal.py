"""
Terminal output and queries.

Terminal is the only object that touches the real terminal: it buffers
output for the diagnostic stream, moves the cursor (buffered or flushed),
asks the terminal where the cursor is and how big the screen is, and hands
out key events.
"""

import logging
import os
import re
import sys
import time
from contextlib import contextmanager

from ..errors import OutputError, TerminalQueryError
from .keyboard import raw_terminal, read_char, read_key_event

if os.name == 'nt':
    import msvcrt

logger = logging.getLogger(__name__)

# Device status report: ESC [ row ; col R
CURSOR_REPORT_RE = re.compile(r'\x1b\[(\d+);(\d+)R')
CURSOR_QUERY = '\x1b[6n'
CURSOR_REPORT_TIMEOUT = 1.0  # seconds to wait for each reply character
# Characters read while waiting for a report, typed-ahead keys included
CURSOR_REPORT_MAX_LEN = 256


def move_sequence(col: int, row: int) -> str:
    """ANSI sequence for an absolute move to 0-based (col, row)."""
    return f"\x1b[{row + 1};{col + 1}H"


def parse_cursor_report(reply: str) -> tuple[int, int]:
    """
    Parse a cursor position report into 0-based (col, row).

    Raises:
        TerminalQueryError: If the reply isn't a position report
    """
    match = CURSOR_REPORT_RE.search(reply)
    if not match:
        raise TerminalQueryError("Cannot get cursor position")
    row, col = int(match.group(1)), int(match.group(2))
    return col - 1, row - 1


def split_cursor_report(buffer: str) -> tuple[str | None, str]:
    """
    Find a cursor report inside `buffer`.

    Returns:
        (report or None, the rest of the buffer with the report removed)
    """
    match = CURSOR_REPORT_RE.search(buffer)
    if not match:
        return None, buffer
    return match.group(0), buffer[:match.start()] + buffer[match.end():]


def _getwch_with_timeout() -> str:
    """msvcrt.getwch() that gives up with '' after CURSOR_REPORT_TIMEOUT."""
    end_time = time.time() + CURSOR_REPORT_TIMEOUT
    while not msvcrt.kbhit():
        if time.time() >= end_time:
            return ''
        time.sleep(0.01)
    return msvcrt.getwch()


class Terminal:
    """
    Terminal I/O used by the renderer and the capture loop.

    Output is written to `stream` (stderr by default). Moves made with
    move_cursor() are queued and go out with the next flush; moves made
    with move_cursor_now() are flushed immediately.
    """

    def __init__(self, stream=None, input_stream=None):
        self.stream = stream if stream is not None else sys.stderr
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self._pending: list[str] = []
        self._typed_ahead: list[str] = []  # keys read during cursor queries

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def write(self, text: str):
        """Queue text for the next flush."""
        self._pending.append(text)

    def flush(self):
        """Write everything queued and flush the stream."""
        data = ''.join(self._pending)
        self._pending.clear()
        try:
            if data:
                self.stream.write(data)
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise OutputError(f"Failed to write to terminal: {e}") from e

    def write_line(self, text: str):
        """Write one row plus newline, together with any queued moves."""
        self.write(text + "\n")
        self.flush()

    def echo(self, text: str):
        """Write text immediately; the cursor advances past it."""
        self.write(text)
        self.flush()

    def move_cursor(self, col: int, row: int):
        """Queue a cursor move (sent with the next flush)."""
        self.write(move_sequence(col, row))

    def move_cursor_now(self, col: int, row: int):
        """Move the cursor and flush right away."""
        self.move_cursor(col, row)
        self.flush()

    # ------------------------------------------------------------------
    # Queries and input
    # ------------------------------------------------------------------

    def _input_fd(self) -> int:
        try:
            fd = self.input_stream.fileno()
        except (OSError, ValueError) as e:
            raise TerminalQueryError(f"Input is not a terminal: {e}") from e
        if not os.isatty(fd):
            raise TerminalQueryError("Input is not a terminal")
        return fd

    @contextmanager
    def session(self):
        """
        Hold raw mode across several reads and queries (no-op on Windows).

        Reads inside the session still switch modes themselves, but nothing
        typed in between is lost.
        """
        if os.name == 'nt':
            yield self
            return
        with raw_terminal(self._input_fd()):
            yield self

    def current_cursor_position(self) -> tuple[int, int]:
        """
        Ask the terminal where the cursor is.

        Anything queued is flushed first, so queued moves are reflected.
        Keys typed while waiting for the answer are kept for next_key_event().

        Returns:
            0-based (col, row)

        Raises:
            TerminalQueryError: If the terminal doesn't answer
        """
        self.flush()
        if os.name == 'nt':
            reply = self._read_report_windows()
        else:
            reply = self._read_report_unix(self._input_fd())
        position = parse_cursor_report(reply)
        logger.debug("Cursor position %s", position)
        return position

    def _collect_report(self, next_char) -> str:
        """
        Read characters until a cursor report shows up.

        Everything around the report is type-ahead and is queued for
        next_key_event(). `next_char` returns '' on timeout.
        """
        buffer = ''
        while len(buffer) < CURSOR_REPORT_MAX_LEN:
            ch = next_char()
            if not ch:
                break
            buffer += ch
            if ch != 'R':
                continue
            report, rest = split_cursor_report(buffer)
            if report is not None:
                if rest:
                    logger.debug("Keeping %d typed-ahead character(s)", len(rest))
                    self._typed_ahead.extend(rest)
                return report
        raise TerminalQueryError("Cannot get cursor position")

    def _read_report_unix(self, fd: int) -> str:
        with raw_terminal(fd):
            self.write(CURSOR_QUERY)
            self.flush()
            return self._collect_report(lambda: read_char(fd, CURSOR_REPORT_TIMEOUT))

    def _read_report_windows(self) -> str:
        self.write(CURSOR_QUERY)
        self.flush()
        return self._collect_report(_getwch_with_timeout)

    def terminal_size(self) -> tuple[int, int]:
        """
        Size of the terminal behind the output stream.

        Returns:
            (cols, rows)

        Raises:
            TerminalQueryError: If the stream isn't a terminal
        """
        try:
            size = os.get_terminal_size(self.stream.fileno())
        except (OSError, ValueError) as e:
            raise TerminalQueryError(f"Failed to get terminal size: {e}") from e
        return size.columns, size.lines

    def next_key_event(self):
        """Flush pending output, then return the next key event (type-ahead first)."""
        self.flush()
        if os.name == 'nt':
            return read_key_event(pending=self._typed_ahead)
        return read_key_event(self._input_fd(), pending=self._typed_ahead)
