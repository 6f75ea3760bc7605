"""
Exception types for ibox.

Every failure the tool can report is an IboxError subclass; the CLI maps
each one to an exit code in a single place (ibox.cli.exit_code_for).
"""


class IboxError(Exception):
    """Base class for all ibox errors."""
    pass


class ConfigurationError(IboxError):
    """Raised for malformed flags: bad border, bad position, unknown option."""
    pass


class EmptyQueryError(ConfigurationError):
    """Raised when there are no query lines to render."""
    pass


class TerminalQueryError(IboxError):
    """Raised when the cursor position or terminal size can't be read."""
    pass


class OutputError(IboxError):
    """Raised when writing to stderr or stdout fails."""
    pass


class LayoutError(IboxError):
    """Raised when a row would need a negative fill (content wider than the box)."""
    pass


class FieldSealedError(IboxError):
    """Raised when a field is fed input outside of its capturing state."""
    pass
