"""
Shared constants for ibox.
"""

# Suffix that turns a query line into an input field
PROMPT_MARKER = "?>"

# Columns added after the longest line
DEFAULT_PADDING = 8

# Border presets: top-left, horizontal, top-right, vertical, bottom-left, bottom-right
BORDER_PRESETS = {
    "single": "┌─┐│└┘",
    "double": "╔═╗║╚╝",
    "thick": "┏━┓┃┗┛",
    "curved": "╭─╮│╰╯",
}
DEFAULT_BORDER = "single"
BORDER_GLYPH_COUNT = 6

# Environment variable naming a debug log file
LOG_FILE_ENV = "IBOX_LOG"

# Process exit codes
EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_TERMINAL = 2
EXIT_OUTPUT = 3
EXIT_LAYOUT = 4
EXIT_INTERRUPTED = 130
