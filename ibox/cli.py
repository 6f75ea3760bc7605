"""
Command line entry point for ibox.

Usage: ibox [OPTION]... [QUERY]...

Everything up to the first argument that doesn't start with '-' (or up to
'--') is an option; everything after is a query line.
"""

import argparse
import logging
import os
import sys

from .app import BoxPrompt
from .config import BorderPalette, BoxConfig, parse_padding, parse_position
from .constants import (
    DEFAULT_BORDER,
    DEFAULT_PADDING,
    EXIT_CONFIG,
    EXIT_INTERRUPTED,
    EXIT_LAYOUT,
    EXIT_OK,
    EXIT_OUTPUT,
    EXIT_TERMINAL,
    LOG_FILE_ENV,
)
from .capture import emit_output
from .errors import (
    ConfigurationError,
    IboxError,
    LayoutError,
    OutputError,
    TerminalQueryError,
)
from .logging_config import setup_logging
from .ui.terminal import Terminal

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Usage: ibox [OPTION]... [QUERY]...
Draw a box containing each QUERY line. Lines ending in '?>' are input
fields; answers are printed to stdout, one per line.
Example:
    ibox -l=24 'Title' 'Context' 'Question: ?>'
Options:
    -b=BORDER, --border=BORDER
        Specify the border characters or presets.
        Presets: single (default), double, thick, curved
        Default: ┌─┐│└┘
    -l=LENGTH, --length=LENGTH
        Specify the added length of the input space after the longest line.
        Default: 8
    -p=X,Y, --position=X,Y
        Specify the position of the top left corner of the box.
        Default: current cursor position
    -c, --center
        Center the box on the screen.
    --log-file=PATH
        Write debug logs to PATH (also: IBOX_LOG).
    -h, --help
        Print this help message and exit.
"""

# Exit code per error type; first match wins, so subclasses go first
EXIT_CODES = [
    (ConfigurationError, EXIT_CONFIG),
    (TerminalQueryError, EXIT_TERMINAL),
    (OutputError, EXIT_OUTPUT),
    (LayoutError, EXIT_LAYOUT),
    (KeyboardInterrupt, EXIT_INTERRUPTED),
]


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting."""

    def error(self, message):
        raise ConfigurationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="ibox", add_help=False)
    parser.add_argument("-b", "--border", default=DEFAULT_BORDER)
    parser.add_argument("-l", "--length", default=str(DEFAULT_PADDING))
    parser.add_argument("-p", "--position", default=None)
    parser.add_argument("-c", "--center", action="store_true")
    parser.add_argument("-h", "--help", action="store_true", dest="show_help")
    parser.add_argument("--log-file", default=None)
    return parser


def split_argv(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split arguments into (options, query lines)."""
    for i, arg in enumerate(argv):
        if arg == "--":
            return argv[:i], argv[i + 1:]
        if not arg.startswith("-"):
            return argv[:i], argv[i:]
    return list(argv), []


def parse_args(argv: list[str] | None = None) -> BoxConfig:
    """
    Parse command line arguments into a BoxConfig.

    Raises:
        ConfigurationError: Unknown option, bad border or bad position
        EmptyQueryError: No query lines (unless help was requested)
    """
    if argv is None:
        argv = sys.argv[1:]
    options, query = split_argv(argv)
    args = build_parser().parse_args(options)

    config = BoxConfig(
        query=query,
        border=BorderPalette.from_string(args.border),
        padding=parse_padding(args.length),
        position=parse_position(args.position) if args.position is not None else None,
        center=args.center,
        show_help=args.show_help,
        log_file=args.log_file,
    )
    config.validate()
    return config


def print_help():
    sys.stderr.write(HELP_TEXT)
    sys.stderr.flush()


def exit_code_for(exc: BaseException) -> int:
    for exc_type, code in EXIT_CODES:
        if isinstance(exc, exc_type):
            return code
    return EXIT_CONFIG


def main(argv: list[str] | None = None, terminal=None, stdout=None) -> int:
    """
    Run ibox and return the process exit code.

    All failures end up here and are reported on stderr.
    """
    setup_logging(log_file=os.environ.get(LOG_FILE_ENV))
    try:
        config = parse_args(argv)
        if config.show_help:
            print_help()
            return EXIT_OK
        if config.log_file:
            setup_logging(log_file=config.log_file)

        prompt = BoxPrompt(config, terminal if terminal is not None else Terminal())
        captured = prompt.run()
        emit_output(captured, stdout)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        sys.stderr.write(f"error: {e}\n")
        print_help()
        return exit_code_for(e)
    except IboxError as e:
        logger.error("%s: %s", type(e).__name__, e)
        sys.stderr.write(f"error: {e}\n")
        return exit_code_for(e)
    except KeyboardInterrupt as e:
        logger.info("Cancelled by user")
        sys.stderr.write("\nCancelled by user.\n")
        return exit_code_for(e)
    return EXIT_OK


def run():
    """Console script entry point."""
    sys.exit(main())
