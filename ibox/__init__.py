"""
ibox - Draw a bordered prompt box on the terminal and capture inline answers.

The box is drawn on stderr; answers typed into the prompt fields are written
to stdout, one per line, so the tool can be used inside command substitution.

Import from submodules directly:
    from ibox.config import BoxConfig, BorderPalette
    from ibox.layout import build_layout
    from ibox.render import render_box
    from ibox.capture import capture_fields, emit_output
    from ibox.ui.terminal import Terminal
"""


def _get_version():
    """Read version from VERSION file, falling back to installed metadata."""
    from pathlib import Path
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    try:
        from importlib.metadata import version, PackageNotFoundError
        return version("ibox")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
