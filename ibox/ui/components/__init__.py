"""
Reusable visual building blocks.

Non-interactive components for rendering the box.
"""

from .box import (
    fill,
    render_top,
    render_middle,
    render_bottom,
)

__all__ = [
    "fill",
    "render_top",
    "render_middle",
    "render_bottom",
]
