"""
Terminal I/O primitives.

Low-level terminal helpers and color handling.
"""

from .terminal import (
    strip_ansi,
    get_terminal_width,
    truncate_middle,
    print_section_header,
    print_separator,
    make_separator,
    SECTION_WIDTH,
)
from .colors import Colors

__all__ = [
    # Terminal
    "strip_ansi",
    "get_terminal_width",
    "truncate_middle",
    "print_section_header",
    "print_separator",
    "make_separator",
    "SECTION_WIDTH",
    # Colors
    "Colors",
]
