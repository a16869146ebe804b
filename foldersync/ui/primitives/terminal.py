"""
Terminal utilities for Folder Sync.

Handles terminal width, truncation and section headers.
"""

import os
import re

ANSI_PATTERN = re.compile(r'\x1b\[[0-9;]*m')


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return ANSI_PATTERN.sub('', text)


def get_terminal_width() -> int:
    """Get terminal width, with fallback."""
    try:
        return os.get_terminal_size().columns
    except OSError:
        return 80


def truncate_middle(text: str, max_len: int, marker: str = "...") -> str:
    """Truncate a path-like string in the middle, keeping its start and its file name."""
    if len(text) <= max_len:
        return text
    if max_len <= len(marker) + 2:
        return text[:max_len]
    keep = max_len - len(marker)
    head = keep // 2
    tail = keep - head
    return text[:head] + marker + text[-tail:]


SECTION_WIDTH = 50


def print_section_header(name: str, width: int = SECTION_WIDTH):
    """Print a styled section header using box-drawing characters."""
    from .colors import Colors
    c = Colors
    header = f"━━━ {name} "
    header += "━" * max(5, width - len(header))
    print(f"\n{c.BOLD}{header}{c.RESET}")


def make_separator(char: str = "━", width: int = SECTION_WIDTH) -> str:
    """Create a horizontal separator line string."""
    return char * width


def print_separator(char: str = "━", width: int = SECTION_WIDTH):
    """Print a horizontal separator line."""
    print(make_separator(char, width))
