"""
Shared color definitions for terminal output.
"""


class Colors:
    RESET = "\x1b[0m"
    BOLD = "\x1b[1m"
    DIM = "\x1b[2m"
    YELLOW = "\x1b[38;2;234;179;8m"
    RED = "\x1b[38;2;239;68;68m"
    GREEN = "\x1b[38;2;34;197;94m"
    CYAN = "\x1b[38;2;34;211;238m"
