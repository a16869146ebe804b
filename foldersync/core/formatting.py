"""
Formatting utilities for Folder Sync.
"""

from pathlib import Path


# ============================================================================
# Cross-platform path utilities
# ============================================================================

def relative_posix(path: Path, base: Path) -> str:
    """
    Get the relative path as a posix-style string.

    Use instead of str(path.relative_to(base)) for cross-platform consistency.
    """
    return path.relative_to(base).as_posix()


# ============================================================================
# Size and duration formatting
# ============================================================================

def format_size(size_bytes: int) -> str:
    """Format bytes as human readable string."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} PB"


def format_size_exact(size_bytes: int) -> str:
    """Format bytes as "<human> / <exact>B", e.g. "1.5 KB / 1,536B".

    Zero is shown without the exact part.
    """
    if size_bytes <= 0:
        return format_size(0)
    return f"{format_size(size_bytes)} / {size_bytes:,}B"


def format_duration(seconds: float) -> str:
    """Format seconds as human readable duration."""
    if seconds < 60:
        return f"{int(seconds)}s"
    elif seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    else:
        return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60)}m"


def format_hms(millis: int) -> str:
    """Format milliseconds as H:MM:SS.mmm (clock style, used for ETAs and skews)."""
    millis = max(0, int(millis))
    hours, rest = divmod(millis, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, ms = divmod(rest, 1000)
    return f"{hours}:{minutes:02d}:{seconds:02d}.{ms:03d}"


def format_speed(bytes_per_sec: float) -> str:
    """Format bytes per second as human readable speed."""
    if bytes_per_sec < 1024:
        return f"{bytes_per_sec:.0f} B/s"
    elif bytes_per_sec < 1024 * 1024:
        return f"{bytes_per_sec / 1024:.1f} KB/s"
    else:
        return f"{bytes_per_sec / (1024 * 1024):.1f} MB/s"


def format_percent(part: int, total: int) -> str:
    """Format part/total as a percentage with one decimal (0.0% for empty totals)."""
    if total <= 0:
        return "0.0%"
    return f"{part * 100 / total:.1f}%"


# ============================================================================
# Sorting utilities
# ============================================================================

def name_sort_key(name: str) -> str:
    """Sort key for case-insensitive name sorting."""
    return name.casefold()

