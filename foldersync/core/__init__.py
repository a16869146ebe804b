"""
Core utilities for Folder Sync.

Shared paths, logging, and formatting.
"""

from .paths import (
    get_data_dir,
    get_stats_path,
    get_settings_path,
    get_log_path,
)

from .formatting import (
    format_size,
    format_size_exact,
    format_duration,
    format_hms,
    format_speed,
    format_percent,
    name_sort_key,
)

from .logging import TeeOutput, debug_log

__all__ = [
    # Paths
    "get_data_dir",
    "get_stats_path",
    "get_settings_path",
    "get_log_path",
    # Formatting
    "format_size",
    "format_size_exact",
    "format_duration",
    "format_hms",
    "format_speed",
    "format_percent",
    "name_sort_key",
    # Logging
    "TeeOutput",
    "debug_log",
]
