"""
Centralized display functions for formatted output.

Any output with color codes or complex formatting belongs here.
Every line carries the session name prefix ("Photos - ") so several
sessions can share one terminal or log file.

Usage:
    from foldersync.ui.widgets import display
    display.copying(name, path, "destination missing")
"""

from pathlib import Path
from typing import Optional

from ..primitives.colors import Colors
from ..primitives.terminal import get_terminal_width, print_section_header, print_separator, truncate_middle
from ...core.formatting import (
    format_size,
    format_size_exact,
    format_duration,
    format_hms,
    format_speed,
    format_percent,
)

_c = Colors


# === Session messages ===

def session_start(name: str, source: Path, destination: Path, simulate: bool = False):
    title = name.rstrip(" -") if name else "Sync"
    print_section_header(title)
    print(f"  {source} {_c.CYAN}→{_c.RESET} {destination}")
    if simulate:
        print(f"  {_c.YELLOW}Dry run: no files will be changed{_c.RESET}")

def last_run(name: str, non_copy_ms: int):
    if non_copy_ms > 0:
        print(f"{name}Last run: {format_hms(non_copy_ms)}")
    else:
        print(f"{name}Last run: (unknown time)")

def fatal_error(name: str, message: str):
    print(f"{name}{_c.RED}Error:{_c.RESET} {message}")


# === Per-entry actions ===

def copying(name: str, path: Path, reason: str):
    print(f"{name}Copying ({reason}): {path}")

def keeping_old_version(name: str, backup_path: Path):
    print(f"{name}{_c.DIM}Keeping old version at:{_c.RESET} {backup_path}")

def deleting(name: str, path: Path):
    print(f"{name}{_c.RED}Deleting{_c.RESET} {path}")

def deleting_stale(name: str, path: Path):
    print(f"{name}{_c.RED}Deleting (no longer in source):{_c.RESET} {path}")

def warning(name: str, message: str):
    print(f"{name}{_c.YELLOW}Warning:{_c.RESET} {message}")

def error(name: str, message: str):
    print(f"{name}{_c.RED}Error:{_c.RESET} {message}")


# === Progress ===

def copy_progress(name: str, copied: int, total: int, bytes_per_sec: float):
    print(f"{name}* {format_percent(copied, total)} ({format_size(copied)}/{format_size(total)} - {format_speed(bytes_per_sec)})")

def progress_report(line: str):
    print(truncate_middle(line, get_terminal_width() - 1), flush=True)


# === Results ===

RESULT_LABEL_WIDTH = 38

def _result_line(label: str, value):
    print(f"  {label + ':':<{RESULT_LABEL_WIDTH}}{value}")

def results_header(name: str):
    title = name.split(" - ")[0] if name.strip() else "Results"
    print_section_header(title)

def results_errors(count: int, samples: list[str]):
    if count == 0:
        print(f"  {_c.GREEN}✓{_c.RESET} No errors")
        return
    print(f"  {_c.RED}Files with errors: {count}{_c.RESET}. Sample:")
    for message in samples:
        print(f"    - {message}")
    if count > len(samples):
        print(f"    ... and {count - len(samples)} more (see log)")

def results_warnings(count: int, samples: list[str]):
    if count == 0:
        print(f"  {_c.GREEN}✓{_c.RESET} No warnings")
        return
    print(f"  {_c.YELLOW}Warnings: {count}{_c.RESET}. Sample:")
    for message in samples:
        print(f"    - {message}")
    if count > len(samples):
        print(f"    ... and {count - len(samples)} more (see log)")

def results_summary(
    source: Path,
    destination: Path,
    elapsed: float,
    file_time: float,
    counters,
    free_space: Optional[tuple[int, int]] = None,
):
    c = counters
    _result_line("Source", source)
    _result_line("Destination", destination)
    _result_line("Total time", format_duration(elapsed))
    _result_line("Time manipulating files", format_duration(file_time))
    _result_line("Folders checked in source", f"{c.folders_visited:,}")
    _result_line("Files checked in source", f"{c.source_files:,} - {format_size_exact(c.source_bytes)}")
    _result_line("Files copied to destination", f"{c.files_copied:,} - {format_size_exact(c.bytes_copied)}")
    _result_line("Files/folders deleted", f"{c.files_deleted:,}")
    _result_line("Files/folders renamed to backup", f"{c.files_renamed:,}")
    _result_line("Files already in sync", f"{c.files_in_sync:,} - {format_size_exact(c.bytes_in_sync)}")
    if free_space is not None:
        free, total = free_space
        line = f"{format_size_exact(free)} of {format_size_exact(total)}"
        if total > 0:
            line += f" ({free * 100 / total:.1f}%)"
        _result_line("Free space in destination", line)
    print_separator()
