"""
Entry filtering for the tree walk.

Applies the same rules to source and destination listings:
- OS metadata files (.DS_Store, iPod Photo Cache, Icon\r) are ignored
- Backups created by this tool (<name>.bkYYYYMMDDHHMM) are ignored
- An optional caller-supplied predicate decides the rest
"""

import os
import re
from pathlib import Path
from typing import Callable, List, Optional

from ..core.formatting import name_sort_key

BACKUP_SUFFIX_PATTERN = re.compile(r"\.bk\d{12}$")

IGNORED_NAMES = {".DS_Store", "iPod Photo Cache"}


def is_backup_name(name: str) -> bool:
    """True if the name carries a backup suffix generated by this tool."""
    return BACKUP_SUFFIX_PATTERN.search(name) is not None


def is_ignored_name(name: str) -> bool:
    """True for OS metadata entries and tool-generated backups."""
    if name in IGNORED_NAMES:
        return True
    # macOS custom folder icons are stored as "Icon\r"; shells show it as "Icon?"
    lowered = name.lower()
    if "icon?" in lowered or "icon\r" in lowered:
        return True
    return is_backup_name(name)


def accept_entry(path: Path, file_filter: Optional[Callable[[Path], bool]] = None) -> bool:
    """Apply the global rules, then the custom filter if any."""
    if is_ignored_name(path.name):
        return False
    if file_filter is not None and not file_filter(path):
        return False
    return True


def list_children(
    directory: Path,
    file_filter: Optional[Callable[[Path], bool]] = None,
) -> List[Path]:
    """
    List accepted children of a directory, sorted by name.

    Listing errors (OSError) propagate: a directory that cannot be listed
    means the tree can no longer be trusted.
    """
    with os.scandir(directory) as entries:
        children = [Path(entry.path) for entry in entries]
    children = [child for child in children if accept_entry(child, file_filter)]
    return sorted(children, key=lambda p: name_sort_key(p.name))


def has_visible_entry(directory: Path) -> bool:
    """True if the directory lists at least one entry that passes the global rules."""
    with os.scandir(directory) as entries:
        for entry in entries:
            if not is_ignored_name(entry.name):
                return True
    return False
