"""
Folder Sync - mirror a directory tree into a backup destination.

This package walks a source tree in lock-step with a destination tree,
copying new and changed files, optionally keeping old versions of replaced
files and deleting entries that no longer exist in the source.

Import from submodules directly:
    from foldersync.sync import Synchronizer
    from foldersync.config import SyncOptions
    from foldersync.stats import SyncStatistics
"""


def _get_version():
    """Read version from VERSION file."""
    from pathlib import Path
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    return "0.0.0"


__version__ = _get_version()
