"""
Sync module for Folder Sync.

Mirrors a source tree into a destination tree:
1. Root validation and previous-run statistics (session)
2. Depth-first walk with copy/delete/type-change decisions (walker)
3. Old-version renames and recursive deletes (versioning)
4. Background progress lines (progress)
"""

from .errors import (
    SyncError,
    SyncConfigError,
    SourceVanishedError,
    SyncAlreadyRunningError,
)
from .filters import (
    BACKUP_SUFFIX_PATTERN,
    is_backup_name,
    is_ignored_name,
    list_children,
)
from .policy import FileMeta, read_meta, is_timezone_skew, copy_reason, must_copy
from .result import RunCounters, MessageLog, WalkResult
from .versioning import BackupVersioner, make_backup_suffix
from .copier import copy_file, copy_metadata
from .progress import (
    ProgressSnapshot,
    ProgressTracker,
    ProgressReporter,
    format_progress_line,
)
from .walker import TreeWalker
from .session import Synchronizer, validate_roots

__all__ = [
    # Errors
    "SyncError",
    "SyncConfigError",
    "SourceVanishedError",
    "SyncAlreadyRunningError",
    # Filters
    "BACKUP_SUFFIX_PATTERN",
    "is_backup_name",
    "is_ignored_name",
    "list_children",
    # Policy
    "FileMeta",
    "read_meta",
    "is_timezone_skew",
    "copy_reason",
    "must_copy",
    # Results
    "RunCounters",
    "MessageLog",
    "WalkResult",
    # Versioning / copy
    "BackupVersioner",
    "make_backup_suffix",
    "copy_file",
    "copy_metadata",
    # Progress
    "ProgressSnapshot",
    "ProgressTracker",
    "ProgressReporter",
    "format_progress_line",
    # Walk
    "TreeWalker",
    "Synchronizer",
    "validate_roots",
]
