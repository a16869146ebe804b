"""
Exceptions raised by the sync engine.

Only fatal conditions raise. Problems with a single file or folder are
recorded on the WalkResult and the walk continues.
"""


class SyncError(OSError):
    """Base class for fatal sync errors."""


class SyncConfigError(SyncError):
    """Source or destination root is missing, empty, unreadable or not writable."""


class SourceVanishedError(SyncError):
    """A source directory disappeared mid-walk (e.g. removable drive unplugged)."""


class SyncAlreadyRunningError(SyncError):
    """sync() was called on a session that is already running."""
