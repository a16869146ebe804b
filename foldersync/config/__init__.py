"""
Configuration management for Folder Sync.

Config files:
- foldersync.json: Named backup jobs (source, destination, per-job options)
"""

from .settings import SyncOptions, SyncJob, JobSettings

__all__ = [
    "SyncOptions",
    "SyncJob",
    "JobSettings",
]
