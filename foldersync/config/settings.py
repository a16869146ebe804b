"""
Sync settings management for Folder Sync.

SyncOptions holds the policy flags of a single session.
JobSettings manages foldersync.json - a list of named backup jobs that
can be run in one go.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Callable, Optional


@dataclass
class SyncOptions:
    """Policy flags for one sync session."""
    simulate: bool = False                       # Dry run: decide and report, never touch the disk
    delete_stale: bool = False                   # Remove destination entries missing from source
    preserve_old_versions: bool = False          # Rename replaced/removed entries to <name>.bkYYYYMMDDHHMM
    copy_if_sizes_differ: bool = True
    copy_if_dates_differ: bool = True
    date_tolerance_ms: int = 0
    create_dirs_only_with_content: bool = False  # Don't mirror directories with no files beneath
    track_synced_files: bool = False             # Collect every source file now consistent with destination
    file_filter: Optional[Callable[[Path], bool]] = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: dict) -> "SyncOptions":
        """Build options from a settings dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls) if f.name != "file_filter"}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        """Serializable view (the custom filter is code and is not saved)."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "file_filter"}


@dataclass
class SyncJob:
    """A named source/destination pair with its own options."""
    name: str
    source: str
    destination: str
    options: SyncOptions = field(default_factory=SyncOptions)
    enabled: bool = True


class JobSettings:
    """
    Manages foldersync.json - backup jobs that persist across runs.

    File format:
        {
          "jobs": [
            {"name": "Photos", "source": "/data/photos", "destination": "/mnt/bk/photos",
             "enabled": true, "options": {"delete_stale": true, "preserve_old_versions": true}}
          ]
        }
    """

    def __init__(self, path: Path):
        self.path = path
        self.jobs: list[SyncJob] = []

    @classmethod
    def load(cls, path: Path) -> "JobSettings":
        """Load job settings from file. Missing or corrupt files give an empty job list."""
        settings = cls(path)

        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)

                for entry in data.get("jobs", []):
                    settings.jobs.append(SyncJob(
                        name=entry.get("name", ""),
                        source=entry["source"],
                        destination=entry["destination"],
                        options=SyncOptions.from_dict(entry.get("options", {})),
                        enabled=entry.get("enabled", True),
                    ))
            except (json.JSONDecodeError, KeyError, TypeError, IOError):
                settings.jobs = []

        return settings

    def save(self):
        """Save job settings to file."""
        data = {
            "jobs": [
                {
                    "name": job.name,
                    "source": job.source,
                    "destination": job.destination,
                    "enabled": job.enabled,
                    "options": job.options.to_dict(),
                }
                for job in self.jobs
            ]
        }
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def add_job(self, job: SyncJob):
        self.jobs.append(job)

    def enabled_jobs(self) -> list[SyncJob]:
        return [job for job in self.jobs if job.enabled]
