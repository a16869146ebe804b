"""Pytest configuration and shared fixtures."""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pytest

from foldersync.config import SyncOptions
from foldersync.core.formatting import relative_posix
from foldersync.stats import MemoryStore
from foldersync.sync import Synchronizer


# Fixed timestamp (2024-01-01 12:00:00 UTC) so date comparisons are deterministic
BASE_MTIME = 1_704_110_400


@dataclass
class SyncEnv:
    """Isolated source/destination pair for sync tests."""
    tmp: Path
    source: Path
    destination: Path
    store: MemoryStore

    def make_file(self, rel_path: str, content: bytes = b"data", mtime: Optional[float] = BASE_MTIME,
                  root: Optional[Path] = None) -> Path:
        """Create a file under the source (or root) with a fixed modification time."""
        full = (root or self.source) / rel_path
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_bytes(content)
        if mtime is not None:
            os.utime(full, (mtime, mtime))
        return full

    def make_dest_file(self, rel_path: str, content: bytes = b"data", mtime: Optional[float] = BASE_MTIME) -> Path:
        return self.make_file(rel_path, content, mtime, root=self.destination)

    def make_dir(self, rel_path: str, root: Optional[Path] = None) -> Path:
        full = (root or self.source) / rel_path
        full.mkdir(parents=True, exist_ok=True)
        return full

    def synchronizer(self, name: str = "", **option_overrides) -> Synchronizer:
        """Build a Synchronizer over this env, sharing one in-memory statistics store."""
        return Synchronizer(
            self.source,
            self.destination,
            name=name,
            options=SyncOptions(**option_overrides),
            store=self.store,
            report_interval=60.0,
        )

    def run(self, **option_overrides):
        """Construct a session, sync once, return the WalkResult."""
        return self.synchronizer(**option_overrides).sync()


def tree(root: Path) -> dict[str, Optional[bytes]]:
    """Snapshot a tree as {relative posix path: file bytes, or None for folders}."""
    snapshot = {}
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        for name in dirnames:
            snapshot[relative_posix(base / name, root)] = None
        for name in filenames:
            snapshot[relative_posix(base / name, root)] = (base / name).read_bytes()
    return snapshot


@pytest.fixture
def sync_env(monkeypatch):
    """Create an isolated sync environment. The working directory is the temp dir."""
    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        source = tmp / "source"
        destination = tmp / "destination"
        source.mkdir()
        destination.mkdir()

        # Default statistics/log paths are relative to the working directory
        monkeypatch.chdir(tmp)

        yield SyncEnv(tmp=tmp, source=source, destination=destination, store=MemoryStore())
