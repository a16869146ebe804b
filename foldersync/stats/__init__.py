"""
Stats module for Folder Sync.

Persists per-tree counters between runs so the next run can show
"current/previous" folder counts and an ETA:
1. Folders visited, keyed by source path
2. Time spent outside file copying, keyed by the (source, destination) pair

Several sessions with different trees can share one statistics file.
"""

from pathlib import Path
from typing import Optional, Union

from ..core.paths import get_stats_path
from .store import (
    KeyValueStore,
    MemoryStore,
    PropertiesStore,
    parse_properties,
    dump_properties,
)


FOLDERS_KEY_PREFIX = "total_pastas_copiadas_"
NON_COPY_TIME_KEY_PREFIX = "tempo_ultima_execucao_"
PAIR_SEPARATOR = "___"


class SyncStatistics:
    """Previous-run statistics for one source/destination pair."""

    def __init__(
        self,
        source: Union[str, Path],
        destination: Union[str, Path],
        store: Optional[KeyValueStore] = None,
    ):
        self.source = str(source)
        self.destination = str(destination)
        self.store = store if store is not None else PropertiesStore(get_stats_path())
        self.folders_key = f"{FOLDERS_KEY_PREFIX}{self.source}"
        self.non_copy_key = f"{NON_COPY_TIME_KEY_PREFIX}{self.source}{PAIR_SEPARATOR}{self.destination}"

    def _get_int(self, key: str) -> int:
        value = self.store.get(key)
        if value is None:
            return 0
        try:
            return int(value.strip())
        except ValueError:
            return 0

    def load(self) -> tuple[int, int]:
        """
        Load previous-run statistics.

        Returns:
            Tuple of (folders_total, non_copy_ms). Unknown values are 0.
        """
        return self._get_int(self.folders_key), self._get_int(self.non_copy_key)

    def save(self, folders_total: int, non_copy_ms: int):
        """Record this run's statistics and write the store."""
        self.store.set(self.folders_key, str(int(folders_total)))
        self.store.set(self.non_copy_key, str(int(non_copy_ms)))
        self.store.save()


__all__ = [
    "SyncStatistics",
    "KeyValueStore",
    "MemoryStore",
    "PropertiesStore",
    "parse_properties",
    "dump_properties",
]
