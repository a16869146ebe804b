"""
Run log for Folder Sync.

TeeOutput stands in for sys.stdout while a run is logged: everything still
reaches the terminal, and complete lines are appended to the log file with
a timestamp. Copy progress and layout lines stay on screen only.
"""

import re
import sys
from datetime import datetime
from pathlib import Path

_ANSI = re.compile(r'\x1b\[[0-9;]*[mKHJ]')


def _stamp() -> str:
    return datetime.now().strftime("[%H:%M:%S]")


class TeeOutput:
    """Write to both stdout and a log file, filtering out UI noise."""

    _SKIP_PATTERNS = [
        r'^[━─=\s]+$',                 # Separator lines
        r'^\s*$',                      # Blank lines
        r'^\s*(?:.* - )?\* \d+\.\d%',  # Per-file copy progress, named or not ("Photos - * 42.0% (...)")
    ]

    def __init__(self, log_path: Path, version: str = None):
        self.terminal = sys.stdout
        self.log_path = log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        self.log_file = open(log_path, "a", encoding="utf-8")
        self._skip_regex = re.compile('|'.join(self._SKIP_PATTERNS))
        self._pending = ""

        version_str = f" v{version}" if version else ""
        self.log_file.write(f"\n{'=' * 60}\n")
        self.log_file.write(f"Folder Sync{version_str} - Session started: {datetime.now().isoformat()}\n")
        self.log_file.write(f"{'=' * 60}\n\n")
        self.log_file.flush()

    def install(self) -> "TeeOutput":
        """Replace sys.stdout with this tee until close()."""
        sys.stdout = self
        return self

    def __enter__(self):
        return self.install()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _log_line(self, line: str):
        line = line.rstrip()
        if line and not self._skip_regex.search(line):
            self.log_file.write(f"{_stamp()} {line}\n")

    def write(self, message):
        self.terminal.write(message)

        *lines, self._pending = (self._pending + _ANSI.sub('', message)).split('\n')
        for line in lines:
            self._log_line(line)
        self.log_file.flush()

    def flush(self):
        self.terminal.flush()
        self.log_file.flush()

    def close(self):
        """Log any unterminated last line, close the file and give stdout back."""
        if self.log_file.closed:
            return
        self._log_line(self._pending)
        self._pending = ""
        self.log_file.close()
        if sys.stdout is self:
            sys.stdout = self.terminal

    def log_only(self, message: str):
        """Write a message only to the log file, not to terminal."""
        self.log_file.write(f"{_stamp()} {message}\n")
        self.log_file.flush()


def debug_log(message: str):
    """Log a debug message to file only (not shown to user)."""
    if hasattr(sys.stdout, 'log_only'):
        sys.stdout.log_only(message)
