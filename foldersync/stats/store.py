"""
Flat key/value persistence for sync statistics.

The on-disk format is the ".properties" key=value text format, so statistics
files written by earlier releases keep working. Anything that implements
KeyValueStore can replace the file (e.g. an in-memory store in tests).
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Minimal storage interface used by SyncStatistics."""

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def save(self) -> None:
        ...


class MemoryStore:
    """Dict-backed store. save() is a no-op."""

    def __init__(self, data: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def save(self) -> None:
        pass


# ============================================================================
# .properties codec
# ============================================================================

_ESCAPES_OUT = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_ESCAPES_IN = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_SPECIAL = "=:#!"


def escape_property(text: str, is_key: bool) -> str:
    """Escape a key or value for a .properties line."""
    out = []
    for i, ch in enumerate(text):
        if ch == "\\":
            out.append("\\\\")
        elif ch in _ESCAPES_OUT:
            out.append(_ESCAPES_OUT[ch])
        elif ch in _SPECIAL:
            out.append("\\" + ch)
        elif ch == " " and (is_key or i == 0):
            out.append("\\ ")
        elif ord(ch) < 0x20 or ord(ch) > 0x7E:
            # Characters outside the BMP become surrogate pairs
            for unit in _utf16_units(ch):
                out.append(f"\\u{unit:04X}")
        else:
            out.append(ch)
    return "".join(out)


def _utf16_units(ch: str) -> list[int]:
    data = ch.encode("utf-16-be")
    return [int.from_bytes(data[i:i + 2], "big") for i in range(0, len(data), 2)]


def unescape_property(text: str) -> str:
    """Reverse escape_property(), also joining \\uXXXX surrogate pairs."""
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u" and i + 6 <= len(text):
            out.append(chr(int(text[i + 2:i + 6], 16)))
            i += 6
            continue
        out.append(_ESCAPES_IN.get(nxt, nxt))
        i += 2
    return "".join(out).encode("utf-16", "surrogatepass").decode("utf-16")


def _logical_lines(raw: str):
    """Yield logical lines, joining backslash continuations and skipping comments."""
    pending = ""
    for line in raw.splitlines():
        line = line.lstrip(" \t\f")
        if not pending and (not line or line[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def _split_key_value(line: str) -> tuple[str, str]:
    """Split at the first unescaped '=', ':' or whitespace."""
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=: \t\f":
            break
        i += 1
    key = line[:i]
    rest = line[i:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return key, rest


def parse_properties(raw: str) -> dict[str, str]:
    """Parse .properties text into a dict."""
    result = {}
    for line in _logical_lines(raw):
        key, value = _split_key_value(line)
        result[unescape_property(key)] = unescape_property(value)
    return result


def dump_properties(data: dict[str, str], comment: Optional[str] = None) -> str:
    """Render a dict as .properties text with a comment and a date header."""
    lines = []
    if comment:
        lines.append(f"#{escape_property(comment, is_key=False)}")
    lines.append("#" + datetime.now().strftime("%a %b %d %H:%M:%S %Y"))
    for key, value in data.items():
        lines.append(f"{escape_property(key, True)}={escape_property(value, False)}")
    return "\n".join(lines) + "\n"


class PropertiesStore:
    """
    Store backed by a .properties text file.

    The file is read on construction; a missing or unreadable file loads as
    empty. save() re-reads the file and merges in only the keys changed
    through this store, so sessions sharing the file keep each other's entries.
    """

    COMMENT = "Folder sync run statistics"

    def __init__(self, path: Path):
        self.path = Path(path)
        self.data: dict[str, str] = self._read()
        self._changed: set[str] = set()

    def _read(self) -> dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            return parse_properties(self.path.read_text(encoding="latin-1"))
        except (OSError, ValueError):
            return {}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self._changed.add(key)

    def save(self) -> None:
        merged = self._read()
        for key in self._changed:
            merged[key] = self.data[key]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = self.path.with_name(self.path.name + ".tmp")
        tmp_file.write_text(dump_properties(merged, self.COMMENT), encoding="latin-1")
        tmp_file.replace(self.path)
        self.data = merged
        self._changed.clear()
