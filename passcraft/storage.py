"""Preference and history persistence for passcraft.

Both stores keep a single JSON document on disk.  Unreadable or corrupt files
are treated as empty; a failed write is logged and otherwise ignored so that
persistence problems never block password generation.
"""

import json
import logging
import math
import os
import uuid
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from pathlib import Path

from passcraft import GenerationConfig


logger = logging.getLogger(__name__)

PREFERENCES_FILE = "preferences.json"
HISTORY_FILE = "history.json"
HISTORY_LIMIT = 10


def default_data_dir() -> Path:
    """Return ``$PASSCRAFT_HOME`` or ``~/.passcraft``."""
    env = os.environ.get("PASSCRAFT_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".passcraft"


def _read_json(path: Path):
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable %s: %s", path, exc)
        return None


def _write_json(path: Path, data) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, path)
    except OSError as exc:
        logger.warning("Could not write %s: %s", path, exc)
        return False
    return True


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove %s: %s", path, exc)


# ── Preferences ────────────────────────────────────────────────────────────

_NUMERIC_PREFS = ("length", "count")


class PreferenceStore:
    """Flat key-value record of the last used :class:`GenerationConfig`."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path else default_data_dir() / PREFERENCES_FILE

    def load(self) -> GenerationConfig:
        """Return saved preferences laid over the defaults.

        A stored value is only used when its type matches: a bool for the
        option flags, a finite number for length and count.
        """
        raw = _read_json(self.path)
        if not isinstance(raw, dict):
            return GenerationConfig()

        values = {}
        for f in fields(GenerationConfig):
            if f.name not in raw:
                continue
            value = raw[f.name]
            if f.name in _NUMERIC_PREFS:
                if (
                    isinstance(value, (int, float))
                    and not isinstance(value, bool)
                    and math.isfinite(value)
                ):
                    values[f.name] = int(value)
            elif isinstance(value, bool):
                values[f.name] = value
        return GenerationConfig(**values)

    def save(self, config: GenerationConfig) -> bool:
        return _write_json(self.path, asdict(config))

    def reset(self) -> GenerationConfig:
        """Forget saved preferences and return the defaults."""
        _remove(self.path)
        return GenerationConfig()


# ── History ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    value: str
    created_at: str


class HistoryStore:
    """Recently generated passwords, newest first, unique by value."""

    def __init__(self, path: Path | str | None = None, limit: int = HISTORY_LIMIT):
        self.path = Path(path) if path else default_data_dir() / HISTORY_FILE
        self.limit = limit

    def entries(self) -> list[HistoryEntry]:
        raw = _read_json(self.path)
        if not isinstance(raw, list):
            return []

        entries = []
        for item in raw:
            if not isinstance(item, dict) or not item.get("value"):
                continue
            entries.append(HistoryEntry(
                id=str(item.get("id") or uuid.uuid4().hex),
                value=str(item["value"]),
                created_at=str(item.get("created_at", "")),
            ))
        return entries

    def add(self, passwords: list[str]) -> list[HistoryEntry]:
        """Prepend *passwords* and return the updated history."""
        if not passwords:
            return self.entries()

        now = datetime.now(timezone.utc).isoformat()
        fresh = [
            HistoryEntry(id=uuid.uuid4().hex, value=pw, created_at=now)
            for pw in passwords
        ]

        seen: set[str] = set()
        kept: list[HistoryEntry] = []
        for entry in fresh + self.entries():
            if not entry.value or entry.value in seen:
                continue
            seen.add(entry.value)
            kept.append(entry)
            if len(kept) >= self.limit:
                break

        _write_json(self.path, [asdict(e) for e in kept])
        return kept

    def clear(self) -> None:
        _remove(self.path)
