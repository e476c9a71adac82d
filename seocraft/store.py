from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import redis
from pydantic import ValidationError

from seocraft.models import HistoryEntry, ThemeCustomization, ToolConfig
from seocraft.themes import normalize_theme

log = logging.getLogger(__name__)

STORE_BACKEND = os.getenv("STORE_BACKEND", "file").strip().lower()
STORE_DIR = Path(os.getenv("STORE_DIR", "cache/store"))
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
REDIS_STORE_PREFIX = os.getenv("REDIS_STORE_PREFIX", "seocraft:")
try:
    HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "10") or 10)
except ValueError:
    HISTORY_LIMIT = 10

HISTORY_KEY = "seoToolHistory"
CURRENT_TOOL_KEY = "currentToolId"


def customization_key(tool_id: str) -> str:
    return f"tool_{tool_id}_customizations"


class ToolNotFound(LookupError):
    pass


class MemoryBackend:
    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileBackend:
    """One file per key; writes go through a temp file and an atomic rename."""

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root is not None else STORE_DIR
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self.root / f"{hashlib.sha256(key.encode('utf-8')).hexdigest()}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        with self._lock:
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)

    def delete(self, key: str) -> None:
        with self._lock:
            self._path(key).unlink(missing_ok=True)


class RedisBackend:
    def __init__(self, url: Optional[str] = None, prefix: str = REDIS_STORE_PREFIX, client: Any = None) -> None:
        self._redis = client if client is not None else redis.from_url(url or REDIS_URL, decode_responses=True)
        self.prefix = prefix

    def get(self, key: str) -> Optional[str]:
        return self._redis.get(self.prefix + key)

    def set(self, key: str, value: str) -> None:
        self._redis.set(self.prefix + key, value)

    def delete(self, key: str) -> None:
        self._redis.delete(self.prefix + key)


def get_backend(kind: Optional[str] = None):
    kind = (kind or STORE_BACKEND or "file").lower()
    if kind == "memory":
        return MemoryBackend()
    if kind == "redis":
        return RedisBackend()
    return FileBackend()


class ToolStore:
    """History list plus one theme entry per tool id, over a string key-value backend.

    There is no transaction across keys: a history entry whose theme key is
    missing is reported as "Tool configuration not found" and left alone.
    """

    def __init__(self, backend: Any, clock: Callable[[], float] = time.time, limit: int = HISTORY_LIMIT) -> None:
        self.backend = backend
        self.clock = clock
        self.limit = max(1, int(limit))

    def save(self, key: str, value: Any) -> None:
        self.backend.set(key, json.dumps(value, ensure_ascii=False, separators=(",", ":")))

    def load(self, key: str) -> Any:
        raw = self.backend.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            log.warning("store: corrupt value under key=%s; treating as absent", key)
            return None

    def history(self) -> List[HistoryEntry]:
        raw = self.load(HISTORY_KEY)
        if not isinstance(raw, list):
            return []
        entries: List[HistoryEntry] = []
        for item in raw:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError as e:
                log.warning("store: skipping unreadable history entry err=%s", e.errors()[:1])
        return entries

    def _next_id(self, entries: List[HistoryEntry]) -> int:
        now_ms = int(self.clock() * 1000)
        known = [int(e.id) for e in entries if e.id.isdigit()]
        # Two builds in the same millisecond must not share an id
        return max([now_ms] + [k + 1 for k in known])

    def add_entry(self, prompt: str, config: ToolConfig, theme: ThemeCustomization) -> HistoryEntry:
        entries = self.history()
        id_ms = self._next_id(entries)
        entry = HistoryEntry(
            id=str(id_ms),
            prompt=prompt,
            date=datetime.fromtimestamp(id_ms / 1000, tz=timezone.utc).isoformat(),
            tool_config=config,
            customizations=theme,
        )
        kept = [entry] + entries[: self.limit - 1]
        self.save(HISTORY_KEY, [e.dump() for e in kept])
        self.save_theme(entry.id, theme)
        self.save(CURRENT_TOOL_KEY, entry.id)
        for evicted in entries[self.limit - 1 :]:
            self.backend.delete(customization_key(evicted.id))
        log.info("store: saved tool id=%s history_size=%d", entry.id, len(kept))
        return entry

    def find(self, tool_id: str) -> Optional[HistoryEntry]:
        for entry in self.history():
            if entry.id == tool_id:
                return entry
        return None

    def load_tool(self, tool_id: str) -> Tuple[HistoryEntry, ThemeCustomization]:
        entry = self.find(tool_id)
        if entry is None:
            raise ToolNotFound("Tool not found")
        raw = self.load(customization_key(tool_id))
        if raw is None:
            raise ToolNotFound("Tool configuration not found")
        return entry, normalize_theme(raw)

    def save_theme(self, tool_id: str, theme: ThemeCustomization) -> None:
        self.save(customization_key(tool_id), theme.dump())

    def current_tool_id(self) -> Optional[str]:
        value = self.load(CURRENT_TOOL_KEY)
        return value if isinstance(value, str) else None

    def clear_history(self) -> None:
        self.backend.delete(HISTORY_KEY)
