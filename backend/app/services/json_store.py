"""JsonDocument: one JSON file on disk, read and rewritten as a whole.

Every read and every read-modify-write goes through a single asyncio.Lock
per document, so overlapping requests in this process cannot interleave
their writes. Nothing guards against a second process writing the same file.

A missing file is the normal first-run case and is created with the default
document. A file that exists but does not parse is treated as corruption:
StoreCorruptedError is raised and the file is left as-is, so a later write
can never replace recoverable data with an empty document.
"""
import asyncio
import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, TypeVar

from core.errors import StoreCorruptedError

logger = logging.getLogger("lph.json_store")

T = TypeVar("T")


class JsonDocument:

    def __init__(
        self,
        path: Path,
        default_factory: Callable[[], dict],
        *,
        cache: bool = True,
    ):
        self.path = Path(path)
        self.default_factory = default_factory
        self.cache = cache
        self._lock = asyncio.Lock()
        self._cached: dict | None = None

    async def read(self) -> dict:
        """Return a private copy of the current document."""
        async with self._lock:
            return copy.deepcopy(self._load())

    async def mutate(self, fn: Callable[[dict], T]) -> T:
        """Apply ``fn`` to the document under the lock and persist it.

        ``fn`` mutates the dict in place and returns the caller's result.
        The document is rewritten only if ``fn`` returns without raising
        and actually changed something.
        """
        async with self._lock:
            current = self._load()
            doc = copy.deepcopy(current)
            result = fn(doc)
            if doc != current:
                self._write(doc)
            return result

    def invalidate(self) -> None:
        self._cached = None

    # ------------------------------------------------------------------
    def _load(self) -> dict:
        if self.cache and self._cached is not None:
            return self._cached

        if not self.path.exists():
            doc = self.default_factory()
            logger.info("Creating %s", self.path)
            self._write(doc)
            return doc

        try:
            raw = self.path.read_text(encoding="utf-8")
            doc = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("Cannot read %s, refusing to reset it: %s", self.path, exc)
            raise StoreCorruptedError(str(self.path), str(exc)) from exc

        if not isinstance(doc, dict):
            logger.error("%s does not hold a JSON object, refusing to reset it", self.path)
            raise StoreCorruptedError(str(self.path), "top-level value is not an object")

        defaults = self.default_factory()
        for key, value in defaults.items():
            doc.setdefault(key, value)

        if self.cache:
            self._cached = doc
        return doc

    def _write(self, doc: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError:
            logger.error("Failed to write %s", self.path, exc_info=True)
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
        if self.cache:
            self._cached = doc

    def records(self, doc: dict, key: str) -> list[Any]:
        """Return the list stored under ``key`` in a loaded document."""
        value = doc.get(key)
        if not isinstance(value, list):
            logger.error("%s: \"%s\" is not a list", self.path, key)
            raise StoreCorruptedError(str(self.path), f"{key!r} is not a list")
        return value
