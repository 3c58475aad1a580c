# src/cache/store.py — v1
"""Thread-safe in-memory identifier cache.

One mapping per ResourceKind from identifier to CacheRecord, a dirty
flag and a single lock guarding both. The lock is not re-entrant: no
method calls another locking method while holding it.
"""

from __future__ import annotations

import logging
import threading
from functools import partialmethod
from pathlib import Path
from typing import Any, Mapping

from scwcli.cache.persistence import atomic_write_json, remove_cache_file
from scwcli.core.models import CacheRecord, ResourceKind

logger = logging.getLogger(__name__)


class CacheStore:
    """Identifier cache for servers, images, snapshots, volumes and bootscripts."""

    def __init__(
        self,
        path: Path | str,
        tables: Mapping[ResourceKind, Mapping[str, CacheRecord]] | None = None,
    ) -> None:
        self.path = Path(path)
        self.lock = threading.Lock()
        self._modified = False
        initial = tables or {}
        self._tables: dict[ResourceKind, dict[str, CacheRecord]] = {
            kind: dict(initial.get(kind) or {}) for kind in ResourceKind
        }

    # --- State ---

    @property
    def modified(self) -> bool:
        """True when in-memory state has diverged from the file since the last save."""
        with self.lock:
            return self._modified

    def table(self, kind: ResourceKind) -> dict[str, CacheRecord]:
        """Live mapping for ``kind``. Caller must hold ``self.lock``."""
        return self._tables[kind]

    # --- Generic operations ---

    def insert(
        self,
        kind: ResourceKind,
        identifier: str,
        region: str,
        arch: str,
        owner: str,
        name: str,
    ) -> None:
        """Register a resource.

        Overwrites when the identifier is new or its title changed; an
        unchanged title is a no-op so repeated syncs do not dirty the cache.
        """
        with self.lock:
            table = self._tables[kind]
            current = table.get(identifier)
            if current is None or current.title != name:
                table[identifier] = CacheRecord(
                    region=region, arch=arch, owner=owner, title=name
                )
                self._modified = True

    def remove(self, kind: ResourceKind, identifier: str) -> None:
        with self.lock:
            self._tables[kind].pop(identifier, None)
            self._modified = True

    def clear(self, kind: ResourceKind) -> None:
        with self.lock:
            self._tables[kind] = {}
            self._modified = True

    def count(self, kind: ResourceKind) -> int:
        with self.lock:
            return len(self._tables[kind])

    def get(self, kind: ResourceKind, identifier: str) -> CacheRecord | None:
        with self.lock:
            return self._tables[kind].get(identifier)

    def snapshot(self, kind: ResourceKind) -> dict[str, CacheRecord]:
        """Copy of one table taken under the lock."""
        with self.lock:
            return dict(self._tables[kind])

    # --- Per-kind operations ---

    insert_server = partialmethod(insert, ResourceKind.SERVER)
    insert_image = partialmethod(insert, ResourceKind.IMAGE)
    insert_snapshot = partialmethod(insert, ResourceKind.SNAPSHOT)
    insert_volume = partialmethod(insert, ResourceKind.VOLUME)
    insert_bootscript = partialmethod(insert, ResourceKind.BOOTSCRIPT)

    remove_server = partialmethod(remove, ResourceKind.SERVER)
    remove_image = partialmethod(remove, ResourceKind.IMAGE)
    remove_snapshot = partialmethod(remove, ResourceKind.SNAPSHOT)
    remove_volume = partialmethod(remove, ResourceKind.VOLUME)
    remove_bootscript = partialmethod(remove, ResourceKind.BOOTSCRIPT)

    clear_servers = partialmethod(clear, ResourceKind.SERVER)
    clear_images = partialmethod(clear, ResourceKind.IMAGE)
    clear_snapshots = partialmethod(clear, ResourceKind.SNAPSHOT)
    clear_volumes = partialmethod(clear, ResourceKind.VOLUME)
    clear_bootscripts = partialmethod(clear, ResourceKind.BOOTSCRIPT)

    get_nb_servers = partialmethod(count, ResourceKind.SERVER)
    get_nb_images = partialmethod(count, ResourceKind.IMAGE)
    get_nb_snapshots = partialmethod(count, ResourceKind.SNAPSHOT)
    get_nb_volumes = partialmethod(count, ResourceKind.VOLUME)
    get_nb_bootscripts = partialmethod(count, ResourceKind.BOOTSCRIPT)

    # --- Serialization ---

    def to_document(self) -> dict[str, Any]:
        """JSON-ready form: one mapping per kind, records as 4-element arrays."""
        with self.lock:
            return self._document()

    def _document(self) -> dict[str, Any]:
        return {
            kind.table_key: {
                identifier: record.to_fields()
                for identifier, record in self._tables[kind].items()
            }
            for kind in ResourceKind
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any], path: Path | str) -> CacheStore:
        """Rebuild a store from a decoded cache document.

        Missing or null tables become empty; unknown keys are ignored.

        Raises:
            ValueError: If a table is not an object or a record is malformed.
        """
        tables: dict[ResourceKind, dict[str, CacheRecord]] = {}
        for kind in ResourceKind:
            raw_table = data.get(kind.table_key)
            if raw_table is None:
                continue
            if not isinstance(raw_table, dict):
                raise ValueError(
                    f"Cache table {kind.table_key!r} must be an object, "
                    f"got {type(raw_table).__name__}"
                )
            tables[kind] = {
                str(identifier): CacheRecord.from_fields(fields)
                for identifier, fields in raw_table.items()
            }
        return cls(path, tables)

    # --- Persistence ---

    def save(self) -> None:
        """Atomically rewrite the cache file if anything changed.

        The dirty flag is reset only after a successful write; on failure
        the error propagates and the flag stays set for a retry.
        """
        with self.lock:
            if not self._modified:
                return
            logger.debug("Writing cache file to disk")
            atomic_write_json(self.path, self._document())
            self._modified = False

    def flush(self) -> None:
        """Delete the cache file. In-memory state is left untouched."""
        remove_cache_file(self.path)

    def __repr__(self) -> str:
        with self.lock:
            counts = ", ".join(
                f"{kind.table_key}={len(self._tables[kind])}" for kind in ResourceKind
            )
        return f"CacheStore(path={str(self.path)!r}, {counts})"
