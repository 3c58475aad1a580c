# src/cache/cache_factory.py — v3
"""Bootstrap the identifier cache from disk.

A missing file yields an empty store without touching the disk. A
malformed file is discarded, recreated empty and reported with a
warning; the caller still gets a usable empty store.
"""

from __future__ import annotations

import logging
from pathlib import Path

from scwcli.cache.persistence import decode_document, default_cache_path, reset_cache_file
from scwcli.cache.store import CacheStore
from scwcli.config.settings import Settings

logger = logging.getLogger(__name__)


def load_cache(
    path: Path | str | None = None,
    settings: Settings | None = None,
) -> CacheStore:
    """Load the per-user cache.

    Args:
        path: Explicit cache file. Takes precedence over settings.
        settings: Application settings. Defaults to the per-user location.

    Returns:
        CacheStore with the dirty flag cleared.

    Raises:
        OSError: If the file exists but cannot be read, removed or recreated.
    """
    if path is None:
        path = default_cache_path() if settings is None else settings.resolved_cache_path
    cache_path = Path(path).expanduser()

    if not cache_path.exists():
        logger.debug("No cache file at %s, starting empty", cache_path)
        return CacheStore(cache_path)

    raw = cache_path.read_bytes()
    if not raw.strip():
        # Freshly recreated file after a corruption reset
        return CacheStore(cache_path)

    try:
        store = CacheStore.from_document(decode_document(raw), cache_path)
    except ValueError as exc:
        logger.warning("Discarding corrupt cache file %s: %s", cache_path, exc)
        reset_cache_file(cache_path)
        return CacheStore(cache_path)

    logger.debug("Loaded cache file %s: %r", cache_path, store)
    return store
