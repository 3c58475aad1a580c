# src/cache/persistence.py — v2
"""Cache file I/O: location, decoding, atomic rewrite and removal.

The cache file is a single JSON document holding one mapping per
resource kind (see CacheStore.to_document). Writes go through a
temporary file in the target directory followed by os.replace, so the
target is either the previous version or the new one, never a partial
write.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CACHE_FILENAME = ".scw-cache.db"


def default_cache_path() -> Path:
    """Per-user cache location.

    ``$HOME`` on Unix, ``%USERPROFILE%`` on Windows, and the platform temp
    directory when neither is set.
    """
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    if not home:
        home = tempfile.gettempdir()
    return Path(home) / CACHE_FILENAME


def decode_document(raw: bytes) -> dict[str, Any]:
    """Decode raw cache file content.

    Raises:
        ValueError: If the content is not UTF-8 JSON with an object at top level.
    """
    try:
        data = json.loads(raw.decode("utf-8"))
    except RecursionError as exc:
        raise ValueError("Cache document is nested too deeply") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Cache document must be a JSON object, got {type(data).__name__}"
        )
    return data


def reset_cache_file(path: Path) -> None:
    """Replace a corrupt cache file with a fresh empty one (mode 0600)."""
    path.unlink()
    fd = os.open(path, os.O_RDWR | os.O_CREAT | os.O_TRUNC, 0o600)
    os.close(fd)


def atomic_write_json(path: Path, document: dict[str, Any]) -> None:
    """Write ``document`` to ``path`` atomically.

    The temporary file lives next to the target so the final rename stays
    on one filesystem. It is removed whenever the rename did not happen,
    interrupts included, and the error propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name, dir=str(path.parent))
    replaced = False
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(document, handle)
            handle.write("\n")
        os.replace(tmp_name, path)
        replaced = True
    finally:
        if not replaced and os.path.exists(tmp_name):
            os.unlink(tmp_name)
    logger.debug("Wrote cache file %s", path)


def remove_cache_file(path: Path) -> None:
    """Delete the cache file. A missing file is not an error."""
    path.unlink(missing_ok=True)
    logger.debug("Flushed cache file %s", path)
