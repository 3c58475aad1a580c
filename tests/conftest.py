# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides temp cache paths, empty and populated stores, and a resolver.
No network and no real home directory — every cache lives under tmp_path.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from scwcli.cache.store import CacheStore
from scwcli.resolver.resolver import CacheResolver

# === Sample identifiers ===

SERVER_WEB = "0f2c3a48-8f3b-4c0e-9d7a-1b2c3d4e5f60"
SERVER_WEB_1 = "1a7f0c1e-5b9d-4e55-8a43-2f6e8d9c0b11"
SERVER_WEB_2 = "2b8e1d2f-6cae-4f66-9b54-3a7f9eac1c22"
SERVER_DB = "3c9f2e30-7dbf-4077-ac65-4b80afbd2d33"
IMAGE_UBUNTU = "4da03f41-8ec0-4188-bd76-5c91b0ce3e44"
IMAGE_DEBIAN = "5eb14052-9fd1-4299-ce87-6da2c1df4f55"
SNAPSHOT_WEB = "6fc25163-a0e2-43aa-df98-7eb3d2e05066"
VOLUME_WEB = "70d36274-b1f3-44bb-e0a9-8fc4e3f16177"
BOOTSCRIPT_STABLE = "81e47385-c204-45cc-f1ba-90d5f4027288"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real home directory and SCW_* settings."""
    for var in (
        "SCW_CACHE_PATH",
        "SCW_CACHE_ENABLED",
        "SCW_LOG_LEVEL",
        "SCW_LOG_FORMAT",
        "SCW_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    yield
    root = logging.getLogger("scwcli")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "cache" / ".scw-cache.db"


@pytest.fixture
def store(cache_path: Path) -> CacheStore:
    """Empty store, nothing on disk."""
    return CacheStore(cache_path)


@pytest.fixture
def populated_store(store: CacheStore) -> CacheStore:
    """Store with a handful of resources of every kind, dirty flag cleared."""
    store.insert_server(SERVER_WEB, "par1", "x86_64", "org-1", "web")
    store.insert_server(SERVER_WEB_1, "par1", "x86_64", "org-1", "web-1")
    store.insert_server(SERVER_WEB_2, "ams1", "arm", "org-1", "web-2")
    store.insert_server(SERVER_DB, "par1", "x86_64", "org-1", "db_primary")
    store.insert_image(IMAGE_UBUNTU, "par1", "x86_64", "org-1", "ubuntu-focal")
    store.insert_image(IMAGE_DEBIAN, "par1", "arm", "org-2", "Debian_Buster")
    store.insert_snapshot(SNAPSHOT_WEB, "par1", "x86_64", "org-1", "web-backup")
    store.insert_volume(VOLUME_WEB, "par1", "", "org-1", "web-data")
    store.insert_bootscript(BOOTSCRIPT_STABLE, "par1", "x86_64", "", "stable kernel")
    store._modified = False
    return store


@pytest.fixture
def ids() -> SimpleNamespace:
    """Identifiers used by populated_store."""
    return SimpleNamespace(
        server_web=SERVER_WEB,
        server_web_1=SERVER_WEB_1,
        server_web_2=SERVER_WEB_2,
        server_db=SERVER_DB,
        image_ubuntu=IMAGE_UBUNTU,
        image_debian=IMAGE_DEBIAN,
        snapshot_web=SNAPSHOT_WEB,
        volume_web=VOLUME_WEB,
        bootscript_stable=BOOTSCRIPT_STABLE,
    )


@pytest.fixture
def resolver(populated_store: CacheStore) -> CacheResolver:
    return CacheResolver(populated_store)

