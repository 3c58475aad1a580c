# src/core/models.py — v3
"""Shared Pydantic domain models used across modules.

No module redefines these types: resource kinds, cache records and
resolver results all come from core.models.
"""

from __future__ import annotations

import re
from enum import Enum, IntEnum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict
from rapidfuzz.distance import Levenshtein

_CODE_NAME_INVALID = re.compile(r"[^a-z0-9-]")
_CODE_NAME_DASHES = re.compile(r"--+")


# === RESOURCE KINDS ===


class ResourceKind(str, Enum):
    """Partition of the cache into independent tables.

    An identifier is only unique within its kind.
    """

    SERVER = "server"
    IMAGE = "image"
    SNAPSHOT = "snapshot"
    VOLUME = "volume"
    BOOTSCRIPT = "bootscript"

    @property
    def display_name(self) -> str:
        """Capitalised name used in tables and prompts."""
        return self.value.capitalize()

    @property
    def table_key(self) -> str:
        """Key of this kind's mapping in the cache file."""
        return f"{self.value}s"

    @classmethod
    def from_tag(cls, tag: str) -> ResourceKind | None:
        """Return the kind named by ``tag`` (e.g. "server"), or None."""
        try:
            return cls(tag)
        except ValueError:
            return None


# Fixed order used when a needle carries no kind prefix.
RESOLUTION_ORDER: tuple[ResourceKind, ...] = (
    ResourceKind.SERVER,
    ResourceKind.IMAGE,
    ResourceKind.SNAPSHOT,
    ResourceKind.VOLUME,
    ResourceKind.BOOTSCRIPT,
)


# === CACHE RECORDS ===


class CacheField(IntEnum):
    """Position of each field in the serialized record array."""

    REGION = 0
    ARCH = 1
    OWNER = 2
    TITLE = 3


class CacheRecord(BaseModel):
    """Last known metadata snapshot for one remote resource."""

    model_config = ConfigDict(frozen=True)

    region: str
    arch: str
    owner: str
    title: str

    def to_fields(self) -> list[str]:
        """Positional form written to the cache file."""
        return [self.region, self.arch, self.owner, self.title]

    @classmethod
    def from_fields(cls, fields: Any) -> CacheRecord:
        """Build a record from its positional form.

        Raises:
            ValueError: If ``fields`` is not a sequence of exactly four strings.
        """
        if not isinstance(fields, (list, tuple)) or len(fields) != len(CacheField):
            raise ValueError(
                f"Cache record must be a {len(CacheField)}-element array, got {fields!r}"
            )
        if not all(isinstance(value, str) for value in fields):
            raise ValueError(f"Cache record fields must be strings, got {fields!r}")
        return cls(
            region=fields[CacheField.REGION],
            arch=fields[CacheField.ARCH],
            owner=fields[CacheField.OWNER],
            title=fields[CacheField.TITLE],
        )


# === RESOLVER RESULTS ===


class ResolverResult(BaseModel):
    """Human-readable candidate produced by a lookup.

    Transient: built per query and consumed by the caller.
    """

    identifier: str
    kind: ResourceKind
    name: str
    needle: str = ""
    rank_match: int = 0

    def compute_rank_match(self, needle: str) -> None:
        """Record the needle and score the name against it.

        The score is the Levenshtein distance: 0 for an identical name,
        lower is closer. Case-sensitive.
        """
        self.needle = needle
        self.rank_match = Levenshtein.distance(needle, self.name)

    def truncated_identifier(self) -> str:
        """First 8 characters of the identifier."""
        return self.identifier[:8]

    def code_name(self) -> str:
        """Typed needle such as ``server:my-cool-server``."""
        name = _CODE_NAME_INVALID.sub("-", self.name.lower())
        name = _CODE_NAME_DASHES.sub("-", name).strip("-")
        return f"{self.kind.value}:{name}"


class ResolverResults(list):
    """Ordered sequence of ResolverResult."""

    def __init__(self, results: Iterable[ResolverResult] = ()) -> None:
        super().__init__(results)

    def sort_by_rank(self) -> ResolverResults:
        """Stable ascending sort on rank_match, in place."""
        self.sort(key=lambda result: result.rank_match)
        return self

    def identifiers(self) -> list[str]:
        return [result.identifier for result in self]

    def kinds(self) -> list[ResourceKind]:
        return [result.kind for result in self]

