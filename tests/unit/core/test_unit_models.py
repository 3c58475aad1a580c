# tests/unit/core/test_unit_models.py — v3
"""Tests for core/models.py — kinds, cache records, resolver results."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from scwcli.core.models import (
    RESOLUTION_ORDER,
    CacheField,
    CacheRecord,
    ResolverResult,
    ResolverResults,
    ResourceKind,
)


class TestResourceKind:
    def test_resolution_order(self):
        assert RESOLUTION_ORDER == (
            ResourceKind.SERVER,
            ResourceKind.IMAGE,
            ResourceKind.SNAPSHOT,
            ResourceKind.VOLUME,
            ResourceKind.BOOTSCRIPT,
        )

    def test_table_keys(self):
        assert [k.table_key for k in ResourceKind] == [
            "servers", "images", "snapshots", "volumes", "bootscripts",
        ]

    def test_display_name(self):
        assert ResourceKind.BOOTSCRIPT.display_name == "Bootscript"

    def test_from_tag(self):
        assert ResourceKind.from_tag("volume") is ResourceKind.VOLUME
        assert ResourceKind.from_tag("Volume") is None
        assert ResourceKind.from_tag("ip") is None


class TestCacheRecord:
    def test_fields_order(self):
        record = CacheRecord(region="par1", arch="arm", owner="org", title="web")
        assert record.to_fields() == ["par1", "arm", "org", "web"]
        assert record.to_fields()[CacheField.TITLE] == "web"

    def test_from_fields(self):
        record = CacheRecord.from_fields(["ams1", "x86_64", "org", "db"])
        assert record.region == "ams1"
        assert record.title == "db"

    def test_from_fields_accepts_tuple(self):
        assert CacheRecord.from_fields(("a", "b", "c", "d")).owner == "c"

    @pytest.mark.parametrize("fields", [
        ["a", "b", "c"],
        ["a", "b", "c", "d", "e"],
        "abcd",
        {"region": "a"},
        None,
        ["a", "b", "c", 4],
    ])
    def test_from_fields_rejects_malformed(self, fields):
        with pytest.raises(ValueError):
            CacheRecord.from_fields(fields)

    def test_frozen(self):
        record = CacheRecord(region="par1", arch="arm", owner="org", title="web")
        with pytest.raises(ValidationError):
            record.title = "other"


class TestResolverResult:
    def test_compute_rank_match_exact(self):
        result = ResolverResult(identifier="abc", kind=ResourceKind.SERVER, name="web")
        result.compute_rank_match("web")
        assert result.needle == "web"
        assert result.rank_match == 0

    def test_compute_rank_match_closer_ranks_lower(self):
        near = ResolverResult(identifier="a", kind=ResourceKind.SERVER, name="web-1")
        far = ResolverResult(identifier="b", kind=ResourceKind.SERVER, name="web-backend-01")
        near.compute_rank_match("web")
        far.compute_rank_match("web")
        assert 0 < near.rank_match < far.rank_match

    @pytest.mark.parametrize("needle,name,expected", [
        ("", "web", 3),
        ("web", "", 3),
        ("web", "web-1", 2),
        ("kitten", "sitting", 3),
        ("Web", "web", 1),
    ])
    def test_compute_rank_match_is_edit_distance(self, needle, name, expected):
        result = ResolverResult(identifier="abc", kind=ResourceKind.IMAGE, name=name)
        result.compute_rank_match(needle)
        assert result.rank_match == expected

    def test_truncated_identifier(self):
        result = ResolverResult(
            identifier="0f2c3a48-8f3b-4c0e-9d7a-1b2c3d4e5f60",
            kind=ResourceKind.IMAGE,
            name="ubuntu",
        )
        assert result.truncated_identifier() == "0f2c3a48"

    def test_code_name(self):
        result = ResolverResult(
            identifier="x", kind=ResourceKind.SERVER, name="My Cool_Server!!",
        )
        assert result.code_name() == "server:my-cool-server"

    def test_code_name_collapses_and_strips_dashes(self):
        result = ResolverResult(identifier="x", kind=ResourceKind.VOLUME, name="--Data  Disk--")
        assert result.code_name() == "volume:data-disk"


class TestResolverResults:
    def _result(self, identifier: str, rank: int) -> ResolverResult:
        return ResolverResult(
            identifier=identifier, kind=ResourceKind.SERVER, name=identifier, rank_match=rank,
        )

    def test_sort_by_rank_is_stable(self):
        results = ResolverResults([
            self._result("c", 2),
            self._result("a", 1),
            self._result("b", 1),
            self._result("d", 0),
        ])
        assert results.sort_by_rank().identifiers() == ["d", "a", "b", "c"]

    def test_is_a_list(self):
        results = ResolverResults()
        assert results == []
        results.append(self._result("a", 0))
        assert len(results) == 1
        assert results.kinds() == [ResourceKind.SERVER]
