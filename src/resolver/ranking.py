# src/resolver/ranking.py — v2
"""Ordering and deduplication of resolver candidates.

Scores themselves come from ResolverResult.compute_rank_match.
"""

from __future__ import annotations

from typing import Iterable

from scwcli.core.models import ResolverResult, ResolverResults


def remove_duplicates(results: Iterable[ResolverResult]) -> ResolverResults:
    """Keep one result per identifier.

    A later duplicate replaces the earlier one but keeps its position.
    """
    unique: dict[str, ResolverResult] = {}
    for result in results:
        unique[result.identifier] = result
    return ResolverResults(unique.values())


def sort_results(results: Iterable[ResolverResult]) -> ResolverResults:
    """New result set sorted by ascending rank; ties keep encounter order."""
    return ResolverResults(results).sort_by_rank()
