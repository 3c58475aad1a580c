# src/resolver/resolver.py — v1
"""Turn user-typed needles into ranked cache candidates.

Lookups never fail: an empty result set means "not found" and several
results mean "ambiguous". Callers that need exactly one resource use
resolve_one, which turns those two outcomes into ResolverError.
"""

from __future__ import annotations

import logging
from functools import partialmethod

from scwcli.cache.store import CacheStore
from scwcli.core.models import RESOLUTION_ORDER, ResolverResult, ResolverResults, ResourceKind
from scwcli.resolver.needle import build_name_pattern, is_uuid, parse_needle, strip_user_prefix
from scwcli.resolver.ranking import remove_duplicates, sort_results

logger = logging.getLogger(__name__)


class ResolverError(Exception):
    """Base class for needles that do not resolve to exactly one resource."""

    def __init__(self, needle: str, message: str) -> None:
        self.needle = needle
        super().__init__(message)


class IdentifierNotFoundError(ResolverError):
    """No cached resource matches the needle."""

    def __init__(self, needle: str) -> None:
        super().__init__(needle, f"No such resource: {needle!r}")


class AmbiguousIdentifierError(ResolverError):
    """Several cached resources match the needle."""

    def __init__(self, needle: str, candidates: ResolverResults) -> None:
        self.candidates = candidates
        names = ", ".join(
            f"{c.kind.value}:{c.name} ({c.truncated_identifier()})" for c in candidates
        )
        super().__init__(
            needle,
            f"Too many candidates for {needle!r} ({len(candidates)}): {names}",
        )


class CacheResolver:
    """Read-only queries over a CacheStore."""

    def __init__(self, store: CacheStore) -> None:
        self._store = store

    def lookup(
        self,
        kind: ResourceKind,
        needle: str,
        accept_uuid: bool = False,
    ) -> ResolverResults:
        """Candidates of one kind matching ``needle``.

        A single exact title match wins over every fuzzy match. With
        ``accept_uuid``, a well-formed identifier is returned as-is even
        when it is not cached; the API validates it later.
        """
        results = ResolverResults()
        exact_matches = ResolverResults()

        if accept_uuid and is_uuid(needle):
            entry = ResolverResult(identifier=needle, kind=kind, name=needle)
            entry.compute_rank_match(needle)
            results.append(entry)

        needle = strip_user_prefix(needle)
        name_pattern = build_name_pattern(needle)

        with self._store.lock:
            for identifier, record in self._store.table(kind).items():
                if record.title == needle:
                    entry = ResolverResult(identifier=identifier, kind=kind, name=record.title)
                    entry.compute_rank_match(needle)
                    exact_matches.append(entry)
                if identifier.startswith(needle) or name_pattern.search(record.title):
                    entry = ResolverResult(identifier=identifier, kind=kind, name=record.title)
                    entry.compute_rank_match(needle)
                    results.append(entry)

        if len(exact_matches) == 1:
            return exact_matches

        return remove_duplicates(results)

    lookup_servers = partialmethod(lookup, ResourceKind.SERVER)
    lookup_images = partialmethod(lookup, ResourceKind.IMAGE)
    lookup_snapshots = partialmethod(lookup, ResourceKind.SNAPSHOT)
    lookup_volumes = partialmethod(lookup, ResourceKind.VOLUME)
    lookup_bootscripts = partialmethod(lookup, ResourceKind.BOOTSCRIPT)

    def lookup_identifiers(self, needle: str) -> ResolverResults:
        """Candidates across kinds, honouring an optional ``kind:`` prefix.

        Results are concatenated in RESOLUTION_ORDER. Each kind already
        applied its own exact-match short-circuit and dedup; nothing is
        merged across kinds.
        """
        forced_kind, needle = parse_needle(needle)
        kinds = RESOLUTION_ORDER if forced_kind is None else (forced_kind,)

        results = ResolverResults()
        for kind in kinds:
            for result in self.lookup(kind, needle, accept_uuid=False):
                entry = ResolverResult(identifier=result.identifier, kind=kind, name=result.name)
                entry.compute_rank_match(needle)
                results.append(entry)

        logger.debug("Needle %r matched %d resource(s)", needle, len(results))
        return results

    def resolve_one(self, needle: str) -> ResolverResult:
        """The single resource a needle designates.

        Raises:
            IdentifierNotFoundError: If nothing matches.
            AmbiguousIdentifierError: If more than one resource matches.
        """
        results = self.lookup_identifiers(needle)
        if not results:
            raise IdentifierNotFoundError(needle)
        if len(results) > 1:
            raise AmbiguousIdentifierError(needle, sort_results(results))
        return results[0]
