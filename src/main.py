# src/main.py — v2
"""CLI entry point — inspect and maintain the local identifier cache.

Usage:
    scw-cache lookup <needle> [--kind KIND] [--accept-uuid] [--json]
    scw-cache resolve <needle>
    scw-cache import <kind> <file> [--replace]
    scw-cache remove <kind> <identifier>
    scw-cache clear [kind]
    scw-cache stats
    scw-cache flush
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from scwcli.version import __version__

if TYPE_CHECKING:
    from scwcli.cache.store import CacheStore
    from scwcli.core.models import ResolverResults, ResourceKind
    from scwcli.config.settings import Settings

logger = logging.getLogger(__name__)

_KIND_CHOICES = ["server", "image", "snapshot", "volume", "bootscript"]


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from scwcli.cache.cache_factory import load_cache
    from scwcli.config.settings import ConfigurationError, load_settings
    from scwcli.logging.context import clear_context, set_command_context

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    _setup_logging(args.verbose, settings)

    if not settings.cache_enabled:
        logger.error("Cache is disabled (SCW_CACHE_ENABLED=false)")
        return 1

    set_command_context(args.command)
    try:
        store = load_cache(args.cache, settings)
        code = args.func(args, store)
        if store.modified:
            store.save()
        return code
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except (OSError, ValueError) as exc:
        logger.error("Cannot execute %r: %s", args.command, exc, exc_info=args.verbose)
        return 1
    finally:
        clear_context()


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="scw-cache",
        description=f"scw-cache v{__version__} — local identifier cache and resolver",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--cache", type=Path, default=None,
        help="Cache file (default: SCW_CACHE_PATH or ~/.scw-cache.db)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- lookup ---
    p_lookup = subparsers.add_parser(
        "lookup", help="List resources matching a needle",
    )
    p_lookup.add_argument("needle", help="Name, name fragment, identifier prefix or kind:name")
    p_lookup.add_argument(
        "-k", "--kind", choices=_KIND_CHOICES, default=None,
        help="Search a single resource kind",
    )
    p_lookup.add_argument(
        "--accept-uuid", action="store_true",
        help="With --kind, accept a well-formed identifier even if not cached",
    )
    p_lookup.add_argument(
        "--json", action="store_true",
        help="Print results as JSON",
    )
    p_lookup.set_defaults(func=_cmd_lookup)

    # --- resolve ---
    p_resolve = subparsers.add_parser(
        "resolve", help="Print the identifier a needle designates",
    )
    p_resolve.add_argument("needle")
    p_resolve.set_defaults(func=_cmd_resolve)

    # --- import ---
    p_import = subparsers.add_parser(
        "import", help="Insert resources from a JSON listing",
    )
    p_import.add_argument("kind", choices=_KIND_CHOICES)
    p_import.add_argument("file", type=Path, help="JSON listing as returned by the API")
    p_import.add_argument(
        "--replace", action="store_true",
        help="Clear the kind's table before inserting",
    )
    p_import.set_defaults(func=_cmd_import)

    # --- remove ---
    p_remove = subparsers.add_parser(
        "remove", help="Forget one resource",
    )
    p_remove.add_argument("kind", choices=_KIND_CHOICES)
    p_remove.add_argument("identifier")
    p_remove.set_defaults(func=_cmd_remove)

    # --- clear ---
    p_clear = subparsers.add_parser(
        "clear", help="Forget every resource of a kind (all kinds if omitted)",
    )
    p_clear.add_argument("kind", nargs="?", choices=_KIND_CHOICES, default=None)
    p_clear.set_defaults(func=_cmd_clear)

    # --- stats ---
    p_stats = subparsers.add_parser(
        "stats", help="Show cached entry counts",
    )
    p_stats.set_defaults(func=_cmd_stats)

    # --- flush ---
    p_flush = subparsers.add_parser(
        "flush", help="Delete the cache file",
    )
    p_flush.set_defaults(func=_cmd_flush)

    return parser


def _cmd_lookup(args: argparse.Namespace, store: CacheStore) -> int:
    """Print every candidate, closest first."""
    from scwcli.core.models import ResourceKind
    from scwcli.logging.context import set_kind_context
    from scwcli.resolver.ranking import sort_results
    from scwcli.resolver.resolver import CacheResolver

    resolver = CacheResolver(store)
    if args.kind:
        set_kind_context(args.kind)
        results = resolver.lookup(ResourceKind(args.kind), args.needle, args.accept_uuid)
    else:
        results = resolver.lookup_identifiers(args.needle)
    results = sort_results(results)

    if args.json:
        print(json.dumps([r.model_dump(mode="json") for r in results], indent=2))
    else:
        _print_results(results)

    if not results:
        logger.warning("No resource matches %r", args.needle)
        return 1
    return 0


def _cmd_resolve(args: argparse.Namespace, store: CacheStore) -> int:
    """Print the single matching identifier, or explain why there is none."""
    from scwcli.resolver.resolver import (
        AmbiguousIdentifierError,
        CacheResolver,
        IdentifierNotFoundError,
    )

    try:
        result = CacheResolver(store).resolve_one(args.needle)
    except IdentifierNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except AmbiguousIdentifierError as exc:
        print(f"Too many candidates for {exc.needle!r} ({len(exc.candidates)}):", file=sys.stderr)
        _print_results(exc.candidates, stream=sys.stderr)
        return 1

    print(result.identifier)
    return 0


def _cmd_import(args: argparse.Namespace, store: CacheStore) -> int:
    """Insert each resource of a remote listing."""
    from scwcli.core.models import ResourceKind
    from scwcli.logging.context import set_kind_context

    kind = ResourceKind(args.kind)
    set_kind_context(kind.value)
    resources = _read_listing(args.file, kind)

    if args.replace:
        store.clear(kind)
    for resource in resources:
        store.insert(
            kind,
            resource["id"],
            resource.get("region") or "",
            resource.get("arch") or "",
            resource.get("organization") or "",
            resource["name"],
        )

    logger.info("Imported %d %s(s) from %s", len(resources), kind.value, args.file)
    print(f"{kind.display_name}s: {store.count(kind)}")
    return 0


def _cmd_remove(args: argparse.Namespace, store: CacheStore) -> int:
    from scwcli.core.models import ResourceKind

    store.remove(ResourceKind(args.kind), args.identifier)
    return 0


def _cmd_clear(args: argparse.Namespace, store: CacheStore) -> int:
    from scwcli.core.models import ResourceKind

    kinds = [ResourceKind(args.kind)] if args.kind else list(ResourceKind)
    for kind in kinds:
        store.clear(kind)
    return 0


def _cmd_stats(args: argparse.Namespace, store: CacheStore) -> int:
    """Display entry counts per kind."""
    from scwcli.core.models import RESOLUTION_ORDER

    print(f"\nCache {store.path}:")
    for kind in RESOLUTION_ORDER:
        print(f"  {kind.display_name + 's:':13s} {store.count(kind)}")
    return 0


def _cmd_flush(args: argparse.Namespace, store: CacheStore) -> int:
    store.flush()
    print(f"Removed {store.path}")
    return 0


def _read_listing(path: Path, kind: ResourceKind) -> list[dict[str, Any]]:
    """Read an API listing: either a bare list or ``{"<kind>s": [...]}``.

    Raises:
        ValueError: If the file is not such a listing or an entry lacks id/name.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get(kind.table_key)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of {kind.table_key}")

    for position, resource in enumerate(data):
        if not isinstance(resource, dict) or not isinstance(resource.get("id"), str) \
                or not isinstance(resource.get("name"), str):
            raise ValueError(f"{path}: entry {position} needs string 'id' and 'name'")
    return data


def _print_results(results: ResolverResults, stream: Any = None) -> None:
    """Print one aligned line per candidate."""
    out = stream or sys.stdout
    for result in results:
        print(
            f"  {result.kind.display_name:11s} {result.truncated_identifier():9s}"
            f"{result.name}  (rank {result.rank_match})",
            file=out,
        )


def _setup_logging(verbose: bool, settings: Settings) -> None:
    """Configure logging for CLI usage."""
    from scwcli.logging.logger import setup_logging

    level = "DEBUG" if verbose else settings.log_level
    setup_logging(
        level=level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
