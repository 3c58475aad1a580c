# src/resolver/needle.py — v2
"""Needle parsing and name patterns.

A needle is what the user typed: a name, a name fragment, an identifier
prefix, or any of those behind a ``kind:`` tag.
"""

from __future__ import annotations

import re

from scwcli.core.models import ResourceKind

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)
_SEPARATOR_RUN = re.compile(r"[_-]+")
_USER_PREFIX = "user/"


def is_uuid(value: str) -> bool:
    """True for the canonical 8-4-4-4-12 hexadecimal identifier form."""
    return _UUID_RE.fullmatch(value) is not None


def strip_user_prefix(needle: str) -> str:
    """Drop a leading ``user/`` namespace hint.

    Only meaningful for images but applied to every kind.
    """
    if needle.startswith(_USER_PREFIX):
        return needle[len(_USER_PREFIX):]
    return needle


class NamePattern:
    """Needle fragments that must appear, in order, inside a title.

    Each run of ``_``/``-`` in the needle matches anything, so
    ``my-server`` matches ``my_cool_server``. Every other character is
    literal and comparison ignores case. Matching scans the title once,
    taking the leftmost occurrence of each fragment after the previous one.
    """

    def __init__(self, needle: str) -> None:
        self.parts = tuple(part.casefold() for part in _SEPARATOR_RUN.split(needle))

    def search(self, title: str) -> bool:
        """True when every fragment occurs in ``title`` in needle order."""
        title = title.casefold()
        position = 0
        for part in self.parts:
            found = title.find(part, position)
            if found < 0:
                return False
            position = found + len(part)
        return True

    def __repr__(self) -> str:
        return f"NamePattern({self.parts!r})"


def build_name_pattern(needle: str) -> NamePattern:
    """Matcher for cached titles; use its ``search`` anywhere in a title."""
    return NamePattern(needle)


def parse_needle(text: str) -> tuple[ResourceKind | None, str]:
    """Extract a forced resource kind.

    ``server:web`` gives ``(SERVER, "web")``; ``web`` and
    ``unknown:web`` give ``(None, text)``, meaning every kind.
    """
    parts = text.split(":")
    if len(parts) == 2:
        kind = ResourceKind.from_tag(parts[0])
        if kind is not None:
            return kind, parts[1]
    return None, text
