"""scwcli — local identifier cache and fuzzy resolver for a cloud CLI."""

from scwcli.version import __version__

__all__ = ["__version__"]
