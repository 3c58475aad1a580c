"""Needle parsing, ranking and lookups over the identifier cache."""
