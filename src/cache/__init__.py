"""Identifier cache: in-memory store and its on-disk persistence."""
