"""Exceptions raised by loaders and analysis functions."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Input records are malformed (missing metric, non-finite value, duplicate year)."""
