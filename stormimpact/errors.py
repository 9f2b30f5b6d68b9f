"""Exceptions raised by the storm impact pipeline."""

from __future__ import annotations


class StormImpactError(Exception):
    """Base class for pipeline failures."""


class FetchError(StormImpactError, IOError):
    """The dataset could not be downloaded."""


class ParseError(StormImpactError, IOError):
    """The cached dataset could not be read as a storm event table."""
