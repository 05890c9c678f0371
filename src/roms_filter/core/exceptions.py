"""Exceptions raised by the ROM filter."""

from pathlib import Path


class RomsFilterError(Exception):
    """Base class for ROM filter errors."""


class CatalogSourceError(RomsFilterError):
    """A catalog source could not be read or parsed."""

    def __init__(self, source: Path, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class UnknownGroupingStrategyError(RomsFilterError, ValueError):
    """The requested grouping strategy does not exist."""
