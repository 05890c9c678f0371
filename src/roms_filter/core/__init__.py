"""Core functionality for the ROM filter."""

from .dat import DatCatalog, DatHeader, DatReader, DatWriter
from .exceptions import CatalogSourceError, RomsFilterError, UnknownGroupingStrategyError
from .grouper import ExplicitLinkGrouper, SequentialPrefixGrouper, create_grouper
from .models import (
    ApplicationConfig,
    CandidateTrace,
    Entry,
    FilteredCatalog,
    Group,
    GroupTrace,
    ScoreResult,
    ScoringPolicy,
    SelectionResult,
    TagHint,
)
from .parser import EntryParser, parse_entry
from .projector import CatalogProjector, clone_links_from_groups, has_players_marker, project_catalog
from .scanner import RomListScanner
from .scoring import GroupContext, ScoringEngine
from .selector import SelectionEngine, run_selection

__all__ = [
    "ApplicationConfig",
    "CandidateTrace",
    "CatalogProjector",
    "CatalogSourceError",
    "DatCatalog",
    "DatHeader",
    "DatReader",
    "DatWriter",
    "Entry",
    "EntryParser",
    "ExplicitLinkGrouper",
    "FilteredCatalog",
    "Group",
    "GroupContext",
    "GroupTrace",
    "RomListScanner",
    "RomsFilterError",
    "ScoreResult",
    "ScoringEngine",
    "ScoringPolicy",
    "SelectionEngine",
    "SelectionResult",
    "SequentialPrefixGrouper",
    "TagHint",
    "UnknownGroupingStrategyError",
    "clone_links_from_groups",
    "create_grouper",
    "has_players_marker",
    "parse_entry",
    "project_catalog",
    "run_selection",
]
