"""Grouping module for organizing entries that compete for one selection."""

import logging
from typing import Protocol

from .exceptions import UnknownGroupingStrategyError
from .models import Entry, Group

logger = logging.getLogger(__name__)


class GroupingStrategy(Protocol):
    """Protocol for objects that partition entries into groups."""

    stats: dict[str, int]

    def group(self, entries: list[Entry]) -> list[Group]:
        """Partition entries into groups, preserving input order."""
        ...


class SequentialPrefixGrouper:
    """Groups adjacent entries sharing the same name prefix.

    Input is expected to be sorted by name, as a directory listing or a
    No-Intro list file is. A new group starts whenever the prefix before the
    first tag group changes.
    """

    def __init__(self):
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {"entries_seen": 0, "groups_created": 0, "entries_dropped": 0}

    def group(self, entries: list[Entry]) -> list[Group]:
        """
        Group entries in a single pass.

        Args:
            entries: Entries sorted by raw name

        Returns:
            Groups in discovery order, candidates in input order

        Example:
            >>> parser = EntryParser()
            >>> groups = SequentialPrefixGrouper().group(
            ...     parser.parse_many(["Game (USA)", "Game (Europe)", "Other (USA)"])
            ... )
            >>> [g.key for g in groups]
            ['Game', 'Other']
        """
        self.stats = self._empty_stats()
        groups: list[Group] = []
        current: Group | None = None

        for entry in entries:
            self.stats["entries_seen"] += 1
            prefix = entry.base_name
            if not prefix:
                logger.debug(f"Skipping entry without a name prefix: {entry.raw_name}")
                self.stats["entries_dropped"] += 1
                continue

            if current is None or current.key != prefix:
                current = Group(key=prefix)
                groups.append(current)
            current.add_candidate(entry)

        self.stats["groups_created"] = len(groups)
        logger.info(f"Grouped {len(entries)} entries into {len(groups)} name groups")
        return groups


class ExplicitLinkGrouper:
    """Groups entries by their declared parent/clone relation.

    BIOS entries and parents that depend on another set's firmware are
    dropped. Every remaining parent forms a group of its own, carrying its
    declared clones; clones are never candidates.
    """

    def __init__(self):
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {
            "entries_seen": 0,
            "groups_created": 0,
            "entries_dropped": 0,
            "clones_linked": 0,
            "orphan_clones": 0,
        }

    def link_clones(self, entries: list[Entry]) -> dict[str, list[Entry]]:
        """
        Map each parent key to its clones, in input order.

        Args:
            entries: Entries with optional parent keys

        Returns:
            Dictionary of parent key to clone entries
        """
        clone_links: dict[str, list[Entry]] = {}
        for entry in entries:
            if entry.parent_key and not entry.is_bios:
                clone_links.setdefault(entry.parent_key, []).append(entry)
        return clone_links

    def group(self, entries: list[Entry]) -> list[Group]:
        """
        Create one group per parent entry.

        Args:
            entries: Entries from a structured catalog, in document order

        Returns:
            Groups in parent order, each with a single candidate
        """
        self.stats = self._empty_stats()
        clone_links = self.link_clones(entries)
        groups: list[Group] = []
        parent_names: set[str] = set()

        for entry in entries:
            self.stats["entries_seen"] += 1
            if entry.is_bios:
                logger.debug(f"Skipping BIOS entry: {entry.raw_name}")
                self.stats["entries_dropped"] += 1
                continue
            if entry.parent_key:
                continue
            if entry.firmware_parent:
                logger.debug(
                    f"Skipping {entry.raw_name}: depends on {entry.firmware_parent} firmware"
                )
                self.stats["entries_dropped"] += 1
                continue

            clones = clone_links.get(entry.raw_name, [])
            groups.append(Group(key=entry.raw_name, candidates=[entry], clones=clones))
            parent_names.add(entry.raw_name)
            self.stats["clones_linked"] += len(clones)

        for parent_key, clones in clone_links.items():
            if parent_key not in parent_names:
                logger.debug(f"Dropping {len(clones)} clones of unavailable parent {parent_key}")
                self.stats["orphan_clones"] += len(clones)

        self.stats["groups_created"] = len(groups)
        logger.info(
            f"Grouped {len(entries)} entries into {len(groups)} parent groups "
            f"({self.stats['clones_linked']} clones linked)"
        )
        return groups


def create_grouper(strategy: str) -> GroupingStrategy:
    """Create a grouper by strategy name ("sequential" or "explicit")."""
    groupers = {
        "sequential": SequentialPrefixGrouper,
        "explicit": ExplicitLinkGrouper,
    }
    if strategy not in groupers:
        raise UnknownGroupingStrategyError(
            f"Unknown grouping strategy '{strategy}', expected one of: {', '.join(groupers)}"
        )
    return groupers[strategy]()
