"""Name parsing module for extracting tag groups from ROM names."""

import logging
import re

from .models import Entry, TagHint

logger = logging.getLogger(__name__)


class EntryParser:
    """Parses ROM names into entries with their tag groups."""

    # Innermost parenthesized span: "(USA, Europe)", "(Rev 1)"
    TAG_PATTERN = re.compile(r"\(([^()]+)\)")

    # Everything before the first tag group
    NAME_PATTERN = re.compile(r"^[^(]*")

    BIOS_MARKER = "[BIOS]"
    COUNTRY_SEPARATOR = ", "

    def extract_tags(self, name: str) -> list[str]:
        """
        Extract every tag group from a name, left to right.

        Args:
            name: ROM name or description

        Returns:
            List of tag contents without the parentheses

        Example:
            >>> EntryParser().extract_tags("Tetris (USA, Europe) (Rev 1).zip")
            ['USA, Europe', 'Rev 1']
        """
        return self.TAG_PATTERN.findall(name)

    def extract_base_name(self, name: str) -> str:
        """
        Extract the pre-tag prefix of a name, used for grouping.

        Args:
            name: ROM name or description

        Returns:
            The name up to its first tag group, trailing whitespace removed
        """
        match = self.NAME_PATTERN.match(name)
        return match.group(0).rstrip() if match else ""

    def parse(self, raw_name: str, tag_hint: TagHint | None = None) -> Entry:
        """
        Parse a ROM name into an Entry.

        Args:
            raw_name: File name or game name, kept unmodified
            tag_hint: Structured metadata from the catalog source. When it
                carries a description, tags are read from the description.

        Returns:
            Entry object. Entries without any tag group have no countries;
            the selection engine reports them as invalid.

        Example:
            >>> entry = EntryParser().parse("Game (USA) (Rev 1).zip")
            >>> entry.countries, entry.has_version
            (['USA'], True)
        """
        hint = tag_hint or TagHint()
        source = hint.description if hint.description is not None else raw_name

        tags = self.extract_tags(source)
        countries = tags[0].split(self.COUNTRY_SEPARATOR) if tags else []

        if not tags:
            logger.debug(f"No tag groups in: {source}")

        return Entry(
            raw_name=raw_name,
            base_name=self.extract_base_name(source),
            tags=tags,
            countries=countries,
            parent_key=hint.parent_key,
            description=hint.description,
            manufacturer=hint.manufacturer,
            is_bios=hint.is_bios or self.BIOS_MARKER in raw_name,
            firmware_parent=hint.firmware_parent,
            rom_size=hint.rom_size,
            metadata=hint.metadata,
        )

    def parse_many(self, names: list[str]) -> list[Entry]:
        """Parse a list of names, preserving order."""
        return [self.parse(name) for name in names]


def parse_entry(name: str, tag_hint: TagHint | None = None) -> Entry:
    """Parse a single name with a default parser."""
    return EntryParser().parse(name, tag_hint)
