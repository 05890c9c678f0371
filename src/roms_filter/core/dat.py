"""
Reader and writer for Logiqx-style XML Dat files.

The reader turns every <game> (or MAME <machine>) element into an Entry that
carries the element itself as metadata, so the writer can re-emit selected
nodes untouched inside the original document envelope.
"""

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from lxml import etree

from .exceptions import CatalogSourceError
from .models import Entry, FilteredCatalog, TagHint
from .parser import EntryParser

logger = logging.getLogger(__name__)

GAME_TAGS = ("game", "machine")

DEFAULT_DOCTYPE = (
    '<!DOCTYPE datafile PUBLIC "-//FB Alpha//DTD ROM Management Datafile//EN" '
    '"http://www.logiqx.com/Dats/datafile.dtd">'
)


@dataclass
class DatHeader:
    """Header fields written when the source Dat has no header of its own."""
    name: str = "Arcade Games Filtered"
    description: str = "Arcade Games"
    category: str = "Standard DatFile"
    author: str = "[Your name here]"


@dataclass
class DatCatalog:
    """A parsed Dat file: document envelope plus entries."""
    path: Path
    root_tag: str = "datafile"
    doctype: Optional[str] = None
    header: Optional[etree._Element] = None
    entries: list[Entry] = field(default_factory=list)

    @property
    def game_count(self) -> int:
        """Number of non-BIOS games, as listed in the summary."""
        return sum(1 for entry in self.entries if not entry.is_bios)


def _text(element: etree._Element, tag: str) -> Optional[str]:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def rom_size(element: etree._Element) -> int:
    """Total uncompressed size of the <rom> children of a game element."""
    total = 0
    for rom in element.findall("rom"):
        size = rom.get("size")
        if size and size.isdigit():
            total += int(size)
    return total


def format_size(size_bytes: int) -> str:
    """
    Format a ROM size the way arcade listings show it.

    Sizes are shown in whole KB up to 999 KB, then in MB with two decimals.

    Example:
        >>> format_size(512 * 1024)
        '512 KB'
        >>> format_size(3 * 1024 * 1024)
        '3.0 MB'
    """
    size_kb = size_bytes // 1024
    if len(str(size_kb)) > 3:
        return f"{round(size_kb / 1024.0, 2)} MB"
    return f"{size_kb} KB"


class DatReader:
    """Parses Dat files into entries."""

    def __init__(self):
        self.parser = EntryParser()

    def parse_game(self, element: etree._Element) -> Entry:
        """
        Parse a single game element.

        Args:
            element: <game> or <machine> element

        Returns:
            Entry whose tags are read from the description
        """
        name = element.get("name", "")
        hint = TagHint(
            description=_text(element, "description") or name,
            parent_key=element.get("cloneof"),
            manufacturer=_text(element, "manufacturer"),
            is_bios=element.get("isbios", "no") == "yes",
            firmware_parent=element.get("romof") if not element.get("cloneof") else None,
            rom_size=rom_size(element),
            metadata=element,
        )
        return self.parser.parse(name, hint)

    def read(self, path: Path) -> DatCatalog:
        """
        Read a Dat file.

        Args:
            path: Dat file to read

        Returns:
            DatCatalog with the envelope and every game entry

        Raises:
            CatalogSourceError: If the file is missing or is not valid XML
        """
        if not path.is_file():
            raise CatalogSourceError(path, "Dat file not found")

        logger.info(f"Parsing Dat file: {path}")
        try:
            xml_parser = etree.XMLParser(remove_blank_text=True)
            tree = etree.parse(str(path), xml_parser)
        except (OSError, etree.XMLSyntaxError) as e:
            raise CatalogSourceError(path, str(e)) from e

        root = tree.getroot()
        catalog = DatCatalog(
            path=path,
            root_tag=root.tag,
            doctype=tree.docinfo.doctype or None,
            header=root.find("header"),
        )
        for element in root:
            if element.tag in GAME_TAGS:
                catalog.entries.append(self.parse_game(element))

        clones = sum(1 for entry in catalog.entries if entry.parent_key)
        logger.info(
            f"Parsed {len(catalog.entries)} games from {path.name} "
            f"({catalog.game_count} non-BIOS, {clones} clones)"
        )
        return catalog


class DatWriter:
    """Writes a filtered catalog as a Dat file."""

    def __init__(self, header: DatHeader | None = None):
        """
        Initialize the writer.

        Args:
            header: Header used when the source document has none
        """
        self.header = header or DatHeader()

    def _create_header_element(self) -> etree._Element:
        header = etree.Element("header")
        for tag in ("name", "description", "category", "author"):
            child = etree.SubElement(header, tag)
            child.text = getattr(self.header, tag)
        etree.SubElement(header, "clrmamepro", forcenodump="ignore")
        return header

    def _element_for(self, entry: Entry) -> etree._Element:
        if isinstance(entry.metadata, etree._Element):
            return deepcopy(entry.metadata)

        game = etree.Element("game", name=entry.raw_name)
        if entry.parent_key:
            game.set("cloneof", entry.parent_key)
            game.set("romof", entry.parent_key)
        description = etree.SubElement(game, "description")
        description.text = entry.display_description
        if entry.manufacturer:
            manufacturer = etree.SubElement(game, "manufacturer")
            manufacturer.text = entry.manufacturer
        return game

    def build(self, catalog: FilteredCatalog, source: DatCatalog | None = None) -> bytes:
        """
        Serialize a filtered catalog.

        Args:
            catalog: Parents and clones to write
            source: Parsed source document whose envelope is preserved

        Returns:
            UTF-8 encoded XML document
        """
        root = etree.Element(source.root_tag if source else "datafile")
        if source is not None and source.header is not None:
            root.append(deepcopy(source.header))
        else:
            root.append(self._create_header_element())

        for entry in catalog.ordered_entries:
            root.append(self._element_for(entry))

        doctype = source.doctype if source and source.doctype else DEFAULT_DOCTYPE
        return etree.tostring(
            root,
            encoding="UTF-8",
            xml_declaration=True,
            pretty_print=True,
            doctype=doctype,
        )

    def write(
        self, catalog: FilteredCatalog, output_path: Path, source: DatCatalog | None = None
    ) -> None:
        """
        Write a filtered catalog to a Dat file.

        Args:
            catalog: Parents and clones to write
            output_path: Destination file
            source: Parsed source document whose envelope is preserved
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(self.build(catalog, source))
        logger.info(f"Wrote {catalog.total_count} games to {output_path}")
