"""Tests for Dat file reader and writer."""

from pathlib import Path

import pytest
from lxml import etree

from ..dat import DEFAULT_DOCTYPE, DatReader, DatWriter, format_size, rom_size
from ..exceptions import CatalogSourceError
from ..grouper import ExplicitLinkGrouper
from ..models import FilteredCatalog, ScoringPolicy
from ..parser import EntryParser
from ..projector import CatalogProjector, clone_links_from_groups
from ..selector import SelectionEngine

SAMPLE_DAT = """<?xml version="1.0"?>
<!DOCTYPE datafile PUBLIC "-//Logiqx//DTD ROM Management Datafile//EN" "http://www.logiqx.com/Dats/datafile.dtd">
<datafile>
    <header>
        <name>FinalBurn Neo - Arcade Games</name>
        <description>FinalBurn Neo v1.0.0.02 Arcade Games</description>
    </header>
    <game name="neogeo" isbios="yes">
        <description>Neo Geo</description>
        <manufacturer>SNK</manufacturer>
    </game>
    <game name="mslug" romof="neogeo">
        <description>Metal Slug - Super Vehicle-001</description>
        <manufacturer>Nazca</manufacturer>
    </game>
    <game name="tmnt">
        <description>Teenage Mutant Ninja Turtles (World 4 Players)</description>
        <manufacturer>Konami</manufacturer>
        <rom name="963-x23.j17" size="131072" crc="5a5a5a5a"/>
        <rom name="963-x24.k17" size="131072" crc="a5a5a5a5"/>
    </game>
    <game name="tmnt2pj" cloneof="tmnt" romof="tmnt">
        <description>Teenage Mutant Ninja Turtles (Japan 2 Players)</description>
        <manufacturer>Konami</manufacturer>
        <rom name="963-x23.j17" size="131072" crc="5a5a5a5a"/>
    </game>
    <game name="tmntj" cloneof="tmnt" romof="tmnt">
        <description>Teenage Mutant Ninja Turtles (Japan)</description>
        <manufacturer>Konami</manufacturer>
    </game>
    <game name="sf2">
        <description>Street Fighter II - The World Warrior (World 910522)</description>
        <manufacturer>Capcom</manufacturer>
    </game>
</datafile>
"""


@pytest.fixture
def dat_file(tmp_path: Path) -> Path:
    """Write the sample Dat file."""
    path = tmp_path / "arcade.dat"
    path.write_text(SAMPLE_DAT, encoding="utf-8")
    return path


class TestDatReader:
    """Test cases for DatReader."""

    def test_read_entries(self, dat_file: Path) -> None:
        """Test that every game becomes an entry with its metadata."""
        catalog = DatReader().read(dat_file)

        names = [e.raw_name for e in catalog.entries]
        assert names == ["neogeo", "mslug", "tmnt", "tmnt2pj", "tmntj", "sf2"]
        assert catalog.game_count == 5
        assert catalog.root_tag == "datafile"
        assert "Logiqx" in catalog.doctype
        assert catalog.header.findtext("name") == "FinalBurn Neo - Arcade Games"

    def test_entry_fields(self, dat_file: Path) -> None:
        """Test the fields read from game elements."""
        entries = {e.raw_name: e for e in DatReader().read(dat_file).entries}

        assert entries["neogeo"].is_bios
        assert entries["mslug"].firmware_parent == "neogeo"
        assert entries["tmnt2pj"].parent_key == "tmnt"
        assert entries["tmnt2pj"].firmware_parent is None
        assert entries["tmnt"].manufacturer == "Konami"
        assert entries["tmnt"].rom_size == 262144
        assert entries["tmnt"].tags == ["World 4 Players"]
        assert entries["sf2"].base_name == "Street Fighter II - The World Warrior"
        assert entries["sf2"].metadata.get("name") == "sf2"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogSourceError, match="not found"):
            DatReader().read(tmp_path / "missing.dat")

    def test_malformed_xml(self, tmp_path: Path) -> None:
        """Test that broken XML is reported as a catalog error."""
        path = tmp_path / "broken.dat"
        path.write_text("<datafile><game name='x'>", encoding="utf-8")

        with pytest.raises(CatalogSourceError):
            DatReader().read(path)


class TestDatWriter:
    """Test cases for DatWriter."""

    def filter_catalog(self, dat_file: Path, policy: ScoringPolicy | None = None):
        """Run the arcade pipeline over the sample file."""
        source = DatReader().read(dat_file)
        groups = ExplicitLinkGrouper().group(source.entries)
        policy = policy or ScoringPolicy(country_preference=[], require_countries=False)
        result = SelectionEngine(policy).select(groups)
        catalog = CatalogProjector().project(result.winners, clone_links_from_groups(groups))
        return source, catalog

    def test_write_preserves_envelope(self, dat_file: Path, tmp_path: Path) -> None:
        """Test that the doctype and header of the source are written back."""
        source, catalog = self.filter_catalog(dat_file)
        output = tmp_path / "out" / "filtered.dat"

        DatWriter().write(catalog, output, source)

        tree = etree.parse(str(output))
        assert "Logiqx" in tree.docinfo.doctype
        root = tree.getroot()
        assert root.find("header/name").text == "FinalBurn Neo - Arcade Games"
        games = [g.get("name") for g in root.findall("game")]
        assert games == ["tmnt2pj", "tmnt", "sf2"]

    def test_written_nodes_untouched(self, dat_file: Path, tmp_path: Path) -> None:
        """Test that game nodes keep their children and attributes."""
        source, catalog = self.filter_catalog(dat_file)
        output = tmp_path / "filtered.dat"

        DatWriter().write(catalog, output, source)

        clone = etree.parse(str(output)).getroot().find("game[@name='tmnt2pj']")
        assert clone.get("cloneof") == "tmnt"
        assert len(clone.findall("rom")) == 1

    def test_default_header_without_source(self) -> None:
        """Test that a header is generated when no source envelope exists."""
        entry = EntryParser().parse("pacman", None)
        data = DatWriter().build(FilteredCatalog(parents=[entry]))

        assert DEFAULT_DOCTYPE.encode() in data
        root = etree.fromstring(data)
        assert root.find("header/name").text == "Arcade Games Filtered"
        assert root.find("header/clrmamepro").get("forcenodump") == "ignore"
        assert root.find("game").get("name") == "pacman"


class TestSizes:
    """Test cases for ROM size helpers."""

    def test_rom_size_ignores_missing_sizes(self) -> None:
        element = etree.fromstring('<game><rom size="1024"/><rom/><rom size="x"/></game>')
        assert rom_size(element) == 1024

    def test_format_size(self) -> None:
        assert format_size(0) == "0 KB"
        assert format_size(512 * 1024) == "512 KB"
        assert format_size(999 * 1024) == "999 KB"
        assert format_size(1000 * 1024) == "0.98 MB"
        assert format_size(3 * 1024 * 1024) == "3.0 MB"
