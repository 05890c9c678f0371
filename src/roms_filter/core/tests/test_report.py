"""Tests for text reports."""

from pathlib import Path

from ..models import FilteredCatalog, ScoringPolicy, TagHint
from ..parser import EntryParser
from ..report import (
    format_analysis,
    format_arcade_listing,
    format_attribute_index,
    format_selection_list,
    format_summary,
    write_selection_list,
)
from ..selector import run_selection


class TestSelectionReports:
    """Test cases for flat collection reports."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.parser = EntryParser()

    def test_format_selection_list(self) -> None:
        winners = self.parser.parse_many(["A (USA).zip", "B (Europe).zip"])
        assert format_selection_list(winners) == "A (USA).zip\nB (Europe).zip\n"

    def test_write_selection_list(self, tmp_path: Path) -> None:
        """Test writing the list returns the absolute path."""
        winners = self.parser.parse_many(["A (USA).zip"])

        written = write_selection_list(winners, tmp_path / "selection.txt")

        assert written.is_absolute()
        assert written.read_text(encoding="utf-8") == "A (USA).zip\n"

    def test_format_analysis(self) -> None:
        """Test one line per candidate with the winner marked."""
        entries = self.parser.parse_many(
            ["Game (Europe)", "Game (USA)", "Game (USA) (Beta)", "Other (USA) (Rev 1)"]
        )
        result = run_selection(entries, policy=ScoringPolicy(skip_attrs=["beta"]), analysis=True)

        assert format_analysis(result.trace) == (
            "1     Game (Europe)\n"
            "3    *Game (USA)\n"
            "-1    Game (USA) (Beta)\n"
            "\n"
            "3.1  *Other (USA) (Rev 1)\n"
            "\n"
        )

    def test_format_analysis_no_winner(self) -> None:
        """Test that a fully vetoed group has no marked line."""
        entries = self.parser.parse_many(["Game (USA) (Beta)"])
        result = run_selection(entries, policy=ScoringPolicy(skip_attrs=["beta"]), analysis=True)

        assert "*" not in format_analysis(result.trace)

    def test_format_analysis_invalid_entry(self) -> None:
        entries = self.parser.parse_many(["Game"])
        result = run_selection(entries, analysis=True)

        assert format_analysis(result.trace) == "0     Game\n\n"

    def test_format_analysis_empty(self) -> None:
        assert format_analysis([]) == ""

    def test_format_attribute_index(self) -> None:
        text = format_attribute_index({"USA", "Beta", "Europe"})
        assert text == "\nAll ROM attributes:\n\nBeta\nEurope\nUSA\n"

    def test_format_summary(self) -> None:
        """Test that counters are reported separately."""
        entries = self.parser.parse_many(["Game", "Game (USA)", "Other (USA) (Beta)"])
        result = run_selection(entries, policy=ScoringPolicy(skip_attrs=["beta"]))

        text = format_summary(result)

        assert "Selected 1 of 3 ROMs" in text
        assert "Processed: 3" in text
        assert "Invalid: 1" in text
        assert "Vetoed: 1" in text
        assert "Selected: 1" in text
        assert "  Game\n" in text


class TestArcadeListing:
    """Test cases for arcade listings."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        parser = EntryParser()
        self.parent = parser.parse(
            "tmnt", TagHint(description="TMNT (World 4 Players)", rom_size=512 * 1024)
        )
        self.clone = parser.parse(
            "tmnt2p", TagHint(description="TMNT (2 Players)", parent_key="tmnt", rom_size=2048)
        )
        self.catalog = FilteredCatalog(parents=[self.parent], clones_by_parent={"tmnt": [self.clone]})

    def test_names_only(self) -> None:
        assert format_arcade_listing(self.catalog) == "tmnt\ntmnt2p\n"

    def test_with_description(self) -> None:
        """Test the padded description and size columns."""
        text = format_arcade_listing(self.catalog, print_description=True)

        assert text == (
            "tmnt         -- TMNT (World 4 Players) (512 KB)\n"
            "    tmnt2p           -- TMNT (2 Players) (2 KB)\n"
        )
