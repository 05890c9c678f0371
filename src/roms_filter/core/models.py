"""Pydantic models for the ROM filter."""

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Revision or version tag such as "(Rev 1)", "(Rev A)" or "(v1.1)"
VERSION_TAG_PATTERN = re.compile(r"^(Rev|v)", re.IGNORECASE)


class Entry(BaseModel):
    """A single catalog item with the metadata parsed from its name."""

    model_config = ConfigDict(frozen=True)

    raw_name: str = Field(..., description="Original identifier (file name or game name)")
    base_name: str = Field(..., description="Name with all tag groups stripped")
    tags: list[str] = Field(default_factory=list, description="Tag groups, left to right")
    countries: list[str] = Field(
        default_factory=list, description="Comma-split contents of the first tag group"
    )
    parent_key: str | None = Field(None, description="Parent this entry is a clone of")
    description: str | None = Field(None, description="Game description (structured catalogs)")
    manufacturer: str | None = Field(None, description="Manufacturer (structured catalogs)")
    is_bios: bool = Field(default=False, description="Entry is BIOS/system firmware")
    firmware_parent: str | None = Field(
        None, description="Set whose firmware this entry depends on (romof)"
    )
    rom_size: int = Field(default=0, ge=0, description="Total uncompressed size in bytes")
    metadata: Any = Field(default=None, exclude=True, repr=False, description="Collaborator payload")

    @property
    def is_valid(self) -> bool:
        """An entry can only be scored when a region list was extracted."""
        return bool(self.countries)

    @property
    def has_version(self) -> bool:
        """Whether any tag group is a revision/version marker."""
        return any(VERSION_TAG_PATTERN.match(tag) for tag in self.tags)

    @property
    def leading_country(self) -> str | None:
        """First country of the region list."""
        return self.countries[0] if self.countries else None

    @property
    def display_description(self) -> str:
        return self.description if self.description is not None else self.raw_name

    def __str__(self) -> str:
        return self.raw_name


class TagHint(BaseModel):
    """Structured metadata a catalog source knows about an entry."""

    description: str | None = None
    parent_key: str | None = None
    manufacturer: str | None = None
    is_bios: bool = False
    firmware_parent: str | None = None
    rom_size: int = Field(default=0, ge=0)
    metadata: Any = Field(default=None, exclude=True, repr=False)


class Group(BaseModel):
    """A set of entries competing for a single selection."""

    key: str = Field(..., description="Shared base name or parent identifier")
    candidates: list[Entry] = Field(default_factory=list, description="Entries in input order")
    clones: list[Entry] = Field(
        default_factory=list, description="Declared clones of the parent (never scored)"
    )

    @property
    def candidate_count(self) -> int:
        """Number of candidates in this group."""
        return len(self.candidates)

    def add_candidate(self, entry: Entry) -> None:
        """Append an entry to the candidate list."""
        self.candidates.append(entry)

    def __str__(self) -> str:
        return f"Group '{self.key}' ({self.candidate_count} candidates, {len(self.clones)} clones)"


class ScoringPolicy(BaseModel):
    """Weighted selection rules. Validated once, before any entry is scored."""

    model_config = ConfigDict(frozen=True)

    country_preference: list[str] = Field(
        default=["USA", "World", "Europe"], description="Countries, most preferred first"
    )
    exclude_unlisted_countries: bool = Field(
        default=False, description="Veto entries whose countries are all unlisted"
    )
    re_edition_marker: str = Field(
        default="GameCube Edition", description="Name marker of a re-edition"
    )
    re_edition_weight: float = Field(default=1.0, ge=0, description="Bonus for a re-edition")
    version_weight: float = Field(
        default=0.1, ge=0, description="Bonus per versioned entry seen in the same country bucket"
    )
    force_include_attrs: list[str] = Field(
        default_factory=list, description="Tag substrings that add a bonus (case-insensitive)"
    )
    force_include_weight: float = Field(default=0.1, ge=0, description="Bonus per matching tag")
    skip_attrs: list[str] = Field(
        default_factory=list, description="Tag substrings that veto an entry (case-insensitive)"
    )
    skip_name_patterns: list[str] = Field(
        default_factory=list, description="Name substrings that veto an entry (case-insensitive)"
    )
    skip_description_patterns: list[str] = Field(
        default_factory=list,
        description="Substrings of the whole description that veto an entry (case-insensitive)",
    )
    bios_excluded: bool = Field(default=False, description="Veto BIOS entries")
    require_countries: bool = Field(
        default=True, description="Treat entries without a region list as invalid"
    )
    manufacturer_filter: str | None = Field(
        None, description="Keep only this manufacturer after selection (structured catalogs)"
    )

    @field_validator(
        "force_include_attrs", "skip_attrs", "skip_name_patterns", "skip_description_patterns"
    )
    @classmethod
    def validate_substrings(cls, v: list[str]) -> list[str]:
        """Reject blank substrings, they would match every tag."""
        for item in v:
            if not item.strip():
                raise ValueError("Substring rules cannot contain blank values")
        return v

    @field_validator("manufacturer_filter")
    @classmethod
    def validate_manufacturer(cls, v: str | None) -> str | None:
        """Normalize an empty manufacturer filter to None."""
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_consistency(self) -> "ScoringPolicy":
        """Reject contradictory rule combinations."""
        if self.exclude_unlisted_countries and not self.country_preference:
            raise ValueError(
                "exclude_unlisted_countries requires a non-empty country_preference"
            )

        forced = {attr.lower() for attr in self.force_include_attrs}
        skipped = {attr.lower() for attr in self.skip_attrs}
        overlap = sorted(forced & skipped)
        if overlap:
            raise ValueError(
                f"Attributes cannot be both forced and skipped: {', '.join(overlap)}"
            )
        return self


class ScoreResult(BaseModel):
    """Score of one entry under a policy."""

    value: float = Field(..., description="Final score, -1 when vetoed")
    vetoed: bool = Field(default=False, description="Entry can never be selected")
    reasons: list[str] = Field(default_factory=list, description="Rules that fired")


class CandidateTrace(BaseModel):
    """One line of the analysis output."""

    entry: Entry
    score: float | None = Field(None, description="Score, None for invalid entries")
    vetoed: bool = False
    invalid: bool = False
    winner: bool = False
    reasons: list[str] = Field(default_factory=list)


class GroupTrace(BaseModel):
    """Analysis of one group: every candidate and the winner."""

    key: str
    candidates: list[CandidateTrace] = Field(default_factory=list)

    @property
    def winner(self) -> Entry | None:
        """The selected entry, if any."""
        return next((c.entry for c in self.candidates if c.winner), None)


class SelectionResult(BaseModel):
    """Outcome of a selection run."""

    winners: list[Entry] = Field(default_factory=list, description="One entry per resolved group")
    processed_count: int = Field(default=0, ge=0, description="Entries seen")
    invalid_count: int = Field(default=0, ge=0, description="Entries without a region list")
    vetoed_count: int = Field(default=0, ge=0, description="Entries forced to -1")
    group_count: int = Field(default=0, ge=0, description="Groups evaluated")
    invalid_entries: list[Entry] = Field(default_factory=list)
    attribute_index: set[str] = Field(
        default_factory=set, description="Every tag seen, vetoed entries included"
    )
    trace: list[GroupTrace] | None = Field(None, description="Analysis trace, when requested")

    @property
    def selected_count(self) -> int:
        """Number of winners."""
        return len(self.winners)

    @property
    def summary(self) -> str:
        return f"Selected {self.selected_count} of {self.processed_count} ROMs"

    def __str__(self) -> str:
        return (
            f"{self.summary} ({self.invalid_count} invalid, {self.vetoed_count} vetoed, "
            f"{self.group_count} groups)"
        )


class FilteredCatalog(BaseModel):
    """Selected parents of a structured catalog plus their valid clones."""

    parents: list[Entry] = Field(default_factory=list)
    clones_by_parent: dict[str, list[Entry]] = Field(default_factory=dict)
    dropped_by_manufacturer: int = Field(default=0, ge=0)

    @property
    def parent_count(self) -> int:
        return len(self.parents)

    @property
    def clone_count(self) -> int:
        return sum(len(clones) for clones in self.clones_by_parent.values())

    @property
    def total_count(self) -> int:
        return self.parent_count + self.clone_count

    def clones_of(self, parent: Entry) -> list[Entry]:
        """Valid clones kept for a parent."""
        return self.clones_by_parent.get(parent.raw_name, [])

    @property
    def ordered_entries(self) -> list[Entry]:
        """Entries in output document order: each parent's clones, then the parent."""
        ordered = []
        for parent in self.parents:
            ordered.extend(self.clones_of(parent))
            ordered.append(parent)
        return ordered

    def __str__(self) -> str:
        return (
            f"Found {self.parent_count} roms and {self.clone_count} valid clones "
            f"({self.total_count} total)"
        )


class ApplicationConfig(BaseModel):
    """Run settings that are not scoring rules."""

    output_file: Path = Field(
        default=Path("_rom-selection.txt"), description="Where the selection list is written"
    )
    output_xml: Path | None = Field(None, description="Filtered Dat file to write")
    analyze: bool = Field(default=False, description="Dry run: print the analysis, write nothing")
    print_description: bool = Field(
        default=False, description="Print description and size in arcade listings"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the level is one logging understands."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level
