"""Scoring module: evaluates one entry against a scoring policy."""

import logging
from collections import defaultdict

from .models import Entry, ScoreResult, ScoringPolicy

logger = logging.getLogger(__name__)

VETO_SCORE = -1


class GroupContext:
    """Per-group state needed while scoring: versioned entries per country.

    A new context is created for every group so version bonuses never leak
    between unrelated groups.
    """

    def __init__(self):
        self.version_counts: dict[str | None, int] = defaultdict(int)

    def next_version(self, country: str | None) -> int:
        """Count one more versioned entry for a country and return the count."""
        self.version_counts[country] += 1
        return self.version_counts[country]


class ScoringEngine:
    """Scores entries under a validated ScoringPolicy."""

    def __init__(self, policy: ScoringPolicy | None = None):
        """
        Initialize the engine.

        Args:
            policy: Scoring rules, defaults to ScoringPolicy()
        """
        self.policy = policy or ScoringPolicy()
        self._force_attrs = [attr.lower() for attr in self.policy.force_include_attrs]
        self._skip_attrs = [attr.lower() for attr in self.policy.skip_attrs]
        self._skip_names = [name.lower() for name in self.policy.skip_name_patterns]
        self._skip_descriptions = [
            pattern.lower() for pattern in self.policy.skip_description_patterns
        ]

    def country_score(self, entry: Entry) -> int | None:
        """
        Score the best ranked country of an entry.

        Args:
            entry: Entry to evaluate

        Returns:
            len(preference) - index of the most preferred listed country,
            0 when none is listed, or None when unlisted countries are excluded
            and none is listed

        Example:
            >>> engine = ScoringEngine()  # USA, World, Europe
            >>> engine.country_score(EntryParser().parse("Game (Japan, Europe)"))
            1
        """
        preference = self.policy.country_preference
        best = 0
        for country in entry.countries:
            if country in preference:
                best = max(best, len(preference) - preference.index(country))

        if best == 0 and self.policy.exclude_unlisted_countries:
            return None
        return best

    def matching_force_attrs(self, entry: Entry) -> int:
        """Count (tag, substring) pairs matching the force-include rules."""
        return sum(
            1 for tag in entry.tags for attr in self._force_attrs if attr in tag.lower()
        )

    def veto_reason(self, entry: Entry) -> str | None:
        """
        Find the first veto rule an entry matches.

        Args:
            entry: Entry to check

        Returns:
            Description of the matching rule, or None
        """
        name = entry.base_name.lower()
        for pattern in self._skip_names:
            if pattern in name:
                return f"name matches '{pattern}'"

        description = entry.display_description.lower()
        for pattern in self._skip_descriptions:
            if pattern in description:
                return f"description matches '{pattern}'"

        for tag in entry.tags:
            lowered = tag.lower()
            for attr in self._skip_attrs:
                if attr in lowered:
                    return f"attribute '{tag}' matches '{attr}'"

        if self.policy.bios_excluded and entry.is_bios:
            return "BIOS"
        return None

    def score(self, entry: Entry, context: GroupContext) -> ScoreResult:
        """
        Score an entry.

        Bonuses are accumulated first: country rank, re-edition, version
        (escalating per versioned entry of the same leading country within
        the group) and force-include matches. Vetoes are checked last and set
        the score to -1 whatever was accumulated.

        Args:
            entry: Valid entry to score
            context: State of the group the entry belongs to

        Returns:
            ScoreResult with the final value and veto flag
        """
        reasons: list[str] = []
        vetoed = False

        country_points = self.country_score(entry)
        if country_points is None:
            vetoed = True
            reasons.append("no preferred country")
            country_points = 0
        elif country_points:
            reasons.append(f"country +{country_points}")
        value = float(country_points)

        if self.policy.re_edition_marker and self.policy.re_edition_marker in entry.raw_name:
            value += self.policy.re_edition_weight
            reasons.append(f"re-edition +{self.policy.re_edition_weight:g}")

        if entry.has_version:
            occurrence = context.next_version(entry.leading_country)
            bonus = self.policy.version_weight * occurrence
            value += bonus
            reasons.append(f"version +{bonus:g}")

        force_matches = self.matching_force_attrs(entry)
        if force_matches:
            bonus = self.policy.force_include_weight * force_matches
            value += bonus
            reasons.append(f"forced attribute +{bonus:g}")

        veto = self.veto_reason(entry)
        if veto:
            vetoed = True
            reasons.append(f"skipped: {veto}")

        if vetoed:
            value = float(VETO_SCORE)

        logger.debug(f"Scored {entry.raw_name}: {value:g} ({', '.join(reasons) or 'no rules'})")
        return ScoreResult(value=value, vetoed=vetoed, reasons=reasons)
