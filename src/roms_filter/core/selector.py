"""Selection logic: picks one winner per group of competing entries."""

import logging

from .grouper import GroupingStrategy, create_grouper
from .models import CandidateTrace, Entry, Group, GroupTrace, ScoringPolicy, SelectionResult
from .scoring import GroupContext, ScoringEngine

logger = logging.getLogger(__name__)


class SelectionEngine:
    """Scores every candidate of every group and resolves the winners."""

    def __init__(self, policy: ScoringPolicy | None = None, analysis: bool = False):
        """
        Initialize the selection engine.

        Args:
            policy: Scoring rules, defaults to ScoringPolicy()
            analysis: Record a per-candidate trace for every group
        """
        self.policy = policy or ScoringPolicy()
        self.scoring = ScoringEngine(self.policy)
        self.analysis = analysis

    def is_scorable(self, entry: Entry) -> bool:
        """Whether an entry carries what the policy needs to score it."""
        return entry.is_valid or not self.policy.require_countries

    def select_group(
        self, group: Group, result: SelectionResult
    ) -> Entry | None:
        """
        Resolve the winner of one group.

        Ties go to the later candidate: a candidate replaces the running
        winner when its score is greater than or equal to the winner's.

        Args:
            group: Group to resolve
            result: Result being assembled; counters, attribute index and
                trace are updated in place

        Returns:
            The winning entry, or None when no candidate can be selected
        """
        context = GroupContext()
        group_trace = GroupTrace(key=group.key) if self.analysis else None
        winner_index: int | None = None
        winner_score = 0.0
        lines: list[CandidateTrace] = []

        for entry in group.candidates:
            if not self.is_scorable(entry):
                logger.warning(f"Invalid ROM (missing region): {entry.raw_name}")
                result.invalid_count += 1
                result.invalid_entries.append(entry)
                lines.append(CandidateTrace(entry=entry, invalid=True))
                continue

            result.attribute_index.update(entry.tags)
            scored = self.scoring.score(entry, context)
            if scored.vetoed:
                result.vetoed_count += 1

            lines.append(
                CandidateTrace(
                    entry=entry,
                    score=scored.value,
                    vetoed=scored.vetoed,
                    reasons=scored.reasons,
                )
            )
            if winner_index is None or scored.value >= winner_score:
                winner_index = len(lines) - 1
                winner_score = scored.value

        winner = None
        if winner_index is not None and not lines[winner_index].vetoed:
            lines[winner_index].winner = True
            winner = lines[winner_index].entry
            logger.debug(f"Group '{group.key}': selected {winner.raw_name} ({winner_score:g})")
        else:
            logger.debug(f"Group '{group.key}': no selectable candidate")

        if group_trace is not None:
            group_trace.candidates = lines
            result.trace.append(group_trace)
        return winner

    def select(self, groups: list[Group], processed_count: int | None = None) -> SelectionResult:
        """
        Resolve every group.

        Args:
            groups: Groups in discovery order
            processed_count: Entries read from the source, when it differs
                from the number of grouped candidates

        Returns:
            SelectionResult with winners in group order
        """
        result = SelectionResult(trace=[] if self.analysis else None)

        for group in groups:
            winner = self.select_group(group, result)
            if winner is not None:
                result.winners.append(winner)

        result.group_count = len(groups)
        if processed_count is None:
            processed_count = sum(group.candidate_count for group in groups)
        result.processed_count = processed_count

        logger.info(
            f"Selection results: {result.selected_count} selected, "
            f"{result.vetoed_count} vetoed, {result.invalid_count} invalid "
            f"of {result.processed_count} processed"
        )
        return result


def run_selection(
    entries: list[Entry],
    grouping_strategy: str | GroupingStrategy = "sequential",
    policy: ScoringPolicy | None = None,
    analysis: bool = False,
) -> SelectionResult:
    """
    Group entries and select one winner per group.

    Args:
        entries: Parsed entries in source order
        grouping_strategy: "sequential", "explicit" or a grouper instance
        policy: Scoring rules, defaults to ScoringPolicy()
        analysis: Record the per-candidate trace

    Returns:
        SelectionResult for the whole catalog
    """
    grouper = (
        create_grouper(grouping_strategy) if isinstance(grouping_strategy, str) else grouping_strategy
    )
    groups = grouper.group(entries)
    engine = SelectionEngine(policy, analysis=analysis)
    return engine.select(groups, processed_count=len(entries))
