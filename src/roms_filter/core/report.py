"""Plain text reports: selection lists, analysis traces and arcade listings."""

import logging
from pathlib import Path

from .dat import format_size
from .models import Entry, FilteredCatalog, GroupTrace, SelectionResult

logger = logging.getLogger(__name__)

WINNER_MARK = "*"


def format_selection_list(winners: list[Entry]) -> str:
    """One winning name per line, in group order."""
    return "".join(f"{entry.raw_name}\n" for entry in winners)


def write_selection_list(winners: list[Entry], output_path: Path) -> Path:
    """
    Write the selection list to a file.

    Args:
        winners: Selected entries
        output_path: Destination file

    Returns:
        The absolute path written
    """
    output_path = output_path.resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(format_selection_list(winners), encoding="utf-8")
    logger.info(f"Wrote {len(winners)} ROM names to {output_path}")
    return output_path


def format_analysis(trace: list[GroupTrace]) -> str:
    """
    Format the analysis trace.

    Each candidate is printed as "<score> <mark><name>", the mark being "*"
    on the selected entry's line. Invalid entries are listed with a score of
    0. Every group is followed by a blank line.

    Example:
        3    *Game (USA)
        1     Game (Europe)
    """
    lines = []
    for group in trace:
        for candidate in group.candidates:
            score = candidate.score if candidate.score is not None else 0
            mark = WINNER_MARK if candidate.winner else " "
            lines.append("%-4g %s%s" % (score, mark, candidate.entry.raw_name))
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def format_attribute_index(attribute_index: set[str]) -> str:
    """Sorted listing of every attribute encountered."""
    lines = ["", "All ROM attributes:", ""]
    lines.extend(sorted(attribute_index))
    return "\n".join(lines) + "\n"


def format_summary(result: SelectionResult) -> str:
    """Counters of a selection run, one per line."""
    lines = [
        result.summary,
        f"Processed: {result.processed_count}",
        f"Invalid: {result.invalid_count}",
        f"Vetoed: {result.vetoed_count}",
        f"Selected: {result.selected_count}",
    ]
    if result.invalid_entries:
        lines.append("Invalid ROMs (missing region):")
        lines.extend(f"  {entry.raw_name}" for entry in result.invalid_entries)
    return "\n".join(lines) + "\n"


def format_arcade_listing(catalog: FilteredCatalog, print_description: bool = False) -> str:
    """
    Format a filtered arcade catalog, each parent followed by its clones.

    Args:
        catalog: Filtered catalog
        print_description: Append description and uncompressed size

    Returns:
        Listing text, one game per line
    """
    lines = []
    for parent in catalog.parents:
        line = parent.raw_name
        if print_description:
            line += " " * (12 - len(parent.raw_name)) + " -- " + parent.display_description
            line += f" ({format_size(parent.rom_size)})"
        lines.append(line)

        for clone in catalog.clones_of(parent):
            line = clone.raw_name
            if print_description:
                line = "    " + line
                line += " " * (16 - len(clone.raw_name)) + " -- " + clone.display_description
                line += f" ({format_size(clone.rom_size)})"
            lines.append(line)
    return "".join(f"{line}\n" for line in lines)
