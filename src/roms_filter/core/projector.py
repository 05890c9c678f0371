"""Re-assembles a filtered structured catalog from selected parents."""

import logging
import re
from collections.abc import Callable

from .models import Entry, FilteredCatalog, Group

logger = logging.getLogger(__name__)

PLAYERS_PATTERN = re.compile(r"\bPlayers\b", re.IGNORECASE)

ClonePredicate = Callable[[Entry], bool]


def has_players_marker(clone: Entry) -> bool:
    """
    Whether a clone supports a different player count than its parent.

    Such clones are distinct enough to keep alongside the parent, e.g.
    "Teenage Mutant Ninja Turtles (US 4 Players, set 1)".
    """
    return bool(PLAYERS_PATTERN.search(clone.display_description))


def clone_links_from_groups(groups: list[Group]) -> dict[str, list[Entry]]:
    """Map each group's parent key to the clones declared for it."""
    return {group.key: list(group.clones) for group in groups if group.clones}


class CatalogProjector:
    """Keeps selected parents and the clones worth keeping with them."""

    def __init__(self, validity_predicate: ClonePredicate | None = None):
        """
        Initialize the projector.

        Args:
            validity_predicate: Decides whether a clone is kept, defaults to
                has_players_marker
        """
        self.validity_predicate = validity_predicate or has_players_marker

    @staticmethod
    def matches_manufacturer(entry: Entry, manufacturer_filter: str | None) -> bool:
        """Case-insensitive manufacturer match; no filter matches everything."""
        if not manufacturer_filter:
            return True
        manufacturer = (entry.manufacturer or "").strip().lower()
        return manufacturer == manufacturer_filter.strip().lower()

    def project(
        self,
        winners: list[Entry],
        clone_links: dict[str, list[Entry]],
        validity_predicate: ClonePredicate | None = None,
        manufacturer_filter: str | None = None,
    ) -> FilteredCatalog:
        """
        Build the filtered catalog.

        Args:
            winners: Selected parent entries, in output order
            clone_links: Parent key to declared clones
            validity_predicate: Decides whether a clone is kept, defaults to
                the projector's predicate
            manufacturer_filter: Keep only parents of this manufacturer

        Returns:
            FilteredCatalog with the kept parents and their valid clones

        Clones are never scored, only filtered by the validity predicate.
        """
        is_valid_clone = validity_predicate or self.validity_predicate
        catalog = FilteredCatalog()

        for parent in winners:
            if not self.matches_manufacturer(parent, manufacturer_filter):
                catalog.dropped_by_manufacturer += 1
                continue

            catalog.parents.append(parent)
            kept = [
                clone
                for clone in clone_links.get(parent.raw_name, [])
                if is_valid_clone(clone)
            ]
            if kept:
                catalog.clones_by_parent[parent.raw_name] = kept
                logger.debug(
                    f"Keeping {len(kept)} clones of {parent.raw_name}: "
                    f"{', '.join(clone.raw_name for clone in kept)}"
                )

        if manufacturer_filter:
            logger.info(
                f"Manufacturer filter '{manufacturer_filter}' dropped "
                f"{catalog.dropped_by_manufacturer} parents"
            )
        logger.info(str(catalog))
        return catalog


def project_catalog(
    winners: list[Entry],
    clone_links: dict[str, list[Entry]],
    validity_predicate: ClonePredicate | None = None,
    manufacturer_filter: str | None = None,
) -> FilteredCatalog:
    """Project a filtered catalog with a one-off projector."""
    return CatalogProjector().project(
        winners, clone_links, validity_predicate, manufacturer_filter
    )
