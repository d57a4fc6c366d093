"""Selection auto-fix: required-pair closure, then earliest-wins pruning.

Pass 1 appends every cut named in a selected cut's ``requires`` list
that is missing. Pass 2 walks the selections in order and marks any
later cut that conflicts with an earlier, still-kept one: a hard
exclusion declared on either side, or a second member of the same
exclusive-choice group. A kept cut whose required partner was marked is
marked as well. All marks are removed in one batch.

A cut that pass 1 added and pass 2 removed is reported in neither list.
Running ``normalize`` on its own output changes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.catalog.models import CutChoice
from src.catalog.registry import SchemaCatalog, get_schema_catalog
from src.engine.models import (
    NormalizationResult,
    Selection,
    SelectionInput,
    coerce_selections,
)
from src.models.common import Species

logger = logging.getLogger(__name__)


class SelectionNormalizer:
    """Produces a conflict-free selection set from caller input."""

    def __init__(self, catalog: SchemaCatalog | None = None) -> None:
        self._catalog = catalog or get_schema_catalog()

    def normalize(
        self,
        species: Species | str,
        selections: Iterable[SelectionInput] | None,
    ) -> NormalizationResult:
        current = coerce_selections(selections)
        if not self._catalog.has_species(species):
            return NormalizationResult(selections=current)

        cut_map = self._catalog.cut_map(species)
        added_messages = self._close_required(current, cut_map)
        removed_messages = self._prune_conflicts(species, current, cut_map)

        kept = [s for s in current if s.cut_id not in removed_messages]
        added = [cid for cid in added_messages if cid not in removed_messages]
        removed = [cid for cid in removed_messages if cid not in added_messages]
        messages = [added_messages[cid] for cid in added] + [
            removed_messages[cid] for cid in removed
        ]

        if added or removed:
            logger.debug(
                "Normalized %s selections: added=%s removed=%s", species, added, removed,
            )
        return NormalizationResult(
            selections=kept,
            added=added,
            removed=removed,
            messages=messages,
        )

    # -- Pass 1 ---------------------------------------------------------------

    @staticmethod
    def _close_required(
        current: list[Selection], cut_map: dict[str, CutChoice],
    ) -> dict[str, str]:
        """Append missing required partners in place; return id -> message."""
        present = {s.cut_id for s in current}
        added: dict[str, str] = {}
        i = 0
        while i < len(current):
            cut = cut_map.get(current[i].cut_id)
            i += 1
            if cut is None:
                continue
            for required_id in cut.requires:
                required = cut_map.get(required_id)
                if required is None or required_id in present:
                    continue
                current.append(Selection(cut_id=required_id))
                present.add(required_id)
                added[required_id] = f'Added "{required.name}" (required by "{cut.name}")'
        return added

    # -- Pass 2 ---------------------------------------------------------------

    def _prune_conflicts(
        self,
        species: Species | str,
        current: list[Selection],
        cut_map: dict[str, CutChoice],
    ) -> dict[str, str]:
        """Mark later conflicting cuts for removal; return id -> message."""
        marked: dict[str, str] = {}

        for i, selection in enumerate(current):
            if selection.cut_id in marked:
                continue
            cut = cut_map.get(selection.cut_id)
            if cut is None:
                continue
            group = self._catalog.get_exclusive_group(species, cut.id)

            for later in current[i + 1:]:
                other = cut_map.get(later.cut_id)
                if other is None or other.id in marked:
                    continue
                if other.id in cut.excludes or cut.id in other.excludes:
                    marked[other.id] = (
                        f'Removed "{other.name}" (conflicts with "{cut.name}")'
                    )
                elif group is not None and other.id in group.member_ids:
                    marked[other.id] = (
                        f'Removed "{other.name}" (only one option from '
                        f'"{group.display_name}" allowed, keeping "{cut.name}")'
                    )

        # Orphaned required partners go too.
        changed = True
        while changed:
            changed = False
            for selection in current:
                cut = cut_map.get(selection.cut_id)
                if cut is None or cut.id in marked:
                    continue
                for required_id in cut.requires:
                    if required_id in marked:
                        marked[cut.id] = (
                            f'Removed "{cut.name}" (requires '
                            f'"{cut_map[required_id].name}", which was removed)'
                        )
                        changed = True
                        break
        return marked


def normalize_selections(
    species: Species | str,
    selections: Iterable[SelectionInput] | None,
) -> NormalizationResult:
    """Normalize against the built-in catalog."""
    return SelectionNormalizer().normalize(species, selections)
