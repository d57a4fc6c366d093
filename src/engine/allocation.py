"""Percentage split management for allow-split body parts.

Applies only to top-level body parts with ``GroupingMode.ALLOW_SPLIT``
and only once exactly two of their (non-independent) cuts are selected.
Every operation returns a fresh ``AllocationMap``; inputs are never
mutated, so a caller never observes a part whose entries do not total
100.
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Iterable

from pydantic import Field

from src.catalog.registry import SchemaCatalog, get_schema_catalog
from src.engine.models import (
    AllocationIssue,
    AllocationMap,
    SelectionInput,
    coerce_selections,
    selected_ids,
)
from src.models.common import CutSheetBase, Species

logger = logging.getLogger(__name__)

MAX_SPLIT_MEMBERS = 2


class AllocationConfig(CutSheetBase):
    """Tuning for the allocation splitter."""

    step_pct: int = Field(default=25, gt=0, le=100)
    tolerance_pct: float = Field(default=0.5, ge=0.0)


def even_split(cut_ids: list[str]) -> dict[str, int]:
    """Divide 100 evenly; the remainder goes to the last id."""
    if not cut_ids:
        return {}
    share = 100 // len(cut_ids)
    split = {cid: share for cid in cut_ids}
    split[cut_ids[-1]] = 100 - share * (len(cut_ids) - 1)
    return split


class AllocationSplitter:
    """Maintains the percentage split between two cuts of one body part."""

    def __init__(
        self,
        catalog: SchemaCatalog | None = None,
        config: AllocationConfig | None = None,
    ) -> None:
        self._catalog = catalog or get_schema_catalog()
        self._config = config or AllocationConfig()

    # -- Membership -----------------------------------------------------------

    def split_members(
        self,
        species: Species | str,
        part_key: str,
        selections: Iterable[SelectionInput] | None,
    ) -> list[str]:
        """Selected members of an allow-split part, in selection order."""
        members: list[str] = []
        for cut_id in selected_ids(coerce_selections(selections)):
            group = self._catalog.get_split_part(species, cut_id)
            if group is not None and group.key == part_key:
                members.append(cut_id)
        return members

    def can_select(
        self,
        species: Species | str,
        selections: Iterable[SelectionInput] | None,
        cut_id: str,
    ) -> bool:
        """False when ``cut_id`` would be a third member of its split part."""
        group = self._catalog.get_split_part(species, cut_id)
        if group is None:
            return True
        members = self.split_members(species, group.key, selections)
        return cut_id in members or len(members) < MAX_SPLIT_MEMBERS

    # -- Transitions ----------------------------------------------------------

    def on_select(
        self,
        species: Species | str,
        allocations: AllocationMap | None,
        selections: Iterable[SelectionInput] | None,
        cut_id: str,
    ) -> AllocationMap:
        """Allocation after ``cut_id`` was added to ``selections``.

        ``selections`` is the list *after* the addition. When the cut's
        split part now holds exactly two members, both get an even share
        (remainder to ``cut_id``). A third member is a caller error.
        """
        result = copy.deepcopy(allocations or {})
        group = self._catalog.get_split_part(species, cut_id)
        if group is None:
            return result

        members = self.split_members(species, group.key, selections)
        if cut_id not in members:
            members.append(cut_id)
        if len(members) > MAX_SPLIT_MEMBERS:
            raise ValueError(
                f"{group.display_name} allows at most {MAX_SPLIT_MEMBERS} cuts; "
                f"{cut_id!r} would be number {len(members)}."
            )
        if len(members) == MAX_SPLIT_MEMBERS:
            ordered = [m for m in members if m != cut_id] + [cut_id]
            result[group.key] = even_split(ordered)
        return result

    def set_percentage(
        self,
        allocations: AllocationMap | None,
        part_key: str,
        cut_id: str,
        percentage: float,
    ) -> AllocationMap:
        """Set one member to ``percentage`` (snapped) and its partner to the rest."""
        result = copy.deepcopy(allocations or {})
        split = result.get(part_key)
        if not split:
            raise ValueError(f"No active split for body part {part_key!r}.")
        if cut_id not in split:
            raise ValueError(f"Cut {cut_id!r} is not part of the {part_key!r} split.")
        if len(split) != MAX_SPLIT_MEMBERS:
            raise ValueError(
                f"Split for {part_key!r} has {len(split)} members; expected "
                f"{MAX_SPLIT_MEMBERS}."
            )

        snapped = self.snap(percentage)
        partner = next(cid for cid in split if cid != cut_id)
        result[part_key] = {
            cid: (snapped if cid == cut_id else 100 - snapped) for cid in split
        }
        logger.debug("Split %s: %s=%d %s=%d", part_key, cut_id, snapped, partner, 100 - snapped)
        return result

    def on_deselect(
        self,
        species: Species | str,
        allocations: AllocationMap | None,
        selections: Iterable[SelectionInput] | None,
        cut_id: str,
    ) -> AllocationMap:
        """Allocation after ``cut_id`` was removed from ``selections``.

        ``selections`` is the list *after* the removal.
        """
        result = copy.deepcopy(allocations or {})
        group = self._catalog.get_split_part(species, cut_id)
        if group is None or group.key not in result:
            return result

        remaining = self.split_members(species, group.key, selections)
        if len(remaining) < MAX_SPLIT_MEMBERS:
            del result[group.key]
            return result

        split = result[group.key]
        split.pop(cut_id, None)
        if set(split) != set(remaining) or sum(split.values()) != 100:
            result[group.key] = even_split(remaining)
        return result

    def reconcile(
        self,
        species: Species | str,
        selections: Iterable[SelectionInput] | None,
        allocations: AllocationMap | None,
    ) -> AllocationMap:
        """Bring a stored allocation map in line with the current selections.

        Parts that no longer hold exactly two members are dropped; stale
        or inconsistent entries are replaced by an even split. Entries
        that already match their two members and total 100 are kept.
        """
        chosen = coerce_selections(selections)
        stored = allocations or {}
        result: AllocationMap = {}
        for part_key in self._catalog.split_parts(species):
            members = self.split_members(species, part_key, chosen)
            if len(members) != MAX_SPLIT_MEMBERS:
                continue
            split = stored.get(part_key, {})
            if set(split) == set(members) and sum(split.values()) == 100:
                result[part_key] = {cid: int(split[cid]) for cid in members}
            else:
                result[part_key] = even_split(members)
        return result

    # -- Checks ---------------------------------------------------------------

    def check_complete(
        self,
        species: Species | str,
        selections: Iterable[SelectionInput] | None,
        allocations: AllocationMap | None,
    ) -> list[AllocationIssue]:
        """Allow-split parts with two or more members whose total is not 100."""
        chosen = coerce_selections(selections)
        stored = allocations or {}
        issues: list[AllocationIssue] = []
        for part_key, part in self._catalog.split_parts(species).items():
            members = self.split_members(species, part_key, chosen)
            if len(members) < MAX_SPLIT_MEMBERS:
                continue
            split = stored.get(part_key, {})
            total = float(sum(split.get(cid, 0) for cid in members))
            if abs(total - 100) > self._config.tolerance_pct:
                issues.append(AllocationIssue(
                    body_part=part_key,
                    body_part_name=part.display_name,
                    total=total,
                    message=(
                        f"{part.display_name} split allocation must total 100% "
                        f"(currently {total:.0f}%)"
                    ),
                ))
        return issues

    def snap(self, percentage: float) -> int:
        """Nearest step (half steps round up), clamped to 0..100."""
        if not math.isfinite(percentage):
            raise ValueError(f"Percentage must be a finite number, got {percentage!r}.")
        step = self._config.step_pct
        clamped = min(max(float(percentage), 0.0), 100.0)
        snapped = int((clamped + step / 2) // step) * step
        return min(snapped, 100)
