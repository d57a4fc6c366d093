"""Per-cut availability and "what would this disable" previews.

Shares the disablement rule with the validation engine
(``find_disabled_reason``) so the two can never disagree.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.catalog.models import CutChoice
from src.catalog.registry import SchemaCatalog, get_schema_catalog
from src.engine.models import (
    AddCheck,
    CutAvailability,
    SelectionInput,
    WouldDisableEntry,
    coerce_selections,
    selected_ids,
)
from src.engine.validation import find_disabled_reason
from src.models.common import Species


class AvailabilityResolver:
    """Answers availability questions for the presentation layer."""

    def __init__(self, catalog: SchemaCatalog | None = None) -> None:
        self._catalog = catalog or get_schema_catalog()

    def get_cut_availability(
        self,
        species: Species | str,
        selections: Iterable[SelectionInput] | None,
    ) -> list[CutAvailability]:
        """Availability of every cut in the species catalog.

        Selected cuts always report available.
        """
        chosen = selected_ids(coerce_selections(selections))
        result: list[CutAvailability] = []
        for cut in self._catalog.all_cuts(species):
            disabled = find_disabled_reason(self._catalog, species, cut.id, chosen)
            result.append(CutAvailability(
                cut_id=cut.id,
                cut_name=cut.name,
                available=disabled is None,
                reason=disabled[0] if disabled else None,
                disabled_by=disabled[1] if disabled else None,
            ))
        return result

    def get_would_disable(
        self, species: Species | str, cut_id: str,
    ) -> list[WouldDisableEntry]:
        """Cuts that selecting ``cut_id`` on its own would disable.

        Hard exclusions first, then the other members of its
        exclusive-choice group. Each cut is listed once.
        """
        cut = self._catalog.get_cut(species, cut_id)
        if cut is None:
            return []

        entries: dict[str, WouldDisableEntry] = {}
        for excluded_id in cut.excludes:
            excluded = self._catalog.get_cut(species, excluded_id)
            if excluded is not None and excluded_id not in entries:
                entries[excluded_id] = WouldDisableEntry(
                    cut_id=excluded.id,
                    cut_name=excluded.name,
                    reason=f'Cannot be selected with "{cut.name}"',
                )

        group = self._catalog.get_exclusive_group(species, cut_id)
        if group is not None:
            for member_id in group.member_ids:
                if member_id == cut_id or member_id in entries:
                    continue
                member = self._catalog.get_cut(species, member_id)
                if member is not None:
                    entries[member_id] = WouldDisableEntry(
                        cut_id=member.id,
                        cut_name=member.name,
                        reason=f'Only one option from "{group.display_name}" allowed',
                    )
        return list(entries.values())

    def can_add_cut(
        self,
        species: Species | str,
        cut_id: str,
        current_selections: Iterable[SelectionInput] | None,
    ) -> AddCheck:
        """Whether ``cut_id`` can join the current selections."""
        if self._catalog.get_cut(species, cut_id) is None:
            return AddCheck(allowed=False, reason="Cut not found")
        chosen = selected_ids(coerce_selections(current_selections))
        disabled = find_disabled_reason(self._catalog, species, cut_id, chosen)
        if disabled is None:
            return AddCheck(allowed=True)
        return AddCheck(allowed=False, reason=disabled[0])

    def get_required_cuts(self, species: Species | str, cut_id: str) -> list[CutChoice]:
        """Catalog entries that must be selected together with ``cut_id``."""
        cut = self._catalog.get_cut(species, cut_id)
        if cut is None:
            return []
        required: list[CutChoice] = []
        for required_id in cut.requires:
            required_cut = self._catalog.get_cut(species, required_id)
            if required_cut is not None:
                required.append(required_cut)
        return required
