"""Cut sheet validation engine.

Pure function of (species, selections): no state is kept between calls.

Rules, checked per selected cut in selection order:

* exclusiveChoice -- at most one pick per exclusive-choice group (error)
* excludes        -- hard conflict, both cannot exist (error)
* requires        -- must be selected together (error)
* conflictsWith   -- soft conflict, both shrink (warning)
* reducesYield    -- cut comes from the same area as another (warning)

Unordered pairs (excludes, exclusiveChoice, conflictsWith) are reported
once, keyed by their sorted id pair. Unknown species fail closed with an
empty invalid result; unknown cut ids are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.catalog.models import CutChoice
from src.catalog.registry import SchemaCatalog, get_schema_catalog
from src.engine.models import (
    DisabledOption,
    ErrorType,
    SelectionInput,
    ValidationError,
    ValidationResult,
    ValidationWarning,
    WarningType,
    coerce_selections,
)
from src.models.common import Species

logger = logging.getLogger(__name__)


def pair_key(a: str, b: str) -> tuple[str, str]:
    """Canonical key for an unordered pair of cut ids."""
    return (a, b) if a <= b else (b, a)


def find_disabled_reason(
    catalog: SchemaCatalog,
    species: Species | str,
    cut_id: str,
    selected: Iterable[str],
) -> tuple[str, str] | None:
    """Why an unselected cut cannot be picked: ``(reason, disabled_by)``.

    Returns None for selected cuts, unknown cuts, and cuts nothing blocks.
    """
    selected_list = list(selected)
    if cut_id in selected_list:
        return None
    cut = catalog.get_cut(species, cut_id)
    if cut is None:
        return None

    for sel_id in selected_list:
        sel_cut = catalog.get_cut(species, sel_id)
        if sel_cut is not None and cut_id in sel_cut.excludes:
            return f'Disabled because "{sel_cut.name}" is selected', sel_id

    group = catalog.get_exclusive_group(species, cut_id)
    if group is not None:
        for member_id in group.member_ids:
            if member_id != cut_id and member_id in selected_list:
                return (
                    f'Only one option from "{group.display_name}" can be selected',
                    member_id,
                )
    return None


class ValidationEngine:
    """Validates selection sets against a ``SchemaCatalog``."""

    def __init__(self, catalog: SchemaCatalog | None = None) -> None:
        self._catalog = catalog or get_schema_catalog()

    @property
    def catalog(self) -> SchemaCatalog:
        return self._catalog

    def validate(
        self,
        species: Species | str,
        selections: Iterable[SelectionInput] | None,
    ) -> ValidationResult:
        """Validate a selection set and list the options it disables."""
        if not self._catalog.has_species(species):
            logger.debug("Validation requested for unknown species %r", species)
            return ValidationResult(is_valid=False)

        cut_map = self._catalog.cut_map(species)
        ordered_ids = [s.cut_id for s in coerce_selections(selections)]
        selected = set(ordered_ids)

        errors: list[ValidationError] = []
        warnings: list[ValidationWarning] = []
        seen_pairs: dict[str, set[tuple[str, str]]] = {
            ErrorType.EXCLUSIVE_CHOICE: set(),
            ErrorType.EXCLUDES: set(),
            WarningType.CONFLICTS_WITH: set(),
        }

        for cut_id in ordered_ids:
            cut = cut_map.get(cut_id)
            if cut is None:
                logger.debug("Skipping unknown %s cut id %r", species, cut_id)
                continue

            # 1. Exclusive choice within the owning group
            exclusive = self._check_exclusive_choice(species, cut, selected, cut_map)
            if exclusive is not None:
                key = pair_key(exclusive.cut_id, exclusive.conflicting_cut_id)
                if key not in seen_pairs[ErrorType.EXCLUSIVE_CHOICE]:
                    seen_pairs[ErrorType.EXCLUSIVE_CHOICE].add(key)
                    errors.append(exclusive)

            # 2. Hard exclusions
            for excluded_id in cut.excludes:
                excluded = cut_map.get(excluded_id)
                if excluded is None or excluded_id not in selected:
                    continue
                key = pair_key(cut.id, excluded_id)
                if key in seen_pairs[ErrorType.EXCLUDES]:
                    continue
                seen_pairs[ErrorType.EXCLUDES].add(key)
                errors.append(ValidationError(
                    type=ErrorType.EXCLUDES,
                    cut_id=cut.id,
                    cut_name=cut.name,
                    conflicting_cut_id=excluded.id,
                    conflicting_cut_name=excluded.name,
                    message=(
                        f'Cannot select both "{cut.name}" and "{excluded.name}" - '
                        "they come from the same section of the animal."
                    ),
                ))

            # 3. Required pairs
            for required_id in cut.requires:
                required = cut_map.get(required_id)
                if required is None or required_id in selected:
                    continue
                errors.append(ValidationError(
                    type=ErrorType.REQUIRES,
                    cut_id=cut.id,
                    cut_name=cut.name,
                    conflicting_cut_id=required.id,
                    conflicting_cut_name=required.name,
                    message=(
                        f'"{cut.name}" requires "{required.name}" to also be selected '
                        "(they are separated from the same section)."
                    ),
                ))

            # 4. Soft conflicts
            for conflict_id in cut.conflicts_with:
                conflict = cut_map.get(conflict_id)
                if conflict is None or conflict_id not in selected:
                    continue
                key = pair_key(cut.id, conflict_id)
                if key in seen_pairs[WarningType.CONFLICTS_WITH]:
                    continue
                seen_pairs[WarningType.CONFLICTS_WITH].add(key)
                warnings.append(ValidationWarning(
                    type=WarningType.CONFLICTS_WITH,
                    cut_id=cut.id,
                    cut_name=cut.name,
                    affected_cut_id=conflict.id,
                    affected_cut_name=conflict.name,
                    message=(
                        f'Both "{cut.name}" and "{conflict.name}" selected - '
                        "this may reduce the amount of each you receive."
                    ),
                ))

            # 5. Yield reduction
            if cut.reduces_yield and cut.reduces_yield in selected:
                affected = cut_map.get(cut.reduces_yield)
                if affected is not None:
                    warnings.append(ValidationWarning(
                        type=WarningType.REDUCES_YIELD,
                        cut_id=cut.id,
                        cut_name=cut.name,
                        affected_cut_id=affected.id,
                        affected_cut_name=affected.name,
                        message=(
                            f'"{cut.name}" comes from the same area as '
                            f'"{affected.name}" and will reduce the yield.'
                        ),
                    ))

        disabled_options: list[DisabledOption] = []
        for cut in cut_map.values():
            disabled = find_disabled_reason(self._catalog, species, cut.id, ordered_ids)
            if disabled is not None:
                reason, disabled_by = disabled
                disabled_options.append(DisabledOption(
                    cut_id=cut.id,
                    cut_name=cut.name,
                    reason=reason,
                    disabled_by=disabled_by,
                ))

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            disabled_options=disabled_options,
        )

    def _check_exclusive_choice(
        self,
        species: Species | str,
        cut: CutChoice,
        selected: set[str],
        cut_map: dict[str, CutChoice],
    ) -> ValidationError | None:
        group = self._catalog.get_exclusive_group(species, cut.id)
        if group is None:
            return None
        others = [m for m in group.member_ids if m != cut.id and m in selected]
        if not others:
            return None
        other = cut_map[others[0]]
        return ValidationError(
            type=ErrorType.EXCLUSIVE_CHOICE,
            cut_id=cut.id,
            cut_name=cut.name,
            conflicting_cut_id=other.id,
            conflicting_cut_name=other.name,
            group_name=group.display_name,
            message=(
                f'Only one option can be selected from "{group.display_name}". '
                f'Choose either "{cut.name}" or "{other.name}".'
            ),
        )


def validate_cut_sheet(
    species: Species | str,
    selections: Iterable[SelectionInput] | None,
) -> ValidationResult:
    """Validate against the built-in catalog."""
    return ValidationEngine().validate(species, selections)
