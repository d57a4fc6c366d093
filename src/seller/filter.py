"""Seller overlay on the catalog.

Marks the cuts a processor does not offer as disabled and prunes body
parts with nothing left to offer, bottom-up, so that a parent survives
as long as any nested sub-part still has an enabled cut.
"""

from __future__ import annotations

import logging

from src.catalog.models import BodyPart, CutChoice
from src.catalog.registry import SchemaCatalog, get_schema_catalog
from src.catalog.tree import fold_body_parts
from src.models.common import Species, coerce_species
from src.seller.models import (
    CustomCutChoice,
    FilteredBodyPart,
    FilteredCutChoice,
    FilteredSpeciesCatalog,
    SellerCatalogConfig,
    WeightRequirements,
)

logger = logging.getLogger(__name__)

NOT_OFFERED_REASON = "This option is not offered by this processor"


def _filtered_cut(cut: CutChoice, disabled: bool) -> FilteredCutChoice:
    return FilteredCutChoice.model_validate({
        **cut.model_dump(),
        "disabled": disabled,
        "disabled_reason": NOT_OFFERED_REASON if disabled else None,
    })


def _filtered_part(
    part: BodyPart,
    choices: list[FilteredCutChoice],
    sub_parts: dict[str, FilteredBodyPart],
) -> FilteredBodyPart:
    return FilteredBodyPart(
        display_name=part.display_name,
        description=part.description,
        grouping=part.grouping,
        conflict_group=part.conflict_group,
        sub_parts=sub_parts,
        choices=choices,
    )


class CatalogFilter:
    """Produces seller-specific views of the catalog."""

    def __init__(self, catalog: SchemaCatalog | None = None) -> None:
        self._catalog = catalog or get_schema_catalog()

    def apply_config(
        self,
        species: Species | str,
        config: SellerCatalogConfig | None,
    ) -> FilteredSpeciesCatalog | None:
        """Filtered catalog for ``species``.

        ``None`` means the species is unknown or the seller does not offer
        it at all, which is different from a catalog with no enabled cuts.
        """
        resolved = coerce_species(species)
        base = self._catalog.get_species(resolved)
        if resolved is None or base is None:
            return None

        if config is None:
            body_parts = fold_body_parts(
                base.body_parts,
                lambda _key, part, children: _filtered_part(
                    part, [_filtered_cut(c, False) for c in part.choices], children,
                ),
            )
        else:
            if resolved not in config.enabled_species:
                logger.debug("Seller does not offer %s", resolved)
                return None
            disabled = set(config.disabled_cuts)

            def _prune(
                key: str, part: BodyPart, children: dict[str, FilteredBodyPart],
            ) -> FilteredBodyPart | None:
                filtered = _filtered_part(
                    part,
                    [_filtered_cut(c, c.id in disabled) for c in part.choices],
                    children,
                )
                if not filtered.has_enabled_cut():
                    logger.debug("Pruning %s body part %r: nothing offered", resolved, key)
                    return None
                return filtered

            body_parts = fold_body_parts(base.body_parts, _prune)

        return FilteredSpeciesCatalog(
            species=base.species,
            display_name=base.display_name,
            note=base.note,
            body_parts=body_parts,
            ground_options=base.ground_options,
        )

    def get_enabled_cut_ids(
        self,
        species: Species | str,
        config: SellerCatalogConfig | None,
    ) -> list[str]:
        filtered = self.apply_config(species, config)
        if filtered is None:
            return []
        cut_ids: list[str] = []

        def _collect(parts: dict[str, FilteredBodyPart]) -> None:
            for part in parts.values():
                cut_ids.extend(c.id for c in part.choices if not c.disabled)
                _collect(part.sub_parts)

        _collect(filtered.body_parts)
        return cut_ids

    @staticmethod
    def is_cut_enabled(cut_id: str, config: SellerCatalogConfig | None) -> bool:
        if config is None:
            return True
        return cut_id not in config.disabled_cuts

    @staticmethod
    def get_producer_notes(config: SellerCatalogConfig | None) -> str | None:
        if config is None or not config.producer_notes:
            return None
        return config.producer_notes

    @staticmethod
    def get_weight_requirements(config: SellerCatalogConfig | None) -> WeightRequirements:
        if config is None:
            return WeightRequirements()
        return WeightRequirements(
            min=config.min_hanging_weight,
            max=config.max_hanging_weight,
        )

    @staticmethod
    def get_custom_cuts(config: SellerCatalogConfig | None) -> list[CustomCutChoice]:
        """Seller-declared extra cuts in catalog shape."""
        if config is None:
            return []
        return [
            CustomCutChoice(
                id=custom.id,
                name=custom.name,
                style=custom.style,
                additional_fee=custom.additional_fee,
                note=custom.note,
            )
            for custom in config.custom_cuts
        ]

    def check_hanging_weight(
        self,
        weight: float | None,
        config: SellerCatalogConfig | None,
    ) -> str | None:
        """Display message when ``weight`` falls outside the seller's bounds."""
        if weight is None:
            return None
        bounds = self.get_weight_requirements(config)
        if bounds.min is not None and weight < bounds.min:
            return (
                f"Hanging weight {weight:g} lbs is below this processor's minimum "
                f"of {bounds.min:g} lbs."
            )
        if bounds.max is not None and weight > bounds.max:
            return (
                f"Hanging weight {weight:g} lbs is above this processor's maximum "
                f"of {bounds.max:g} lbs."
            )
        return None
