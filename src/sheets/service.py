"""Cut sheet review orchestrator.

Combines the three blocking signal classes into one verdict:

1. catalog-conflict errors from ``ValidationEngine`` (warnings never block);
2. allocation-incomplete issues from ``AllocationSplitter``;
3. selected cuts the seller does not offer (``CatalogFilter``).
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field

from src.catalog.registry import SchemaCatalog, get_schema_catalog
from src.engine.allocation import AllocationConfig, AllocationSplitter
from src.engine.models import (
    AllocationIssue,
    AllocationMap,
    CamelModel,
    SelectionInput,
    ValidationResult,
    coerce_selections,
)
from src.engine.validation import ValidationEngine
from src.models.common import Species
from src.seller.filter import CatalogFilter
from src.seller.models import SellerCatalogConfig


class SheetReview(CamelModel):
    """Everything standing between a cut sheet and finalisation."""

    validation: ValidationResult
    allocation_issues: list[AllocationIssue] = Field(default_factory=list)
    not_offered: list[str] = Field(default_factory=list)
    species_offered: bool = True
    weight_message: str | None = None
    can_finalize: bool

    @property
    def allocation_incomplete(self) -> bool:
        return bool(self.allocation_issues)


class CutSheetReviewService:
    """Runs validation, allocation and seller checks for one sheet."""

    def __init__(
        self,
        catalog: SchemaCatalog | None = None,
        allocation_config: AllocationConfig | None = None,
    ) -> None:
        self._catalog = catalog or get_schema_catalog()
        self._engine = ValidationEngine(self._catalog)
        self._splitter = AllocationSplitter(self._catalog, allocation_config)
        self._filter = CatalogFilter(self._catalog)

    def review(
        self,
        species: Species | str,
        selections: Iterable[SelectionInput] | None,
        allocations: AllocationMap | None = None,
        seller_config: SellerCatalogConfig | None = None,
        *,
        hanging_weight: float | None = None,
    ) -> SheetReview:
        chosen = coerce_selections(selections)
        validation = self._engine.validate(species, chosen)
        issues = self._splitter.check_complete(species, chosen, allocations)

        species_offered = True
        not_offered: list[str] = []
        if seller_config is not None and self._catalog.has_species(species):
            species_offered = (
                self._filter.apply_config(species, seller_config) is not None
            )
            not_offered = [
                s.cut_id for s in chosen
                if self._catalog.get_cut(species, s.cut_id) is not None
                and not self._filter.is_cut_enabled(s.cut_id, seller_config)
            ]

        weight_message = self._filter.check_hanging_weight(hanging_weight, seller_config)

        return SheetReview(
            validation=validation,
            allocation_issues=issues,
            not_offered=not_offered,
            species_offered=species_offered,
            weight_message=weight_message,
            can_finalize=(
                validation.is_valid
                and not issues
                and not not_offered
                and species_offered
            ),
        )
