"""FastAPI cut sheet endpoints.

GET  /v1/catalog/{species}                               — catalog tree
POST /v1/catalog/{species}/filtered                      — seller view of the catalog
POST /v1/cut-sheets/{species}/validate                   — errors, warnings, disabled options
POST /v1/cut-sheets/{species}/normalize                  — auto-fixed selections
POST /v1/cut-sheets/{species}/availability               — per-cut availability
GET  /v1/cut-sheets/{species}/cuts/{cut_id}/would-disable — selection preview
POST /v1/cut-sheets/{species}/review                     — finalisation verdict
POST /v1/cut-sheets/diff                                 — change diff between two states

Stateless: callers send the full selection on every request.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.catalog.models import SpeciesCatalog
from src.catalog.registry import SchemaCatalog, get_schema_catalog
from src.engine.availability import AvailabilityResolver
from src.engine.models import (
    AllocationMap,
    CutAvailability,
    NormalizationResult,
    Selection,
    ValidationResult,
    WouldDisableEntry,
)
from src.engine.normalizer import SelectionNormalizer
from src.engine.validation import ValidationEngine
from src.seller.filter import CatalogFilter
from src.seller.models import FilteredSpeciesCatalog, SellerCatalogConfig
from src.sheets.diff import ChangeDiff, generate_change_diff
from src.sheets.service import CutSheetReviewService, SheetReview

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["cut-sheets"])


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SelectionsRequest(BaseModel):
    selections: list[Selection] = Field(default_factory=list)


class ReviewRequest(BaseModel):
    selections: list[Selection] = Field(default_factory=list)
    allocations: AllocationMap = Field(default_factory=dict)
    seller_config: SellerCatalogConfig | None = None
    hanging_weight: float | None = Field(default=None, gt=0)


class DiffRequest(BaseModel):
    previous: dict[str, Any] | None = None
    new: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


def _require_species(catalog: SchemaCatalog, species: str) -> SpeciesCatalog:
    found = catalog.get_species(species)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Unknown species: {species}")
    return found


@router.get("/catalog/{species}", response_model=SpeciesCatalog)
async def get_catalog(
    species: str,
    catalog: SchemaCatalog = Depends(get_schema_catalog),
) -> SpeciesCatalog:
    """Full catalog tree for one species."""
    return _require_species(catalog, species)


@router.post("/catalog/{species}/filtered", response_model=FilteredSpeciesCatalog)
async def get_filtered_catalog(
    species: str,
    body: SellerCatalogConfig,
    catalog: SchemaCatalog = Depends(get_schema_catalog),
) -> FilteredSpeciesCatalog:
    """Catalog as a given seller offers it."""
    _require_species(catalog, species)
    filtered = CatalogFilter(catalog).apply_config(species, body)
    if filtered is None:
        raise HTTPException(
            status_code=404,
            detail=f"Species not offered by this processor: {species}",
        )
    return filtered


@router.post("/cut-sheets/{species}/validate", response_model=ValidationResult)
async def validate_selections(
    species: str,
    body: SelectionsRequest,
    catalog: SchemaCatalog = Depends(get_schema_catalog),
) -> ValidationResult:
    """Validate a selection set. Unknown species fail closed (200, invalid)."""
    return ValidationEngine(catalog).validate(species, body.selections)


@router.post("/cut-sheets/{species}/normalize", response_model=NormalizationResult)
async def normalize_selections(
    species: str,
    body: SelectionsRequest,
    catalog: SchemaCatalog = Depends(get_schema_catalog),
) -> NormalizationResult:
    """Add required partners and drop later conflicting picks."""
    result = SelectionNormalizer(catalog).normalize(species, body.selections)
    if result.changed:
        logger.info(
            "Normalized %s sheet: added=%s removed=%s",
            species, result.added, result.removed,
        )
    return result


@router.post(
    "/cut-sheets/{species}/availability",
    response_model=list[CutAvailability],
)
async def get_availability(
    species: str,
    body: SelectionsRequest,
    catalog: SchemaCatalog = Depends(get_schema_catalog),
) -> list[CutAvailability]:
    _require_species(catalog, species)
    return AvailabilityResolver(catalog).get_cut_availability(species, body.selections)


@router.get(
    "/cut-sheets/{species}/cuts/{cut_id}/would-disable",
    response_model=list[WouldDisableEntry],
)
async def get_would_disable(
    species: str,
    cut_id: str,
    catalog: SchemaCatalog = Depends(get_schema_catalog),
) -> list[WouldDisableEntry]:
    _require_species(catalog, species)
    if catalog.get_cut(species, cut_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown cut: {cut_id}")
    return AvailabilityResolver(catalog).get_would_disable(species, cut_id)


@router.post("/cut-sheets/{species}/review", response_model=SheetReview)
async def review_sheet(
    species: str,
    body: ReviewRequest,
    catalog: SchemaCatalog = Depends(get_schema_catalog),
) -> SheetReview:
    """Combined verdict: conflicts, allocation completeness, seller offer."""
    return CutSheetReviewService(catalog).review(
        species,
        body.selections,
        body.allocations,
        body.seller_config,
        hanging_weight=body.hanging_weight,
    )


@router.post("/cut-sheets/diff", response_model=list[ChangeDiff])
async def diff_states(body: DiffRequest) -> list[ChangeDiff]:
    return generate_change_diff(body.previous, body.new)
