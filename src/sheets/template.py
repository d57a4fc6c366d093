"""Reusable cut sheet templates.

A template bundles selections, their parameter overrides and the split
allocation. The catalog may change between save and load, so loading
always re-checks the bundle against the current catalog: ids that no
longer exist are dropped, overrides outside the current option sets are
dropped, the selection is normalised and the allocation reconciled.
"""

from __future__ import annotations

import logging

from pydantic import Field

from src.catalog.registry import SchemaCatalog, get_schema_catalog
from src.engine.allocation import AllocationSplitter
from src.engine.models import AllocationMap, CamelModel, Selection
from src.engine.normalizer import SelectionNormalizer
from src.models.common import (
    Species,
    UTCTimestamp,
    UUIDv7,
    new_uuid7,
    utc_now,
)

logger = logging.getLogger(__name__)


class CutSheetTemplate(CamelModel):
    """Serialisable selection + parameter + allocation bundle."""

    template_id: UUIDv7 = Field(default_factory=new_uuid7)
    name: str = Field(min_length=1, max_length=200)
    species: Species
    selections: list[Selection] = Field(default_factory=list)
    allocations: AllocationMap = Field(default_factory=dict)
    catalog_version: str | None = None
    created_at: UTCTimestamp = Field(default_factory=utc_now)


class RehydratedSheet(CamelModel):
    """A template brought up to date with the current catalog."""

    species: Species
    selections: list[Selection]
    allocations: AllocationMap
    dropped_cut_ids: list[str] = Field(default_factory=list)
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)


class TemplateLoader:
    """Creates templates from live sheets and rehydrates them later."""

    def __init__(self, catalog: SchemaCatalog | None = None) -> None:
        self._catalog = catalog or get_schema_catalog()
        self._normalizer = SelectionNormalizer(self._catalog)
        self._splitter = AllocationSplitter(self._catalog)

    def create(
        self,
        name: str,
        species: Species,
        selections: list[Selection],
        allocations: AllocationMap | None = None,
    ) -> CutSheetTemplate:
        return CutSheetTemplate(
            name=name,
            species=species,
            selections=selections,
            allocations=allocations or {},
            catalog_version=self._catalog.version,
        )

    def rehydrate(self, template: CutSheetTemplate) -> RehydratedSheet:
        species = template.species
        kept: list[Selection] = []
        dropped: list[str] = []
        messages: list[str] = []

        for selection in template.selections:
            cut = self._catalog.get_cut(species, selection.cut_id)
            if cut is None:
                dropped.append(selection.cut_id)
                messages.append(
                    f'"{selection.cut_id}" is no longer offered and was removed'
                )
                continue
            overrides = cut.valid_overrides(selection.parameters)
            if overrides != selection.parameters:
                messages.append(f'Reset options for "{cut.name}" that are no longer available')
            kept.append(Selection(cut_id=cut.id, parameters=overrides))

        normalized = self._normalizer.normalize(species, kept)
        allocations = self._splitter.reconcile(
            species, normalized.selections, template.allocations,
        )
        if dropped or normalized.changed:
            logger.info(
                "Template %s rehydrated with changes: dropped=%s added=%s removed=%s",
                template.template_id, dropped, normalized.added, normalized.removed,
            )

        return RehydratedSheet(
            species=species,
            selections=normalized.selections,
            allocations=allocations,
            dropped_cut_ids=dropped,
            added=normalized.added,
            removed=normalized.removed,
            messages=messages + normalized.messages,
        )
