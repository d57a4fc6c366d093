"""Tests for cut sheet templates and their rehydration."""

from __future__ import annotations

from datetime import timezone

import pytest
from pydantic import ValidationError

from src.catalog.registry import SchemaCatalog
from src.engine.models import Selection, selected_ids
from src.models.common import Species
from src.sheets.template import CutSheetTemplate, TemplateLoader


@pytest.fixture
def loader(catalog: SchemaCatalog) -> TemplateLoader:
    return TemplateLoader(catalog)


class TestCreate:
    def test_stamps_catalog_version(self, loader: TemplateLoader) -> None:
        template = loader.create("Family half", Species.BEEF, [Selection(cut_id="ribeye")])
        assert template.catalog_version == "1.0"
        assert template.template_id.version == 7
        assert template.created_at.tzinfo == timezone.utc

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError):
            CutSheetTemplate(name="", species=Species.BEEF)

    def test_json_round_trip_uses_camel_case(self, loader: TemplateLoader) -> None:
        template = loader.create(
            "Ribs", Species.BEEF,
            [Selection(cut_id="ribeye"), Selection(cut_id="primerib")],
            {"rib": {"ribeye": 75, "primerib": 25}},
        )
        payload = template.model_dump_json(by_alias=True)
        assert '"cutId"' in payload
        restored = CutSheetTemplate.model_validate_json(payload)
        assert restored.model_dump() == template.model_dump()


class TestRehydrate:
    """Bringing a stored template up to date with the catalog."""

    def test_clean_template_unchanged(self, loader: TemplateLoader) -> None:
        template = loader.create(
            "Ribs", Species.BEEF,
            [Selection(cut_id="ribeye", parameters={"thickness": 1.5}),
             Selection(cut_id="primerib")],
            {"rib": {"ribeye": 75, "primerib": 25}},
        )
        sheet = loader.rehydrate(template)
        assert selected_ids(sheet.selections) == ["ribeye", "primerib"]
        assert sheet.selections[0].parameters == {"thickness": 1.5}
        assert sheet.allocations == {"rib": {"ribeye": 75, "primerib": 25}}
        assert sheet.messages == []

    def test_unknown_cut_dropped(self, loader: TemplateLoader) -> None:
        template = CutSheetTemplate(
            name="Old", species=Species.PORK,
            selections=[Selection(cut_id="smoked_jowl"), Selection(cut_id="bacon")],
        )
        sheet = loader.rehydrate(template)
        assert sheet.dropped_cut_ids == ["smoked_jowl"]
        assert selected_ids(sheet.selections) == ["bacon"]
        assert sheet.messages[0] == '"smoked_jowl" is no longer offered and was removed'

    def test_invalid_overrides_dropped(self, loader: TemplateLoader) -> None:
        template = CutSheetTemplate(
            name="Thick", species=Species.BEEF,
            selections=[Selection(cut_id="ribeye", parameters={"thickness": 3, "bone_in": True})],
        )
        sheet = loader.rehydrate(template)
        assert sheet.selections[0].parameters == {"bone_in": True}

    def test_selection_normalized(self, loader: TemplateLoader) -> None:
        template = CutSheetTemplate(
            name="Mixed", species=Species.BEEF,
            selections=[Selection(cut_id="tbone"), Selection(cut_id="filet")],
        )
        sheet = loader.rehydrate(template)
        assert selected_ids(sheet.selections) == ["tbone"]
        assert sheet.removed == ["filet"]

    def test_allocation_reconciled(self, loader: TemplateLoader) -> None:
        template = CutSheetTemplate(
            name="Stale", species=Species.BEEF,
            selections=[Selection(cut_id="ribeye"), Selection(cut_id="primerib")],
            allocations={
                "rib": {"ribeye": 75, "rib_ground": 25},
                "chuck": {"chuck_roast": 50, "chuck_steak": 50},
            },
        )
        sheet = loader.rehydrate(template)
        assert sheet.allocations == {"rib": {"ribeye": 50, "primerib": 50}}

    def test_rehydrate_is_idempotent(self, loader: TemplateLoader) -> None:
        template = CutSheetTemplate(
            name="Messy", species=Species.BEEF,
            selections=[
                Selection(cut_id="gone"),
                Selection(cut_id="nystrip"),
                Selection(cut_id="tbone"),
                Selection(cut_id="ribeye"),
                Selection(cut_id="primerib"),
            ],
            allocations={"rib": {"ribeye": 10}},
        )
        first = loader.rehydrate(template)
        again = loader.rehydrate(template.model_copy(update={
            "selections": first.selections,
            "allocations": first.allocations,
        }))
        assert [s.model_dump() for s in again.selections] == [
            s.model_dump() for s in first.selections
        ]
        assert again.allocations == first.allocations
        assert again.messages == []
