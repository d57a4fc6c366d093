"""Tests for CatalogFilter: seller overlay and bottom-up pruning."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.catalog.models import CutStyle
from src.catalog.registry import SchemaCatalog
from src.models.common import Species
from src.seller.filter import NOT_OFFERED_REASON, CatalogFilter
from src.seller.models import CustomCutDefinition, SellerCatalogConfig


# ===================================================================
# Fixtures
# ===================================================================


@pytest.fixture
def catalog_filter(catalog: SchemaCatalog) -> CatalogFilter:
    return CatalogFilter(catalog)


_PICNIC = ["picnic_roast", "picnic_ground"]
_BOSTON_BUTT = [
    "boston_butt_whole", "boston_butt_roasts", "boston_butt_steaks", "boston_butt_ground",
]


# ===================================================================
# apply_config
# ===================================================================


class TestApplyConfig:
    """Filtered catalog views."""

    def test_no_config_keeps_everything(
        self, catalog_filter: CatalogFilter, catalog: SchemaCatalog,
    ) -> None:
        filtered = catalog_filter.apply_config("beef", None)
        assert filtered is not None
        assert list(filtered.body_parts) == list(catalog.get_species("beef").body_parts)
        round_part = filtered.body_parts["round"]
        assert set(round_part.sub_parts) == {
            "top_round", "bottom_round", "eye_round", "sirloin_tip",
        }
        assert all(not c.disabled for c in filtered.body_parts["rib"].choices)

    def test_disabled_cut_marked_not_removed(
        self, catalog_filter: CatalogFilter,
    ) -> None:
        config = SellerCatalogConfig(disabled_cuts=["bacon"])
        filtered = catalog_filter.apply_config("pork", config)
        assert filtered is not None
        choices = {c.id: c for c in filtered.body_parts["belly"].choices}
        assert choices["bacon"].disabled
        assert choices["bacon"].disabled_reason == NOT_OFFERED_REASON
        assert not choices["fresh_belly"].disabled
        assert choices["fresh_belly"].disabled_reason is None

    def test_fully_disabled_sub_part_pruned(
        self, catalog_filter: CatalogFilter,
    ) -> None:
        config = SellerCatalogConfig(disabled_cuts=_PICNIC)
        filtered = catalog_filter.apply_config("pork", config)
        assert filtered is not None
        shoulder = filtered.body_parts["shoulder"]
        assert list(shoulder.sub_parts) == ["boston_butt"]

    def test_parent_pruned_when_all_sub_parts_empty(
        self, catalog_filter: CatalogFilter,
    ) -> None:
        config = SellerCatalogConfig(disabled_cuts=_PICNIC + _BOSTON_BUTT)
        filtered = catalog_filter.apply_config("pork", config)
        assert filtered is not None
        assert "shoulder" not in filtered.body_parts
        assert "loin" in filtered.body_parts

    def test_top_level_part_pruned(self, catalog_filter: CatalogFilter) -> None:
        config = SellerCatalogConfig(disabled_cuts=["flank_steak", "flank_ground"])
        filtered = catalog_filter.apply_config("beef", config)
        assert filtered is not None
        assert "flank" not in filtered.body_parts

    def test_species_not_offered(self, catalog_filter: CatalogFilter) -> None:
        config = SellerCatalogConfig(enabled_species=[Species.BEEF])
        assert catalog_filter.apply_config("pork", config) is None
        assert catalog_filter.apply_config("beef", config) is not None

    def test_unknown_species(self, catalog_filter: CatalogFilter) -> None:
        assert catalog_filter.apply_config("chicken", None) is None

    def test_ground_options_carried(self, catalog_filter: CatalogFilter) -> None:
        filtered = catalog_filter.apply_config("pork", SellerCatalogConfig())
        assert filtered is not None
        assert "make_sausage" in filtered.ground_options

    def test_base_catalog_unchanged(
        self, catalog_filter: CatalogFilter, catalog: SchemaCatalog,
    ) -> None:
        catalog_filter.apply_config("pork", SellerCatalogConfig(disabled_cuts=_PICNIC))
        shoulder = catalog.get_species("pork").body_parts["shoulder"]
        assert "picnic_shoulder" in shoulder.sub_parts


class TestEnabledCutIds:
    def test_excludes_disabled(self, catalog_filter: CatalogFilter) -> None:
        config = SellerCatalogConfig(disabled_cuts=["bacon", "picnic_roast"])
        ids = catalog_filter.get_enabled_cut_ids("pork", config)
        assert "bacon" not in ids
        assert "picnic_roast" not in ids
        assert "picnic_ground" in ids

    def test_all_when_no_config(
        self, catalog_filter: CatalogFilter, catalog: SchemaCatalog,
    ) -> None:
        ids = catalog_filter.get_enabled_cut_ids("goat", None)
        assert ids == [c.id for c in catalog.all_cuts("goat")]

    def test_species_not_offered(self, catalog_filter: CatalogFilter) -> None:
        config = SellerCatalogConfig(enabled_species=[])
        assert catalog_filter.get_enabled_cut_ids("beef", config) == []

    def test_is_cut_enabled(self) -> None:
        config = SellerCatalogConfig(disabled_cuts=["bacon"])
        assert not CatalogFilter.is_cut_enabled("bacon", config)
        assert CatalogFilter.is_cut_enabled("fresh_belly", config)
        assert CatalogFilter.is_cut_enabled("bacon", None)


# ===================================================================
# Seller metadata
# ===================================================================


class TestSellerMetadata:
    def test_producer_notes(self) -> None:
        assert CatalogFilter.get_producer_notes(None) is None
        assert CatalogFilter.get_producer_notes(SellerCatalogConfig(producer_notes="")) is None
        config = SellerCatalogConfig(producer_notes="Call before drop-off")
        assert CatalogFilter.get_producer_notes(config) == "Call before drop-off"

    def test_weight_requirements(self) -> None:
        bounds = CatalogFilter.get_weight_requirements(
            SellerCatalogConfig(min_hanging_weight=300, max_hanging_weight=900),
        )
        assert (bounds.min, bounds.max) == (300, 900)
        empty = CatalogFilter.get_weight_requirements(None)
        assert (empty.min, empty.max) == (None, None)

    def test_min_above_max_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SellerCatalogConfig(min_hanging_weight=900, max_hanging_weight=300)

    def test_custom_cuts(self) -> None:
        config = SellerCatalogConfig(custom_cuts=[
            CustomCutDefinition(
                id="beef_jerky", name="Jerky", body_part="round",
                style="meat", additional_fee=True,
            ),
        ])
        (cut,) = CatalogFilter.get_custom_cuts(config)
        assert cut.id == "beef_jerky"
        assert cut.additional_fee
        assert CatalogFilter.get_custom_cuts(None) == []

    def test_custom_cut_free_text_style(self) -> None:
        config = SellerCatalogConfig(custom_cuts=[
            CustomCutDefinition(
                id="snack_sticks", name="Snack Sticks", body_part="round",
                style="snack stick",
            ),
            CustomCutDefinition(
                id="house_steak", name="House Steak", body_part="round", style="steak",
            ),
        ])
        sticks, steak = CatalogFilter.get_custom_cuts(config)
        assert sticks.style == "snack stick"
        assert steak.style is CutStyle.STEAK


class TestHangingWeight:
    @pytest.fixture
    def config(self) -> SellerCatalogConfig:
        return SellerCatalogConfig(min_hanging_weight=300, max_hanging_weight=900)

    def test_within_bounds(
        self, catalog_filter: CatalogFilter, config: SellerCatalogConfig,
    ) -> None:
        assert catalog_filter.check_hanging_weight(500, config) is None

    def test_below_minimum(
        self, catalog_filter: CatalogFilter, config: SellerCatalogConfig,
    ) -> None:
        message = catalog_filter.check_hanging_weight(250, config)
        assert message == (
            "Hanging weight 250 lbs is below this processor's minimum of 300 lbs."
        )

    def test_above_maximum(
        self, catalog_filter: CatalogFilter, config: SellerCatalogConfig,
    ) -> None:
        message = catalog_filter.check_hanging_weight(950.5, config)
        assert message is not None
        assert "above this processor's maximum of 900 lbs" in message

    def test_no_weight_or_no_config(
        self, catalog_filter: CatalogFilter, config: SellerCatalogConfig,
    ) -> None:
        assert catalog_filter.check_hanging_weight(None, config) is None
        assert catalog_filter.check_hanging_weight(100, None) is None
