"""Tests for ValidationEngine: rule checks, dedupe, and disabled options."""

from __future__ import annotations

import pytest

from src.catalog.registry import SchemaCatalog
from src.engine.models import ErrorType, Selection, WarningType
from src.engine.validation import (
    ValidationEngine,
    find_disabled_reason,
    pair_key,
    validate_cut_sheet,
)


# ===================================================================
# Fixtures
# ===================================================================


@pytest.fixture
def engine(catalog: SchemaCatalog) -> ValidationEngine:
    return ValidationEngine(catalog)


# ===================================================================
# Basics
# ===================================================================


class TestPairKey:
    def test_order_independent(self) -> None:
        assert pair_key("tbone", "filet") == pair_key("filet", "tbone")
        assert pair_key("a", "b") == ("a", "b")


class TestEmptyAndUnknown:
    """Edge inputs."""

    @pytest.mark.parametrize("species", ["beef", "pork", "lamb", "goat"])
    def test_empty_selection_is_valid(
        self, engine: ValidationEngine, species: str,
    ) -> None:
        result = engine.validate(species, [])
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []
        assert result.disabled_options == []

    def test_unknown_species_fails_closed(self, engine: ValidationEngine) -> None:
        result = engine.validate("chicken", ["tbone"])
        assert not result.is_valid
        assert result.errors == []
        assert result.disabled_options == []

    def test_unknown_cut_ids_ignored(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["not_a_cut", "flank_steak"])
        assert result.is_valid

    def test_none_selection(self, engine: ValidationEngine) -> None:
        assert engine.validate("beef", None).is_valid

    def test_malformed_selection_skipped(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", [{"foo": 1}, 7, "tbone"])
        assert result.is_valid
        assert "nystrip" in {d.cut_id for d in result.disabled_options}

    def test_accepts_mixed_input_shapes(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", [
            Selection(cut_id="tbone"),
            {"cutId": "nystrip"},
            "filet",
        ])
        assert not result.is_valid
        assert len(result.errors_of_type(ErrorType.EXCLUDES)) == 2


# ===================================================================
# Hard errors
# ===================================================================


class TestExcludes:
    """excludes: both may not coexist."""

    def test_tbone_with_strip_and_filet(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["tbone", "nystrip", "filet"])
        assert not result.is_valid
        excludes = result.errors_of_type(ErrorType.EXCLUDES)
        pairs = {pair_key(e.cut_id, e.conflicting_cut_id) for e in excludes}
        assert pairs == {pair_key("tbone", "nystrip"), pair_key("tbone", "filet")}
        assert result.errors_of_type(ErrorType.REQUIRES) == []

    def test_pair_reported_once(self, engine: ValidationEngine) -> None:
        result = engine.validate("pork", ["bacon", "fresh_belly"])
        excludes = result.errors_of_type(ErrorType.EXCLUDES)
        assert len(excludes) == 1
        assert excludes[0].cut_id == "bacon"
        assert excludes[0].conflicting_cut_id == "fresh_belly"
        assert excludes[0].message == (
            'Cannot select both "Bacon (Cured/Smoked)" and "Fresh Pork Belly" - '
            "they come from the same section of the animal."
        )

    def test_tbone_then_strip(self, engine: ValidationEngine) -> None:
        alone = engine.validate("beef", ["tbone"])
        assert alone.is_valid
        assert alone.errors == []

        both = engine.validate("beef", ["tbone", "nystrip"])
        assert not both.is_valid
        (excludes,) = both.errors_of_type(ErrorType.EXCLUDES)
        assert pair_key(excludes.cut_id, excludes.conflicting_cut_id) == (
            pair_key("tbone", "nystrip")
        )

    def test_bacon_swapped_for_fresh_belly(self, engine: ValidationEngine) -> None:
        assert engine.validate("pork", ["bacon"]).is_valid

        both = engine.validate("pork", ["bacon", "fresh_belly"])
        assert len(both.errors_of_type(ErrorType.EXCLUDES)) == 1

        swapped = engine.validate("pork", ["fresh_belly"])
        assert swapped.is_valid
        assert swapped.errors == []
        assert "bacon" in {d.cut_id for d in swapped.disabled_options}

    def test_one_sided_exclusion(self, engine: ValidationEngine) -> None:
        # whole_leg excludes leg_steaks, not the other way round
        result = engine.validate("lamb", ["leg_steaks", "whole_leg"])
        excludes = result.errors_of_type(ErrorType.EXCLUDES)
        assert len(excludes) == 1
        assert excludes[0].cut_id == "whole_leg"


class TestRequires:
    """requires: partner must also be selected."""

    def test_missing_partner(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["nystrip"])
        assert not result.is_valid
        (error,) = result.errors
        assert error.type == ErrorType.REQUIRES
        assert error.cut_id == "nystrip"
        assert error.conflicting_cut_id == "filet"
        assert error.message == (
            '"NY Strip Steaks" requires "Filet Mignon / Tenderloin" to also be '
            "selected (they are separated from the same section)."
        )

    def test_partner_present(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["nystrip", "filet"])
        assert result.is_valid


class TestExclusiveChoice:
    """exclusiveChoice: one pick per group."""

    def test_two_from_same_group(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["whole_brisket", "corned_beef"])
        assert not result.is_valid
        (error,) = result.errors_of_type(ErrorType.EXCLUSIVE_CHOICE)
        assert error.group_name == "Brisket"
        assert error.cut_id == "whole_brisket"
        assert error.conflicting_cut_id == "corned_beef"
        assert error.message == (
            'Only one option can be selected from "Brisket". '
            'Choose either "Whole Packer Brisket" or "Corned Beef (Cured)".'
        )

    def test_sibling_sub_parts_are_separate_groups(
        self, engine: ValidationEngine,
    ) -> None:
        result = engine.validate("beef", [
            "london_broil", "cube_steak", "eye_round_roast", "sirloin_tip_steak",
        ])
        assert result.is_valid

    def test_three_members_report_each_pair_once(
        self, engine: ValidationEngine,
    ) -> None:
        result = engine.validate(
            "beef", ["top_round_steak", "london_broil", "top_round_roast"],
        )
        errors = result.errors_of_type(ErrorType.EXCLUSIVE_CHOICE)
        keys = [pair_key(e.cut_id, e.conflicting_cut_id) for e in errors]
        assert len(keys) == len(set(keys))
        assert pair_key("top_round_steak", "london_broil") in keys


# ===================================================================
# Warnings
# ===================================================================


class TestWarnings:
    """Soft checks never affect validity."""

    def test_conflicts_with_reported_once(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["ribeye", "primerib"])
        assert result.is_valid
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.type == WarningType.CONFLICTS_WITH
        assert warning.cut_id == "ribeye"
        assert warning.affected_cut_id == "primerib"

    def test_reduces_yield(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["sirloin_steak", "tritip"])
        assert result.is_valid
        (warning,) = result.warnings_of_type(WarningType.REDUCES_YIELD)
        assert warning.cut_id == "tritip"
        assert warning.affected_cut_id == "sirloin_steak"
        assert warning.message == (
            '"Tri-Tip Roast" comes from the same area as "Sirloin Steaks" '
            "and will reduce the yield."
        )

    def test_reduces_yield_needs_target_selected(
        self, engine: ValidationEngine,
    ) -> None:
        result = engine.validate("beef", ["tritip"])
        assert result.warnings == []

    def test_body_part_yield_target_never_warns(
        self, engine: ValidationEngine,
    ) -> None:
        result = engine.validate("pork", ["spare_ribs", "bacon"])
        assert result.warnings == []


# ===================================================================
# Disabled options
# ===================================================================


class TestDisabledOptions:
    """Unselected cuts blocked by the current selection."""

    def test_excluded_cuts_disabled(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["tbone"])
        disabled = {d.cut_id: d for d in result.disabled_options}
        assert set(disabled) == {"nystrip", "filet", "porterhouse"}
        assert disabled["filet"].disabled_by == "tbone"
        assert disabled["filet"].reason == 'Disabled because "T-Bone Steaks" is selected'

    def test_group_siblings_disabled(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["london_broil"])
        disabled = {d.cut_id: d for d in result.disabled_options}
        assert set(disabled) == {
            "top_round_steak", "top_round_roast", "top_round_ground",
        }
        assert disabled["top_round_roast"].reason == (
            'Only one option from "Top Round" can be selected'
        )

    def test_selected_cuts_never_disabled(self, engine: ValidationEngine) -> None:
        result = engine.validate("beef", ["tbone", "nystrip"])
        assert "nystrip" not in {d.cut_id for d in result.disabled_options}

    def test_find_disabled_reason_prefers_exclusion(
        self, catalog: SchemaCatalog,
    ) -> None:
        assert find_disabled_reason(catalog, "pork", "bacon", ["fresh_belly"]) == (
            'Disabled because "Fresh Pork Belly" is selected', "fresh_belly",
        )
        assert find_disabled_reason(catalog, "pork", "bacon", []) is None
        assert find_disabled_reason(catalog, "pork", "ghost", ["bacon"]) is None


class TestConvenience:
    def test_validate_cut_sheet_uses_builtin_catalog(self) -> None:
        assert validate_cut_sheet("beef", ["ribeye"]).is_valid

    def test_result_serialises_camel_case(self, engine: ValidationEngine) -> None:
        data = engine.validate("beef", ["tbone"]).model_dump(by_alias=True)
        assert "isValid" in data
        assert "disabledOptions" in data
        assert "cutId" in data["disabledOptions"][0]
