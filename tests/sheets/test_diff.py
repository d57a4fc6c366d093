"""Tests for cut sheet change diffs."""

from __future__ import annotations

from src.sheets.diff import format_field_label, format_value, generate_change_diff


class TestFormatFieldLabel:
    def test_known_label(self) -> None:
        assert format_field_label("hanging_weight_lbs") == "Hanging Weight"

    def test_fallback_title_case(self) -> None:
        assert format_field_label("cure_style") == "Cure Style"


class TestFormatValue:
    def test_scalars(self) -> None:
        assert format_value(None) is None
        assert format_value(True) == "Yes"
        assert format_value(False) == "No"
        assert format_value(1.5) == "1.5"
        assert format_value(2) == "2"
        assert format_value("thick") == "thick"

    def test_lists(self) -> None:
        assert format_value([]) == "None"
        assert format_value(["a", "b"]) == "a, b"
        assert format_value([{"cut_name": "Ribeye"}, {"name": "Brisket"}]) == (
            "Ribeye, Brisket"
        )

    def test_dict(self) -> None:
        assert format_value({"thickness": 1, "note": None}) == "Thickness: 1"
        assert format_value({}) == "Empty"


class TestGenerateChangeDiff:
    def test_changed_fields_only(self) -> None:
        diffs = generate_change_diff(
            {"thickness": 1, "pieces_per_package": 2, "processor_notes": "a"},
            {"thickness": 1.5, "pieces_per_package": 2, "processor_notes": "a"},
        )
        (diff,) = diffs
        assert diff.field == "thickness"
        assert diff.label == "Thickness"
        assert (diff.before, diff.after) == ("1", "1.5")

    def test_added_and_removed_keys(self) -> None:
        diffs = generate_change_diff({"a_field": True}, {"b_field": "x"})
        assert [(d.field, d.before, d.after) for d in diffs] == [
            ("a_field", "Yes", None),
            ("b_field", None, "x"),
        ]

    def test_none_states(self) -> None:
        assert generate_change_diff(None, None) == []
        (diff,) = generate_change_diff(None, {"final_weight_lbs": 410})
        assert diff.label == "Final Weight"

    def test_nested_values_compared_structurally(self) -> None:
        before = {"allocations": {"rib": {"ribeye": 50, "primerib": 50}}}
        after = {"allocations": {"rib": {"primerib": 50, "ribeye": 50}}}
        assert generate_change_diff(before, after) == []
