"""Built-in cut sheet catalog for beef, pork, lamb, and goat.

Body parts follow the primal breakdown used on custom processor cut
sheets (USDA Meat Buyer's Guide naming). Relations between cuts are
declared by id; ``build_default_schema`` validates the raw data into a
``CatalogSchema``.
"""

from typing import Any

from src.catalog.models import CatalogSchema

CATALOG_VERSION = "1.0"


def _opts(options: list[Any], default: Any, unit: str | None = None) -> dict[str, Any]:
    spec: dict[str, Any] = {"kind": "options", "options": options, "default": default}
    if unit is not None:
        spec["unit"] = unit
    return spec


def _flag(default: bool, label: str | None = None) -> dict[str, Any]:
    spec: dict[str, Any] = {"kind": "boolean", "default": default}
    if label is not None:
        spec["label"] = label
    return spec


def _cut(cut_id: str, name: str, style: str, **extra: Any) -> dict[str, Any]:
    return {"id": cut_id, "name": name, "style": style, **extra}


# ---------------------------------------------------------------------------
# Beef
# ---------------------------------------------------------------------------

_BEEF: dict[str, Any] = {
    "species": "beef",
    "display_name": "Beef",
    "body_parts": {
        "short_loin": {
            "display_name": "Short Loin",
            "conflict_group": "tbone_conflict",
            "description": "Contains both NY Strip and Tenderloin connected by T-shaped bone",
            "choices": [
                _cut(
                    "tbone", "T-Bone Steaks", "steak",
                    bone_in=True,
                    excludes=["nystrip", "filet", "porterhouse"],
                    parameters={
                        "thickness": _opts([0.75, 1, 1.25, 1.5], 1, "inches"),
                        "per_package": _opts([1, 2, 4], 2),
                    },
                ),
                _cut(
                    "porterhouse", "Porterhouse Steaks", "steak",
                    bone_in=True,
                    excludes=["nystrip", "filet", "tbone"],
                    parameters={
                        "thickness": _opts([1, 1.25, 1.5, 2], 1.25, "inches"),
                        "per_package": _opts([1, 2], 2),
                    },
                ),
                _cut(
                    "nystrip", "NY Strip Steaks", "steak",
                    bone_in=False,
                    excludes=["tbone", "porterhouse"],
                    requires=["filet"],
                    parameters={
                        "thickness": _opts([0.75, 1, 1.25, 1.5], 1, "inches"),
                        "per_package": _opts([1, 2, 4], 2),
                    },
                ),
                _cut(
                    "filet", "Filet Mignon / Tenderloin", "steak",
                    bone_in=False,
                    excludes=["tbone", "porterhouse"],
                    requires=["nystrip"],
                    parameters={
                        "thickness": _opts([1, 1.5, 2], 1.5, "inches"),
                        "per_package": _opts([1, 2], 2),
                        "keep_whole": _flag(False, "Keep tenderloin whole"),
                    },
                ),
            ],
        },
        "rib": {
            "display_name": "Rib",
            "conflict_group": "rib_allocation",
            "description": "Can be steaks OR roasts, or a combination",
            "grouping": "allow_split",
            "choices": [
                _cut(
                    "ribeye", "Rib-Eye Steaks", "steak",
                    conflicts_with=["primerib"],
                    parameters={
                        "thickness": _opts([0.75, 1, 1.25, 1.5, 2], 1, "inches"),
                        "per_package": _opts([1, 2, 4], 2),
                        "bone_in": _flag(False),
                    },
                ),
                _cut(
                    "primerib", "Prime Rib / Standing Rib Roast", "roast",
                    conflicts_with=["ribeye"],
                    parameters={
                        "size": _opts(["2-rib", "3-rib", "4-rib", "whole"], "3-rib"),
                        "bone_in": _flag(True),
                    },
                ),
                _cut(
                    "rib_ground", "Ground to Hamburger", "ground",
                    conflicts_with=["ribeye", "primerib"],
                ),
            ],
        },
        "chuck": {
            "display_name": "Chuck",
            "grouping": "allow_split",
            "description": "Front shoulder - can be steaks, roasts, stew, or ground",
            "choices": [
                _cut(
                    "chuck_roast", "Chuck Roasts", "roast",
                    parameters={
                        "weight": _opts([2, 3, 4, 5], 3, "lbs"),
                        "bone_in": _flag(False),
                    },
                ),
                _cut(
                    "chuck_steak", "Chuck Steaks", "steak",
                    parameters={
                        "thickness": _opts([0.75, 1, 1.25], 1, "inches"),
                        "per_package": _opts([2, 4], 2),
                    },
                ),
                _cut(
                    "denver_steak", "Denver Steaks", "steak",
                    specialty=True,
                    conflicts_with=["chuck_roast", "chuck_steak"],
                    parameters={"thickness": _opts([1, 1.25], 1, "inches")},
                ),
                _cut(
                    "flat_iron", "Flat Iron Steaks", "steak",
                    specialty=True,
                    conflicts_with=["chuck_roast", "chuck_steak"],
                    parameters={"thickness": _opts([0.75, 1], 1, "inches")},
                ),
                _cut(
                    "stew_meat", "Stew Meat", "cubed",
                    parameters={"package_size": _opts([1, 2], 1, "lbs")},
                ),
                _cut("chuck_ground", "Ground to Hamburger", "ground"),
            ],
        },
        "round": {
            "display_name": "Round",
            "description": "Rear leg - multiple sections each with their own options",
            "sub_parts": {
                "top_round": {
                    "display_name": "Top Round",
                    "grouping": "exclusive_choice",
                    "choices": [
                        _cut("top_round_steak", "Round Steaks", "steak"),
                        _cut("london_broil", "London Broil", "steak", note="Thick cut ~2 inches"),
                        _cut("top_round_roast", "Top Round Roast", "roast"),
                        _cut("top_round_ground", "Ground to Hamburger", "ground"),
                    ],
                },
                "bottom_round": {
                    "display_name": "Bottom Round",
                    "grouping": "exclusive_choice",
                    "choices": [
                        _cut("bottom_round_roast", "Bottom Round Roast", "roast"),
                        _cut("cube_steak", "Cube Steaks (Tenderized)", "steak"),
                        _cut("bottom_round_ground", "Ground to Hamburger", "ground"),
                    ],
                },
                "eye_round": {
                    "display_name": "Eye of Round",
                    "grouping": "exclusive_choice",
                    "choices": [
                        _cut("eye_round_roast", "Eye Round Roast", "roast"),
                        _cut("eye_round_steak", "Eye Round Steaks (Medallions)", "steak"),
                        _cut("eye_round_ground", "Ground to Hamburger", "ground"),
                    ],
                },
                "sirloin_tip": {
                    "display_name": "Sirloin Tip",
                    "grouping": "exclusive_choice",
                    "choices": [
                        _cut("sirloin_tip_roast", "Sirloin Tip Roast", "roast"),
                        _cut("sirloin_tip_steak", "Sirloin Tip Steaks", "steak"),
                        _cut("sirloin_tip_ground", "Ground to Hamburger", "ground"),
                    ],
                },
            },
            "choices": [],
        },
        "sirloin": {
            "display_name": "Sirloin",
            "grouping": "allow_split",
            "choices": [
                _cut(
                    "sirloin_steak", "Sirloin Steaks", "steak",
                    parameters={"thickness": _opts([0.75, 1, 1.25], 1, "inches")},
                ),
                _cut("tritip", "Tri-Tip Roast", "roast", reduces_yield="sirloin_steak"),
                _cut(
                    "picanha", "Picanha (Coulotte)", "roast",
                    specialty=True,
                    reduces_yield="sirloin_steak",
                ),
                _cut("sirloin_ground", "Ground to Hamburger", "ground"),
            ],
        },
        "brisket": {
            "display_name": "Brisket",
            "grouping": "exclusive_choice",
            "choices": [
                _cut("whole_brisket", "Whole Packer Brisket", "roast"),
                _cut("split_brisket", "Split (Flat and Point)", "roast"),
                _cut("corned_beef", "Corned Beef (Cured)", "cured", additional_fee=True),
                _cut("brisket_ground", "Ground to Hamburger", "ground"),
            ],
        },
        "short_ribs": {
            "display_name": "Short Ribs",
            "choices": [
                _cut(
                    "short_ribs_bone", "Bone-In Short Ribs", "ribs",
                    parameters={"style": _opts(["english", "flanken", "plate"], "english")},
                ),
                _cut("short_ribs_boneless", "Boneless Short Rib Meat", "meat"),
                _cut("short_ribs_ground", "Ground to Hamburger", "ground"),
            ],
        },
        "flank": {
            "display_name": "Flank",
            "choices": [
                _cut("flank_steak", "Flank Steak", "steak"),
                _cut("flank_ground", "Ground to Hamburger", "ground"),
            ],
        },
        "skirt": {
            "display_name": "Skirt",
            "choices": [
                _cut("skirt_steak", "Skirt Steak (Fajita)", "steak"),
                _cut("skirt_ground", "Ground to Hamburger", "ground"),
            ],
        },
    },
    "ground_options": {
        "package_size": _opts([1, 2, 5, 10], 1, "lbs"),
        "lean_ratio": _opts(["80/20", "85/15", "90/10"], "85/15"),
        "make_patties": _flag(False),
        "patty_size": _opts([0.25, 0.33, 0.5], 0.33, "lbs"),
    },
}

# ---------------------------------------------------------------------------
# Pork
# ---------------------------------------------------------------------------

_PORK: dict[str, Any] = {
    "species": "pork",
    "display_name": "Pork",
    "body_parts": {
        "loin": {
            "display_name": "Loin",
            "grouping": "allow_split",
            "choices": [
                _cut(
                    "pork_chops", "Pork Chops", "chop",
                    conflicts_with=["loin_roast_whole"],
                    parameters={
                        "thickness": _opts([0.75, 1, 1.5, 2], 1, "inches"),
                        "per_package": _opts([2, 4, 6], 4),
                        "bone_in": _flag(True),
                        "cut": _opts(["center-cut", "rib", "sirloin", "mixed"], "mixed"),
                    },
                ),
                _cut(
                    "loin_roast", "Loin Roast", "roast",
                    conflicts_with=["pork_chops"],
                    parameters={
                        "weight": _opts([3, 4, 5], 4, "lbs"),
                        "bone_in": _flag(False),
                    },
                ),
                _cut(
                    "loin_roast_whole", "Whole Loin Roast", "roast",
                    excludes=["pork_chops"],
                ),
                _cut(
                    "tenderloin", "Tenderloin", "roast",
                    independent=True,
                    note="Separate muscle - can be kept regardless of chop/roast choice",
                ),
                _cut("baby_back_ribs", "Baby Back Ribs", "ribs", reduces_yield="loin"),
            ],
        },
        "ham": {
            "display_name": "Leg / Ham",
            "conflict_group": "ham_processing",
            "choices": [
                _cut(
                    "fresh_ham", "Fresh Ham (Uncured Roast)", "roast",
                    excludes=["cured_ham"],
                    parameters={
                        "portion": _opts(["whole", "shank", "butt"], "whole"),
                        "bone_in": _flag(True),
                    },
                ),
                _cut(
                    "cured_ham", "Cured Ham", "cured",
                    excludes=["fresh_ham"],
                    additional_fee=True,
                    parameters={
                        "spiral": _flag(False),
                        "smoked": _flag(True),
                    },
                ),
                _cut("ham_steaks", "Ham Steaks", "steak", reduces_yield="ham"),
            ],
        },
        "shoulder": {
            "display_name": "Shoulder",
            "sub_parts": {
                "boston_butt": {
                    "display_name": "Boston Butt",
                    "choices": [
                        _cut("boston_butt_whole", "Whole (for smoking/pulling)", "roast"),
                        _cut("boston_butt_roasts", "Smaller Roasts", "roast"),
                        _cut("boston_butt_steaks", "Blade Steaks", "steak"),
                        _cut("boston_butt_ground", "Ground/Sausage", "ground"),
                    ],
                },
                "picnic_shoulder": {
                    "display_name": "Picnic Shoulder",
                    "choices": [
                        _cut("picnic_roast", "Picnic Roast", "roast"),
                        _cut("picnic_ground", "Ground/Sausage", "ground"),
                    ],
                },
            },
            "choices": [],
        },
        "belly": {
            "display_name": "Belly / Side",
            "conflict_group": "belly_processing",
            "choices": [
                _cut(
                    "bacon", "Bacon (Cured/Smoked)", "cured",
                    excludes=["fresh_belly"],
                    additional_fee=True,
                    parameters={"thickness": _opts(["regular", "thick"], "regular")},
                ),
                _cut("fresh_belly", "Fresh Pork Belly", "roast", excludes=["bacon"]),
                _cut(
                    "spare_ribs", "Spare Ribs", "ribs",
                    reduces_yield="belly",
                    parameters={"style": _opts(["full", "st-louis"], "full")},
                ),
            ],
        },
    },
    "ground_options": {
        "package_size": _opts([1, 2, 5], 1, "lbs"),
        "make_sausage": _flag(False),
        "sausage_flavor": _opts(
            ["breakfast", "italian-mild", "italian-hot", "bratwurst", "chorizo", "maple"],
            "breakfast",
        ),
        "sausage_style": _opts(["bulk", "links"], "bulk"),
    },
}

# ---------------------------------------------------------------------------
# Lamb
# ---------------------------------------------------------------------------

_LAMB: dict[str, Any] = {
    "species": "lamb",
    "display_name": "Lamb",
    "body_parts": {
        "rack": {
            "display_name": "Rack",
            "conflict_group": "rack_allocation",
            "choices": [
                _cut(
                    "whole_rack", "Whole Rack of Lamb", "roast",
                    excludes=["rib_chops", "lamb_lollipops", "crown_roast"],
                    parameters={"frenched": _flag(True)},
                ),
                _cut(
                    "rib_chops", "Rib Chops (Cutlets)", "chop",
                    excludes=["whole_rack", "crown_roast"],
                    parameters={
                        "per_package": _opts([2, 4], 4),
                        "frenched": _flag(True),
                    },
                ),
                _cut(
                    "lamb_lollipops", "Lamb Lollipops (French-trimmed chops)", "chop",
                    excludes=["whole_rack", "rib_chops"],
                ),
                _cut(
                    "crown_roast", "Crown Roast", "roast",
                    excludes=["whole_rack", "rib_chops"],
                    note="Uses both racks tied together",
                ),
            ],
        },
        "loin": {
            "display_name": "Loin",
            "conflict_group": "loin_allocation",
            "choices": [
                _cut(
                    "loin_chops", "Loin Chops (Lamb T-Bones)", "chop",
                    excludes=["loin_roast", "saddle"],
                    parameters={
                        "thickness": _opts([0.75, 1, 1.25], 1, "inches"),
                        "per_package": _opts([2, 4], 4),
                    },
                ),
                _cut(
                    "loin_roast", "Boneless Loin Roast", "roast",
                    excludes=["loin_chops", "saddle"],
                ),
                _cut(
                    "saddle", "Saddle (Bone-in Loin Roast)", "roast",
                    excludes=["loin_chops", "loin_roast"],
                ),
            ],
        },
        "leg": {
            "display_name": "Leg",
            "conflict_group": "leg_allocation",
            "choices": [
                _cut(
                    "whole_leg", "Whole Leg Roast (Bone-in)", "roast",
                    excludes=["butterflied_leg", "leg_steaks"],
                ),
                _cut(
                    "butterflied_leg", "Butterflied Leg (Boneless)", "roast",
                    excludes=["whole_leg"],
                ),
                _cut("leg_steaks", "Leg Steaks", "steak", reduces_yield="leg"),
                _cut(
                    "boneless_leg_roast", "Boneless Leg Roast (Rolled/Tied)", "roast",
                    excludes=["whole_leg"],
                ),
            ],
        },
        "shoulder": {
            "display_name": "Shoulder",
            "grouping": "allow_split",
            "choices": [
                _cut(
                    "shoulder_roast", "Whole Shoulder Roast", "roast",
                    conflicts_with=["shoulder_chops"],
                ),
                _cut(
                    "shoulder_chops", "Shoulder Chops (Blade/Arm)", "chop",
                    conflicts_with=["shoulder_roast"],
                ),
                _cut("lamb_stew", "Stew Meat (Cubed)", "cubed"),
                _cut("lamb_ground", "Ground Lamb", "ground"),
            ],
        },
        "breast": {
            "display_name": "Breast/Shank",
            "choices": [
                _cut("denver_ribs", "Denver Ribs", "ribs"),
                _cut("riblets", "Riblets", "ribs"),
                _cut("foreshank", "Foreshanks", "shank"),
                _cut("breast_ground", "Ground", "ground"),
            ],
        },
    },
    "ground_options": {
        "package_size": _opts([1, 2], 1, "lbs"),
    },
}

# ---------------------------------------------------------------------------
# Goat
# ---------------------------------------------------------------------------

_GOAT: dict[str, Any] = {
    "species": "goat",
    "display_name": "Goat",
    "note": "Goat follows similar structure to lamb",
    "body_parts": {
        "rack": {
            "display_name": "Rack",
            "conflict_group": "rack_allocation",
            "choices": [
                _cut("whole_rack", "Whole Rack of Goat", "roast", excludes=["rib_chops"]),
                _cut(
                    "rib_chops", "Rib Chops", "chop",
                    excludes=["whole_rack"],
                    parameters={"per_package": _opts([2, 4], 4)},
                ),
            ],
        },
        "loin": {
            "display_name": "Loin",
            "conflict_group": "loin_allocation",
            "choices": [
                _cut(
                    "loin_chops", "Loin Chops", "chop",
                    excludes=["loin_roast"],
                    parameters={"thickness": _opts([0.75, 1], 1, "inches")},
                ),
                _cut("loin_roast", "Loin/Saddle Roast", "roast", excludes=["loin_chops"]),
            ],
        },
        "leg": {
            "display_name": "Leg",
            "conflict_group": "leg_allocation",
            "choices": [
                _cut(
                    "whole_leg", "Whole Leg Roast", "roast",
                    excludes=["leg_steaks"],
                    parameters={"bone_in": _flag(True)},
                ),
                _cut("leg_steaks", "Leg Steaks", "steak", excludes=["whole_leg"]),
            ],
        },
        "shoulder": {
            "display_name": "Shoulder",
            "grouping": "allow_split",
            "choices": [
                _cut("shoulder_roast", "Shoulder Roast", "roast"),
                _cut("shoulder_chops", "Shoulder Chops", "chop"),
                _cut("curry_meat", "Curry Meat (Cubed)", "cubed"),
                _cut("stew_meat", "Stew Meat", "cubed"),
                _cut("goat_ground", "Ground Goat", "ground"),
            ],
        },
        "shank": {
            "display_name": "Shank",
            "choices": [
                _cut("osso_bucco", "Osso Bucco (Cross-cut)", "shank"),
                _cut("whole_shank", "Whole Shanks", "shank"),
            ],
        },
    },
    "ground_options": {
        "package_size": _opts([1, 2], 1, "lbs"),
    },
}

# ---------------------------------------------------------------------------
# Rule descriptions and processing options
# ---------------------------------------------------------------------------

VALIDATION_RULES: dict[str, str] = {
    "exclusiveChoice": "Only one option can be selected from this group",
    "excludes": "Selecting this option disables the listed options",
    "conflictsWith": "Can coexist but choosing more of one reduces the other",
    "reducesYield": "This cut comes from the same area and reduces available quantity",
    "requires": "These options must be selected together",
    "independent": "This cut can be kept regardless of other choices in this primal",
}

_PROCESSING_OPTIONS: dict[str, Any] = {
    "curing": {
        "display_name": "Curing/Smoking",
        "additional_fee": True,
        "applies_to": ["cured_ham", "bacon", "corned_beef"],
    },
    "tenderizing": {
        "display_name": "Mechanical Tenderizing",
        "additional_fee": True,
        "applies_to": ["cube_steak", "top_round_steak"],
    },
    "sausage": {
        "display_name": "Sausage Making",
        "additional_fee": True,
        "applies_to": ["ground"],
    },
}


def build_default_schema() -> CatalogSchema:
    """Validate the built-in raw data into a ``CatalogSchema``."""
    return CatalogSchema.model_validate({
        "version": CATALOG_VERSION,
        "species": {
            "beef": _BEEF,
            "pork": _PORK,
            "lamb": _LAMB,
            "goat": _GOAT,
        },
        "validation_rules": VALIDATION_RULES,
        "processing_options": _PROCESSING_OPTIONS,
    })
