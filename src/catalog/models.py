"""Catalog schema models: body parts, cuts, and their parameter schemas.

The catalog is a recursive tree: a ``BodyPart`` owns an ordered list of
``CutChoice`` entries and optionally nested sub-parts of the same shape.
Relations between cuts (``excludes``, ``requires``, ``conflicts_with``,
``reduces_yield``) are plain id references resolved through the
per-species lookup built by ``SchemaCatalog``.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import Field, model_validator

from src.models.common import CutSheetBase, Species

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class CutStyle(StrEnum):
    """Product style tag for a cut."""

    STEAK = "steak"
    ROAST = "roast"
    CHOP = "chop"
    RIBS = "ribs"
    GROUND = "ground"
    CUBED = "cubed"
    CURED = "cured"
    SHANK = "shank"
    BACON = "bacon"
    MEAT = "meat"


class GroupingMode(StrEnum):
    """How the choices of one body part relate to each other."""

    NONE = "none"
    EXCLUSIVE_CHOICE = "exclusive_choice"  # radio-button behaviour
    ALLOW_SPLIT = "allow_split"            # yield divided between two cuts


# ---------------------------------------------------------------------------
# Parameter schema
# ---------------------------------------------------------------------------

OptionValue = int | float | str


class OptionParameter(CutSheetBase):
    """Enumerated parameter (thickness, package count, weight, size...)."""

    kind: Literal["options"] = "options"
    options: list[OptionValue] = Field(min_length=1)
    default: OptionValue
    unit: str | None = None

    @model_validator(mode="after")
    def _default_in_options(self) -> OptionParameter:
        if self.default not in self.options:
            raise ValueError(
                f"default {self.default!r} is not one of the options {self.options!r}."
            )
        return self

    def accepts(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        return value in self.options


class BooleanParameter(CutSheetBase):
    """Yes/no toggle (bone-in, frenched, smoked...)."""

    kind: Literal["boolean"] = "boolean"
    default: bool
    label: str | None = None

    def accepts(self, value: Any) -> bool:
        return isinstance(value, bool)


ParameterSpec = Annotated[
    OptionParameter | BooleanParameter,
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Cuts and body parts
# ---------------------------------------------------------------------------


class CutChoice(CutSheetBase):
    """A single product a body part can be processed into."""

    id: str = Field(min_length=1)
    name: str
    style: CutStyle

    # Constraint edges (ids within the same species)
    excludes: list[str] = Field(default_factory=list)
    requires: list[str] = Field(default_factory=list)
    conflicts_with: list[str] = Field(default_factory=list)
    reduces_yield: str | None = None
    independent: bool = False

    # Metadata
    bone_in: bool | None = None
    specialty: bool = False
    additional_fee: bool = False
    note: str | None = None

    parameters: dict[str, ParameterSpec] = Field(default_factory=dict)

    def default_parameters(self) -> dict[str, Any]:
        """Return the default value of every declared parameter."""
        return {name: spec.default for name, spec in self.parameters.items()}

    def resolve_parameters(self, overrides: dict[str, Any] | None) -> dict[str, Any]:
        """Merge overrides onto the defaults.

        Unknown parameter names and values outside a parameter's option
        set are dropped; the default stands in their place.
        """
        resolved = self.default_parameters()
        for name, value in (overrides or {}).items():
            spec = self.parameters.get(name)
            if spec is None or not spec.accepts(value):
                logger.debug(
                    "Dropping parameter override %s=%r for cut %s", name, value, self.id,
                )
                continue
            resolved[name] = value
        return resolved

    def valid_overrides(self, overrides: dict[str, Any] | None) -> dict[str, Any]:
        """Return only the overrides the parameter schema accepts."""
        return {
            name: value
            for name, value in (overrides or {}).items()
            if name in self.parameters and self.parameters[name].accepts(value)
        }


class BodyPart(CutSheetBase):
    """A primal (or a section of one) with its cut choices.

    ``sub_parts`` nests further body parts of the same shape; a part whose
    choices all live in sub-parts has an empty ``choices`` list.
    """

    display_name: str
    description: str | None = None
    grouping: GroupingMode = GroupingMode.NONE
    conflict_group: str | None = None
    sub_parts: dict[str, BodyPart] = Field(default_factory=dict)
    choices: list[CutChoice] = Field(default_factory=list)

    @property
    def is_exclusive_choice(self) -> bool:
        return self.grouping == GroupingMode.EXCLUSIVE_CHOICE

    @property
    def allows_split(self) -> bool:
        return self.grouping == GroupingMode.ALLOW_SPLIT


class SpeciesCatalog(CutSheetBase):
    """Catalog tree for one species."""

    species: Species
    display_name: str
    note: str | None = None
    body_parts: dict[str, BodyPart]
    ground_options: dict[str, ParameterSpec] = Field(default_factory=dict)


class ProcessingOption(CutSheetBase):
    """Optional extra processing a seller may charge for."""

    display_name: str
    additional_fee: bool
    applies_to: list[str]


class CatalogSchema(CutSheetBase):
    """The full, versioned catalog across all species."""

    version: str
    species: dict[Species, SpeciesCatalog]
    validation_rules: dict[str, str] = Field(default_factory=dict)
    processing_options: dict[str, ProcessingOption] = Field(default_factory=dict)
