"""Seller catalog configuration and the filtered catalog view it produces."""

from __future__ import annotations

from pydantic import Field, model_validator

from src.catalog.models import BodyPart, CutChoice, CutStyle, ParameterSpec
from src.models.common import CutSheetBase, Species


class CustomCutDefinition(CutSheetBase):
    """A seller-declared cut outside the built-in catalog."""

    id: str = Field(min_length=1)
    name: str
    body_part: str
    style: CutStyle | str = Field(union_mode="left_to_right")
    additional_fee: bool = False
    note: str | None = None


class SellerCatalogConfig(CutSheetBase):
    """What a processor offers. Read-only input to the engine."""

    enabled_species: list[Species] = Field(default_factory=lambda: list(Species))
    disabled_cuts: list[str] = Field(default_factory=list)
    custom_cuts: list[CustomCutDefinition] = Field(default_factory=list)
    min_hanging_weight: float | None = Field(default=None, gt=0)
    max_hanging_weight: float | None = Field(default=None, gt=0)
    producer_notes: str | None = None

    @model_validator(mode="after")
    def _validate_weights(self) -> SellerCatalogConfig:
        if (
            self.min_hanging_weight is not None
            and self.max_hanging_weight is not None
            and self.min_hanging_weight > self.max_hanging_weight
        ):
            raise ValueError(
                f"min_hanging_weight ({self.min_hanging_weight}) > "
                f"max_hanging_weight ({self.max_hanging_weight})."
            )
        return self


class WeightRequirements(CutSheetBase):
    min: float | None = None
    max: float | None = None


# ---------------------------------------------------------------------------
# Filtered view
# ---------------------------------------------------------------------------


class CustomCutChoice(CutChoice):
    """A seller-declared cut in catalog shape; its style may be free text."""

    style: CutStyle | str = Field(union_mode="left_to_right")


class FilteredCutChoice(CutChoice):
    disabled: bool = False
    disabled_reason: str | None = None


class FilteredBodyPart(BodyPart):
    sub_parts: dict[str, FilteredBodyPart] = Field(default_factory=dict)
    choices: list[FilteredCutChoice] = Field(default_factory=list)

    def has_enabled_cut(self) -> bool:
        """True if this part or any nested sub-part still offers a cut."""
        if any(not c.disabled for c in self.choices):
            return True
        return any(sub.has_enabled_cut() for sub in self.sub_parts.values())


class FilteredSpeciesCatalog(CutSheetBase):
    species: Species
    display_name: str
    note: str | None = None
    body_parts: dict[str, FilteredBodyPart]
    ground_options: dict[str, ParameterSpec] = Field(default_factory=dict)
