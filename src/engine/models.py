"""Selection and result models shared by the cut sheet engines.

Results serialise with camelCase aliases (``isValid``, ``disabledOptions``,
``cutId``...) because the presentation layer consumes them verbatim.
Inputs accept either spelling.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any

from pydantic import ConfigDict, Field, ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from src.models.common import CutSheetBase

logger = logging.getLogger(__name__)


class CamelModel(CutSheetBase):
    """Base for engine models exchanged with the presentation layer."""

    model_config = ConfigDict(alias_generator=to_camel)


# ---------------------------------------------------------------------------
# Selections
# ---------------------------------------------------------------------------


class Selection(CamelModel):
    """One selected cut plus optional parameter overrides."""

    cut_id: str
    parameters: dict[str, Any] = Field(default_factory=dict)


SelectionInput = Selection | str | Mapping[str, Any]

# Per allow-split body part: cut id -> percentage.
AllocationMap = dict[str, dict[str, int]]


def coerce_selections(selections: Iterable[SelectionInput] | None) -> list[Selection]:
    """Normalise caller input into an id-unique, order-preserving list.

    Accepts ``Selection`` models, bare cut ids, or mappings with a
    ``cut_id`` / ``cutId`` key. Items that are none of these are skipped.
    Duplicate ids collapse onto their first occurrence.
    """
    result: list[Selection] = []
    seen: set[str] = set()
    for item in selections or ():
        if isinstance(item, Selection):
            selection = item
        elif isinstance(item, str):
            selection = Selection(cut_id=item)
        else:
            try:
                selection = Selection.model_validate(item)
            except PydanticValidationError:
                logger.debug("Skipping malformed selection %r", item)
                continue
        if selection.cut_id in seen:
            continue
        seen.add(selection.cut_id)
        result.append(selection)
    return result


def selected_ids(selections: Iterable[Selection]) -> list[str]:
    return [s.cut_id for s in selections]


# ---------------------------------------------------------------------------
# Validation results
# ---------------------------------------------------------------------------


class ErrorType(StrEnum):
    """Hard errors: block finalisation."""

    EXCLUSIVE_CHOICE = "exclusiveChoice"
    EXCLUDES = "excludes"
    REQUIRES = "requires"


class WarningType(StrEnum):
    """Soft warnings: advisory only."""

    CONFLICTS_WITH = "conflictsWith"
    REDUCES_YIELD = "reducesYield"


class ValidationError(CamelModel):
    type: ErrorType
    cut_id: str
    cut_name: str
    conflicting_cut_id: str
    conflicting_cut_name: str
    group_name: str | None = None
    message: str


class ValidationWarning(CamelModel):
    type: WarningType
    cut_id: str
    cut_name: str
    affected_cut_id: str
    affected_cut_name: str
    message: str


class DisabledOption(CamelModel):
    cut_id: str
    cut_name: str
    reason: str
    disabled_by: str


class ValidationResult(CamelModel):
    """Outcome of validating one selection set."""

    is_valid: bool
    errors: list[ValidationError] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)
    disabled_options: list[DisabledOption] = Field(default_factory=list)

    def errors_of_type(self, error_type: ErrorType) -> list[ValidationError]:
        return [e for e in self.errors if e.type == error_type]

    def warnings_of_type(self, warning_type: WarningType) -> list[ValidationWarning]:
        return [w for w in self.warnings if w.type == warning_type]


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------


class CutAvailability(CamelModel):
    cut_id: str
    cut_name: str
    available: bool
    reason: str | None = None
    disabled_by: str | None = None


class WouldDisableEntry(CamelModel):
    cut_id: str
    cut_name: str
    reason: str


class AddCheck(CamelModel):
    allowed: bool
    reason: str | None = None


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


class NormalizationResult(CamelModel):
    selections: list[Selection]
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


# ---------------------------------------------------------------------------
# Allocation
# ---------------------------------------------------------------------------


class AllocationIssue(CamelModel):
    """An allow-split body part whose allocation does not total 100%."""

    body_part: str
    body_part_name: str
    total: float
    message: str
