"""Shared types, enums, and base models used across the cut sheet domain models."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_uuid7() -> UUID:
    """Generate a new time-sortable UUID v7."""
    return uuid7()


# --- Reusable annotated types ---

UUIDv7 = Annotated[UUID, Field(description="Time-sortable UUID v7.")]
UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]


# --- Shared enums ---


class Species(StrEnum):
    """Animal categories, each owning an independent catalog tree."""

    BEEF = "beef"
    PORK = "pork"
    LAMB = "lamb"
    GOAT = "goat"


def coerce_species(value: "Species | str | None") -> Species | None:
    """Return the matching Species, or None for anything unrecognised."""
    if isinstance(value, Species):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Species(value.strip().lower())
    except ValueError:
        return None


# --- Base model ---


class CutSheetBase(BaseModel):
    """Base model with common configuration for all cut sheet Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "ser_json_timedelta": "iso8601",
        "protected_namespaces": (),
    }
