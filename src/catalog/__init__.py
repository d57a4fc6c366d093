"""Cut sheet catalog: per-species body-part trees and their cut choices.

The catalog is static, loaded once and read-only afterwards. Every other
component (validation, availability, normalisation, seller filtering,
allocation) reads it through ``SchemaCatalog``.
"""

from src.catalog.models import (
    BodyPart,
    BooleanParameter,
    CatalogSchema,
    CutChoice,
    CutStyle,
    GroupingMode,
    OptionParameter,
    SpeciesCatalog,
)
from src.catalog.registry import SchemaCatalog, get_schema_catalog

__all__ = [
    "BodyPart",
    "BooleanParameter",
    "CatalogSchema",
    "CutChoice",
    "CutStyle",
    "GroupingMode",
    "OptionParameter",
    "SchemaCatalog",
    "SpeciesCatalog",
    "get_schema_catalog",
]
