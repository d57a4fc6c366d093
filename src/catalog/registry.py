"""SchemaCatalog: read-only access to the per-species catalog trees.

On construction every species tree is walked once (via
``iter_body_parts``) to build an id-keyed arena of cuts and the placement
of each cut in the tree. All later lookups go through that arena.

Load-time checks reject a malformed catalog with ``ValueError``:
duplicate cut ids within a species, relation ids that do not resolve,
and ``requires`` edges that are not declared on both sides.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from src.catalog.data import build_default_schema
from src.catalog.models import BodyPart, CatalogSchema, CutChoice, SpeciesCatalog
from src.catalog.tree import iter_body_parts
from src.models.common import Species, coerce_species

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CutPlacement:
    """Where a cut sits in its species tree."""

    path: tuple[str, ...]   # body-part keys from the top-level part to the owner
    owner: BodyPart         # the part whose ``choices`` list holds the cut
    root: BodyPart          # the top-level body part

    @property
    def owner_key(self) -> str:
        return self.path[-1]

    @property
    def root_key(self) -> str:
        return self.path[0]


@dataclass(frozen=True)
class CutGroup:
    """A body part acting as a constraint group for one of its cuts."""

    key: str
    part: BodyPart
    member_ids: tuple[str, ...]  # grouped (non-independent) members in declared order

    @property
    def display_name(self) -> str:
        return self.part.display_name


class _SpeciesIndex:
    """Id-keyed lookup built once per species."""

    def __init__(self, catalog: SpeciesCatalog) -> None:
        self.catalog = catalog
        self.cuts: dict[str, CutChoice] = {}
        self.placements: dict[str, CutPlacement] = {}
        self.part_keys: set[str] = set()
        self.split_parts: dict[str, BodyPart] = {}

        roots: dict[str, BodyPart] = catalog.body_parts
        for visit in iter_body_parts(roots):
            self.part_keys.add(visit.key)
            if visit.depth == 0 and visit.part.allows_split:
                self.split_parts[visit.key] = visit.part
            for cut in visit.part.choices:
                if cut.id in self.cuts:
                    raise ValueError(
                        f"Duplicate cut id {cut.id!r} in {catalog.species} catalog."
                    )
                self.cuts[cut.id] = cut
                self.placements[cut.id] = CutPlacement(
                    path=visit.path,
                    owner=visit.part,
                    root=roots[visit.root_key],
                )

        self._check_relations()

    def _check_relations(self) -> None:
        species = self.catalog.species
        for cut in self.cuts.values():
            for rel in ("excludes", "requires", "conflicts_with"):
                for target in getattr(cut, rel):
                    if target not in self.cuts:
                        raise ValueError(
                            f"{species} cut {cut.id!r} {rel} unknown cut {target!r}."
                        )
                    if target == cut.id:
                        raise ValueError(f"{species} cut {cut.id!r} {rel} itself.")
            for target in cut.requires:
                if cut.id not in self.cuts[target].requires:
                    raise ValueError(
                        f"{species} requires pair {cut.id!r} -> {target!r} "
                        "is not declared on both sides."
                    )
            # reduces_yield may point at a cut or at a whole body part
            if (
                cut.reduces_yield is not None
                and cut.reduces_yield not in self.cuts
                and cut.reduces_yield not in self.part_keys
            ):
                raise ValueError(
                    f"{species} cut {cut.id!r} reduces_yield unknown target "
                    f"{cut.reduces_yield!r}."
                )


class SchemaCatalog:
    """Immutable, per-species catalog of body parts and cuts.

    Every read accepts a ``Species`` or its string value. Unknown species
    and unknown cut ids produce ``None`` or empty results, never errors.
    """

    def __init__(self, schema: CatalogSchema | None = None) -> None:
        self._schema = schema or build_default_schema()
        self._indexes: dict[Species, _SpeciesIndex] = {
            species: _SpeciesIndex(catalog)
            for species, catalog in self._schema.species.items()
        }
        logger.debug(
            "Loaded cut sheet catalog v%s: %s",
            self._schema.version,
            {str(s): len(idx.cuts) for s, idx in self._indexes.items()},
        )

    # -- Schema-level reads -------------------------------------------------

    @property
    def schema(self) -> CatalogSchema:
        return self._schema

    @property
    def version(self) -> str:
        return self._schema.version

    def species(self) -> list[Species]:
        """Species with a catalog tree, in declared order."""
        return list(self._indexes)

    def _index(self, species: Species | str | None) -> _SpeciesIndex | None:
        resolved = coerce_species(species)
        if resolved is None:
            return None
        return self._indexes.get(resolved)

    def has_species(self, species: Species | str | None) -> bool:
        return self._index(species) is not None

    def get_species(self, species: Species | str | None) -> SpeciesCatalog | None:
        idx = self._index(species)
        return idx.catalog if idx else None

    # -- Cut lookups ----------------------------------------------------------

    def all_cuts(self, species: Species | str | None) -> list[CutChoice]:
        """All cuts of a species, flattened in tree order."""
        idx = self._index(species)
        return list(idx.cuts.values()) if idx else []

    def cut_map(self, species: Species | str | None) -> dict[str, CutChoice]:
        idx = self._index(species)
        return dict(idx.cuts) if idx else {}

    def get_cut(self, species: Species | str | None, cut_id: str) -> CutChoice | None:
        idx = self._index(species)
        return idx.cuts.get(cut_id) if idx else None

    def get_placement(
        self, species: Species | str | None, cut_id: str,
    ) -> CutPlacement | None:
        idx = self._index(species)
        return idx.placements.get(cut_id) if idx else None

    # -- Groups ---------------------------------------------------------------

    def get_exclusive_group(
        self, species: Species | str | None, cut_id: str,
    ) -> CutGroup | None:
        """The exclusive-choice group the cut belongs to, if any.

        The owning part is the most specific one (a sub-part wins over its
        parent). Independent cuts are never grouped.
        """
        idx = self._index(species)
        if idx is None:
            return None
        cut = idx.cuts.get(cut_id)
        placement = idx.placements.get(cut_id)
        if cut is None or placement is None or cut.independent:
            return None
        if not placement.owner.is_exclusive_choice:
            return None
        return CutGroup(
            key=placement.owner_key,
            part=placement.owner,
            member_ids=_grouped_ids(placement.owner),
        )

    def split_parts(self, species: Species | str | None) -> dict[str, BodyPart]:
        """Top-level allow-split body parts keyed by body-part key."""
        idx = self._index(species)
        return dict(idx.split_parts) if idx else {}

    def get_split_part(
        self, species: Species | str | None, cut_id: str,
    ) -> CutGroup | None:
        """The allow-split body part the cut counts toward, if any."""
        idx = self._index(species)
        if idx is None:
            return None
        cut = idx.cuts.get(cut_id)
        placement = idx.placements.get(cut_id)
        if cut is None or placement is None or cut.independent:
            return None
        part = idx.split_parts.get(placement.root_key)
        if part is None:
            return None
        return CutGroup(
            key=placement.root_key,
            part=part,
            member_ids=split_member_ids(part),
        )


def _grouped_ids(part: BodyPart) -> tuple[str, ...]:
    return tuple(c.id for c in part.choices if not c.independent)


def split_member_ids(part: BodyPart) -> tuple[str, ...]:
    """Non-independent cut ids of a body part and all of its sub-parts."""
    ids: list[str] = []
    for visit in iter_body_parts({"_": part}):
        ids.extend(c.id for c in visit.part.choices if not c.independent)
    return tuple(ids)


@lru_cache(maxsize=1)
def get_schema_catalog() -> SchemaCatalog:
    """Process-wide built-in catalog, loaded on first use."""
    return SchemaCatalog()
