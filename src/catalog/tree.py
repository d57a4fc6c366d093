"""Shared walks over the recursive body-part tree.

``iter_body_parts`` is the one pre-order visitor used to build lookups,
find exclusive-choice groups and collect allow-split members.
``fold_body_parts`` is the matching post-order rebuild used to derive
pruned catalog views.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import TypeVar

from src.catalog.models import BodyPart

T = TypeVar("T")


@dataclass(frozen=True)
class PartVisit:
    """One body part reached during a walk."""

    path: tuple[str, ...]  # keys from the top-level part down to this one
    part: BodyPart
    parent: BodyPart | None

    @property
    def key(self) -> str:
        return self.path[-1]

    @property
    def root_key(self) -> str:
        return self.path[0]

    @property
    def depth(self) -> int:
        return len(self.path) - 1


def iter_body_parts(
    body_parts: Mapping[str, BodyPart],
    _prefix: tuple[str, ...] = (),
    _parent: BodyPart | None = None,
) -> Iterator[PartVisit]:
    """Yield every body part, parents before their sub-parts, in declared order."""
    for key, part in body_parts.items():
        path = (*_prefix, key)
        yield PartVisit(path=path, part=part, parent=_parent)
        if part.sub_parts:
            yield from iter_body_parts(part.sub_parts, path, part)


def fold_body_parts(
    body_parts: Mapping[str, BodyPart],
    fn: Callable[[str, BodyPart, dict[str, T]], T | None],
) -> dict[str, T]:
    """Rebuild the tree bottom-up.

    ``fn`` receives each part together with its already-folded sub-parts
    and returns the folded value, or ``None`` to drop the part.
    """
    result: dict[str, T] = {}
    for key, part in body_parts.items():
        folded_children = fold_body_parts(part.sub_parts, fn) if part.sub_parts else {}
        folded = fn(key, part, folded_children)
        if folded is not None:
            result[key] = folded
    return result
