"""Ordered recipe references inside a cookbook.

A cookbook stores its recipes as a list of {"recipe_id", "order"} pairs.
`order` is a sort key, not a list index: values may repeat or leave gaps.

RecipeOrdering is immutable. Every operation returns a new instance, which the
caller persists with a single assignment (see services.cookbooks).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Optional


@dataclass(frozen=True)
class RecipeRef:
    recipe_id: str
    order: int

    def to_dict(self) -> dict:
        return {"recipe_id": self.recipe_id, "order": self.order}


def _check_order(recipe_id: str, order: object) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(order, bool) or not isinstance(order, int) or order < 0:
        raise ValueError(f"order for recipe {recipe_id!r} must be a non-negative integer, got {order!r}")
    return order


@dataclass(frozen=True)
class RecipeOrdering:
    refs: tuple[RecipeRef, ...] = ()

    @classmethod
    def from_json(cls, raw: Optional[Iterable[Mapping]]) -> "RecipeOrdering":
        refs = []
        for item in raw or []:
            refs.append(RecipeRef(recipe_id=str(item["recipe_id"]), order=int(item["order"])))
        return cls(tuple(refs))

    def to_json(self) -> list[dict]:
        return [ref.to_dict() for ref in self.refs]

    def __len__(self) -> int:
        return len(self.refs)

    def __iter__(self) -> Iterator[RecipeRef]:
        return iter(self.refs)

    def __contains__(self, recipe_id: object) -> bool:
        return any(ref.recipe_id == recipe_id for ref in self.refs)

    def recipe_ids(self) -> list[str]:
        return [ref.recipe_id for ref in self.refs]

    def add_many(self, recipe_ids: Iterable[str]) -> "RecipeOrdering":
        """Append ids not yet present, numbering from the current length.

        Already-present ids (and repeats within `recipe_ids`) are skipped.
        """
        seen = set(self.recipe_ids())
        next_order = len(self.refs)
        added = []
        for recipe_id in recipe_ids:
            if recipe_id in seen:
                continue
            seen.add(recipe_id)
            added.append(RecipeRef(recipe_id=recipe_id, order=next_order))
            next_order += 1
        if not added:
            return self
        return RecipeOrdering(self.refs + tuple(added))

    def remove(self, recipe_id: str) -> "RecipeOrdering":
        """Drop the reference for `recipe_id`. Remaining orders are left as-is."""
        kept = tuple(ref for ref in self.refs if ref.recipe_id != recipe_id)
        if len(kept) == len(self.refs):
            return self
        return RecipeOrdering(kept)

    def reorder(self, order_map: Mapping[str, int]) -> "RecipeOrdering":
        """Apply new orders and sort ascending.

        References not named in `order_map` keep their order. On equal order,
        references moved by this call sort first; remaining ties keep their
        previous relative position. Unknown ids in `order_map` are ignored.
        """
        for recipe_id, order in order_map.items():
            _check_order(recipe_id, order)

        keyed = []
        for position, ref in enumerate(self.refs):
            moved = ref.recipe_id in order_map
            new_ref = RecipeRef(ref.recipe_id, order_map[ref.recipe_id]) if moved else ref
            keyed.append(((new_ref.order, 0 if moved else 1, position), new_ref))

        keyed.sort(key=lambda pair: pair[0])
        return RecipeOrdering(tuple(ref for _, ref in keyed))

    def sorted(self) -> "RecipeOrdering":
        """Display order: ascending by order, stable on list position."""
        return RecipeOrdering(tuple(sorted(self.refs, key=lambda ref: ref.order)))
