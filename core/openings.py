# core/openings.py
# Doors / windows / mirrors placed on walls. One registry per editing session,
# passed to whoever needs it (renderer, drag controller, estimator calls).

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional, Sequence

from .config import OpeningDefaults, load_materials
from .models import Opening, OpeningKind, Wall, to_number

logger = logging.getLogger(__name__)

# used for placement when the target wall has no usable size yet
PLACEHOLDER_WALL = Wall(width_m=5, height_m=3)

EDITABLE_FIELDS = ("width_m", "height_m", "x_m", "y_m", "wall_index")


def resolve_wall(walls: Sequence[Wall], index: int) -> Optional[Wall]:
    """The wall at ``index`` if it exists and has a positive size."""
    if 0 <= index < len(walls) and walls[index].is_measurable:
        return walls[index]
    return None


def clamp_to_wall(x_m: float, y_m: float, width_m: float, height_m: float, wall: Wall) -> tuple[float, float]:
    """Keep the opening inside the wall; oversize openings pin to 0."""
    x = max(0.0, min(x_m, wall.width_m - width_m))
    y = max(0.0, min(y_m, wall.height_m - height_m))
    return x, y


class OpeningRegistry:
    def __init__(self, defaults: Optional[dict[str, OpeningDefaults]] = None):
        self._defaults = defaults if defaults is not None else load_materials().openings
        self._openings: list[Opening] = []
        self._next_id = 1

    @classmethod
    def from_openings(cls, openings: Iterable[Opening], defaults: Optional[dict[str, OpeningDefaults]] = None) -> "OpeningRegistry":
        """Registry seeded with existing openings; ids <= 0 or already seen get fresh ones."""
        registry = cls(defaults)
        items = [o.model_copy() for o in openings]
        registry._next_id = max([o.id for o in items] + [0]) + 1
        seen: set[int] = set()
        for o in items:
            if o.id <= 0 or o.id in seen:
                o.id = registry._take_id()
            seen.add(o.id)
            registry._openings.append(o)
        return registry

    def __iter__(self) -> Iterator[Opening]:
        return iter(list(self._openings))

    def __len__(self) -> int:
        return len(self._openings)

    @property
    def openings(self) -> list[Opening]:
        return list(self._openings)

    def _take_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def defaults_for(self, kind: str) -> OpeningDefaults:
        if kind not in self._defaults:
            raise ValueError(f"Unknown opening kind: {kind!r}")
        return self._defaults[kind]

    def get(self, opening_id: int) -> Optional[Opening]:
        for o in self._openings:
            if o.id == opening_id:
                return o
        return None

    def for_wall(self, wall_index: int) -> list[Opening]:
        return [o for o in self._openings if o.wall_index == wall_index]

    # ---------- MUTATIONS ----------

    def add(self, kind: OpeningKind = "door", wall_index: int = 0, walls: Sequence[Wall] = ()) -> Opening:
        d = self.defaults_for(kind)
        wall = resolve_wall(walls, wall_index) or PLACEHOLDER_WALL

        x = max(0.0, (wall.width_m - d.width_m) / 2)
        if d.placement == "floor":
            y = max(0.0, wall.height_m - d.height_m)
        else:
            y = max(0.0, (wall.height_m - d.height_m) / 2)

        opening = Opening(
            id=self._take_id(),
            kind=kind,
            width_m=d.width_m,
            height_m=d.height_m,
            wall_index=wall_index,
            x_m=x,
            y_m=y,
        )
        self._openings.append(opening)
        logger.debug("Added %s #%d on wall %d", kind, opening.id, wall_index)
        return opening

    def remove(self, opening_id: int) -> bool:
        before = len(self._openings)
        self._openings = [o for o in self._openings if o.id != opening_id]
        return len(self._openings) != before

    def update_field(self, opening_id: int, field: str, value) -> Optional[Opening]:
        """Numeric edit from a form field. Values are clamped to >= 0 only."""
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field {field!r} is not editable")
        if field == "wall_index":
            return self.update_wall(opening_id, value)

        opening = self.get(opening_id)
        if opening is None:
            return None
        setattr(opening, field, max(0.0, to_number(value)))
        return opening

    def update_position(self, opening_id: int, x_m: float, y_m: float, walls: Sequence[Wall]) -> Optional[Opening]:
        """Move an opening; out-of-range positions are clamped, never rejected."""
        opening = self.get(opening_id)
        if opening is None:
            return None

        wall = resolve_wall(walls, opening.wall_index)
        if wall is None:
            x, y = max(0.0, x_m), max(0.0, y_m)
        else:
            x, y = clamp_to_wall(x_m, y_m, opening.width_m, opening.height_m, wall)

        opening.x_m = x
        opening.y_m = y
        return opening

    def update_wall(self, opening_id: int, wall_index) -> Optional[Opening]:
        """Reassign to another wall. Position is left alone until the next move."""
        opening = self.get(opening_id)
        if opening is None:
            return None
        opening.wall_index = wall_index
        return opening

    def change_kind(self, opening_id: int, kind: OpeningKind) -> Optional[Opening]:
        """Switching kind resets the size to that kind's defaults."""
        d = self.defaults_for(kind)
        opening = self.get(opening_id)
        if opening is None:
            return None
        opening.kind = kind
        opening.width_m = d.width_m
        opening.height_m = d.height_m
        return opening

    def reset(self) -> None:
        self._openings = []
        self._next_id = 1

    # ---------- ESTIMATOR FEED ----------

    def openings_for_estimate(self, walls: Sequence[Wall]) -> list[Opening]:
        """Openings whose wall still exists; orphans are left out."""
        return [o for o in self._openings if resolve_wall(walls, o.wall_index) is not None]

    def total_deduction(self, walls: Optional[Sequence[Wall]] = None) -> float:
        openings = self._openings if walls is None else self.openings_for_estimate(walls)
        return sum(o.area for o in openings)
