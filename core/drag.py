# core/drag.py
# Press / move / release for dragging openings around a wall panel.

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .geometry import inverse
from .models import Wall
from .openings import OpeningRegistry
from .preview import PreviewRenderer


@dataclass
class DragState:
    target_id: int
    wall_index: int

    # where inside the opening it was grabbed, in meters
    grab_dx_m: float
    grab_dy_m: float


class DragController:
    def __init__(
        self,
        registry: OpeningRegistry,
        renderer: PreviewRenderer,
        walls: Callable[[], Sequence[Wall]],
        request_render: Callable[[], None],
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.registry = registry
        self.renderer = renderer
        self._walls = walls
        self._request_render = request_render
        self._on_change = on_change
        self.state: Optional[DragState] = None

    @property
    def dragging(self) -> bool:
        return self.state is not None

    def press(self, wall_index: int, px_x: float, px_y: float) -> bool:
        """Start dragging the topmost opening under the pointer, if any."""
        self.state = None
        opening = self.renderer.hit_test(wall_index, px_x, px_y)
        if opening is None:
            return False

        mapping = self.renderer.panel_for(wall_index).mapping
        mx, my = inverse(px_x, px_y, mapping)
        self.state = DragState(
            target_id=opening.id,
            wall_index=wall_index,
            grab_dx_m=mx - opening.x_m,
            grab_dy_m=my - opening.y_m,
        )
        self._request_render()
        return True

    def move(self, px_x: float, px_y: float) -> bool:
        if self.state is None:
            return False

        opening = self.registry.get(self.state.target_id)
        panel = self.renderer.panel_for(self.state.wall_index)
        if opening is None or opening.wall_index != self.state.wall_index or panel is None or panel.mapping is None:
            # opening removed or moved to another wall mid-drag
            self.release()
            return False

        mx, my = inverse(px_x, px_y, panel.mapping)
        self.registry.update_position(
            opening.id, mx - self.state.grab_dx_m, my - self.state.grab_dy_m, self._walls()
        )
        self._request_render()
        if self._on_change is not None:
            self._on_change()
        return True

    def release(self) -> None:
        self.state = None
