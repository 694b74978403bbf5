from __future__ import annotations

import logging

from fastapi import FastAPI, Body, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from core.calculator import calculate_quick, calculate_tiles, calculate_wallpaper
from core.config import load_materials
from core.models import (
    PanelPreview,
    PreviewItem,
    PreviewRequest,
    PreviewResult,
    TileRequest,
    TileResult,
    WallpaperRequest,
    WallpaperResult,
)
from core.openings import OpeningRegistry
from core.preview import PreviewRenderer, RecordingSurface
from core.rules import perimeter_width

logger = logging.getLogger(__name__)

app = FastAPI(title="Coverage Estimator API", version="1.0.0")

# UI may live on another port / domain
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/patterns")
def patterns() -> dict[str, dict]:
    """Layout patterns and the waste % each one implies."""
    return {k: p.model_dump() for k, p in load_materials().patterns.items()}


@app.post("/tiles", response_model=TileResult)
def tiles(req: TileRequest = Body(...)) -> TileResult:
    """
    Tile count for a wall list (or one direct area in quick mode).
    Openings on walls that no longer exist are ignored.
    """
    try:
        registry = OpeningRegistry.from_openings(req.openings)
        if req.direct_area_m2 is not None:
            return calculate_quick(req.direct_area_m2, registry.openings, req.params, req.pattern)
        openings = registry.openings_for_estimate(req.walls)
        return calculate_tiles(req.walls, openings, req.params, req.pattern)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/wallpaper", response_model=WallpaperResult)
def wallpaper(req: WallpaperRequest = Body(...)) -> WallpaperResult:
    params = req.params
    if req.perimeter_mode:
        params = params.model_copy(
            update={"wall_width_m": perimeter_width(req.room_length_m, req.room_width_m)}
        )
    return calculate_wallpaper(params)


@app.post("/tiles/preview", response_model=PreviewResult)
def tiles_preview(req: PreviewRequest = Body(...)) -> PreviewResult:
    """Renders every wall headlessly and returns mapping + drawn items per panel."""
    try:
        registry = OpeningRegistry.from_openings(req.openings)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    renderer = PreviewRenderer(
        registry, lambda _index: RecordingSurface(req.canvas_width_px, req.canvas_height_px)
    )
    renderer.set_tile(req.params)
    renderer.layout(req.walls)
    renderer.draw()

    panels: list[PanelPreview] = []
    for panel in renderer.panels:
        m = panel.mapping
        panels.append(
            PanelPreview(
                wall_index=panel.wall_index,
                drawable=m is not None,
                scale=m.scale if m else 0.0,
                origin_x=m.origin_x if m else 0.0,
                origin_y=m.origin_y if m else 0.0,
                used_fallback=panel.used_fallback,
                items=[PreviewItem(**item) for item in panel.surface.items],
            )
        )
    logger.debug("preview: %d panels", len(panels))
    return PreviewResult(panels=panels)
