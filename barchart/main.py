"""
main.py — FastAPI service hosting one bar chart visual.

The service plays the host's part over HTTP: it feeds data views and the
viewport to the visual, persists property-panel objects, routes bar clicks
through the selection manager, and serves the rendered SVG.
"""

from __future__ import annotations

import importlib.util
import logging
import shutil
import tempfile
from pathlib import Path

from fastapi import Body, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from .config import resolve_viewport_height, resolve_viewport_width
from .dataview import DataView, DataViewError, data_view_from_frame, data_view_from_payload, load_frame
from .host import LocalHost
from .model import Viewport, VisualUpdateOptions
from .visual import Visual

ALLOWED_EXTENSIONS = {".csv", ".xlsx", ".xls"}

logger = logging.getLogger(__name__)

app = FastAPI(title="Bar Chart Visual", version="1.0.0")


class VisualSession:
    """The visual plus whatever the host remembers between calls."""

    def __init__(self, host: LocalHost | None = None):
        self.host = host or LocalHost()
        self.visual = Visual(self.host)
        self.data_view: DataView | None = None
        self.viewport = Viewport(resolve_viewport_width(), resolve_viewport_height())

    def render(self, data_view: DataView | None, viewport: Viewport | None = None) -> dict:
        if viewport is not None:
            self.viewport = viewport
        if data_view is not None:
            # Persisted objects are what the host hands back on every update
            self.host.persist_properties(data_view.metadata.objects or {})
            data_view.metadata.objects = self.host.objects
        self.data_view = data_view
        self.visual.update(VisualUpdateOptions(
            viewport=self.viewport,
            data_views=[data_view] if data_view is not None else [],
        ))
        return self.summary()

    def summary(self) -> dict:
        surface = self.visual.surface
        bars = []
        for bar, geometry in zip(surface.bars, surface.geometry()):
            bars.append({
                "key":         geometry.key,
                "category":    bar.datum.category,
                "value":       bar.datum.value,
                "x":           geometry.x,
                "y":           geometry.y,
                "width":       geometry.width,
                "height":      geometry.height,
                "fill":        geometry.fill,
                "fillOpacity": geometry.fill_opacity,
            })
        return {
            "viewport":        {"width": self.viewport.width, "height": self.viewport.height},
            "settings":        self.visual.settings.to_dict(),
            "helpLinkVisible": surface.help_link_visible,
            "axis":            [label for label, _ in surface.axis_ticks],
            "selection":       [s.key for s in self.visual.selection],
            "bars":            bars,
        }


session = VisualSession()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_viewport(raw) -> Viewport | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise DataViewError("viewport must be an object with width and height")
    try:
        width  = float(raw["width"])
        height = float(raw["height"])
    except (KeyError, TypeError, ValueError) as exc:
        raise DataViewError(f"Invalid viewport: {raw!r}") from exc
    if width < 0 or height < 0:
        raise DataViewError(f"Viewport must not be negative: {raw!r}")
    return Viewport(width, height)


def _selection_payload() -> dict:
    return {
        "selection": [s.key for s in session.visual.selection],
        "opacities": [bar.opacity for bar in session.visual.surface.bars],
    }


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/api/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/api/update")
def update(payload: dict = Body(...)) -> dict:
    try:
        data_view = data_view_from_payload(payload.get("dataView"))
        viewport  = _parse_viewport(payload.get("viewport"))
    except DataViewError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return session.render(data_view, viewport)


@app.post("/api/upload")
def upload(
    category: str          = Form(...),
    value:    str          = Form(...),
    width:    float | None = Form(default=None),
    height:   float | None = Form(default=None),
    file:     UploadFile   = File(...),
) -> dict:
    filename  = file.filename or ""
    extension = Path(filename).suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type. Upload .csv, .xlsx, or .xls.",
        )
    if extension in {".xlsx", ".xls"} and importlib.util.find_spec("openpyxl") is None:
        raise HTTPException(
            status_code=400,
            detail="Excel upload requires openpyxl, which is not installed. Upload a CSV instead.",
        )

    viewport = None
    if width is not None and height is not None:
        viewport = Viewport(width, height)

    with tempfile.TemporaryDirectory() as tmp_dir:
        upload_path = Path(tmp_dir) / f"input{extension}"
        try:
            with upload_path.open("wb") as dest:
                shutil.copyfileobj(file.file, dest)
        finally:
            file.file.close()
        try:
            frame = load_frame(str(upload_path))
            data_view = data_view_from_frame(frame, category, value)
        except DataViewError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except Exception as exc:
            raise HTTPException(status_code=400, detail=f"Could not read upload: {exc}") from exc

    logger.info("Upload %s: %d categories", filename, len(data_view.categorical.categories[0].values))
    return session.render(data_view, viewport)


@app.get("/api/chart.svg")
def chart_svg() -> Response:
    return Response(content=session.visual.surface.to_svg(), media_type="image/svg+xml")


@app.post("/api/bars/{index}/click")
async def click_bar(index: int) -> dict:
    bars = session.visual.surface.bars
    if index < 0 or index >= len(bars):
        raise HTTPException(status_code=404, detail="Bar not found.")
    if not session.host.allow_interactions:
        raise HTTPException(status_code=409, detail="Interactions are disabled for this view.")

    session.visual.pending_click = None
    session.visual.surface.click(bars[index])
    if session.visual.pending_click is not None:
        await session.visual.pending_click
    return _selection_payload()


@app.post("/api/background/click")
async def click_background() -> dict:
    session.visual.pending_click = None
    session.visual.surface.click_background()
    if session.visual.pending_click is not None:
        await session.visual.pending_click
    return _selection_payload()


@app.get("/api/objects/{object_name}")
def enumerate_objects(object_name: str) -> dict:
    return {"items": session.visual.enumerate_object_instances(object_name)}


@app.post("/api/objects")
def persist_objects(changes: dict = Body(...)) -> dict:
    session.host.persist_properties(changes)
    logger.info("Persisted property groups: %s", sorted(changes))
    if session.data_view is None:
        return session.render(None)
    session.data_view.metadata.objects = session.host.objects
    return session.render(session.data_view)
