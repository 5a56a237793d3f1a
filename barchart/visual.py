"""
visual.py — The bar chart visual: update, click-to-filter, property enumeration.

One `Visual` lives as long as its host container. It keeps the drawing
surface between updates and diffs bars by selection id, so a bar handle
survives reordering and filtering. Selection highlighting is driven by the
host's selection manager; the host's answer is authoritative.
"""

from __future__ import annotations

import asyncio
import logging

from .config import CONFIG
from .model import DataPoint, Settings, VisualUpdateOptions
from .scales import BandScale, LinearScale
from .settings import DEFAULT_SETTINGS, OPACITY_MAX, OPACITY_MIN
from .surface import Bar, BarSurface, ClickEvent
from .transform import visual_transform

logger = logging.getLogger(__name__)


class Visual:
    def __init__(self, host, surface: BarSurface | None = None):
        self.host = host
        self.selection_manager = host.create_selection_manager()
        self.locale = host.locale
        self.surface = surface or BarSurface()
        self.surface.on_container_click(self._on_container_click)

        self.settings: Settings = DEFAULT_SETTINGS
        self.data_points: tuple[DataPoint, ...] = ()
        self.selection: list = []
        self.pending_click: asyncio.Task | None = None
        self._click_tasks: set[asyncio.Task] = set()
        self._click_generation = 0

    # ── Update ────────────────────────────────────────────────────────────────

    def update(self, options: VisualUpdateOptions) -> None:
        view_model = visual_transform(options.data_views, self.host)
        settings = self.settings = view_model.settings
        self.data_points = view_model.data_points
        self.selection = []

        width  = options.viewport.width
        height = options.viewport.height
        self.surface.resize(width, height)

        if settings.enable_axis.show:
            height -= CONFIG.margins.bottom

        self.surface.show_help_link(settings.general_view.show_help_link)

        y_scale = LinearScale((0, view_model.data_max), (height, 0))
        x_scale = BandScale(
            [dp.category for dp in view_model.data_points],
            (0, width),
            CONFIG.x_scale_padding,
            CONFIG.x_scale_outer_padding,
        )

        entered, removed = self._reconcile(
            view_model.data_points, x_scale, y_scale, height, settings.general_view.opacity / 100,
        )

        self.surface.render_axis(
            [(category, x + x_scale.bandwidth / 2) for category, x in x_scale.positions()],
            (0, width),
            height,
            min(height, width) * CONFIG.x_axis_font_multiplier,
        )

        logger.info(
            "Rendered %d bars on %sx%s (entered=%d removed=%d axis=%s)",
            len(self.surface.bars), width, options.viewport.height, entered, removed,
            settings.enable_axis.show,
        )

    def _reconcile(self, data_points, x_scale, y_scale, height, opacity) -> tuple[int, int]:
        """Match bars to data points by selection id; repeated ids pair up in order."""
        previous: dict = {}
        for bar in self.surface.bars:
            previous.setdefault(bar.key, []).append(bar)

        bars: list[Bar] = []
        entered = 0
        for dp in data_points:
            matches = previous.get(dp.selection_id)
            if matches:
                bar = matches.pop(0)
                bar.datum = dp
            else:
                bar = self.surface.enter(dp.selection_id, dp)
                bar.on_click = self._bind_click(bar)
                entered += 1

            y = y_scale(dp.value)
            self.surface.set_geometry(
                bar,
                x=x_scale(dp.category),
                y=y,
                width=x_scale.bandwidth,
                height=height - y,
                fill=dp.color,
                opacity=opacity,
            )
            bars.append(bar)

        removed = 0
        for leftovers in previous.values():
            for bar in leftovers:
                self.surface.remove(bar)
                removed += 1

        self.surface.reorder(bars)
        logger.debug("Reconciled bars: %d entered, %d removed", entered, removed)
        return entered, removed

    # ── Selection ─────────────────────────────────────────────────────────────

    def _bind_click(self, bar: Bar):
        def handle(event: ClickEvent) -> None:
            # Re-checked per click: the host may switch modes between updates
            if not self.host.allow_interactions:
                return
            event.stop_propagation()
            self._schedule(self.on_bar_click(bar))
        return handle

    def _on_container_click(self, event: ClickEvent) -> None:
        if not self.host.allow_interactions:
            return
        self._schedule(self.clear_selection())

    def _schedule(self, coro) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._click_tasks.add(task)
        task.add_done_callback(self._click_tasks.discard)
        self.pending_click = task

    async def on_bar_click(self, bar: Bar) -> list | None:
        """
        Ask the host to toggle the bar's selection and restyle once it answers.

        A later click supersedes an earlier one still in flight: only the most
        recent answer is applied. A failed host call leaves the bars untouched.
        """
        if not self.host.allow_interactions:
            return None

        self._click_generation += 1
        generation = self._click_generation
        selection_id = bar.datum.selection_id

        try:
            ids = await self.selection_manager.select(selection_id)
        except Exception:
            logger.warning("Selection of %s failed; bars left unchanged", selection_id.key, exc_info=True)
            return None

        if generation != self._click_generation:
            logger.debug("Discarding stale selection answer for %s", selection_id.key)
            return None

        self.apply_selection(ids, clicked=bar)
        return ids

    async def clear_selection(self) -> list | None:
        """Clear through the host. Same latest-wins and failure rules as a bar click."""
        self._click_generation += 1
        generation = self._click_generation

        try:
            ids = await self.selection_manager.clear()
        except Exception:
            logger.warning("Clearing the selection failed; bars left unchanged", exc_info=True)
            return None

        if generation != self._click_generation:
            logger.debug("Discarding stale clear answer")
            return None

        self.apply_selection(ids)
        return ids

    def apply_selection(self, ids: list, clicked: Bar | None = None) -> None:
        """Full opacity for everything when nothing is selected, else only for the clicked and selected bars."""
        selected = set(ids)
        self.selection = list(ids)
        for bar in self.surface.bars:
            if not selected or bar is clicked or bar.key in selected:
                opacity = CONFIG.solid_opacity
            else:
                opacity = CONFIG.transparent_opacity
            self.surface.set_opacity(bar, opacity)

    # ── Property panel ────────────────────────────────────────────────────────

    def enumerate_object_instances(self, object_name: str) -> list[dict]:
        settings = self.settings
        instances: list[dict] = []

        if object_name == "enableAxis":
            instances.append({
                "objectName": object_name,
                "properties": {"show": settings.enable_axis.show},
                "selector":   None,
            })
        elif object_name == "colorSelector":
            for dp in self.data_points:
                instances.append({
                    "objectName":  object_name,
                    "displayName": dp.category,
                    "properties":  {"fill": {"solid": {"color": dp.color}}},
                    "selector":    dp.selection_id.get_selector(),
                })
        elif object_name == "generalView":
            instances.append({
                "objectName": object_name,
                "properties": {
                    "opacity":      settings.general_view.opacity,
                    "showHelpLink": settings.general_view.show_help_link,
                },
                "validValues": {
                    "opacity": {"numberRange": {"min": OPACITY_MIN, "max": OPACITY_MAX}},
                },
                "selector": None,
            })

        return instances

    def destroy(self) -> None:
        self.surface.close()
