"""
surface.py — Retained-mode drawing surface backed by a matplotlib Figure.

The single axes spans the whole figure in pixel units with the y axis
pointing down, so geometry reads exactly like SVG attributes. Every bar is a
`Bar` handle owning one Rectangle patch; the handle survives across updates
until the visual removes it.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Callable

from matplotlib.colors import to_hex
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.patches import Rectangle

from .config import BG, BORDER, DPI, MUTED

TICK_SIZE    = 6
TICK_PADDING = 3


@dataclass(frozen=True)
class BarGeometry:
    key:          str
    x:            float
    y:            float
    width:        float
    height:       float
    fill:         str
    fill_opacity: float | None


class ClickEvent:
    def __init__(self, bar: "Bar | None" = None):
        self.bar = bar
        self.propagation_stopped = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


class Bar:
    def __init__(self, key, datum, patch: Rectangle):
        self.key = key
        self.datum = datum
        self.patch = patch
        self.on_click: Callable[[ClickEvent], None] | None = None

    @property
    def opacity(self) -> float | None:
        return self.patch.get_alpha()


class BarSurface:
    def __init__(self, dpi: int = DPI):
        self.dpi = dpi
        self.figure = Figure(dpi=dpi, facecolor=BG)
        self.ax = self.figure.add_axes((0, 0, 1, 1))
        self.ax.set_axis_off()
        self.width = 0
        self.height = 0

        self.bars: list[Bar] = []
        self._container_handlers: list[Callable[[ClickEvent], None]] = []

        self._axis_artists: list = []
        self.axis_ticks: list[tuple[str, float]] = []
        self.axis_offset = 0.0
        self.axis_font_size = 0.0

        self.help_link = self.figure.text(
            0.99, 0.99, "?", ha="right", va="top", color=MUTED, fontsize=10, gid="helpLink",
        )
        self.help_link.set_visible(False)

        self.figure.canvas.mpl_connect("pick_event", self._on_pick)

    # ── Layout ────────────────────────────────────────────────────────────────

    def resize(self, width: float, height: float) -> None:
        self.width, self.height = width, height
        self.figure.set_size_inches(max(width, 1) / self.dpi, max(height, 1) / self.dpi)
        self.ax.set_xlim(0, max(width, 1))
        self.ax.set_ylim(max(height, 1), 0)

    def show_help_link(self, visible: bool) -> None:
        self.help_link.set_visible(visible)

    @property
    def help_link_visible(self) -> bool:
        return self.help_link.get_visible()

    # ── Bars ──────────────────────────────────────────────────────────────────

    def enter(self, key, datum) -> Bar:
        patch = Rectangle((0, 0), 0, 0, linewidth=0, picker=True)
        patch.set_gid(getattr(key, "key", str(key)))
        self.ax.add_patch(patch)
        bar = Bar(key, datum, patch)
        self.bars.append(bar)
        return bar

    def remove(self, bar: Bar) -> None:
        bar.patch.remove()
        self.bars.remove(bar)

    def reorder(self, bars: list[Bar]) -> None:
        self.bars = list(bars)

    def bar_for(self, key) -> Bar | None:
        return next((bar for bar in self.bars if bar.key == key), None)

    def set_geometry(self, bar: Bar, *, x, y, width, height, fill, opacity) -> None:
        patch = bar.patch
        patch.set_xy((x, y))
        patch.set_width(width)
        patch.set_height(height)
        patch.set_facecolor(fill)
        patch.set_alpha(opacity)

    def set_opacity(self, bar: Bar, opacity: float) -> None:
        bar.patch.set_alpha(opacity)

    def geometry(self) -> list[BarGeometry]:
        return [
            BarGeometry(
                key=bar.patch.get_gid(),
                x=bar.patch.get_x(),
                y=bar.patch.get_y(),
                width=bar.patch.get_width(),
                height=bar.patch.get_height(),
                fill=to_hex(bar.patch.get_facecolor(), keep_alpha=False),
                fill_opacity=bar.patch.get_alpha(),
            )
            for bar in self.bars
        ]

    # ── Axis ──────────────────────────────────────────────────────────────────

    def render_axis(
        self,
        ticks: list[tuple[str, float]],
        extent: tuple[float, float],
        offset: float,
        font_size: float,
    ) -> None:
        """Replace the category axis: domain path, one tick and label per band centre."""
        for artist in self._axis_artists:
            artist.remove()
        self._axis_artists = []
        self.axis_ticks = list(ticks)
        self.axis_offset = offset
        self.axis_font_size = font_size

        r0, r1 = extent
        domain = Line2D(
            [r0, r0, r1, r1],
            [offset + TICK_SIZE, offset, offset, offset + TICK_SIZE],
            color=BORDER, linewidth=1,
        )
        self.ax.add_line(domain)
        self._axis_artists.append(domain)

        fontsize_pt = font_size * 72 / self.dpi
        for label, x in ticks:
            tick = Line2D([x, x], [offset, offset + TICK_SIZE], color=BORDER, linewidth=1)
            self.ax.add_line(tick)
            text = self.ax.text(
                x, offset + TICK_SIZE + TICK_PADDING, label,
                ha="center", va="top", color=MUTED, fontsize=max(fontsize_pt, 1), clip_on=True,
            )
            self._axis_artists.extend((tick, text))

    # ── Events ────────────────────────────────────────────────────────────────

    def on_container_click(self, handler: Callable[[ClickEvent], None]) -> None:
        self._container_handlers.append(handler)

    def click(self, bar: Bar) -> ClickEvent:
        event = ClickEvent(bar)
        if bar.on_click is not None:
            bar.on_click(event)
        if not event.propagation_stopped:
            for handler in self._container_handlers:
                handler(event)
        return event

    def click_background(self) -> ClickEvent:
        event = ClickEvent()
        for handler in self._container_handlers:
            handler(event)
        return event

    def _on_pick(self, pick_event) -> None:
        bar = next((b for b in self.bars if b.patch is pick_event.artist), None)
        if bar is not None:
            self.click(bar)

    # ── Output ────────────────────────────────────────────────────────────────

    def to_svg(self) -> bytes:
        buf = io.BytesIO()
        self.figure.savefig(buf, format="svg", facecolor=BG)
        return buf.getvalue()

    def close(self) -> None:
        for bar in list(self.bars):
            self.remove(bar)
        self._container_handlers.clear()
        self.figure.clear()
