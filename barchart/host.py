"""
host.py — In-process stand-in for the analytics host.

Supplies what the visual expects from its host: the colour palette, the
selection-id builder, the selection manager, the interactivity flag, the
locale, and persistence of property-panel objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .config import PALETTE, resolve_allow_interactions, resolve_locale
from .dataview import CategoryColumn
from .model import SelectionId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaletteColor:
    value: str


class ColorPalette:
    """Stable key -> colour assignment; keys are served in first-request order."""

    def __init__(self, colors: list[str] | None = None):
        self._colors = list(colors or PALETTE)
        self._assigned: dict[str, PaletteColor] = {}

    def get_color(self, key: str) -> PaletteColor:
        color = self._assigned.get(key)
        if color is None:
            color = PaletteColor(self._colors[len(self._assigned) % len(self._colors)])
            self._assigned[key] = color
        return color

    def reset(self) -> None:
        self._assigned.clear()


class SelectionIdBuilder:
    def __init__(self):
        self._query_name = ""
        self._identity: Any = None

    def with_category(self, category: CategoryColumn, index: int) -> "SelectionIdBuilder":
        # Identity follows the category value, so equal categories share an id
        self._query_name = category.source.query_name if category.source else ""
        self._identity = category.values[index] if 0 <= index < len(category.values) else None
        return self

    def create_selection_id(self) -> SelectionId:
        return SelectionId(query_name=self._query_name, identity=self._identity)


class SelectionManager:
    def __init__(self):
        self._selected: list[SelectionId] = []

    async def select(self, selection_id: SelectionId, multi_select: bool = False) -> list[SelectionId]:
        if multi_select:
            if selection_id in self._selected:
                self._selected.remove(selection_id)
            else:
                self._selected.append(selection_id)
        elif self._selected == [selection_id]:
            self._selected = []
        else:
            self._selected = [selection_id]
        logger.debug("Selection is now %s", [s.key for s in self._selected])
        return list(self._selected)

    async def clear(self) -> list[SelectionId]:
        self._selected = []
        return []

    def get_selection_ids(self) -> list[SelectionId]:
        return list(self._selected)


class LocalHost:
    def __init__(
        self,
        palette: ColorPalette | None = None,
        allow_interactions: bool | None = None,
        locale: str | None = None,
        objects: dict | None = None,
    ):
        self.color_palette = palette or ColorPalette()
        self.allow_interactions = (
            resolve_allow_interactions() if allow_interactions is None else allow_interactions
        )
        self.locale = locale or resolve_locale()
        self.objects: dict = {group: dict(props) for group, props in (objects or {}).items()}

    def create_selection_id_builder(self) -> SelectionIdBuilder:
        return SelectionIdBuilder()

    def create_selection_manager(self) -> SelectionManager:
        return SelectionManager()

    def persist_properties(self, changes: dict) -> dict:
        """Merge property-panel changes (group -> property -> value) into the stored objects."""
        for group, props in changes.items():
            if not isinstance(props, dict):
                logger.warning("Ignoring persisted group %r: expected an object", group)
                continue
            self.objects.setdefault(group, {}).update(props)
        return self.objects
