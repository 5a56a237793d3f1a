"""Settings resolution from host-persisted objects (group -> property -> value)."""

from __future__ import annotations

import logging
from typing import Any

from .dataview import CategoryColumn
from .model import AxisSettings, GeneralViewSettings, Settings

OPACITY_MIN = 10
OPACITY_MAX = 100

DEFAULT_SETTINGS = Settings()

logger = logging.getLogger(__name__)


def get_value(objects: dict | None, object_name: str, property_name: str, default: Any) -> Any:
    if objects:
        group = objects.get(object_name)
        if isinstance(group, dict) and property_name in group:
            return group[property_name]
    return default


def get_categorical_object_value(
    category: CategoryColumn,
    index: int,
    object_name: str,
    property_name: str,
    default: Any,
) -> Any:
    objects = category.objects
    if objects and 0 <= index < len(objects):
        row = objects[index]
        if isinstance(row, dict):
            return get_value(row, object_name, property_name, default)
    return default


def _bool(value: Any, default: bool, name: str) -> bool:
    if isinstance(value, bool):
        return value
    logger.warning("Ignoring %s=%r (expected a boolean)", name, value)
    return default


def _opacity(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning("Ignoring generalView.opacity=%r (expected a number)", value)
        return default
    if not OPACITY_MIN <= value <= OPACITY_MAX:
        logger.warning(
            "Ignoring generalView.opacity=%r (outside %d..%d)", value, OPACITY_MIN, OPACITY_MAX,
        )
        return default
    return value


def parse_settings(objects: dict | None) -> Settings:
    """Each field independently falls back to its default when absent or malformed."""
    axis    = DEFAULT_SETTINGS.enable_axis
    general = DEFAULT_SETTINGS.general_view

    show = get_value(objects, "enableAxis", "show", axis.show)
    opacity = get_value(objects, "generalView", "opacity", general.opacity)
    show_help_link = get_value(objects, "generalView", "showHelpLink", general.show_help_link)

    return Settings(
        enable_axis=AxisSettings(show=_bool(show, axis.show, "enableAxis.show")),
        general_view=GeneralViewSettings(
            opacity=_opacity(opacity, general.opacity),
            show_help_link=_bool(show_help_link, general.show_help_link, "generalView.showHelpLink"),
        ),
    )
