"""Data view + host services -> ViewModel."""

from __future__ import annotations

from typing import Any

from .model import DataPoint, ViewModel
from .settings import get_categorical_object_value, parse_settings


def _category_label(value: Any) -> str:
    return "" if value is None else str(value)


def _numeric(value: Any) -> float | None:
    if value is None or isinstance(value, (int, float)):
        return value
    return float(value)


def visual_transform(data_views: list | None, host) -> ViewModel:
    """
    Build the view model for one update.

    Missing data degrades to the empty ViewModel rather than raising. When the
    category and value columns differ in length the shorter side reads as
    null: an empty category label or a ``None`` value.
    """
    if (not data_views
            or data_views[0] is None
            or data_views[0].categorical is None
            or not data_views[0].categorical.categories
            or data_views[0].categorical.categories[0].source is None
            or not data_views[0].categorical.values):
        return ViewModel()

    data_view   = data_views[0]
    category    = data_view.categorical.categories[0]
    data_value  = data_view.categorical.values[0]
    if not category.values or not data_value.values:
        return ViewModel()

    settings = parse_settings(data_view.metadata.objects if data_view.metadata else None)
    palette  = host.color_palette

    data_points = []
    for i in range(max(len(category.values), len(data_value.values))):
        raw_category = category.values[i] if i < len(category.values) else None
        raw_value    = data_value.values[i] if i < len(data_value.values) else None
        label        = _category_label(raw_category)

        default_fill = {"solid": {"color": palette.get_color(label).value}}
        fill = get_categorical_object_value(category, i, "colorSelector", "fill", default_fill)

        solid = fill.get("solid") if isinstance(fill, dict) else None
        color = solid.get("color") if isinstance(solid, dict) else None
        if not isinstance(color, str):
            color = default_fill["solid"]["color"]

        data_points.append(DataPoint(
            value=_numeric(raw_value),
            category=label,
            color=color,
            selection_id=host.create_selection_id_builder()
                .with_category(category, i)
                .create_selection_id(),
        ))

    return ViewModel(
        data_points=tuple(data_points),
        data_max=data_value.max_local,
        settings=settings,
    )
