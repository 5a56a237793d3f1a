"""Categorical bar chart visual: data view -> view model -> reconciled bars."""

from .model import DataPoint, SelectionId, Settings, ViewModel, Viewport, VisualUpdateOptions
from .transform import visual_transform
from .visual import Visual

__all__ = [
    "DataPoint",
    "SelectionId",
    "Settings",
    "ViewModel",
    "Viewport",
    "Visual",
    "VisualUpdateOptions",
    "visual_transform",
]
