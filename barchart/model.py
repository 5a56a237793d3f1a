"""Typed view model shared by the transform and the visual."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SelectionId:
    """Opaque identity issued by the host for one category row.

    Equality is by value; the visual passes it through and never builds one
    itself.
    """

    query_name: str
    identity: Any

    @property
    def key(self) -> str:
        return f"{self.query_name}={self.identity}"

    def get_selector(self) -> dict:
        return {"data": [{"queryName": self.query_name, "identity": self.identity}]}


@dataclass(frozen=True)
class AxisSettings:
    show: bool = False


@dataclass(frozen=True)
class GeneralViewSettings:
    opacity: float = 100
    show_help_link: bool = False


@dataclass(frozen=True)
class Settings:
    enable_axis:  AxisSettings        = field(default_factory=AxisSettings)
    general_view: GeneralViewSettings = field(default_factory=GeneralViewSettings)

    def to_dict(self) -> dict:
        return {
            "enableAxis":  {"show": self.enable_axis.show},
            "generalView": {
                "opacity":      self.general_view.opacity,
                "showHelpLink": self.general_view.show_help_link,
            },
        }


@dataclass(frozen=True)
class DataPoint:
    value:        float | None
    category:     str
    color:        str
    selection_id: SelectionId


@dataclass(frozen=True)
class ViewModel:
    data_points: tuple[DataPoint, ...] = ()
    data_max:    float = 0
    settings:    Settings = field(default_factory=Settings)


@dataclass(frozen=True)
class Viewport:
    width:  float
    height: float


@dataclass
class VisualUpdateOptions:
    """What the host hands to `Visual.update` on every redraw."""

    viewport:   Viewport
    data_views: list = field(default_factory=list)
