"""
config.py — Layout constants and environment-driven defaults.

Environment variables (a local .env is loaded without overriding the process):
    BARCHART_VIEWPORT_WIDTH      default viewport width in px  (default 640)
    BARCHART_VIEWPORT_HEIGHT     default viewport height in px (default 300)
    BARCHART_ALLOW_INTERACTIONS  "1"/"true"/"yes" enables click-to-filter (default on)
    BARCHART_LOCALE              host locale string (default "en-US")
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env", override=False)

DEFAULT_VIEWPORT_WIDTH  = 640
DEFAULT_VIEWPORT_HEIGHT = 300
DEFAULT_LOCALE          = "en-US"

# Theme colours shared by the palette and the surface
BG      = "#ffffff"
MUTED   = "#605e5c"
BORDER  = "#c8c6c4"
PALETTE = ["#01b8aa","#374649","#fd625e","#f2c80f","#5f6b6d","#8ad4eb","#fe9666","#a66999","#3599b8","#dfbfbf"]
DPI     = 100


@dataclass(frozen=True)
class Margins:
    top:    int = 0
    right:  int = 0
    bottom: int = 25
    left:   int = 30


@dataclass(frozen=True)
class VisualConfig:
    x_scale_padding:         float = 0.1
    x_scale_outer_padding:   float = 0.2
    solid_opacity:           float = 1.0
    transparent_opacity:     float = 0.5
    margins:                 Margins = field(default_factory=Margins)
    x_axis_font_multiplier:  float = 0.04


CONFIG = VisualConfig()


def _resolve_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    return value


def resolve_viewport_width() -> int:
    return _resolve_int("BARCHART_VIEWPORT_WIDTH", DEFAULT_VIEWPORT_WIDTH)


def resolve_viewport_height() -> int:
    return _resolve_int("BARCHART_VIEWPORT_HEIGHT", DEFAULT_VIEWPORT_HEIGHT)


def resolve_allow_interactions() -> bool:
    raw = (os.getenv("BARCHART_ALLOW_INTERACTIONS") or "").strip().lower()
    if not raw:
        return True
    return raw in {"1", "true", "yes", "on"}


def resolve_locale() -> str:
    return (os.getenv("BARCHART_LOCALE") or DEFAULT_LOCALE).strip()
