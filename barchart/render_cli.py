"""
render_cli.py — Render a bar chart SVG from a CSV/Excel file.

Usage:
    python -m barchart.render_cli \
        --data     sales.csv \
        --category region \
        --value    revenue \
        --output   chart.svg \
        --settings '{"enableAxis": {"show": true}, "generalView": {"opacity": 80}}'

Settings use the property-panel layout (group -> property -> value); absent
fields keep their defaults.
"""

import argparse
import json
import sys

import matplotlib
matplotlib.use("Agg")

from .config import resolve_viewport_height, resolve_viewport_width
from .dataview import DataViewError, data_view_from_frame, load_frame
from .host import LocalHost
from .model import Viewport, VisualUpdateOptions
from .visual import Visual

TOOL = "render_bar_chart"


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument("--data",     required=True)
    parser.add_argument("--category", required=True)
    parser.add_argument("--value",    required=True)
    parser.add_argument("--output",   required=True)
    parser.add_argument("--width",    type=float, default=resolve_viewport_width())
    parser.add_argument("--height",   type=float, default=resolve_viewport_height())
    parser.add_argument("--settings", default="{}")
    args = parser.parse_args(argv)

    try:
        objects = json.loads(args.settings)
    except json.JSONDecodeError as exc:
        print(f"[{TOOL}] ERROR: --settings is not valid JSON: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(objects, dict):
        print(f"[{TOOL}] ERROR: --settings must be a JSON object. Got: {objects!r}", file=sys.stderr)
        sys.exit(1)

    try:
        frame = load_frame(args.data)
        data_view = data_view_from_frame(frame, args.category, args.value, objects=objects)
    except (DataViewError, OSError) as exc:
        print(f"[{TOOL}] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    visual = Visual(LocalHost(allow_interactions=False))
    visual.update(VisualUpdateOptions(
        viewport=Viewport(args.width, args.height),
        data_views=[data_view],
    ))

    bar_count = len(visual.surface.bars)
    with open(args.output, "wb") as f:
        f.write(visual.surface.to_svg())
    visual.destroy()
    print(f"[{TOOL}] saved: {args.output} ({bar_count} bars)")


if __name__ == "__main__":
    main()
