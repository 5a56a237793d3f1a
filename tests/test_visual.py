"""Update path: scales, keyed bar reconciliation, axis, help link."""

from __future__ import annotations

import pytest

from barchart.model import Viewport, VisualUpdateOptions


def test_update_draws_one_bar_per_data_point(visual, make_options) -> None:
    visual.update(make_options(["A", "B"], [50, 100], max_local=100))

    assert len(visual.surface.bars) == 2
    assert [bar.key for bar in visual.surface.bars] == [dp.selection_id for dp in visual.data_points]


def test_bar_geometry_follows_the_scales(visual, make_options) -> None:
    visual.update(make_options(["A", "B"], [50, 100], max_local=100))
    a, b = visual.surface.geometry()

    assert (a.x, a.y, a.width, a.height) == (53, 150, 234, 150)
    assert (b.x, b.y, b.width, b.height) == (313, 0, 234, 300)
    assert a.fill == visual.data_points[0].color
    assert a.fill_opacity == 1.0


def test_axis_reserves_the_bottom_margin(visual, make_options) -> None:
    objects = {"enableAxis": {"show": True}}
    visual.update(make_options(["A", "B"], [50, 100], height=300, max_local=100, objects=objects))
    _, b = visual.surface.geometry()

    assert b.height == 275
    assert visual.surface.axis_offset == 275
    assert visual.surface.axis_font_size == pytest.approx(min(275, 600) * 0.04)


def test_axis_sits_at_the_viewport_bottom_when_hidden(visual, make_options) -> None:
    visual.update(make_options(["A", "B"], [50, 100], height=300, max_local=100))

    assert visual.surface.axis_offset == 300


def test_axis_labels_are_centered_on_bands(visual, make_options) -> None:
    visual.update(make_options(["A", "B"], [1, 2]))

    assert visual.surface.axis_ticks == [("A", 53 + 117), ("B", 313 + 117)]


def test_general_view_opacity_applies_to_every_bar(visual, make_options) -> None:
    visual.update(make_options(["A", "B"], [1, 2], objects={"generalView": {"opacity": 40}}))

    assert {g.fill_opacity for g in visual.surface.geometry()} == {0.4}


def test_help_link_visibility_tracks_settings(visual, make_options) -> None:
    visual.update(make_options(["A"], [1], objects={"generalView": {"showHelpLink": True}}))
    assert visual.surface.help_link_visible is True

    visual.update(make_options(["A"], [1]))
    assert visual.surface.help_link_visible is False


def test_update_is_idempotent(visual, make_options) -> None:
    options = make_options(["A", "B", "C"], [3, 1, 2])
    visual.update(options)
    first = visual.surface.geometry()
    bars = list(visual.surface.bars)

    visual.update(options)

    assert visual.surface.geometry() == first
    assert all(x is y for x, y in zip(visual.surface.bars, bars))


def test_bars_are_reconciled_by_selection_id(visual, make_options) -> None:
    visual.update(make_options(["A", "B"], [1, 2]))
    bar_a = visual.surface.bars[0]
    bar_b = visual.surface.bars[1]
    patch_b = bar_b.patch

    visual.update(make_options(["B", "C"], [5, 3]))

    assert len(visual.surface.bars) == 2
    assert visual.surface.bars[0] is bar_b
    assert bar_b.patch is patch_b
    assert bar_b.datum.value == 5
    assert bar_a not in visual.surface.bars
    assert bar_a.patch.axes is None
    assert visual.surface.bars[1].datum.category == "C"
    assert len(visual.surface.ax.patches) == 2


def test_reordering_keeps_bar_handles(visual, make_options) -> None:
    visual.update(make_options(["A", "B", "C"], [1, 2, 3]))
    by_category = {bar.datum.category: bar for bar in visual.surface.bars}

    visual.update(make_options(["C", "A", "B"], [3, 1, 2]))

    assert [bar.datum.category for bar in visual.surface.bars] == ["C", "A", "B"]
    assert all(by_category[bar.datum.category] is bar for bar in visual.surface.bars)


def test_repeated_categories_still_get_one_bar_each(visual, make_options) -> None:
    visual.update(make_options(["a", "b", "a"], [1, 2, 3]))

    assert len(visual.surface.bars) == 3
    assert len(visual.surface.axis_ticks) == 2

    visual.update(make_options(["a", "b"], [1, 2]))
    assert len(visual.surface.bars) == 2


def test_empty_data_clears_bars_and_axis(visual, make_options) -> None:
    visual.update(make_options(["A", "B"], [1, 2]))

    visual.update(VisualUpdateOptions(viewport=Viewport(600, 300), data_views=[]))

    assert visual.surface.bars == []
    assert len(visual.surface.ax.patches) == 0
    assert visual.surface.axis_ticks == []
    assert visual.data_points == ()


def test_missing_values_draw_flat_bars(visual, make_options) -> None:
    visual.update(make_options(["a", "b"], [4], max_local=4))
    flat = visual.surface.geometry()[1]

    assert flat.height == 0
    assert flat.y == 300


def test_svg_output_carries_bar_ids(visual, make_options) -> None:
    visual.update(make_options(["A", "B"], [1, 2]))

    svg = visual.surface.to_svg().decode("utf-8")

    assert "<svg" in svg
    for bar in visual.surface.bars:
        assert bar.key.key in svg


def test_importing_the_surface_leaves_the_backend_alone(monkeypatch) -> None:
    import importlib

    import matplotlib

    import barchart.surface

    calls = []
    monkeypatch.setattr(matplotlib, "use", lambda *args, **kwargs: calls.append(args))

    importlib.reload(barchart.surface)

    assert calls == []
