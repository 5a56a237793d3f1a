from __future__ import annotations

import logging

import pytest

from barchart.dataview import CategoryColumn
from barchart.settings import get_categorical_object_value, get_value, parse_settings


def test_no_objects_gives_the_defaults() -> None:
    assert parse_settings(None).to_dict() == {
        "enableAxis": {"show": False},
        "generalView": {"opacity": 100, "showHelpLink": False},
    }


def test_fields_override_independently() -> None:
    settings = parse_settings({"generalView": {"showHelpLink": True}})

    assert settings.general_view.show_help_link is True
    assert settings.general_view.opacity == 100
    assert settings.enable_axis.show is False


@pytest.mark.parametrize(
    "objects",
    [
        {"enableAxis": {"show": "yes"}},
        {"enableAxis": None},
        {"generalView": {"opacity": "50"}},
        {"generalView": {"opacity": True}},
        {"generalView": {"opacity": 5}},
        {"generalView": {"opacity": 150}},
        {"generalView": {"showHelpLink": 1}},
    ],
)
def test_malformed_values_fall_back_per_field(objects) -> None:
    assert parse_settings(objects) == parse_settings(None)


def test_malformed_values_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="barchart.settings"):
        parse_settings({"generalView": {"opacity": 500}})

    assert "generalView.opacity" in caplog.text


def test_boundary_opacity_is_kept() -> None:
    assert parse_settings({"generalView": {"opacity": 10}}).general_view.opacity == 10
    assert parse_settings({"generalView": {"opacity": 100}}).general_view.opacity == 100


def test_get_value_ignores_missing_groups_and_properties() -> None:
    objects = {"generalView": {"opacity": 70}}

    assert get_value(objects, "generalView", "opacity", 100) == 70
    assert get_value(objects, "generalView", "showHelpLink", False) is False
    assert get_value(objects, "enableAxis", "show", False) is False
    assert get_value(None, "enableAxis", "show", True) is True


def test_categorical_object_value_per_row() -> None:
    column = CategoryColumn(
        source=None,
        values=["a", "b"],
        objects=[{"colorSelector": {"fill": "F"}}, None],
    )

    assert get_categorical_object_value(column, 0, "colorSelector", "fill", "D") == "F"
    assert get_categorical_object_value(column, 1, "colorSelector", "fill", "D") == "D"
    assert get_categorical_object_value(column, 5, "colorSelector", "fill", "D") == "D"
