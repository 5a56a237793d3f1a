from __future__ import annotations


def test_defaults_before_first_update(visual) -> None:
    assert visual.enumerate_object_instances("enableAxis") == [
        {"objectName": "enableAxis", "properties": {"show": False}, "selector": None},
    ]
    assert visual.enumerate_object_instances("colorSelector") == []


def test_general_view_carries_the_opacity_range(visual, make_options) -> None:
    visual.update(make_options(["A"], [1], objects={"generalView": {"opacity": 60, "showHelpLink": True}}))

    [instance] = visual.enumerate_object_instances("generalView")

    assert instance["properties"] == {"opacity": 60, "showHelpLink": True}
    assert instance["validValues"] == {"opacity": {"numberRange": {"min": 10, "max": 100}}}
    assert instance["selector"] is None


def test_color_selector_lists_every_data_point(visual, make_options) -> None:
    row_objects = [{"colorSelector": {"fill": {"solid": {"color": "#123456"}}}}, None]
    visual.update(make_options(["North", "South"], [1, 2], row_objects=row_objects))

    instances = visual.enumerate_object_instances("colorSelector")

    assert [i["displayName"] for i in instances] == ["North", "South"]
    assert instances[0]["properties"] == {"fill": {"solid": {"color": "#123456"}}}
    assert instances[1]["properties"]["fill"]["solid"]["color"] == visual.data_points[1].color
    assert instances[0]["selector"] == {"data": [{"queryName": "Sales.Region", "identity": "North"}]}


def test_enumeration_reflects_the_latest_update(visual, make_options) -> None:
    visual.update(make_options(["A"], [1], objects={"enableAxis": {"show": True}}))
    visual.update(make_options(["A", "B"], [1, 2]))

    assert visual.enumerate_object_instances("enableAxis")[0]["properties"] == {"show": False}
    assert len(visual.enumerate_object_instances("colorSelector")) == 2


def test_unknown_object_name(visual) -> None:
    assert visual.enumerate_object_instances("tooltips") == []
