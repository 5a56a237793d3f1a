from __future__ import annotations

import pytest

from barchart.dataview import (
    CategoricalData,
    CategoryColumn,
    DataView,
    DataViewMetadata,
    DataViewMetadataColumn,
    ValueColumn,
)
from barchart.host import LocalHost
from barchart.model import Viewport, VisualUpdateOptions
from barchart.visual import Visual


def _make_data_view(
    categories: list,
    values: list,
    max_local: float | None = None,
    objects: dict | None = None,
    row_objects: list | None = None,
    query_name: str = "Sales.Region",
) -> DataView:
    if max_local is None:
        numeric = [v for v in values if isinstance(v, (int, float))]
        max_local = max(numeric) if numeric else 0
    return DataView(
        categorical=CategoricalData(
            categories=[CategoryColumn(
                source=DataViewMetadataColumn(display_name="Region", query_name=query_name),
                values=list(categories),
                objects=row_objects,
            )],
            values=[ValueColumn(
                source=DataViewMetadataColumn(display_name="Revenue", query_name="Sum(Sales.Revenue)"),
                values=list(values),
                max_local=max_local,
            )],
        ),
        metadata=DataViewMetadata(objects=objects),
    )


@pytest.fixture
def make_data_view():
    return _make_data_view


@pytest.fixture
def make_options(make_data_view):
    def factory(categories, values, width=600, height=300, **kwargs) -> VisualUpdateOptions:
        return VisualUpdateOptions(
            viewport=Viewport(width, height),
            data_views=[make_data_view(categories, values, **kwargs)],
        )
    return factory


@pytest.fixture
def host() -> LocalHost:
    return LocalHost(allow_interactions=True, locale="en-US")


@pytest.fixture
def visual(host):
    visual = Visual(host)
    yield visual
    visual.destroy()
