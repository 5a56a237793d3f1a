"""
dataview.py — Categorical data view handed over by the host.

Three ways in:
    data_view_from_payload(dict)        JSON wire layout used by the HTTP service
    data_view_from_frame(df, cat, val)  pandas DataFrame grouped per category
    load_frame(path)                    CSV / Excel file -> DataFrame

Wire layout:
    {
      "categorical": {
        "categories": [{"source": {"displayName": "Region", "queryName": "Sales.Region"},
                        "values": ["North", "South"],
                        "objects": [null, {"colorSelector": {"fill": {"solid": {"color": "#ff0000"}}}}]}],
        "values":     [{"source": {"displayName": "Revenue", "queryName": "Sum(Sales.Revenue)"},
                        "values": [120, 80],
                        "maxLocal": 120}]
      },
      "metadata": {"objects": {"enableAxis": {"show": true}}}
    }

Any section may be absent: a missing column is the "no data" state, not an
error. Structurally wrong payloads raise DataViewError.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class DataViewError(ValueError):
    pass


@dataclass(frozen=True)
class DataViewMetadataColumn:
    display_name: str
    query_name:   str
    roles:        dict = field(default_factory=dict)


@dataclass
class CategoryColumn:
    source:  DataViewMetadataColumn | None
    values:  list
    objects: list | None = None


@dataclass
class ValueColumn:
    source:    DataViewMetadataColumn | None
    values:    list
    max_local: float = 0


@dataclass
class CategoricalData:
    categories: list[CategoryColumn] | None = None
    values:     list[ValueColumn] | None = None


@dataclass
class DataViewMetadata:
    objects: dict | None = None


@dataclass
class DataView:
    categorical: CategoricalData | None = None
    metadata:    DataViewMetadata = field(default_factory=DataViewMetadata)


# ---------------------------------------------------------------------------
# JSON payload
# ---------------------------------------------------------------------------

def _expect(value: Any, kind: type | tuple[type, ...], where: str) -> Any:
    if not isinstance(value, kind):
        raise DataViewError(f"{where} has the wrong type: {type(value).__name__}")
    return value


def _parse_source(raw: Any, where: str) -> DataViewMetadataColumn | None:
    if raw is None:
        return None
    _expect(raw, dict, where)
    display_name = str(raw.get("displayName") or "")
    query_name   = str(raw.get("queryName") or display_name)
    roles        = raw.get("roles") or {}
    return DataViewMetadataColumn(display_name=display_name, query_name=query_name, roles=dict(roles))


def _parse_category(raw: Any, index: int) -> CategoryColumn:
    where = f"categorical.categories[{index}]"
    _expect(raw, dict, where)
    values  = _expect(raw.get("values") or [], list, f"{where}.values")
    objects = raw.get("objects")
    if objects is not None:
        _expect(objects, list, f"{where}.objects")
    return CategoryColumn(
        source=_parse_source(raw.get("source"), f"{where}.source"),
        values=list(values),
        objects=objects,
    )


def _parse_values(raw: Any, index: int) -> ValueColumn:
    where = f"categorical.values[{index}]"
    _expect(raw, dict, where)
    values    = _expect(raw.get("values") or [], list, f"{where}.values")
    max_local = raw.get("maxLocal")
    if max_local is None:
        # Absent or null: the host had nothing to aggregate
        if values:
            logger.warning("%s has values but no maxLocal; bars will be drawn flat", where)
        max_local = 0
    elif isinstance(max_local, bool) or not isinstance(max_local, (int, float)):
        raise DataViewError(f"{where}.maxLocal must be a number, got {max_local!r}")
    return ValueColumn(
        source=_parse_source(raw.get("source"), f"{where}.source"),
        values=list(values),
        max_local=max_local,
    )


def data_view_from_payload(payload: dict | None) -> DataView | None:
    """Parse one data view from its JSON layout. ``None`` passes through."""
    if payload is None:
        return None
    _expect(payload, dict, "dataView")

    categorical = None
    raw_categorical = payload.get("categorical")
    if raw_categorical is not None:
        _expect(raw_categorical, dict, "categorical")
        raw_categories = raw_categorical.get("categories")
        raw_values     = raw_categorical.get("values")
        categories = None
        values     = None
        if raw_categories is not None:
            _expect(raw_categories, list, "categorical.categories")
            categories = [_parse_category(item, i) for i, item in enumerate(raw_categories)]
        if raw_values is not None:
            _expect(raw_values, list, "categorical.values")
            values = [_parse_values(item, i) for i, item in enumerate(raw_values)]
        categorical = CategoricalData(categories=categories, values=values)

    raw_metadata = payload.get("metadata") or {}
    _expect(raw_metadata, dict, "metadata")
    objects = raw_metadata.get("objects")
    if objects is not None:
        _expect(objects, dict, "metadata.objects")

    return DataView(categorical=categorical, metadata=DataViewMetadata(objects=objects))


# ---------------------------------------------------------------------------
# pandas
# ---------------------------------------------------------------------------

def load_frame(path: str) -> pd.DataFrame:
    ext = os.path.splitext(path)[-1].lower()
    if ext == ".csv":
        # Try utf-8 first, fall back to latin-1 for accented characters
        try:
            df = pd.read_csv(path, encoding="utf-8")
        except UnicodeDecodeError:
            df = pd.read_csv(path, encoding="latin-1")
    elif ext in (".xlsx", ".xls"):
        df = pd.read_excel(path)
    else:
        raise DataViewError(f"Unsupported file type: {ext}. Expected .csv, .xlsx, or .xls")

    df.columns = [str(c).strip() for c in df.columns]
    return df


def try_clean_numeric(series: pd.Series) -> pd.Series:
    """
    Strip currency symbols, thousands separators, and whitespace,
    then coerce to float. Returns NaN where conversion fails.
    """
    cleaned = (
        series.astype(str)
        .str.replace(r"[\$,€£¥\s]", "", regex=True)
        .str.replace(r"[^\d.\-]", "", regex=True)
    )
    return pd.to_numeric(cleaned, errors="coerce")


def data_view_from_frame(
    frame: pd.DataFrame,
    category: str,
    value: str,
    colors: dict[str, str] | None = None,
    objects: dict | None = None,
) -> DataView:
    """
    Group ``frame`` by ``category`` (first-seen order) summing ``value``, the
    way the host aggregates a categorical data view. ``colors`` maps a category
    label to a fill override; ``objects`` is the persisted settings blob.
    """
    for col in (category, value):
        if col not in frame.columns:
            raise DataViewError(f"Column '{col}' not in data.")

    df = frame[[category, value]].copy()
    if not pd.api.types.is_numeric_dtype(df[value]):
        df[value] = try_clean_numeric(df[value])
    df = df.dropna(subset=[category, value])

    grouped    = df.groupby(category, sort=False)[value].sum()
    categories = grouped.index.tolist()
    values     = [float(v) for v in grouped.to_numpy(dtype=np.float64)]
    max_local  = float(np.max(values)) if values else 0.0

    row_objects = None
    if colors:
        row_objects = [
            {"colorSelector": {"fill": {"solid": {"color": colors[str(c)]}}}} if str(c) in colors else None
            for c in categories
        ]

    return DataView(
        categorical=CategoricalData(
            categories=[CategoryColumn(
                source=DataViewMetadataColumn(display_name=category, query_name=category),
                values=categories,
                objects=row_objects,
            )],
            values=[ValueColumn(
                source=DataViewMetadataColumn(display_name=value, query_name=f"Sum({value})"),
                values=values,
                max_local=max_local,
            )],
        ),
        metadata=DataViewMetadata(objects=objects),
    )
