# radar_inputs.py
# Where magnitudes come from: a query string (?koerper_bewegung=7&...) or a
# spreadsheet with one row per chart and one column per category.
# Everything that leaves here is already an int in [0, max_level].

from pathlib import Path
from typing import List, Mapping, Sequence, Tuple
from urllib.parse import parse_qs

import pandas as pd

from radar_config import CONFIG, Category
from radar_layout import clamp_magnitude


def coerce_magnitude(raw, max_level: int = CONFIG.max_level, default: int = CONFIG.default_magnitude) -> int:
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return clamp_magnitude(default, max_level, default)
    return clamp_magnitude(raw, max_level, default)


def _first_value(params: Mapping, key: str):
    v = params.get(key)
    if isinstance(v, (list, tuple)):
        return v[0] if v else None
    return v


def parse_query(
    query,
    categories: Sequence[Category],
    max_level: int = CONFIG.max_level,
    default: int = CONFIG.default_magnitude,
) -> List[int]:
    """
    One magnitude per category from a query string or a mapping of parameters.
    The canonical key wins; otherwise the first alias that is present is used.
    Missing or non-numeric values fall back to `default`.
    """
    if isinstance(query, str):
        params = parse_qs(query.lstrip("?"), keep_blank_values=True)
    else:
        params = dict(query or {})

    out: List[int] = []
    for cat in categories:
        raw = None
        for name in (cat.key, *cat.aliases):
            raw = _first_value(params, name)
            if raw is not None:
                break
        out.append(coerce_magnitude(raw, max_level, default))
    return out


def _column_for(cat: Category, columns: Sequence[str]):
    by_norm = {str(c).strip().lower(): c for c in columns}
    for name in (cat.key, *cat.aliases, cat.label):
        hit = by_norm.get(str(name).strip().lower())
        if hit is not None:
            return hit
    return None


def read_sheet(path: str, sheet_name: str | None = None) -> pd.DataFrame:
    if Path(path).suffix.lower() == ".csv":
        return pd.read_csv(path)
    return pd.read_excel(path, sheet_name=sheet_name or 0)


def magnitudes_from_frame(
    df: pd.DataFrame,
    categories: Sequence[Category],
    name_col: str = "Name",
    max_level: int = CONFIG.max_level,
    default: int = CONFIG.default_magnitude,
) -> List[Tuple[str, List[int]]]:
    cols = [_column_for(cat, list(df.columns)) for cat in categories]
    missing = [cat.key for cat, col in zip(categories, cols) if col is None]
    if missing:
        raise ValueError(
            f"Missing category column(s) {missing}. Columns present: {list(df.columns)}"
        )

    rows: List[Tuple[str, List[int]]] = []
    for i, rec in enumerate(df.to_dict("records")):
        name = rec.get(name_col) if name_col in df.columns else None
        name = str(name).strip() if name is not None and not pd.isna(name) else f"chart_{i + 1}"
        rows.append((name, [coerce_magnitude(rec[c], max_level, default) for c in cols]))
    return rows


def magnitudes_from_sheet(
    path: str,
    categories: Sequence[Category],
    sheet_name: str | None = None,
    name_col: str = "Name",
    max_level: int = CONFIG.max_level,
    default: int = CONFIG.default_magnitude,
) -> List[Tuple[str, List[int]]]:
    df = read_sheet(path, sheet_name)
    return magnitudes_from_frame(df, categories, name_col, max_level, default)
