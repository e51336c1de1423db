"""Column profiling for the dataset dashboard."""
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from services.tabular import Dataset

NUMERIC_RATIO = 0.7
TOP_K = 5
SAMPLE_SIZE = 5


def profile_dataset(dataset: Dataset) -> Dict[str, Any]:
    """Profile every column of a parsed dataset.

    Returns a plain dict ready to serialize as the dashboard payload.
    """
    column_stats: Dict[str, Dict[str, Any]] = {}
    numeric_columns: List[str] = []
    categorical_columns: List[str] = []
    missing_counts: Dict[str, int] = {}

    for col in dataset.columns:
        s = pd.Series([row[col] for row in dataset.rows], dtype=object)
        values = s[s != ""]
        missing_counts[col] = int(len(s) - len(values))

        numbers = _finite_numbers(values)
        if _is_numeric(len(numbers), len(values)):
            numeric_columns.append(col)
            column_stats[col] = _numeric_profile(col, numbers)
        else:
            categorical_columns.append(col)
            column_stats[col] = _categorical_profile(col, values)

    return {
        "total_rows":          dataset.total_rows,
        "total_columns":       len(dataset.columns),
        "profiled_rows":       len(dataset.rows),
        "columns":             list(dataset.columns),
        "numeric_columns":     numeric_columns,
        "categorical_columns": categorical_columns,
        "sample_rows":         dataset.rows[:SAMPLE_SIZE],
        "missing_counts":      missing_counts,
        "column_stats":        column_stats,
    }


def _is_numeric(numeric_count: int, value_count: int) -> bool:
    # numeric_count / value_count > 0.7, kept in integers so 0.7 itself is not numeric
    return value_count > 0 and numeric_count * 10 > value_count * int(NUMERIC_RATIO * 10)


def _finite_numbers(values: pd.Series) -> pd.Series:
    if values.empty:
        return pd.Series([], dtype=float)
    parsed = pd.to_numeric(values, errors="coerce").astype(float)
    return parsed[np.isfinite(parsed)]


def _numeric_profile(name: str, numbers: pd.Series) -> Dict[str, Any]:
    lo = float(numbers.min())
    hi = float(numbers.max())
    mean = min(max(float(numbers.mean()), lo), hi)
    return {
        "name":         name,
        "kind":         "numeric",
        "unique_count": int(numbers.nunique()),
        "min":          lo,
        "max":          hi,
        "mean":         mean,
    }


def _categorical_profile(name: str, values: pd.Series) -> Dict[str, Any]:
    counts = values.value_counts(sort=False).reindex(pd.unique(values))
    top = counts.sort_values(ascending=False, kind="stable").head(TOP_K)
    return {
        "name":         name,
        "kind":         "categorical",
        "unique_count": int(len(counts)),
        "top_values":   [{"value": str(v), "count": int(c)} for v, c in top.items()],
    }


def summarize(profile: Dict[str, Any]) -> List[str]:
    """Headline lines describing a profiled dataset."""
    lines = [
        f"📊 I see you have {profile['total_rows']} rows and {profile['total_columns']} columns!"
    ]

    numeric = profile["numeric_columns"]
    if numeric:
        lines.append(f"🔢 Found {len(numeric)} numeric columns: {', '.join(numeric)}")

    categorical = profile["categorical_columns"]
    if categorical:
        lines.append(f"🏷️ Found {len(categorical)} categorical columns: {', '.join(categorical)}")

    missing = [(c, n) for c, n in profile["missing_counts"].items() if n > 0]
    if missing:
        lines.append(
            "⚠️ Missing values detected in: " + ", ".join(f"{c} ({n})" for c, n in missing)
        )

    return lines
