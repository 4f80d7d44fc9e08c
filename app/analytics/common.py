"""
Safe math, grouping, and serialization helpers used across all analytics modules.
"""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass

import numpy as np
import pandas as pd


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def pct_of_total(part: float, total: float) -> float:
    """Percentage of total; 0 when total is 0."""
    return safe_divide(part, total) * 100


def apply_limit(rows: list[dict], limit: int | None) -> list[dict]:
    """Truncate to limit; limit <= 0 or None means unlimited."""
    if limit is not None and limit > 0:
        return rows[:limit]
    return rows


def to_iso(ts) -> str:
    """RFC 3339 string with a 'Z' suffix for UTC."""
    if ts is None or (not isinstance(ts, str) and pd.isna(ts)):
        return ""
    return pd.Timestamp(ts).isoformat().replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Grouped cardinality
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Distinct:
    """Count distinct values of `column` per group, exposed as `name`."""
    name: str
    column: str
    skip_empty: bool = False


def group_activity(
    df: pd.DataFrame,
    key: str,
    distinct: tuple[Distinct, ...] = (),
    last_activity: bool = False,
) -> pd.DataFrame:
    """Group by `key`: event count, distinct secondary counts, latest created_at.

    Rows are sorted by count descending; ties break on key ascending.
    """
    grouped = df.groupby(key, sort=False)
    out = grouped.size().rename("count").to_frame()

    for item in distinct:
        values = df[item.column]
        if item.skip_empty:
            values = values.where(values != "")
        out[item.name] = values.groupby(df[key], sort=False).nunique()

    if last_activity:
        out["last_activity"] = grouped["created_at"].max()

    out.index.name = key
    out = out.reset_index()
    return out.sort_values(["count", key], ascending=[False, True], kind="mergesort").reset_index(drop=True)


def type_counts(df: pd.DataFrame) -> list[dict]:
    """[{type, count}] sorted by count descending."""
    counts = group_activity(df, "type")
    return [{"type": str(r["type"]), "count": int(r["count"])} for r in counts.to_dict("records")]


# ---------------------------------------------------------------------------
# JSON safety
# ---------------------------------------------------------------------------

def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python for JSON serialization."""
    if isinstance(obj, dict):
        clean = {}
        for k, v in obj.items():
            # Sanitize keys: skip NaN/None keys, convert non-string keys to str
            if k is None:
                continue
            if isinstance(k, float) and (math.isnan(k) or math.isinf(k)):
                continue
            clean[str(k) if not isinstance(k, str) else k] = sanitize_for_json(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, (pd.Timestamp, dt.datetime)):
        return to_iso(obj)
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        v = float(obj)
        return 0.0 if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj
