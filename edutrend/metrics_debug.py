from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from edutrend.filters import Selection


def year_coverage(dataset: pd.DataFrame) -> pd.DataFrame:
    """Year span, row count and repeated years per (region, level)."""
    if dataset.empty:
        return pd.DataFrame(columns=["region", "level", "min_year", "max_year", "rows", "years_present", "duplicate_years"])
    grouped = dataset.groupby(["region", "level"])["year"]
    coverage = grouped.agg(["min", "max", "count", "nunique"]).reset_index()
    coverage = coverage.rename(columns={"min": "min_year", "max": "max_year", "count": "rows", "nunique": "years_present"})
    dupes = grouped.apply(lambda s: sorted(int(y) for y in s[s.duplicated()].unique())).reset_index(name="duplicate_years")
    return coverage.merge(dupes, on=["region", "level"], how="left")


def compute_debug(selection: Selection, ctx: Dict[str, Any]) -> Dict[str, Any]:
    dataset: pd.DataFrame = ctx.get("dataset", pd.DataFrame())
    malformed = ctx.get("malformed_rows", []) or []
    error = ctx.get("error")

    coverage = year_coverage(dataset)
    payload = {
        "selection": asdict(selection),
        "source": ctx.get("source"),
        "error": error.message if error is not None else None,
        "row_counts": {
            "raw_rows": int(ctx.get("raw_rows", 0) or 0),
            "kept_rows": int(len(dataset)),
            "dropped_rows": int(len(malformed)),
        },
        "malformed_rows": [asdict(row) for row in malformed],
        "regions": list(ctx.get("regions", []) or []),
        "levels_present": sorted(str(x) for x in dataset["level"].unique()) if not dataset.empty else [],
        "year_coverage": coverage.to_dict(orient="records"),
        "series_with_duplicate_years": int((coverage["duplicate_years"].apply(len) > 0).sum()) if not coverage.empty else 0,
    }
    return payload
