from __future__ import annotations

from typing import List

import pandas as pd

from edutrend.data import empty_dataset

DISPLAY_COLUMNS = ["year", "value", "is_predicted"]


def select(dataset: pd.DataFrame, region: str, level: str) -> pd.DataFrame:
    """Rows for one (region, level), ascending by year.

    Matching is exact. Rows sharing a year are all kept in their dataset order.
    """
    if dataset.empty:
        return empty_dataset()
    mask = (dataset["region"] == region) & (dataset["level"] == level)
    series = dataset[mask]
    if series.empty:
        return empty_dataset()
    return series.sort_values("year", kind="mergesort").reset_index(drop=True)


def duplicate_years(series: pd.DataFrame) -> List[int]:
    if series.empty:
        return []
    counts = series["year"].value_counts()
    return sorted(int(y) for y in counts[counts > 1].index)


def empty_display() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "year": pd.Series(dtype="int64"),
            "value": pd.Series(dtype="float64"),
            "is_predicted": pd.Series(dtype=bool),
        }
    )


def merge(series: pd.DataFrame, predictions: pd.DataFrame) -> pd.DataFrame:
    """Historical rows followed by predicted rows, tagged by provenance."""
    if series.empty:
        return empty_display()
    historical = pd.DataFrame(
        {
            "year": series["year"].astype("int64").to_numpy(),
            "value": series["completion_rate"].astype("float64").to_numpy(),
            "is_predicted": False,
        }
    )
    if predictions.empty:
        return historical[DISPLAY_COLUMNS]
    predicted = pd.DataFrame(
        {
            "year": predictions["year"].astype("int64").to_numpy(),
            "value": predictions["value"].astype("float64").to_numpy(),
            "is_predicted": True,
        }
    )
    return pd.concat([historical, predicted], ignore_index=True)[DISPLAY_COLUMNS]
