from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import pandas as pd

from edutrend.outcomes import DegenerateSeries


@dataclass(frozen=True)
class TrendModel:
    slope: float
    intercept: float

    def predict(self, year: float) -> float:
        return self.slope * year + self.intercept


def fit(series: pd.DataFrame) -> Union[TrendModel, DegenerateSeries]:
    """Ordinary least squares of completion_rate on year, closed form.

    Every row takes part in the sums, so repeated years weigh the fit.
    Fewer than two distinct years yields DegenerateSeries instead of a model.
    """
    distinct_years = tuple(sorted(int(y) for y in series["year"].unique())) if not series.empty else ()
    if len(distinct_years) < 2:
        return DegenerateSeries(point_count=int(len(series)), distinct_years=distinct_years)

    x = series["year"].astype("float64").tolist()
    y = series["completion_rate"].astype("float64").tolist()
    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(xi * yi for xi, yi in zip(x, y))
    sum_x2 = sum(xi * xi for xi in x)

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    return TrendModel(slope=slope, intercept=intercept)


def project(model: TrendModel, from_year: int, count: int) -> pd.DataFrame:
    """Points for the `count` years after `from_year`, ascending."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    years = [int(from_year) + i for i in range(1, count + 1)]
    return pd.DataFrame(
        {
            "year": pd.Series(years, dtype="int64"),
            "value": pd.Series([model.predict(year) for year in years], dtype="float64"),
        }
    )
