from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from edutrend.data import empty_dataset
from edutrend.filters import Selection, normalize_selection
from edutrend.outcomes import DatasetUnavailable, DegenerateSeries
from edutrend.selection import duplicate_years, empty_display, merge, select
from edutrend.trend import TrendModel, fit, project

STATUS_IDLE = "idle"
STATUS_READY = "ready"
STATUS_NO_DATA = "no_data"
STATUS_DEGENERATE = "degenerate"
STATUS_UNAVAILABLE = "unavailable"

NO_DATA_MESSAGE = "Data tidak ditemukan untuk kombinasi yang dipilih."
IDLE_MESSAGE = "Pilih provinsi dan jenjang pendidikan untuk melihat tren."


@dataclass(frozen=True)
class ProjectionOutcome:
    status: str
    selection: Selection
    series: pd.DataFrame = field(default_factory=empty_dataset, compare=False)
    display: pd.DataFrame = field(default_factory=empty_display, compare=False)
    model: Optional[TrendModel] = None
    failure: Optional[object] = None
    duplicate_years: List[int] = field(default_factory=list)
    message: str = ""

    @property
    def predictions(self) -> pd.DataFrame:
        return self.display[self.display["is_predicted"]]


def run_pipeline(dataset: pd.DataFrame, selection: Selection) -> ProjectionOutcome:
    """select -> fit -> project -> merge, computed from scratch.

    Failures come back as the outcome's status; nothing is raised for
    empty or degenerate selections.
    """
    if not selection.is_complete:
        return ProjectionOutcome(status=STATUS_IDLE, selection=selection, message=IDLE_MESSAGE)

    series = select(dataset, selection.region, selection.level)
    if series.empty:
        return ProjectionOutcome(status=STATUS_NO_DATA, selection=selection, message=NO_DATA_MESSAGE)

    dupes = duplicate_years(series)
    model = fit(series)
    if isinstance(model, DegenerateSeries):
        return ProjectionOutcome(
            status=STATUS_DEGENERATE,
            selection=selection,
            series=series,
            display=merge(series, empty_display()),
            failure=model,
            duplicate_years=dupes,
            message=model.message,
        )

    predictions = project(model, int(series["year"].max()), max(0, selection.horizon))
    return ProjectionOutcome(
        status=STATUS_READY,
        selection=selection,
        series=series,
        display=merge(series, predictions),
        model=model,
        duplicate_years=dupes,
    )


def unavailable_outcome(selection: Selection, error: DatasetUnavailable) -> ProjectionOutcome:
    return ProjectionOutcome(status=STATUS_UNAVAILABLE, selection=selection, failure=error, message=error.message)


def prepare_context(filters: dict | Selection, data_ctx: Dict[str, object]) -> Dict[str, object]:
    dataset: pd.DataFrame = data_ctx.get("dataset", empty_dataset())
    error: Optional[DatasetUnavailable] = data_ctx.get("error")
    regions = data_ctx.get("regions") or []

    sel = filters if isinstance(filters, Selection) else normalize_selection(filters, available_regions=regions)
    if error is not None:
        outcome = unavailable_outcome(sel, error)
    else:
        outcome = run_pipeline(dataset, sel)

    return {
        "selection": sel,
        "outcome": outcome,
        "dataset": dataset,
        "regions": regions,
        "levels": data_ctx.get("levels") or [],
        "source": data_ctx.get("source"),
        "raw_rows": data_ctx.get("raw_rows", 0),
        "malformed_rows": data_ctx.get("malformed_rows") or [],
        "error": error,
    }
