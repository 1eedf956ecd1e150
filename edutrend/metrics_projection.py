from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from edutrend.charts import projection_chart, to_vega_spec
from edutrend.data import format_display_table
from edutrend.filters import Selection
from edutrend.pipeline import STATUS_READY, ProjectionOutcome


def _model_payload(outcome: ProjectionOutcome) -> Dict[str, Any] | None:
    if outcome.model is None:
        return None
    return {"slope": float(outcome.model.slope), "intercept": float(outcome.model.intercept)}


def compute_projection(selection: Selection, ctx: Dict[str, Any]) -> Dict[str, Any]:
    outcome: ProjectionOutcome = ctx["outcome"]
    display: pd.DataFrame = outcome.display

    chart = None
    if outcome.status == STATUS_READY and not display.empty:
        chart = to_vega_spec(projection_chart(display))

    failure = None
    if outcome.failure is not None:
        failure = {"type": type(outcome.failure).__name__, **asdict(outcome.failure)}

    return {
        "status": outcome.status,
        "message": outcome.message,
        "selection": asdict(selection),
        "model": _model_payload(outcome),
        "failure": failure,
        "duplicate_years": list(outcome.duplicate_years),
        "display": display.to_dict(orient="records"),
        "table": format_display_table(display).to_dict(orient="records") if outcome.status == STATUS_READY else [],
        "chart": chart,
    }
