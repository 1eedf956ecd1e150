from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

SOURCE_LABELS = {False: "Historis", True: "Prediksi"}


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def projection_chart(display: pd.DataFrame, *, height: int = 320) -> alt.Chart:
    """One line across all years, points coloured by historical/predicted."""
    df = display.assign(source=display["is_predicted"].map(SOURCE_LABELS))
    base = alt.Chart(df).encode(
        x=alt.X("year:O", title="Tahun", axis=alt.Axis(format="d", labelAngle=0)),
        y=alt.Y("value:Q", title="Tingkat Penyelesaian (%)", scale=alt.Scale(zero=False)),
    )
    line = base.mark_line(color="blue")
    points = base.mark_point(filled=True, size=70).encode(
        color=alt.Color(
            "source:N",
            title="Sumber",
            scale=alt.Scale(domain=list(SOURCE_LABELS.values()), range=["blue", "orange"]),
        ),
        tooltip=[
            alt.Tooltip("year:O", title="Tahun"),
            alt.Tooltip("value:Q", title="Tingkat Penyelesaian", format=".2f"),
            alt.Tooltip("source:N", title="Sumber"),
        ],
    )
    return (line + points).properties(height=height)
