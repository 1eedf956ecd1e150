from __future__ import annotations

import html
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from edutrend.filters import LEVELS
from edutrend.outcomes import DatasetUnavailable, MalformedRow


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1]
DATA_FILENAME = "data.csv"
DATA_PATH = Path(os.environ.get("EDUTREND_DATA_PATH", DATA_DIR / DATA_FILENAME))

SOURCE_COLUMNS = {
    "Provinsi": "region",
    "Jenjang Pendidikan": "level",
    "Tahun": "year",
    "Tingkat Penyelesaian": "completion_rate",
}
REQUIRED_COLUMNS = list(SOURCE_COLUMNS.values())

PREDICTED_SUFFIX = " (Prediksi)"

YEAR_MIN = 1900
YEAR_MAX = 2200


def get_source_file() -> Path:
    return DATA_PATH


def file_signature(path: Path) -> Tuple[str, float]:
    return str(path), path.stat().st_mtime


def empty_dataset() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "region": pd.Series(dtype=object),
            "level": pd.Series(dtype=object),
            "year": pd.Series(dtype="int64"),
            "completion_rate": pd.Series(dtype="float64"),
        }
    )


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = df[col].fillna("").astype(str).str.strip()
    return df


def _reject(rejected: List[MalformedRow], mask: pd.Series, df: pd.DataFrame, column: str, reason: str) -> None:
    for idx in df.index[mask]:
        value = df.at[idx, column]
        rejected.append(MalformedRow(row_number=int(idx) + 1, column=column, value=value, reason=reason))


def clean_dataset(raw: pd.DataFrame) -> Tuple[pd.DataFrame, List[MalformedRow]]:
    """Map source headers to internal names and drop rows that cannot be typed.

    Returns the cleaned frame (original row order, fresh index) and one
    MalformedRow per dropped row. A row is reported against the first column
    that failed.
    """
    df = raw.rename(columns=SOURCE_COLUMNS)[REQUIRED_COLUMNS].copy()
    df = coerce_str_safe(df, REQUIRED_COLUMNS)

    years = pd.to_numeric(df["year"], errors="coerce").astype("float64")
    rates = pd.to_numeric(df["completion_rate"], errors="coerce").astype("float64")

    rejected: List[MalformedRow] = []
    bad = pd.Series(False, index=df.index)

    checks = [
        ("region", df["region"] == "", "is empty"),
        ("level", ~df["level"].isin(LEVELS), "is not one of " + "/".join(LEVELS)),
        ("year", ~np.isfinite(years) | (years % 1 != 0), "is not an integer"),
        ("year", (years < YEAR_MIN) | (years > YEAR_MAX), f"is outside {YEAR_MIN}-{YEAR_MAX}"),
        ("completion_rate", ~np.isfinite(rates), "is not a number"),
    ]
    for column, mask, reason in checks:
        mask = mask & ~bad
        if mask.any():
            source_col = next(k for k, v in SOURCE_COLUMNS.items() if v == column)
            _reject(rejected, mask, df, column, f"{source_col} {reason}")
            bad = bad | mask

    rejected.sort(key=lambda r: r.row_number)
    for row in rejected:
        logger.warning("Dropping row %d: %s (%r)", row.row_number, row.reason, row.value)

    keep = ~bad
    out = df.loc[keep, ["region", "level"]].copy()
    out["year"] = years[keep].astype("int64")
    out["completion_rate"] = rates[keep].astype("float64")
    return out.reset_index(drop=True), rejected


def read_dataset(path: Path) -> Tuple[pd.DataFrame, List[MalformedRow], Optional[DatasetUnavailable]]:
    try:
        raw = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except FileNotFoundError:
        return empty_dataset(), [], DatasetUnavailable(source=str(path), reason="file not found")
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.exception("Failed to read dataset %s", path)
        return empty_dataset(), [], DatasetUnavailable(source=str(path), reason=str(exc) or type(exc).__name__)

    raw.columns = [str(c).strip() for c in raw.columns]
    missing = [c for c in SOURCE_COLUMNS if c not in raw.columns]
    if missing:
        reason = "missing column(s): " + ", ".join(missing)
        logger.error("Dataset %s unusable: %s", path, reason)
        return empty_dataset(), [], DatasetUnavailable(source=str(path), reason=reason)

    dataset, rejected = clean_dataset(raw)
    logger.info("Loaded %d rows from %s (%d dropped)", len(dataset), path, len(rejected))
    return dataset, rejected, None


def list_regions(dataset: pd.DataFrame) -> List[str]:
    if dataset.empty or "region" not in dataset.columns:
        return []
    return sorted(str(x) for x in dataset["region"].dropna().unique())


# ---------------- Public API (Streamlit parity + FastAPI use) ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(file_sig: Tuple[str, float]) -> Dict[str, object]:
    source = Path(file_sig[0])
    dataset, rejected, error = read_dataset(source)
    return {
        "source": str(source),
        "dataset": dataset,
        "regions": list_regions(dataset),
        "levels": list(LEVELS),
        "raw_rows": len(dataset) + len(rejected),
        "malformed_rows": rejected,
        "error": error,
    }


def load_dashboard_data(path: Optional[Path] = None) -> Dict[str, object]:
    source = Path(path) if path is not None else get_source_file()
    if not source.is_file():
        return {
            "source": str(source),
            "dataset": empty_dataset(),
            "regions": [],
            "levels": list(LEVELS),
            "raw_rows": 0,
            "malformed_rows": [],
            "error": DatasetUnavailable(source=str(source), reason="file not found"),
        }
    return _load_dashboard_data_cached(file_signature(source))


def format_rate(value: object, decimals: int = 2) -> str:
    if value is None or pd.isna(value):
        return "N/A"
    return f"{float(value):.{decimals}f}"


def format_display_table(display: pd.DataFrame) -> pd.DataFrame:
    """Year / value rows for the table view, predicted rows suffixed."""
    if display.empty:
        return pd.DataFrame(columns=["Tahun", "Tingkat Penyelesaian"])
    values = [
        format_rate(v) + (PREDICTED_SUFFIX if predicted else "")
        for v, predicted in zip(display["value"], display["is_predicted"])
    ]
    return pd.DataFrame({"Tahun": display["year"].astype(int).tolist(), "Tingkat Penyelesaian": values})


def format_selection_summary(region: str, level: str, horizon: int) -> str:
    """Chip-row HTML for the page header; values are escaped."""
    chips = [
        f"Provinsi: {region or '-'}",
        f"Jenjang: {level or '-'}",
        f"Prediksi: {horizon} tahun",
    ]
    return "".join([f"<span class='chip'>{html.escape(txt)}</span>" for txt in chips])
