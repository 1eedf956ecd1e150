"""Failure outcomes returned (never raised) by the loading and trend steps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class DatasetUnavailable:
    source: str
    reason: str

    @property
    def message(self) -> str:
        return f"Dataset tidak dapat dimuat ({self.source}): {self.reason}"


@dataclass(frozen=True)
class MalformedRow:
    row_number: int
    column: str
    value: Optional[str]
    reason: str


@dataclass(frozen=True)
class DegenerateSeries:
    point_count: int
    distinct_years: Tuple[int, ...] = ()

    @property
    def message(self) -> str:
        return (
            "Tren tidak dapat dihitung: dibutuhkan data minimal dua tahun berbeda "
            f"(tersedia {len(self.distinct_years)})."
        )
