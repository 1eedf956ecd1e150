from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

HEADER = "Provinsi,Jenjang Pendidikan,Tahun,Tingkat Penyelesaian\n"


@pytest.fixture
def dataset() -> pd.DataFrame:
    rows = [
        ("Bali", "SD", 2020, 80.0),
        ("Bali", "SD", 2018, 70.0),
        ("Aceh", "SMP", 2019, 60.5),
        ("Bali", "SD", 2019, 75.0),
        ("Bali", "SMP", 2018, 55.0),
        ("Aceh", "SMP", 2018, 58.0),
        ("Papua", "SMA", 2021, 40.0),
    ]
    return pd.DataFrame(rows, columns=["region", "level", "year", "completion_rate"])


@pytest.fixture
def write_csv(tmp_path):
    def _write(body: str, name: str = "data.csv", header: str = HEADER) -> Path:
        path = tmp_path / name
        path.write_text(header + body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def linear_csv(write_csv) -> Path:
    return write_csv(
        "Bali,SD,2018,70\n"
        "Bali,SD,2019,75\n"
        "Bali,SD,2020,80\n"
        " Aceh ,SMP,2020,61.25\n"
        "Papua,SMA,2021,40\n"
    )
