import logging

import pandas as pd

from edutrend import data as data_mod
from edutrend.data import format_display_table, format_rate, format_selection_summary, load_dashboard_data, read_dataset
from edutrend.outcomes import DatasetUnavailable


def test_read_dataset_maps_and_types_columns(linear_csv):
    dataset, rejected, error = read_dataset(linear_csv)
    assert error is None
    assert rejected == []
    assert list(dataset.columns) == ["region", "level", "year", "completion_rate"]
    assert dataset["year"].dtype == "int64"
    assert dataset["completion_rate"].dtype == "float64"
    assert "Aceh" in set(dataset["region"])
    assert len(dataset) == 5


def test_malformed_rows_are_dropped_with_warning(write_csv, caplog):
    path = write_csv(
        "Bali,SD,2018,70\n"
        "Bali,SD,dua ribu,75\n"
        "Bali,SD,2020,n/a\n"
        "Bali,SD,2020.5,80\n"
        ",SD,2021,80\n"
        "Bali,TK,2021,80\n"
        "Bali,SD,2022,inf\n"
        "Bali,SD,1e20,75\n"
    )
    with caplog.at_level(logging.WARNING, logger="edutrend.data"):
        dataset, rejected, error = read_dataset(path)
    assert error is None
    assert dataset["year"].tolist() == [2018]
    assert not dataset["completion_rate"].isna().any()
    assert [(r.row_number, r.column) for r in rejected] == [
        (2, "year"),
        (3, "completion_rate"),
        (4, "year"),
        (5, "region"),
        (6, "level"),
        (7, "completion_rate"),
        (8, "year"),
    ]
    assert rejected[0].value == "dua ribu"
    assert "outside" in rejected[-1].reason
    dropped = [r.getMessage() for r in caplog.records if "Dropping row" in r.getMessage()]
    assert [m.split(":")[0] for m in dropped] == [f"Dropping row {n}" for n in range(2, 9)]


def test_missing_file_is_unavailable(tmp_path):
    ctx = load_dashboard_data(tmp_path / "nope.csv")
    assert isinstance(ctx["error"], DatasetUnavailable)
    assert ctx["dataset"].empty
    assert ctx["regions"] == []


def test_missing_column_is_unavailable(write_csv):
    path = write_csv("Bali,SD,2018\n", header="Provinsi,Jenjang Pendidikan,Tahun\n")
    dataset, rejected, error = read_dataset(path)
    assert isinstance(error, DatasetUnavailable)
    assert "Tingkat Penyelesaian" in error.reason
    assert dataset.empty


def test_empty_file_is_unavailable(write_csv):
    path = write_csv("", header="")
    _, _, error = read_dataset(path)
    assert isinstance(error, DatasetUnavailable)


def test_load_dashboard_data_lists_sorted_regions(linear_csv):
    ctx = load_dashboard_data(linear_csv)
    assert ctx["error"] is None
    assert ctx["regions"] == ["Aceh", "Bali", "Papua"]
    assert ctx["raw_rows"] == 5


def test_load_dashboard_data_uses_configured_path(linear_csv, monkeypatch):
    monkeypatch.setattr(data_mod, "DATA_PATH", linear_csv)
    assert load_dashboard_data()["source"] == str(linear_csv)


def test_format_display_table_marks_predictions():
    display = pd.DataFrame({"year": [2020, 2021], "value": [80.0, 85.126], "is_predicted": [False, True]})
    table = format_display_table(display)
    assert table.to_dict(orient="records") == [
        {"Tahun": 2020, "Tingkat Penyelesaian": "80.00"},
        {"Tahun": 2021, "Tingkat Penyelesaian": "85.13 (Prediksi)"},
    ]


def test_format_rate_handles_missing():
    assert format_rate(None) == "N/A"
    assert format_rate(float("nan")) == "N/A"
    assert format_rate(3.14159, 3) == "3.142"


def test_selection_summary_escapes_values():
    chips = format_selection_summary("<b>Bali</b>", "SD", 2)
    assert "<b>" not in chips
    assert "&lt;b&gt;Bali&lt;/b&gt;" in chips
    assert chips.count("<span class='chip'>") == 3


def test_selection_summary_placeholders():
    assert "Provinsi: -" in format_selection_summary("", "", 1)
