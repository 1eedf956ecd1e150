import pandas as pd

from edutrend.selection import duplicate_years, merge, select
from edutrend.trend import fit, project


def test_select_filters_and_sorts(dataset):
    series = select(dataset, "Bali", "SD")
    assert series["year"].tolist() == [2018, 2019, 2020]
    assert series["completion_rate"].tolist() == [70.0, 75.0, 80.0]
    assert set(series["region"]) == {"Bali"}


def test_select_is_sorted_for_any_input_order(dataset):
    shuffled = dataset.sample(frac=1.0, random_state=3).reset_index(drop=True)
    series = select(shuffled, "Bali", "SD")
    assert series["year"].is_monotonic_increasing


def test_select_unknown_region_is_empty(dataset):
    series = select(dataset, "Unknown", "SD")
    assert series.empty
    assert list(series.columns) == ["region", "level", "year", "completion_rate"]


def test_select_is_case_sensitive(dataset):
    assert select(dataset, "bali", "SD").empty
    assert select(dataset, "Bali", "sd").empty


def test_select_keeps_duplicate_years_in_original_order():
    df = pd.DataFrame(
        [
            ("Bali", "SD", 2019, 1.0),
            ("Bali", "SD", 2018, 2.0),
            ("Bali", "SD", 2019, 3.0),
            ("Bali", "SD", 2019, 4.0),
        ],
        columns=["region", "level", "year", "completion_rate"],
    )
    series = select(df, "Bali", "SD")
    assert series["year"].tolist() == [2018, 2019, 2019, 2019]
    assert series["completion_rate"].tolist() == [2.0, 1.0, 3.0, 4.0]
    assert duplicate_years(series) == [2019]


def test_select_does_not_mutate_input(dataset):
    before = dataset.copy()
    select(dataset, "Bali", "SD")
    pd.testing.assert_frame_equal(dataset, before)


def test_merge_orders_history_then_predictions(dataset):
    series = select(dataset, "Bali", "SD")
    predictions = project(fit(series), 2020, 2)
    display = merge(series, predictions)
    assert display["year"].tolist() == [2018, 2019, 2020, 2021, 2022]
    assert display["year"].is_monotonic_increasing
    assert display["is_predicted"].tolist() == [False, False, False, True, True]
    assert list(display.columns) == ["year", "value", "is_predicted"]


def test_merge_empty_history_ignores_predictions(dataset):
    series = select(dataset, "Unknown", "SD")
    predictions = pd.DataFrame({"year": [2021], "value": [1.0]})
    assert merge(series, predictions).empty
