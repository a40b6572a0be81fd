"""
Unit tests for the series builder.
"""
import copy
import pytest
from chartengine.core.errors import InvalidArgumentError
from chartengine.core.schemas import ChartType, ColumnType, Dataset, Point
from chartengine.services.generator import build_series
from chartengine.services.profiler import profile_rows

N, D, C, T = ColumnType.NUMBER, ColumnType.DATE, ColumnType.CATEGORICAL, ColumnType.TEXT


@pytest.fixture
def typed(make_profile):
    def build(**columns):
        return [make_profile(name, column_type) for name, column_type in columns.items()]
    return build


@pytest.mark.unit
def test_bar_sums_by_category_in_first_seen_order(typed):
    rows = [{"c": "A", "n": 1}, {"c": "B", "n": 2}, {"c": "A", "n": 3}]

    series = build_series(rows, "c", "n", ChartType.BAR, typed(c=C, n=N))

    assert series.labels == ["A", "B"]
    assert series.datasets == [Dataset(label="n", values=[4.0, 2.0])]
    assert series.is_pointwise is False


@pytest.mark.unit
def test_bar_sum_treats_unparseable_as_zero(typed):
    rows = [{"c": "A", "n": "$10"}, {"c": "A", "n": "n/a"}, {"c": "B", "n": None}]

    series = build_series(rows, "c", "n", ChartType.BAR, typed(c=C, n=N))

    assert series.labels == ["A", "B"]
    assert series.datasets[0].values == [10.0, 0.0]


@pytest.mark.unit
def test_bar_missing_category_groups_as_unknown(typed):
    rows = [{"c": None, "n": 1}, {"c": "A", "n": 2}, {"n": 3}]

    series = build_series(rows, "c", "n", ChartType.BAR, typed(c=C, n=N))

    assert series.labels == ["unknown", "A"]
    assert series.datasets[0].values == [4.0, 2.0]


@pytest.mark.unit
def test_bar_per_row_for_non_categorical_x(typed):
    rows = [{"name": "Ann", "score": "7"}, {"name": None, "score": "oops"}, {"name": "Cy", "score": 2.5}]

    series = build_series(rows, "name", "score", ChartType.BAR, typed(name=T, score=N))

    assert series.labels == ["Ann", "", "Cy"]
    assert series.datasets == [Dataset(label="score", values=[7.0, 0.0, 2.5])]


@pytest.mark.unit
def test_pie_sums_by_category(typed):
    rows = [{"c": "x", "n": 2}, {"c": "y", "n": 5}, {"c": "x", "n": 1}]

    series = build_series(rows, "c", "n", ChartType.PIE, typed(c=C, n=N))

    assert series.labels == ["x", "y"]
    assert series.datasets[0].label == "n"
    assert series.datasets[0].values == [3.0, 5.0]


@pytest.mark.unit
def test_pie_frequency_without_y(typed):
    rows = [{"region": "A"}, {"region": None}, {"region": "A"}, {"region": "B"}]

    series = build_series(rows, "region", None, ChartType.PIE, typed(region=C))

    assert series.labels == ["A", "unknown", "B"]
    assert series.datasets == [Dataset(label="count", values=[2.0, 1.0, 1.0])]


@pytest.mark.unit
def test_pie_frequency_of_y_when_no_x(typed):
    rows = [{"tier": "gold"}, {"tier": "silver"}, {"tier": "gold"}]

    series = build_series(rows, None, "tier", ChartType.PIE, typed(tier=C))

    assert series.labels == ["gold", "silver"]
    assert series.datasets[0].values == [2.0, 1.0]


@pytest.mark.unit
def test_pie_frequency_when_y_is_not_numeric(typed):
    rows = [{"a": "p", "b": "q"}, {"a": "p", "b": "r"}]

    series = build_series(rows, "a", "b", ChartType.PIE, typed(a=C, b=T))

    assert series.labels == ["p"]
    assert series.datasets[0].label == "count"
    assert series.datasets[0].values == [2.0]


@pytest.mark.unit
def test_scatter_drops_only_unparseable_rows(typed):
    rows = [
        {"a": "1", "b": "2"},
        {"a": "x", "b": "3"},
        {"a": "3", "b": "$4"},
        {"a": 5, "b": None},
        {"a": 0, "b": -1},
    ]

    series = build_series(rows, "a", "b", ChartType.SCATTER, typed(a=N, b=N))

    assert series.points == [Point(x=1, y=2), Point(x=3, y=4), Point(x=0, y=-1)]
    assert series.label == "b vs a"
    assert series.labels is None


@pytest.mark.unit
def test_line_with_date_axis_uses_epoch_ms_in_source_order(typed):
    rows = [
        {"d": "2024-01-02", "v": "5"},
        {"d": "2024-01-01", "v": "3"},
        {"d": "not a date", "v": "1"},
        {"d": "2024-01-03", "v": "n/a"},
    ]

    series = build_series(rows, "d", "v", ChartType.LINE, typed(d=D, v=N))

    assert series.is_pointwise
    assert series.points == [Point(x=1704153600000, y=5), Point(x=1704067200000, y=3)]
    assert series.label == "v"


@pytest.mark.unit
def test_line_with_non_date_axis_is_per_row(typed):
    rows = [{"step": 1, "v": 10}, {"step": 2.0, "v": "bad"}, {"step": 3, "v": "12"}]

    series = build_series(rows, "step", "v", ChartType.LINE, typed(step=N, v=N))

    assert series.labels == ["1", "2", "3"]
    assert series.datasets[0].values == [10.0, 0.0, 12.0]


@pytest.mark.unit
def test_table_has_no_series(typed):
    rows = [{"a": 1, "b": 2}]

    assert build_series(rows, "a", "b", ChartType.TABLE, typed(a=N, b=N)) is None


@pytest.mark.unit
def test_empty_rows_have_no_series(typed):
    assert build_series([], "a", "b", ChartType.BAR, typed(a=C, b=N)) is None


@pytest.mark.unit
@pytest.mark.parametrize("chart_type", [ChartType.BAR, ChartType.LINE, ChartType.SCATTER])
def test_missing_axis_has_no_series(typed, chart_type):
    rows = [{"a": 1, "b": 2}]

    assert build_series(rows, "a", None, chart_type, typed(a=N, b=N)) is None
    assert build_series(rows, None, "b", chart_type, typed(a=N, b=N)) is None


@pytest.mark.unit
def test_pie_without_any_axis_has_no_series(typed):
    assert build_series([{"a": 1}], None, None, ChartType.PIE, typed(a=C)) is None


@pytest.mark.unit
def test_unknown_chart_type_is_rejected(typed):
    with pytest.raises(InvalidArgumentError):
        build_series([{"a": 1}], "a", "a", "histogram", typed(a=N))


@pytest.mark.unit
def test_chart_type_accepts_plain_string(typed):
    rows = [{"c": "A", "n": 1}]

    series = build_series(rows, "c", "n", "bar", typed(c=C, n=N))

    assert series.labels == ["A"]


@pytest.mark.unit
def test_non_mapping_row_is_rejected(typed):
    with pytest.raises(InvalidArgumentError):
        build_series([{"a": 1}, "oops"], "a", "a", ChartType.BAR, typed(a=N))


@pytest.mark.unit
def test_build_series_does_not_mutate_rows(sales_rows):
    snapshot = copy.deepcopy(sales_rows)
    profiles = profile_rows(sales_rows)

    build_series(sales_rows, "region", "revenue", ChartType.BAR, profiles)

    assert sales_rows == snapshot


@pytest.mark.unit
def test_sales_fixture_bar_totals(sales_rows):
    profiles = profile_rows(sales_rows)

    series = build_series(sales_rows, "region", "revenue", ChartType.BAR, profiles)

    assert series.labels == ["North", "South", "East", "West", "Central", "Coastal"]
    expected_north = sum(1000 + day * 25 for day in range(1, 31, 6))
    assert series.datasets[0].values[0] == expected_north


@pytest.mark.unit
def test_pie_frequency_falls_back_to_y_per_row(typed):
    rows = [{"a": "p", "b": "q"}, {"a": None, "b": "p"}, {"b": "r"}, {}]

    series = build_series(rows, "a", "b", ChartType.PIE, typed(a=C, b=T))

    assert series.labels == ["p", "r", "unknown"]
    assert series.datasets == [Dataset(label="count", values=[2.0, 1.0, 1.0])]


@pytest.mark.unit
def test_line_with_month_day_dates_has_points():
    rows = [{"when": "Jan 5", "sales": 10}, {"when": "Feb 10", "sales": 20}, {"when": "March 3", "sales": 30}]
    profiles = profile_rows(rows)

    series = build_series(rows, "when", "sales", ChartType.LINE, profiles)

    assert [p.type for p in profiles] == [D, N]
    assert [point.y for point in series.points] == [10, 20, 30]
    assert series.points[0].x == 978652800000  # 2001-01-05
