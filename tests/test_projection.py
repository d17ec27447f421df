"""
Tests for the projection engine.

This module tests the savings and required capital trajectories, the
Financial Freedom Point search on top of them and the chart payload.
"""

import numpy as np
import pytest

from freedom_point.engine.intersection import NoFreedomPoint
from freedom_point.engine.projection import (
    ProjectionEngine,
    compute_required_capital_trajectory,
    compute_savings_trajectory,
    net_worth,
    net_worth_appreciation,
)
from freedom_point.models import (
    BalanceSheet,
    ExpenseModel,
    LifePlan,
    Point,
    RevenueModel,
    Stage,
)


def make_stage(name, from_age, to_age, revenue=0.0, expense=0.0):
    return Stage(
        name=name,
        from_age=from_age,
        to_age=to_age,
        revenue_model=RevenueModel(net_salary=revenue),
        expenses_model=ExpenseModel(other_expenses=expense),
    )


class TestNetWorth:
    """Test net worth helpers."""

    def test_net_worth(self):
        sheet = BalanceSheet(begin=30, end=40, cash=100, stock=50, liability_value=30)
        assert net_worth(sheet) == 120.0

    def test_net_worth_appreciation(self):
        sheet = BalanceSheet(
            begin=30, end=40, property_value=1000, property_value_ir=0.03
        )
        assert net_worth_appreciation(sheet) == pytest.approx(30.0)


class TestSavingsTrajectory:
    """Test compute_savings_trajectory."""

    def test_single_stage_single_year(self):
        """One year of income plus the closing bookkeeping year."""
        sheet = BalanceSheet(begin=30, end=31)
        stages = [make_stage("Work", 30, 31, revenue=10)]

        savings = compute_savings_trajectory(sheet, stages)

        assert savings.values == [10.0, 20.0]
        assert savings.ages() == [30, 31]

    def test_carries_over_stage_boundaries(self):
        sheet = BalanceSheet(begin=30, end=34, cash=100)
        stages = [
            make_stage("Work", 30, 32, revenue=50, expense=10),
            make_stage("Part-time", 32, 34, revenue=30, expense=20),
        ]

        savings = compute_savings_trajectory(sheet, stages)

        assert savings.values == [140.0, 180.0, 190.0, 200.0, 230.0]

    def test_negative_flow_draws_down(self):
        sheet = BalanceSheet(begin=60, end=63, cash=1000)
        stages = [make_stage("Retired", 60, 63, revenue=100, expense=400)]

        savings = compute_savings_trajectory(sheet, stages)

        assert savings.values == [700.0, 400.0, 100.0, 200.0]

    def test_first_value_is_net_worth_when_first_year_is_flat(self):
        sheet = BalanceSheet(begin=30, end=33, cash=250, provision=50)
        stages = [make_stage("Sabbatical", 30, 31), make_stage("Work", 31, 33, revenue=10)]

        savings = compute_savings_trajectory(sheet, stages)

        assert savings[0] == net_worth(sheet)

    def test_no_stages(self):
        sheet = BalanceSheet(begin=30, end=40, cash=5)
        savings = compute_savings_trajectory(sheet, [])
        assert savings.values == [5.0]


class TestRequiredCapitalTrajectory:
    """Test compute_required_capital_trajectory."""

    def test_zero_inflation_is_backward_cumulative_sum(self):
        sheet = BalanceSheet(begin=30, end=35)
        stages = [make_stage("Retired", 30, 35, expense=100)]

        required = compute_required_capital_trajectory(sheet, stages)

        assert required.values == [500.0, 400.0, 300.0, 200.0, 100.0, 0.0]
        for k in range(len(required)):
            assert required[k] == 100.0 * (5 - k)

    def test_inflation_grows_earlier_years_more(self):
        sheet = BalanceSheet(begin=30, end=32, expected_inflation=10)
        stages = [make_stage("Retired", 30, 32, expense=100)]

        required = compute_required_capital_trajectory(sheet, stages)

        assert required.values == pytest.approx([231.0, 121.0, 0.0])

    def test_exponent_follows_reverse_walk(self):
        """Later stages are folded first; earlier stages get the smaller exponents."""
        sheet = BalanceSheet(begin=30, end=34, expected_inflation=100)
        stages = [
            make_stage("Work", 30, 32, expense=10),
            make_stage("Retired", 32, 34, expense=20),
        ]

        required = compute_required_capital_trajectory(sheet, stages)

        assert required.values == [540.0, 520.0, 480.0, 320.0, 0.0]

    def test_zero_inflation_two_stages(self):
        sheet = BalanceSheet(begin=30, end=34)
        stages = [
            make_stage("Work", 30, 32, expense=10),
            make_stage("Retired", 32, 34, expense=20),
        ]

        required = compute_required_capital_trajectory(sheet, stages)

        assert required.values == [60.0, 50.0, 40.0, 20.0, 0.0]

    def test_ends_at_zero(self):
        sheet = BalanceSheet(begin=30, end=60, expected_inflation=2)
        stages = [make_stage("Work", 30, 50, expense=10), make_stage("Retired", 50, 60, expense=30)]

        required = compute_required_capital_trajectory(sheet, stages)

        assert required[-1] == 0.0
        assert np.all(np.diff(required.as_array()) < 0)

    def test_no_stages(self):
        sheet = BalanceSheet(begin=30, end=40)
        assert compute_required_capital_trajectory(sheet, []).values == [0.0]


class TestTrajectoryShape:
    """Trajectory lengths follow the stages, not the balance sheet."""

    @pytest.mark.parametrize(
        "end, ranges",
        [
            (31, [(30, 31)]),
            (40, [(30, 35), (35, 40)]),
            (40, [(30, 35)]),
            (40, [(30, 35), (35, 45)]),
            (70, [(30, 40), (40, 41), (41, 70)]),
        ],
    )
    def test_lengths(self, end, ranges):
        sheet = BalanceSheet(begin=30, end=end, expected_inflation=2, cash=10)
        stages = [
            make_stage(f"Stage {index}", start, stop, revenue=20, expense=5)
            for index, (start, stop) in enumerate(ranges)
        ]
        expected = sum(stop - start for start, stop in ranges) + 1

        assert len(compute_savings_trajectory(sheet, stages)) == expected
        assert len(compute_required_capital_trajectory(sheet, stages)) == expected


class TestProjectionEngine:
    """Test ProjectionEngine.run."""

    def test_finds_freedom_point(self, life_plan):
        result = ProjectionEngine.from_plan(life_plan).run()

        assert result.savings.values == [20.0, 40.0, 60.0, 80.0, 110.0]
        assert result.required_capital.values == [40.0, 30.0, 20.0, 10.0, 0.0]
        assert result.reached
        assert len(result.crossings) == 1
        assert result.freedom_point.x == pytest.approx(30.6667, abs=1e-4)
        assert result.freedom_point.y == pytest.approx(33.3333, abs=1e-4)

    def test_savings_always_dominate(self, working_stage):
        plan = LifePlan(
            balance_sheet=BalanceSheet(begin=30, end=34, cash=1000),
            stages=[working_stage],
        )

        result = ProjectionEngine.from_plan(plan).run()

        assert result.crossings == []
        assert not result.reached
        assert isinstance(result.freedom_point, NoFreedomPoint)

    def test_two_stage_crossing(self):
        """Saving while working eventually covers the remaining retirement cost."""
        sheet = BalanceSheet(begin=30, end=70, expected_inflation=0)
        stages = [
            make_stage("Work", 30, 60, revenue=60000, expense=30000),
            make_stage("Retired", 60, 70, revenue=0, expense=40000),
        ]

        result = ProjectionEngine(balance_sheet=sheet, stages=stages).run()

        assert result.reached
        assert 30 < result.freedom_point.x < 60

    def test_is_deterministic(self, life_plan):
        engine = ProjectionEngine.from_plan(life_plan)

        first = engine.run()
        second = engine.run()

        assert first.savings.values == second.savings.values
        assert first.required_capital.values == second.required_capital.values
        assert first.crossings == second.crossings

    def test_does_not_raise_for_bad_shape(self):
        plan = LifePlan(
            balance_sheet=BalanceSheet(begin=30, end=40),
            stages=[make_stage("Work", 30, 35, revenue=10, expense=5)],
        )
        assert not plan.is_valid()

        result = ProjectionEngine.from_plan(plan).run()

        assert len(result.savings) == 6

    def test_stage_summaries(self, life_plan):
        result = ProjectionEngine.from_plan(life_plan).run()

        assert [summary.earning for summary in result.stage_summaries] == [20.0]

    def test_net_worth_fields(self):
        plan = LifePlan(
            balance_sheet=BalanceSheet(
                begin=30, end=31, cash=100, property_value=200, property_value_ir=0.1
            ),
            stages=[make_stage("Work", 30, 31)],
        )

        result = ProjectionEngine.from_plan(plan).run()

        assert result.net_worth == 300.0
        assert result.net_worth_appreciation == pytest.approx(20.0)


class TestProjectionResultPayload:
    """Test payload helpers on ProjectionResult."""

    def test_freedom_point_payload_reached(self, life_plan):
        result = ProjectionEngine.from_plan(life_plan).run()

        payload = result.freedom_point_payload(places=3)

        assert payload == {"reached": True, "age": 30.667, "value": 33.333}

    def test_freedom_point_payload_not_reached(self, working_stage):
        plan = LifePlan(
            balance_sheet=BalanceSheet(begin=30, end=34, cash=1000),
            stages=[working_stage],
        )
        payload = ProjectionEngine.from_plan(plan).run().freedom_point_payload()

        assert payload["reached"] is False
        assert payload["age"] is None
        assert payload["value"] is None
        assert payload["reason"]

    def test_chart_payload(self, life_plan):
        chart = ProjectionEngine.from_plan(life_plan).run().to_chart_payload(places=2)

        assert chart["point_start"] == 30
        names = [series["name"] for series in chart["series"]]
        assert names == ["Saving Capital", "Consumer Capital", "Intersections"]
        assert chart["series"][0]["data"] == [20.0, 40.0, 60.0, 80.0, 110.0]
        assert chart["series"][2]["data"] == [[30.67, 33.33]]

    def test_rounded_point(self):
        assert Point(x=30.66666, y=1.23456).rounded(2) == Point(x=30.67, y=1.23)


class TestExtremeValues:
    """The walks stay total for any finite input."""

    def test_overflowing_inflation_gives_infinity(self):
        sheet = BalanceSheet(begin=0, end=150, expected_inflation=20000)
        stages = [make_stage("Life", 0, 150, expense=1)]

        required = compute_required_capital_trajectory(sheet, stages)

        assert len(required) == 151
        assert required.values[:-1] == [float("inf")] * 150
        assert required[-1] == 0.0

    def test_minus_hundred_percent_inflation_on_long_stages(self):
        """0.0 raised to a negative power becomes infinity for overlong stages."""
        sheet = BalanceSheet(begin=30, end=31, expected_inflation=-100)
        stages = [make_stage("Work", 30, 33, expense=1)]

        required = compute_required_capital_trajectory(sheet, stages)

        assert required.values == [float("inf"), 1.0, 0.0, 0.0]

    def test_zero_expense_stays_zero_under_infinite_growth(self):
        sheet = BalanceSheet(begin=0, end=150, expected_inflation=20000)
        stages = [make_stage("Life", 0, 150, revenue=10)]

        required = compute_required_capital_trajectory(sheet, stages)

        assert set(required.values) == {0.0}

    def test_near_float_max_balances(self):
        sheet = BalanceSheet(begin=30, end=32, cash=1e308, stock=1e308)
        stages = [make_stage("Work", 30, 32, revenue=1e308)]

        savings = compute_savings_trajectory(sheet, stages)

        assert len(savings) == 3
        assert all(value == float("inf") for value in savings)

    @pytest.mark.parametrize(
        "inflation, begin, end, to_age",
        [(20000, 0, 150, 150), (-100, 30, 31, 33), (-250, 30, 60, 60), (1e300, 30, 40, 40)],
    )
    def test_engine_runs(self, inflation, begin, end, to_age):
        sheet = BalanceSheet(begin=begin, end=end, expected_inflation=inflation, cash=1e308)
        stages = [make_stage("Life", begin, to_age, revenue=5, expense=3)]

        result = ProjectionEngine(balance_sheet=sheet, stages=stages).run()

        assert len(result.savings) == len(result.required_capital)
        assert all(
            not (np.isnan(point.x) or np.isnan(point.y)) for point in result.crossings
        )
