from monetize_ai.analysis import aggregate, ending_mrr, payback_month, plot_revenue, results_to_frame
from monetize_ai.model import simulate_revenue
from monetize_ai.types import MonthlyResult, SimulationParams


def test_aggregate_totals_and_margin():
    rows = [
        MonthlyResult(month=1, revenue=100, users=10, expenses=60),
        MonthlyResult(month=2, revenue=300, users=20, expenses=90),
    ]
    summary = aggregate(rows)
    assert summary == {
        "total_revenue": 400,
        "total_expenses": 150,
        "total_profit": 250,
        "margin_percent": 63,  # 62.5 rounds away from zero
    }


def test_aggregate_zero_guard():
    assert aggregate([])["margin_percent"] == 0
    no_revenue = simulate_revenue(SimulationParams(acquisition_rate=0, months=4))
    summary = aggregate(no_revenue)
    assert summary["total_revenue"] == 0
    assert summary["margin_percent"] == 0
    assert summary["total_profit"] == -200


def test_aggregate_does_not_mutate_input():
    result = simulate_revenue(SimulationParams(months=12))
    before = result.rows
    aggregate(result)
    assert result.rows == before


def test_payback_and_ending_mrr():
    rows = [
        MonthlyResult(month=1, revenue=0, users=10, expenses=50),
        MonthlyResult(month=2, revenue=40, users=20, expenses=51),
        MonthlyResult(month=3, revenue=200, users=30, expenses=52),
    ]
    assert payback_month(rows) == 3
    assert payback_month(rows[:2]) is None
    assert ending_mrr(rows) == 200
    assert ending_mrr([]) == 0


def test_plot_revenue_builds_chart():
    frame = results_to_frame(simulate_revenue(SimulationParams(months=6)))
    chart = plot_revenue(frame)
    assert chart.to_dict()["mark"]["type"] == "line"


def test_negative_margin_rounds_half_away_from_zero():
    rows = [MonthlyResult(month=1, revenue=8, users=1, expenses=9)]
    # -12.5% rounds to -13
    assert aggregate(rows)["margin_percent"] == -13


# end
