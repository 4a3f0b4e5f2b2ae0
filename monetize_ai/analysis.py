from __future__ import annotations

from typing import Iterable, Optional

import altair as alt
import pandas as pd

from monetize_ai.model import round_half_away
from monetize_ai.types import MONTHLY_COLUMNS, MonthlyResult


def aggregate(results: Iterable[MonthlyResult]) -> dict[str, int]:
    """Summarize a run: total revenue, total expenses, total profit and margin.

    ``margin_percent`` is 0 when there is no revenue.
    """
    total_revenue = 0
    total_expenses = 0
    for row in results:
        total_revenue += row.revenue
        total_expenses += row.expenses

    total_profit = total_revenue - total_expenses
    margin_percent = round_half_away(total_profit / total_revenue * 100) if total_revenue > 0 else 0
    return {
        "total_revenue": total_revenue,
        "total_expenses": total_expenses,
        "total_profit": total_profit,
        "margin_percent": margin_percent,
    }


def payback_month(results: Iterable[MonthlyResult]) -> Optional[int]:
    """First month whose cumulative profit turns positive, if any."""
    cumulative = 0
    for row in results:
        cumulative += row.profit
        if cumulative > 0:
            return row.month
    return None


def ending_mrr(results: Iterable[MonthlyResult]) -> int:
    rows = list(results)
    return rows[-1].revenue if rows else 0


def results_to_frame(results: Iterable[MonthlyResult]) -> pd.DataFrame:
    data = [[r.month, r.revenue, r.users, r.expenses, r.profit] for r in results]
    return pd.DataFrame(data, columns=MONTHLY_COLUMNS)


def plot_revenue(monthly: pd.DataFrame) -> alt.Chart:
    """Layered chart of revenue, expenses and profit by month."""
    base = alt.Chart(monthly).encode(x=alt.X("month:Q", title="Month", axis=alt.Axis(tickMinStep=1)))
    folded = base.transform_fold(["revenue", "expenses", "profit"], as_=["Series", "Value"])
    return (
        folded.mark_line(point=True)
        .encode(
            y=alt.Y("Value:Q", title="USD / month"),
            color=alt.Color(
                "Series:N",
                scale=alt.Scale(domain=["revenue", "expenses", "profit"], range=["#22c55e", "#ef4444", "#06b6d4"]),
                title=None,
            ),
            tooltip=[
                alt.Tooltip("month:Q", title="Month"),
                alt.Tooltip("Series:N"),
                alt.Tooltip("Value:Q", format=",.0f"),
            ],
        )
        .properties(height=320)
    )


def plot_users(monthly: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(monthly)
        .mark_area(opacity=0.35, line=True, color="#3b82f6")
        .encode(
            x=alt.X("month:Q", title="Month", axis=alt.Axis(tickMinStep=1)),
            y=alt.Y("users:Q", title="Total users"),
            tooltip=[alt.Tooltip("month:Q", title="Month"), alt.Tooltip("users:Q", title="Users", format=",")],
        )
        .properties(height=260)
    )
