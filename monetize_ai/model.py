from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from monetize_ai.types import InvalidParamsError, MonthlyResult, SimulationParams, SimulationResult

# Model constants (not user-tunable)
FREE_TIER_MONTHLY_CHURN = 0.10  # 10% of the free pool leaves each month
BASE_MONTHLY_EXPENSE = 50.0  # fixed server cost
EXPENSE_PER_USER = 0.05  # scaling cost per free or paid user


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(Decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def _check_horizon(months) -> int:
    if isinstance(months, bool) or int(months) != months or months < 1:
        raise InvalidParamsError(f"months must be a positive integer, got {months!r}")
    return int(months)


def simulate_revenue(params: SimulationParams) -> SimulationResult:
    """Project monthly revenue, users and expenses for a freemium app.

    Model notes:
    - A constant ``acquisition_rate`` of new users joins the free pool each month
    - ``conversion_rate`` percent of the free pool (after new arrivals) converts
      to paid, before churn
    - ``churn_rate`` percent of the paid pool is lost each month
    - The free pool loses a fixed 10% each month
    - Expenses = fixed base cost + a per-user scaling cost

    Rates are applied to the current pools, so growth and decay compound.
    Running pools stay unrounded from month to month; only the emitted
    snapshots are rounded. Rates outside [0, 100] are not clamped.
    """

    months = _check_horizon(params.months)
    conversion = params.conversion_rate / 100.0
    churn = params.churn_rate / 100.0

    free_users = float(params.initial_users)
    paid_users = 0.0

    rows: list[MonthlyResult] = []
    for month in range(1, months + 1):
        new_users = params.acquisition_rate

        # Conversion sees this month's arrivals
        newly_paid = (free_users + new_users) * conversion
        total_free = free_users + new_users - newly_paid
        total_paid = paid_users + newly_paid

        # Churn on both pools
        total_paid -= total_paid * churn
        total_free -= total_free * FREE_TIER_MONTHLY_CHURN

        free_users = total_free
        paid_users = total_paid

        total_users = total_free + total_paid
        rows.append(
            MonthlyResult(
                month=month,
                revenue=round_half_away(total_paid * params.arpu),
                users=round_half_away(total_users),
                expenses=round_half_away(BASE_MONTHLY_EXPENSE + total_users * EXPENSE_PER_USER),
            )
        )

    return SimulationResult(params=params, rows=tuple(rows))
