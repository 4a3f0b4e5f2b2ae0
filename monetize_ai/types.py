from dataclasses import dataclass, field, fields
from typing import Iterator, Optional

import pandas as pd


class InvalidParamsError(ValueError):
    """Raised when simulation parameters cannot be simulated."""


@dataclass(frozen=True)
class SimulationParams:
    # Acquisition
    acquisition_rate: float = 500.0  # new users per month

    # Rates, in percent of the current pool
    churn_rate: float = 5.0  # paid users lost per month
    conversion_rate: float = 3.0  # free users converting per month

    # Pricing
    arpu: float = 9.99

    # Starting state
    initial_users: float = 0.0

    # Horizon
    months: int = 24

    def validate(self, strict: bool = False) -> list[str]:
        """Return warnings for values outside their documented ranges.

        Out-of-range rates are still simulated as-is. With ``strict=True`` the
        first problem raises ``InvalidParamsError`` instead.
        """
        problems: list[str] = []
        if self.acquisition_rate < 0:
            problems.append(f"acquisition_rate should be >= 0, got {self.acquisition_rate}")
        if not 0 <= self.churn_rate <= 100:
            problems.append(f"churn_rate should be within [0, 100], got {self.churn_rate}")
        if not 0 <= self.conversion_rate <= 100:
            problems.append(f"conversion_rate should be within [0, 100], got {self.conversion_rate}")
        if self.arpu <= 0:
            problems.append(f"arpu should be > 0, got {self.arpu}")
        if self.initial_users < 0:
            problems.append(f"initial_users should be >= 0, got {self.initial_users}")
        if isinstance(self.months, bool) or int(self.months) != self.months or self.months < 1:
            problems.append(f"months should be a positive integer, got {self.months}")
        if strict and problems:
            raise InvalidParamsError(problems[0])
        return problems

    def to_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationParams":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "months" in kwargs:
            kwargs["months"] = int(kwargs["months"])
        return cls(**kwargs)


@dataclass(frozen=True)
class MonthlyResult:
    month: int
    revenue: int
    users: int
    expenses: int

    @property
    def profit(self) -> int:
        return self.revenue - self.expenses


MONTHLY_COLUMNS = ["month", "revenue", "users", "expenses", "profit"]


@dataclass(frozen=True)
class SimulationResult:
    """Ordered, immutable sequence of monthly snapshots for one run."""

    params: SimulationParams
    rows: tuple[MonthlyResult, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[MonthlyResult]:
        return iter(self.rows)

    def __getitem__(self, index):
        return self.rows[index]

    @property
    def monthly(self) -> pd.DataFrame:
        data = [[r.month, r.revenue, r.users, r.expenses, r.profit] for r in self.rows]
        return pd.DataFrame(data, columns=MONTHLY_COLUMNS)


@dataclass(frozen=True)
class SavedIdea:
    id: str
    title: str
    content: str
    date: str


@dataclass(frozen=True)
class CommunityMessage:
    id: str
    user: str
    text: str
    timestamp: str
    is_me: bool = False
    avatar_color: Optional[str] = None
