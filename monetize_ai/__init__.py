from monetize_ai.analysis import aggregate
from monetize_ai.export import to_delimited_text
from monetize_ai.model import simulate_revenue
from monetize_ai.types import MonthlyResult, SimulationParams, SimulationResult

__all__ = [
    "MonthlyResult",
    "SimulationParams",
    "SimulationResult",
    "aggregate",
    "simulate_revenue",
    "to_delimited_text",
]
