"""Health-factor computation: aggregation and evaluation."""
from .aggregator import aggregate, collateral_value, debt_value
from .evaluator import MAX_HF, compute_hf, evaluate, format_hf, hf_to_decimal, is_liquidatable

__all__ = [
    "MAX_HF",
    "aggregate",
    "collateral_value",
    "compute_hf",
    "debt_value",
    "evaluate",
    "format_hf",
    "hf_to_decimal",
    "is_liquidatable",
]
