"""Estimator core: constants, models and the ideal weight formula."""

from .estimator import compute_ideal_weight, explain_ideal_weight
from .models import Exercise, PersonalInputs, WeightBreakdown

__all__ = [
    "Exercise",
    "PersonalInputs",
    "WeightBreakdown",
    "compute_ideal_weight",
    "explain_ideal_weight",
]
