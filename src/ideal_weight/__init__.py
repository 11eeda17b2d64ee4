"""
ideal-weight: ideal exercise weight estimation from body composition.

compute_ideal_weight() turns a person's biometrics and an exercise's base
factor into a recommended working weight; resolve_exercise_catalog()
fetches the exercises those factors come from.
"""

from .catalog import resolve_exercise_catalog, validate_exercise_data
from .core import Exercise, PersonalInputs, compute_ideal_weight, explain_ideal_weight

__version__ = "0.1.0"

__all__ = [
    "Exercise",
    "PersonalInputs",
    "compute_ideal_weight",
    "explain_ideal_weight",
    "resolve_exercise_catalog",
    "validate_exercise_data",
]
