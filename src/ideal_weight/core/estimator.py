"""
Ideal exercise weight estimator.

The recommended working weight is skeletal muscle mass multiplied by six
independent correction factors:

    weight = SMM × F_gender × F_age × F_exp × F_fat × F_height × F_exercise

Each continuous factor except age is clamped to its own range so one
extreme input cannot blow up or invert the estimate.  The age factor is
left unclamped and turns negative past 130 years; that boundary is kept
as-is and pinned by tests.
"""

from __future__ import annotations

import math

from .config import (
    AGE_DECAY_PER_YEAR,
    AGE_DECAY_START,
    AVERAGE_HEIGHT_CM,
    BODY_WEIGHT_EPSILON,
    DEFAULT_EXERCISE_FACTOR,
    DEFAULT_EXPERIENCE_FACTOR,
    EXPERIENCE_LEVELS,
    FAT_FACTOR_MAX,
    FAT_FACTOR_MIN,
    FAT_INFLUENCE,
    GENDER_FACTORS,
    HEIGHT_FACTOR_MAX,
    HEIGHT_FACTOR_MIN,
    HEIGHT_INFLUENCE,
)
from .models import PersonalInputs, WeightBreakdown


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def gender_factor(gender: str) -> float:
    """F_gender: 1.0 for male, 0.9 for anything else."""
    return GENDER_FACTORS["male"] if gender == "male" else GENDER_FACTORS["female"]


def age_factor(age: float) -> float:
    """
    F_age = 1 for age ≤ 30, else 1 − 0.01 × (age − 30).

    Not clamped: ages above 130 give a negative factor.
    """
    if age <= AGE_DECAY_START:
        return 1.0
    return 1.0 - AGE_DECAY_PER_YEAR * (age - AGE_DECAY_START)


def experience_factor(experience: str) -> float:
    """Tier multiplier; unknown tiers fall back to the cat3 value (0.8)."""
    level = EXPERIENCE_LEVELS.get(experience)
    return level.factor if level is not None else DEFAULT_EXPERIENCE_FACTOR


def height_factor(height: float, gender: str) -> float:
    """
    F_height = clip(1 − 0.0025 × (height − avg), 0.85, 1.15).

    avg is 175 cm for males and 162 cm for females.  Taller lifters get a
    smaller factor (longer levers).
    """
    average = AVERAGE_HEIGHT_CM["male"] if gender == "male" else AVERAGE_HEIGHT_CM["female"]
    raw = 1.0 - HEIGHT_INFLUENCE * (height - average)
    return _clamp(raw, HEIGHT_FACTOR_MIN, HEIGHT_FACTOR_MAX)


def fat_factor(body_fat_mass: float, body_weight: float) -> float:
    """
    F_fat = clip(1 − 0.5 × fat_fraction, 0.7, 1.1).

    Fat mass is first clamped to [0, max(body_weight, ε)] so the fraction
    never exceeds 1; a non-positive body weight gives a fraction of 0.
    """
    fat = min(max(0.0, body_fat_mass), max(BODY_WEIGHT_EPSILON, body_weight))
    fat_frac = fat / body_weight if body_weight > 0 else 0.0
    raw = 1.0 - FAT_INFLUENCE * fat_frac
    return _clamp(raw, FAT_FACTOR_MIN, FAT_FACTOR_MAX)


def exercise_factor(exercise_base_factor: float) -> float:
    """Pass the exercise base factor through, or 1.0 when it is not finite."""
    try:
        finite = math.isfinite(exercise_base_factor)
    except TypeError:
        finite = False
    return float(exercise_base_factor) if finite else DEFAULT_EXERCISE_FACTOR


def explain_ideal_weight(inputs: PersonalInputs, exercise_base_factor: float) -> WeightBreakdown:
    """
    Compute the recommendation and return every factor alongside it.

    Args:
        inputs: Person's biometrics and experience tier
        exercise_base_factor: Exercise-specific leverage/difficulty multiplier

    Returns:
        WeightBreakdown with each factor and recommended_kg
    """
    smm = max(0.0, inputs.skeletal_muscle_mass)
    f_gender = gender_factor(inputs.gender)
    f_age = age_factor(inputs.age)
    f_exp = experience_factor(inputs.experience)
    f_height = height_factor(inputs.height, inputs.gender)
    f_fat = fat_factor(inputs.body_fat_mass, inputs.body_weight)
    f_exercise = exercise_factor(exercise_base_factor)

    recommended = smm * f_gender * f_age * f_exp * f_fat * f_height * f_exercise

    return WeightBreakdown(
        skeletal_muscle_mass=smm,
        gender_factor=f_gender,
        age_factor=f_age,
        experience_factor=f_exp,
        height_factor=f_height,
        fat_factor=f_fat,
        exercise_factor=f_exercise,
        recommended_kg=recommended,
    )


def compute_ideal_weight(inputs: PersonalInputs, exercise_base_factor: float) -> float:
    """
    Recommended working weight in the same mass unit as body_weight.

    Never raises for numeric input.  Returns 0 when skeletal muscle mass
    is 0 (or negative, which is clamped to 0).
    """
    return explain_ideal_weight(inputs, exercise_base_factor).recommended_kg
