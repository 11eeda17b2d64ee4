"""
Validation and JSON serialization for estimator inputs and results.

The estimator itself never validates (it clamps instead).  User-facing
entry points validate PersonalInputs here before calling it.
"""

import math
from typing import Any

from ..core.config import EXPERIENCE_LEVELS, GENDER_FACTORS
from ..core.models import Exercise, MuscleShare, PersonalInputs, WeightBreakdown


class ValidationError(ValueError):
    """Raised when data validation fails."""

    pass


def validate_finite(value: int | float, name: str) -> int | float:
    """
    Validate that a value is a finite number.

    Raises:
        ValidationError: If value is NaN or infinite
    """
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number, got {value}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Args:
        value: Value to validate
        name: Name for error message

    Returns:
        The value if valid

    Raises:
        ValidationError: If value is negative
    """
    validate_finite(value, name)
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Args:
        value: Value to validate
        name: Name for error message

    Returns:
        The value if valid

    Raises:
        ValidationError: If value is not positive
    """
    validate_finite(value, name)
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_choice(value: str, choices: tuple[str, ...], name: str) -> str:
    """Validate that value is one of choices."""
    if value not in choices:
        raise ValidationError(f"Invalid {name}: {value}. Must be one of {choices}")
    return value


def validate_personal_inputs(inputs: PersonalInputs) -> PersonalInputs:
    """
    Check user-entered inputs before estimating.

    Body weight, height and age must be positive; both masses non-negative;
    gender and experience must be known values.  Fat mass above body weight
    is allowed (the estimator clamps it).

    Raises:
        ValidationError: On the first invalid field
    """
    validate_positive(inputs.body_weight, "body_weight")
    validate_positive(inputs.height, "height")
    validate_positive(inputs.age, "age")
    validate_non_negative(inputs.skeletal_muscle_mass, "skeletal_muscle_mass")
    validate_non_negative(inputs.body_fat_mass, "body_fat_mass")
    validate_choice(inputs.gender, tuple(GENDER_FACTORS), "gender")
    validate_choice(inputs.experience, tuple(EXPERIENCE_LEVELS), "experience")
    return inputs


def personal_inputs_to_dict(inputs: PersonalInputs) -> dict[str, Any]:
    """Convert PersonalInputs to a JSON-compatible dict."""
    return {
        "body_weight": inputs.body_weight,
        "height": inputs.height,
        "age": inputs.age,
        "gender": inputs.gender,
        "experience": inputs.experience,
        "skeletal_muscle_mass": inputs.skeletal_muscle_mass,
        "body_fat_mass": inputs.body_fat_mass,
    }


def dict_to_personal_inputs(data: dict[str, Any]) -> PersonalInputs:
    """
    Convert dict to validated PersonalInputs.

    Raises:
        ValidationError: If a field is missing or invalid
    """
    try:
        inputs = PersonalInputs(
            body_weight=float(data["body_weight"]),
            height=float(data["height"]),
            age=float(data["age"]),
            gender=str(data["gender"]),  # type: ignore[arg-type]
            experience=str(data["experience"]),  # type: ignore[arg-type]
            skeletal_muscle_mass=float(data["skeletal_muscle_mass"]),
            body_fat_mass=float(data["body_fat_mass"]),
        )
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid personal inputs: {e}") from e
    return validate_personal_inputs(inputs)


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """Convert Exercise to a JSON-compatible dict."""
    return {
        "id": exercise.id,
        "name": exercise.name,
        "description": exercise.description,
        "base_weight_factor": exercise.base_weight_factor,
        "muscle_involvement": dict(exercise.muscle_involvement),
    }


def breakdown_to_dict(breakdown: WeightBreakdown) -> dict[str, Any]:
    """Convert WeightBreakdown to a JSON-compatible dict (weights rounded to 0.1 kg)."""
    return {
        "recommended_kg": round(breakdown.recommended_kg, 1),
        "skeletal_muscle_mass": breakdown.skeletal_muscle_mass,
        "factors": {
            "gender": breakdown.gender_factor,
            "age": breakdown.age_factor,
            "experience": breakdown.experience_factor,
            "height": breakdown.height_factor,
            "fat": breakdown.fat_factor,
            "exercise": breakdown.exercise_factor,
        },
    }


def muscle_share_to_dict(share: MuscleShare) -> dict[str, Any]:
    d: dict[str, Any] = {
        "muscle": share.muscle,
        "involvement": share.involvement,
        "share": round(share.share, 4),
    }
    if share.load_kg is not None:
        d["load_kg"] = round(share.load_kg, 1)
    return d
