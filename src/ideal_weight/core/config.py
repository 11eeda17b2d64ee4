"""
Configuration constants for the ideal exercise weight model.

All adjustable parameters of the estimator are centralized here.
Every clamp bound is part of the model's contract and covered by tests.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Mapping

# =============================================================================
# GENDER
# =============================================================================

GENDER_FACTORS: Final[Mapping[str, float]] = MappingProxyType(
    {
        "male": 1.0,
        "female": 0.9,
    }
)

# =============================================================================
# AGE (linear decay past the threshold, intentionally unclamped)
# =============================================================================

AGE_DECAY_START: Final[float] = 30.0  # Years; no decay at or below
AGE_DECAY_PER_YEAR: Final[float] = 0.01  # 1% per year past AGE_DECAY_START

# =============================================================================
# EXPERIENCE TIERS
# =============================================================================


@dataclass(frozen=True)
class ExperienceLevel:
    """Multiplier and display label for one training-experience tier."""

    factor: float
    label: str


EXPERIENCE_LEVELS: Final[Mapping[str, ExperienceLevel]] = MappingProxyType(
    {
        "cat1": ExperienceLevel(0.6, "Cat I (Beginner, 0-6 months)"),
        "cat2": ExperienceLevel(0.7, "Cat II (Novice, 6-12 months)"),
        "cat3": ExperienceLevel(0.8, "Cat III (Intermediate, 1-2 years)"),
        "cat4": ExperienceLevel(0.9, "Cat IV (Advanced, 3-4 years)"),
        "cat5": ExperienceLevel(1.0, "Cat V (Elite, 5+ years)"),
    }
)

DEFAULT_EXPERIENCE_FACTOR: Final[float] = 0.8  # cat3-equivalent

# =============================================================================
# HEIGHT
# =============================================================================

AVERAGE_HEIGHT_CM: Final[Mapping[str, float]] = MappingProxyType(
    {
        "male": 175.0,
        "female": 162.0,
    }
)

HEIGHT_INFLUENCE: Final[float] = 0.0025  # Factor change per cm of deviation
HEIGHT_FACTOR_MIN: Final[float] = 0.85
HEIGHT_FACTOR_MAX: Final[float] = 1.15

# =============================================================================
# BODY FAT
# =============================================================================

FAT_INFLUENCE: Final[float] = 0.5
FAT_FACTOR_MIN: Final[float] = 0.7
FAT_FACTOR_MAX: Final[float] = 1.1
BODY_WEIGHT_EPSILON: Final[float] = 0.0001  # Floor for the fat-mass clamp

# =============================================================================
# EXERCISE
# =============================================================================

DEFAULT_EXERCISE_FACTOR: Final[float] = 1.0  # Used when the base factor is not finite
