"""
Data models for ideal-weight.

PersonalInputs carries the person's biometrics into the estimator.
Exercise is one validated catalog entry.  Both are frozen: catalog
snapshots and inputs are never mutated once built.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping

Gender = Literal["male", "female"]
ExperienceCategory = Literal["cat1", "cat2", "cat3", "cat4", "cat5"]


@dataclass(frozen=True)
class PersonalInputs:
    """
    Biometric and training inputs for one person.

    Units: kilograms for masses, centimetres for height, years for age.
    No validation happens here; the estimator clamps its factors instead.
    """

    body_weight: float
    height: float
    age: float
    gender: Gender
    experience: ExperienceCategory
    skeletal_muscle_mass: float
    body_fat_mass: float


@dataclass(frozen=True)
class Exercise:
    """
    One resolved catalog entry.

    muscle_involvement maps muscle name -> activation score (roughly 0-100).
    It is used for display breakdowns only, not by the estimator.
    """

    id: str
    name: str
    description: str
    base_weight_factor: float
    muscle_involvement: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only view so a shared catalog snapshot cannot be edited in place
        object.__setattr__(
            self, "muscle_involvement", MappingProxyType(dict(self.muscle_involvement))
        )


@dataclass(frozen=True)
class WeightBreakdown:
    """Every factor that went into one recommendation, plus the product."""

    skeletal_muscle_mass: float
    gender_factor: float
    age_factor: float
    experience_factor: float
    height_factor: float
    fat_factor: float
    exercise_factor: float
    recommended_kg: float


@dataclass(frozen=True)
class MuscleShare:
    """One muscle's share of an exercise's total involvement."""

    muscle: str
    involvement: float
    share: float  # 0-1, fraction of the summed involvement
    load_kg: float | None = None  # share × recommended weight, when known
