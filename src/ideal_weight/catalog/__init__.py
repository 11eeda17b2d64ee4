"""
Exercise catalog resolution.

Sources fetch raw records, the validation filter keeps well-formed ones,
and the resolver picks the first source that yields a catalog.
"""

from .errors import (
    CatalogError,
    CatalogIntegrityError,
    ManifestError,
    NoExercisesAvailableError,
    TransportError,
    UnknownExerciseError,
)
from .resolver import CatalogResolver, build_resolver, find_exercise, resolve_exercise_catalog
from .validation import validate_exercise_data

__all__ = [
    "CatalogError",
    "CatalogIntegrityError",
    "CatalogResolver",
    "ManifestError",
    "NoExercisesAvailableError",
    "TransportError",
    "UnknownExerciseError",
    "build_resolver",
    "find_exercise",
    "resolve_exercise_catalog",
    "validate_exercise_data",
]
