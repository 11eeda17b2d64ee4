"""
Shape validation for exercise catalog records.

Backends return loosely-typed JSON.  Records are normalized into a common
dict shape by each source and then passed through validate_exercise_data(),
which keeps only well-formed entries.  Malformed entries are dropped
silently: upstream data quality is not a user-facing error.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.models import Exercise


def is_number(value: Any) -> bool:
    """True for int/float values; bool is excluded even though it subclasses int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_number(value: Any, finite_only: bool = True) -> float | None:
    """
    Coerce a JSON scalar to float.

    Numbers pass through, numeric strings are parsed.  Booleans, None,
    containers and unparseable strings give None.  With finite_only, NaN
    and ±inf also give None.
    """
    if is_number(value):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if finite_only and not math.isfinite(number):
        return None
    return number


def parse_muscle_involvement(raw: Any) -> dict[str, float] | None:
    """
    Parse an opaque muscle -> score document.

    Accepts a mapping or its JSON text.  Values that are not numeric or not
    finite are dropped.  Returns None when the document itself is unusable,
    so the owning record fails validation.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(raw, Mapping):
        return None

    involvement: dict[str, float] = {}
    for muscle, score in raw.items():
        number = coerce_number(score)
        if number is None:
            continue
        involvement[str(muscle)] = number
    return involvement


def is_valid_exercise_record(record: Any) -> bool:
    """Check one raw record has every required field with the right type."""
    if not isinstance(record, Mapping):
        return False
    return (
        isinstance(record.get("id"), str)
        and isinstance(record.get("name"), str)
        and isinstance(record.get("description"), str)
        and is_number(record.get("base_weight_factor"))
        and isinstance(record.get("muscle_involvement"), Mapping)
    )


def validate_exercise_data(records: Iterable[Any]) -> list[Exercise]:
    """
    Keep only well-formed records and convert them to Exercise objects.

    Args:
        records: Raw records shaped {id, name, description, base_weight_factor, muscle_involvement}

    Returns:
        Exercises for the valid subset, in input order
    """
    return [
        Exercise(
            id=record["id"],
            name=record["name"],
            description=record["description"],
            base_weight_factor=float(record["base_weight_factor"]),
            muscle_involvement=dict(record["muscle_involvement"]),
        )
        for record in records
        if is_valid_exercise_record(record)
    ]
