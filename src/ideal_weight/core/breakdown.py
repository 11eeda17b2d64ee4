"""
Muscle involvement breakdown for display.

Turns an exercise's involvement map into shares of the total, ordered
from most to least involved.  When a recommended weight is supplied the
load is split across muscles proportionally.
"""

from __future__ import annotations

from .models import Exercise, MuscleShare


def muscle_breakdown(
    exercise: Exercise,
    recommended_kg: float | None = None,
    min_involvement: float = 0.0,
) -> list[MuscleShare]:
    """
    Split an exercise's involvement into per-muscle shares.

    Args:
        exercise: Validated catalog entry
        recommended_kg: Optional recommendation to distribute across muscles
        min_involvement: Muscles scoring at or below this are left out

    Returns:
        MuscleShare list sorted by involvement (desc), then muscle name.
        Empty when no muscle scores above min_involvement.
    """
    scores = [
        (muscle, float(score))
        for muscle, score in exercise.muscle_involvement.items()
        if score > min_involvement
    ]
    total = sum(score for _, score in scores)
    if total <= 0:
        return []

    scores.sort(key=lambda item: (-item[1], item[0]))
    shares: list[MuscleShare] = []
    for muscle, score in scores:
        share = score / total
        load = share * recommended_kg if recommended_kg is not None else None
        shares.append(MuscleShare(muscle=muscle, involvement=score, share=share, load_kg=load))
    return shares


def primary_muscles(exercise: Exercise, limit: int = 3) -> list[str]:
    """Names of the most involved muscles, at most *limit* of them."""
    return [s.muscle for s in muscle_breakdown(exercise)[:limit]]
