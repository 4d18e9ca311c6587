# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""Probability and proximity helpers shared by every pass module."""

from .registry import distance


def chance(rng, rate: float, dt: float = 1.0) -> bool:
    """Bernoulli draw for a per-year *rate* over *dt* years.

    The summed rate is capped at 1.0 before scaling, and the scaled
    probability is capped again so a long interval cannot exceed certainty.
    """
    p = min(1.0, max(0.0, rate)) * dt
    return rng.random() < min(1.0, p)


def nearest(civ, others, radius: float) -> list:
    """(distance, other) pairs of live agents within *radius*, nearest first."""
    out = [(distance(civ, o), o) for o in others if o is not civ and o.alive]
    return sorted((p for p in out if p[0] < radius), key=lambda p: (p[0], p[1].id))


def jitter(rng, position, spread: float) -> tuple:
    """Position offset by up to ±spread on each axis."""
    return (position[0] + rng.uniform(-spread, spread),
            position[1] + rng.uniform(-spread, spread))
