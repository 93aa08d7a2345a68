"""Per-scenario tier and energy math.

Tier identity comes from sorting a scenario's thresholds ascending — never
from the order the map was declared in. Energy is a continuous measure: each
real tier sits one increment above the previous one, and a mirrored virtual
tier on either side of the real range lets scores just outside it still
produce a meaningful value.
"""

from __future__ import annotations

import logging
from typing import Mapping

from .exceptions import InsufficientTiers, InvalidThresholds
from .models import DEFAULT_ENERGY_CONFIG, UNRANKED, EnergyConfig, Tier, TierProgress

logger = logging.getLogger(__name__)


def sorted_tiers(thresholds: Mapping[str, float]) -> list[Tier]:
    """Order a threshold map into tiers, lowest threshold first."""
    ordered = sorted(thresholds.items(), key=lambda item: item[1])
    for (_, lower), (name, upper) in zip(ordered, ordered[1:]):
        if upper == lower:
            raise InvalidThresholds(f"Tier {name!r} shares threshold {upper} with another tier")
    return [Tier(name=name, threshold=value, ordinal=i) for i, (name, value) in enumerate(ordered)]


def rank_of(score: float, thresholds: Mapping[str, float]) -> str:
    """Highest tier whose threshold the score meets, or "Unranked"."""
    rank = UNRANKED
    for tier in sorted_tiers(thresholds):
        if score < tier.threshold:
            break
        rank = tier.name
    return rank


def progress_toward_next(score: float, thresholds: Mapping[str, float]) -> TierProgress:
    """Achieved tier, the next tier up, and the fraction of the gap covered.

    Below the first tier the fraction is measured from zero. At or above the
    top tier there is nothing left to reach and progress is 1.0.
    """
    tiers = sorted_tiers(thresholds)
    if not tiers:
        return TierProgress(progress=0.0)

    first = tiers[0]
    if score < first.threshold:
        fraction = score / first.threshold if first.threshold > 0 else 0.0
        return TierProgress(next_rank=first.name, progress=min(max(fraction, 0.0), 1.0))

    for current, following in zip(tiers, tiers[1:]):
        if score < following.threshold:
            fraction = (score - current.threshold) / (following.threshold - current.threshold)
            return TierProgress(rank=current.name, next_rank=following.name, progress=fraction)

    return TierProgress(rank=tiers[-1].name, progress=1.0)


def scenario_energy(
    score: float,
    thresholds: Mapping[str, float],
    starting_energy: float,
    *,
    config: EnergyConfig = DEFAULT_ENERGY_CONFIG,
) -> float:
    """Continuous energy of a score on one scenario's tier ladder.

    The lowest real tier is worth ``starting_energy`` and every tier above it
    adds ``config.increment``. A virtual tier one gap below the lowest and one
    gap above the highest (mirroring the adjacent real gap) extend the ladder,
    so the result spans ``starting_energy - increment`` up to
    ``starting_energy + increment * n``. Scores under the lower virtual tier
    fall proportionally toward zero; scores past the upper virtual tier
    saturate.

    Raises:
        InsufficientTiers: fewer than two tiers, so no gap can be mirrored.
    """
    tiers = sorted_tiers(thresholds)
    if len(tiers) < 2:
        raise InsufficientTiers(len(tiers))

    step = config.increment
    lowest, second_lowest = tiers[0], tiers[1]
    highest, second_highest = tiers[-1], tiers[-2]
    fake_lower = lowest.threshold - (second_lowest.threshold - lowest.threshold)
    fake_upper = highest.threshold + (highest.threshold - second_highest.threshold)

    if score < fake_lower:
        if fake_lower <= 0:
            # Only reachable with a negative score; the proportional branch has no anchor.
            return 0.0
        return (score / fake_lower) * (starting_energy - step)

    ladder = [fake_lower] + [t.threshold for t in tiers] + [fake_upper]
    for i in range(1, len(ladder)):
        previous, current = ladder[i - 1], ladder[i]
        if previous <= score < current:
            fraction = (score - previous) / (current - previous)
            return starting_energy + (i - 2) * step + fraction * step

    return starting_energy + len(tiers) * step
