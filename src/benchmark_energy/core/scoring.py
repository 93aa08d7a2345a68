"""Benchmark aggregation and ranking engine.

Folds per-scenario energies up to subcategories (best scenario wins), then to
categories and whole difficulties (harmonic mean), and maps an aggregate
energy back onto a difficulty's tier ladder. The harmonic mean is gated: a
group aggregate is exactly 0 until every one of its subgroups has a nonzero
value, so a partial benchmark never reports a misleading overall rank.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from .energy import progress_toward_next, rank_of, scenario_energy, sorted_tiers
from .models import (
    DEFAULT_ENERGY_CONFIG,
    UNRANKED,
    BenchmarkReport,
    CategoryResult,
    Difficulty,
    DifficultyBenchmark,
    DifficultyReport,
    EnergyConfig,
    ScenarioResult,
    ScoreRecord,
    SubcategoryResult,
    ThresholdCatalogue,
)

logger = logging.getLogger(__name__)


def difficulty_tiers(benchmark: DifficultyBenchmark) -> list[str]:
    """Tier ladder of a difficulty, lowest first.

    Each scenario contributes its tiers in threshold order. A tier not yet on
    the ladder is inserted right after the scenario's previous tier, so the
    relative order of every scenario is kept.
    """
    ladder: list[str] = []
    for scenario in benchmark.iter_scenarios():
        position = -1
        for tier in sorted_tiers(scenario.thresholds):
            if tier.name in ladder:
                position = ladder.index(tier.name)
            else:
                position += 1
                ladder.insert(position, tier.name)
    return ladder


def tier_counts(catalogue: ThresholdCatalogue) -> dict[Difficulty, int]:
    return {b.difficulty: len(difficulty_tiers(b)) for b in catalogue.difficulties}


def starting_energy(
    difficulty: Difficulty,
    tier_counts_by_difficulty: Mapping[Difficulty, int],
    *,
    config: EnergyConfig = DEFAULT_ENERGY_CONFIG,
) -> float:
    """Energy of the lowest tier of ``difficulty``.

    Every lower difficulty pushes the start up by one increment per tier, so
    energies are comparable across difficulties.
    """
    lower = Difficulty.ordered()[: difficulty.position]
    return config.base + sum(config.increment * tier_counts_by_difficulty.get(d, 0) for d in lower)


def subcategory_energy(
    scenarios: Mapping[str, Mapping[str, float]],
    scores: Mapping[str, ScoreRecord],
    starting: float,
    *,
    config: EnergyConfig = DEFAULT_ENERGY_CONFIG,
) -> float:
    """Best scenario energy in a subcategory; unscored scenarios are skipped."""
    best = 0.0
    for name, thresholds in scenarios.items():
        record = scores.get(name)
        if record is None or not thresholds:
            continue
        best = max(best, scenario_energy(record.high_score, thresholds, starting, config=config))
    return best


def harmonic_mean(values: Sequence[float], expected_count: int) -> float:
    """Harmonic mean of ``values``, or 0 unless all ``expected_count`` are present and nonzero."""
    if len(values) != expected_count or any(v == 0 for v in values):
        return 0.0
    if not values:
        return 0.0
    return len(values) / sum(1 / v for v in values)


def difficulty_energy(subcategory_energies: Sequence[float], expected_subcategory_count: int) -> float:
    energy = harmonic_mean(subcategory_energies, expected_subcategory_count)
    if energy == 0 and subcategory_energies:
        logger.debug(
            "Difficulty aggregate gated: %d of %d subcategories scored",
            sum(1 for v in subcategory_energies if v != 0),
            expected_subcategory_count,
        )
    return energy


def category_energy(subcategory_energies: Sequence[float]) -> float:
    """Harmonic mean over one category's subcategories, same gate as a difficulty."""
    return harmonic_mean(subcategory_energies, len(subcategory_energies))


def classify_overall_rank(
    energy: float,
    difficulty: Difficulty,
    tiers_by_difficulty: Mapping[Difficulty, Sequence[str]],
    *,
    config: EnergyConfig = DEFAULT_ENERGY_CONFIG,
) -> str:
    """Highest tier of ``difficulty`` whose energy floor ``energy`` reaches."""
    tiers = tiers_by_difficulty.get(difficulty, [])
    counts = {d: len(t) for d, t in tiers_by_difficulty.items()}
    start = starting_energy(difficulty, counts, config=config)

    for i in range(len(tiers) - 1, -1, -1):
        if energy >= start + i * config.increment:
            return tiers[i]
    return UNRANKED


def is_rank_complete(
    scores: Mapping[str, ScoreRecord],
    catalogue: ThresholdCatalogue,
    difficulty: Difficulty,
    rank: str,
) -> bool:
    """True when no attempted scenario of ``difficulty`` falls short of ``rank``.

    Scenarios without a recorded score never block completion, and neither do
    scenarios that define no threshold for ``rank``.
    """
    benchmark = catalogue.get(difficulty)
    if benchmark is None:
        return True

    for scenario in benchmark.iter_scenarios():
        threshold = scenario.thresholds.get(rank)
        record = scores.get(scenario.name)
        if threshold is None or record is None:
            continue
        if record.high_score < threshold:
            return False
    return True


def highest_scenario_rank(
    scenarios: Mapping[str, Mapping[str, float]],
    scores: Mapping[str, ScoreRecord],
) -> str:
    """Best tier reached by any scored scenario, compared by threshold value."""
    best_rank = UNRANKED
    best_threshold: Optional[float] = None
    for name, thresholds in scenarios.items():
        record = scores.get(name)
        if record is None:
            continue
        rank = rank_of(record.high_score, thresholds)
        if rank == UNRANKED:
            continue
        threshold = thresholds[rank]
        if best_threshold is None or threshold > best_threshold:
            best_rank, best_threshold = rank, threshold
    return best_rank


def _score_scenario(
    name: str,
    thresholds: Mapping[str, float],
    record: Optional[ScoreRecord],
    starting: float,
    config: EnergyConfig,
) -> ScenarioResult:
    if record is None or not thresholds:
        return ScenarioResult(name=name, score=record)

    progress = progress_toward_next(record.high_score, thresholds)
    return ScenarioResult(
        name=name,
        rank=progress.rank,
        next_rank=progress.next_rank,
        progress=progress.progress,
        energy=scenario_energy(record.high_score, thresholds, starting, config=config),
        score=record,
    )


def score_difficulty(
    benchmark: DifficultyBenchmark,
    scores: Mapping[str, ScoreRecord],
    catalogue: ThresholdCatalogue,
    *,
    config: EnergyConfig = DEFAULT_ENERGY_CONFIG,
) -> DifficultyReport:
    """Compute the full report of one difficulty."""
    difficulty = benchmark.difficulty
    tiers_by_difficulty = {b.difficulty: difficulty_tiers(b) for b in catalogue.difficulties}
    tiers_by_difficulty.setdefault(difficulty, difficulty_tiers(benchmark))
    counts = {d: len(t) for d, t in tiers_by_difficulty.items()}
    start = starting_energy(difficulty, counts, config=config)

    categories: list[CategoryResult] = []
    all_subcategory_energies: list[float] = []
    for category in benchmark.categories:
        subcategories: list[SubcategoryResult] = []
        for subcategory in category.subcategories:
            thresholds = subcategory.thresholds_by_scenario()
            scenarios = [
                _score_scenario(s.name, s.thresholds, scores.get(s.name), start, config)
                for s in subcategory.scenarios
            ]
            energy = subcategory_energy(thresholds, scores, start, config=config)
            subcategories.append(
                SubcategoryResult(
                    name=subcategory.name,
                    energy=energy,
                    highest_rank=highest_scenario_rank(thresholds, scores),
                    scenarios=scenarios,
                )
            )
        energies = [s.energy for s in subcategories]
        all_subcategory_energies.extend(energies)
        categories.append(CategoryResult(name=category.name, energy=category_energy(energies), subcategories=subcategories))

    energy = difficulty_energy(all_subcategory_energies, benchmark.subcategory_count)
    tiers = tiers_by_difficulty[difficulty]
    # A closed gate reports 0, which must never land on a tier floor
    overall = classify_overall_rank(energy, difficulty, tiers_by_difficulty, config=config) if energy > 0 else UNRANKED
    completion = {tier: is_rank_complete(scores, catalogue, difficulty, tier) for tier in tiers}

    logger.debug("%s: energy=%.1f rank=%s", difficulty.value, energy, overall)

    return DifficultyReport(
        difficulty=difficulty,
        starting_energy=start,
        tiers=tiers,
        energy=energy,
        overall_rank=overall,
        overall_rank_complete=is_rank_complete(scores, catalogue, difficulty, overall),
        completion=completion,
        categories=categories,
    )


def score_benchmark(
    catalogue: ThresholdCatalogue,
    scores: Mapping[str, ScoreRecord],
    *,
    config: EnergyConfig = DEFAULT_ENERGY_CONFIG,
) -> BenchmarkReport:
    """Compute reports for every difficulty in the catalogue."""
    names = catalogue.scenario_names()
    return BenchmarkReport(
        difficulties=[score_difficulty(b, scores, catalogue, config=config) for b in catalogue.difficulties],
        scored_scenarios=sum(1 for n in names if n in scores),
        total_scenarios=len(names),
    )
