"""Benchmark Energy MCP Server.

FastMCP server exposing the benchmark ranking engine as read-only tools.
Run: benchmark-energy-mcp
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .config import get_catalogue_path, get_energy_config, get_log_level, get_stats_dir
from .core.clients.catalogue import load_catalogue
from .core.clients.stats import collect_high_scores
from .core.energy import progress_toward_next, scenario_energy
from .core.models import Difficulty, DifficultyReport
from .core.scoring import difficulty_tiers, score_benchmark, starting_energy, tier_counts

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging and report the energy scale in use."""
    logging.basicConfig(level=get_log_level(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    config = get_energy_config()
    logger.info("Energy scale: base=%s increment=%s", config.base, config.increment)
    yield


mcp = FastMCP(
    "Benchmark Energy",
    instructions="Ask your AI how your aim trainer benchmark is going — per-scenario ranks and energy, subcategory aggregates, and overall rank per difficulty.",
    lifespan=lifespan,
)


def _parse_difficulty(value: str) -> Difficulty:
    for difficulty in Difficulty:
        if difficulty.value.lower() == value.strip().lower():
            return difficulty
    choices = ", ".join(d.value for d in Difficulty)
    raise ValueError(f"Unknown difficulty: {value!r}. Use one of: {choices}")


def _report_summary(report: DifficultyReport) -> str:
    name = report.difficulty.value
    if report.energy == 0:
        return f"{name}: incomplete — every subcategory needs at least one scored run for an overall rank."
    complete = " (complete)" if report.overall_rank_complete else ""
    return f"{name}: {report.overall_rank}{complete} at {report.energy:.1f} energy"


# ─── Tool 1: Benchmark Report ────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
def benchmark_report(difficulty: str = "", catalogue_path: str = "", stats_dir: str = "") -> dict:
    """Ranks, progress and energy for every scenario, plus subcategory, category and overall results.

    Args:
        difficulty: Limit the report to one difficulty ('Novice', 'Intermediate', 'Advanced'). Empty for all.
        catalogue_path: Threshold catalogue JSON file. Defaults to BENCHMARK_CATALOGUE_PATH.
        stats_dir: Aim trainer stats directory. Defaults to BENCHMARK_STATS_DIR or the Steam library.
    """
    catalogue = load_catalogue(get_catalogue_path(catalogue_path))
    scores = collect_high_scores(get_stats_dir(stats_dir), catalogue.scenario_names())
    report = score_benchmark(catalogue, scores, config=get_energy_config())

    if difficulty:
        wanted = _parse_difficulty(difficulty)
        report.difficulties = [d for d in report.difficulties if d.difficulty == wanted]

    return {
        "title": "Benchmark Report",
        "report": report.model_dump(mode="json"),
        "summary": " | ".join(_report_summary(d) for d in report.difficulties)
        or "No difficulties in the catalogue",
    }


# ─── Tool 2: Single Scenario ─────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
def benchmark_scenario(score: float, thresholds: dict[str, float], starting_energy: float = 100.0) -> dict:
    """Rank, progress toward the next tier, and energy of one score.

    Args:
        score: The scenario high score.
        thresholds: Tier name to score threshold, e.g. {"Bronze": 500, "Silver": 600, "Gold": 700}.
        starting_energy: Energy of the lowest tier. Default 100 (first difficulty).
    """
    progress = progress_toward_next(score, thresholds)
    energy = scenario_energy(score, thresholds, starting_energy, config=get_energy_config())
    next_part = f", {progress.progress:.0%} toward {progress.next_rank}" if progress.next_rank else ""
    return {
        "rank": progress.rank,
        "next_rank": progress.next_rank,
        "progress": progress.progress,
        "energy": energy,
        "summary": f"{score:g} is {progress.rank}{next_part} ({energy:.1f} energy)",
    }


# ─── Tool 3: Tier Ladder ─────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
def benchmark_ladder(catalogue_path: str = "") -> dict:
    """Tier ladder and energy floor of every tier, for each difficulty.

    Args:
        catalogue_path: Threshold catalogue JSON file. Defaults to BENCHMARK_CATALOGUE_PATH.
    """
    catalogue = load_catalogue(get_catalogue_path(catalogue_path))
    config = get_energy_config()
    counts = tier_counts(catalogue)

    ladders = []
    for benchmark in catalogue.difficulties:
        start = starting_energy(benchmark.difficulty, counts, config=config)
        ladders.append({
            "difficulty": benchmark.difficulty.value,
            "starting_energy": start,
            "tiers": [
                {"name": tier, "energy": start + i * config.increment}
                for i, tier in enumerate(difficulty_tiers(benchmark))
            ],
        })

    return {
        "title": "Tier Ladder",
        "ladders": ladders,
        "summary": " | ".join(f"{l['difficulty']}: {len(l['tiers'])} tiers from {l['starting_energy']:g}" for l in ladders)
        or "No difficulties in the catalogue",
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
