"""Pydantic data models — the shared business objects.

The threshold catalogue, score snapshot and every computed result are
described here. The scoring engine and the MCP server both speak in these
types.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

UNRANKED = "Unranked"

STATS_DATE_FORMAT = "%Y.%m.%d-%H.%M.%S"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Difficulty(str, Enum):
    """Benchmark difficulty. Declaration order is the ladder order."""

    NOVICE = "Novice"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

    @classmethod
    def ordered(cls) -> list["Difficulty"]:
        return list(cls)

    @property
    def position(self) -> int:
        return Difficulty.ordered().index(self)


class EnergyConfig(BaseModel):
    """Energy scale constants."""

    model_config = ConfigDict(frozen=True)

    base: float = Field(100.0, gt=0, description="Energy of the lowest tier of the first difficulty")
    increment: float = Field(100.0, gt=0, description="Energy added per tier step")


DEFAULT_ENERGY_CONFIG = EnergyConfig()


class Tier(BaseModel):
    """A rank level of one scenario, positioned by its threshold."""

    name: str
    threshold: float
    ordinal: int = Field(ge=0, description="Position after sorting thresholds ascending")


def _reject_duplicate_names(items: list, kind: str) -> list:
    seen: set[str] = set()
    for item in items:
        if item.name in seen:
            raise ValueError(f"Duplicate {kind} name: {item.name!r}")
        seen.add(item.name)
    return items


class Scenario(BaseModel):
    """One scenario and its tier thresholds."""

    name: str
    thresholds: dict[str, float]

    @field_validator("thresholds")
    @classmethod
    def distinct_thresholds(cls, value: dict[str, float]) -> dict[str, float]:
        if len(set(value.values())) != len(value):
            raise ValueError("Tier thresholds must be distinct")
        return value


class Subcategory(BaseModel):
    name: str
    scenarios: list[Scenario] = Field(default_factory=list)

    @field_validator("scenarios")
    @classmethod
    def unique_names(cls, value: list[Scenario]) -> list[Scenario]:
        return _reject_duplicate_names(value, "scenario")

    def thresholds_by_scenario(self) -> dict[str, dict[str, float]]:
        return {s.name: s.thresholds for s in self.scenarios}


class Category(BaseModel):
    name: str
    subcategories: list[Subcategory] = Field(default_factory=list)

    @field_validator("subcategories")
    @classmethod
    def unique_names(cls, value: list[Subcategory]) -> list[Subcategory]:
        return _reject_duplicate_names(value, "subcategory")


class DifficultyBenchmark(BaseModel):
    """All categories of one difficulty."""

    difficulty: Difficulty
    categories: list[Category] = Field(default_factory=list)

    @field_validator("categories")
    @classmethod
    def unique_names(cls, value: list[Category]) -> list[Category]:
        return _reject_duplicate_names(value, "category")

    @property
    def subcategory_count(self) -> int:
        return sum(len(c.subcategories) for c in self.categories)

    def iter_scenarios(self):
        for category in self.categories:
            for subcategory in category.subcategories:
                yield from subcategory.scenarios


class ThresholdCatalogue(BaseModel):
    """Threshold catalogue for every difficulty of a benchmark."""

    difficulties: list[DifficultyBenchmark] = Field(default_factory=list)

    @model_validator(mode="after")
    def one_per_difficulty(self) -> "ThresholdCatalogue":
        seen = [d.difficulty for d in self.difficulties]
        if len(set(seen)) != len(seen):
            raise ValueError("Each difficulty may appear only once")
        self.difficulties.sort(key=lambda d: d.difficulty.position)
        return self

    @classmethod
    def from_nested(cls, document: Mapping[str, Any]) -> "ThresholdCatalogue":
        """Build from the nested Difficulty → Category → Subcategory → Scenario → Tier mapping."""
        difficulties = []
        for difficulty, categories in document.items():
            difficulties.append({
                "difficulty": difficulty,
                "categories": [
                    {
                        "name": category,
                        "subcategories": [
                            {
                                "name": subcategory,
                                "scenarios": [
                                    {"name": scenario, "thresholds": thresholds}
                                    for scenario, thresholds in scenarios.items()
                                ],
                            }
                            for subcategory, scenarios in subcategories.items()
                        ],
                    }
                    for category, subcategories in categories.items()
                ],
            })
        return cls.model_validate({"difficulties": difficulties})

    def get(self, difficulty: Difficulty) -> Optional[DifficultyBenchmark]:
        return next((d for d in self.difficulties if d.difficulty == difficulty), None)

    def scenario_names(self) -> list[str]:
        names: list[str] = []
        for benchmark in self.difficulties:
            for scenario in benchmark.iter_scenarios():
                if scenario.name not in names:
                    names.append(scenario.name)
        return names


class ScoreRecord(BaseModel):
    """Best recorded run of a scenario. Only high_score feeds the engine."""

    scenario_name: str
    high_score: float
    kills: int = 0
    hits: int = 0
    misses: int = 0
    fov: float = 0.0
    fov_scale: str = ""
    resolution: str = ""
    avg_fps: float = 0.0
    sens_cm: Optional[tuple[float, float]] = Field(None, description="(horizontal, vertical) cm/360 when known")
    date: str = ""

    @property
    def accuracy(self) -> Optional[float]:
        shots = self.hits + self.misses
        if shots <= 0:
            return None
        return self.hits / shots

    @property
    def played_at(self) -> Optional[datetime]:
        if not self.date:
            return None
        try:
            return datetime.strptime(self.date, STATS_DATE_FORMAT)
        except ValueError:
            return None


class TierProgress(BaseModel):
    """Where a score sits on a scenario's tier ladder."""

    rank: str = UNRANKED
    next_rank: Optional[str] = None
    progress: float = Field(ge=0.0, le=1.0, description="Fraction of the way to next_rank")


class ScenarioResult(BaseModel):
    name: str
    rank: str = UNRANKED
    next_rank: Optional[str] = None
    progress: float = 0.0
    energy: Optional[float] = Field(None, description="None when the scenario has no recorded score")
    score: Optional[ScoreRecord] = None


class SubcategoryResult(BaseModel):
    name: str
    energy: float
    highest_rank: str = UNRANKED
    scenarios: list[ScenarioResult] = Field(default_factory=list)


class CategoryResult(BaseModel):
    name: str
    energy: float
    subcategories: list[SubcategoryResult] = Field(default_factory=list)


class DifficultyReport(BaseModel):
    """Per-difficulty aggregate, classified rank and completion flags."""

    difficulty: Difficulty
    starting_energy: float
    tiers: list[str]
    energy: float = Field(description="Harmonic mean of subcategory energies, 0 when incomplete")
    overall_rank: str = UNRANKED
    overall_rank_complete: bool = False
    completion: dict[str, bool] = Field(default_factory=dict, description="Tier name to completion flag")
    categories: list[CategoryResult] = Field(default_factory=list)
    computed_at: datetime = Field(default_factory=_utcnow)


class BenchmarkReport(BaseModel):
    difficulties: list[DifficultyReport] = Field(default_factory=list)
    scored_scenarios: int = 0
    total_scenarios: int = 0
    computed_at: datetime = Field(default_factory=_utcnow)
