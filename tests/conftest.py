"""
Pytest configuration and shared fixtures for benchmark energy tests
"""

import pytest

from benchmark_energy.core.models import ScoreRecord, ThresholdCatalogue


CATALOGUE_DOCUMENT = {
    "Novice": {
        "Clicking": {
            "Dynamic": {
                "Pasu": {"Iron": 100, "Bronze": 200, "Silver": 300, "Gold": 400},
            },
            "Static": {
                # Declared out of order on purpose; tiers sort by threshold
                "1w4ts": {"Gold": 80, "Iron": 20, "Silver": 60, "Bronze": 40},
            },
        },
        "Tracking": {
            "Precise": {
                "Smoothbot": {"Iron": 1000, "Bronze": 2000, "Silver": 3000, "Gold": 4000},
            },
        },
    },
    "Intermediate": {
        "Clicking": {
            "Dynamic": {
                "Pasu Hard": {"Platinum": 500, "Diamond": 600, "Jade": 700, "Master": 800},
            },
        },
    },
}


def make_score(scenario: str, high_score: float, **extra) -> ScoreRecord:
    return ScoreRecord(scenario_name=scenario, high_score=high_score, **extra)


@pytest.fixture
def catalogue_document():
    """Nested catalogue document as published"""
    return CATALOGUE_DOCUMENT


@pytest.fixture
def catalogue():
    """Typed threshold catalogue"""
    return ThresholdCatalogue.from_nested(CATALOGUE_DOCUMENT)


@pytest.fixture
def partial_scores():
    """Novice scores with Smoothbot never attempted"""
    return {
        "Pasu": make_score("Pasu", 250),
        "1w4ts": make_score("1w4ts", 60),
    }


@pytest.fixture
def full_scores(partial_scores):
    """Every Novice subcategory has a scored run"""
    scores = dict(partial_scores)
    scores["Smoothbot"] = make_score("Smoothbot", 4000)
    return scores


STATS_FILE_BODY = """Kill #,Timestamp,Bot,Weapon,TTK,Shots,Hits,Accuracy
1,12:30:01.123,target,pistol,0.5s,2,1,0.5
Kills:,25
Deaths:,0
Fight Time:,60.0
Score:,{score}
Scenario:,{scenario}
Challenge Start:,12:29:00.000
Max FPS (config):,0
Sens Scale:,{sens_scale}
Horiz Sens:,34.5
Vert Sens:,30.0
FOV:,103.0
Resolution:,1920x1080
Avg FPS:,240.5
Hit Count:,80
Miss Count:,20
FOVScale:,Overwatch
"""


@pytest.fixture
def write_stats_file(tmp_path):
    """Factory writing one stats CSV into a temporary stats directory"""
    stats_dir = tmp_path / "stats"
    stats_dir.mkdir()

    def _write(scenario, score, stamp="2024.01.15-12.30.45", sens_scale="cm/360", mode="Challenge"):
        path = stats_dir / f"{scenario} - {mode} - {stamp} Stats.csv"
        path.write_text(STATS_FILE_BODY.format(score=score, scenario=scenario, sens_scale=sens_scale), encoding="utf-8")
        return path

    _write.stats_dir = stats_dir
    return _write
