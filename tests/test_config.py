"""
Unit tests for environment configuration
"""

from pathlib import Path

import pytest

from benchmark_energy import config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "BENCHMARK_ENERGY_BASE",
        "BENCHMARK_ENERGY_INCREMENT",
        "BENCHMARK_CATALOGUE_PATH",
        "BENCHMARK_STATS_DIR",
        "BENCHMARK_LOG_LEVEL",
        "STEAM_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


class TestEnergyConfig:
    def test_defaults(self):
        energy = config.get_energy_config()
        assert (energy.base, energy.increment) == (100, 100)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_ENERGY_BASE", "50")
        monkeypatch.setenv("BENCHMARK_ENERGY_INCREMENT", "50")
        energy = config.get_energy_config()
        assert (energy.base, energy.increment) == (50, 50)

    def test_non_numeric_falls_back(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_ENERGY_INCREMENT", "lots")
        assert config.get_energy_config().increment == 100

    def test_non_positive_falls_back(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_ENERGY_BASE", "0")
        monkeypatch.setenv("BENCHMARK_ENERGY_INCREMENT", "-10")
        energy = config.get_energy_config()
        assert (energy.base, energy.increment) == (100, 100)


class TestPaths:
    def test_catalogue_path_required(self):
        with pytest.raises(ValueError, match="BENCHMARK_CATALOGUE_PATH"):
            config.get_catalogue_path()

    def test_catalogue_path_from_env(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_CATALOGUE_PATH", "/data/benchmarks.json")
        assert config.get_catalogue_path() == Path("/data/benchmarks.json")

    def test_catalogue_override_wins(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_CATALOGUE_PATH", "/data/benchmarks.json")
        assert config.get_catalogue_path("/tmp/other.json") == Path("/tmp/other.json")

    def test_stats_dir_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BENCHMARK_STATS_DIR", str(tmp_path))
        assert config.get_stats_dir() == tmp_path

    def test_stats_dir_from_steam_path(self, monkeypatch, tmp_path):
        stats = tmp_path / "steamapps" / "common" / "FPSAimTrainer" / "FPSAimTrainer" / "stats"
        stats.mkdir(parents=True)
        monkeypatch.setenv("STEAM_PATH", str(tmp_path))
        assert config.get_stats_dir() == stats

    def test_stats_dir_not_found(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config, "DEFAULT_STEAM_ROOTS", ())
        monkeypatch.setenv("STEAM_PATH", str(tmp_path))
        with pytest.raises(ValueError, match="BENCHMARK_STATS_DIR"):
            config.get_stats_dir()

    def test_log_level(self, monkeypatch):
        assert config.get_log_level() == "INFO"
        monkeypatch.setenv("BENCHMARK_LOG_LEVEL", "debug")
        assert config.get_log_level() == "DEBUG"

    def test_unknown_log_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_LOG_LEVEL", "verbose")
        assert config.get_log_level() == "INFO"
