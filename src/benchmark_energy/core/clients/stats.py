"""Aim trainer stats file reader.

Every finished run writes one CSV file to the game's ``stats`` directory,
named ``<scenario> - <mode> - <YYYY.MM.DD-HH.MM.SS> Stats.csv``. The summary
lines at the bottom are ``Key:,value`` pairs; only those are read here.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Iterable, Optional, Union

from ..models import ScoreRecord

logger = logging.getLogger(__name__)

STATS_SUBDIR = Path("common") / "FPSAimTrainer" / "FPSAimTrainer" / "stats"
FILENAME_SUFFIX = " Stats.csv"
CM_PER_360 = "cm/360"

# Summary keys mapped to ScoreRecord fields and their parsers
SUMMARY_FIELDS: dict[str, tuple[str, type]] = {
    "Score": ("high_score", float),
    "Kills": ("kills", int),
    "Hit Count": ("hits", int),
    "Miss Count": ("misses", int),
    "FOVScale": ("fov_scale", str),
    "FOV": ("fov", float),
    "Resolution": ("resolution", str),
    "Avg FPS": ("avg_fps", float),
    "Sens Scale": ("sens_scale", str),
    "Horiz Sens": ("horiz_sens", float),
    "Vert Sens": ("vert_sens", float),
}


def _parse_value(raw: str, kind: type):
    value = raw.lstrip(",").strip()
    if kind is str:
        return value
    try:
        result = kind(value)
    except ValueError:
        return kind()
    if kind is float and not math.isfinite(result):
        return kind()
    return result


def _split_filename(filename: str) -> Optional[tuple[str, str]]:
    """Return (scenario, date stamp) from a stats file name."""
    parts = filename.split(" - ")
    if len(parts) < 3 or not parts[0]:
        return None
    return parts[0], parts[2].replace(FILENAME_SUFFIX, "")


def parse_stats_file(path: Union[str, Path]) -> Optional[ScoreRecord]:
    """Parse one stats CSV into a ScoreRecord, or None if the name is malformed."""
    path = Path(path)
    named = _split_filename(path.name)
    if named is None:
        logger.debug("Skipping %s: unexpected file name", path.name)
        return None
    scenario_name, stamp = named

    values: dict = {}
    for line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        parts = line.split(":")
        if len(parts) != 2:
            continue
        key = parts[0].strip()
        if key in SUMMARY_FIELDS:
            field, kind = SUMMARY_FIELDS[key]
            values[field] = _parse_value(parts[1].strip(), kind)

    sens_scale = values.pop("sens_scale", "")
    horiz = values.pop("horiz_sens", 0.0)
    vert = values.pop("vert_sens", 0.0)
    sens_cm = (horiz, vert) if sens_scale == CM_PER_360 else None

    return ScoreRecord(
        scenario_name=scenario_name,
        high_score=values.pop("high_score", 0.0),
        sens_cm=sens_cm,
        date=stamp,
        **values,
    )


def collect_high_scores(
    stats_dir: Union[str, Path],
    scenarios: Iterable[str],
) -> dict[str, ScoreRecord]:
    """Best run per scenario among the stats files of the known scenarios."""
    stats_dir = Path(stats_dir)
    names = list(scenarios)
    best: dict[str, ScoreRecord] = {}
    scanned = 0

    for path in sorted(stats_dir.glob("*.csv")):
        if not any(path.name.startswith(name) for name in names):
            continue
        try:
            record = parse_stats_file(path)
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            continue
        scanned += 1
        if record is None or record.scenario_name not in names:
            continue
        current = best.get(record.scenario_name)
        if current is None or record.high_score > current.high_score:
            best[record.scenario_name] = record

    logger.info("Scanned %d stats files in %s, %d scenarios with scores", scanned, stats_dir, len(best))
    return best


def steam_library_paths(steam_root: Union[str, Path]) -> list[Path]:
    """All ``steamapps`` directories of a Steam install, default library last."""
    steam_root = Path(steam_root)
    library_file = steam_root / "steamapps" / "libraryfolders.vdf"
    paths: list[Path] = []

    try:
        content = library_file.read_text(encoding="utf-8", errors="replace")
    except OSError:
        content = ""

    for line in content.splitlines():
        parts = line.split('"')
        if len(parts) > 3 and parts[1] == "path":
            paths.append(Path(parts[3]) / "steamapps")

    paths.append(steam_root / "steamapps")
    return paths


def find_stats_dir(steam_roots: Iterable[Union[str, Path]]) -> Optional[Path]:
    """First existing stats directory under any library of the given Steam installs."""
    for root in steam_roots:
        for library in steam_library_paths(root):
            candidate = library / STATS_SUBDIR
            if candidate.is_dir():
                logger.info("Found stats directory at %s", candidate)
                return candidate
    return None
