"""Load daily metrics and workouts from JSON or JSONL exports.

Accepted layouts:

* a JSON array of objects,
* a JSON object with a ``"metrics"`` or ``"workouts"`` array,
* JSONL, one object per line.

Bad records are logged and skipped unless ``strict=True``, in which case the
first one raises ValueError.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, TypeVar

from vitalcore.models import DailyMetrics, WorkoutRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _read_entries(path: Path, key: str, strict: bool) -> list[tuple[int, Any]]:
    """Return ``(line_or_index, entry)`` pairs from a JSON or JSONL file."""
    text = path.read_text()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None  # not a single document; read as JSONL
    if isinstance(data, dict):
        data = data.get(key, [data])
    if isinstance(data, list):
        return list(enumerate(data, 1))

    entries: list[tuple[int, Any]] = []
    for line_num, line in enumerate(text.splitlines(), 1):
        line = line.strip()
        if not line:
            continue
        try:
            entries.append((line_num, json.loads(line)))
        except json.JSONDecodeError as e:
            if strict:
                raise ValueError(f"{path}:{line_num}: invalid JSON: {e}") from e
            logger.warning("%s:%d: invalid JSON, skipping", path.name, line_num)
    return entries


def _load(
    path: str | Path,
    key: str,
    build: Callable[[dict[str, Any]], T],
    strict: bool,
) -> list[T]:
    path = Path(path)
    records: list[T] = []
    skipped = 0
    for line_num, entry in _read_entries(path, key, strict):
        try:
            if not isinstance(entry, dict):
                raise ValueError(f"expected an object, got {type(entry).__name__}")
            records.append(build(entry))
        except (ValueError, TypeError, KeyError) as e:
            if strict:
                raise ValueError(f"{path}:{line_num}: {e}") from e
            skipped += 1
            logger.warning("%s:%d: skipping record: %s", path.name, line_num, e)

    logger.info("Loaded %d %s from %s (%d skipped)", len(records), key, path.name, skipped)
    return records


def load_metrics(path: str | Path, strict: bool = False) -> list[DailyMetrics]:
    """Read DailyMetrics records from *path*."""
    return _load(path, "metrics", DailyMetrics.from_dict, strict)


def load_workouts(path: str | Path, strict: bool = False) -> list[WorkoutRecord]:
    """Read WorkoutRecord records from *path*, sorted by timestamp."""
    workouts = _load(path, "workouts", WorkoutRecord.from_dict, strict)
    workouts.sort(key=lambda w: w.timestamp)
    return workouts
