"""JSON file persistence for ledger snapshots.

The ledgers themselves do no I/O; the host loads a snapshot into a ledger
at startup and saves it back after applying events.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from vitalcore.config import UserProfile
from vitalcore.ledgers.gear import ShoeMileageLedger
from vitalcore.ledgers.streak import StreakLedger

logger = logging.getLogger(__name__)


class JsonLedgerStore:
    """Keeps both ledgers of one user in a single JSON document.

    Layout::

        {"streak": {...StreakState...}, "gear": {"items": [...]}}
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonLedgerStore({self.path})"

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path}: expected a JSON object")
        return data

    def _write_section(self, key: str, value: dict[str, Any]) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w") as f:
            json.dump(data, f, indent=2)
        tmp.replace(self.path)
        logger.debug("Saved %s ledger to %s", key, self.path)

    def load_streak(
        self,
        profile: UserProfile | None = None,
        auto_freeze: bool = True,
    ) -> StreakLedger:
        data = self._read().get("streak")
        if not data:
            return StreakLedger(profile=profile, auto_freeze=auto_freeze)
        return StreakLedger.from_dict(data, profile, auto_freeze)

    def save_streak(self, ledger: StreakLedger) -> None:
        self._write_section("streak", ledger.to_dict())

    def load_gear(self) -> ShoeMileageLedger:
        data = self._read().get("gear")
        if not data:
            return ShoeMileageLedger()
        return ShoeMileageLedger.from_dict(data)

    def save_gear(self, ledger: ShoeMileageLedger) -> None:
        self._write_section("gear", ledger.to_dict())
