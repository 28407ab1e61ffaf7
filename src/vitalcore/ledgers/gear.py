"""Per-shoe (or other gear) mileage tracking and wear classification.

A run may be attributed to several items at once; every item receives the
full distance.  At most one active item is the default, which receives runs
that name no gear explicitly.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Sequence

from vitalcore.ledgers.base import LedgerResult, RejectReason

logger = logging.getLogger(__name__)


# Typical running shoe lifespan (km)
DEFAULT_TARGET_MILEAGE = 800.0

FRESH_BELOW = 60.0
GOOD_BELOW = 85.0


class WearStatus(str, Enum):
    FRESH = "Fresh"
    GOOD = "Good"
    WORN = "Worn"
    REPLACE = "Replace"


def wear_status(total: float, target: float) -> WearStatus:
    """Wear band from the uncapped total/target ratio."""
    if target <= 0:
        return WearStatus.FRESH
    ratio = total / target * 100.0
    if ratio < FRESH_BELOW:
        return WearStatus.FRESH
    if ratio < GOOD_BELOW:
        return WearStatus.GOOD
    if ratio <= 100.0:
        return WearStatus.WORN
    return WearStatus.REPLACE


@dataclass
class GearItem:
    """One piece of gear and the runs credited to it."""

    id: str
    name: str
    purchase_date: date | None = None
    initial_mileage: float = 0.0
    total_mileage: float = 0.0
    target_mileage: float = DEFAULT_TARGET_MILEAGE
    is_default: bool = False
    is_retired: bool = False
    run_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.initial_mileage < 0:
            raise ValueError("initial_mileage must be >= 0")
        if self.total_mileage < self.initial_mileage:
            self.total_mileage = self.initial_mileage

    @property
    def wear_percentage(self) -> float:
        if self.target_mileage <= 0:
            return 0.0
        return min(100.0, self.total_mileage / self.target_mileage * 100.0)

    @property
    def wear_status(self) -> WearStatus:
        return wear_status(self.total_mileage, self.target_mileage)

    @property
    def remaining_mileage(self) -> float:
        return max(0.0, self.target_mileage - self.total_mileage)

    @property
    def is_active(self) -> bool:
        return not self.is_retired

    def __repr__(self) -> str:
        flags = "".join([" default" if self.is_default else "",
                         " retired" if self.is_retired else ""])
        return (
            f"GearItem({self.id} {self.name!r}: {self.total_mileage:.1f}/"
            f"{self.target_mileage:.0f}km {self.wear_status.value}{flags})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "purchase_date": self.purchase_date.isoformat() if self.purchase_date else None,
            "initial_mileage": self.initial_mileage,
            "total_mileage": self.total_mileage,
            "target_mileage": self.target_mileage,
            "is_default": self.is_default,
            "is_retired": self.is_retired,
            "run_ids": list(self.run_ids),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GearItem":
        purchase = data.get("purchase_date")
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            purchase_date=date.fromisoformat(purchase) if purchase else None,
            initial_mileage=float(data.get("initial_mileage", 0.0)),
            total_mileage=float(data.get("total_mileage", 0.0)),
            target_mileage=float(data.get("target_mileage", DEFAULT_TARGET_MILEAGE)),
            is_default=bool(data.get("is_default", False)),
            is_retired=bool(data.get("is_retired", False)),
            run_ids=[str(r) for r in data.get("run_ids", [])],
        )


class ShoeMileageLedger:
    """Gear inventory for one user, mutated only through events."""

    def __init__(self, items: Sequence[GearItem] | None = None) -> None:
        self._items: dict[str, GearItem] = {}
        self._lock = threading.Lock()
        has_default = False
        for item in items or []:
            # At most one default, and never a retired one
            if item.is_default and (item.is_retired or has_default):
                logger.warning("Clearing extra default flag on gear %s", item.id)
                item.is_default = False
            has_default = has_default or item.is_default
            self._items[item.id] = item

    def __repr__(self) -> str:
        active = sum(1 for g in self._items.values() if g.is_active)
        default = self.default_item
        return (
            f"ShoeMileageLedger({len(self._items)} items, {active} active, "
            f"default={default.id if default else None})"
        )

    # -- queries ----------------------------------------------------------

    @property
    def items(self) -> list[GearItem]:
        return list(self._items.values())

    @property
    def active_items(self) -> list[GearItem]:
        return [g for g in self._items.values() if g.is_active]

    @property
    def default_item(self) -> GearItem | None:
        for g in self._items.values():
            if g.is_default and g.is_active:
                return g
        return None

    def get(self, gear_id: str) -> GearItem | None:
        return self._items.get(gear_id)

    def gear_for_run(self, run_id: str) -> list[GearItem]:
        return [g for g in self._items.values() if run_id in g.run_ids]

    # -- helpers ----------------------------------------------------------

    def _elect_default(self) -> None:
        """Make the first active item the default if none is."""
        if self.default_item is not None:
            return
        for g in self._items.values():
            if g.is_active:
                g.is_default = True
                logger.debug("%s is now the default gear", g.id)
                return

    # -- events -----------------------------------------------------------

    def add_gear(self, item: GearItem) -> LedgerResult:
        with self._lock:
            if item.id in self._items:
                return LedgerResult.rejected(RejectReason.DUPLICATE_GEAR, gear_id=item.id)
            if item.is_default:
                if item.is_retired:
                    item.is_default = False
                else:
                    for g in self._items.values():
                        g.is_default = False
            self._items[item.id] = item
            self._elect_default()
            logger.info("Added gear %r", item)
            return LedgerResult.ok(gear_id=item.id, is_default=item.is_default)

    def assign_run(
        self,
        run_id: str,
        distance: float,
        gear_ids: Sequence[str] | None = None,
    ) -> LedgerResult:
        """Credit a run's distance to each listed item (or the default).

        Duplicate ids count once.  Any invalid id, a negative distance, or a
        run already credited to one of the items rejects the whole event.
        """
        with self._lock:
            if distance < 0:
                return LedgerResult.rejected(RejectReason.INVALID_DISTANCE)

            ids = list(dict.fromkeys(gear_ids or []))
            if not ids:
                default = self.default_item
                if default is None:
                    logger.debug("Run %s left unassigned: no default gear", run_id)
                    return LedgerResult.ok(run_id=run_id, gear_ids=[])
                ids = [default.id]

            targets = []
            for gid in ids:
                item = self._items.get(gid)
                if item is None:
                    return LedgerResult.rejected(RejectReason.UNKNOWN_GEAR, gear_id=gid)
                if item.is_retired:
                    return LedgerResult.rejected(RejectReason.GEAR_RETIRED, gear_id=gid)
                if run_id in item.run_ids:
                    return LedgerResult.rejected(RejectReason.RUN_ALREADY_ASSIGNED,
                                                 gear_id=gid)
                targets.append(item)

            for item in targets:
                item.total_mileage += distance
                item.run_ids.append(run_id)
            logger.debug("Run %s (%.2f km) credited to %s", run_id, distance, ids)
            return LedgerResult.ok(run_id=run_id, gear_ids=ids)

    def set_default(self, gear_id: str) -> LedgerResult:
        with self._lock:
            item = self._items.get(gear_id)
            if item is None:
                return LedgerResult.rejected(RejectReason.UNKNOWN_GEAR, gear_id=gear_id)
            if item.is_retired:
                return LedgerResult.rejected(RejectReason.GEAR_RETIRED, gear_id=gear_id)
            for g in self._items.values():
                g.is_default = g.id == gear_id
            return LedgerResult.ok(gear_id=gear_id)

    def retire(self, gear_id: str) -> LedgerResult:
        """Retire an item; it keeps its mileage but stops taking runs."""
        with self._lock:
            item = self._items.get(gear_id)
            if item is None:
                return LedgerResult.rejected(RejectReason.UNKNOWN_GEAR, gear_id=gear_id)
            item.is_retired = True
            item.is_default = False
            logger.info("Retired gear %s at %.1f km", gear_id, item.total_mileage)
            return LedgerResult.ok(gear_id=gear_id)

    def unretire(self, gear_id: str) -> LedgerResult:
        with self._lock:
            item = self._items.get(gear_id)
            if item is None:
                return LedgerResult.rejected(RejectReason.UNKNOWN_GEAR, gear_id=gear_id)
            item.is_retired = False
            self._elect_default()
            return LedgerResult.ok(gear_id=gear_id)

    def correct_mileage(self, gear_id: str, total: float) -> LedgerResult:
        """Manually set the total mileage; it may not drop below the initial."""
        with self._lock:
            item = self._items.get(gear_id)
            if item is None:
                return LedgerResult.rejected(RejectReason.UNKNOWN_GEAR, gear_id=gear_id)
            if total < item.initial_mileage:
                return LedgerResult.rejected(RejectReason.INVALID_MILEAGE, gear_id=gear_id)
            logger.info("Mileage of %s corrected %.1f -> %.1f",
                        gear_id, item.total_mileage, total)
            item.total_mileage = total
            return LedgerResult.ok(gear_id=gear_id, total_mileage=total)

    def remove_gear(self, gear_id: str) -> LedgerResult:
        """Delete an item; if it was the default, the first active item takes over."""
        with self._lock:
            item = self._items.pop(gear_id, None)
            if item is None:
                return LedgerResult.rejected(RejectReason.UNKNOWN_GEAR, gear_id=gear_id)
            self._elect_default()
            logger.info("Removed gear %s", gear_id)
            return LedgerResult.ok(gear_id=gear_id)

    # -- persistence hooks -------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return {"items": [g.to_dict() for g in self._items.values()]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShoeMileageLedger":
        return cls([GearItem.from_dict(d) for d in data.get("items", [])])
