"""Result type shared by the ledger events."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RejectReason(str, Enum):
    """Why a ledger event was refused.  State is untouched on rejection."""

    OUT_OF_ORDER = "out_of_order"
    NO_FREEZE_AVAILABLE = "no_freeze_available"
    NO_ACTIVE_STREAK = "no_active_streak"
    NOT_A_MISSED_DAY = "not_a_missed_day"
    UNKNOWN_GEAR = "unknown_gear"
    GEAR_RETIRED = "gear_retired"
    DUPLICATE_GEAR = "duplicate_gear"
    RUN_ALREADY_ASSIGNED = "run_already_assigned"
    INVALID_DISTANCE = "invalid_distance"
    INVALID_MILEAGE = "invalid_mileage"


@dataclass
class LedgerResult:
    """Outcome of one ledger event.  Truthy when the event was applied."""

    accepted: bool
    reason: RejectReason | None = None
    detail: dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.accepted

    @classmethod
    def ok(cls, **detail: Any) -> "LedgerResult":
        return cls(accepted=True, detail=detail)

    @classmethod
    def rejected(cls, reason: RejectReason, **detail: Any) -> "LedgerResult":
        return cls(accepted=False, reason=reason, detail=detail)

    def __repr__(self) -> str:
        if self.accepted:
            return f"LedgerResult(accepted, {self.detail})"
        return f"LedgerResult(rejected: {self.reason.value})"
