"""Stateful ledgers driven by events: run streaks and gear mileage."""

from vitalcore.ledgers.base import LedgerResult, RejectReason
from vitalcore.ledgers.streak import StreakLedger, StreakState, StreakStatus
from vitalcore.ledgers.gear import GearItem, ShoeMileageLedger, WearStatus
from vitalcore.ledgers.store import JsonLedgerStore

__all__ = [
    "LedgerResult",
    "RejectReason",
    "StreakLedger",
    "StreakState",
    "StreakStatus",
    "GearItem",
    "ShoeMileageLedger",
    "WearStatus",
    "JsonLedgerStore",
]
