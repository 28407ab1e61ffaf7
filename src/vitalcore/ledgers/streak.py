"""Daily and weekly run streaks with a periodic streak freeze.

The ledger is a small state machine driven by three events:

    log_run(day)           a qualifying run was completed on *day*
    use_freeze(day)        spend the freeze to cover the missed *day*
    check_end_of_day(day)  *day* is over; break the streak if it was missed

A freeze covers exactly one missed day and becomes available again every
``freeze_reset_period_days``.  The "continuity anchor" is the later of the
last run and the last frozen day; a run on the day after the anchor extends
the streak.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

from vitalcore.config import UserProfile
from vitalcore.ledgers.base import LedgerResult, RejectReason

logger = logging.getLogger(__name__)


class StreakStatus(str, Enum):
    ACTIVE = "active"
    AT_RISK = "at_risk"
    BROKEN = "broken"
    INACTIVE = "inactive"


@dataclass
class StreakState:
    """Persisted streak counters."""

    current_streak: int = 0
    longest_streak: int = 0
    weekly_streak: int = 0
    freeze_available: bool = True
    last_qualifying_date: date | None = None
    freeze_used_date: date | None = None
    last_run_week_start: date | None = None
    freeze_period_start: date | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, date):
                data[key] = value.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StreakState":
        kwargs = dict(data)
        for key in ("last_qualifying_date", "freeze_used_date",
                    "last_run_week_start", "freeze_period_start"):
            if kwargs.get(key):
                kwargs[key] = date.fromisoformat(kwargs[key])
            else:
                kwargs[key] = None
        return cls(**kwargs)


def week_start(day: date) -> date:
    """Monday of the ISO week containing *day*."""
    return day - timedelta(days=day.weekday())


class StreakLedger:
    """Streak state for one user, mutated only through events.

    Events are serialized by a per-ledger lock.  Rejected events return a
    falsy :class:`LedgerResult` and leave the state untouched.
    """

    def __init__(
        self,
        state: StreakState | None = None,
        profile: UserProfile | None = None,
        auto_freeze: bool = True,
    ) -> None:
        self.state = state or StreakState()
        self.profile = profile or UserProfile()
        self.auto_freeze = auto_freeze
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        s = self.state
        return (
            f"StreakLedger(current={s.current_streak}, longest={s.longest_streak}, "
            f"weekly={s.weekly_streak}, freeze={'yes' if s.freeze_available else 'no'})"
        )

    # -- helpers ----------------------------------------------------------

    @property
    def anchor(self) -> date | None:
        """Latest day that counts toward continuity (run or frozen)."""
        days = [d for d in (self.state.last_qualifying_date, self.state.freeze_used_date) if d]
        return max(days) if days else None

    def _period_elapsed(self, day: date) -> bool:
        s = self.state
        if s.freeze_period_start is None:
            return False
        return (day - s.freeze_period_start).days >= self.profile.freeze_reset_period_days

    def _freeze_available_on(self, day: date) -> bool:
        return self.state.freeze_available or self._period_elapsed(day)

    def _refresh_freeze(self, day: date) -> None:
        """Grant a new freeze once per reset period."""
        s = self.state
        period = self.profile.freeze_reset_period_days
        if s.freeze_period_start is None:
            s.freeze_period_start = day
            return
        if self._period_elapsed(day):
            elapsed = (day - s.freeze_period_start).days
            s.freeze_period_start += timedelta(days=(elapsed // period) * period)
            if not s.freeze_available:
                logger.debug("Streak freeze replenished on %s", day)
            s.freeze_available = True

    def _update_longest(self) -> None:
        s = self.state
        s.longest_streak = max(s.longest_streak, s.current_streak)

    def _update_weekly(self, day: date) -> None:
        s = self.state
        ws = week_start(day)
        if s.last_run_week_start is None:
            s.weekly_streak = 1
        elif ws == s.last_run_week_start:
            return
        elif ws == s.last_run_week_start + timedelta(days=7):
            s.weekly_streak += 1
        else:
            s.weekly_streak = 1
        s.last_run_week_start = ws

    # -- events -----------------------------------------------------------

    def log_run(self, day: date) -> LedgerResult:
        """Record a qualifying run on *day*.

        A gap of exactly one missed day is forgiven by spending an available
        freeze. A longer gap resets the streak to 1 even if a freeze is
        available, since one freeze covers one day.
        """
        with self._lock:
            s = self.state
            if s.last_qualifying_date is not None and day < s.last_qualifying_date:
                logger.info("Rejected run on %s: earlier than last run %s",
                            day, s.last_qualifying_date)
                return LedgerResult.rejected(RejectReason.OUT_OF_ORDER)

            self._refresh_freeze(day)
            anchor = self.anchor
            froze = False

            if anchor is None or s.current_streak == 0:
                s.current_streak = 1
            elif day <= anchor:
                # Same day as the last run (or a frozen day being run after all)
                if s.last_qualifying_date != day:
                    s.last_qualifying_date = day
                    self._update_weekly(day)
                return LedgerResult.ok(current_streak=s.current_streak, changed=False)
            else:
                missed = (day - anchor).days - 1
                if missed == 0:
                    s.current_streak += 1
                elif missed == 1 and s.freeze_available:
                    s.freeze_available = False
                    s.freeze_used_date = day - timedelta(days=1)
                    s.current_streak += 1
                    froze = True
                    logger.info("Freeze applied to %s; streak kept at %d",
                                s.freeze_used_date, s.current_streak)
                else:
                    logger.info("Streak of %d broken by %d missed day(s)",
                                s.current_streak, missed)
                    s.current_streak = 1

            s.last_qualifying_date = day
            self._update_weekly(day)
            self._update_longest()
            logger.debug("Run logged on %s: %r", day, self)
            return LedgerResult.ok(current_streak=s.current_streak, changed=True,
                                   freeze_used=froze)

    def use_freeze(self, day: date) -> LedgerResult:
        """Spend the freeze on the missed *day* right after the anchor."""
        with self._lock:
            s = self.state
            if not self._freeze_available_on(day):
                return LedgerResult.rejected(RejectReason.NO_FREEZE_AVAILABLE)
            anchor = self.anchor
            if s.current_streak == 0 or anchor is None:
                return LedgerResult.rejected(RejectReason.NO_ACTIVE_STREAK)
            if day != anchor + timedelta(days=1):
                return LedgerResult.rejected(RejectReason.NOT_A_MISSED_DAY,
                                             expected=(anchor + timedelta(days=1)).isoformat())

            self._refresh_freeze(day)
            s.freeze_available = False
            s.freeze_used_date = day
            logger.info("Freeze used for %s; streak kept at %d", day, s.current_streak)
            return LedgerResult.ok(current_streak=s.current_streak)

    def check_end_of_day(self, day: date) -> LedgerResult:
        """Close out *day*: a missed day breaks the streak unless frozen."""
        with self._lock:
            s = self.state
            self._refresh_freeze(day)
            anchor = self.anchor
            if s.current_streak == 0 or anchor is None or anchor >= day:
                return LedgerResult.ok(broken=False, current_streak=s.current_streak)

            if anchor == day - timedelta(days=1) and self.auto_freeze and s.freeze_available:
                s.freeze_available = False
                s.freeze_used_date = day
                logger.info("Freeze auto-applied to %s", day)
                return LedgerResult.ok(broken=False, freeze_used=True,
                                       current_streak=s.current_streak)

            logger.info("Streak of %d ended on %s", s.current_streak, day)
            s.current_streak = 0
            return LedgerResult.ok(broken=True, current_streak=0)

    # -- queries ----------------------------------------------------------

    def is_at_risk(self, now: datetime) -> bool:
        """True late in the day when a live streak has no run yet today."""
        s = self.state
        today = now.date()
        anchor = self.anchor
        if s.current_streak <= 0 or anchor is None:
            return False
        if s.last_qualifying_date == today or anchor >= today:
            return False
        if anchor < today - timedelta(days=1):
            return False  # already broken
        return now.hour >= self.profile.late_in_day_hour

    def status(self, now: datetime) -> StreakStatus:
        s = self.state
        anchor = self.anchor
        if anchor is None or s.current_streak == 0:
            return StreakStatus.INACTIVE if anchor is None else StreakStatus.BROKEN
        today = now.date()
        if anchor >= today:
            return StreakStatus.ACTIVE
        if anchor == today - timedelta(days=1):
            return StreakStatus.AT_RISK if self.is_at_risk(now) else StreakStatus.ACTIVE
        return StreakStatus.BROKEN

    # -- persistence hooks -------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return self.state.to_dict()

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        profile: UserProfile | None = None,
        auto_freeze: bool = True,
    ) -> "StreakLedger":
        return cls(StreakState.from_dict(data), profile, auto_freeze)
