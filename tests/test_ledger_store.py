"""Tests for vitalcore.ledgers.store -- JSON persistence of ledger snapshots."""

import json
from datetime import date

import pytest

from vitalcore.ledgers.gear import GearItem
from vitalcore.ledgers.store import JsonLedgerStore


class TestJsonLedgerStore:
    def test_missing_file_gives_empty_ledgers(self, tmp_path):
        store = JsonLedgerStore(tmp_path / "ledgers.json")
        assert store.load_streak().state.current_streak == 0
        assert store.load_gear().items == []

    def test_streak_round_trip(self, tmp_path):
        store = JsonLedgerStore(tmp_path / "ledgers.json")
        ledger = store.load_streak()
        ledger.log_run(date(2026, 3, 2))
        ledger.log_run(date(2026, 3, 3))
        store.save_streak(ledger)

        restored = store.load_streak()
        assert restored.state.current_streak == 2
        assert restored.state.last_qualifying_date == date(2026, 3, 3)

    def test_sections_saved_independently(self, tmp_path):
        path = tmp_path / "nested" / "ledgers.json"
        store = JsonLedgerStore(path)

        gear = store.load_gear()
        gear.add_gear(GearItem(id="A", name="Trail"))
        gear.assign_run("r1", 12.0)
        store.save_gear(gear)

        streak = store.load_streak()
        streak.log_run(date(2026, 3, 2))
        store.save_streak(streak)

        data = json.loads(path.read_text())
        assert set(data) == {"streak", "gear"}
        assert store.load_gear().get("A").total_mileage == 12.0

    def test_non_object_file_rejected(self, tmp_path):
        path = tmp_path / "ledgers.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            JsonLedgerStore(path).load_gear()
