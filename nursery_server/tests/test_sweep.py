"""
Activation sweep tests
"""

from datetime import date

import pytest

from nursery_server.core.exceptions import DatabaseError, SweepError
from nursery_server.engine.scope import MENU_SCOPE, SCHEDULE_SCOPE
from nursery_server.engine.store import PeriodStore
from nursery_server.engine.sweep import ActivationSweep

from .conftest import TODAY, days, slot


@pytest.fixture
def sweep(test_db):
    return ActivationSweep(test_db, SCHEDULE_SCOPE)


@pytest.fixture
def store(test_db):
    return PeriodStore(test_db, SCHEDULE_SCOPE)


def test_expired_period_is_deleted_with_its_slots(sweep, store, test_db, classroom, make_period):
    period = make_period(SCHEDULE_SCOPE, 5, days(-30), days(-2), active=True)
    store.replace_entries(period.id, [slot()])

    report = sweep.run(TODAY)

    assert report.expired == [period.id]
    assert store.get(period.id) is None
    assert test_db.fetch_one("SELECT COUNT(*) AS n FROM schedules")["n"] == 0


def test_period_ended_yesterday_survives_one_day(sweep, store, classroom, make_period):
    period = make_period(SCHEDULE_SCOPE, 5, days(-30), days(-1), active=True)

    report = sweep.run(TODAY)

    assert report.expired == []
    assert store.get(period.id).is_active is True


def test_period_starting_today_is_activated(sweep, store, classroom, make_period):
    period = make_period(SCHEDULE_SCOPE, 5, days(0))

    report = sweep.run(TODAY)

    assert report.activated == [period.id]
    assert store.get(period.id).is_active is True


def test_missed_start_is_caught_up(sweep, store, classroom, make_period):
    period = make_period(SCHEDULE_SCOPE, 5, days(-4), days(20))

    report = sweep.run(TODAY)

    assert report.caught_up == [period.id]
    assert store.get(period.id).is_active is True


def test_future_period_is_untouched(sweep, store, classroom, make_period):
    period = make_period(SCHEDULE_SCOPE, 5, days(1))

    report = sweep.run(TODAY)

    assert not report.changed
    assert store.get(period.id).is_active is False


def test_latest_start_wins(sweep, store, classroom, make_period):
    older = make_period(SCHEDULE_SCOPE, 5, date(2024, 1, 1), active=True)
    newer = make_period(SCHEDULE_SCOPE, 5, date(2024, 2, 1))

    report = sweep.run(TODAY)

    assert report.caught_up == [newer.id]
    assert report.resolved == {5: [older.id]}
    assert [p.id for p in store.find_by_scope(5)] == [newer.id]


def test_conflicts_are_resolved_per_scope(sweep, store, classroom, other_classroom, make_period):
    make_period(SCHEDULE_SCOPE, 5, days(-10), active=True)
    kept = make_period(SCHEDULE_SCOPE, 5, days(-5), active=True)
    other = make_period(SCHEDULE_SCOPE, 6, days(-20), active=True)

    sweep.run(TODAY)

    assert [p.id for p in store.find_active(5)] == [kept.id]
    assert [p.id for p in store.find_active(6)] == [other.id]


def test_second_run_changes_nothing(sweep, classroom, make_period):
    make_period(SCHEDULE_SCOPE, 5, days(-30), days(-2), active=True)
    make_period(SCHEDULE_SCOPE, 5, days(-3))
    make_period(SCHEDULE_SCOPE, 5, days(0))

    first = sweep.run(TODAY)
    second = sweep.run(TODAY)

    assert first.changed
    assert not second.changed


def test_at_most_one_active_period_per_scope(sweep, store, classroom, make_period):
    for offset in (-20, -10, -5, 0):
        make_period(SCHEDULE_SCOPE, 5, days(offset))

    sweep.run(TODAY)

    active = store.find_active(5)
    assert len(active) == 1
    assert active[0].start_date == days(0)


def test_menu_scope(test_db, make_period):
    sweep = ActivationSweep(test_db, MENU_SCOPE)
    store = PeriodStore(test_db, MENU_SCOPE)
    old = make_period(MENU_SCOPE, "PETIT", days(-40), active=True)
    new = make_period(MENU_SCOPE, "PETIT", days(0))
    grand = make_period(MENU_SCOPE, "GRAND", days(-2))

    report = sweep.run(TODAY)

    assert report.resolved == {"PETIT": [old.id]}
    assert [p.id for p in store.find_active()] == [grand.id, new.id]


def test_failing_stage_raises_and_keeps_earlier_stages(sweep, store, classroom, make_period, monkeypatch):
    expired = make_period(SCHEDULE_SCOPE, 5, days(-30), days(-2), active=True)
    pending = make_period(SCHEDULE_SCOPE, 5, days(0))

    def broken(*args):
        raise DatabaseError("disk unavailable")

    monkeypatch.setattr(sweep.store, "activate_starting_between", broken)

    with pytest.raises(SweepError) as exc_info:
        sweep.run(TODAY)

    assert exc_info.value.stage == "activate"
    assert exc_info.value.details == {"stage": "activate", "scope": "schedule"}
    assert store.get(expired.id) is None
    assert store.get(pending.id).is_active is False


def test_period_past_its_grace_window_is_never_reactivated(sweep, store, classroom, make_period):
    stale = make_period(SCHEDULE_SCOPE, 5, days(-30), days(-3))

    report = sweep.run(TODAY)

    assert report.expired == [stale.id]
    assert stale.id not in report.caught_up
    assert store.get(stale.id) is None
