"""Tests for the repository layer."""

import sys
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

sys.path.append("src")
from signalist.ormdb.models import DeliveryStatus, utcnow
from signalist.ormdb.repositories import (
    AlertDeliveryRepository,
    AlertRepository,
    UserRepository,
    WatchlistRepository,
)


def _alert(session, user_id="u1", **overrides):
    fields = dict(
        user_id=user_id,
        symbol="aapl",
        company="Apple Inc.",
        alert_name="Apple breakout",
        condition="greater",
        threshold=150,
        frequency="day",
    )
    fields.update(overrides)
    return AlertRepository(session).add_alert(**fields)


class TestUserRepository:
    def test_resolution_prefers_external_id(self, database, make_user):
        # A legacy user whose integer id collides with another user's external id
        legacy = make_user("legacy@x.com")
        make_user("modern@x.com", external_id=str(legacy.id))

        with database.session_scope() as session:
            emails = UserRepository(session).resolve_emails([str(legacy.id)])

        assert emails == {str(legacy.id): "modern@x.com"}

    def test_resolution_falls_back_to_legacy_id(self, database, make_user):
        legacy = make_user("legacy@x.com")
        make_user("modern@x.com", external_id="abc")

        with database.session_scope() as session:
            emails = UserRepository(session).resolve_emails([str(legacy.id), "abc", "missing"])

        assert emails == {str(legacy.id): "legacy@x.com", "abc": "modern@x.com"}

    def test_resolution_of_nothing(self, database):
        with database.session_scope() as session:
            assert UserRepository(session).resolve_emails([]) == {}

    def test_duplicate_email_rejected(self, database, make_user):
        make_user("a@x.com")
        with pytest.raises(IntegrityError):
            make_user("a@x.com")

    def test_inactive_users(self, database, make_user):
        make_user("never@x.com", name="Never")
        make_user("stale@x.com", name="Stale")
        make_user("fresh@x.com", name="Fresh")

        with database.session_scope() as session:
            repo = UserRepository(session)
            repo.update_last_visit("stale@x.com", utcnow() - timedelta(days=30))
            repo.update_last_visit("fresh@x.com", utcnow() - timedelta(days=1))

        with database.session_scope() as session:
            cutoff = utcnow() - timedelta(days=15)
            inactive = UserRepository(session).get_inactive_users(cutoff)

        assert [user.email for user in inactive] == ["never@x.com", "stale@x.com"]

    def test_update_last_visit_unknown_user(self, database):
        with database.session_scope() as session:
            assert UserRepository(session).update_last_visit("nobody@x.com", utcnow()) is False

    def test_users_for_news_requires_name(self, database, make_user):
        make_user("named@x.com", name="Named")
        make_user("anon@x.com", name=None)

        with database.session_scope() as session:
            users = UserRepository(session).get_users_for_news()

        assert [user.email for user in users] == ["named@x.com"]


class TestAlertRepository:
    def test_symbol_is_normalized(self, database):
        with database.session_scope() as session:
            alert = _alert(session, symbol="  aapl ")

        assert alert.symbol == "AAPL"
        assert alert.alert_type == "price"
        assert alert.last_triggered_at is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"symbol": "   "},
            {"condition": "equal"},
            {"frequency": "hourly"},
            {"threshold": float("nan")},
            {"company": ""},
        ],
    )
    def test_invalid_fields_rejected(self, database, overrides):
        with database.session_scope() as session:
            with pytest.raises(ValueError):
                _alert(session, **overrides)

    def test_alerts_by_frequency(self, database):
        with database.session_scope() as session:
            _alert(session, frequency="day")
            _alert(session, frequency="week")
            _alert(session, frequency="day", symbol="MSFT")

        with database.session_scope() as session:
            daily = AlertRepository(session).get_alerts_by_frequency("day")

        assert [alert.symbol for alert in daily] == ["AAPL", "MSFT"]

    def test_update_is_owner_scoped(self, database):
        with database.session_scope() as session:
            alert = _alert(session)

        with database.session_scope() as session:
            repo = AlertRepository(session)
            assert repo.update_alert(alert.id, "someone-else", {"threshold": 200}) is False
            assert repo.update_alert(alert.id, "u1", {"threshold": 200, "user_id": "x"}) is True
            assert repo.update_alert(alert.id, "u1", {"threshold": 200}) is False

        with database.session_scope() as session:
            stored = AlertRepository(session).get_alert(alert.id)
            assert stored.threshold == 200.0
            assert stored.user_id == "u1"

    def test_delete_is_owner_scoped(self, database):
        with database.session_scope() as session:
            alert = _alert(session)

        with database.session_scope() as session:
            repo = AlertRepository(session)
            assert repo.delete_alert(alert.id, "someone-else") is False
            assert repo.delete_alert(alert.id, "u1") is True
            assert repo.get_alert(alert.id) is None


class TestAlertDeliveryRepository:
    def test_sent_window_is_not_restarted(self, database):
        now = datetime(2026, 10, 19, 13, 0)
        with database.session_scope() as session:
            alert = _alert(session)
            repo = AlertDeliveryRepository(session)
            delivery = repo.begin_delivery(alert.id, "day:2026-10-19", now)
            assert delivery.status == DeliveryStatus.PENDING.value

            repo.mark_sent(delivery.id, now)
            assert repo.begin_delivery(alert.id, "day:2026-10-19", now) is None
            assert repo.begin_delivery(alert.id, "day:2026-10-20", now) is not None

    def test_failed_window_can_restart(self, database):
        now = datetime(2026, 10, 19, 13, 0)
        with database.session_scope() as session:
            alert = _alert(session)
            repo = AlertDeliveryRepository(session)
            first = repo.begin_delivery(alert.id, "week:2026-W43", now)
            repo.mark_failed(first.id, "timeout")

            retry = repo.begin_delivery(alert.id, "week:2026-W43", now)

        assert retry.id == first.id
        assert retry.status == DeliveryStatus.PENDING.value
        assert retry.error is None


class TestWatchlistRepository:
    def test_duplicate_symbols_ignored(self, database):
        with database.session_scope() as session:
            repo = WatchlistRepository(session)
            assert repo.add_item("u1", "aapl", "Apple Inc.") is not None
            assert repo.add_item("u1", "AAPL", "Apple Inc.") is None
            assert repo.add_item("u2", "AAPL", "Apple Inc.") is not None

        with database.session_scope() as session:
            assert WatchlistRepository(session).get_symbols_for_user("u1") == ["AAPL"]

    def test_remove_item(self, database):
        with database.session_scope() as session:
            repo = WatchlistRepository(session)
            repo.add_item("u1", "MSFT", "Microsoft")
            assert repo.remove_item("u1", "msft") is True
            assert repo.remove_item("u1", "msft") is False
