"""Tests for per-cadence price alert runs."""

import sys
from unittest.mock import AsyncMock, Mock, patch

import pytest
from sqlalchemy.exc import OperationalError

sys.path.append("src")
from signalist.ormdb.models import Alert, AlertFrequency
from signalist.ormdb.repositories import AlertRepository
from signalist.services.alerts import AlertEvaluator, NotificationDispatcher, PriceAlertRunner


def _add_alert(database, user_id, symbol, condition="greater", threshold=150.0, frequency="day"):
    with database.session_scope() as session:
        return AlertRepository(session).add_alert(
            user_id=user_id,
            symbol=symbol,
            company=f"{symbol} Corp",
            alert_name=f"{symbol} alert",
            condition=condition,
            threshold=threshold,
            frequency=frequency,
        )


@pytest.fixture
def runner(database, fake_quotes, mailer, clock):
    evaluator = AlertEvaluator(database, fake_quotes, NotificationDispatcher(mailer), clock=clock)
    return PriceAlertRunner(database, evaluator, max_concurrency=2)


class TestPriceAlertRunner:
    """Test cadence selection, owner resolution and failure isolation."""

    def test_rejects_non_positive_concurrency(self, database):
        with pytest.raises(ValueError):
            PriceAlertRunner(database, Mock(), max_concurrency=0)

    @pytest.mark.asyncio
    async def test_unknown_cadence_rejected(self, runner):
        with pytest.raises(ValueError):
            await runner.run("hourly")

    @pytest.mark.asyncio
    async def test_only_alerts_at_cadence_are_evaluated(
        self, database, runner, fake_quotes, transport, make_user
    ):
        user = make_user("a@x.com", external_id="u1")
        _add_alert(database, user.preferred_id, "AAPL", frequency="day")
        _add_alert(database, user.preferred_id, "MSFT", frequency="week")
        fake_quotes.prices.update({"AAPL": 152.0, "MSFT": 500.0})

        summary = await runner.run("day")

        assert summary.cadence is AlertFrequency.DAY
        assert summary.total == 1
        assert summary.triggered == 1
        assert fake_quotes.calls == ["AAPL"]
        assert [email.subject for email in transport.sent] == [
            "Price Alert: AAPL Hit Upper Target"
        ]

    @pytest.mark.asyncio
    async def test_legacy_integer_owner_ids_resolve(
        self, database, runner, fake_quotes, transport, make_user
    ):
        legacy = make_user("legacy@x.com")
        _add_alert(database, str(legacy.id), "AAPL")
        fake_quotes.prices["AAPL"] = 151.0

        summary = await runner.run(AlertFrequency.DAY)

        assert summary.triggered == 1
        assert transport.sent[0].to == "legacy@x.com"

    @pytest.mark.asyncio
    async def test_unresolved_owner_counted_and_skipped(
        self, database, runner, fake_quotes, transport
    ):
        _add_alert(database, "ghost", "AAPL")
        fake_quotes.prices["AAPL"] = 151.0

        summary = await runner.run("day")

        assert summary.total == 1
        assert summary.unresolved == 1
        assert summary.triggered == 0
        assert fake_quotes.calls == []
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_one_failed_send_does_not_stop_the_batch(
        self, database, runner, fake_quotes, transport, make_user
    ):
        failing = make_user("bounce@x.com", external_id="u1")
        healthy = make_user("ok@x.com", external_id="u2")
        bad = _add_alert(database, failing.preferred_id, "AAPL")
        good = _add_alert(database, healthy.preferred_id, "TSLA", condition="less", threshold=100)
        fake_quotes.prices.update({"AAPL": 152.34, "TSLA": 99.5})
        transport.fail_for.add("bounce@x.com")

        summary = await runner.run("day")

        assert summary.total == 2
        assert summary.failed == 1
        assert summary.triggered == 1
        assert bad.id in summary.errors
        assert [email.to for email in transport.sent] == ["ok@x.com"]

        with database.session_scope() as session:
            assert session.get(Alert, bad.id).last_triggered_at is None
            assert session.get(Alert, good.id).last_triggered_at is not None

    @pytest.mark.asyncio
    async def test_quote_errors_are_isolated(
        self, database, runner, fake_quotes, transport, make_user
    ):
        user = make_user("a@x.com", external_id="u1")
        _add_alert(database, user.preferred_id, "AAPL")
        _add_alert(database, user.preferred_id, "MSFT")
        fake_quotes.errors["AAPL"] = RuntimeError("boom")
        fake_quotes.prices["MSFT"] = 500.0

        summary = await runner.run("day")

        assert summary.failed == 1
        assert summary.triggered == 1
        assert len(transport.sent) == 1

    @pytest.mark.asyncio
    async def test_untriggered_alerts_are_counted_as_skipped(
        self, database, runner, fake_quotes, make_user
    ):
        user = make_user("a@x.com", external_id="u1")
        _add_alert(database, user.preferred_id, "AAPL")
        _add_alert(database, user.preferred_id, "NVDA")
        fake_quotes.prices["AAPL"] = 140.0

        summary = await runner.run("day")

        assert summary.skipped == 2
        assert summary.triggered == 0
        assert summary.finished_at is not None

    @pytest.mark.asyncio
    async def test_empty_cadence_returns_empty_summary(self, runner):
        summary = await runner.run("month")

        assert summary.to_dict()["cadence"] == "month"
        assert summary.total == 0

    @pytest.mark.asyncio
    async def test_load_failure_returns_empty_summary(self, database):
        evaluator = Mock()
        evaluator.evaluate = AsyncMock()
        runner = PriceAlertRunner(database, evaluator)

        with patch.object(
            runner, "_load", side_effect=OperationalError("SELECT", {}, Exception("locked"))
        ):
            summary = await runner.run("day")

        assert summary.total == 0
        assert summary.finished_at is not None
        evaluator.evaluate.assert_not_awaited()
