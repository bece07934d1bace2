"""Tests for the alert service."""

import sys

import pytest

sys.path.append("src")
from signalist.exceptions import NotFoundError, ValidationException
from signalist.services import AlertService


@pytest.fixture
def service(database):
    return AlertService(database)


@pytest.fixture
def user(make_user):
    return make_user("a@x.com", name="Ada", external_id="u1")


async def _create(service, email="a@x.com", **overrides):
    fields = dict(
        symbol="aapl",
        company="Apple Inc.",
        alert_name="Apple breakout",
        condition="greater",
        threshold=150,
    )
    fields.update(overrides)
    return await service.create_alert(email, **fields)


class TestAlertService:
    """Test alert CRUD scoped to the signed-in user."""

    @pytest.mark.asyncio
    async def test_create_alert_normalizes_symbol(self, service, user):
        alert = await _create(service)

        assert alert.symbol == "AAPL"
        assert alert.user_id == "u1"
        assert alert.frequency == "day"
        assert alert.threshold == 150.0

    @pytest.mark.asyncio
    async def test_create_alert_for_unknown_user(self, service):
        with pytest.raises(NotFoundError):
            await _create(service, email="nobody@x.com")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [{"condition": "sideways"}, {"frequency": "hourly"}, {"threshold": float("inf")}],
    )
    async def test_create_alert_rejects_invalid_fields(self, service, user, overrides):
        with pytest.raises(ValidationException):
            await _create(service, **overrides)

        assert await service.list_alerts("a@x.com") == []

    @pytest.mark.asyncio
    async def test_list_alerts_newest_first(self, service, user):
        first = await _create(service, symbol="AAPL")
        second = await _create(service, symbol="MSFT")

        alerts = await service.list_alerts("a@x.com")

        assert [alert.id for alert in alerts] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_list_alerts_unknown_user(self, service):
        assert await service.list_alerts("nobody@x.com") == []

    @pytest.mark.asyncio
    async def test_alerts_are_private_to_owner(self, service, user, make_user):
        make_user("b@x.com", name="Bob", external_id="u2")
        alert = await _create(service)

        assert await service.get_alert("b@x.com", alert.id) is None
        assert await service.update_alert("b@x.com", alert.id, {"threshold": 1}) is False
        assert await service.delete_alert("b@x.com", alert.id) is False
        assert (await service.get_alert("a@x.com", alert.id)).id == alert.id

    @pytest.mark.asyncio
    async def test_update_alert(self, service, user):
        alert = await _create(service)

        assert await service.update_alert("a@x.com", alert.id, {"threshold": 175.5}) is True

        stored = await service.get_alert("a@x.com", alert.id)
        assert stored.threshold == 175.5

    @pytest.mark.asyncio
    async def test_update_alert_rejects_invalid_condition(self, service, user):
        alert = await _create(service)

        with pytest.raises(ValidationException):
            await service.update_alert("a@x.com", alert.id, {"condition": "equal"})

        assert (await service.get_alert("a@x.com", alert.id)).condition == "greater"

    @pytest.mark.asyncio
    async def test_delete_alert(self, service, user):
        alert = await _create(service)

        assert await service.delete_alert("a@x.com", alert.id) is True
        assert await service.list_alerts("a@x.com") == []
