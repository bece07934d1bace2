"""Shared test configuration and fixtures."""

import sys
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

import pytest

sys.path.append("src")

from signalist.config.settings import get_settings
from signalist.exceptions import EmailDeliveryError
from signalist.market.models import Quote
from signalist.notifications.mailer import Mailer
from signalist.notifications.transport import OutgoingEmail
from signalist.ormdb.database import Database
from signalist.ormdb.repositories import UserRepository

# Monday of ISO week 43
FIXED_NOW = datetime(2026, 10, 19, 13, 0, 0, tzinfo=timezone.utc)


class FakeQuotes:
    """Quote source returning canned prices."""

    def __init__(self, prices: Optional[Dict[str, Optional[float]]] = None):
        self.prices = dict(prices or {})
        self.errors: Dict[str, Exception] = {}
        self.calls: List[str] = []

    async def get_quote(self, symbol: str) -> Optional[Quote]:
        self.calls.append(symbol)
        if symbol in self.errors:
            raise self.errors[symbol]
        price = self.prices.get(symbol)
        if price is None:
            return None
        return Quote(symbol=symbol, current_price=price)


class RecordingTransport:
    """Email transport that keeps sent messages in memory."""

    def __init__(self):
        self.sent: List[OutgoingEmail] = []
        self.fail_for: Set[str] = set()

    async def send(self, email: OutgoingEmail) -> None:
        if email.to in self.fail_for:
            raise EmailDeliveryError(email.to, "550 mailbox unavailable")
        self.sent.append(email)


@pytest.fixture(autouse=True)
def clean_settings_cache():
    """Clear cached settings between tests to avoid state pollution."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database(tmp_path):
    """Create an isolated database for testing."""
    db = Database.from_url(f"sqlite:///{tmp_path / 'signalist-test.db'}")
    db.create_tables()
    yield db
    db.engine.dispose()


@pytest.fixture
def fake_quotes():
    return FakeQuotes()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def mailer(transport):
    return Mailer(transport, dashboard_url="https://signalist.test/")


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_user(database):
    """Factory creating users in the test database."""

    def _make_user(email: str, name: str = "Test User", external_id: Optional[str] = None, **profile):
        with database.session_scope() as session:
            return UserRepository(session).add_user(
                email=email, name=name, external_id=external_id, **profile
            )

    return _make_user
