"""Tests for the Finnhub market data client."""

import sys
from datetime import date
from unittest.mock import AsyncMock, Mock, patch

import pytest

sys.path.append("src")
from signalist.market import FinnhubClient, ResponseCache


class MockResponseContext:
    def __init__(self, response):
        self.response = response

    async def __aenter__(self):
        return self.response

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


class MockSessionContext:
    def __init__(self, session):
        self.session = session

    async def __aenter__(self):
        return self.session

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


def _response(payload, status=200):
    response = AsyncMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)
    return response


@pytest.fixture
def mock_http():
    """Route GET requests by URL path to canned JSON payloads."""
    routes = {}

    def get(url, params=None):
        path = url.split("/api/v1", 1)[1]
        payload = routes.get(path)
        if callable(payload):
            payload = payload(params)
        if isinstance(payload, Exception):
            raise payload
        status = 200 if payload is not None else 404
        return MockResponseContext(_response(payload, status))

    with patch("signalist.market.finnhub.aiohttp.ClientSession") as mock_client_session:
        session = Mock()
        session.get = Mock(side_effect=get)
        mock_client_session.return_value = MockSessionContext(session)

        yield {"routes": routes, "session": session, "client_session": mock_client_session}


@pytest.fixture
def client():
    return FinnhubClient(api_key="test-key", max_news_articles=3)


def _news(n, symbol=""):
    return {
        "id": n,
        "headline": f"Headline {n}",
        "summary": "",
        "source": "Reuters",
        "url": f"https://news.test/{n}",
        "datetime": 1_760_000_000 + n,
        "related": symbol,
    }


class TestQuotes:
    """Test quote lookups."""

    @pytest.mark.asyncio
    async def test_quote_parsed(self, client, mock_http):
        mock_http["routes"]["/quote"] = {"c": 152.34, "d": 1.2, "dp": 0.79, "pc": 151.14}

        quote = await client.get_quote(" aapl ")

        assert quote.symbol == "AAPL"
        assert quote.current_price == 152.34
        assert quote.change_percent == 0.79
        _, kwargs = mock_http["session"].get.call_args
        assert kwargs["params"] == {"symbol": "AAPL", "token": "test-key"}

    @pytest.mark.asyncio
    async def test_zero_price_means_unknown_symbol(self, client, mock_http):
        mock_http["routes"]["/quote"] = {"c": 0, "d": None, "dp": None}

        assert await client.get_quote("NOPE") is None

    @pytest.mark.asyncio
    async def test_http_error_returns_none(self, client, mock_http):
        assert await client.get_quote("AAPL") is None

    @pytest.mark.asyncio
    async def test_network_error_returns_none(self, client, mock_http):
        mock_http["routes"]["/quote"] = TimeoutError("timed out")

        assert await client.get_quote("AAPL") is None

    @pytest.mark.asyncio
    async def test_missing_api_key_makes_no_request(self, mock_http):
        client = FinnhubClient(api_key=None)

        assert client.is_configured is False
        assert await client.get_quote("AAPL") is None
        mock_http["client_session"].assert_not_called()

    @pytest.mark.asyncio
    async def test_quotes_are_never_cached(self, client, mock_http):
        mock_http["routes"]["/quote"] = {"c": 10.0}

        await client.get_quote("AAPL")
        await client.get_quote("AAPL")

        assert mock_http["session"].get.call_count == 2


class TestProfilesAndFinancials:
    @pytest.mark.asyncio
    async def test_profile_is_cached(self, client, mock_http):
        mock_http["routes"]["/stock/profile2"] = {"name": "Apple Inc", "marketCapitalization": 2900000}

        first = await client.get_profile("AAPL")
        second = await client.get_profile("aapl")

        assert first == second
        assert mock_http["session"].get.call_count == 1

    @pytest.mark.asyncio
    async def test_empty_profile_not_cached(self, client, mock_http):
        mock_http["routes"]["/stock/profile2"] = {}

        assert await client.get_profile("AAPL") is None
        assert await client.get_profile("AAPL") is None
        assert mock_http["session"].get.call_count == 2

    @pytest.mark.asyncio
    async def test_financials_request_all_metrics(self, client, mock_http):
        mock_http["routes"]["/stock/metric"] = {"metric": {"peBasicExclExtraTTM": 28.1}}

        financials = await client.get_financials("MSFT")

        assert financials["metric"]["peBasicExclExtraTTM"] == 28.1
        _, kwargs = mock_http["session"].get.call_args
        assert kwargs["params"]["metric"] == "all"


class TestResponseCache:
    def test_entries_expire(self):
        now = [100.0]
        cache = ResponseCache(ttl_seconds=60, clock=lambda: now[0])
        cache.set(("profile", "AAPL"), {"name": "Apple"})

        now[0] = 159.0
        assert cache.get(("profile", "AAPL")) == {"name": "Apple"}

        now[0] = 160.0
        assert cache.get(("profile", "AAPL")) is None


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_symbols(self, client, mock_http):
        mock_http["routes"]["/search"] = {
            "count": 2,
            "result": [
                {"symbol": "AAPL", "description": "APPLE INC", "displaySymbol": "AAPL", "type": "Common Stock"},
                {"description": "no symbol"},
            ],
        }

        matches = await client.search_symbols("apple")

        assert [m.symbol for m in matches] == ["AAPL"]
        assert matches[0].description == "APPLE INC"

    @pytest.mark.asyncio
    async def test_blank_search_makes_no_request(self, client, mock_http):
        assert await client.search_symbols("  ") == []
        mock_http["session"].get.assert_not_called()


class TestNews:
    """Test company and market news selection."""

    @pytest.mark.asyncio
    async def test_company_news_date_range(self, client, mock_http):
        mock_http["routes"]["/company-news"] = [_news(1, "AAPL"), {"headline": "no url"}]

        articles = await client.get_company_news("aapl", days_back=5, today=date(2026, 10, 19))

        assert [a.headline for a in articles] == ["Headline 1"]
        assert articles[0].published_at == 1_760_000_001
        _, kwargs = mock_http["session"].get.call_args
        assert kwargs["params"]["from"] == "2026-10-14"
        assert kwargs["params"]["to"] == "2026-10-19"

    @pytest.mark.asyncio
    async def test_round_robin_across_symbols(self, client, mock_http):
        by_symbol = {
            "AAPL": [_news(1, "AAPL"), _news(2, "AAPL"), _news(3, "AAPL")],
            "MSFT": [_news(10, "MSFT"), _news(1, "AAPL")],
        }
        mock_http["routes"]["/company-news"] = lambda params: by_symbol[params["symbol"]]

        articles = await client.get_news(["aapl", "MSFT", "AAPL"])

        assert [a.id for a in articles] == [1, 10, 2]

    @pytest.mark.asyncio
    async def test_falls_back_to_market_news(self, client, mock_http):
        mock_http["routes"]["/company-news"] = []
        mock_http["routes"]["/news"] = [_news(5), _news(5), _news(6)]

        articles = await client.get_news(["ZZZZ"])

        assert [a.id for a in articles] == [5, 6]

    @pytest.mark.asyncio
    async def test_general_news_without_symbols(self, client, mock_http):
        mock_http["routes"]["/news"] = [_news(n) for n in range(10)]

        articles = await client.get_news()

        assert len(articles) == 3
        _, kwargs = mock_http["session"].get.call_args
        assert kwargs["params"]["category"] == "general"
