"""Tests for the Korp example corpus client."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from enorett.services.corpus import CorpusClient, build_sentence, cqp_quote, parse_examples
from enorett.services.dictionary.cache import TTLCache


def _kwic(*sentences: str) -> dict:
    """Build a Korp v8 style payload from plain sentences."""
    return {
        "kwic": [
            {"tokens": [{"word": token} for token in sentence.split()]}
            for sentence in sentences
        ]
    }


def _client(**kwargs) -> CorpusClient:
    kwargs.setdefault("endpoint", "http://korp.test/query")
    kwargs.setdefault("corpora", "rom99")
    kwargs.setdefault("timeout", 1.0)
    kwargs.setdefault("cache_ttl", 60.0)
    kwargs.setdefault("max_examples", 5)
    return CorpusClient(**kwargs)


class TestBuildSentence:
    """Tests for token joining."""

    def test_joins_word_fields(self):
        tokens = [{"word": "Han"}, {"word": "köpte"}, {"word": "en"}, {"word": "bil"}, {"word": "."}]
        assert build_sentence(tokens) == "Han köpte en bil."

    def test_alternative_token_fields(self):
        """Should fall back through the known token field names."""
        tokens = [{"w": "Det"}, {"lex": "var"}, {"lem": "en"}, {"baseform": "bil"}, {"token": "!"}]
        assert build_sentence(tokens) == "Det var en bil!"

    def test_skips_empty_tokens_and_collapses_whitespace(self):
        tokens = [{"word": " Bilen  "}, {}, {"word": ""}, None, {"word": "stod"}, {"word": "där"}]
        assert build_sentence(tokens) == "Bilen stod där"


class TestParseExamples:
    """Tests for parse_examples."""

    def test_kwic_tokens(self):
        assert parse_examples(_kwic("en bil", "två bilar"), 5) == ["en bil", "två bilar"]

    def test_left_kwic_right_shape(self):
        data = {
            "kwic": [
                {
                    "left": [{"word": "Hon"}, {"word": "har"}, {"word": "en"}],
                    "kwic": {"word": "bil"},
                    "right": [{"word": "."}],
                }
            ]
        }
        assert parse_examples(data, 5) == ["Hon har en bil."]

    def test_alternative_containers(self):
        rows = [{"tokens": [{"word": "en"}, {"word": "bil"}]}]
        assert parse_examples({"hits": {"hits": rows}}, 5) == ["en bil"]
        assert parse_examples({"results": {"kwic": rows}}, 5) == ["en bil"]

    def test_deduplicates_preserving_order(self):
        data = _kwic("a bil", "b bil", "a bil", "c bil", "b bil")
        assert parse_examples(data, 10) == ["a bil", "b bil", "c bil"]

    def test_truncates_to_limit_after_dedup(self):
        """Duplicates should not count against the limit."""
        data = _kwic("a bil", "a bil", "a bil", "b bil", "c bil", "d bil")
        examples = parse_examples(data, 3)
        assert examples == ["a bil", "b bil", "c bil"]

    def test_unknown_shape(self):
        assert parse_examples({"something": []}, 5) == []
        assert parse_examples(None, 5) == []

    def test_zero_limit(self):
        assert parse_examples(_kwic("en bil"), 0) == []


class TestCorpusClientFetch:
    """Tests for CorpusClient.fetch_examples."""

    @pytest.mark.asyncio
    async def test_fetch_success(self):
        client = _client()
        client._request = AsyncMock(return_value=_kwic("en ny bil", "min bil"))

        result = await client.fetch_examples(" Bil ")

        assert result is not None
        assert result.examples == ["en ny bil", "min bil"]
        assert result.served_from_cache is False
        client._request.assert_awaited_once_with("bil", 5)

    @pytest.mark.asyncio
    async def test_sends_cqp_query(self):
        """Should query Korp with a CQP word query and a bounded window."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_kwic("en bil"))

        client = _client(transport=httpx.MockTransport(handler))
        result = await client.fetch_examples("bil", limit=2)

        assert result.examples == ["en bil"]
        params = seen[0].url.params
        assert params["corpus"] == "rom99"
        assert params["cqp"] == '[word = "bil"]'
        assert params["start"] == "0"
        assert int(params["end"]) >= 2

    @pytest.mark.asyncio
    async def test_respects_limit(self):
        client = _client()
        client._request = AsyncMock(return_value=_kwic("a", "b", "c", "d", "e", "f"))
        result = await client.fetch_examples("bil", limit=2)
        assert result.examples == ["a", "b"]

    @pytest.mark.asyncio
    async def test_default_limit_from_settings(self):
        client = _client(max_examples=3)
        client._request = AsyncMock(return_value=_kwic("a", "b", "c", "d"))
        result = await client.fetch_examples("bil")
        assert len(result.examples) == 3

    @pytest.mark.asyncio
    async def test_cache_hit(self):
        client = _client()
        client._request = AsyncMock(return_value=_kwic("en bil", "min bil"))

        await client.fetch_examples("bil")
        cached = await client.fetch_examples("bil", limit=1)

        assert cached.served_from_cache is True
        assert cached.examples == ["en bil"]
        client._request.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expired_entry_is_refetched(self, clock):
        client = _client(cache=TTLCache(default_ttl=60.0, clock=clock))
        client._request = AsyncMock(return_value=_kwic("en bil"))

        await client.fetch_examples("bil")
        clock.advance(60)
        result = await client.fetch_examples("bil")

        assert result.served_from_cache is False
        assert client._request.await_count == 2

    @pytest.mark.asyncio
    async def test_no_examples_returns_none(self):
        """Zero sentences should be reported like an unavailable source."""
        client = _client()
        client._request = AsyncMock(return_value={"kwic": []})

        assert await client.fetch_examples("bil") is None
        assert len(client.cache) == 0

    @pytest.mark.asyncio
    async def test_api_error_payload_returns_none(self):
        client = _client()
        client._request = AsyncMock(
            return_value={"ERROR": {"type": "CQPError", "value": "syntax error"}}
        )
        assert await client.fetch_examples("bil") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("timed out"),
            asyncio.TimeoutError(),
            ValueError("bad json"),
        ],
    )
    async def test_errors_return_none(self, error):
        client = _client()
        client._request = AsyncMock(side_effect=error)
        assert await client.fetch_examples("bil") is None

    @pytest.mark.asyncio
    async def test_http_error_status_returns_none(self):
        client = _client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
        assert await client.fetch_examples("bil") is None

    @pytest.mark.asyncio
    async def test_non_json_body_returns_none(self):
        client = _client(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        )
        assert await client.fetch_examples("bil") is None

    @pytest.mark.asyncio
    async def test_empty_word(self):
        client = _client()
        client._request = AsyncMock()
        assert await client.fetch_examples("") is None
        client._request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_results_never_contain_duplicates(self):
        client = _client()
        client._request = AsyncMock(return_value=_kwic("x", "y", "x", "z", "y", "w", "v", "u"))
        result = await client.fetch_examples("bil", limit=4)
        assert len(result.examples) == len(set(result.examples)) == 4

    @pytest.mark.asyncio
    async def test_small_limit_does_not_shrink_later_requests(self):
        """A cached short answer should not cap a later, larger limit."""
        client = _client(max_examples=5)
        client._request = AsyncMock(return_value=_kwic("a", "b", "c", "d", "e", "f"))

        first = await client.fetch_examples("bil", limit=2)
        second = await client.fetch_examples("bil", limit=5)

        assert first.examples == ["a", "b"]
        assert second.examples == ["a", "b", "c", "d", "e"]
        assert second.served_from_cache is True
        client._request.assert_awaited_once_with("bil", 5)

    @pytest.mark.asyncio
    async def test_limit_above_default_fetches_more(self):
        client = _client(max_examples=2)
        client._request = AsyncMock(return_value=_kwic("a", "b", "c", "d"))

        await client.fetch_examples("bil")
        result = await client.fetch_examples("bil", limit=4)

        assert result.examples == ["a", "b", "c", "d"]
        assert client._request.await_count == 2

    @pytest.mark.asyncio
    async def test_quotes_special_characters_in_query(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_kwic("ett ord"))

        client = _client(transport=httpx.MockTransport(handler))
        await client.fetch_examples('o"rd\\')

        assert seen[0].url.params["cqp"] == '[word = "o\\"rd\\\\"]'


class TestCqpQuote:
    """Tests for cqp_quote."""

    def test_plain_word_unchanged(self):
        assert cqp_quote("fönster") == "fönster"

    def test_escapes_quote_and_backslash(self):
        assert cqp_quote('a"b') == 'a\\"b'
        assert cqp_quote("a\\b") == "a\\\\b"

    def test_escapes_regex_characters(self):
        assert cqp_quote("t.ex.") == "t\\.ex\\."
        assert cqp_quote("a*") == "a\\*"
