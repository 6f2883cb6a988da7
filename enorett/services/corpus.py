"""Korp client for attested example sentences."""

import asyncio
import logging
import re
from dataclasses import replace
from typing import Any

import httpx

from enorett.config import settings
from enorett.services.dictionary.base import ExampleResult
from enorett.services.dictionary.cache import TTLCache

logger = logging.getLogger(__name__)

# Token fields seen across Korp versions, in order of preference
TOKEN_TEXT_FIELDS = ("word", "w", "lex", "lem", "baseform", "token")

_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,!?;:])")

# Extra kwic rows requested per wanted example, leaving room for duplicates
_OVERFETCH = 4

# Characters with meaning inside a CQP regex string
_CQP_SPECIAL_RE = re.compile(r'([\\".^$*+?{}\[\]|()])')


def cqp_quote(word: str) -> str:
    """Escape ``word`` for use as a literal inside a CQP ``"..."`` value."""
    return _CQP_SPECIAL_RE.sub(r"\\\1", word)


def _kwic_rows(data: Any) -> list[Any]:
    if not isinstance(data, dict):
        return []
    if isinstance(data.get("kwic"), list):
        return data["kwic"]
    hits = data.get("hits")
    if isinstance(hits, dict) and isinstance(hits.get("hits"), list):
        return hits["hits"]
    results = data.get("results")
    if isinstance(results, dict) and isinstance(results.get("kwic"), list):
        return results["kwic"]
    return []


def _row_tokens(row: Any) -> list[Any]:
    if not isinstance(row, dict):
        return []
    if isinstance(row.get("tokens"), list):
        return row["tokens"]
    left, right = row.get("left"), row.get("right")
    if isinstance(left, list) and isinstance(right, list):
        match = row.get("kwic")
        middle = match if isinstance(match, list) else [match] if match else []
        return [*left, *middle, *right]
    return []


def _token_text(token: Any) -> str:
    if isinstance(token, str):
        return token
    if not isinstance(token, dict):
        return ""
    for field in TOKEN_TEXT_FIELDS:
        value = token.get(field)
        if isinstance(value, str) and value:
            return value
    return ""


def build_sentence(tokens: list[Any]) -> str:
    """Join token texts into a readable sentence."""
    sentence = " ".join(text for text in map(_token_text, tokens) if text)
    sentence = _WHITESPACE_RE.sub(" ", sentence).strip()
    return _SPACE_BEFORE_PUNCT_RE.sub(r"\1", sentence)


def parse_examples(data: Any, limit: int) -> list[str]:
    """
    Extract up to ``limit`` distinct sentences from a Korp query payload.

    First-seen order is kept.
    """
    examples: list[str] = []
    if limit <= 0:
        return examples

    seen: set[str] = set()
    for row in _kwic_rows(data):
        sentence = build_sentence(_row_tokens(row))
        if not sentence or sentence in seen:
            continue
        seen.add(sentence)
        examples.append(sentence)
        if len(examples) >= limit:
            break
    return examples


class CorpusClient:
    """Fetch example sentences for a word from Korp."""

    name = "korp"

    def __init__(
        self,
        endpoint: str | None = None,
        corpora: str | None = None,
        timeout: float | None = None,
        cache_ttl: float | None = None,
        max_examples: int | None = None,
        cache: TTLCache[ExampleResult] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint or settings.corpus_endpoint
        self.corpora = corpora or settings.corpus_corpora
        self.timeout = timeout if timeout is not None else settings.corpus_timeout
        self.max_examples = (
            max_examples if max_examples is not None else settings.corpus_max_examples
        )
        ttl = cache_ttl if cache_ttl is not None else settings.corpus_cache_ttl
        self.cache: TTLCache[ExampleResult] = (
            cache if cache is not None else TTLCache(default_ttl=ttl)
        )
        self._transport = transport

    async def _request(self, word: str, limit: int) -> Any:
        """Run a CQP word query and return the decoded JSON payload."""
        params: dict[str, str | int] = {
            "corpus": self.corpora,
            "cqp": f'[word = "{cqp_quote(word)}"]',
            "start": 0,
            "end": limit * _OVERFETCH - 1,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(self.endpoint, params=params)
            response.raise_for_status()
        return response.json()

    async def fetch_examples(self, word: str, limit: int | None = None) -> ExampleResult | None:
        """
        Fetch example sentences containing ``word``.

        Never raises; failures are logged and reported as None, the same as
        a query with no hits.

        Args:
            word: Input word (any casing/spacing)
            limit: Maximum number of sentences (defaults to settings)

        Returns:
            ExampleResult with deduplicated sentences, or None
        """
        word = (word or "").strip().lower()
        limit = self.max_examples if limit is None else limit
        if not word or limit <= 0:
            return None

        # At least max_examples are fetched; every smaller limit shares the entry
        fetch_size = max(limit, self.max_examples)
        key = f"{word}:{fetch_size}"
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for '{word}' from {self.name}")
            return replace(cached, examples=cached.examples[:limit], served_from_cache=True)

        try:
            data = await asyncio.wait_for(self._request(word, fetch_size), timeout=self.timeout)
            if isinstance(data, dict) and data.get("ERROR"):
                error = data["ERROR"]
                if isinstance(error, dict):
                    error = f"{error.get('type')} - {error.get('value')}"
                logger.warning(f"{self.name} API error for '{word}': {error}")
                return None
            examples = parse_examples(data, fetch_size)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"Timeout looking up '{word}' in {self.name}")
            return None
        except httpx.HTTPStatusError as e:
            logger.warning(f"{self.name} returned HTTP {e.response.status_code} for '{word}'")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"{self.name} request failed for '{word}': {e}")
            return None
        except ValueError as e:
            logger.warning(f"Could not parse {self.name} response for '{word}': {e}")
            return None
        except Exception as e:
            logger.warning(f"Error looking up '{word}' in {self.name}: {e}")
            return None

        if not examples:
            logger.debug(f"No {self.name} examples for '{word}'")
            return None

        self.cache.put(key, ExampleResult(examples=examples))
        return ExampleResult(examples=examples[:limit])
