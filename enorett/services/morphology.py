"""Sparv client for the grammatical gender (genus) of Swedish nouns."""

import asyncio
import json
import logging
import re
from dataclasses import dataclass, replace
from typing import Any

import httpx

from enorett.config import settings
from enorett.services.dictionary.base import Genus, MorphologyResult
from enorett.services.dictionary.cache import TTLCache

logger = logging.getLogger(__name__)

# <w pos="NN" msd="NN.UTR.SIN.IND.NOM" lemma="|bil|">bil</w>
_TOKEN_RE = re.compile(r"<w\b([^>]*)>([^<]*)</w>", re.IGNORECASE)
_ATTR_RE = re.compile(r'([\w:-]+)\s*=\s*"([^"]*)"')
_POS_RE = re.compile(r"^([A-Z]{2})")
_GENUS_RE = re.compile(r"UTR|NEU")

_LEXICAL_SETTINGS = json.dumps(
    {"positional_attributes": {"lexical_attributes": ["pos", "msd", "lemma"]}}
)


@dataclass
class _Candidate:
    lemma: str | None
    msd: str | None
    genus: Genus | None
    pos: str | None


def derive_genus(msd: str | None) -> Genus | None:
    """Read the genus out of a morphosyntactic descriptor."""
    if not msd:
        return None
    if "UTR" in msd:
        return Genus.UTR
    if "NEU" in msd:
        return Genus.NEU
    return None


def _pos_from_msd(msd: str | None) -> str | None:
    if not msd:
        return None
    match = _POS_RE.match(msd)
    return match.group(1) if match else None


def _is_noun(pos: str | None) -> bool:
    return isinstance(pos, str) and pos.upper().startswith("NN")


def _collect_strings(value: Any) -> list[str]:
    """Collect every string nested anywhere inside ``value``."""
    results: list[str] = []
    stack = [value]
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            results.append(current)
        elif isinstance(current, list):
            stack.extend(current)
        elif isinstance(current, dict):
            stack.extend(current.values())
    return results


def _first_string(*candidates: Any) -> str | None:
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None


def _extract_lemma(entry: dict[str, Any]) -> str | None:
    infl = entry.get("infl")
    lemmas = entry.get("lemmas")
    lexicon_entry = entry.get("lexiconEntry")
    lemma = _first_string(
        entry.get("lemgram"),
        entry.get("baseform"),
        entry.get("lemma"),
        infl.get("baseform") if isinstance(infl, dict) else None,
        lemmas[0] if isinstance(lemmas, list) and lemmas else None,
        entry.get("word"),
        lexicon_entry.get("lemma") if isinstance(lexicon_entry, dict) else None,
    )
    return lemma.lower() if lemma else None


def _extract_msd(entry: dict[str, Any]) -> str | None:
    msds = entry.get("msds")
    direct = _first_string(
        entry.get("msd"),
        entry.get("MSD"),
        msds[0] if isinstance(msds, list) and msds else None,
    )
    if direct:
        return direct
    return next((s for s in _collect_strings(entry) if _GENUS_RE.search(s)), None)


def _extract_pos(entry: dict[str, Any], msd: str | None) -> str | None:
    pos = entry.get("pos")
    if isinstance(pos, str) and pos:
        return pos
    pos = _pos_from_msd(msd)
    if pos:
        return pos
    for s in _collect_strings(entry):
        if s == "NN" or s.startswith("NN.") or re.search(r"\bNN\b", s):
            return "NN"
    return None


def _extract_hits(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return []
    hits = data.get("hits")
    if isinstance(hits, list):
        return hits
    if isinstance(hits, dict) and isinstance(hits.get("hits"), list):
        return hits["hits"]
    if isinstance(data.get("results"), list):
        return data["results"]
    return []


def parse_json_candidates(data: Any) -> list[_Candidate]:
    """Normalize lexicon-style JSON hits (Karp/SALDO and similar)."""
    candidates = []
    for hit in _extract_hits(data):
        if not isinstance(hit, dict):
            continue
        entry = hit.get("entry") or hit.get("_source") or hit.get("source") or hit
        if not isinstance(entry, dict):
            continue
        msd = _extract_msd(entry)
        candidates.append(
            _Candidate(
                lemma=_extract_lemma(entry),
                msd=msd,
                genus=derive_genus(msd),
                pos=_extract_pos(entry, msd),
            )
        )
    return candidates


def parse_sparv_candidates(xml_text: str, word: str) -> list[_Candidate]:
    """Pick the annotated tokens of a Sparv XML response that match ``word``."""
    candidates = []
    for match in _TOKEN_RE.finditer(xml_text):
        attrs = {key.lower(): value for key, value in _ATTR_RE.findall(match.group(1))}
        text = match.group(2).strip().lower()

        # Sparv sets are pipe-delimited: "|bil|" or "|bil|bila|"
        lemma = next((part for part in attrs.get("lemma", "").split("|") if part), "").lower()

        if word not in (text, lemma):
            continue

        msd = attrs.get("msd") or None
        if not msd:
            continue
        candidates.append(
            _Candidate(
                lemma=lemma or text,
                msd=msd,
                genus=derive_genus(msd),
                pos=attrs.get("pos") or _pos_from_msd(msd),
            )
        )
    return candidates


def select_best(candidates: list[_Candidate]) -> _Candidate | None:
    """Prefer nouns with a genus, then anything with a genus, then the first."""
    for candidate in candidates:
        if candidate.genus and _is_noun(candidate.pos):
            return candidate
    for candidate in candidates:
        if candidate.genus:
            return candidate
    return candidates[0] if candidates else None


def parse_morphology_response(text: str, word: str) -> MorphologyResult | None:
    """
    Turn a raw morphology response into a result for ``word``.

    JSON payloads are read as lexicon hits, anything else as Sparv XML.

    Raises:
        ValueError: The body looks like JSON but does not parse
    """
    stripped = text.lstrip()
    if stripped.startswith(("{", "[")):
        candidates = parse_json_candidates(json.loads(stripped))
    else:
        candidates = parse_sparv_candidates(text, word)

    best = select_best(candidates)
    if best is None:
        return None

    return MorphologyResult.from_genus(
        word=best.lemma or word,
        genus=best.genus,
        part_of_speech=best.pos,
        msd=best.msd,
    )


class MorphologyClient:
    """Query Sparv for a word's genus and derive its article from it."""

    name = "sparv"

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float | None = None,
        cache_ttl: float | None = None,
        cache: TTLCache[MorphologyResult] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint or settings.morphology_endpoint
        self.timeout = timeout if timeout is not None else settings.morphology_timeout
        ttl = cache_ttl if cache_ttl is not None else settings.morphology_cache_ttl
        self.cache: TTLCache[MorphologyResult] = (
            cache if cache is not None else TTLCache(default_ttl=ttl)
        )
        self._transport = transport

    async def _request(self, word: str) -> str:
        """Annotate a short carrier sentence and return the raw response body."""
        params = {
            "text": f"Det är {word}.",
            "language": "sv",
            "settings": _LEXICAL_SETTINGS,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(self.endpoint, params=params)
            response.raise_for_status()
        return response.text

    async def fetch_genus(self, word: str) -> MorphologyResult | None:
        """
        Fetch genus/article for a Swedish word.

        Never raises: timeouts, HTTP errors and unparseable payloads are
        logged and reported as None. Only successful results are cached.

        Args:
            word: Input word (any casing/spacing)

        Returns:
            MorphologyResult, or None when Sparv had nothing usable
        """
        key = (word or "").strip().lower()
        if not key:
            return None

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for '{key}' from {self.name}")
            return replace(cached, served_from_cache=True)

        try:
            body = await asyncio.wait_for(self._request(key), timeout=self.timeout)
            if not body.strip():
                logger.warning(f"Empty {self.name} response for '{key}'")
                return None
            result = parse_morphology_response(body, key)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"Timeout looking up '{key}' in {self.name}")
            return None
        except httpx.HTTPStatusError as e:
            logger.warning(f"{self.name} returned HTTP {e.response.status_code} for '{key}'")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"{self.name} request failed for '{key}': {e}")
            return None
        except ValueError as e:
            logger.warning(f"Could not parse {self.name} response for '{key}': {e}")
            return None
        except Exception as e:
            logger.warning(f"Error looking up '{key}' in {self.name}: {e}")
            return None

        if result is None:
            logger.debug(f"No {self.name} analysis for '{key}'")
            return None

        self.cache.put(key, result)
        return result
