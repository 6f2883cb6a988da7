"""Lookup orchestration: curated dictionary tiers first, remote enrichment after."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from enorett.config import Settings
from enorett.services.corpus import CorpusClient
from enorett.services.dictionary.base import (
    Article,
    DictionaryEntry,
    ExampleResult,
    Genus,
    MorphologyResult,
    genus_from_article,
)
from enorett.services.dictionary.pronunciation import PronunciationIndex
from enorett.services.dictionary.tiered import TieredDictionary
from enorett.services.morphology import MorphologyClient

logger = logging.getLogger(__name__)


class Confidence(str, Enum):
    HIGH = "high"  # curated dictionary
    MEDIUM = "medium"  # article from morphological analysis
    LOW = "low"  # pronunciation and/or examples, no article
    NONE = "none"


# (English, Swedish)
WORD_REQUIRED = ("Word required", "Ord krävs")
PREMIUM_REQUIRED = ("Premium subscription required", "Premium-prenumeration krävs")
WORD_NOT_FOUND = ("Word not found", "Ordet hittades inte")


@dataclass
class SourceFlags:
    """Which sources contributed data to a lookup result."""

    dictionary: bool = False
    morphology: bool = False
    lexicon: bool = False
    corpus: bool = False


@dataclass
class LookupResult:
    """Unified answer for one lookup. Built fresh per call."""

    word: str
    article: Article | None = None
    genus: Genus | None = None
    translation: str | None = None
    ipa: str | None = None
    examples: list[str] = field(default_factory=list)
    source_flags: SourceFlags = field(default_factory=SourceFlags)
    confidence: Confidence = Confidence.NONE
    is_premium_data: bool = False
    requires_premium: bool = False
    error: str | None = None
    error_localized: str | None = None  # Swedish

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failure(
        cls, word: str, messages: tuple[str, str], requires_premium: bool = False
    ) -> "LookupResult":
        return cls(
            word=word,
            requires_premium=requires_premium,
            error=messages[0],
            error_localized=messages[1],
        )


class LookupOrchestrator:
    """
    Resolve a word through a strict priority cascade.

    1. Free dictionary tier (no network)
    2. Full dictionary tier, gated on entitlement
    3. Sparv genus + Korp examples (concurrently) + pronunciation lexicon

    The first tier with a match wins. Curated dictionary data is never
    overridden by remote data. ``resolve`` never raises.
    """

    def __init__(
        self,
        dictionary: TieredDictionary,
        pronunciations: PronunciationIndex,
        morphology: MorphologyClient | None = None,
        corpus: CorpusClient | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            dictionary: Curated en/ett dictionary
            pronunciations: IPA lexicon
            morphology: Sparv client. None disables genus lookups.
            corpus: Korp client. None disables example sentences.
        """
        self.dictionary = dictionary
        self.pronunciations = pronunciations
        self.morphology = morphology
        self.corpus = corpus

    async def resolve(
        self, raw_word: str, is_entitled: bool, allow_remote: bool = True
    ) -> LookupResult:
        """
        Look up the article and enrichment data for a word.

        Args:
            raw_word: Word as typed by the user
            is_entitled: Whether the caller holds an active premium entitlement
            allow_remote: Whether words missing from the dictionary may go on to
                Sparv, Korp and the lexicon. When False such words come back
                not found with ``requires_premium`` set, without any requests.

        Returns:
            LookupResult; validation, not-found and premium-gated outcomes are
            reported through its ``error``/``requires_premium`` fields
        """
        word = (raw_word or "").strip().lower()
        if not word:
            return LookupResult.failure("", WORD_REQUIRED)

        free_hit = self.dictionary.find_free(word)
        if free_hit:
            return self._from_dictionary(free_hit, is_premium_data=False)

        full_hit = self.dictionary.find_full(word)
        if full_hit:
            if not is_entitled:
                logger.debug(f"'{word}' is premium-only, caller not entitled")
                return LookupResult.failure(word, PREMIUM_REQUIRED, requires_premium=True)
            return self._from_dictionary(full_hit, is_premium_data=True)

        if not allow_remote:
            logger.debug(f"'{word}' not in dictionary, remote tier not allowed")
            return LookupResult.failure(word, WORD_NOT_FOUND, requires_premium=True)

        return await self._resolve_remote(word)

    def _from_dictionary(self, entry: DictionaryEntry, is_premium_data: bool) -> LookupResult:
        ipa = self.pronunciations.lookup(entry.word)
        return LookupResult(
            word=entry.word,
            article=entry.article,
            genus=genus_from_article(entry.article),
            translation=entry.translation,
            ipa=ipa,
            source_flags=SourceFlags(dictionary=True, lexicon=ipa is not None),
            confidence=Confidence.HIGH,
            is_premium_data=is_premium_data,
        )

    async def _resolve_remote(self, word: str) -> LookupResult:
        morphology, examples = await asyncio.gather(
            self._fetch_morphology(word),
            self._fetch_examples(word),
        )
        ipa = self.pronunciations.lookup(word)

        article = morphology.article if morphology else None
        genus = morphology.genus if morphology else None
        sentences = list(examples.examples) if examples else []

        if article is None and ipa is None and not sentences:
            logger.info(f"'{word}' not found in any source")
            return LookupResult.failure(word, WORD_NOT_FOUND)

        return LookupResult(
            word=word,
            article=article,
            genus=genus,
            ipa=ipa,
            examples=sentences,
            source_flags=SourceFlags(
                morphology=genus is not None,
                lexicon=ipa is not None,
                corpus=bool(sentences),
            ),
            confidence=Confidence.MEDIUM if article else Confidence.LOW,
            is_premium_data=False,
        )

    async def _fetch_morphology(self, word: str) -> MorphologyResult | None:
        if self.morphology is None:
            return None
        return await self._guarded(self.morphology.fetch_genus(word), "morphology", word)

    async def _fetch_examples(self, word: str) -> ExampleResult | None:
        if self.corpus is None:
            return None
        return await self._guarded(self.corpus.fetch_examples(word), "corpus", word)

    async def _guarded(self, coro: Any, source: str, word: str) -> Any:
        # Failures here count as "no data" from this source
        try:
            return await coro
        except Exception:
            logger.exception(f"Unexpected {source} failure for '{word}'")
            return None


def build_orchestrator(config: Settings) -> LookupOrchestrator:
    """Wire the orchestrator and its collaborators from settings."""
    dictionary = TieredDictionary(
        path=config.resolved_dictionary_path,
        free_limit=config.free_dictionary_limit,
    )
    pronunciations = PronunciationIndex(path=config.resolved_pronunciation_path)

    morphology = None
    if config.morphology_enabled and config.morphology_endpoint:
        morphology = MorphologyClient(
            endpoint=config.morphology_endpoint,
            timeout=config.morphology_timeout,
            cache_ttl=config.morphology_cache_ttl,
        )

    corpus = None
    if config.corpus_enabled and config.corpus_endpoint:
        corpus = CorpusClient(
            endpoint=config.corpus_endpoint,
            corpora=config.corpus_corpora,
            timeout=config.corpus_timeout,
            cache_ttl=config.corpus_cache_ttl,
            max_examples=config.corpus_max_examples,
        )

    return LookupOrchestrator(
        dictionary=dictionary,
        pronunciations=pronunciations,
        morphology=morphology,
        corpus=corpus,
    )
