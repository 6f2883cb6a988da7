"""Local word data: curated en/ett dictionary, pronunciation lexicon and caches."""

from enorett.services.dictionary.base import (
    Article,
    DictionaryEntry,
    ExampleResult,
    Genus,
    MorphologyResult,
    article_from_genus,
    genus_from_article,
)
from enorett.services.dictionary.cache import TTLCache
from enorett.services.dictionary.pronunciation import PronunciationIndex
from enorett.services.dictionary.tiered import TieredDictionary

__all__ = [
    "Article",
    "DictionaryEntry",
    "ExampleResult",
    "Genus",
    "MorphologyResult",
    "PronunciationIndex",
    "TTLCache",
    "TieredDictionary",
    "article_from_genus",
    "genus_from_article",
]
