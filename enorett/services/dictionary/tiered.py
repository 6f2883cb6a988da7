"""Curated en/ett dictionary split into a free prefix and a premium superset."""

import json
import logging
from pathlib import Path
from typing import Any

from enorett.services.dictionary.base import Article, DictionaryEntry

logger = logging.getLogger(__name__)

DEFAULT_FREE_LIMIT = 250

# Served when the dictionary file cannot be read
FALLBACK_ENTRIES: tuple[DictionaryEntry, ...] = (
    DictionaryEntry(word="bil", article=Article.EN, translation="car"),
    DictionaryEntry(word="hus", article=Article.ETT, translation="house"),
    DictionaryEntry(word="bok", article=Article.EN, translation="book"),
    DictionaryEntry(word="barn", article=Article.ETT, translation="child"),
)


def _parse_entry(raw: Any) -> DictionaryEntry | None:
    """Build an entry from one JSON row, or None if the row is unusable."""
    if not isinstance(raw, dict):
        return None

    word = raw.get("word")
    if not isinstance(word, str) or not word.strip():
        return None

    try:
        article = Article(str(raw.get("article", "")).strip().lower())
    except ValueError:
        return None

    translation = raw.get("translation")
    if not isinstance(translation, str) or not translation.strip():
        translation = None

    return DictionaryEntry(
        word=word.strip().lower(),
        article=article,
        translation=translation.strip() if translation else None,
    )


def parse_dictionary(payload: Any) -> list[DictionaryEntry]:
    """
    Parse a dictionary payload into ordered entries.

    Accepts either a bare list of ``{word, article, translation}`` objects or
    an object holding that list under ``"dictionary"``. Invalid rows are
    skipped; duplicate words keep their first occurrence.

    Raises:
        ValueError: The payload holds no entry list at all
    """
    if isinstance(payload, dict):
        payload = payload.get("dictionary")
    if not isinstance(payload, list):
        raise ValueError("dictionary payload must be a list of entries")

    entries: list[DictionaryEntry] = []
    seen: set[str] = set()
    skipped = 0
    for raw in payload:
        entry = _parse_entry(raw)
        if entry is None:
            skipped += 1
            continue
        if entry.word in seen:
            continue
        seen.add(entry.word)
        entries.append(entry)

    if skipped:
        logger.warning(f"Skipped {skipped} invalid dictionary rows")
    return entries


class TieredDictionary:
    """
    Ordered dictionary with a free tier (first N entries) and a full tier.

    The backing file is read once, on first use. Both tiers are indexed by
    word for exact-match lookups.
    """

    def __init__(
        self,
        path: Path | None = None,
        free_limit: int = DEFAULT_FREE_LIMIT,
        entries: list[DictionaryEntry] | None = None,
    ) -> None:
        """
        Initialize the dictionary.

        Args:
            path: JSON file with the ordered entries
            free_limit: Number of leading entries available without premium
            entries: Preloaded entries, bypassing the file. Used in tests.
        """
        self.path = path
        self.free_limit = max(0, free_limit)
        self._full: list[DictionaryEntry] | None = list(entries) if entries is not None else None
        self._full_index: dict[str, DictionaryEntry] | None = None
        self._free_index: dict[str, DictionaryEntry] | None = None

    def _read_source(self) -> list[DictionaryEntry]:
        if self.path is None:
            logger.warning("No dictionary path configured, using built-in fallback entries")
            return list(FALLBACK_ENTRIES)

        try:
            with self.path.open(encoding="utf-8") as f:
                entries = parse_dictionary(json.load(f))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load dictionary from {self.path}: {e}")
            return list(FALLBACK_ENTRIES)

        logger.info(f"Loaded dictionary ({len(entries)} entries) from {self.path}")
        return entries

    def load_full(self) -> list[DictionaryEntry]:
        """Return every entry, loading the source on first call."""
        if self._full is None:
            self._full = self._read_source()
        return self._full

    def load_free(self, limit: int | None = None) -> list[DictionaryEntry]:
        """Return the free-tier prefix of the full dictionary."""
        size = self.free_limit if limit is None else max(0, limit)
        return self.load_full()[:size]

    def find_free(self, word: str) -> DictionaryEntry | None:
        if self._free_index is None:
            self._free_index = {entry.word: entry for entry in self.load_free()}
        return self._free_index.get(word)

    def find_full(self, word: str) -> DictionaryEntry | None:
        if self._full_index is None:
            self._full_index = {entry.word: entry for entry in self.load_full()}
        return self._full_index.get(word)

    def __len__(self) -> int:
        return len(self.load_full())
