"""IPA lookups backed by a flat pronunciation lexicon (NST style)."""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"\t+")


class PronunciationIndex:
    """
    Word -> IPA map loaded once from a ``word<TAB>ipa`` file.

    A missing or unreadable file leaves the index empty; lookups then
    simply return None.
    """

    def __init__(self, path: Path | None = None, entries: dict[str, str] | None = None) -> None:
        self.path = path
        self._entries: dict[str, str] = {}
        self._loaded = False
        if entries is not None:
            self._entries = {word.strip().lower(): ipa for word, ipa in entries.items()}
            self._loaded = True

    def load(self) -> None:
        """Read the lexicon file. Only the first call does any work."""
        if self._loaded:
            return
        # Set before reading so a failed load is not retried per lookup
        self._loaded = True

        if self.path is None:
            logger.warning("No pronunciation lexicon configured")
            return

        try:
            # Undecodable bytes become U+FFFD and their line is skipped
            with self.path.open(encoding="utf-8", errors="replace") as f:
                for line in f:
                    self._add_line(line)
        except OSError as e:
            logger.warning(f"Failed to load pronunciation lexicon from {self.path}: {e}")
            return

        logger.info(f"Loaded pronunciation lexicon ({len(self._entries)} entries) from {self.path}")

    def _add_line(self, line: str) -> None:
        line = line.rstrip("\r\n")
        if not line or line.startswith("#") or "\ufffd" in line:
            return

        parts = _SEPARATOR_RE.split(line)
        if len(parts) < 2:
            return

        word = parts[0].strip().lower()
        ipa = parts[1].strip()
        if word and ipa:
            self._entries[word] = ipa

    def lookup(self, word: str) -> str | None:
        """Return the IPA transcription for ``word``, or None."""
        self.load()
        key = (word or "").strip().lower()
        if not key:
            return None
        return self._entries.get(key)

    @property
    def size(self) -> int:
        self.load()
        return len(self._entries)
