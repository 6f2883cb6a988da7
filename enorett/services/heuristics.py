"""Suffix-based en/ett guessing for when the lookup service is unreachable.

These are rules of thumb, not grammar: results are always flagged as a guess
and never reported with more than medium confidence.
"""

from dataclasses import dataclass

from enorett.services.dictionary.base import Article

# Checked in order; en-suffixes first
SUFFIX_RULES: tuple[tuple[Article, tuple[str, ...]], ...] = (
    (Article.EN, ("are", "ing", "het", "else", "tion", "dom", "skap", "nad", "or", "ik", "ur")),
    (Article.ETT, ("ium", "ande", "ende", "eri", "ment", "em", "tek", "um", "iv", "o")),
)


@dataclass(frozen=True)
class ArticleGuess:
    word: str
    article: Article
    suffix: str
    confidence: str = "medium"
    is_guess: bool = True

    @property
    def explanation(self) -> str:
        return f'Baserat på ändelsen "-{self.suffix}" (vanligtvis {self.article.value}-ord)'


def guess_article(word: str) -> ArticleGuess | None:
    """Guess the article of ``word`` from its ending, or None if no rule applies."""
    normalized = (word or "").strip().lower()
    if not normalized or " " in normalized:
        return None

    for article, suffixes in SUFFIX_RULES:
        for suffix in suffixes:
            # The whole word is not a suffix match ("or", "em")
            if normalized.endswith(suffix) and len(normalized) > len(suffix):
                return ArticleGuess(word=normalized, article=article, suffix=suffix)
    return None
