"""Base types shared by the dictionary, lexicon and remote clients."""

from dataclasses import dataclass, field
from enum import Enum


class Article(str, Enum):
    """Swedish indefinite article."""

    EN = "en"
    ETT = "ett"


class Genus(str, Enum):
    """Grammatical gender as tagged in SUC/SALDO descriptors."""

    UTR = "UTR"  # utrum (common gender)
    NEU = "NEU"  # neutrum


def genus_from_article(article: Article | None) -> Genus | None:
    if article is Article.EN:
        return Genus.UTR
    if article is Article.ETT:
        return Genus.NEU
    return None


def article_from_genus(genus: Genus | None) -> Article | None:
    if genus is Genus.UTR:
        return Article.EN
    if genus is Genus.NEU:
        return Article.ETT
    return None


@dataclass(frozen=True)
class DictionaryEntry:
    """Curated dictionary entry."""

    word: str  # lowercase, unique within the dictionary
    article: Article
    translation: str | None = None


@dataclass
class MorphologyResult:
    """Genus/article information from morphological analysis.

    ``article`` is always derived from ``genus``; use :meth:`from_genus`
    so the two cannot disagree.
    """

    word: str
    article: Article | None = None
    genus: Genus | None = None
    part_of_speech: str | None = None  # e.g. "NN"
    msd: str | None = None  # raw descriptor, e.g. "NN.UTR.SIN.IND.NOM"
    served_from_cache: bool = False

    @classmethod
    def from_genus(
        cls,
        word: str,
        genus: Genus | None,
        part_of_speech: str | None = None,
        msd: str | None = None,
    ) -> "MorphologyResult":
        return cls(
            word=word,
            article=article_from_genus(genus),
            genus=genus,
            part_of_speech=part_of_speech,
            msd=msd,
        )


@dataclass
class ExampleResult:
    """Example sentences from the corpus."""

    examples: list[str] = field(default_factory=list)
    served_from_cache: bool = False
