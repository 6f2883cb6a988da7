"""Rich console configuration and helpers."""

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from enorett.services.dictionary.base import Article

custom_theme = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "word": "magenta",
        "en": "blue bold",
        "ett": "green bold",
        "dim": "dim",
    }
)

# Main console for output
console = Console(theme=custom_theme)

# Error console for stderr
error_console = Console(theme=custom_theme, stderr=True)


def article_markup(article: Article, word: str) -> str:
    """Return "en bil" / "ett hus" markup, colored by article."""
    return f"[{article.value}]{article.value}[/] [word]{escape(word)}[/]"
