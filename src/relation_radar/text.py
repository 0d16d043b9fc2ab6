"""Text helpers for Turkish news content.

Python's ``str.lower`` maps ``İ`` to ``i̇`` (with a combining dot) and ``I`` to
``i``, which breaks matching against Turkish keywords. Everything that compares
text goes through :func:`tr_lower` so both sides fold the same way.
"""

import re
from collections.abc import Iterable
from functools import lru_cache

_TR_UPPER_MAP = str.maketrans({"İ": "i", "I": "ı"})
_ASCII_FOLD_MAP = str.maketrans("ıişğüöçâîû", "iisguocaiu")

_WORD_RE = re.compile(r"\w+")
_TERM_RE = re.compile(r'"([^"]+)"|(\S+)')


def tr_lower(text: str) -> str:
    """Lower-case ``text`` using Turkish dotted/dotless ``i`` rules."""
    return text.translate(_TR_UPPER_MAP).lower()


def fold_identity(text: str) -> str:
    """Case-insensitive key for names. Dotted and dotless ``i`` fold to one letter.

    ``ACME HOLDING``, ``Acme Holding`` and ``acme holdıng`` share a key.
    """
    return " ".join(tr_lower(text).replace("ı", "i").split())


def ascii_fold(text: str) -> str:
    """Turkish-lower-case ``text`` and strip diacritics (``Ağustos`` -> ``agustos``)."""
    return tr_lower(text).translate(_ASCII_FOLD_MAP)


def tokenize(text: str) -> list[str]:
    """Split text into word tokens."""
    return _WORD_RE.findall(text)


def count_words(text: str, stopwords: frozenset[str]) -> int:
    """Count tokens in ``text`` that are not stopwords."""
    return sum(1 for token in tokenize(tr_lower(text)) if token not in stopwords)


@lru_cache(maxsize=512)
def _whole_word_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(tr_lower(keyword))}(?!\w)")


def count_whole_word(text: str, keyword: str) -> int:
    """Count occurrences of ``keyword`` in ``text`` that are not inside a longer word.

    ``text`` must already be folded with :func:`tr_lower`.
    """
    return len(_whole_word_pattern(keyword).findall(text))


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Whether any keyword appears in ``text`` as a plain substring (case-insensitive)."""
    folded = tr_lower(text)
    return any(tr_lower(keyword) in folded for keyword in keywords)


def parse_terms(text: str) -> list[str]:
    """Split query text into lower-cased match terms.

    A double-quoted phrase is kept as a single term without its quotes.
    """
    terms: list[str] = []
    for phrase, word in _TERM_RE.findall(text):
        term = tr_lower((phrase or word).strip().strip('"'))
        if term:
            terms.append(term)
    return terms


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, ending in ``...`` when shortened."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def paragraphs(text: str) -> list[str]:
    """Split text on blank lines, dropping empty paragraphs."""
    return [p.strip() for p in re.split(r"\n\s*\n", text) if p.strip()]


def extract_summary(text: str, max_length: int = 200) -> str:
    """Build a short excerpt from the opening of a document.

    Uses the first paragraph, plus the second when the first is under 100
    characters, truncated to ``max_length``.
    """
    parts = paragraphs(text)
    if not parts:
        return ""
    summary = parts[0]
    if len(summary) < 100 and len(parts) > 1:
        summary += " " + parts[1]
    return truncate(summary, max_length)
