"""Normalize the date shapes found on news sites to ``YYYY-MM-DD``.

Sources print dates as ``15.01.2020``, ``2020-01-15``, ``15/01/2020`` or
``15 Ocak 2020``. Parsing never raises to callers: anything unrecognisable is
an unknown date (``None``), because one malformed date must not abort a search.
"""

import datetime
import logging
import re
from collections.abc import Callable, Iterable, Iterator

from relation_radar.errors import InvalidDateError
from relation_radar.text import ascii_fold

logger = logging.getLogger(__name__)

MONTH_NAMES: dict[str, int] = {
    # Turkish, keyed by their ASCII-folded spelling
    "ocak": 1,
    "subat": 2,
    "mart": 3,
    "nisan": 4,
    "mayis": 5,
    "haziran": 6,
    "temmuz": 7,
    "agustos": 8,
    "eylul": 9,
    "ekim": 10,
    "kasim": 11,
    "aralik": 12,
    # English
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

# Each extractor yields (year, month, day) candidates found in the text.
_Extractor = Callable[[str], Iterator[tuple[int, int, int]]]

_DOTTED_RE = re.compile(r"(?<!\d)(\d{1,2})\.(\d{1,2})\.(\d{4})(?!\d)")
_SLASHED_RE = re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4})(?!\d)")
_DASHED_RE = re.compile(r"(?<!\d)(\d{1,2})-(\d{1,2})-(\d{4})(?!\d)")
_ISO_RE = re.compile(r"(?<!\d)(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)")
_DMY_RE = re.compile(r"(?<!\d)(\d{1,2})[./-](\d{1,2})[./-](\d{4})(?!\d)")
_NAMED_RE = re.compile(r"(?<!\d)(\d{1,2})\s+([^\W\d_]+)\s+(\d{4})(?!\d)")


def _day_first(pattern: re.Pattern[str]) -> _Extractor:
    def extract(text: str) -> Iterator[tuple[int, int, int]]:
        for match in pattern.finditer(text):
            day, month, year = match.groups()
            yield int(year), int(month), int(day)

    return extract


def _year_first(text: str) -> Iterator[tuple[int, int, int]]:
    for match in _ISO_RE.finditer(text):
        year, month, day = match.groups()
        yield int(year), int(month), int(day)


def _month_named(text: str) -> Iterator[tuple[int, int, int]]:
    for match in _NAMED_RE.finditer(text):
        day, name, year = match.groups()
        month = MONTH_NAMES.get(ascii_fold(name))
        if month is not None:
            yield int(year), month, int(day)


HINT_FORMATS: dict[str, _Extractor] = {
    "DD.MM.YYYY": _day_first(_DOTTED_RE),
    "DD/MM/YYYY": _day_first(_SLASHED_RE),
    "YYYY-MM-DD": _year_first,
}

_DEFAULT_ORDER: tuple[_Extractor, ...] = (
    _year_first,
    _day_first(_DMY_RE),
    _month_named,
)

# ISO last: in scraped pages it mostly comes from image and asset URLs.
_DOCUMENT_ORDER: tuple[_Extractor, ...] = (
    _day_first(_DOTTED_RE),
    _day_first(_SLASHED_RE),
    _day_first(_DASHED_RE),
    _month_named,
    _year_first,
)


def _first_valid(text: str, extractors: Iterable[_Extractor]) -> datetime.date | None:
    for extract in extractors:
        for year, month, day in extract(text):
            try:
                return datetime.date(year, month, day)
            except ValueError:
                continue
    return None


def parse_date(raw: str, hint_format: str | None = None) -> datetime.date:
    """Parse the first valid date found in ``raw``.

    The ``hint_format`` pattern is tried first, then ISO, then day/month/year
    with ``.``, ``/`` or ``-`` separators, then day + month name + year.

    Raises:
        InvalidDateError: If no pattern yields an in-range calendar date.
    """
    if not raw:
        raise InvalidDateError("empty date text")

    extractors: list[_Extractor] = []
    if hint_format:
        hinted = HINT_FORMATS.get(hint_format)
        if hinted is None:
            logger.debug("Unsupported date hint format %r, ignoring", hint_format)
        else:
            extractors.append(hinted)
    extractors.extend(_DEFAULT_ORDER)

    parsed = _first_valid(raw, extractors)
    if parsed is None:
        raise InvalidDateError(f"no recognisable date in {raw[:60]!r}")
    return parsed


def normalize(raw: str | None, hint_format: str | None = None) -> str | None:
    """Return ``raw`` as a ``YYYY-MM-DD`` string, or ``None`` when unknown."""
    if raw is None:
        return None
    try:
        return parse_date(raw, hint_format).isoformat()
    except InvalidDateError:
        return None


def extract_date(text: str | None, *, window: int = 2000) -> str | None:
    """Find a publication date near the top of a scraped document.

    Only the first ``window`` characters are scanned, where bylines and
    timestamps sit; dates further down usually refer to other events. Day-first
    dates are preferred over ISO ones, which mostly come from asset URLs.
    """
    if not text:
        return None
    parsed = _first_valid(text[:window], _DOCUMENT_ORDER)
    return parsed.isoformat() if parsed is not None else None


def today() -> str:
    """Current UTC calendar date as ``YYYY-MM-DD``."""
    return datetime.datetime.now(tz=datetime.UTC).date().isoformat()


def utc_now() -> str:
    """Current UTC timestamp in ISO 8601."""
    return datetime.datetime.now(tz=datetime.UTC).isoformat()
