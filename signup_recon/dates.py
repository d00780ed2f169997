"""Date of birth normalization to ISO ``YYYY-MM-DD``.

Signup lists mix locales, so slash/dot/dash dates are read day-first or
month-first depending on the DOB mode, unless one component is larger
than 12 and settles the question on its own.
"""

import re
from datetime import date
from typing import Iterable, Optional

import dateparser

from signup_recon import DOB_MODE_AUTO, DOB_MODE_DMY, DOB_MODE_MDY, DOB_MODES

_ISO_RE = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$')
_DMY_RE = re.compile(r'^(\d{1,2})[/.-](\d{1,2})[/.-](\d{4})$')

_YEAR_FIRST_RE = re.compile(r'^\d{4}\D')

_DATE_ORDER = {DOB_MODE_DMY: 'DMY', DOB_MODE_MDY: 'MDY', DOB_MODE_AUTO: 'DMY'}


def _format(year: int, month: int, day: int) -> str:
    """Return the ISO string for a real calendar date, else ''."""
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return ''
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        # e.g. 31 April or 29 February outside a leap year
        return ''


def _split_order(first: int, second: int, mode: str) -> str:
    if first > 12 and second <= 12:
        return DOB_MODE_DMY
    if second > 12 and first <= 12:
        return DOB_MODE_MDY
    return DOB_MODE_MDY if mode == DOB_MODE_MDY else DOB_MODE_DMY


def _parse_free_text(raw: str, mode: str) -> str:
    if _YEAR_FIRST_RE.match(raw):
        date_order = 'YMD'
    else:
        date_order = _DATE_ORDER.get(mode, 'DMY')
    # relative expressions ("today", "2 days ago") depend on the clock
    settings: dict = {
        'PARSERS': ['custom-formats', 'absolute-time'],
        'STRICT_PARSING': True,
        'DATE_ORDER': date_order,
        'RETURN_AS_TIMEZONE_AWARE': False,
    }
    try:
        parsed = dateparser.parse(raw, settings=settings)
    except Exception:
        # dateparser can raise various exceptions on malformed input
        return ''
    if parsed is None:
        return ''
    return parsed.date().isoformat()


def to_iso(raw: Optional[str], mode: str = DOB_MODE_AUTO) -> str:
    """Convert a date string to ISO format.

    Tried in order:

    1. ``YYYY-M-D`` with 1-2 digit month and day.
    2. ``D/M/YYYY`` with ``/``, ``.`` or ``-`` separators; a component
       above 12 fixes the order, otherwise ``mode`` decides (``auto``
       reads day-first).
    3. Free text such as ``4 March 1998`` via dateparser.

    Numeric input matching form 1 or 2 that is not a real calendar date
    is rejected without trying form 3.

    Args:
        raw: Date string as found in the roster or signup file.
        mode: One of ``auto``, ``dmy``, ``mdy``.

    Returns:
        ``YYYY-MM-DD``, or '' if the value cannot be read confidently.
    """
    value = str(raw or '').strip()
    if not value:
        return ''

    match = _ISO_RE.match(value)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _format(year, month, day)

    match = _DMY_RE.match(value)
    if match:
        first, second, year = (int(g) for g in match.groups())
        if _split_order(first, second, mode) == DOB_MODE_DMY:
            return _format(year, second, first)
        return _format(year, first, second)

    return _parse_free_text(value, mode)


def infer_dob_mode(values: Iterable[str]) -> str:
    """Infer day-first vs month-first from unambiguous D/M/YYYY values.

    A first component above 12 counts for day-first, a second component
    above 12 counts for month-first. Month-first wins only with strictly
    more evidence.
    """
    dmy_evidence = 0
    mdy_evidence = 0
    for raw in values:
        match = _DMY_RE.match(str(raw or '').strip())
        if not match:
            continue
        first, second = int(match.group(1)), int(match.group(2))
        if first > 12 and second <= 12:
            dmy_evidence += 1
        elif second > 12 and first <= 12:
            mdy_evidence += 1
    return DOB_MODE_MDY if mdy_evidence > dmy_evidence else DOB_MODE_DMY


def resolve_dob_mode(mode: str, values: Iterable[str]) -> str:
    """Resolve ``auto`` against the DOB column; pass fixed modes through.

    Raises:
        ValueError: If ``mode`` is not a known DOB mode.
    """
    if mode not in DOB_MODES:
        raise ValueError(
            f"Unknown DOB mode {mode!r}; expected one of {', '.join(DOB_MODES)}"
        )
    if mode == DOB_MODE_AUTO:
        return infer_dob_mode(values)
    return mode
