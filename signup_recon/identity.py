"""Identity keys: normalized name plus ISO birthday."""

import re

_WHITESPACE_RE = re.compile(r'\s+')

KEY_SEPARATOR = '::'


def normalize_name(value: str) -> str:
    """Lowercase a person name and collapse whitespace runs.

    >>> normalize_name('  Jane   DOE ')
    'jane doe'
    """
    return _WHITESPACE_RE.sub(' ', (value or '').lower()).strip()


def build_key(name: str, iso_dob: str) -> str:
    """Build the exact-match key ``<normalized name>::<iso dob>``."""
    return f"{normalize_name(name)}{KEY_SEPARATOR}{iso_dob or ''}"


def is_complete_key(key: str) -> bool:
    """True when both the name part and the DOB part of a key are set.

    Keys missing either part must never enter the lookup set, or every
    record without a birthday would match every other one.
    """
    name_part, _, dob_part = key.partition(KEY_SEPARATOR)
    return bool(name_part and dob_part)
