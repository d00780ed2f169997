"""Map free-form signup headers to the name, surname and DOB roles."""

import re
from typing import Optional

from signup_recon import ColumnMapping, ColumnMappingError

NAME_COLUMN_CANDIDATES = ['name']
SURNAME_COLUMN_CANDIDATES = ['surname', 'last name', 'last_name']
DOB_COLUMN_CANDIDATES = ['date of birth', 'dob']

_NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')


def normalize_header_name(value: str) -> str:
    """Lowercase and collapse punctuation/whitespace runs to one space.

    >>> normalize_header_name('  Date-of_Birth ')
    'date of birth'
    """
    return _NON_ALNUM_RE.sub(' ', (value or '').strip().lower()).strip()


def detect_column(headers: list[str], candidates: list[str]) -> str:
    """Return the first header matching any candidate label, or ''."""
    wanted = {normalize_header_name(c) for c in candidates}
    for header in headers:
        if normalize_header_name(header) in wanted:
            return header
    return ''


def auto_detect_mapping(headers: list[str]) -> ColumnMapping:
    """Guess the column mapping from header labels.

    Undetected roles fall back positionally: name and DOB to the first
    header, surname to the first header that is not the name column.
    """
    first = headers[0] if headers else ''
    name = detect_column(headers, NAME_COLUMN_CANDIDATES) or first
    surname = detect_column(headers, SURNAME_COLUMN_CANDIDATES)
    if not surname:
        surname = next((h for h in headers if h != name), first)
    dob = detect_column(headers, DOB_COLUMN_CANDIDATES) or first
    return ColumnMapping(name_column=name, surname_column=surname, dob_column=dob)


def _override(headers: list[str], requested: Optional[str], detected: str) -> str:
    if requested is None:
        return detected
    # exact label first, then the same loose comparison used for detection
    if requested in headers:
        return requested
    return detect_column(headers, [requested]) or requested


def resolve_mapping(
    headers: list[str],
    name: Optional[str] = None,
    surname: Optional[str] = None,
    dob: Optional[str] = None,
) -> ColumnMapping:
    """Combine auto-detection with operator overrides and validate.

    Args:
        headers: Header labels of the parsed signup file.
        name: Column holding the first name, or None to auto-detect.
        surname: Column holding the surname, or None to auto-detect.
        dob: Column holding the date of birth, or None to auto-detect.

    Returns:
        Validated ColumnMapping.

    Raises:
        ColumnMappingError: If a resolved column is not one of the headers.
    """
    detected = auto_detect_mapping(headers)
    mapping = ColumnMapping(
        name_column=_override(headers, name, detected.name_column),
        surname_column=_override(headers, surname, detected.surname_column),
        dob_column=_override(headers, dob, detected.dob_column),
    )
    validate_mapping(headers, mapping)
    return mapping


def validate_mapping(headers: list[str], mapping: ColumnMapping) -> None:
    """Raise ColumnMappingError if any mapped column is not a header."""
    if not isinstance(mapping, ColumnMapping):
        raise ColumnMappingError(
            f"Column mapping must be a ColumnMapping, got {type(mapping).__name__}"
        )
    roles = {
        'name': mapping.name_column,
        'surname': mapping.surname_column,
        'date of birth': mapping.dob_column,
    }
    unknown = [
        f"{role} ({column!r})" for role, column in roles.items()
        if not column or column not in headers
    ]
    if unknown:
        raise ColumnMappingError(
            f"Unknown columns for: {', '.join(unknown)}. "
            f"Available: {', '.join(headers)}"
        )
