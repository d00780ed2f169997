"""Delimited text parser for loosely structured signup lists."""

import logging
import re

from signup_recon import ParsedTable

log = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r'\s+')

BOM = '\ufeff'
DEFAULT_DELIMITER = ','
FALLBACK_DELIMITER = ';'


def _is_blank(values: list[str]) -> bool:
    return all(not value.strip() for value in values)


def _cell_count(rows: list[list[str]]) -> int:
    return sum(len(r) for r in rows)


def parse_delimited_rows(text: str, delimiter: str) -> list[list[str]]:
    """Split text into rows of raw field values.

    Double quotes delimit fields; inside quotes a doubled quote is a
    literal quote and the delimiter and newlines are taken literally.
    Carriage returns are always dropped. Rows made up only of blank
    fields are not returned.

    Args:
        text: Raw delimited text.
        delimiter: Single field separator character.

    Returns:
        List of rows, each a list of untrimmed field values.
    """
    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False
    index = 0
    length = len(text)

    while index < length:
        char = text[index]

        if in_quotes:
            if char == '"':
                if index + 1 < length and text[index + 1] == '"':
                    field.append('"')
                    index += 1
                else:
                    in_quotes = False
            elif char != '\r':
                field.append(char)
        elif char == '"':
            in_quotes = True
        elif char == delimiter:
            row.append(''.join(field))
            field = []
        elif char == '\n':
            row.append(''.join(field))
            rows.append(row)
            row = []
            field = []
        elif char != '\r':
            field.append(char)
        index += 1

    row.append(''.join(field))
    rows.append(row)

    return [r for r in rows if not _is_blank(r)]


def unique_headers(raw_headers: list[str]) -> list[str]:
    """Make header labels non-empty and unique.

    Empty labels become ``column_<n>`` (1-based position); repeated
    labels get ``_2``, ``_3``, ... suffixes, skipping any label that
    is already taken.

    Args:
        raw_headers: Header cells as found in the file.

    Returns:
        Cleaned header labels in the original order.
    """
    seen: dict[str, int] = {}
    taken: set[str] = set()
    headers: list[str] = []
    for position, header in enumerate(raw_headers, start=1):
        base = _WHITESPACE_RE.sub(' ', header).strip() or f'column_{position}'
        count = seen.get(base, 0) + 1
        label = base if count == 1 else f'{base}_{count}'
        # a generated suffix may already be a real header
        while label in taken:
            count += 1
            label = f'{base}_{count}'
        seen[base] = count
        taken.add(label)
        headers.append(label)
    return headers


def parse_table(raw_text: str) -> ParsedTable:
    """Parse a comma- or semicolon-separated signup list.

    Comma is tried first. When its first row has a single field and the
    text contains a semicolon, the text is re-parsed with ``;`` and the
    semicolon result is used only if its header row has several fields
    and it yields strictly more cells.
    Malformed input never raises; it degrades into fewer or shorter rows.

    Args:
        raw_text: File contents, optionally starting with a BOM.

    Returns:
        ParsedTable whose rows hold one trimmed value per header.
    """
    text = raw_text or ''
    if text.startswith(BOM):
        text = text[1:]

    rows = parse_delimited_rows(text, DEFAULT_DELIMITER)
    delimiter = DEFAULT_DELIMITER
    if rows and len(rows[0]) <= 1 and FALLBACK_DELIMITER in text:
        semicolon_rows = parse_delimited_rows(text, FALLBACK_DELIMITER)
        if (
            semicolon_rows
            and len(semicolon_rows[0]) > 1
            and _cell_count(semicolon_rows) > _cell_count(rows)
        ):
            rows = semicolon_rows
            delimiter = FALLBACK_DELIMITER

    if not rows:
        log.info("No rows found in input")
        return ParsedTable(headers=[], rows=[])

    headers = unique_headers(rows[0])
    mapped: list[dict[str, str]] = []
    for values in rows[1:]:
        mapped.append({
            header: (values[i].strip() if i < len(values) else '')
            for i, header in enumerate(headers)
        })

    log.info(
        "Parsed %d columns, %d data rows (delimiter %r)",
        len(headers), len(mapped), delimiter,
    )
    return ParsedTable(headers=headers, rows=mapped)


def _quote(value: str, delimiter: str) -> str:
    if any(ch in value for ch in (delimiter, '"', '\n', '\r')):
        return '"' + value.replace('"', '""') + '"'
    return value


def serialize_table(table: ParsedTable, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Write a ParsedTable back to delimited text.

    Cells containing the delimiter, quotes or line breaks are quoted.
    """
    lines = [delimiter.join(_quote(h, delimiter) for h in table.headers)]
    for row in table.rows:
        lines.append(delimiter.join(
            _quote(row.get(h, ''), delimiter) for h in table.headers
        ))
    return '\n'.join(lines) + '\n'
