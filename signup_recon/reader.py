"""Load roster and signup files from disk or over HTTP."""

import logging
import re
from pathlib import Path

import requests

from signup_recon import FetchError, RosterRecord
from signup_recon.columns import detect_column
from signup_recon.matching import roster_from_entries
from signup_recon.parser import parse_table

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_URL_RE = re.compile(r'^https?://', re.IGNORECASE)

ROSTER_ID_CANDIDATES = ['id', 'roster id', 'roster_id']
ROSTER_TEAM_CANDIDATES = ['team', 'team name']
ROSTER_NAME_CANDIDATES = ['name', 'player', 'player name']
ROSTER_BIRTHDAY_CANDIDATES = ['birthday', 'date of birth', 'dob']


def detect_encoding(path: Path) -> str:
    """Detect file encoding by checking for BOM bytes.

    Args:
        path: Path to the file.

    Returns:
        Encoding string suitable for open().
    """
    with open(path, 'rb') as f:
        bom = f.read(2)
    if bom == b'\xff\xfe':
        return 'utf-16-le'
    return 'utf-8-sig'


def read_text(path: str | Path) -> str:
    """Read a local file, handling UTF-16LE (with BOM) and UTF-8."""
    path = Path(path)
    encoding = detect_encoding(path)
    with open(path, 'r', encoding=encoding) as f:
        content = f.read()
    return content.lstrip('\ufeff')


def fetch_text(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Download a signup file.

    Args:
        url: HTTP(S) address of the file.
        timeout: Request timeout in seconds.

    Returns:
        Response body as text.

    Raises:
        FetchError: If the URL is empty, the request fails, or the
            response status is not successful.
    """
    url = (url or '').strip()
    if not url:
        raise FetchError("Provide a CSV URL first.")

    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(f"Unable to fetch CSV ({exc}).") from exc

    if not response.ok:
        raise FetchError(
            f"Unable to fetch CSV ({response.status_code}).",
            status=response.status_code,
        )

    log.info("Fetched %s (%d bytes)", url, len(response.content))
    return response.text


def load_source(location: str | Path, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Return the text of a signup file given a URL or a local path."""
    if isinstance(location, str) and _URL_RE.match(location.strip()):
        return fetch_text(location, timeout=timeout)
    return read_text(location)


def read_roster(path: str | Path) -> list[RosterRecord]:
    """Read an event roster export.

    The file needs team, name and birthday columns (comma or semicolon
    separated, labels matched loosely); an id column is optional and
    defaults to the row number.

    Args:
        path: Path to the roster file.

    Returns:
        List of RosterRecord, rows without a player name skipped.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If required columns are missing.
    """
    path = Path(path)
    table = parse_table(read_text(path))
    if not table.headers:
        raise ValueError(f"File {path} is empty or has no header row.")

    id_col = detect_column(table.headers, ROSTER_ID_CANDIDATES)
    team_col = detect_column(table.headers, ROSTER_TEAM_CANDIDATES)
    name_col = detect_column(table.headers, ROSTER_NAME_CANDIDATES)
    birthday_col = detect_column(table.headers, ROSTER_BIRTHDAY_CANDIDATES)

    missing = [
        label for label, col in
        (('team', team_col), ('name', name_col), ('birthday', birthday_col))
        if not col
    ]
    if missing:
        raise ValueError(f"Missing columns in {path}: {', '.join(missing)}")

    entries = []
    for row_num, row in enumerate(table.rows, start=2):
        if not row[name_col]:
            log.warning("Row %d in %s skipped: no player name", row_num, path)
            continue
        entries.append({
            'id': row[id_col] if id_col else str(row_num),
            'team': {'name': row[team_col]},
            'player': {'name': row[name_col], 'birthday': row[birthday_col]},
        })

    records = roster_from_entries(entries)
    log.info("%d roster players read from %s", len(records), path)
    return records
