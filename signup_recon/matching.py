"""Reconcile an event roster against an external signup list."""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from signup_recon import (
    DOB_MODE_AUTO,
    REASON_DOB_MISSING,
    REASON_DOB_NOT_FOUND,
    REASON_NAME_MISMATCH,
    ColumnMapping,
    EmptyInputError,
    ExternalRecord,
    MatchResult,
    ParsedTable,
    RosterRecord,
    SignupList,
)
from signup_recon.columns import resolve_mapping, validate_mapping
from signup_recon.dates import infer_dob_mode, resolve_dob_mode, to_iso
from signup_recon.identity import build_key, is_complete_key, normalize_name
from signup_recon.parser import parse_table
from signup_recon.scoring import rank_candidates

log = logging.getLogger(__name__)

DEFAULT_TEAM_NAME = 'Team'


def _join_name(first: str, last: str) -> str:
    return ' '.join(part for part in (first.strip(), last.strip()) if part)


def build_external_records(
    table: ParsedTable,
    mapping: ColumnMapping,
    dob_mode: str,
) -> list[ExternalRecord]:
    """Reduce signup rows to name, ISO birthday and identity key.

    Args:
        table: Parsed signup file.
        mapping: Columns holding first name, surname and date of birth.
        dob_mode: Resolved DOB mode (``dmy`` or ``mdy``).

    Returns:
        One ExternalRecord per row, in file order.
    """
    validate_mapping(table.headers, mapping)
    records: list[ExternalRecord] = []
    for row in table.rows:
        raw_name = _join_name(
            row.get(mapping.name_column, ''), row.get(mapping.surname_column, ''),
        )
        birthday = to_iso(row.get(mapping.dob_column, ''), dob_mode)
        records.append(ExternalRecord(
            raw_name=raw_name,
            birthday=birthday,
            key=build_key(raw_name, birthday),
        ))
    return records


def build_key_set(records: Iterable[ExternalRecord]) -> frozenset[str]:
    """Collect the identity keys that have both a name and a birthday."""
    return frozenset(r.key for r in records if is_complete_key(r.key))


def build_dob_index(records: Iterable[ExternalRecord]) -> dict[str, list[ExternalRecord]]:
    """Group signup records by ISO birthday, skipping records without one."""
    index: dict[str, list[ExternalRecord]] = defaultdict(list)
    for r in records:
        if r.birthday:
            index[r.birthday].append(r)
    return dict(index)


def prepare_signups(
    text: str,
    name: Optional[str] = None,
    surname: Optional[str] = None,
    dob: Optional[str] = None,
    dob_mode: str = DOB_MODE_AUTO,
) -> SignupList:
    """Parse a signup file and build its external records.

    Args:
        text: Raw signup file contents.
        name: First-name column override, None to auto-detect.
        surname: Surname column override, None to auto-detect.
        dob: DOB column override, None to auto-detect.
        dob_mode: ``auto``, ``dmy`` or ``mdy``.

    Returns:
        SignupList with the table, mapping, DOB modes and records.

    Raises:
        EmptyInputError: If the file has no header row or no data rows.
        ColumnMappingError: If an override names an unknown column.
        ValueError: If ``dob_mode`` is unknown.
    """
    table = parse_table(text)
    if not table.headers:
        raise EmptyInputError("CSV appears to be empty.")
    if not table.rows:
        raise EmptyInputError("CSV has no data rows.")

    mapping = resolve_mapping(table.headers, name=name, surname=surname, dob=dob)
    dob_values = [row.get(mapping.dob_column, '') for row in table.rows]
    inferred = infer_dob_mode(dob_values)
    resolved = resolve_dob_mode(dob_mode, dob_values)
    log.info(
        "Columns: name=%r surname=%r dob=%r; DOB mode %s (inferred %s)",
        mapping.name_column, mapping.surname_column, mapping.dob_column,
        resolved, inferred,
    )

    return SignupList(
        table=table,
        mapping=mapping,
        dob_mode=dob_mode,
        inferred_dob_mode=inferred,
        records=build_external_records(table, mapping, resolved),
    )


def roster_from_entries(entries: Iterable[dict]) -> list[RosterRecord]:
    """Convert roster source entries into RosterRecords.

    Entries look like ``{'id': ..., 'team': {'name': ...},
    'player': {'name': ..., 'birthday': ...}}``. Entries without a player
    name are dropped; a missing team name becomes ``Team``.
    """
    records: list[RosterRecord] = []
    for entry in entries:
        team = entry.get('team') or {}
        player = entry.get('player') or {}
        player_name = str(player.get('name') or '').strip()
        if not player_name:
            continue
        records.append(RosterRecord(
            roster_id=str(entry.get('id') or ''),
            team_name=str(team.get('name') or '').strip() or DEFAULT_TEAM_NAME,
            player_name=player_name,
            birthday=player.get('birthday') or None,
        ))
    return records


def _classify(
    record: RosterRecord,
    key_set: frozenset[str],
    dob_index: dict[str, list[ExternalRecord]],
) -> MatchResult:
    iso_dob = to_iso(record.birthday)
    name_part = normalize_name(record.player_name)

    if not iso_dob:
        return MatchResult(roster_record=record, is_match=False, reason=REASON_DOB_MISSING)

    key = build_key(name_part, iso_dob)
    if name_part and key in key_set:
        return MatchResult(roster_record=record, is_match=True)

    same_dob = dob_index.get(iso_dob, [])
    if not same_dob:
        return MatchResult(roster_record=record, is_match=False, reason=REASON_DOB_NOT_FOUND)

    return MatchResult(
        roster_record=record,
        is_match=False,
        reason=REASON_NAME_MISMATCH,
        suggestions=tuple(rank_candidates(name_part, same_dob)),
    )


def reconcile(
    roster_records: Iterable[RosterRecord],
    external_records: Iterable[ExternalRecord],
) -> list[MatchResult]:
    """Check every roster player against the signup list.

    A roster player matches when a signup record has the same normalized
    name and the same ISO birthday. Non-matches carry a reason and, when
    other signups share the birthday, up to three closest names.

    Args:
        roster_records: Players on the event roster.
        external_records: Records built from the signup file.

    Returns:
        One MatchResult per roster player, sorted by team, player name
        and roster id.
    """
    external = list(external_records)
    key_set = build_key_set(external)
    dob_index = build_dob_index(external)

    ordered = sorted(
        roster_records,
        key=lambda r: (r.team_name or '', r.player_name or '', str(r.roster_id)),
    )
    results = [_classify(record, key_set, dob_index) for record in ordered]

    log.info(
        "Reconciliation finished: %d roster players, %d matched, %d missing",
        len(results),
        sum(1 for r in results if r.is_match),
        sum(1 for r in results if not r.is_match),
    )
    return results


def partition_results(results: list[MatchResult]) -> tuple[list[MatchResult], list[MatchResult]]:
    """Split results into (missing, matched), keeping their order."""
    missing = [r for r in results if not r.is_match]
    matched = [r for r in results if r.is_match]
    return missing, matched
