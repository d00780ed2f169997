"""Core module for signup-reconciler."""

from dataclasses import dataclass, field
from typing import Optional

# DOB interpretation policies for D/M/YYYY-shaped dates
DOB_MODE_AUTO = 'auto'
DOB_MODE_DMY = 'dmy'
DOB_MODE_MDY = 'mdy'
DOB_MODES = (DOB_MODE_AUTO, DOB_MODE_DMY, DOB_MODE_MDY)

# Reasons attached to roster players that are missing from the signup list
REASON_DOB_MISSING = 'DOB_MISSING'
REASON_NAME_MISMATCH = 'NAME_MISMATCH_SAME_DOB'
REASON_DOB_NOT_FOUND = 'DOB_NOT_FOUND'


class SignupReconError(Exception):
    """Base class for errors surfaced to the operator."""


class FetchError(SignupReconError):
    """The remote signup file could not be retrieved."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class EmptyInputError(SignupReconError):
    """The signup file has no header row or no data rows."""


class ColumnMappingError(SignupReconError, ValueError):
    """A column mapping refers to a column the signup file does not have."""


@dataclass(frozen=True)
class RosterRecord:
    """A player registered on an event roster."""

    roster_id: str
    team_name: str
    player_name: str
    birthday: Optional[str] = None


@dataclass
class ParsedTable:
    """Header row and data rows of a delimited text file."""

    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class ColumnMapping:
    """Which signup columns hold first name, surname and date of birth."""

    name_column: str
    surname_column: str
    dob_column: str


@dataclass(frozen=True)
class ExternalRecord:
    """A signup row reduced to name, ISO birthday and identity key."""

    raw_name: str
    birthday: str   # ISO date or ''
    key: str


@dataclass(frozen=True)
class MatchResult:
    """Outcome of looking up one roster player in the signup list."""

    roster_record: RosterRecord
    is_match: bool
    reason: Optional[str] = None    # DOB_MISSING, NAME_MISMATCH_SAME_DOB, DOB_NOT_FOUND
    suggestions: tuple[str, ...] = ()

    @property
    def roster_id(self) -> str:
        return self.roster_record.roster_id


@dataclass
class SignupList:
    """The external side of a reconciliation run, ready for matching."""

    table: ParsedTable
    mapping: ColumnMapping
    dob_mode: str
    inferred_dob_mode: str
    records: list[ExternalRecord] = field(default_factory=list)

    @property
    def resolved_dob_mode(self) -> str:
        if self.dob_mode == DOB_MODE_AUTO:
            return self.inferred_dob_mode
        return self.dob_mode
