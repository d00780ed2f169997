"""Tests for signup_recon.columns module."""

import pytest

from signup_recon import ColumnMapping, ColumnMappingError
from signup_recon.columns import (
    DOB_COLUMN_CANDIDATES,
    SURNAME_COLUMN_CANDIDATES,
    auto_detect_mapping,
    detect_column,
    normalize_header_name,
    resolve_mapping,
    validate_mapping,
)


class TestNormalizeHeaderName:
    """Tests for loose header comparison."""

    def test_punctuation_collapsed(self):
        assert normalize_header_name('Date_of-Birth') == 'date of birth'

    def test_trimmed(self):
        assert normalize_header_name('  DOB:  ') == 'dob'

    def test_empty(self):
        assert normalize_header_name('') == ''


class TestDetectColumn:
    """Tests for candidate label detection."""

    def test_case_and_punctuation_insensitive(self):
        headers = ['First', 'LAST_NAME', 'Date of birth']
        assert detect_column(headers, SURNAME_COLUMN_CANDIDATES) == 'LAST_NAME'
        assert detect_column(headers, DOB_COLUMN_CANDIDATES) == 'Date of birth'

    def test_first_matching_header_wins(self):
        assert detect_column(['dob', 'DOB_2', 'D.O.B'], ['dob']) == 'dob'

    def test_no_match_returns_empty(self):
        assert detect_column(['a', 'b'], ['dob']) == ''


class TestAutoDetectMapping:
    """Tests for positional fallbacks."""

    def test_all_detected(self):
        mapping = auto_detect_mapping(['Name', 'Surname', 'DOB'])
        assert mapping == ColumnMapping('Name', 'Surname', 'DOB')

    def test_fallbacks(self):
        mapping = auto_detect_mapping(['first', 'second', 'third'])
        assert mapping.name_column == 'first'
        assert mapping.surname_column == 'second'
        assert mapping.dob_column == 'first'

    def test_single_header(self):
        mapping = auto_detect_mapping(['only'])
        assert mapping == ColumnMapping('only', 'only', 'only')


class TestResolveMapping:
    """Tests for operator overrides."""

    def test_override_exact(self):
        headers = ['Vorname', 'Nachname', 'Geburtstag']
        mapping = resolve_mapping(
            headers, name='Vorname', surname='Nachname', dob='Geburtstag',
        )
        assert mapping == ColumnMapping('Vorname', 'Nachname', 'Geburtstag')

    def test_override_loose_label(self):
        mapping = resolve_mapping(['Name', 'Surname', 'date_of_birth'], dob='Date of Birth')
        assert mapping.dob_column == 'date_of_birth'

    def test_unknown_override_raises(self):
        with pytest.raises(ColumnMappingError, match='date of birth'):
            resolve_mapping(['Name', 'Surname', 'DOB'], dob='Birthday')

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_mapping(['Name'], surname='Missing')


class TestValidateMapping:
    """Tests for mapping shape checks."""

    def test_valid_mapping(self):
        validate_mapping(['a', 'b'], ColumnMapping('a', 'b', 'a'))

    def test_empty_column_rejected(self):
        with pytest.raises(ColumnMappingError):
            validate_mapping(['a', 'b'], ColumnMapping('a', '', 'b'))

    def test_wrong_type_rejected(self):
        with pytest.raises(ColumnMappingError, match='must be a ColumnMapping'):
            validate_mapping(['a'], {'name_column': 'a'})
