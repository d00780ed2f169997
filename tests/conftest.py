"""Shared test fixtures."""

from pathlib import Path

import pytest

from signup_recon import RosterRecord
from signup_recon.matching import prepare_signups
from signup_recon.reader import read_roster, read_text


DATA_DIR = Path(__file__).resolve().parent.parent / 'data'


@pytest.fixture(scope='session')
def data_dir() -> Path:
    """Path to the data directory."""
    return DATA_DIR


@pytest.fixture(scope='session')
def roster_records():
    """All players from roster.csv."""
    return read_roster(DATA_DIR / 'roster.csv')


@pytest.fixture(scope='session')
def signup_list():
    """signups.csv prepared with auto-detected columns and DOB mode."""
    return prepare_signups(read_text(DATA_DIR / 'signups.csv'))


@pytest.fixture
def make_roster():
    """Factory for RosterRecords with defaults."""
    def _make(**kwargs) -> RosterRecord:
        defaults = dict(
            roster_id='r1', team_name='Falcons', player_name='Jane Doe',
            birthday='2000-01-01',
        )
        defaults.update(kwargs)
        return RosterRecord(**defaults)
    return _make
