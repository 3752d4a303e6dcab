"""
Storage tests against an in-memory SQLite database.

Run: python -m pytest wealth_mngr/tests/test_storage.py -v
"""

import re
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wealth_mngr.core.preferences import CorpusSettings, CorpusState, UserPreferences
from wealth_mngr.db import storage
from wealth_mngr.db.models import Base
from wealth_mngr.db.repositories import generate_calculation_id


@pytest.fixture
def session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


def test_generate_calculation_id():
    calculation_id = generate_calculation_id(1700000000000)
    assert re.fullmatch(r"calc-1700000000000-[0-9a-z]{9}", calculation_id)


def test_default_name():
    assert storage.default_calculation_name(date(2025, 1, 9)) == "Corpus Calculation 09/01/2025"


class TestSavedCalculations:

    def test_save_and_get(self, session):
        calculation_id = storage.save_calculation({"selectedInstruments": ["ppf"]}, "Retirement", session)
        saved = storage.get_calculation(calculation_id, session)
        assert saved["name"] == "Retirement"
        assert saved["data"] == {"selectedInstruments": ["ppf"]}
        assert storage.load_calculation_for_store(calculation_id, session) == {"selectedInstruments": ["ppf"]}

    def test_default_name_used(self, session):
        calculation_id = storage.save_calculation({}, session=session)
        assert storage.get_calculation(calculation_id, session)["name"].startswith("Corpus Calculation ")

    def test_rejects_non_mapping(self, session):
        assert storage.save_calculation(["not", "a", "mapping"], session=session) is None
        assert storage.get_all_saved_calculations(session) == []

    def test_newest_first(self, session):
        first = storage.save_calculation({"n": 1}, "first", session)
        second = storage.save_calculation({"n": 2}, "second", session)
        saved = storage.get_all_saved_calculations(session)
        assert [calculation["id"] for calculation in saved] == [second, first]
        assert saved[0]["timestamp"] > saved[1]["timestamp"]

    def test_oldest_evicted_beyond_cap(self, session, monkeypatch):
        monkeypatch.setenv("WEALTH_MNGR_MAX_SAVED_CALCULATIONS", "3")
        ids = [storage.save_calculation({"n": n}, f"calc {n}", session) for n in range(5)]
        saved = storage.get_all_saved_calculations(session)
        assert [calculation["id"] for calculation in saved] == ids[:1:-1]
        assert storage.get_calculation(ids[0], session) is None

    def test_update_refreshes_timestamp(self, session):
        first = storage.save_calculation({"n": 1}, "first", session)
        storage.save_calculation({"n": 2}, "second", session)
        assert storage.update_calculation(first, {"name": "renamed", "id": "ignored"}, session) is True
        saved = storage.get_all_saved_calculations(session)
        assert saved[0]["id"] == first
        assert saved[0]["name"] == "renamed"
        assert saved[0]["data"] == {"n": 1}

    def test_update_missing(self, session):
        assert storage.update_calculation("calc-0-missing", {"name": "x"}, session) is False

    def test_delete(self, session):
        calculation_id = storage.save_calculation({}, "gone", session)
        assert storage.delete_calculation(calculation_id, session) is True
        assert storage.delete_calculation(calculation_id, session) is False

    def test_clear_all(self, session):
        storage.save_calculation({}, "a", session)
        storage.save_calculation({}, "b", session)
        assert storage.clear_all_calculations(session) is True
        assert storage.get_all_saved_calculations(session) == []

    def test_save_current_state_fills_missing_keys(self, session):
        calculation_id = storage.save_current_state({"selectedInstruments": ["sip"]}, session=session)
        data = storage.load_calculation_for_store(calculation_id, session)
        assert data == {
            "selectedInstruments": ["sip"],
            "investments": {},
            "settings": {},
            "results": None,
            "purchasingPower": None,
            "currentStep": 1,
        }

    def test_save_current_state_from_corpus_state(self, session):
        state = CorpusState(selected_instruments=["ppf"], current_step=2)
        calculation_id = storage.save_current_state(state, "wip", session)
        data = storage.load_calculation_for_store(calculation_id, session)
        assert data["currentStep"] == 2
        assert data["settings"]["selectedCity"] == "mumbai"


def test_storage_info(session):
    storage.save_calculation({"n": 1}, "one", session)
    info = storage.get_storage_info(session)
    assert info["count"] == 1
    assert info["maxCount"] == 20
    assert info["dataSize"] > 0
    assert info["dataSizeKB"] == f"{info['dataSize'] / 1024:.2f}"


def test_storage_available(session):
    assert storage.is_storage_available(session) is True


class TestPreferences:

    def test_defaults_when_nothing_stored(self, session):
        assert storage.load_preferences(session) == UserPreferences()

    def test_round_trip(self, session):
        preferences = UserPreferences(default_inflation_rate=5, adjust_inflation=True)
        assert storage.save_preferences(preferences, session) is True
        assert storage.load_preferences(session) == preferences

    def test_overwrite(self, session):
        storage.save_preferences(UserPreferences(income_tax_slab=0.2), session)
        storage.save_preferences(UserPreferences(income_tax_slab=0.1), session)
        assert storage.load_preferences(session).income_tax_slab == 0.1


class TestCorpusState:

    def test_none_when_nothing_stored(self, session):
        assert storage.load_corpus_state(session) is None

    def test_round_trip_and_clear(self, session):
        state = CorpusState(selected_instruments=["ppf", "fd"], settings=CorpusSettings(time_horizon=20))
        assert storage.save_corpus_state(state, session) is True
        assert storage.load_corpus_state(session) == state
        assert storage.clear_corpus_state(session) is True
        assert storage.load_corpus_state(session) is None
