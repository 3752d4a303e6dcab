"""
API integration tests using in-memory SQLite.

Tests the calculator, corpus, purchasing power, indexation and reference
endpoints, and CRUD for saved calculations and preferences.

Run: python -m pytest wealth_mngr/tests/test_api_integration.py -v
"""

import pytest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wealth_mngr.db.models import Base
from wealth_mngr.db.connection import get_db_session
from wealth_mngr.api.main import app


# ---------------------------------------------------------------------------
# Test database setup
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db_session():
    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


app.dependency_overrides[get_db_session] = override_get_db_session

client = TestClient(app)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def saved_calculation():
    response = client.post("/api/saved-calculations", json={
        "name": "Retirement plan",
        "data": {"selectedInstruments": ["ppf"], "currentStep": 2},
    })
    assert response.status_code == 201
    return response.json()["id"]


# ---------------------------------------------------------------------------
# Health and reference data
# ---------------------------------------------------------------------------


class TestHealth:

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_db(self):
        response = client.get("/health/db")
        assert response.status_code == 200
        assert response.json()["database"] == "sqlite"

    def test_root(self):
        assert client.get("/").json()["docs"] == "/api/docs"


class TestReference:

    def test_rates(self):
        rates = client.get("/api/reference/rates").json()
        assert "ppf" in rates

    def test_cii(self):
        data = client.get("/api/reference/cii").json()
        assert "currentFinancialYear" in data

    def test_cities(self):
        cities = client.get("/api/reference/cities").json()
        assert len(cities) == 10

    def test_inflation_rates(self):
        rates = client.get("/api/reference/inflation-rates").json()
        assert rates["education"] == 10

    def test_instruments(self):
        instruments = {item["id"]: item for item in client.get("/api/reference/instruments").json()}
        assert instruments["ppf"]["corpusSupported"] is True
        assert instruments["reits"]["corpusSupported"] is False


# ---------------------------------------------------------------------------
# Calculators
# ---------------------------------------------------------------------------


class TestCalculators:

    def test_ppf(self):
        response = client.post("/api/calculators/ppf", json={"yearlyInvestment": 150000, "tenure": 15, "ratePct": 7.1})
        assert response.status_code == 200
        data = response.json()
        assert round(data["maturityValue"]) == 4068209
        assert len(data["evolution"]) == 15
        assert data["realMaturityValue"] is None

    def test_ppf_below_minimum(self):
        response = client.post("/api/calculators/ppf", json={"yearlyInvestment": 100})
        assert response.status_code == 422

    def test_fd_needs_tenure(self):
        response = client.post("/api/calculators/fd", json={"principal": 100000})
        assert response.status_code == 422

    def test_fd(self):
        response = client.post("/api/calculators/fd", json={"principal": 100000, "tenureYears": 1, "ratePct": 6.5})
        assert response.status_code == 200
        assert round(response.json()["maturityValue"]) == 106660

    def test_scss_age(self):
        payload = {"principal": 100000, "seniorsAge": 58}
        assert client.post("/api/calculators/scss", json=payload).status_code == 422
        payload["isDefencePersonnel"] = True
        assert client.post("/api/calculators/scss", json=payload).status_code == 200

    def test_nps(self):
        response = client.post("/api/calculators/nps", json={
            "monthlyContribution": 5000, "tenure": 25, "currentAge": 30,
            "allocation": {"equity": 50, "corporateBonds": 30, "governmentBonds": 20, "alternative": 0},
        })
        assert response.status_code == 200
        assert response.json()["weightedReturn"] == pytest.approx(10.3)

    def test_nps_allocation_total(self):
        response = client.post("/api/calculators/nps", json={
            "monthlyContribution": 5000, "tenure": 25, "currentAge": 30,
            "allocation": {"equity": 60, "corporateBonds": 30, "governmentBonds": 20, "alternative": 0},
        })
        assert response.status_code == 422

    def test_market_linked(self):
        response = client.post("/api/calculators/equity", json={"investmentType": "lumpsum", "amount": 100000,
                                                                "tenure": 5, "expectedReturnPct": 12})
        assert response.status_code == 200
        assert response.json()["investmentType"] == "lumpsum"

    def test_elss_lock_in(self):
        response = client.post("/api/calculators/elss", json={"amount": 5000, "tenure": 2})
        assert response.status_code == 422

    def test_unknown_instrument(self):
        response = client.post("/api/calculators/crypto", json={"amount": 5000, "tenure": 5})
        assert response.status_code == 422

    def test_uses_stored_preferences(self):
        client.put("/api/preferences", json={"adjustInflation": True, "defaultInflationRate": 6})
        data = client.post("/api/calculators/sip", json={"monthlySip": 5000, "tenure": 10}).json()
        assert data["realMaturityValue"] == pytest.approx(data["maturityValue"] / 1.06 ** 10, abs=0.01)


# ---------------------------------------------------------------------------
# Corpus, purchasing power and indexation
# ---------------------------------------------------------------------------


class TestCorpus:

    def test_corpus(self):
        response = client.post("/api/corpus", json={
            "selectedInstruments": ["ppf", "sip"],
            "investments": {
                "ppf": {"yearlyInvestment": 150000, "rate": 7.1, "tenure": 15},
                "sip": {"monthlySIP": 5000, "expectedReturn": 12, "tenure": 10},
            },
            "settings": {"timeHorizon": 15},
        })
        assert response.status_code == 200
        data = response.json()
        assert set(data["byInstrument"]) == {"ppf", "sip"}
        assert data["nominalCorpus"] > data["totalInvested"]
        assert data["realCorpus"] < data["nominalCorpus"]
        assert "tax" in data

    def test_unsupported_instrument(self):
        response = client.post("/api/corpus", json={"selectedInstruments": ["reits"]})
        assert response.status_code == 422

    def test_purchasing_power(self):
        response = client.post("/api/purchasing-power", json={
            "corpus": 1000000, "years": 10, "cityKey": "mumbai", "categories": ["education"],
        })
        assert response.status_code == 200
        data = response.json()
        assert list(data["results"]) == ["education"]
        assert data["summary"]["totalExamples"] == len(data["results"]["education"]["examples"])

    def test_purchasing_power_unknown_city(self):
        response = client.post("/api/purchasing-power", json={"corpus": 1000000, "years": 10, "cityKey": "atlantis"})
        assert response.json()["results"] == {}


class TestIndexation:

    def test_indexed_cost(self):
        response = client.post("/api/indexation/cost", json={"originalCost": 100000, "purchaseYear": 2015,
                                                             "saleYear": 2020})
        assert response.status_code == 200
        assert response.json()["indexedCost"] == 118503.94

    def test_indexed_tax(self):
        response = client.post("/api/indexation/tax", json={"principal": 100000, "maturityAmount": 150000,
                                                            "purchaseYear": 2015, "saleYear": 2020})
        assert response.json()["taxAmount"] == pytest.approx(6299.21, abs=0.01)

    def test_sale_before_purchase(self):
        response = client.post("/api/indexation/cost", json={"originalCost": 100000, "purchaseYear": 2020,
                                                             "saleYear": 2015})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Saved calculations
# ---------------------------------------------------------------------------


class TestSavedCalculations:

    def test_create_and_get(self, saved_calculation):
        response = client.get(f"/api/saved-calculations/{saved_calculation}")
        assert response.status_code == 200
        assert response.json()["name"] == "Retirement plan"

    def test_list_newest_first(self, saved_calculation):
        newer = client.post("/api/saved-calculations", json={"data": {}}).json()["id"]
        ids = [item["id"] for item in client.get("/api/saved-calculations").json()]
        assert ids == [newer, saved_calculation]

    def test_state(self, saved_calculation):
        data = client.get(f"/api/saved-calculations/{saved_calculation}/state").json()
        assert data == {"selectedInstruments": ["ppf"], "currentStep": 2}

    def test_save_current_state(self):
        response = client.post("/api/saved-calculations/current-state", json={"selectedInstruments": ["fd"]})
        assert response.status_code == 201
        state = client.get(f"/api/saved-calculations/{response.json()['id']}/state").json()
        assert state["selectedInstruments"] == ["fd"]
        assert state["currentStep"] == 1

    def test_update(self, saved_calculation):
        response = client.put(f"/api/saved-calculations/{saved_calculation}", json={"name": "Renamed"})
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["data"]["currentStep"] == 2

    def test_delete(self, saved_calculation):
        assert client.delete(f"/api/saved-calculations/{saved_calculation}").status_code == 204
        assert client.get(f"/api/saved-calculations/{saved_calculation}").status_code == 404
        assert client.delete(f"/api/saved-calculations/{saved_calculation}").status_code == 404

    def test_missing(self):
        assert client.get("/api/saved-calculations/calc-0-missing").status_code == 404
        assert client.put("/api/saved-calculations/calc-0-missing", json={"name": "x"}).status_code == 404

    def test_info_and_clear(self, saved_calculation):
        info = client.get("/api/saved-calculations/info").json()
        assert info["count"] == 1
        assert info["maxCount"] == 20
        assert "dataSizeKB" in info
        assert client.delete("/api/saved-calculations").status_code == 204
        assert client.get("/api/saved-calculations").json() == []


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------


class TestPreferences:

    def test_defaults(self):
        data = client.get("/api/preferences").json()
        assert data["defaultInflationRate"] == 6
        assert data["adjustInflation"] is False

    def test_update(self):
        response = client.put("/api/preferences", json={"incomeTaxSlab": 0.2})
        assert response.status_code == 200
        assert client.get("/api/preferences").json()["incomeTaxSlab"] == 0.2

    def test_invalid_slab(self):
        assert client.put("/api/preferences", json={"incomeTaxSlab": 0.9}).status_code == 422

    def test_corpus_state(self):
        assert client.get("/api/preferences/corpus-state").status_code == 404
        response = client.put("/api/preferences/corpus-state", json={"selectedInstruments": ["ppf"], "currentStep": 2})
        assert response.status_code == 200
        assert client.get("/api/preferences/corpus-state").json()["currentStep"] == 2
        assert client.delete("/api/preferences/corpus-state").status_code == 204
        assert client.get("/api/preferences/corpus-state").status_code == 404


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
