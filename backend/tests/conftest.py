"""
Pytest configuration and fixtures for store, service, shell and API tests
"""
import pytest
from fastapi.testclient import TestClient

from medstock.main import create_app
from medstock.models.medicine import Medicine
from medstock.models.store import MedicineStore


def make_medicine(id, name, quantity=10, month=6, year=2025, price=5, company="Acme", prescription=False):
    """Helper building a medicine through the add path (availability follows stock)."""
    return Medicine.new(
        id=id,
        name=name,
        company=company,
        quantity=quantity,
        expiry_month=month,
        expiry_year=year,
        price=price,
        prescription_required=prescription,
    )


@pytest.fixture
def main_store():
    return MedicineStore(200, label="main")


@pytest.fixture
def branch_store():
    return MedicineStore(50, label="branch")


@pytest.fixture
def scenario_store(main_store):
    """Two-record store: 101 A in stock, 102 B out of stock and expiring earlier."""
    main_store.insert(make_medicine(101, "A", quantity=120, month=11, year=2025))
    main_store.insert(make_medicine(102, "B", quantity=0, month=4, year=2024))
    return main_store


@pytest.fixture
def client():
    """Test client over a fresh application with empty stores."""
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def small_client():
    """Test client whose main store holds at most three medicines."""
    app = create_app(main_capacity=3, branch_capacity=5)
    with TestClient(app) as test_client:
        yield test_client
