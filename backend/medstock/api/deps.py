"""FastAPI dependencies: the main and branch stores held on the application."""
from fastapi import Request

from medstock.models.store import MedicineStore


def get_main_store(request: Request) -> MedicineStore:
    """Main pharmacy store."""
    return request.app.state.main_store


def get_branch_store(request: Request) -> MedicineStore:
    """Secondary branch store, only ever used as a merge source."""
    return request.app.state.branch_store
