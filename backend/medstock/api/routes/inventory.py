"""Main-store inventory: CRUD, reminders, search and sorting."""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from typing import List

from medstock.api.deps import get_main_store
from medstock.core.config import settings
from medstock.core.exceptions import BusinessError, InventoryError
from medstock.display import render_table
from medstock.models.store import MedicineStore, UpdateField
from medstock.schemas.medicine import MedicineCreate, MedicineRecord, MedicineUpdate
from medstock.services import inventory_service
from medstock.services.seed_service import populate_sample_data

router = APIRouter()


def _records(medicines) -> List[MedicineRecord]:
    return [MedicineRecord.from_medicine(m) for m in medicines]


@router.get("", response_model=List[MedicineRecord])
def list_inventory(store: MedicineStore = Depends(get_main_store)):
    """All medicines in current store order."""
    return _records(store)


@router.post("", response_model=MedicineRecord, status_code=201)
def create_medicine(item: MedicineCreate, store: MedicineStore = Depends(get_main_store)):
    """Add a medicine. Availability follows the initial quantity."""
    medicine = item.to_medicine()
    try:
        store.insert(medicine)
    except InventoryError as e:
        raise BusinessError.from_inventory_error(e)
    return MedicineRecord.from_medicine(medicine)


# ==============================================================================
# SEARCH & REMINDERS
# ==============================================================================

@router.get("/search", response_model=MedicineRecord)
def search_by_name(name: str = Query(..., min_length=1), store: MedicineStore = Depends(get_main_store)):
    """Exact, case-sensitive name lookup."""
    medicine = inventory_service.search_exact_name(store, name)
    if medicine is None:
        raise BusinessError.not_found(f"Medicine '{name}' not found")
    return MedicineRecord.from_medicine(medicine)


@router.get("/expiry", response_model=List[MedicineRecord])
def search_by_expiry(
    month: int = Query(0, ge=0, le=12, description="Expiry month, 0 for any"),
    year: int = Query(0, ge=0, le=settings.MAX_EXPIRY_YEAR, description="Expiry year, 0 for any"),
    store: MedicineStore = Depends(get_main_store),
):
    return _records(inventory_service.search_by_expiry(store, month, year))


@router.get("/low-stock", response_model=List[MedicineRecord])
def low_stock(
    threshold: int = Query(settings.DEFAULT_LOW_STOCK_THRESHOLD, ge=0, description="Quantity at or below which stock is low"),
    store: MedicineStore = Depends(get_main_store),
):
    return _records(inventory_service.low_stock(store, threshold))


@router.get("/expiring", response_model=List[MedicineRecord])
def expiring_on_or_before(
    year: int = Query(..., ge=settings.MIN_EXPIRY_YEAR, le=settings.MAX_EXPIRY_YEAR),
    store: MedicineStore = Depends(get_main_store),
):
    """Medicines expiring in ``year`` or earlier (month ignored)."""
    return _records(inventory_service.expiring_on_or_before(store, year))


@router.get("/table", response_class=PlainTextResponse)
def inventory_table(store: MedicineStore = Depends(get_main_store)):
    return render_table(store)


# ==============================================================================
# ORDERING & SEEDING
# ==============================================================================

@router.post("/sort/expiry", response_model=List[MedicineRecord])
def sort_by_expiry(store: MedicineStore = Depends(get_main_store)):
    store.sort_by_expiry_soonest()
    return _records(store)


@router.post("/sort/name", response_model=List[MedicineRecord])
def sort_by_name(store: MedicineStore = Depends(get_main_store)):
    store.sort_by_name_ascending()
    return _records(store)


@router.post("/sample", response_model=dict)
def add_sample_data(store: MedicineStore = Depends(get_main_store)):
    try:
        added = populate_sample_data(store)
    except InventoryError as e:
        raise BusinessError.from_inventory_error(e)
    if not added:
        return {"added": 0, "message": "Sample data already present; not adding"}
    return {"added": added, "message": f"Added {added} sample medicines"}


# ==============================================================================
# SINGLE MEDICINE
# ==============================================================================

@router.get("/{medicine_id}", response_model=MedicineRecord)
def get_medicine(medicine_id: int, store: MedicineStore = Depends(get_main_store)):
    medicine = store.get(medicine_id)
    if medicine is None:
        raise BusinessError.not_found(f"Medicine with id {medicine_id} not found")
    return MedicineRecord.from_medicine(medicine)


@router.patch("/{medicine_id}", response_model=MedicineRecord)
def update_medicine(
    medicine_id: int,
    updates: MedicineUpdate,
    store: MedicineStore = Depends(get_main_store),
):
    """Apply the given field changes. A quantity change re-derives availability."""
    with store.lock:
        medicine = store.get(medicine_id)
        if medicine is None:
            raise BusinessError.not_found(f"Medicine with id {medicine_id} not found")
        try:
            if updates.name is not None:
                store.update(medicine_id, UpdateField.NAME, updates.name)
            if updates.company is not None:
                store.update(medicine_id, UpdateField.COMPANY, updates.company)
            if updates.quantity is not None:
                store.update(medicine_id, UpdateField.QUANTITY, updates.quantity)
            if updates.expiry_month is not None or updates.expiry_year is not None:
                month = updates.expiry_month if updates.expiry_month is not None else medicine.expiry_month
                year = updates.expiry_year if updates.expiry_year is not None else medicine.expiry_year
                store.update(medicine_id, UpdateField.EXPIRY, (month, year))
            if updates.price is not None:
                store.update(medicine_id, UpdateField.PRICE, updates.price)
            if updates.toggle_prescription:
                store.update(medicine_id, UpdateField.TOGGLE_PRESCRIPTION)
        except InventoryError as e:
            raise BusinessError.from_inventory_error(e)
        return MedicineRecord.from_medicine(medicine)


@router.delete("/{medicine_id}", response_model=dict)
def delete_medicine(medicine_id: int, store: MedicineStore = Depends(get_main_store)):
    try:
        removed = store.delete(medicine_id)
    except InventoryError as e:
        raise BusinessError.from_inventory_error(e)
    return {"message": f"Deleted {removed.name}", "id": medicine_id}


@router.post("/{medicine_id}/toggle-availability", response_model=MedicineRecord)
def toggle_availability(medicine_id: int, store: MedicineStore = Depends(get_main_store)):
    """Flip availability regardless of quantity."""
    with store.lock:
        try:
            store.toggle_availability(medicine_id)
        except InventoryError as e:
            raise BusinessError.from_inventory_error(e)
        return MedicineRecord.from_medicine(store.get(medicine_id))


@router.post("/{medicine_id}/toggle-prescription", response_model=MedicineRecord)
def toggle_prescription(medicine_id: int, store: MedicineStore = Depends(get_main_store)):
    try:
        medicine = store.update(medicine_id, UpdateField.TOGGLE_PRESCRIPTION)
    except InventoryError as e:
        raise BusinessError.from_inventory_error(e)
    return MedicineRecord.from_medicine(medicine)
