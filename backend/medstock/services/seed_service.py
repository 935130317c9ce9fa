"""Seed the main and branch stores with reference medicines for quick testing."""
import logging

from medstock.core.exceptions import CapacityExceededError
from medstock.models.medicine import Medicine, MedicineFlag
from medstock.models.store import MedicineStore

logger = logging.getLogger(__name__)

AVL = MedicineFlag.AVAILABLE
RX = MedicineFlag.PRESCRIPTION_REQUIRED

# Flags are explicit here: Amoxicillin is out of stock and unavailable,
# Ibuprofen needs a prescription.
SAMPLE_MEDICINES = [
    {"id": 101, "name": "Paracetamol", "company": "HealCo", "quantity": 120,
     "expiry_month": 11, "expiry_year": 2025, "price": 5, "flags": AVL},
    {"id": 102, "name": "Ibuprofen", "company": "CureLabs", "quantity": 60,
     "expiry_month": 4, "expiry_year": 2024, "price": 8, "flags": AVL | RX},
    {"id": 103, "name": "Cetirizine", "company": "Allergix", "quantity": 10,
     "expiry_month": 2, "expiry_year": 2024, "price": 3, "flags": AVL},
    {"id": 104, "name": "Amoxicillin", "company": "BioPharm", "quantity": 0,
     "expiry_month": 8, "expiry_year": 2023, "price": 12, "flags": MedicineFlag.NONE},
    {"id": 105, "name": "VitaminC", "company": "NutriPlus", "quantity": 200,
     "expiry_month": 6, "expiry_year": 2026, "price": 2, "flags": AVL},
]

BRANCH_SAMPLE_MEDICINES = [
    {"id": 201, "name": "Dolo650", "company": "MediCorp", "quantity": 50,
     "expiry_month": 12, "expiry_year": 2025, "price": 6, "flags": AVL},
    {"id": 202, "name": "Paracetamol", "company": "HealCo", "quantity": 30,
     "expiry_month": 10, "expiry_year": 2024, "price": 5, "flags": AVL},
    {"id": 203, "name": "Zincovit", "company": "NutraLife", "quantity": 90,
     "expiry_month": 6, "expiry_year": 2026, "price": 15, "flags": AVL},
]


def populate_sample_data(store: MedicineStore) -> int:
    """Add the five sample medicines to an empty store. Returns how many were added.

    Raises CapacityExceededError, with the store untouched, when the sample
    set does not fit.
    """
    with store.lock:
        if len(store) > 0:
            logger.info("Sample data already present; not adding")
            return 0
        if store.free_slots < len(SAMPLE_MEDICINES):
            raise CapacityExceededError(store.capacity, store.label)
        for data in SAMPLE_MEDICINES:
            store.insert(Medicine(**data))
    logger.info(f"Added {len(SAMPLE_MEDICINES)} sample medicines to {store.label}")
    return len(SAMPLE_MEDICINES)


def branch_add_sample(branch: MedicineStore) -> int:
    """Replace the branch contents with the three branch sample medicines.

    The existing contents are kept when the sample set exceeds the branch capacity.
    """
    with branch.lock:
        if branch.capacity < len(BRANCH_SAMPLE_MEDICINES):
            raise CapacityExceededError(branch.capacity, branch.label)
        branch.clear()
        for data in BRANCH_SAMPLE_MEDICINES:
            branch.insert(Medicine(**data))
    logger.info(f"Branch sample data added ({len(BRANCH_SAMPLE_MEDICINES)} items)")
    return len(BRANCH_SAMPLE_MEDICINES)
