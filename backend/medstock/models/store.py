"""
Capacity-bounded, ordered medicine store.

One instance per pharmacy location (main and branch). Records keep insertion
order until a sort is requested; ids are unique within a store.

THREAD SAFETY: every public method runs under the store's own re-entrant
lock, so the HTTP wrapper may call into it from concurrent requests.
"""
import logging
import threading
from enum import Enum
from typing import Iterator, List, Optional

from pydantic import ValidationError

from medstock.core.audit import AuditLog
from medstock.core.exceptions import (
    CapacityExceededError,
    DuplicateIdError,
    InvalidFieldError,
    NotFoundError,
)
from medstock.models.medicine import Medicine, MedicineFlag

logger = logging.getLogger(__name__)


class UpdateField(str, Enum):
    """Field-level mutations accepted by ``MedicineStore.update``."""
    NAME = "name"
    COMPANY = "company"
    QUANTITY = "quantity"
    EXPIRY = "expiry"
    PRICE = "price"
    TOGGLE_PRESCRIPTION = "toggle_prescription"


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    return errors[0]["msg"] if errors else str(exc)


class MedicineStore:
    """Ordered collection of medicines with a fixed maximum size."""

    def __init__(self, capacity: int, label: str = "main"):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.label = label
        self._records: List[Medicine] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Medicine]:
        # Iterate over a snapshot so callers never see a half-compacted list
        with self._lock:
            snapshot = list(self._records)
        return iter(snapshot)

    def __repr__(self) -> str:
        return f"MedicineStore(label={self.label!r}, size={len(self)}, capacity={self.capacity})"

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def is_full(self) -> bool:
        return len(self._records) >= self.capacity

    @property
    def free_slots(self) -> int:
        return self.capacity - len(self._records)

    def records(self) -> List[Medicine]:
        with self._lock:
            return list(self._records)

    def at(self, index: int) -> Medicine:
        with self._lock:
            return self._records[index]

    def find_by_id(self, medicine_id: int) -> Optional[int]:
        """Index of the first record with this id, or None."""
        with self._lock:
            for index, medicine in enumerate(self._records):
                if medicine.id == medicine_id:
                    return index
        return None

    def find_by_name(self, name: str) -> Optional[int]:
        """Index of the first record whose name matches exactly (case-sensitive)."""
        with self._lock:
            for index, medicine in enumerate(self._records):
                if medicine.name == name:
                    return index
        return None

    def get(self, medicine_id: int) -> Optional[Medicine]:
        with self._lock:
            index = self.find_by_id(medicine_id)
            return self._records[index] if index is not None else None

    def _require(self, medicine_id: int) -> Medicine:
        medicine = self.get(medicine_id)
        if medicine is None:
            raise NotFoundError(medicine_id)
        return medicine

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, medicine: Medicine) -> None:
        """Append a record. Raises DuplicateIdError or CapacityExceededError."""
        with self._lock:
            if self.find_by_id(medicine.id) is not None:
                raise DuplicateIdError(medicine.id)
            if self.is_full:
                raise CapacityExceededError(self.capacity, self.label)
            self._records.append(medicine)
            logger.debug(f"[{self.label}] inserted id={medicine.id} size={len(self._records)}")
        AuditLog.log_action("insert", self.label, medicine.id, changes={"name": medicine.name})

    def update(self, medicine_id: int, field: UpdateField, value=None) -> Medicine:
        """
        Apply one field mutation to the record with this id.

        ``EXPIRY`` takes ``(month, year)``; ``TOGGLE_PRESCRIPTION`` takes no
        value. A ``QUANTITY`` update re-derives AVAILABLE from the new
        quantity. Invalid values raise InvalidFieldError with the record
        left untouched.
        """
        field = UpdateField(field)
        with self._lock:
            medicine = self._require(medicine_id)
            try:
                changes = self._apply(medicine, field, value)
            except ValidationError as e:
                raise InvalidFieldError(field.value, _first_error(e)) from e
        AuditLog.log_action("update", self.label, medicine_id, changes=changes)
        return medicine

    def _apply(self, medicine: Medicine, field: UpdateField, value) -> dict:
        if field is UpdateField.NAME:
            medicine.name = value
            return {"name": value}
        if field is UpdateField.COMPANY:
            medicine.company = value
            return {"company": value}
        if field is UpdateField.QUANTITY:
            # Validate both fields together so a bad quantity leaves flags alone
            candidate = Medicine.model_validate({**medicine.model_dump(), "quantity": value})
            medicine.quantity = candidate.quantity
            medicine.set_flag(MedicineFlag.AVAILABLE, candidate.quantity > 0)
            return {"quantity": candidate.quantity, "available": medicine.available}
        if field is UpdateField.EXPIRY:
            try:
                month, year = value
            except (TypeError, ValueError):
                raise InvalidFieldError("expiry", "expected (month, year)")
            candidate = Medicine.model_validate(
                {**medicine.model_dump(), "expiry_month": month, "expiry_year": year}
            )
            medicine.expiry_month = candidate.expiry_month
            medicine.expiry_year = candidate.expiry_year
            return {"expiry_month": month, "expiry_year": year}
        if field is UpdateField.PRICE:
            medicine.price = value
            return {"price": value}
        # TOGGLE_PRESCRIPTION
        now_required = medicine.toggle_flag(MedicineFlag.PRESCRIPTION_REQUIRED)
        return {"prescription_required": now_required}

    def delete(self, medicine_id: int) -> Medicine:
        """Remove a record, keeping the remaining ones in their relative order."""
        with self._lock:
            index = self.find_by_id(medicine_id)
            if index is None:
                raise NotFoundError(medicine_id)
            removed = self._records.pop(index)
        AuditLog.log_action("delete", self.label, medicine_id, changes={"name": removed.name})
        return removed

    def toggle_availability(self, medicine_id: int) -> bool:
        """Flip AVAILABLE independent of quantity; returns the new state."""
        with self._lock:
            medicine = self._require(medicine_id)
            now_available = medicine.toggle_flag(MedicineFlag.AVAILABLE)
        AuditLog.log_action("toggle", self.label, medicine_id, changes={"available": now_available})
        return now_available

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
        AuditLog.log_action("clear", self.label)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def sort_by_expiry_soonest(self) -> None:
        """Ascending by (expiry_year, expiry_month); ties keep their order."""
        with self._lock:
            self._records.sort(key=lambda m: m.expiry_key)
        AuditLog.log_action("sort", self.label, changes={"key": "expiry"})

    def sort_by_name_ascending(self) -> None:
        """Ascending codepoint order of name."""
        with self._lock:
            self._records.sort(key=lambda m: m.name)
        AuditLog.log_action("sort", self.label, changes={"key": "name"})
