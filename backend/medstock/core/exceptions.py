"""
Inventory error kinds and their HTTP translation.

The store raises the domain exceptions below; callers (console shell or API
routes) turn them into a message or an HTTPException. Nothing here ever
terminates the process.
"""
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Base class for recoverable inventory failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateIdError(InventoryError):
    """Insert with an id that the store already holds."""

    def __init__(self, medicine_id: int):
        super().__init__(f"Medicine with id {medicine_id} already exists")
        self.medicine_id = medicine_id


class NotFoundError(InventoryError):
    """Lookup/update/delete/toggle against an unknown id or name."""

    def __init__(self, key):
        if isinstance(key, int):
            message = f"Medicine with id {key} not found"
        else:
            message = f"Medicine '{key}' not found"
        super().__init__(message)
        self.key = key


class CapacityExceededError(InventoryError):
    """Insert into a store that is already at capacity."""

    def __init__(self, capacity: int, label: str = "store"):
        super().__init__(f"{label.capitalize()} is full ({capacity} medicines); cannot add more")
        self.capacity = capacity
        self.label = label


class InvalidFieldError(InventoryError):
    """A field update carried a value outside the record's bounds."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid value for {field}: {reason}")
        self.field = field
        self.reason = reason


class BusinessError:
    """HTTP exceptions for the API wrapper."""

    @staticmethod
    def not_found(detail: str = "Medicine not found") -> HTTPException:
        logger.info(f"Not found: {detail}")
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )

    @staticmethod
    def conflict(detail: str) -> HTTPException:
        """
        409 for resource conflicts.
        Example: "Medicine with id 101 already exists"
        """
        logger.info(f"Conflict: {detail}")
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )

    @staticmethod
    def bad_request(detail: str) -> HTTPException:
        logger.info(f"Bad request: {detail}")
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )

    @staticmethod
    def insufficient_storage(detail: str) -> HTTPException:
        """507 when a store has no free slot left."""
        logger.warning(f"Capacity exceeded: {detail}")
        return HTTPException(
            status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
            detail=detail,
        )

    @staticmethod
    def from_inventory_error(exc: InventoryError) -> HTTPException:
        """Map a domain exception onto the matching HTTP response."""
        if isinstance(exc, NotFoundError):
            return BusinessError.not_found(exc.message)
        if isinstance(exc, DuplicateIdError):
            return BusinessError.conflict(exc.message)
        if isinstance(exc, CapacityExceededError):
            return BusinessError.insufficient_storage(exc.message)
        return BusinessError.bad_request(exc.message)
