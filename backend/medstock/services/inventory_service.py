"""Read-only inventory queries: name search, expiry filter, stock and expiry reminders.

None of these mutate the store. Multi-record queries return a RecordView
that re-runs its filter every time it is iterated, always in current store
order.
"""
from typing import Callable, Iterator, List, Optional

from medstock.models.medicine import Medicine
from medstock.models.store import MedicineStore

# 0 means "don't filter on this field" for expiry month/year
WILDCARD = 0


class RecordView:
    """Lazy, restartable filtered view over a store."""

    def __init__(self, store: MedicineStore, predicate: Callable[[Medicine], bool]):
        self._store = store
        self._predicate = predicate

    def __iter__(self) -> Iterator[Medicine]:
        return (m for m in self._store if self._predicate(m))

    def __bool__(self) -> bool:
        return any(True for _ in self)

    def ids(self) -> List[int]:
        return [m.id for m in self]

    def to_list(self) -> List[Medicine]:
        return list(self)


def search_exact_name(store: MedicineStore, name: str) -> Optional[Medicine]:
    """First record whose name equals ``name`` exactly."""
    with store.lock:
        index = store.find_by_name(name)
        return store.at(index) if index is not None else None


def search_by_expiry(store: MedicineStore, month: int = WILDCARD, year: int = WILDCARD) -> RecordView:
    """Records expiring in the given month and/or year. 0 matches any value."""

    def matches(m: Medicine) -> bool:
        if month != WILDCARD and m.expiry_month != month:
            return False
        if year != WILDCARD and m.expiry_year != year:
            return False
        return True

    return RecordView(store, matches)


def low_stock(store: MedicineStore, threshold: int) -> RecordView:
    """Records with quantity <= threshold (0 lists only out-of-stock items)."""
    return RecordView(store, lambda m: m.quantity <= threshold)


def expiring_on_or_before(store: MedicineStore, year: int) -> RecordView:
    """Records whose expiry year is ``year`` or earlier. Month is ignored."""
    return RecordView(store, lambda m: m.expiry_year <= year)
