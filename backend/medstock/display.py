"""Plain-text rendering of medicine records.

Field order is fixed: id, name, company, quantity, expiry (MM/YYYY), price,
available (Y/N), prescription (Y/N).
"""
from typing import Dict, Iterable

from medstock.models.medicine import Medicine

FIELD_ORDER = ("id", "name", "company", "quantity", "expiry", "price", "available", "prescription")

TABLE_HEADER = "No  ID     Name                 Company          Qty  Expiry    Price  Avl Pres"
EMPTY_TABLE = "No medicines in database."


def format_expiry(medicine: Medicine) -> str:
    return f"{medicine.expiry_month:02d}/{medicine.expiry_year:04d}"


def _yn(flag: bool) -> str:
    return "Y" if flag else "N"


def record_fields(medicine: Medicine) -> Dict[str, str]:
    """Display values of one record, keyed and ordered by FIELD_ORDER."""
    return {
        "id": str(medicine.id),
        "name": medicine.name,
        "company": medicine.company,
        "quantity": str(medicine.quantity),
        "expiry": format_expiry(medicine),
        "price": str(medicine.price),
        "available": _yn(medicine.available),
        "prescription": _yn(medicine.prescription_required),
    }


def render_record(medicine: Medicine) -> str:
    fields = record_fields(medicine)
    return "\n".join(
        f"{name.capitalize()}: {fields[name]}" for name in FIELD_ORDER
    )


def render_row(number: int, medicine: Medicine) -> str:
    f = record_fields(medicine)
    return (
        f"{number:<3d} {medicine.id:<6d} {f['name']:<20s} {f['company']:<15s} "
        f"{medicine.quantity:<4d}  {f['expiry']}  {medicine.price:<5d}  "
        f"{f['available']}   {f['prescription']}"
    )


def render_table(medicines: Iterable[Medicine]) -> str:
    rows = [render_row(number, m) for number, m in enumerate(medicines, 1)]
    if not rows:
        return EMPTY_TABLE
    return "\n".join([TABLE_HEADER, *rows])
