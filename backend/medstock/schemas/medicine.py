from pydantic import BaseModel, Field
from typing import List, Optional

from medstock.core.config import settings
from medstock.models.medicine import Medicine

NAME_FIELD = dict(min_length=1, max_length=settings.MAX_NAME_LEN - 1, pattern=r"^\S+$")
COMPANY_FIELD = dict(max_length=settings.MAX_COMPANY_LEN - 1, pattern=r"^\S*$")


class MedicineCreate(BaseModel):
    id: int = Field(ge=1, le=settings.MAX_MEDICINE_ID)
    name: str = Field(**NAME_FIELD)
    company: str = Field(default="", **COMPANY_FIELD)
    quantity: int = Field(default=0, ge=0, le=settings.MAX_QUANTITY)
    expiry_month: int = Field(ge=1, le=12)
    expiry_year: int = Field(ge=settings.MIN_EXPIRY_YEAR, le=settings.MAX_EXPIRY_YEAR)
    price: int = Field(default=0, ge=0, le=settings.MAX_PRICE)
    prescription_required: bool = False

    def to_medicine(self) -> Medicine:
        return Medicine.new(**self.model_dump())


class MedicineUpdate(BaseModel):
    """Fields to change; each one given is applied in declaration order."""
    name: Optional[str] = Field(default=None, **NAME_FIELD)
    company: Optional[str] = Field(default=None, **COMPANY_FIELD)
    quantity: Optional[int] = Field(default=None, ge=0, le=settings.MAX_QUANTITY)
    expiry_month: Optional[int] = Field(default=None, ge=1, le=12)
    expiry_year: Optional[int] = Field(default=None, ge=settings.MIN_EXPIRY_YEAR, le=settings.MAX_EXPIRY_YEAR)
    price: Optional[int] = Field(default=None, ge=0, le=settings.MAX_PRICE)
    toggle_prescription: bool = False


class MedicineRecord(BaseModel):
    id: int
    name: str
    company: str
    quantity: int
    expiry: str  # MM/YYYY
    expiry_month: int
    expiry_year: int
    price: int
    available: bool
    prescription_required: bool

    @classmethod
    def from_medicine(cls, m: Medicine) -> "MedicineRecord":
        return cls(
            id=m.id,
            name=m.name,
            company=m.company,
            quantity=m.quantity,
            expiry=f"{m.expiry_month:02d}/{m.expiry_year:04d}",
            expiry_month=m.expiry_month,
            expiry_year=m.expiry_year,
            price=m.price,
            available=m.available,
            prescription_required=m.prescription_required,
        )


class MergeReportResponse(BaseModel):
    merged: List[str]
    skipped_duplicate: List[str]
    skipped_capacity: List[str]
    merged_count: int
    skipped_duplicate_count: int
    skipped_capacity_count: int
    main_count: int
