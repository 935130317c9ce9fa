"""Medicine record and its status flags."""
from enum import IntFlag
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from medstock.core.config import settings


class MedicineFlag(IntFlag):
    """Independent status bits of a medicine."""
    NONE = 0
    AVAILABLE = 0x01
    PRESCRIPTION_REQUIRED = 0x02


KNOWN_FLAGS = MedicineFlag.AVAILABLE | MedicineFlag.PRESCRIPTION_REQUIRED


def _to_flags(v) -> MedicineFlag:
    """Accept raw ints (e.g. 3) as well as flag members; reject unknown bits."""
    try:
        value = int(v)
    except (TypeError, ValueError):
        raise ValueError(f"flags must be an integer, got {v!r}")
    if value < 0 or value & ~int(KNOWN_FLAGS):
        raise ValueError(f"unknown flag bits in {value:#x}")
    return MedicineFlag(value)


FlagSet = Annotated[MedicineFlag, BeforeValidator(_to_flags)]


class Medicine(BaseModel):
    """
    One tracked medicine.

    AVAILABILITY RULES:
    - ``Medicine.new`` (interactive add) sets AVAILABLE when quantity > 0 and
      never clears it.
    - A quantity update re-derives AVAILABLE from the new quantity
      (see ``MedicineStore.update``).
    - ``toggle_flag(AVAILABLE)`` flips it regardless of quantity.
    Records built directly with ``flags=`` keep exactly those flags.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(ge=1, le=settings.MAX_MEDICINE_ID)
    name: str = Field(min_length=1, max_length=settings.MAX_NAME_LEN - 1, pattern=r"^\S+$")
    company: str = Field(default="", max_length=settings.MAX_COMPANY_LEN - 1, pattern=r"^\S*$")
    quantity: int = Field(default=0, ge=0, le=settings.MAX_QUANTITY)
    expiry_month: int = Field(ge=1, le=12)
    expiry_year: int = Field(ge=settings.MIN_EXPIRY_YEAR, le=settings.MAX_EXPIRY_YEAR)
    price: int = Field(default=0, ge=0, le=settings.MAX_PRICE)
    flags: FlagSet = MedicineFlag.NONE

    @classmethod
    def new(
        cls,
        id: int,
        name: str,
        company: str,
        quantity: int,
        expiry_month: int,
        expiry_year: int,
        price: int,
        prescription_required: bool = False,
    ) -> "Medicine":
        """Build a record the way a fresh add does: availability follows stock."""
        flags = MedicineFlag.PRESCRIPTION_REQUIRED if prescription_required else MedicineFlag.NONE
        if quantity > 0:
            flags |= MedicineFlag.AVAILABLE
        return cls(
            id=id,
            name=name,
            company=company,
            quantity=quantity,
            expiry_month=expiry_month,
            expiry_year=expiry_year,
            price=price,
            flags=flags,
        )

    @property
    def available(self) -> bool:
        return self.has_flag(MedicineFlag.AVAILABLE)

    @property
    def prescription_required(self) -> bool:
        return self.has_flag(MedicineFlag.PRESCRIPTION_REQUIRED)

    @property
    def expiry_key(self) -> tuple:
        """Sort key: soonest expiry first."""
        return (self.expiry_year, self.expiry_month)

    def has_flag(self, flag: MedicineFlag) -> bool:
        return bool(self.flags & flag)

    def set_flag(self, flag: MedicineFlag, on: bool) -> None:
        if on:
            self.flags = self.flags | flag
        else:
            self.flags = self.flags & ~flag

    def toggle_flag(self, flag: MedicineFlag) -> bool:
        """Flip one bit and return its new state."""
        self.flags = self.flags ^ flag
        return self.has_flag(flag)
