from medstock.models.medicine import Medicine, MedicineFlag
from medstock.models.store import MedicineStore, UpdateField

__all__ = ["Medicine", "MedicineFlag", "MedicineStore", "UpdateField"]
