"""Branch store: stock it, then merge it into the main store."""
from fastapi import APIRouter, Depends
from typing import List

from medstock.api.deps import get_branch_store, get_main_store
from medstock.core.exceptions import BusinessError, InventoryError
from medstock.models.store import MedicineStore
from medstock.schemas.medicine import MedicineCreate, MedicineRecord, MergeReportResponse
from medstock.services.merge_service import merge_into
from medstock.services.seed_service import branch_add_sample

router = APIRouter()


@router.get("", response_model=List[MedicineRecord])
def list_branch(branch: MedicineStore = Depends(get_branch_store)):
    return [MedicineRecord.from_medicine(m) for m in branch]


@router.post("", response_model=MedicineRecord, status_code=201)
def create_branch_medicine(item: MedicineCreate, branch: MedicineStore = Depends(get_branch_store)):
    medicine = item.to_medicine()
    try:
        branch.insert(medicine)
    except InventoryError as e:
        raise BusinessError.from_inventory_error(e)
    return MedicineRecord.from_medicine(medicine)


@router.post("/sample", response_model=dict)
def add_branch_sample(branch: MedicineStore = Depends(get_branch_store)):
    """Replace the branch contents with the branch sample medicines."""
    try:
        added = branch_add_sample(branch)
    except InventoryError as e:
        raise BusinessError.from_inventory_error(e)
    return {"added": added, "message": f"Branch sample data added ({added} items)"}


@router.post("/merge", response_model=MergeReportResponse)
def merge_branch(
    main: MedicineStore = Depends(get_main_store),
    branch: MedicineStore = Depends(get_branch_store),
):
    """Fold branch medicines into main, skipping names main already stocks."""
    if len(branch) == 0:
        raise BusinessError.bad_request("Branch list empty. Add branch medicines first.")
    report = merge_into(main, branch)
    return MergeReportResponse(
        merged=report.merged,
        skipped_duplicate=report.skipped_duplicate,
        skipped_capacity=report.skipped_capacity,
        merged_count=report.merged_count,
        skipped_duplicate_count=report.skipped_duplicate_count,
        skipped_capacity_count=report.skipped_capacity_count,
        main_count=len(main),
    )
