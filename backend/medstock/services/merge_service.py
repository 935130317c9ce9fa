"""Fold a branch store into the main store, skipping medicines already stocked by name."""
import logging
from typing import List, Tuple

from pydantic import BaseModel, Field

from medstock.core.audit import AuditLog
from medstock.models.store import MedicineStore

logger = logging.getLogger(__name__)

MERGED = "merged"
DUPLICATE = "duplicate"
CAPACITY = "capacity"


class MergeReport(BaseModel):
    """Outcome of one merge, by medicine name, in branch order."""
    merged: List[str] = Field(default_factory=list)
    skipped_duplicate: List[str] = Field(default_factory=list)
    skipped_capacity: List[str] = Field(default_factory=list)
    # (name, outcome) per branch medicine, in branch order
    outcomes: List[Tuple[str, str]] = Field(default_factory=list)

    @property
    def merged_count(self) -> int:
        return len(self.merged)

    @property
    def skipped_duplicate_count(self) -> int:
        return len(self.skipped_duplicate)

    @property
    def skipped_capacity_count(self) -> int:
        return len(self.skipped_capacity)


def merge_into(main: MedicineStore, branch: MedicineStore) -> MergeReport:
    """
    Copy branch medicines into ``main`` in branch order.

    RULES:
    - A branch medicine whose name already exists in main is skipped as a duplicate.
      Its id clashing with a main record counts as a duplicate too.
    - The first non-duplicate that finds main full stops the merge; it and every
      later branch medicine are reported as skipped for capacity.
    - The branch store is never modified; main receives independent copies.
    """
    report = MergeReport()

    # Fixed lock order (main, then branch) so concurrent merges cannot deadlock
    with main.lock, branch.lock:
        pending = branch.records()
        for position, medicine in enumerate(pending):
            if main.find_by_name(medicine.name) is not None or main.find_by_id(medicine.id) is not None:
                logger.info(f"Duplicate '{medicine.name}' skipped")
                report.skipped_duplicate.append(medicine.name)
                report.outcomes.append((medicine.name, DUPLICATE))
                continue
            if main.is_full:
                logger.warning(f"{main.label} store full; cannot merge more")
                for m in pending[position:]:
                    report.skipped_capacity.append(m.name)
                    report.outcomes.append((m.name, CAPACITY))
                break
            main.insert(medicine.model_copy())
            logger.info(f"Merged '{medicine.name}' into {main.label}")
            report.merged.append(medicine.name)
            report.outcomes.append((medicine.name, MERGED))

    AuditLog.log_merge(
        source=branch.label,
        target=main.label,
        merged=report.merged_count,
        skipped_duplicate=report.skipped_duplicate_count,
        skipped_capacity=report.skipped_capacity_count,
    )
    return report
