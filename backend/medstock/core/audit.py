"""
Audit logging for inventory mutations.

Every change to a store (insert, update, delete, toggle, sort, merge) is
written as one JSON line on the ``audit`` logger so it can be shipped or
grepped separately from application logs.
"""
import logging
import json
from datetime import datetime, timezone
from typing import Any, Optional, Dict

# Separate logger for audit events
audit_logger = logging.getLogger("audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Central audit logging for store changes."""

    @staticmethod
    def log_action(
        action: str,  # "insert", "update", "delete", "toggle", "sort", "clear"
        store: str,  # store label, e.g. "main" or "branch"
        resource_id: Optional[int] = None,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log one store mutation.

        Usage:
            AuditLog.log_action("insert", "main", 101, changes={"name": "Paracetamol"})
            AuditLog.log_action("sort", "main", changes={"key": "expiry"})
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": f"medicine.{action}",
            "store": store,
        }

        if resource_id is not None:
            log_entry["resource_id"] = resource_id
        if changes:
            log_entry["changes"] = changes

        audit_logger.info(json.dumps(log_entry, default=str))

    @staticmethod
    def log_merge(
        source: str,
        target: str,
        merged: int,
        skipped_duplicate: int,
        skipped_capacity: int,
    ):
        """Log the outcome of folding one store into another."""
        log_entry = {
            "timestamp": _now(),
            "event_type": "store.merge",
            "source": source,
            "target": target,
            "merged": merged,
            "skipped_duplicate": skipped_duplicate,
            "skipped_capacity": skipped_capacity,
        }

        if skipped_capacity:
            audit_logger.warning(json.dumps(log_entry))
        else:
            audit_logger.info(json.dumps(log_entry))
