"""
Idempotency checks over recent charges and refunds.

Repeated charges (or refunds) of the same amount to the same target within a
few minutes usually mean a request was retried without an idempotency key.
Only the most recent page of records is inspected.
"""

from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Tuple

from ..config import CHARGES_PAGE_SIZE, DUPLICATE_WINDOW_SECONDS, REFUNDS_PAGE_SIZE
from ..models import Severity
from ..stripe_api import (
    fetch,
    list_charges_live,
    list_data,
    list_refunds_live,
    object_id,
)
from .base import Probe

GroupKey = Tuple[str, int]

# --- Pure rule helpers -----------------------------------------------------

def group_timestamps(records: Iterable[Dict[str, Any]], owner_field: str) -> "OrderedDict[GroupKey, List[int]]":
    """
    Group creation timestamps by (owner id, amount), skipping records
    without an owner. Groups keep first-seen order.
    """
    groups: "OrderedDict[GroupKey, List[int]]" = OrderedDict()
    for record in records:
        owner = object_id(record.get(owner_field))
        if not owner:
            continue
        key = (owner, record.get("amount"))
        groups.setdefault(key, []).append(record.get("created", 0))
    return groups


def has_close_pair(timestamps: List[int], window: int = DUPLICATE_WINDOW_SECONDS) -> bool:
    """True if two of the timestamps are less than `window` seconds apart."""
    ordered = sorted(timestamps)
    for earlier, later in zip(ordered, ordered[1:]):
        if later - earlier < window:
            return True
    return False


def find_duplicate_groups(records: Iterable[Dict[str, Any]], owner_field: str,
                          window: int = DUPLICATE_WINDOW_SECONDS) -> List[GroupKey]:
    return [
        key for key, timestamps in group_timestamps(records, owner_field).items()
        if len(timestamps) > 1 and has_close_pair(timestamps, window)
    ]


# --- Probe -----------------------------------------------------------------

class IdempotencyProbe(Probe):
    name = "idempotency"

    def run_checks(self) -> None:
        self.check_recent_charges()
        self.check_refund_patterns()

    def check_recent_charges(self) -> None:
        call = fetch("charges.list", list_charges_live, self.session, CHARGES_PAGE_SIZE)
        if call.ok:
            for customer, amount in find_duplicate_groups(list_data(call.value), "customer"):
                self.finding(
                    Severity.MEDIUM,
                    "potential_duplicate_charge",
                    f"Found charges of {amount} for customer {customer} within "
                    f"{DUPLICATE_WINDOW_SECONDS // 60} minutes - may indicate missing idempotency",
                    "Use idempotency keys for all charge and payment operations to prevent duplicates",
                    resource=customer,
                )
        else:
            self.coverage_gap(
                call,
                "idempotency_permission_denied",
                "Cannot access charges to check idempotency patterns",
                "Grant charges read permission to audit idempotency usage",
            )

        self.reminder(
            Severity.HIGH,
            "idempotency_best_practice",
            "Idempotency keys are critical for payment operations",
            "Always include an idempotency key when creating charges, payments, "
            "refunds, and other idempotent operations",
        )

    def check_refund_patterns(self) -> None:
        call = fetch("refunds.list", list_refunds_live, self.session, REFUNDS_PAGE_SIZE)
        if call.ok:
            for charge, amount in find_duplicate_groups(list_data(call.value), "charge"):
                self.finding(
                    Severity.MEDIUM,
                    "potential_duplicate_refund",
                    f"Found refunds of {amount} for charge {charge} within "
                    f"{DUPLICATE_WINDOW_SECONDS // 60} minutes - may indicate missing idempotency",
                    "Use idempotency keys for refunds to prevent accidental duplicate refunds",
                    resource=charge,
                )
        else:
            self.coverage_gap(
                call,
                "refund_permission_denied",
                "Cannot access refunds to check idempotency patterns",
                "Grant refunds read permission to audit refund idempotency",
            )

        self.reminder(
            Severity.MEDIUM,
            "refund_idempotency",
            "Ensure refunds use idempotency keys",
            "Use idempotency keys for refunds to prevent accidental duplicate refunds",
        )
