"""
Personal data (PII / GDPR) checks on customer records.
"""

from typing import Any, Dict, List

from ..config import CUSTOMERS_PAGE_SIZE, SENSITIVE_METADATA_TERMS
from ..models import Severity
from ..stripe_api import fetch, list_customers_live, list_data
from .base import Probe


def sensitive_metadata_keys(metadata: Dict[str, Any]) -> List[str]:
    """
    Metadata keys whose name contains a sensitive term (case-insensitive).
    """
    matches: List[str] = []
    for key in (metadata or {}):
        lower_key = key.lower()
        if any(term in lower_key for term in SENSITIVE_METADATA_TERMS):
            matches.append(key)
    return matches


class PersonalDataProbe(Probe):
    name = "personal_data"

    def run_checks(self) -> None:
        self.check_customer_metadata()
        self.check_metadata_usage()
        self.check_data_retention()

    def check_customer_metadata(self) -> None:
        call = fetch("customers.list", list_customers_live, self.session, CUSTOMERS_PAGE_SIZE)
        if not call.ok:
            self.coverage_gap(
                call,
                "pii_permission_denied",
                "Cannot access customer data to check PII collection",
                "Grant customers read permission to audit PII collection practices",
            )
            return

        for customer in list_data(call.value):
            for key in sensitive_metadata_keys(customer.get("metadata")):
                self.finding(
                    Severity.HIGH,
                    "sensitive_pii_in_metadata",
                    f"Customer metadata contains potentially sensitive PII: {key}",
                    "Avoid storing sensitive PII in Stripe metadata. Use secure storage "
                    "solutions for SSN, passport numbers, etc.",
                    resource=customer.get("id", ""),
                )

    def check_metadata_usage(self) -> None:
        self.reminder(
            Severity.MEDIUM,
            "metadata_best_practice",
            "Review metadata usage for unnecessary PII collection",
            "Only collect PII that is necessary for payment processing. Avoid storing SSN, "
            "passport numbers, or other sensitive identifiers in Stripe metadata",
        )
        self.reminder(
            Severity.LOW,
            "gdpr_compliance",
            "Ensure GDPR compliance for EU customers",
            "Implement data minimization principles - only collect PII that is necessary "
            "and has a legal basis",
        )

    def check_data_retention(self) -> None:
        self.reminder(
            Severity.MEDIUM,
            "data_retention",
            "Implement data retention policies",
            "Define and enforce data retention policies for customer PII. Delete data "
            "that is no longer needed",
        )
        self.reminder(
            Severity.LOW,
            "data_portability",
            "Ensure customers can access and export their data",
            "Implement the GDPR right to data portability - allow customers to export "
            "their data in a machine-readable format",
        )
