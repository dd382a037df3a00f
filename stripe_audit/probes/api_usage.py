"""
API key usage checks: key scope, idempotency keys, test-mode keys.
"""

from ..models import Severity
from ..stripe_api import fetch, retrieve_account_live, retrieve_balance_live
from .base import Probe


class ApiUsageProbe(Probe):
    name = "api_usage"

    def run_checks(self) -> None:
        self.check_key_permissions()
        self.check_idempotency_usage()
        self.check_test_mode_key()

    def check_key_permissions(self) -> None:
        # Restricted keys normally cannot read the account or the balance.
        account = fetch("account.retrieve", retrieve_account_live, self.session)
        if not account.ok:
            if account.denied:
                self.coverage_gap(
                    account,
                    "restricted_key_detected",
                    "Using restricted API key (good practice)",
                    "Continue using restricted keys for production",
                )
            else:
                self.coverage_gap(
                    account,
                    "key_scope_unverified",
                    "Could not determine the scope of the API key",
                    "Re-run the audit once the Stripe API is reachable",
                )
            return

        balance = fetch("balance.retrieve", retrieve_balance_live, self.session)
        if balance.ok:
            self.finding(
                Severity.HIGH,
                "overly_broad_key",
                "API key appears to have full account access",
                "Use restricted API keys with minimal required permissions",
            )
        elif not balance.denied:
            self.coverage_gap(
                balance,
                "key_scope_unverified",
                "Could not determine the scope of the API key",
                "Re-run the audit once the Stripe API is reachable",
            )

    def check_idempotency_usage(self) -> None:
        # Whether a request carried an Idempotency-Key is not visible through the API.
        self.reminder(
            Severity.MEDIUM,
            "idempotency_check",
            "Verify idempotency keys are used for all charge/payment operations",
            "Always include an idempotency key for payment-mutating requests "
            "(charges, payment intents, refunds)",
        )

    def check_test_mode_key(self) -> None:
        if self.session.is_test_mode:
            self.finding(
                Severity.HIGH,
                "test_key_in_production",
                "Test API key detected - ensure this is not used in production",
                "Use live keys (sk_live_...) in production environments",
            )
