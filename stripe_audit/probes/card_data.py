"""
Card data (PCI DSS / SCA) checks.
"""

from typing import Any, Dict, Iterable, Optional

from ..config import (
    PAYMENT_INTENTS_PAGE_SIZE,
    PAYMENT_METHODS_PAGE_SIZE,
    SCA_MIN_RATIO,
    SCA_REQUEST_MODES,
)
from ..models import Severity
from ..stripe_api import (
    fetch,
    list_data,
    list_payment_intents_live,
    list_payment_methods_live,
)
from .base import Probe

# --- Pure rule helpers -----------------------------------------------------

def requests_three_d_secure(payment_intent: Dict[str, Any]) -> bool:
    options = payment_intent.get("payment_method_options") or {}
    card = options.get("card") or {}
    return card.get("request_three_d_secure") in SCA_REQUEST_MODES


def sca_ratio(payment_intents: Iterable[Dict[str, Any]]) -> Optional[float]:
    """Share of payment intents requesting 3DS, or None without samples."""
    total = 0
    requested = 0
    for pi in payment_intents:
        total += 1
        if requests_three_d_secure(pi):
            requested += 1
    if total == 0:
        return None
    return requested / total


# --- Probe -----------------------------------------------------------------

class CardDataProbe(Probe):
    name = "card_data"

    def run_checks(self) -> None:
        self.check_sca_compliance()
        self.check_card_data_handling()
        self.check_payment_method_security()

    def check_sca_compliance(self) -> None:
        call = fetch("payment_intents.list", list_payment_intents_live,
                     self.session, PAYMENT_INTENTS_PAGE_SIZE)
        if call.ok:
            ratio = sca_ratio(list_data(call.value))
            if ratio is not None and ratio < SCA_MIN_RATIO:
                self.finding(
                    Severity.HIGH,
                    "sca_compliance",
                    f"Low 3D Secure usage detected ({ratio:.0%} of recent payment intents) "
                    "- may violate SCA requirements for EU",
                    "Enable 3D Secure (SCA) for all EU payments to comply with PSD2 regulations",
                )
        else:
            self.coverage_gap(
                call,
                "sca_permission_denied",
                "Cannot access payment intents to check SCA compliance",
                "Grant payment intents read permission to audit SCA usage",
            )

        self.reminder(
            Severity.MEDIUM,
            "sca_best_practice",
            "Ensure SCA (3D Secure) is properly configured for EU customers",
            "Use Stripe's automatic SCA handling or explicitly request 3D Secure for EU payments",
        )

    def check_card_data_handling(self) -> None:
        call = fetch("payment_methods.list", list_payment_methods_live,
                     self.session, PAYMENT_METHODS_PAGE_SIZE)
        if call.ok:
            unattached = [pm for pm in list_data(call.value) if not pm.get("customer")]
            if unattached:
                self.finding(
                    Severity.MEDIUM,
                    "unattached_payment_methods",
                    f"Found {len(unattached)} payment method(s) not attached to customers",
                    "Attach payment methods to customers for better security and PCI compliance",
                    resource=", ".join(pm.get("id", "") for pm in unattached),
                )
        else:
            self.coverage_gap(
                call,
                "payment_methods_unverified",
                "Cannot access payment methods to check how they are stored",
                "Grant payment methods read permission to audit card storage",
            )

        self.reminder(
            Severity.HIGH,
            "pci_compliance",
            "Never store raw card data - use Stripe Payment Methods or Elements",
            "Use Stripe.js and the Payment Intents API so card data never enters your PCI scope",
        )

    def check_payment_method_security(self) -> None:
        self.reminder(
            Severity.HIGH,
            "card_data_security",
            "Verify card data never touches your servers",
            "Collect card details with Stripe Elements or Checkout; never send card numbers to your backend",
        )
        self.reminder(
            Severity.MEDIUM,
            "cvv_handling",
            "CVV should never be stored",
            "CVV codes should only be collected at payment time and never stored or logged",
        )
