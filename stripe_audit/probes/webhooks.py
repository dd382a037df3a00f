"""
Webhook endpoint configuration checks.

- Pure helpers classify endpoint URLs.
- The probe lists endpoints once and flags disabled, plain-HTTP and loopback
  endpoints, then adds the standing reminders that cannot be verified remotely.
"""

import ipaddress
from typing import Any, Dict
from urllib.parse import urlsplit

from ..config import WEBHOOKS_PAGE_SIZE
from ..models import Severity
from ..stripe_api import fetch, list_data, list_webhook_endpoints_live
from .base import Probe

# --- Pure rule helpers -----------------------------------------------------

def is_https_url(url: str) -> bool:
    return url.lower().startswith("https://")


def is_loopback_url(url: str) -> bool:
    """
    Return True if the URL host is localhost or a loopback IP address.
    """
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return False
    if not host:
        return False
    if host == "localhost" or host.endswith(".localhost"):
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def endpoint_is_disabled(endpoint: Dict[str, Any]) -> bool:
    return endpoint.get("status") == "disabled"


# --- Probe -----------------------------------------------------------------

class WebhookProbe(Probe):
    name = "webhooks"

    def run_checks(self) -> None:
        self.check_webhook_endpoints()
        self.check_webhook_security()

    def check_webhook_endpoints(self) -> None:
        call = fetch("webhook_endpoints.list", list_webhook_endpoints_live,
                     self.session, WEBHOOKS_PAGE_SIZE)
        if not call.ok:
            self.coverage_gap(
                call,
                "webhook_permission_denied",
                "Cannot access webhook endpoints (may need broader key permissions)",
                "Grant webhook read permissions to audit webhook configuration",
            )
            return

        endpoints = list_data(call.value)
        if not endpoints:
            self.finding(
                Severity.MEDIUM,
                "no_webhooks",
                "No webhook endpoints configured",
                "Configure webhooks to handle asynchronous events "
                "(payment_intent.succeeded, charge.failed, etc.)",
            )
            return

        for endpoint in endpoints:
            endpoint_id = endpoint.get("id", "")
            url = endpoint.get("url") or ""

            if endpoint_is_disabled(endpoint):
                self.finding(
                    Severity.HIGH,
                    "disabled_webhook",
                    f"Webhook {endpoint_id} is disabled",
                    "Enable webhook or remove if no longer needed",
                    resource=endpoint_id,
                )

            if url and not is_https_url(url):
                self.finding(
                    Severity.HIGH,
                    "insecure_webhook_url",
                    f"Webhook {endpoint_id} uses insecure HTTP URL",
                    "Always use HTTPS for webhook endpoints",
                    resource=endpoint_id,
                )

            if url and is_loopback_url(url):
                self.finding(
                    Severity.MEDIUM,
                    "localhost_webhook",
                    f"Webhook {endpoint_id} points to localhost",
                    "Remove localhost webhooks from production accounts",
                    resource=endpoint_id,
                )

    def check_webhook_security(self) -> None:
        self.reminder(
            Severity.HIGH,
            "signature_verification",
            "Verify webhook signature verification is implemented",
            "Always verify the Stripe-Signature header with the endpoint secret "
            "to reject forged requests",
        )
        self.reminder(
            Severity.MEDIUM,
            "idempotency_handling",
            "Ensure webhook handlers are idempotent",
            "Record processed event ids so redelivered events are not handled twice",
        )
