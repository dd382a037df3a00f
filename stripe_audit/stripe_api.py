"""
Read-only access to the Stripe API.

- StripeSession validates the key and wraps a stripe.StripeClient.
- The *_live helpers issue exactly one bounded list/retrieve call each.
- fetch() hands probes plain dicts, never SDK objects.
- fetch() turns recoverable Stripe errors into an ApiCall value so probes can
  record a coverage gap and keep going. Authentication errors are not
  recoverable and propagate.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import stripe

from .config import (
    STRIPE_API_VERSION,
    TEST_KEY_PREFIXES,
    VALID_KEY_PREFIXES,
)

logger = logging.getLogger(__name__)

# Permission gaps plus transient/network failures; none of these are retried.
RECOVERABLE_ERRORS = (
    stripe.PermissionError,
    stripe.InvalidRequestError,
    stripe.RateLimitError,
    stripe.APIConnectionError,
    stripe.APIError,
)


class ConfigurationError(ValueError):
    """Raised when the supplied credential cannot possibly work."""


class StripeSession:
    """
    Authenticated, read-capable handle shared by all probes.

    A pre-built client can be passed in (tests use an in-memory fake).
    """

    def __init__(self, api_key: str, client: Any = None,
                 api_version: Optional[str] = STRIPE_API_VERSION):
        if not api_key:
            raise ConfigurationError("A Stripe secret key is required.")
        if not api_key.startswith(VALID_KEY_PREFIXES):
            raise ConfigurationError(
                "Invalid Stripe secret key format. Must start with sk_ or rk_."
            )
        self.api_key = api_key
        if client is None:
            client = stripe.StripeClient(
                api_key,
                stripe_version=api_version,
                max_network_retries=0,
            )
        self.client = client

    @property
    def is_test_mode(self) -> bool:
        return self.api_key.startswith(TEST_KEY_PREFIXES)


@dataclass(frozen=True)
class ApiCall:
    """Either the response of a remote call or the recoverable error it raised."""
    label: str
    value: Any = None
    error: Optional[stripe.StripeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def denied(self) -> bool:
        return isinstance(self.error, stripe.PermissionError)


def fetch(label: str, call: Callable[..., Any], *args, **kwargs) -> ApiCall:
    """
    Run one remote call and capture recoverable failures.
    """
    try:
        return ApiCall(label=label, value=to_plain(call(*args, **kwargs)))
    except RECOVERABLE_ERRORS as e:
        logger.warning("Stripe call %s failed (%s): %s", label, type(e).__name__, e)
        return ApiCall(label=label, error=e)


def to_plain(value: Any) -> Any:
    """
    Convert a Stripe response (and any nested Stripe objects) into plain
    dicts and lists.
    """
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_plain(v) for v in value]
    return value


def list_data(response: Any) -> List[Dict[str, Any]]:
    """Items of a Stripe list response (first page only)."""
    if response is None:
        return []
    return list(response.get("data", []) or [])


def object_id(value: Any) -> Optional[str]:
    """Id of a possibly-expanded reference (plain id string or object)."""
    if not value:
        return None
    if isinstance(value, str):
        return value
    return value.get("id")


# --- Live Stripe helpers ---------------------------------------------------

def retrieve_account_live(session: StripeSession):
    return session.client.accounts.retrieve_current()


def retrieve_balance_live(session: StripeSession):
    return session.client.balance.retrieve()


def list_charges_live(session: StripeSession, limit: int):
    return session.client.charges.list(params={"limit": limit})


def list_refunds_live(session: StripeSession, limit: int):
    return session.client.refunds.list(params={"limit": limit})


def list_webhook_endpoints_live(session: StripeSession, limit: int):
    return session.client.webhook_endpoints.list(params={"limit": limit})


def list_payment_intents_live(session: StripeSession, limit: int):
    return session.client.payment_intents.list(params={"limit": limit})


def list_payment_methods_live(session: StripeSession, limit: int):
    return session.client.payment_methods.list(params={"limit": limit})


def list_customers_live(session: StripeSession, limit: int):
    return session.client.customers.list(params={"limit": limit})
