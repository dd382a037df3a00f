# tests/conftest.py
"""
Shared fixtures: an in-memory stand-in for stripe.StripeClient.

Each service returns real stripe.ListObject / StripeObject responses, can be told to
raise a Stripe error, and can be slowed down to skew completion order.
"""

import time

import pytest
import stripe

from stripe_audit.stripe_api import StripeSession

LIVE_KEY = "sk_live_1234567890"
TEST_KEY = "sk_test_1234567890"
FAKE_KEY = "sk_test_fake"


class FakeService:
    def __init__(self, data=None, obj=None, error=None, delay=0.0):
        self.data = list(data or [])
        self.obj = obj
        self.error = error
        self.delay = delay
        self.calls = []

    def _respond(self, params, payload):
        self.calls.append(params)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return payload

    def list(self, params=None):
        payload = {"object": "list", "url": "/v1/fake", "has_more": False, "data": list(self.data)}
        return self._respond(params, stripe.ListObject.construct_from(payload, FAKE_KEY))

    def retrieve(self, params=None):
        return self._respond(params, stripe.StripeObject.construct_from(self.obj, FAKE_KEY))

    def retrieve_current(self, params=None):
        return self.retrieve(params)


class FakeStripeClient:
    SERVICES = (
        "accounts",
        "balance",
        "charges",
        "refunds",
        "webhook_endpoints",
        "payment_intents",
        "payment_methods",
        "customers",
    )

    def __init__(self):
        self.accounts = FakeService(obj={"id": "acct_123", "object": "account"})
        self.balance = FakeService(obj={"object": "balance", "available": []})
        self.charges = FakeService()
        self.refunds = FakeService()
        self.webhook_endpoints = FakeService()
        self.payment_intents = FakeService()
        self.payment_methods = FakeService()
        self.customers = FakeService()

    def deny_all(self):
        for name in self.SERVICES:
            getattr(self, name).error = permission_error()
        return self


def permission_error():
    return stripe.PermissionError("The provided key does not have the required permissions.")


@pytest.fixture
def fake_client():
    return FakeStripeClient()


@pytest.fixture
def session(fake_client):
    return StripeSession(LIVE_KEY, client=fake_client)


@pytest.fixture
def test_mode_session(fake_client):
    return StripeSession(TEST_KEY, client=fake_client)
