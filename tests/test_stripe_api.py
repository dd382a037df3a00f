# tests/test_stripe_api.py
"""
Tests for the Stripe access layer: key validation and fail-soft fetch().
"""

import pytest
import stripe

from stripe_audit.stripe_api import (
    ConfigurationError,
    StripeSession,
    fetch,
    list_data,
    object_id,
    to_plain,
)


@pytest.mark.parametrize("key", ["", None, "pk_live_123", "whsec_abc"])
def test_unusable_keys_are_rejected(key):
    with pytest.raises(ConfigurationError):
        StripeSession(key)


def test_session_builds_a_stripe_client():
    session = StripeSession("rk_live_123")
    assert isinstance(session.client, stripe.StripeClient)
    assert not session.is_test_mode


@pytest.mark.parametrize("key", ["sk_test_abc", "rk_test_abc"])
def test_test_mode_is_detected_by_prefix(key):
    assert StripeSession(key, client=object()).is_test_mode


def test_fetch_returns_value():
    call = fetch("things.list", lambda limit: {"data": [1] * limit}, 2)
    assert call.ok
    assert list_data(call.value) == [1, 1]


def test_fetch_captures_permission_error():
    def denied():
        raise stripe.PermissionError("nope")

    call = fetch("charges.list", denied)
    assert not call.ok
    assert call.denied
    assert call.value is None


def test_fetch_captures_transient_error():
    def flaky():
        raise stripe.RateLimitError("slow down")

    call = fetch("charges.list", flaky)
    assert not call.ok
    assert not call.denied


def test_fetch_lets_authentication_errors_through():
    def bad_key():
        raise stripe.AuthenticationError("Invalid API Key provided")

    with pytest.raises(stripe.AuthenticationError):
        fetch("charges.list", bad_key)


def test_helpers():
    assert list_data(None) == []
    assert object_id("cus_1") == "cus_1"
    assert object_id({"id": "cus_2"}) == "cus_2"
    assert object_id(None) is None


def test_fetch_converts_sdk_objects_to_plain_data():
    response = stripe.ListObject.construct_from({
        "object": "list",
        "url": "/v1/customers",
        "has_more": False,
        "data": [
            {"id": "cus_1", "object": "customer", "metadata": {"ssn_number": "x"}},
        ],
    }, "sk_test_fake")

    call = fetch("customers.list", lambda: response)

    assert type(call.value) is dict
    customers = list_data(call.value)
    assert type(customers[0]) is dict
    assert type(customers[0]["metadata"]) is dict
    assert list(customers[0]["metadata"]) == ["ssn_number"]


def test_to_plain_handles_expanded_references():
    charge = stripe.StripeObject.construct_from(
        {"id": "ch_1", "customer": {"id": "cus_9", "object": "customer"}}, "sk_test_fake"
    )
    plain = to_plain(charge)
    assert plain == {"id": "ch_1", "customer": {"id": "cus_9", "object": "customer"}}
    assert object_id(plain["customer"]) == "cus_9"
