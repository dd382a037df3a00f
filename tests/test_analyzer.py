# tests/test_analyzer.py
"""
Orchestration tests: probe ordering under concurrency, best-effort account
lookup, fail-fast on defects, and an end-to-end scan of an empty account.
"""

import time
from datetime import timezone

import pytest
import stripe

from stripe_audit.analyzer import RiskAnalyzer
from stripe_audit.models import IssueCategory, Severity
from stripe_audit.probes import PROBE_TYPES, Probe
from stripe_audit.scoring import score

from conftest import permission_error


class SleepyProbe(Probe):
    """Emits fixed kinds after a delay."""

    def __init__(self, session, name, delay, kinds):
        super().__init__(session)
        self.name = name
        self.delay = delay
        self.kinds = kinds

    def run_checks(self):
        time.sleep(self.delay)
        for kind in self.kinds:
            self.finding(Severity.LOW, kind, kind, "none")


class BrokenProbe(Probe):
    name = "broken"

    def run_checks(self):
        raise RuntimeError("probe bug")


def test_default_probes_follow_declared_order(session):
    analyzer = RiskAnalyzer(session)
    assert [type(p) for p in analyzer.probes] == list(PROBE_TYPES)


def test_issue_order_ignores_completion_order(session):
    # first declared probe finishes last
    probes = [
        SleepyProbe(session, "a", 0.3, ["a1", "a2"]),
        SleepyProbe(session, "b", 0.2, ["b1"]),
        SleepyProbe(session, "c", 0.1, []),
        SleepyProbe(session, "d", 0.0, ["d1", "d2"]),
    ]
    result = RiskAnalyzer(session, probes=probes).analyze()
    assert [i.kind for i in result.issues] == ["a1", "a2", "b1", "d1", "d2"]


def test_probes_run_concurrently(session):
    probes = [SleepyProbe(session, str(n), 0.3, [str(n)]) for n in range(5)]
    started = time.monotonic()
    RiskAnalyzer(session, probes=probes).analyze()
    assert time.monotonic() - started < 1.2


def test_probe_defect_aborts_scan(session):
    probes = [SleepyProbe(session, "ok", 0.0, ["x"]), BrokenProbe(session)]
    with pytest.raises(RuntimeError, match="probe bug"):
        RiskAnalyzer(session, probes=probes).analyze()


def test_authentication_error_is_fatal(session, fake_client):
    fake_client.charges.error = stripe.AuthenticationError("Invalid API Key provided")
    with pytest.raises(stripe.AuthenticationError):
        RiskAnalyzer(session).analyze()


def test_account_id_is_resolved(session):
    result = RiskAnalyzer(session).analyze()
    assert result.account_id == "acct_123"
    assert result.timestamp.tzinfo == timezone.utc


def test_account_lookup_failure_leaves_id_empty(session, fake_client):
    fake_client.accounts.error = permission_error()
    result = RiskAnalyzer(session).analyze()
    assert result.account_id is None
    assert result.risk_score.total == len(result.issues)


def test_empty_account_end_to_end(session, fake_client):
    # restricted live key: no key-scope finding, no test-mode finding
    fake_client.balance.error = permission_error()

    result = RiskAnalyzer(session).analyze()

    reminders = [i for i in result.issues if i.category == IssueCategory.REMINDER]
    findings = [i for i in result.issues if i.category != IssueCategory.REMINDER]
    assert [i.kind for i in findings] == ["no_webhooks"]
    assert len(result.issues) == len(reminders) + 1 == 14

    assert [i.probe for i in result.issues] == (
        ["api_usage"]
        + ["webhooks"] * 3
        + ["idempotency"] * 2
        + ["card_data"] * 4
        + ["personal_data"] * 4
    )

    # 4 high, 8 medium, 2 low -> 82 / 140
    assert result.risk_score == score(result.issues)
    assert (result.risk_score.high, result.risk_score.medium, result.risk_score.low) == (4, 8, 2)
    assert result.risk_score.percentage == 59


def test_scan_reads_nested_sdk_objects(session, fake_client):
    # every fake response is a real stripe.ListObject / StripeObject
    fake_client.charges.data = [
        {"id": "ch_1", "object": "charge", "amount": 900, "created": 1000,
         "customer": {"id": "cus_9", "object": "customer"}},
        {"id": "ch_2", "object": "charge", "amount": 900, "created": 1100, "customer": "cus_9"},
    ]
    fake_client.customers.data = [
        {"id": "cus_9", "object": "customer", "metadata": {"SSN_Number": "x", "phone": "555"}},
    ]
    fake_client.payment_intents.data = [
        {"id": "pi_1", "object": "payment_intent",
         "payment_method_options": {"card": {"request_three_d_secure": "automatic"}}},
    ]
    fake_client.webhook_endpoints.data = [
        {"id": "we_1", "object": "webhook_endpoint", "status": "disabled",
         "url": "https://example.com/hook"},
    ]

    result = RiskAnalyzer(session).analyze()

    assert result.account_id == "acct_123"
    by_kind = {}
    for issue in result.issues:
        by_kind.setdefault(issue.kind, []).append(issue)
    assert [i.resource for i in by_kind["potential_duplicate_charge"]] == ["cus_9"]
    assert [i.resource for i in by_kind["sensitive_pii_in_metadata"]] == ["cus_9"]
    assert "SSN_Number" in by_kind["sensitive_pii_in_metadata"][0].message
    assert [i.resource for i in by_kind["disabled_webhook"]] == ["we_1"]
    assert "sca_compliance" not in by_kind
    assert "overly_broad_key" in by_kind
