"""
Probe contract.

A probe runs a handful of read-only checks against one Stripe account and
returns the issues it found. Probes never raise for expected API friction:
every remote call goes through stripe_api.fetch(), and a failed call becomes
at most one low-severity coverage-gap issue before the probe moves on to its
next check.
"""

import logging
from typing import List

from ..models import Issue, IssueCategory, Severity
from ..stripe_api import ApiCall, StripeSession

logger = logging.getLogger(__name__)


class Probe:
    """Base class for the five account probes."""

    name: str = ""

    def __init__(self, session: StripeSession):
        self.session = session
        self.issues: List[Issue] = []

    def scan(self) -> List[Issue]:
        self.issues = []
        logger.debug("Probe %s started", self.name)
        self.run_checks()
        logger.debug("Probe %s finished with %d issue(s)", self.name, len(self.issues))
        return list(self.issues)

    def run_checks(self) -> None:
        """Run every check of the probe; subclasses must override."""
        raise NotImplementedError

    # --- Issue helpers ---------------------------------------------------

    def _add(self, severity: Severity, kind: str, message: str,
             recommendation: str, resource: str, category: IssueCategory) -> None:
        self.issues.append(Issue(
            severity=severity,
            kind=kind,
            message=message,
            recommendation=recommendation,
            resource=resource or "",
            probe=self.name,
            category=category,
        ))

    def finding(self, severity: Severity, kind: str, message: str,
                recommendation: str, resource: str = "") -> None:
        self._add(severity, kind, message, recommendation, resource, IssueCategory.FINDING)

    def reminder(self, severity: Severity, kind: str, message: str,
                 recommendation: str) -> None:
        self._add(severity, kind, message, recommendation, "", IssueCategory.REMINDER)

    def coverage_gap(self, call: ApiCall, kind: str, message: str,
                     recommendation: str) -> None:
        """
        Record that a check could not run. Permission gaps keep the given
        message; other failures say what went wrong instead.
        """
        if not call.denied:
            message = f"{message} ({type(call.error).__name__} on {call.label})"
        self._add(Severity.LOW, kind, message, recommendation, "", IssueCategory.COVERAGE_GAP)
