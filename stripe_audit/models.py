# models.py
"""
Data models used by the auditor.

- Keep simple, immutable dataclasses for issues and scan results.
- RiskScore is derived from the issues; see scoring.score.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IssueCategory(str, Enum):
    FINDING = "finding"
    REMINDER = "reminder"
    COVERAGE_GAP = "coverage_gap"


@dataclass(frozen=True)
class Issue:
    """
    Represents a single finding produced by a probe.

    Fields:
    - severity: high, medium or low
    - kind: stable identifier defined by the probe (e.g. "disabled_webhook")
    - message: short human-readable description
    - recommendation: remediation advice
    - resource: Stripe object id the issue is about, if any (e.g. "we_123")
    - probe: name of the probe that emitted it
    - category: observed finding, standing reminder, or coverage gap
    """
    severity: Severity
    kind: str
    message: str
    recommendation: str
    resource: str = ""
    probe: str = ""
    category: IssueCategory = IssueCategory.FINDING


@dataclass(frozen=True)
class RiskScore:
    total: int
    high: int
    medium: int
    low: int
    percentage: int


@dataclass(frozen=True)
class ScanResult:
    """
    Outcome of one audit run. Issues are in probe order, then emission order.
    """
    issues: Tuple[Issue, ...]
    risk_score: RiskScore
    timestamp: datetime
    account_id: Optional[str] = None
