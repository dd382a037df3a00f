"""Stripe account risk auditor."""

from .analyzer import RiskAnalyzer
from .models import Issue, IssueCategory, RiskScore, ScanResult, Severity
from .scoring import score
from .stripe_api import ConfigurationError, StripeSession

__version__ = "1.0.0"

__all__ = [
    "RiskAnalyzer",
    "Issue",
    "IssueCategory",
    "RiskScore",
    "ScanResult",
    "Severity",
    "score",
    "ConfigurationError",
    "StripeSession",
]
