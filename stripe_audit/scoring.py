"""
Risk scoring.

score() maps any sequence of issues to a RiskScore. Each issue contributes its
severity weight; the percentage is the weighted sum relative to the worst case
where every issue is high severity. An empty sequence scores 0.
"""

from typing import Iterable

from .config import MAX_SEVERITY_WEIGHT, SEVERITY_WEIGHTS
from .models import Issue, RiskScore, Severity


def score(issues: Iterable[Issue]) -> RiskScore:
    high = medium = low = 0
    for issue in issues:
        if issue.severity == Severity.HIGH:
            high += 1
        elif issue.severity == Severity.MEDIUM:
            medium += 1
        else:
            low += 1
    total = high + medium + low

    weighted = (
        high * SEVERITY_WEIGHTS["high"]
        + medium * SEVERITY_WEIGHTS["medium"]
        + low * SEVERITY_WEIGHTS["low"]
    )
    max_score = total * MAX_SEVERITY_WEIGHT or 1
    # round half up: floor(100 * weighted / max_score + 0.5), in integers
    percentage = (200 * weighted + max_score) // (2 * max_score)

    return RiskScore(
        total=total,
        high=high,
        medium=medium,
        low=low,
        percentage=min(100, percentage),
    )
