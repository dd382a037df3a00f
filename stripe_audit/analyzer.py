"""
Scan orchestration.

RiskAnalyzer runs every probe concurrently against one Stripe account,
concatenates their issues in declared probe order, looks up the account id on
a best-effort basis, and scores the result.
"""

import concurrent.futures
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import stripe

from .models import Issue, ScanResult
from .probes import Probe, build_probes
from .scoring import score
from .stripe_api import StripeSession, retrieve_account_live, to_plain

logger = logging.getLogger(__name__)


class RiskAnalyzer:
    def __init__(self, session: StripeSession, probes: Optional[Sequence[Probe]] = None):
        self.session = session
        self.probes: List[Probe] = list(probes) if probes is not None else build_probes(session)

    def analyze(self) -> ScanResult:
        logger.info("Running %d probes", len(self.probes))

        # Probes handle expected API failures themselves; anything raised here is fatal.
        with concurrent.futures.ThreadPoolExecutor(max_workers=max(1, len(self.probes))) as pool:
            futures = [pool.submit(probe.scan) for probe in self.probes]
            results = [fut.result() for fut in futures]

        issues: List[Issue] = []
        for probe_issues in results:
            issues.extend(probe_issues)

        risk_score = score(issues)
        account_id = self._account_id()
        logger.info(
            "Scan finished: %d issue(s), risk %d%%", risk_score.total, risk_score.percentage
        )

        return ScanResult(
            issues=tuple(issues),
            risk_score=risk_score,
            timestamp=datetime.now(timezone.utc),
            account_id=account_id,
        )

    def _account_id(self) -> Optional[str]:
        try:
            account = to_plain(retrieve_account_live(self.session))
        except stripe.StripeError as e:
            logger.debug("Account lookup failed: %s", e)
            return None
        return account.get("id") if account else None
