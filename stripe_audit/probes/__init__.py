"""The fixed set of account probes, in report order."""

from typing import List

from ..stripe_api import StripeSession
from .api_usage import ApiUsageProbe
from .base import Probe
from .card_data import CardDataProbe
from .idempotency import IdempotencyProbe
from .personal_data import PersonalDataProbe
from .webhooks import WebhookProbe

PROBE_TYPES = (
    ApiUsageProbe,
    WebhookProbe,
    IdempotencyProbe,
    CardDataProbe,
    PersonalDataProbe,
)


def build_probes(session: StripeSession) -> List[Probe]:
    return [probe_type(session) for probe_type in PROBE_TYPES]


__all__ = [
    "PROBE_TYPES",
    "Probe",
    "ApiUsageProbe",
    "WebhookProbe",
    "IdempotencyProbe",
    "CardDataProbe",
    "PersonalDataProbe",
    "build_probes",
]
