"""
Central configuration and tunable constants.

- The API key can be supplied on the command line or via STRIPE_SECRET_KEY.
- Severity weights and probe thresholds are centralized for easy tuning.
- Page sizes bound every listing call; probes only ever look at a recent sample.
"""

# Risk score weights: high = 10, medium = 5, low = 1
SEVERITY_WEIGHTS = {
    "high": 10,
    "medium": 5,
    "low": 1,
}
MAX_SEVERITY_WEIGHT = 10

# Console/HTML colouring of the risk percentage
RISK_BAND_HIGH = 70
RISK_BAND_MEDIUM = 40

# Credentials
API_KEY_ENV_VAR = "STRIPE_SECRET_KEY"
VALID_KEY_PREFIXES = ("sk_", "rk_")
TEST_KEY_PREFIXES = ("sk_test_", "rk_test_")
STRIPE_API_VERSION = "2024-11-20.acacia"

# Page sizes for the bounded "recent" samples
CHARGES_PAGE_SIZE = 50
REFUNDS_PAGE_SIZE = 20
WEBHOOKS_PAGE_SIZE = 100
PAYMENT_INTENTS_PAGE_SIZE = 20
PAYMENT_METHODS_PAGE_SIZE = 10
CUSTOMERS_PAGE_SIZE = 10

# Two charges for the same customer and amount closer than this are suspicious
DUPLICATE_WINDOW_SECONDS = 300

# Below this share of 3DS-requesting payment intents, SCA coverage is flagged
SCA_MIN_RATIO = 0.5
SCA_REQUEST_MODES = ("automatic", "any")

# Metadata key fragments that suggest sensitive personal data
SENSITIVE_METADATA_TERMS = (
    "ssn",
    "social_security",
    "passport",
    "drivers_license",
    "credit_score",
)

DEFAULT_HTML_REPORT = "stripe-audit-report.html"
