# main.py
"""
CLI entrypoint for the auditor.

- Reads the Stripe secret key from --key or the STRIPE_SECRET_KEY environment variable.
- Runs every probe against the live account and reports the result as a console
  summary, or as a JSON, CSV, or HTML report.
- Exits with status 1 when high-severity issues are found or the scan cannot run.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

import stripe
from rich.console import Console

from .analyzer import RiskAnalyzer
from .config import API_KEY_ENV_VAR, DEFAULT_HTML_REPORT
from .models import ScanResult
from .stripe_api import ConfigurationError, StripeSession
from .utils import RENDERERS, print_console_report, save_report

logger = logging.getLogger("stripe_audit")


def run_scan(api_key: str, console: Console) -> ScanResult:
    """
    Build a session for the key and run the full audit.
    """
    session = StripeSession(api_key)
    mode = "test" if session.is_test_mode else "live"
    logger.info("Scanning Stripe account (%s mode)", mode)
    with console.status("Scanning Stripe integration..."):
        return RiskAnalyzer(session).analyze()


def emit_report(result: ScanResult, fmt: str, path: Optional[str], console: Console) -> None:
    if fmt == "console":
        print_console_report(result, console=console)
        return
    if fmt == "html":
        path = path or DEFAULT_HTML_REPORT
    if path:
        save_report(result, fmt, path)
        console.print(f"\nReport saved to: {path}")
    else:
        sys.stdout.write(RENDERERS[fmt](result))
        sys.stdout.write("\n")


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(
        prog="stripe-audit",
        description="Scan your Stripe integration for security risks and best practice violations.",
    )
    p.add_argument(
        "-k", "--key",
        help=f"Stripe secret key (or set {API_KEY_ENV_VAR})",
    )
    p.add_argument(
        "-o", "--output",
        choices=["console", "json", "csv", "html"],
        default="console",
        help="Output format (default: console)",
    )
    p.add_argument(
        "-f", "--file",
        help=f"Output file path for json/csv/html (html default: {DEFAULT_HTML_REPORT})",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    console = Console(stderr=args.output != "console")

    api_key = args.key or os.environ.get(API_KEY_ENV_VAR)
    if not api_key:
        console.print(
            f"[red]Error:[/red] Stripe secret key required. Use --key or set the "
            f"{API_KEY_ENV_VAR} environment variable."
        )
        return 1

    try:
        result = run_scan(api_key, console)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    except stripe.AuthenticationError as e:
        logger.error("Scan failed: %s", e)
        console.print("[red]Invalid API key.[/red] Please check your Stripe secret key.")
        return 1

    emit_report(result, args.output, args.file, console)

    if result.risk_score.high > 0:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
