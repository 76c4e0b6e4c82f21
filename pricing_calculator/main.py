"""
SaaS Pricing Calculator — Main Entry Point

Price a payload from a JSON file (CLI):
    python -m pricing_calculator inputs.json

Run as an API server (for the frontend):
    python -m pricing_calculator --serve
    # or: uvicorn pricing_calculator.api:app --reload --port 8000

Or import and run programmatically:
    from pricing_calculator.main import run
    result = run("path/to/inputs.json")
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from pricing_calculator.config import get_settings
from pricing_calculator.engine import calculate_pricing
from pricing_calculator.utils.logger import setup_logging


def run(file_path: str = "") -> dict:
    """Price the payload in *file_path* (or stdin) and return the result envelope."""
    setup_logging(get_settings().log_level)
    logger = logging.getLogger(__name__)

    source = Path(file_path).read_text(encoding="utf-8") if file_path else sys.stdin.read()
    try:
        payload = json.loads(source)
    except json.JSONDecodeError as e:
        logger.error(f"Input is not valid JSON: {e}")
        payload = None

    result = calculate_pricing(payload)
    _print_summary(result)
    return result


def _print_summary(result: dict) -> None:
    """Log a human-readable summary of the calculation."""
    logger = logging.getLogger(__name__)

    if not result["success"]:
        error = result["error"]
        logger.info(f"  Invalid input: {error['field']} ({error['reason']})")
        return

    data = result["data"]
    logger.info("-" * 60)
    logger.info("  PRICING REPORT")
    logger.info("-" * 60)
    logger.info(f"  Monthly Price:  ${data['monthlyPrice']:,}")
    logger.info(f"  Annual Price:   ${data['annualPrice']:,}")
    logger.info(f"  Savings:        ${data['savings']:,}")
    per_user = data["pricePerUser"]
    logger.info(f"  Per User:       {'n/a' if per_user is None else f'${per_user:,}'}")
    for tier in data["tiers"]:
        logger.info(f"  {tier['name']:<15} ${tier['price']:,}/mo")
    metrics = data.get("metrics")
    if metrics:
        logger.info(f"  LTV:            {metrics['ltv'] if metrics['ltv'] is not None else 'n/a'}")
        logger.info(f"  LTV:CAC:        {metrics['ltvCacRatio'] if metrics['ltvCacRatio'] is not None else 'n/a'}")
        logger.info(f"  Payback:        {metrics['paybackPeriodMonths']} months")
    for rec in data["recommendations"]:
        logger.info(f"    • {rec}")
    logger.info("-" * 60)


def serve(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Start the FastAPI server (for frontend communication)."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("pricing_calculator.api:app", host=host, port=port, reload=settings.debug)


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if "--serve" in args:
        serve()
        return
    result = run(args[0] if args else "")
    print(json.dumps(result, indent=2))
    if not result["success"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
