"""
app.py
──────
Equipment Health Forensics: command-line entry point.

  python app.py PROFILE.json [--as-of YYYY-MM-DD] [--log-level LEVEL]

Startup sequence:
  1. Configure logging from settings (or --log-level)
  2. Load and validate the inspection profile
  3. Assess and print the result bundle as JSON

Exit codes: 0 ok, 2 invalid or unsupported profile.
"""
import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from config.settings import settings
from src.data.models import EquipmentProfile
from src.engine.errors import UnsupportedEquipmentError
from src.engine.router import assess

logger = logging.getLogger("app")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assess one water heater or softener.")
    parser.add_argument("profile", type=Path, help="inspection profile (JSON)")
    parser.add_argument("--as-of", type=date.fromisoformat, default=None, help="plan start date")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="logging level")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    # ── 1. Logging ────────────────────────────────────────────────────────────
    logging.basicConfig(level=args.log_level.upper(), format=settings.LOG_FORMAT)

    # ── 2. Profile ────────────────────────────────────────────────────────────
    try:
        profile = EquipmentProfile.model_validate_json(args.profile.read_text())
    except ValidationError as exc:
        logger.error("Invalid profile %s:\n%s", args.profile, exc)
        return 2

    # ── 3. Assess ─────────────────────────────────────────────────────────────
    try:
        result = assess(profile, as_of=args.as_of)
    except UnsupportedEquipmentError as exc:
        logger.error("%s", exc)
        return 2

    print(result.model_dump_json(indent=settings.JSON_INDENT))
    return 0


if __name__ == "__main__":
    sys.exit(main())
