"""Bank Grade Security command line.

Usage (from repo root):
    python -m bankgrade run
    python -m bankgrade scan --out raw.json
    python -m bankgrade build --raw raw.json --month 202405
"""

import argparse
import asyncio
import logging
import math
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .banks import read_banks
from .config import Settings
from .errors import BankGradeError
from .history import append_snapshot, load_history, year_month_key
from .scanner import Scans, dump_scans, load_scans, scan_banks
from .site import build_site, write_site
from .storage import FileStore
from .templates import load_templates

logger = logging.getLogger("bankgrade")


def print_welcome(banks: int, countries: int, delay: float) -> None:
    minutes = math.ceil(banks * delay / 60)
    logger.info("~~ Bank Grade Security")
    logger.info("Found %d banks from %d countries", banks, countries)
    logger.info("Estimated time for scanning is %d minutes", minutes)


def run_scan(settings: Settings) -> Scans:
    banks, countries = read_banks(FileStore(settings.banks_dir))
    print_welcome(len(banks), len(countries), settings.scan_delay)
    return asyncio.run(scan_banks(banks, settings.scan_delay))


def run_build(settings: Settings, scans: Scans) -> None:
    """Render the site from raw scans and archive this month's normalized results."""
    banks, countries = read_banks(FileStore(settings.banks_dir))
    templates = load_templates(FileStore(settings.templates_dir))
    history_store = FileStore(settings.history_dir)
    history = load_history(history_store, strict=settings.strict_history)

    build = build_site(banks, countries, scans, history, templates, settings.base_url)
    write_site(build, FileStore(settings.output_dir))
    append_snapshot(history_store, build.snapshot, settings.month or year_month_key())


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bankgrade", description="Scan bank websites and build the report site.")
    p.add_argument("--banks-dir", default=None)
    p.add_argument("--templates-dir", default=None)
    p.add_argument("--history-dir", default=None)
    p.add_argument("--output-dir", default=None)
    p.add_argument("--base-url", default=None)
    p.add_argument("--delay", type=float, default=None, help="Seconds to wait between banks")
    p.add_argument("--month", default=None, help="Archive month as YYYYMM (default: current month)")
    p.add_argument(
        "--strict-history",
        action="store_true",
        default=None,
        help="Fail instead of skipping malformed history archives",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = p.add_subparsers(dest="command", required=True)
    scan = sub.add_parser("scan", help="Scan every bank and save raw results")
    scan.add_argument("--out", required=True)
    build = sub.add_parser("build", help="Build the site from saved raw results")
    build.add_argument("--raw", required=True)
    run = sub.add_parser("run", help="Scan and build")
    run.add_argument("--out", default=None, help="Also save raw results here")
    return p


def _settings(args: argparse.Namespace) -> Settings:
    overrides = {
        "banks_dir": args.banks_dir,
        "templates_dir": args.templates_dir,
        "history_dir": args.history_dir,
        "output_dir": args.output_dir,
        "base_url": args.base_url,
        "scan_delay": args.delay,
        "month": args.month,
        "strict_history": args.strict_history,
        "log_level": "DEBUG" if args.verbose else None,
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv=None) -> int:
    args = _parser().parse_args(argv)
    try:
        settings = _settings(args)
    except ValidationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "build":
            scans = load_scans(Path(args.raw).read_text(encoding="utf-8"))
            run_build(settings, scans)
            return 0

        scans = run_scan(settings)
        out: Optional[str] = args.out
        if out:
            Path(out).write_text(dump_scans(scans), encoding="utf-8")
            logger.info("Saved raw results to %s", out)
        if args.command == "run":
            run_build(settings, scans)
        return 0
    except (BankGradeError, OSError) as e:
        logger.error("%s", e)
        return 1
