"""Monthly history archives.

Each archive ``YYYYMM.json`` holds ``{countryCode: {bankName: results}}`` with
the normalized results of that month. Scores are never stored: every load
rescores the archived results so history always follows the current formula.
"""

import json
import logging
import re
from datetime import datetime
from typing import Dict, Mapping, Optional, Union

from pydantic import StrictBool, StrictStr, TypeAdapter, ValidationError

from .errors import MalformedArchive
from .models import HistoryEntry, NormalizedResults
from .scoring import compute_score, score_to_grade
from .storage import FileStore

logger = logging.getLogger(__name__)

ARCHIVE_KEY_RE = re.compile(r"^(\d{4})(\d{2})\.json$")

Snapshot = Mapping[str, Mapping[str, NormalizedResults]]
History = Dict[str, Dict[str, Dict[str, HistoryEntry]]]

# Archives are validated loosely so months written with an older metric set
# still load; the scorer only cares about bool vs str values.
_archive_adapter = TypeAdapter(
    Dict[str, Dict[str, Dict[str, Dict[str, Union[StrictBool, StrictStr]]]]]
)


def year_month_key(when: Optional[datetime] = None) -> str:
    when = when or datetime.now()
    return f"{when.year}{when.month:02d}"


def parse_year_month(key: str) -> tuple:
    """Split a 'YYYYMM' key into (year, month)."""
    if len(key) != 6 or not key.isdigit():
        raise ValueError(f"Invalid year-month key: {key!r}")
    year, month = int(key[:4]), int(key[4:])
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in key: {key!r}")
    return year, month


def read_archive(store: FileStore, key: str) -> dict:
    try:
        return _archive_adapter.validate_json(store.read(key))
    except ValidationError as e:
        raise MalformedArchive(key, f"{e.error_count()} validation error(s)") from e
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedArchive(key, f"{type(e).__name__}: {e}") from e


def load_history(store: FileStore, strict: bool = False) -> History:
    """Build {country: {bank: {YYYYMM: HistoryEntry}}} from every archive in the store.

    Months are visited in ascending order so each timeline is chronological.
    A malformed archive is skipped with a warning unless strict is set.
    """
    history: History = {}
    months = []
    for key in store.keys():
        match = ARCHIVE_KEY_RE.match(key)
        if not match:
            logger.debug("Ignoring non-archive file %s", key)
            continue
        scan_date = match.group(1) + match.group(2)
        try:
            parse_year_month(scan_date)
        except ValueError:
            logger.warning("Ignoring archive with invalid month: %s", key)
            continue
        months.append((scan_date, key))

    for scan_date, key in sorted(months):
        try:
            archive = read_archive(store, key)
        except MalformedArchive as e:
            if strict:
                raise
            logger.warning("Skipping history archive: %s", e)
            continue

        for country_code, banks in archive.items():
            country = history.setdefault(country_code, {})
            for bank_name, results in banks.items():
                score = compute_score(results)
                country.setdefault(bank_name, {})[scan_date] = HistoryEntry(
                    score=score, grade=score_to_grade(score)
                )

    logger.info("Loaded %d history archive(s)", len(months))
    return history


def dump_snapshot(results: Snapshot) -> str:
    """Serialize a snapshot with sorted countries and banks, metrics in declaration order."""
    ordered = {}
    for country_code in sorted(results):
        banks = results[country_code]
        ordered[country_code] = {name: banks[name].as_mapping() for name in sorted(banks)}
    return json.dumps(ordered, indent=4, ensure_ascii=False) + "\n"


def append_snapshot(store: FileStore, results: Snapshot, year_month: str) -> str:
    """Write this run's results as the archive for year_month; returns the key."""
    parse_year_month(year_month)
    key = f"{year_month}.json"
    store.write(key, dump_snapshot(results))
    logger.info("Archived %d countries to %s", len(results), key)
    return key
