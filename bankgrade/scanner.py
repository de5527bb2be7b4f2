"""Scanner: runs every check against a bank's domain, one bank at a time."""

import asyncio
import json
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import aiohttp
from pydantic import ValidationError

from .checks import dns_records, http_headers, redirects, server_exposure, ssl_tls
from .errors import ConfigurationError, ScannerUnavailable
from .models import Bank, RawCheckResult, RawScanResults

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 15

Scans = Dict[Tuple[str, str], RawScanResults]


async def fetch_site(url: str) -> Tuple[List[str], Dict[str, str]]:
    """Fetch url following redirects; returns (visited urls, lowercase headers of the final response)."""
    timeout = aiohttp.ClientTimeout(total=FETCH_TIMEOUT)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(url, allow_redirects=True) as resp:
            chain = [str(h.url) for h in resp.history] + [str(resp.url)]
            headers = {k.lower(): v for k, v in resp.headers.items()}
            return chain, headers


async def _try_fetch(url: str) -> Optional[Tuple[List[str], Dict[str, str]]]:
    try:
        return await fetch_site(url)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.debug("Fetch failed for %s: %s: %s", url, type(e).__name__, e)
        return None


async def scan_domain(domain: str) -> RawScanResults:
    """Run all checks for one domain.

    Raises ScannerUnavailable when the site answers on neither scheme. A
    single failing probe only leaves its own checks empty.
    """
    https = await _try_fetch(f"https://{domain}")
    http = await _try_fetch(f"http://{domain}")
    if https is None and http is None:
        raise ScannerUnavailable(domain, "no response over HTTP or HTTPS")

    headers = https[1] if https is not None else {}
    results: Dict[str, RawCheckResult] = {}
    results.update(redirects.run_all(http[0] if http is not None else None, https is not None))
    results.update(http_headers.run_all(headers))
    results.update(server_exposure.run_all(headers))

    probes = await asyncio.gather(
        ssl_tls.run_all(domain),
        dns_records.run_all(domain),
        return_exceptions=True,
    )
    for probe in probes:
        if isinstance(probe, Exception):
            logger.warning("Probe failed for %s: %s: %s", domain, type(probe).__name__, probe)
            continue
        results.update(probe)

    return RawScanResults.model_validate(results)


async def scan_banks(banks: Iterable[Bank], delay: float) -> Scans:
    """Scan banks sequentially with a fixed delay between them.

    Results are keyed by Bank.key. A bank that cannot be scanned gets an
    empty result set and the run continues.
    """
    scans: Scans = {}
    banks = list(banks)
    for i, bank in enumerate(banks):
        logger.info("Scanning %s (%s) [%d/%d]", bank.name, bank.domain, i + 1, len(banks))
        try:
            scans[bank.key] = await scan_domain(bank.domain)
        except ScannerUnavailable as e:
            logger.warning("%s, using empty results", e)
            scans[bank.key] = RawScanResults()
        except Exception:
            logger.exception("Scan of %s (%s) failed, using empty results", bank.name, bank.domain)
            scans[bank.key] = RawScanResults()
        if i + 1 < len(banks):
            await asyncio.sleep(delay)
    return scans


def dump_scans(scans: Mapping[Tuple[str, str], RawScanResults]) -> str:
    """Serialize scans as {countryCode: {bankName: raw results}}."""
    out: Dict[str, Dict[str, dict]] = {}
    for code, name in sorted(scans):
        out.setdefault(code, {})[name] = scans[(code, name)].model_dump(by_alias=True)
    return json.dumps(out, indent=4, ensure_ascii=False) + "\n"


def load_scans(content: str) -> Scans:
    """Parse a raw scan file.

    The file must be {countryCode: {bankName: raw results}}. A bank whose
    results do not validate is logged and gets an empty result set.
    """
    try:
        data = json.loads(content)
        entries = [
            (code, name, raw)
            for code, banks in data.items()
            for name, raw in banks.items()
        ]
    except (ValueError, AttributeError) as e:
        raise ConfigurationError(f"Invalid raw scan file: {e}") from e

    scans: Scans = {}
    for code, name, raw in entries:
        try:
            scans[(code, name)] = RawScanResults.model_validate(raw)
        except ValidationError as e:
            logger.warning("Invalid raw results for %s in %s, using empty results: %s", name, code, e)
            scans[(code, name)] = RawScanResults()
    return scans
