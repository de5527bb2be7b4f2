"""Redirect checks: HTTP to HTTPS upgrade, redirect chain security, accepted schemes."""

from typing import Dict, List, Optional
from urllib.parse import urlparse

from ..models import RawCheckResult


def _scheme(url: str) -> str:
    return urlparse(url).scheme.lower()


def upgrades_to_https(chain: List[str]) -> bool:
    """Whether a chain that started on plain HTTP ends on HTTPS."""
    return bool(chain) and _scheme(chain[-1]) == "https"


def chain_is_secure(chain: List[str]) -> bool:
    """Once a chain reaches HTTPS it must never step back to HTTP, and it must end on HTTPS."""
    reached_https = False
    for url in chain:
        scheme = _scheme(url)
        if scheme == "https":
            reached_https = True
        elif reached_https:
            return False
    return reached_https


def run_all(http_chain: Optional[List[str]], https_ok: bool) -> Dict[str, RawCheckResult]:
    """http_chain is the list of URLs visited starting from http://domain, or None if unreachable."""
    chain = http_chain or []
    return {
        "upgradeToHttps": RawCheckResult(result=upgrades_to_https(chain), data={"chain": chain}),
        "secureRedirectionChain": RawCheckResult(result=chain_is_secure(chain), data={"chain": chain}),
        "accepts": RawCheckResult(result=https_ok, data={"http": http_chain is not None, "https": https_ok}),
    }
