"""Server exposure checks: Server version, X-Powered-By and ASP.NET version disclosure."""

import re
from typing import Dict

from ..models import RawCheckResult


def check_server(headers: Dict[str, str]) -> RawCheckResult:
    # A bare product name is fine, a version number is a leak.
    server = headers.get("server", "")
    if server and re.search(r'\d+\.', server):
        return RawCheckResult(result=False, data={"value": server})
    return RawCheckResult(result=True, data={"value": server})


def _check_absent(headers: Dict[str, str], header: str) -> RawCheckResult:
    value = headers.get(header, "")
    return RawCheckResult(result=not value, data={"value": value})


def run_all(headers: Dict[str, str]) -> Dict[str, RawCheckResult]:
    return {
        "server": check_server(headers),
        "poweredBy": _check_absent(headers, "x-powered-by"),
        "aspVersion": _check_absent(headers, "x-aspnet-version"),
    }
