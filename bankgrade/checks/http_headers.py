"""HTTP security header checks: CSP, HSTS, framing, XSS filter, MIME sniffing, referrer and feature policy."""

import re
from typing import Dict, List

from ..models import RawCheckResult

SECONDS_PER_DAY = 86400

SAFE_REFERRER_POLICIES = {
    "no-referrer",
    "same-origin",
    "strict-origin",
    "strict-origin-when-cross-origin",
}


def parse_csp(value: str) -> Dict[str, List[str]]:
    """Parse a Content-Security-Policy value into {directive: [sources]}.

    The first occurrence of a directive wins, as browsers do.
    """
    directives: Dict[str, List[str]] = {}
    for part in value.split(";"):
        tokens = part.split()
        if not tokens:
            continue
        name = tokens[0].lower()
        if name not in directives:
            directives[name] = tokens[1:]
    return directives


def parse_hsts(value: str) -> Dict[str, object]:
    """Parse Strict-Transport-Security into {age (days), preloaded, includeSubDomains}."""
    details = {"age": 0, "preloaded": False, "includeSubDomains": False}
    for part in value.split(";"):
        part = part.strip()
        lower = part.lower()
        if lower.startswith("max-age"):
            match = re.search(r'max-age\s*=\s*"?(\d+)"?', part, re.I)
            if match:
                details["age"] = int(match.group(1)) // SECONDS_PER_DAY
        elif lower == "preload":
            details["preloaded"] = True
        elif lower == "includesubdomains":
            details["includeSubDomains"] = True
    return details


def check_hsts(headers: Dict[str, str]) -> RawCheckResult:
    hsts = headers.get("strict-transport-security", "")
    if not hsts:
        return RawCheckResult(result=False)
    details = parse_hsts(hsts)
    return RawCheckResult(result=details["age"] > 0, data=details)


def check_csp(headers: Dict[str, str]) -> RawCheckResult:
    csp = headers.get("content-security-policy", "")
    if not csp:
        return RawCheckResult(result=False)
    directives = parse_csp(csp)
    return RawCheckResult(result=bool(directives), data=directives)


def check_x_xss_protection(headers: Dict[str, str]) -> RawCheckResult:
    value = headers.get("x-xss-protection", "").replace(" ", "").lower()
    return RawCheckResult(result=value == "1;mode=block", data={"value": value})


def check_x_frame_options(headers: Dict[str, str]) -> RawCheckResult:
    value = headers.get("x-frame-options", "").strip().lower()
    return RawCheckResult(result=value in ("deny", "sameorigin"), data={"value": value})


def check_x_content_type_options(headers: Dict[str, str]) -> RawCheckResult:
    value = headers.get("x-content-type-options", "").strip().lower()
    return RawCheckResult(result=value == "nosniff", data={"value": value})


def check_referrer_policy(headers: Dict[str, str]) -> RawCheckResult:
    value = headers.get("referrer-policy", "")
    # Several comma-separated values may be sent; the last understood one applies.
    policies = [p.strip().lower() for p in value.split(",") if p.strip()]
    return RawCheckResult(
        result=bool(policies) and policies[-1] in SAFE_REFERRER_POLICIES,
        data={"value": value},
    )


def check_feature_policy(headers: Dict[str, str]) -> RawCheckResult:
    value = headers.get("permissions-policy", "") or headers.get("feature-policy", "")
    return RawCheckResult(result=bool(value.strip()), data={"value": value})


def run_all(headers: Dict[str, str]) -> Dict[str, RawCheckResult]:
    """Header checks keyed by scanner check name. Header names must be lowercase."""
    return {
        "hsts": check_hsts(headers),
        "contentSecurityPolicy": check_csp(headers),
        "xXssProtection": check_x_xss_protection(headers),
        "xFrameOptions": check_x_frame_options(headers),
        "xContentTypeOptions": check_x_content_type_options(headers),
        "referrerPolicy": check_referrer_policy(headers),
        "featurePolicy": check_feature_policy(headers),
    }
