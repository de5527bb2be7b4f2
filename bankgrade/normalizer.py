"""Map raw scanner results into the fixed category/metric structure."""

from typing import Any, Iterable, Mapping

from .models import (
    CspResults,
    DnsResults,
    HttpResults,
    HttpsResults,
    MiscHeaderResults,
    NormalizedResults,
    RawCheckResult,
    RawScanResults,
    TlsResults,
)

HSTS_LONG_LENGTH_DAYS = 180  # roughly 6 months

# Source schemes that let any origin frame the page.
FRAMING_WILDCARDS = frozenset({"data:", "http:", "https:"})


def _passed(value: Any) -> bool:
    # Only a real True counts; absent data or stray strings are failures.
    return value is True


def _check(check: RawCheckResult) -> bool:
    return _passed(check.result)


def _leaked_value(check: RawCheckResult) -> str:
    """Empty string when the no-leak check passed, otherwise the leaked header value."""
    if _check(check):
        return ""
    value = check.data.get("value")
    if value is None:
        return ""
    return str(value)


def _hsts(raw: RawScanResults) -> tuple:
    enabled = _check(raw.hsts)
    if not enabled:
        return False, False, False
    age = raw.hsts.data.get("age")
    long_length = isinstance(age, (int, float)) and not isinstance(age, bool) and age >= HSTS_LONG_LENGTH_DAYS
    preloaded = _passed(raw.hsts.data.get("preloaded"))
    return True, long_length, preloaded


def _protocol_disabled(protocols: Mapping[str, Any], version: str) -> bool:
    if version not in protocols or not isinstance(protocols[version], bool):
        return False
    return not protocols[version]


def framing_protected(frame_ancestors: Iterable[str]) -> bool:
    """Whether a frame-ancestors source list restricts who may frame the page.

    The list must hold at least one source and none of the wildcard schemes.
    Sources are compared as whole space-delimited tokens.
    """
    if isinstance(frame_ancestors, str):
        frame_ancestors = [frame_ancestors]
    tokens = []
    for source in frame_ancestors or ():
        tokens.extend(str(source).split())
    if not tokens:
        return False
    return not any(token.lower() in FRAMING_WILDCARDS for token in tokens)


def parse_csp(raw: RawScanResults) -> CspResults:
    directives = raw.content_security_policy.data or {}
    framing = framing_protected(directives.get("frame-ancestors") or [])
    return CspResults(
        xss_protection=_check(raw.content_security_policy) or _check(raw.x_xss_protection),
        framing_protection=framing or _check(raw.x_frame_options),
    )


def normalize(raw: RawScanResults) -> NormalizedResults:
    """Convert one bank's scanner output into NormalizedResults.

    Never raises on missing optional data: a boolean metric without data is a
    failed check and an informational metric without data is empty.
    """
    hsts, hsts_long_length, hsts_preloaded = _hsts(raw)
    accepts = raw.accepts.data.get("https", raw.accepts.result)
    protocols = raw.tls_protocols.data or {}

    return NormalizedResults(
        https=HttpsResults(
            upgrade_http=_check(raw.upgrade_to_https),
            secure_redirection=_check(raw.secure_redirection_chain),
            accepts_https=_passed(accepts),
            hsts=hsts,
            hsts_long_length=hsts_long_length,
            hsts_preloaded=hsts_preloaded,
        ),
        tls=TlsResults(
            tls_1_3_enabled=_passed(protocols.get("1.3")),
            tls_1_1_disabled=_protocol_disabled(protocols, "1.1"),
            tls_1_0_disabled=_protocol_disabled(protocols, "1.0"),
            forward_secrecy=_check(raw.forward_secrecy),
            certificate_length=_check(raw.certificate),
        ),
        dns=DnsResults(
            dnssec=_check(raw.dnssec),
            caa=_check(raw.caa),
        ),
        csp=parse_csp(raw),
        http=HttpResults(
            feature_policy=_check(raw.feature_policy),
            referrer_policy=_check(raw.referrer_policy),
            mime_sniffing_protection=_check(raw.x_content_type_options),
        ),
        misc_headers=MiscHeaderResults(
            server=_leaked_value(raw.server),
            powered_by=_leaked_value(raw.powered_by),
            asp_version=_leaked_value(raw.asp_version),
        ),
    )
