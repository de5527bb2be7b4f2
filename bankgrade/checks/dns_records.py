"""DNS security checks: DNSSEC and CAA records."""

import asyncio
from typing import Dict

import dns.exception
import dns.flags
import dns.message
import dns.query
import dns.rdatatype
import dns.resolver

from ..models import RawCheckResult

TIMEOUT = 5
VALIDATING_RESOLVER = "8.8.8.8"


async def check_caa(domain: str) -> RawCheckResult:
    """CAA records limit which CAs can issue certificates for the domain."""
    def _resolve():
        try:
            answers = dns.resolver.resolve(domain, "CAA", lifetime=TIMEOUT)
            return [str(r) for r in answers]
        except dns.exception.DNSException:
            return []
    records = await asyncio.get_running_loop().run_in_executor(None, _resolve)
    return RawCheckResult(result=bool(records), data={"records": records[:5]})


async def check_dnssec(domain: str) -> RawCheckResult:
    """DNSSEC is on when a validating resolver sets the AD flag."""
    def _resolve():
        try:
            request = dns.message.make_query(domain, dns.rdatatype.A, want_dnssec=True)
            request.flags |= dns.flags.AD
            response = dns.query.udp(request, VALIDATING_RESOLVER, timeout=TIMEOUT)
            return bool(response.flags & dns.flags.AD)
        except (dns.exception.DNSException, OSError):
            return False
    is_signed = await asyncio.get_running_loop().run_in_executor(None, _resolve)
    return RawCheckResult(result=is_signed)


async def run_all(domain: str) -> Dict[str, RawCheckResult]:
    caa, dnssec = await asyncio.gather(check_caa(domain), check_dnssec(domain))
    return {"caa": caa, "dnssec": dnssec}
