"""TLS checks: supported protocol versions, forward secrecy and the certificate key."""

import asyncio
import socket
import ssl
from typing import Dict, Optional

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa

from ..models import RawCheckResult

TIMEOUT = 5

PROTOCOLS = {
    "1.3": ssl.TLSVersion.TLSv1_3,
    "1.2": ssl.TLSVersion.TLSv1_2,
    "1.1": ssl.TLSVersion.TLSv1_1,
    "1.0": ssl.TLSVersion.TLSv1,
}

MIN_RSA_BITS = 2048
MIN_EC_BITS = 256


def _handshake(hostname: str, version: Optional[ssl.TLSVersion] = None,
               verify: bool = True, port: int = 443) -> Dict[str, object]:
    """Connect via TLS, pinned to one protocol version if given, and return session info."""
    ctx = ssl.create_default_context()
    if not verify:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    if version is not None:
        if version < ssl.TLSVersion.TLSv1_2:
            # Legacy protocols need the lowest OpenSSL security level to be offered at all.
            ctx.set_ciphers("DEFAULT:@SECLEVEL=0")
        ctx.minimum_version = version
        ctx.maximum_version = version
    with socket.create_connection((hostname, port), timeout=TIMEOUT) as sock:
        with ctx.wrap_socket(sock, server_hostname=hostname) as ssock:
            return {
                "protocol": ssock.version(),
                "cipher": ssock.cipher(),
                "der_cert": ssock.getpeercert(binary_form=True),
            }


def _supports(hostname: str, version: ssl.TLSVersion) -> bool:
    try:
        _handshake(hostname, version, verify=False)
        return True
    except (ssl.SSLError, OSError, ValueError):
        return False


def has_forward_secrecy(protocol: Optional[str], cipher_name: Optional[str]) -> bool:
    """TLS 1.3 always has it; older protocols need an ephemeral (EC)DHE key exchange."""
    if protocol == "TLSv1.3":
        return True
    name = (cipher_name or "").upper()
    return "ECDHE" in name or "DHE" in name


def certificate_key(der_cert: bytes) -> Dict[str, object]:
    """Key algorithm and size of a DER certificate, and whether it meets the length policy.

    RSA and DSA keys need 2048 bits and EC keys 256 bits. EdDSA keys have a
    fixed size and always pass. Raises ValueError on an unparseable certificate.
    """
    key = x509.load_der_x509_certificate(der_cert).public_key()
    if isinstance(key, (rsa.RSAPublicKey, dsa.DSAPublicKey)):
        algorithm = "RSA" if isinstance(key, rsa.RSAPublicKey) else "DSA"
        return {"algorithm": algorithm, "bits": key.key_size, "ok": key.key_size >= MIN_RSA_BITS}
    if isinstance(key, ec.EllipticCurvePublicKey):
        return {"algorithm": "EC", "bits": key.key_size, "ok": key.key_size >= MIN_EC_BITS}
    if isinstance(key, (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
        return {"algorithm": "EdDSA", "bits": None, "ok": True}
    return {"algorithm": type(key).__name__, "bits": None, "ok": False}


async def _run(func, *args):
    return await asyncio.wait_for(
        asyncio.get_running_loop().run_in_executor(None, func, *args),
        timeout=TIMEOUT * 2,
    )


async def check_protocols(hostname: str) -> RawCheckResult:
    support = {}
    for label, version in PROTOCOLS.items():
        try:
            support[label] = await _run(_supports, hostname, version)
        except asyncio.TimeoutError:
            support[label] = False
    return RawCheckResult(result=support.get("1.3", False), data=support)


def _check_certificate(der_cert: Optional[bytes]) -> RawCheckResult:
    if not der_cert:
        return RawCheckResult(result=False, data={"error": "no certificate"})
    try:
        key = certificate_key(der_cert)
    except ValueError as e:
        return RawCheckResult(result=False, data={"error": str(e)})
    return RawCheckResult(
        result=key["ok"],
        data={"algorithm": key["algorithm"], "bits": key["bits"]},
    )


async def check_session(hostname: str) -> Dict[str, RawCheckResult]:
    """Forward secrecy and certificate key checks from one verified default handshake.

    A certificate that fails verification fails the key check too.
    """
    try:
        info = await _run(_handshake, hostname)
    except ssl.SSLCertVerificationError as e:
        return {
            "forwardSecrecy": RawCheckResult(result=False),
            "certificate": RawCheckResult(result=False, data={"error": str(e)}),
        }
    except (ssl.SSLError, OSError, asyncio.TimeoutError) as e:
        error = {"error": type(e).__name__}
        return {
            "forwardSecrecy": RawCheckResult(result=False, data=error),
            "certificate": RawCheckResult(result=False, data=error),
        }

    cipher = info["cipher"] or (None, None, None)
    return {
        "forwardSecrecy": RawCheckResult(
            result=has_forward_secrecy(info["protocol"], cipher[0]),
            data={"protocol": info["protocol"], "cipher": cipher[0]},
        ),
        "certificate": _check_certificate(info["der_cert"]),
    }


async def run_all(hostname: str) -> Dict[str, RawCheckResult]:
    results = {"tlsProtocols": await check_protocols(hostname)}
    results.update(await check_session(hostname))
    return results
