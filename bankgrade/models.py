"""Data models: raw scanner results, the normalized category schema, history and cards."""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MetricValue = Union[bool, str]


class RawCheckResult(BaseModel):
    """One check as reported by the scanner.

    Keys other than result and data are folded into data, so a check written
    as {"http": true, "https": true} reads the same as one with those keys
    under data.
    """

    model_config = ConfigDict(frozen=True)

    result: Optional[Union[bool, str]] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def fold_extra_keys(cls, values):
        if not isinstance(values, dict):
            return values
        extra = {k: v for k, v in values.items() if k not in ("result", "data")}
        data = values.get("data")
        if not extra or not isinstance(data, (dict, type(None))):
            return values
        merged = dict(extra)
        merged.update(data or {})
        return {"result": values.get("result"), "data": merged}

    @field_validator("data", mode="before")
    @classmethod
    def missing_data(cls, v):
        return {} if v is None else v


class RawScanResults(BaseModel):
    """Every check the scanner reports for one domain, keyed by the scanner's names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    upgrade_to_https: RawCheckResult = Field(default_factory=RawCheckResult, alias="upgradeToHttps")
    secure_redirection_chain: RawCheckResult = Field(default_factory=RawCheckResult, alias="secureRedirectionChain")
    accepts: RawCheckResult = Field(default_factory=RawCheckResult)
    hsts: RawCheckResult = Field(default_factory=RawCheckResult)
    tls_protocols: RawCheckResult = Field(default_factory=RawCheckResult, alias="tlsProtocols")
    forward_secrecy: RawCheckResult = Field(default_factory=RawCheckResult, alias="forwardSecrecy")
    certificate: RawCheckResult = Field(default_factory=RawCheckResult)
    dnssec: RawCheckResult = Field(default_factory=RawCheckResult)
    caa: RawCheckResult = Field(default_factory=RawCheckResult)
    content_security_policy: RawCheckResult = Field(default_factory=RawCheckResult, alias="contentSecurityPolicy")
    x_xss_protection: RawCheckResult = Field(default_factory=RawCheckResult, alias="xXssProtection")
    x_frame_options: RawCheckResult = Field(default_factory=RawCheckResult, alias="xFrameOptions")
    feature_policy: RawCheckResult = Field(default_factory=RawCheckResult, alias="featurePolicy")
    referrer_policy: RawCheckResult = Field(default_factory=RawCheckResult, alias="referrerPolicy")
    x_content_type_options: RawCheckResult = Field(default_factory=RawCheckResult, alias="xContentTypeOptions")
    server: RawCheckResult = Field(default_factory=RawCheckResult)
    powered_by: RawCheckResult = Field(default_factory=RawCheckResult, alias="poweredBy")
    asp_version: RawCheckResult = Field(default_factory=RawCheckResult, alias="aspVersion")

    @model_validator(mode="before")
    @classmethod
    def drop_null_checks(cls, values):
        # A null check is a check with no data.
        if isinstance(values, dict):
            return {k: v for k, v in values.items() if v is not None}
        return values


# Normalized schema. Field order is render order.

class _Category(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class HttpsResults(_Category):
    upgrade_http: bool = Field(alias="Upgrade HTTP")
    secure_redirection: bool = Field(alias="Secure Redirection")
    accepts_https: bool = Field(alias="Accepts HTTPS")
    hsts: bool = Field(alias="HSTS")
    hsts_long_length: bool = Field(alias="HSTS Long Length")
    hsts_preloaded: bool = Field(alias="HSTS Preloaded")


class TlsResults(_Category):
    tls_1_3_enabled: bool = Field(alias="TLS 1.3 Enabled")
    tls_1_1_disabled: bool = Field(alias="TLS 1.1 Disabled")
    tls_1_0_disabled: bool = Field(alias="TLS 1.0 Disabled")
    forward_secrecy: bool = Field(alias="Forward Secrecy")
    certificate_length: bool = Field(alias="Certificate Length")


class DnsResults(_Category):
    dnssec: bool = Field(alias="DNSSEC")
    caa: bool = Field(alias="CAA")


class CspResults(_Category):
    xss_protection: bool = Field(alias="XSS Protection")
    framing_protection: bool = Field(alias="Framing Protection")


class HttpResults(_Category):
    feature_policy: bool = Field(alias="Feature Policy")
    referrer_policy: bool = Field(alias="Referrer Policy")
    mime_sniffing_protection: bool = Field(alias="MIME Type Sniffing Protection")


class MiscHeaderResults(_Category):
    server: str = Field(alias="Server")
    powered_by: str = Field(alias="X-Powered-By")
    asp_version: str = Field(alias="ASP.NET Version")


class NormalizedResults(_Category):
    """Fixed category -> metric -> value structure for one bank."""

    https: HttpsResults = Field(alias="HTTPS")
    tls: TlsResults = Field(alias="TLS")
    dns: DnsResults = Field(alias="DNS")
    csp: CspResults = Field(alias="CSP")
    http: HttpResults = Field(alias="HTTP")
    misc_headers: MiscHeaderResults = Field(alias="Miscellaneous Headers")

    def as_mapping(self) -> Dict[str, Dict[str, MetricValue]]:
        """Display-name mapping in declaration order, as archived and rendered."""
        return self.model_dump(by_alias=True)


class Country(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str


class Bank(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    domain: str
    country: Country

    @property
    def key(self) -> tuple:
        return (self.country.code, self.name)


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int
    grade: str


class Card(BaseModel):
    """Bank summary used for ordering and rendering listing pages."""

    model_config = ConfigDict(frozen=True)

    score: int
    name: str
    country_code: str
    html: str
