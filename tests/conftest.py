"""Shared pytest fixtures: raw scanner output, banks and templates."""

import pytest

from bankgrade.models import Bank, Country, RawScanResults
from bankgrade.templates import prepare_templates

SCORABLE_METRICS = 18


def passing_raw_dict() -> dict:
    """Scanner output in its JSON shape where every check passes."""
    return {
        "upgradeToHttps": {"result": True},
        "secureRedirectionChain": {"result": True},
        "accepts": {"result": True, "data": {"http": True, "https": True}},
        "hsts": {"result": True, "data": {"age": 365, "preloaded": True}},
        "tlsProtocols": {"result": True, "data": {"1.3": True, "1.2": True, "1.1": False, "1.0": False}},
        "forwardSecrecy": {"result": True},
        "certificate": {"result": True},
        "dnssec": {"result": True},
        "caa": {"result": True},
        "contentSecurityPolicy": {"result": True, "data": {"frame-ancestors": ["'self'"]}},
        "xXssProtection": {"result": True},
        "xFrameOptions": {"result": True},
        "featurePolicy": {"result": True},
        "referrerPolicy": {"result": True},
        "xContentTypeOptions": {"result": True},
        "server": {"result": True, "data": {"value": "nginx"}},
        "poweredBy": {"result": True},
        "aspVersion": {"result": True},
    }


def make_raw(**overrides) -> RawScanResults:
    """Passing scanner output with some checks replaced, keyed by scanner name."""
    raw = passing_raw_dict()
    raw.update(overrides)
    return RawScanResults.model_validate(raw)


@pytest.fixture
def passing_raw():
    return make_raw()


@pytest.fixture
def countries():
    return {
        "gb": Country(code="gb", name="United Kingdom"),
        "ie": Country(code="ie", name="Ireland"),
    }


@pytest.fixture
def banks(countries):
    return [
        Bank(name="Barclays", domain="barclays.co.uk", country=countries["gb"]),
        Bank(name="Marks & Spencer Bank", domain="bank.marksandspencer.com", country=countries["gb"]),
        Bank(name="AIB", domain="aib.ie", country=countries["ie"]),
    ]


@pytest.fixture
def templates():
    return prepare_templates({
        "templateHeader.html": "<header>BGS</header>",
        "templateFooter.html": "<footer>end</footer>",
        "bank.html": "$header<h1>$name</h1><p>$explanation</p><a href=/$countryCode/$urlSafeName>"
                     "$upperCountryCode $countryName $domain</a><b>$score $grade</b>$main$footer",
        "country.html": "$header<h1>$countryName ($countryCode)</h1>$main$footer",
        "homepage.html": "$header<nav>$countries</nav>$main$footer",
    })
