"""Bank registry: one YAML file per country.

banks/gb.yaml::

    name: United Kingdom
    banks:
      - name: Example Bank
        domain: examplebank.co.uk
"""

import logging
from typing import Dict, List, Tuple

import yaml
from pydantic import BaseModel, ValidationError

from .errors import ConfigurationError
from .models import Bank, Country
from .site import url_safe
from .storage import FileStore

logger = logging.getLogger(__name__)


class _BankEntry(BaseModel):
    name: str
    domain: str


class _CountryFile(BaseModel):
    name: str
    banks: List[_BankEntry] = []


def sort_banks(banks: List[Bank]) -> List[Bank]:
    """Processing order: country code, then bank name."""
    return sorted(banks, key=lambda b: b.key)


def parse_country(code: str, content: str) -> Tuple[Country, List[Bank]]:
    try:
        parsed = _CountryFile.model_validate(yaml.safe_load(content) or {})
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigurationError(f"Invalid bank file for {code}: {e}") from e
    country = Country(code=code, name=parsed.name)
    banks = [Bank(name=b.name, domain=b.domain, country=country) for b in parsed.banks]
    return country, banks


def read_banks(store: FileStore) -> Tuple[List[Bank], Dict[str, Country]]:
    """Load every <code>.yaml file; returns (banks in processing order, {code: Country})."""
    banks: List[Bank] = []
    countries: Dict[str, Country] = {}
    for key in store.keys():
        code, _, ext = key.rpartition(".")
        if ext not in ("yaml", "yml") or not code:
            continue
        country, country_banks = parse_country(code.lower(), store.read(key))
        countries[country.code] = country
        banks.extend(country_banks)

    if not countries:
        raise ConfigurationError(f"No bank files found in {store.root}")

    seen = set()
    pages = {}
    for bank in banks:
        if bank.key in seen:
            raise ConfigurationError(f"Duplicate bank {bank.name!r} in {bank.country.code}")
        seen.add(bank.key)
        page = (bank.country.code, url_safe(bank.name))
        if page in pages:
            raise ConfigurationError(
                f"Banks {pages[page]!r} and {bank.name!r} in {bank.country.code} "
                f"share the page name {page[1]!r}"
            )
        pages[page] = bank.name

    logger.debug("Read %d banks from %d countries", len(banks), len(countries))
    return sort_banks(banks), countries
