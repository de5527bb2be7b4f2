"""Presentation ordering for bank cards and countries."""

from functools import cmp_to_key
from typing import Iterable, List

from .models import Card, Country


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_banks(a: Card, b: Card) -> int:
    """Higher score first, then name, then country code."""
    return (
        _cmp(b.score, a.score)
        or _cmp(a.name, b.name)
        or _cmp(a.country_code, b.country_code)
    )


def compare_countries(a: Country, b: Country) -> int:
    return _cmp(a.code, b.code)


def sort_cards(cards: Iterable[Card]) -> List[Card]:
    return sorted(cards, key=cmp_to_key(compare_banks))


def sort_countries(countries: Iterable[Country]) -> List[Country]:
    return sorted(countries, key=cmp_to_key(compare_countries))
