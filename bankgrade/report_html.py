"""Static HTML report pages: bank results, country listings and the homepage."""

import calendar
import html
from typing import Iterable, Mapping, Optional

from .history import parse_year_month
from .models import Bank, Card, Country, HistoryEntry, NormalizedResults
from .ranking import sort_cards, sort_countries
from .scoring import grade_explanation
from .templates import substitute

SECTION_TOP = "<section>\n<div class=top>{category}</div>\n"
SECTION_BOTTOM = "</section>\n"


def _esc(text) -> str:
    return html.escape(str(text), quote=True)


def _metric_html(metric: str, value) -> str:
    if isinstance(value, bool):
        css = ("A" if value else "E") + " check"
        check = "&check;" if value else "&cross;"
    elif value == "":
        css, check = "italic", "hidden"
    else:
        css, check = "", _esc(value)

    return (
        '<div class=measure>'
        f'<span>{_esc(metric)}</span>'
        '<div class=results>'
        f'<div class="result {css}">{check}</div>'
        '</div>'
        '</div>\n'
    )


def month_label(year_month: str) -> str:
    year, month = parse_year_month(year_month)
    return f"{calendar.month_name[month]} {year}"


def render_history(history: Mapping[str, HistoryEntry]) -> str:
    out = SECTION_TOP.format(category="History")
    for year_month in sorted(history):
        entry = history[year_month]
        out += (
            '<div class=history>'
            f'<div class="grade {_esc(entry.grade)}">{entry.score}</div>'
            f'<p>{month_label(year_month)}</p>'
            '</div>\n'
        )
    return out + SECTION_BOTTOM


def render_results_section(results: NormalizedResults,
                           history: Optional[Mapping[str, HistoryEntry]] = None) -> str:
    """Main section of a bank page: every category in order, then the history timeline."""
    out = ""
    for category, metrics in results.as_mapping().items():
        out += SECTION_TOP.format(category=_esc(category))
        for metric, value in metrics.items():
            out += _metric_html(metric, value)
        out += SECTION_BOTTOM

    if history:
        out += render_history(history)
    return out


def bank_url(base_url: str, country_code: str, url_name: str) -> str:
    return f"{base_url}{country_code}/{url_name}"


def render_card(bank: Bank, url_name: str, score: int, grade: str, base_url: str) -> str:
    code = bank.country.code
    return (
        f'<a class=card href={bank_url(base_url, _esc(code), _esc(url_name))}>'
        f'<div class="grade {grade}">{score}</div>'
        f'<div class=name>{_esc(bank.name)}</div>'
        f'<div class=details>{_esc(code.upper())}</div><div class=details>{_esc(bank.domain)}</div>'
        '</a>'
    )


def render_bank_page(template: str, bank: Bank, url_name: str, score: int, grade: str,
                     results: NormalizedResults,
                     history: Optional[Mapping[str, HistoryEntry]] = None,
                     base_url: str = "/") -> str:
    country = bank.country
    return substitute(template, {
        "baseUrl": base_url,
        "countryCode": _esc(country.code),
        "upperCountryCode": _esc(country.code.upper()),
        "name": _esc(bank.name),
        "score": score,
        "grade": grade,
        "countryName": _esc(country.name),
        "domain": _esc(bank.domain),
        "explanation": _esc(f"{bank.name} {grade_explanation(grade)}"),
        "urlSafeName": _esc(url_name),
        "main": render_results_section(results, history),
    })


def render_country_page(template: str, country: Country, cards: Iterable[Card],
                        base_url: str = "/") -> str:
    return substitute(template, {
        "baseUrl": base_url,
        "countryCode": _esc(country.code),
        "countryName": _esc(country.name),
        "main": "\n".join(card.html for card in sort_cards(cards)),
    })


def render_homepage(template: str, countries: Iterable[Country], cards: Iterable[Card],
                    base_url: str) -> str:
    links = "\n".join(
        f"<a href={base_url}{_esc(c.code)}>{_esc(c.name)}</a>" for c in sort_countries(countries)
    )
    main = "".join(card.html + "\n" for card in sort_cards(cards))
    return substitute(template, {"baseUrl": base_url, "countries": links, "main": main})
