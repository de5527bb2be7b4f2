"""Single render pass over all banks: pages, sitemap and the month's snapshot."""

import logging
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from .history import History
from .models import Bank, Card, Country, NormalizedResults, RawScanResults
from .normalizer import normalize
from .ranking import sort_countries
from .report_html import render_bank_page, render_card, render_country_page, render_homepage
from .scoring import compute_score, score_to_grade
from .storage import FileStore

logger = logging.getLogger(__name__)

SITEMAP_FILE = "sitemap.txt"


def url_safe(name: str) -> str:
    """Lowercase, space and '&' to '-', apostrophes removed."""
    return name.lower().replace(" ", "-").replace("&", "-").replace("'", "")


class SiteBuild(BaseModel):
    pages: Dict[str, str] = Field(default_factory=dict)
    sitemap: List[str] = Field(default_factory=list)
    snapshot: Dict[str, Dict[str, NormalizedResults]] = Field(default_factory=dict)
    cards: List[Card] = Field(default_factory=list)

    def sitemap_text(self) -> str:
        return "\n".join(self.sitemap)


def build_site(banks: List[Bank], countries: Mapping[str, Country],
               scans: Mapping[tuple, RawScanResults], history: Optional[History],
               templates: Mapping[str, str], base_url: str) -> SiteBuild:
    """Normalize, score and render every bank, then the country pages and homepage.

    scans is keyed by Bank.key; a bank without an entry is rendered from an
    empty result set.
    """
    history = history or {}
    build = SiteBuild()
    ordered_countries = sort_countries(countries.values())

    build.sitemap.append(base_url)
    for country in ordered_countries:
        build.snapshot[country.code] = {}
        build.sitemap.append(f"{base_url}{country.code}")

    country_cards: Dict[str, List[Card]] = {c.code: [] for c in ordered_countries}

    for bank in banks:
        raw = scans.get(bank.key)
        if raw is None:
            logger.warning("No scan results for %s (%s), using empty results", bank.name, bank.domain)
            raw = RawScanResults()

        results = normalize(raw)
        score = compute_score(results)
        grade = score_to_grade(score)
        url_name = url_safe(bank.name)
        code = bank.country.code

        build.snapshot.setdefault(code, {})[bank.name] = results
        bank_history = history.get(code, {}).get(bank.name)
        build.pages[f"{code}/{url_name}.html"] = render_bank_page(
            templates["BANK"], bank, url_name, score, grade, results, bank_history, base_url
        )
        build.sitemap.append(f"{base_url}{code}/{url_name}")

        card = Card(score=score, name=bank.name, country_code=code,
                    html=render_card(bank, url_name, score, grade, base_url))
        build.cards.append(card)
        country_cards.setdefault(code, []).append(card)
        logger.debug("%s: score %d, grade %s", bank.name, score, grade)

    for country in ordered_countries:
        build.pages[f"{country.code}.html"] = render_country_page(
            templates["COUNTRY"], country, country_cards[country.code], base_url
        )

    build.pages["index.html"] = render_homepage(
        templates["HOMEPAGE"], ordered_countries, build.cards, base_url
    )
    return build


def write_site(build: SiteBuild, store: FileStore) -> None:
    store.ensure_directory()
    for path in sorted(build.pages):
        store.write(path, build.pages[path])
    store.write(SITEMAP_FILE, build.sitemap_text())
    logger.info("Wrote %d pages to %s", len(build.pages), store.root)
