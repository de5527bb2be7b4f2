from bankgrade.history import load_history, append_snapshot
from bankgrade.models import HistoryEntry, RawScanResults
from bankgrade.site import build_site, url_safe, write_site
from bankgrade.storage import FileStore
from bankgrade.templates import prepare_templates
from conftest import make_raw

BASE = "https://bankgradesecurity.com/"


def _scans(banks):
    return {
        banks[0].key: make_raw(),
        banks[1].key: make_raw(dnssec={"result": False}, caa={"result": False}),
        banks[2].key: RawScanResults(),
    }


def test_url_safe():
    assert url_safe("Bank & Trust's") == "bank---trusts"
    assert url_safe("Marks & Spencer Bank") == "marks---spencer-bank"
    assert url_safe("HSBC UK") == "hsbc-uk"


def test_build_emits_every_page(banks, countries, templates):
    build = build_site(banks, countries, _scans(banks), {}, templates, BASE)
    assert sorted(build.pages) == [
        "gb.html",
        "gb/barclays.html",
        "gb/marks---spencer-bank.html",
        "ie.html",
        "ie/aib.html",
        "index.html",
    ]
    assert build.sitemap == [
        BASE,
        BASE + "gb",
        BASE + "ie",
        BASE + "gb/barclays",
        BASE + "gb/marks---spencer-bank",
        BASE + "ie/aib",
    ]
    assert build.sitemap_text().count("\n") == 5


def test_results_are_keyed_by_bank_not_position(banks, countries, templates):
    scans = _scans(banks)
    reordered = dict(reversed(list(scans.items())))
    a = build_site(banks, countries, scans, {}, templates, BASE)
    b = build_site(banks, countries, reordered, {}, templates, BASE)
    assert a.pages == b.pages
    assert {c.name: c.score for c in a.cards} == {"Barclays": 100, "Marks & Spencer Bank": 89, "AIB": 0}


def test_missing_scan_renders_empty_results(banks, countries, templates):
    build = build_site(banks, countries, {}, {}, templates, BASE)
    assert {c.score for c in build.cards} == {0}
    assert set(build.snapshot) == {"gb", "ie"}
    assert set(build.snapshot["gb"]) == {"Barclays", "Marks & Spencer Bank"}


def test_homepage_orders_cards_by_score(banks, countries, templates):
    build = build_site(banks, countries, _scans(banks), {}, templates, BASE)
    home = build.pages["index.html"]
    assert home.index(">Barclays<") < home.index(">Marks &amp; Spencer Bank<") < home.index(">AIB<")
    assert home.index(">United Kingdom</a>") < home.index(">Ireland</a>")
    country = build.pages["gb.html"]
    assert "AIB" not in country
    assert country.index(">Barclays<") < country.index(">Marks &amp; Spencer Bank<")


def test_bank_page_includes_history(banks, countries, templates):
    history = {"gb": {"Barclays": {"202311": HistoryEntry(score=44, grade="C")}}}
    build = build_site(banks, countries, _scans(banks), history, templates, BASE)
    assert "November 2023" in build.pages["gb/barclays.html"]
    assert "History" not in build.pages["ie/aib.html"]


def test_full_pipeline_is_idempotent(tmp_path, banks, countries, templates):
    outputs = []
    for run in ("one", "two"):
        history_store = FileStore(tmp_path / run / "history")
        history_store.write("202312.json", '{"gb": {"Barclays": {"DNS": {"CAA": true, "DNSSEC": false}}}}')
        history = load_history(history_store)
        build = build_site(banks, countries, _scans(banks), history, templates, BASE)
        output_store = FileStore(tmp_path / run / "docs")
        write_site(build, output_store)
        append_snapshot(history_store, build.snapshot, "202401")
        files = {}
        for path in sorted((tmp_path / run).rglob("*")):
            if path.is_file():
                files[str(path.relative_to(tmp_path / run))] = path.read_bytes()
        outputs.append(files)
    assert outputs[0] == outputs[1]
    assert "docs/sitemap.txt" in outputs[0]
    assert "docs/gb/barclays.html" in outputs[0]
    assert "history/202401.json" in outputs[0]


def test_write_site_is_rerunnable(tmp_path, banks, countries, templates):
    build = build_site(banks, countries, _scans(banks), {}, templates, BASE)
    store = FileStore(tmp_path / "docs")
    write_site(build, store)
    write_site(build, store)
    assert store.read("sitemap.txt") == build.sitemap_text()


def test_base_url_reaches_every_page(banks, countries):
    templates = prepare_templates({
        "templateHeader.html": "<a href=$baseUrl>home</a>",
        "templateFooter.html": "<a href=${baseUrl}sitemap.txt>sitemap</a>",
        "bank.html": "$header<link href=$baseUrl$countryCode/$urlSafeName>$footer",
        "country.html": "$header<link href=$baseUrl$countryCode>$footer",
        "homepage.html": "$header$footer",
    })
    base = "https://staging.example/"
    build = build_site(banks, countries, _scans(banks), {}, templates, base)
    assert build.pages["gb/barclays.html"] == (
        "<a href=https://staging.example/>home</a>"
        "<link href=https://staging.example/gb/barclays>"
        "<a href=https://staging.example/sitemap.txt>sitemap</a>"
    )
    assert "<link href=https://staging.example/ie>" in build.pages["ie.html"]
    assert build.pages["index.html"].startswith("<a href=https://staging.example/>home</a>")
    assert not any("bankgradesecurity.com" in page for page in build.pages.values())
