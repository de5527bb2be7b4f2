import pytest

from bankgrade.banks import read_banks
from bankgrade.errors import ConfigurationError
from bankgrade.storage import FileStore
from bankgrade.templates import load_templates, prepare_templates, substitute


def test_read_banks_sorted_by_country_then_name(tmp_path):
    store = FileStore(tmp_path)
    store.write("us.yaml", "name: United States\nbanks:\n  - {name: Wells Fargo, domain: wellsfargo.com}\n"
                           "  - {name: Chase, domain: chase.com}\n")
    store.write("GB.yml", "name: United Kingdom\nbanks:\n  - {name: Barclays, domain: barclays.co.uk}\n")
    store.write("README.md", "not a bank file")
    banks, countries = read_banks(store)
    assert [b.key for b in banks] == [("gb", "Barclays"), ("us", "Chase"), ("us", "Wells Fargo")]
    assert countries["gb"].name == "United Kingdom"


def test_invalid_bank_file(tmp_path):
    store = FileStore(tmp_path)
    store.write("gb.yaml", "banks:\n  - {name: Barclays}\n")
    with pytest.raises(ConfigurationError):
        read_banks(store)


def test_duplicate_bank(tmp_path):
    store = FileStore(tmp_path)
    store.write("gb.yaml", "name: UK\nbanks:\n  - {name: A, domain: a.com}\n  - {name: A, domain: b.com}\n")
    with pytest.raises(ConfigurationError):
        read_banks(store)


def test_no_bank_files(tmp_path):
    with pytest.raises(ConfigurationError):
        read_banks(FileStore(tmp_path))


def test_substitute_is_global_and_leaves_unknown_tokens():
    out = substitute("$name and $name, $upperName $other", {"name": "x", "upperName": "X"})
    assert out == "x and x, X $other"


def test_templates_get_header_and_footer(tmp_path):
    store = FileStore(tmp_path)
    store.write("templateHeader.html", "<h>$countryName</h>")
    store.write("templateFooter.html", "<f>")
    for name in ("bank", "country", "homepage"):
        store.write(f"{name}.html", f"$header {name} $footer")
    templates = load_templates(store)
    assert sorted(templates) == ["BANK", "COUNTRY", "HOMEPAGE"]
    assert templates["COUNTRY"] == "<h>$countryName</h> country <f>"


def test_missing_template():
    with pytest.raises(ConfigurationError):
        prepare_templates({"bank.html": "", "country.html": ""})


def test_banks_sharing_a_page_name(tmp_path):
    store = FileStore(tmp_path)
    store.write("gb.yaml", "name: UK\nbanks:\n  - {name: A&B, domain: a.com}\n  - {name: A B, domain: b.com}\n")
    with pytest.raises(ConfigurationError, match="a-b"):
        read_banks(store)


def test_same_page_name_in_different_countries(tmp_path):
    store = FileStore(tmp_path)
    store.write("gb.yaml", "name: UK\nbanks:\n  - {name: A&B, domain: a.co.uk}\n")
    store.write("ie.yaml", "name: Ireland\nbanks:\n  - {name: A B, domain: b.ie}\n")
    banks, _ = read_banks(store)
    assert [b.key for b in banks] == [("gb", "A&B"), ("ie", "A B")]
