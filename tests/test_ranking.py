from bankgrade.models import Card, Country
from bankgrade.ranking import compare_banks, compare_countries, sort_cards, sort_countries


def _card(score, name, code="gb"):
    return Card(score=score, name=name, country_code=code, html=f"<a>{name}</a>")


def test_cards_sort_by_score_then_name():
    cards = [_card(80, "B"), _card(90, "A"), _card(80, "A")]
    ordered = sort_cards(cards)
    assert [(c.name, c.score) for c in ordered] == [("A", 90), ("A", 80), ("B", 80)]


def test_name_comparison_is_case_sensitive():
    ordered = sort_cards([_card(50, "abc"), _card(50, "Abc"), _card(50, "ABC")])
    assert [c.name for c in ordered] == ["ABC", "Abc", "abc"]


def test_same_name_in_two_countries_orders_by_code():
    assert compare_banks(_card(70, "Citibank", "us"), _card(70, "Citibank", "gb")) == 1
    assert compare_banks(_card(70, "Citibank", "gb"), _card(70, "Citibank", "gb")) == 0


def test_ordering_does_not_depend_on_input_order():
    cards = [_card(10, "Z"), _card(100, "Y"), _card(55, "M"), _card(55, "K")]
    assert sort_cards(cards) == sort_cards(list(reversed(cards)))


def test_countries_sort_by_code():
    countries = [Country(code="us", name="United States"), Country(code="gb", name="United Kingdom"),
                 Country(code="ie", name="Ireland")]
    assert [c.code for c in sort_countries(countries)] == ["gb", "ie", "us"]
    assert compare_countries(countries[1], countries[2]) == -1
