import locale

from eventmap.utils.text import display_string, join_values, locale_string


def test_display_string_rules():
    assert display_string(None) == ""
    assert display_string([1, [2, None], (3,)]) == "1,2,,3"
    assert display_string("x") == "x"
    assert display_string(1.5) == "1.5"


def test_join_values_separator():
    assert join_values([1, None, 3], "-") == "1--3"
    assert join_values([], ",") == ""


def test_locale_string_c_locale_numbers(monkeypatch):
    conv = {
        "decimal_point": ".",
        "thousands_sep": "",
        "grouping": [],
        "mon_decimal_point": ".",
        "mon_thousands_sep": "",
        "mon_grouping": [],
    }
    monkeypatch.setattr(locale, "localeconv", lambda: conv)
    assert locale_string(1234567) == "1234567"
    assert locale_string(2.0) == "2"
    assert locale_string(1.5) == "1.5"
    assert locale_string(1.23456) == "1.235"
    assert locale_string(True) == "True"
    assert locale_string(None) == ""
    assert locale_string("abc") == "abc"


def test_locale_string_grouping(monkeypatch):
    conv = {
        "decimal_point": ".",
        "thousands_sep": ",",
        "grouping": [3, 0],
        "mon_decimal_point": ".",
        "mon_thousands_sep": ",",
        "mon_grouping": [3, 0],
    }
    monkeypatch.setattr(locale, "localeconv", lambda: conv)
    assert locale_string(1234567) == "1,234,567"
    assert locale_string(1234.5) == "1,234.5"
    assert locale_string([1000, 2]) == "1,000,2"
