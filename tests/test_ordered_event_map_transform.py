import math

from eventmap import OrderedEventMap


def test_map_passes_value_then_key(abc_map):
    assert abc_map.map(lambda v, k: v * 2) == [2, 4, 6]
    assert abc_map.map(lambda v, k: f"{k}{v}") == ["a1", "b2", "c3"]


def test_filter_returns_new_map(abc_map):
    result = abc_map.filter(lambda v, k: v > 1)
    assert isinstance(result, OrderedEventMap)
    assert list(result.items()) == [("b", 2), ("c", 3)]
    assert abc_map.size == 3
    assert result is not abc_map


def test_filter_does_not_emit_on_receiver(abc_map, recorder):
    recorder.attach(abc_map)
    abc_map.filter(lambda v, k: True)
    assert recorder.calls == []


def test_flat_depths():
    m = OrderedEventMap([("a", 1), ("b", [2, [3, [4]]]), ("c", "ab"), ("d", (5, 6))])
    assert m.flat() == [1, 2, [3, [4]], "ab", 5, 6]
    assert m.flat(2) == [1, 2, 3, [4], "ab", 5, 6]
    assert m.flat(math.inf) == [1, 2, 3, 4, "ab", 5, 6]
    assert m.flat(0) == [1, [2, [3, [4]]], "ab", (5, 6)]


def test_flat_map(abc_map):
    assert abc_map.flat_map(lambda v, k: [k, v]) == ["a", 1, "b", 2, "c", 3]
    assert abc_map.flat_map(lambda v, k: v) == [1, 2, 3]
    assert abc_map.flat_map(lambda v, k: [[v]]) == [[1], [2], [3]]


def test_reduce_and_reduce_right(abc_map):
    assert abc_map.reduce(lambda acc, v, k: acc + k, "") == "abc"
    assert abc_map.reduce_right(lambda acc, v, k: acc + k, "") == "cba"
    assert abc_map.reduce(lambda acc, v, k: acc + v, 0) == 6
    assert OrderedEventMap().reduce(lambda acc, v, k: acc + v, 42) == 42


def test_join_and_to_string():
    m = OrderedEventMap([("a", 1), ("b", None), ("c", [2, 3])])
    assert m.join() == "1,,2,3"
    assert m.join(" - ") == "1 -  - 2,3"
    assert m.to_string() == "1,,2,3"
    assert OrderedEventMap().join() == ""


def test_to_locale_string_uses_locale_rendering(monkeypatch):
    import locale

    conv = {
        "decimal_point": ".",
        "thousands_sep": ",",
        "grouping": [3, 0],
        "mon_decimal_point": ".",
        "mon_thousands_sep": ",",
        "mon_grouping": [3, 0],
    }
    monkeypatch.setattr(locale, "localeconv", lambda: conv)
    m = OrderedEventMap([("a", 1234), ("b", 0.5), ("c", "x")])
    assert m.to_locale_string() == "1,234,0.5,x"
