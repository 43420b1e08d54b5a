"""Tests for the indentation-stack parser."""

import pytest

from plumar_core import ParseError, ParseErrorKind, parse
from plumar_core.values import Null, VBool, VFloat, VInt, VMap, VSeq, VStr, to_python


# ---------------------------------------------------------------------------
# Scalars and flat mappings
# ---------------------------------------------------------------------------

def test_flat_scalars():
    doc = parse("a: 1\nb: 2.5\nc: true\nd: false\ne: null\n")
    assert doc == VMap({
        "a": VInt(1),
        "b": VFloat(2.5),
        "c": VBool(True),
        "d": VBool(False),
        "e": Null,
    })

def test_empty_document():
    assert parse("") == VMap()
    assert parse("\n  \n# only comments\n") == VMap()

def test_key_order_preserved():
    doc = parse("z: 1\na: 2\nm: 3\n")
    assert list(doc.entries) == ["z", "a", "m"]

def test_colon_inside_quotes_does_not_split():
    assert parse('k: "a:b"') == VMap({"k": VStr("a:b")})

def test_comment_stripped_only_outside_quotes():
    assert parse('k: "a#b" # trailing comment') == VMap({"k": VStr("a#b")})

def test_value_with_further_colons():
    assert to_python(parse("url: https://example.com:8080/x")) == {
        "url": "https://example.com:8080/x"
    }

def test_crlf_line_endings():
    assert to_python(parse("a: 1\r\nb:\r\n  c: 2\r\n")) == {"a": 1, "b": {"c": 2}}

def test_tabs_count_as_two_spaces():
    assert to_python(parse("a:\n\tb: 1\n")) == {"a": {"b": 1}}

def test_explicit_empty_containers():
    assert parse("a: []\nb: {}\n") == VMap({"a": VSeq(), "b": VMap()})

def test_long_digit_value_parses_as_text():
    digits = "1" * 5000
    assert to_python(parse(f"k: {digits}\n")) == {"k": digits}
    assert to_python(parse(f"k:\n  - -{digits}\n")) == {"k": ["-" + digits]}


# ---------------------------------------------------------------------------
# Nesting
# ---------------------------------------------------------------------------

def test_list_of_scalars():
    assert parse("list:\n  - x\n  - y\n") == VMap({"list": VSeq([VStr("x"), VStr("y")])})

def test_nested_mapping():
    assert parse("a:\n  b: 1\n  c: 2\n") == VMap({"a": VMap({"b": VInt(1), "c": VInt(2)})})

def test_dedent_returns_to_parent():
    text = "a:\n  b:\n    c: 1\n  d: 2\ne: 3\n"
    assert to_python(parse(text)) == {"a": {"b": {"c": 1}, "d": 2}, "e": 3}

def test_empty_value_followed_by_dash_line_is_sequence():
    assert parse("a:\n  - 1\n")["a"] == VSeq([VInt(1)])

def test_empty_value_followed_by_key_line_is_mapping():
    assert parse("a:\n  b: 1\n")["a"] == VMap({"b": VInt(1)})

def test_empty_value_with_nothing_deeper_is_empty_mapping():
    assert parse("a:\nb: 2\n")["a"] == VMap()
    assert parse("a:")["a"] == VMap()

def test_lookahead_skips_comments_and_blanks():
    text = "a:\n\n  # comment\n  - x\n"
    assert to_python(parse(text)) == {"a": ["x"]}

def test_deeper_than_one_unit_is_accepted():
    assert to_python(parse("a:\n    b: 1\n")) == {"a": {"b": 1}}


# ---------------------------------------------------------------------------
# Sequence items
# ---------------------------------------------------------------------------

def test_list_of_mappings_with_continuation_keys():
    text = (
        "people:\n"
        "  - name: Ann\n"
        "    age: 30\n"
        "  - name: Bob\n"
        "    age: 41\n"
    )
    assert to_python(parse(text)) == {
        "people": [{"name": "Ann", "age": 30}, {"name": "Bob", "age": 41}]
    }

def test_each_dash_with_colon_starts_a_new_element():
    text = "items:\n  - a: 1\n  - b: 2\n"
    assert to_python(parse(text)) == {"items": [{"a": 1}, {"b": 2}]}

def test_bare_dash_opens_mapping_item():
    text = "items:\n  -\n    a: 1\n    b: 2\n  -\n    a: 3\n"
    assert to_python(parse(text)) == {"items": [{"a": 1, "b": 2}, {"a": 3}]}

def test_bare_dash_without_body_is_empty_mapping():
    assert to_python(parse("items:\n  -\n  - x\n")) == {"items": [{}, "x"]}

def test_bare_dash_opens_nested_sequence():
    text = "matrix:\n  -\n    - 1\n    - 2\n  -\n    - 3\n"
    assert to_python(parse(text)) == {"matrix": [[1, 2], [3]]}

def test_quoted_item_with_colon_is_scalar():
    assert to_python(parse('l:\n  - "a:b"\n')) == {"l": ["a:b"]}

def test_dash_item_key_with_nested_block():
    text = "l:\n  - tags:\n      - a\n      - b\n    name: x\n"
    assert to_python(parse(text)) == {"l": [{"tags": ["a", "b"], "name": "x"}]}

def test_dash_item_key_with_nothing_nested():
    assert to_python(parse("l:\n  - k:\n")) == {"l": [{"k": {}}]}

def test_mixed_item_kinds():
    text = "l:\n  - 1\n  - two\n  - k: v\n  - []\n"
    assert to_python(parse(text)) == {"l": [1, "two", {"k": "v"}, []]}

def test_three_levels_sequences_of_sequences_of_mappings():
    text = (
        "grid:\n"
        "  -\n"
        "    -\n"
        "      x: 1\n"
        "      y: 2\n"
        "    - name: n\n"
        "      z: 3\n"
        "  -\n"
        "    - plain\n"
    )
    assert to_python(parse(text)) == {
        "grid": [[{"x": 1, "y": 2}, {"name": "n", "z": 3}], ["plain"]]
    }


# ---------------------------------------------------------------------------
# Duplicate keys
# ---------------------------------------------------------------------------

def test_duplicate_key_last_write_wins():
    # Current behaviour: the later assignment replaces the earlier one.
    doc = parse("a: 1\nb: 2\na: 3\n")
    assert to_python(doc) == {"a": 3, "b": 2}
    assert list(doc.entries) == ["a", "b"]

def test_duplicate_key_strict_mode():
    with pytest.raises(ParseError) as info:
        parse("a: 1\na: 2\n", strict_keys=True)
    assert info.value.kind is ParseErrorKind.DUPLICATE_KEY
    assert info.value.line == 2


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_odd_indentation_reports_line():
    with pytest.raises(ParseError) as info:
        parse("a:\n  b: 1\n   c: 2\n")
    err = info.value
    assert err.kind is ParseErrorKind.INDENTATION
    assert err.line == 3
    assert "(line 3)" in str(err)

def test_missing_colon():
    with pytest.raises(ParseError) as info:
        parse("a: 1\njust words\n")
    assert info.value.kind is ParseErrorKind.MISSING_COLON
    assert info.value.line == 2

def test_empty_key():
    with pytest.raises(ParseError) as info:
        parse(": value\n")
    assert info.value.kind is ParseErrorKind.EMPTY_KEY
    assert info.value.line == 1

def test_empty_key_in_list_item():
    with pytest.raises(ParseError) as info:
        parse("l:\n  - : v\n")
    assert info.value.kind is ParseErrorKind.EMPTY_KEY

def test_dash_outside_sequence():
    with pytest.raises(ParseError) as info:
        parse("a: 1\n- x\n")
    assert info.value.kind is ParseErrorKind.ARRAY_CONTEXT
    assert info.value.line == 2

def test_dash_at_key_indentation_is_outside_sequence():
    with pytest.raises(ParseError) as info:
        parse("list:\n- x\n")
    assert info.value.kind is ParseErrorKind.ARRAY_CONTEXT

def test_key_inside_sequence():
    with pytest.raises(ParseError) as info:
        parse("l:\n  - x\n  k: v\n")
    assert info.value.kind is ParseErrorKind.ARRAY_CONTEXT
    assert info.value.line == 3

def test_error_carries_caller_identity():
    with pytest.raises(ParseError) as info:
        parse("oops\n", file_identity="site/plumar.config.yml", context_label="config")
    err = info.value
    assert err.file_identity == "site/plumar.config.yml"
    assert err.context_label == "config"
    assert str(err).startswith("site/plumar.config.yml: config parse failed")

def test_first_error_aborts():
    with pytest.raises(ParseError) as info:
        parse("bad line\n   also bad\n")
    assert info.value.line == 1

def test_non_text_input():
    with pytest.raises(ParseError) as info:
        parse(b"a: 1")
    assert info.value.kind is ParseErrorKind.INVALID_INPUT
    assert info.value.line is None

def test_parse_error_chains_cause():
    with pytest.raises(ParseError) as info:
        parse("x\n")
    assert info.value.__cause__ is not None

def test_unexpected_failure_is_reported_as_parse_error(monkeypatch):
    def broken(text):
        raise RuntimeError("boom")

    monkeypatch.setattr("plumar_core.parser.coerce_scalar", broken)
    with pytest.raises(ParseError) as info:
        parse("a:\n  b: 1\n", file_identity="site.yml")
    assert info.value.kind is ParseErrorKind.UNEXPECTED
    assert info.value.line == 2
    assert info.value.file_identity == "site.yml"
    assert isinstance(info.value.__cause__, RuntimeError)
    assert "boom" in str(info.value)


# ---------------------------------------------------------------------------
# Statelessness
# ---------------------------------------------------------------------------

def test_calls_do_not_share_state():
    first = parse("a:\n  b: 1\n")
    second = parse("a:\n  b: 1\n")
    assert first == second
    assert first["a"] is not second["a"]

def test_deep_nesting_does_not_recurse():
    depth = 3000
    text = "".join(f"{'  ' * i}k{i}:\n" for i in range(depth))
    doc = parse(text)
    node = doc
    for i in range(depth):
        node = node[f"k{i}"]
    assert node == VMap()
