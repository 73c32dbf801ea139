"""Tests for the lenient normalizer."""

import json

from llm_parse.normalize import normalize, repair_quotes, strip_trailing_commas


class TestRepairQuotes:
    def test_single_quoted_value(self):
        assert repair_quotes("{\"name\":'John Doe'}") == '{"name":"John Doe"}'

    def test_single_quoted_keys_and_values(self):
        assert repair_quotes("{'a': 'b'}") == '{"a": "b"}'

    def test_escaped_single_quote_unescaped(self):
        assert repair_quotes(r"['it\'s']") == "[\"it's\"]"

    def test_embedded_double_quote_escaped(self):
        result = repair_quotes("""['say "hi"']""")
        assert result == r'["say \"hi\""]'
        assert json.loads(result) == ['say "hi"']

    def test_other_escapes_pass_through(self):
        result = repair_quotes(r"['a\nb']")
        assert json.loads(result) == ["a\nb"]

    def test_double_quoted_untouched(self):
        fragment = '{"school": "St. John\'s", "q": "\\"x\\""}'
        assert repair_quotes(fragment) == fragment

    def test_idempotent_on_valid_json(self):
        fragment = '{"a": [1, "two", {"b": null}], "c": "it\'s"}'
        assert repair_quotes(repair_quotes(fragment)) == fragment


class TestStripTrailingCommas:
    def test_object(self):
        assert strip_trailing_commas('{"a": 1,}') == '{"a": 1}'

    def test_array_with_whitespace(self):
        assert strip_trailing_commas("[1, 2, 3 ,\n  ]") == "[1, 2, 3 \n  ]"

    def test_multiple_levels(self):
        result = strip_trailing_commas('{"a": [1, 2,], "b": {"c": 3,},}')
        assert json.loads(result) == {"a": [1, 2], "b": {"c": 3}}

    def test_keeps_separating_commas(self):
        fragment = '{"a": 1, "b": [1, 2]}'
        assert strip_trailing_commas(fragment) == fragment

    def test_comma_inside_string_kept(self):
        fragment = '{"a": "x,]"}'
        assert strip_trailing_commas(fragment) == fragment


class TestNormalize:
    def test_both_repairs(self):
        result = normalize("{'a': [1, 2,], 'b': 'c',}")
        assert json.loads(result) == {"a": [1, 2], "b": "c"}

    def test_valid_json_unchanged(self):
        fragment = '[{"a": 1}, {"b": "two"}]'
        assert normalize(fragment) == fragment

    def test_unquoted_keys_not_repaired(self):
        assert normalize("{a: 1}") == "{a: 1}"
