"""Tests for toolview.shared.formatters.partial_json: streaming argument parsing."""

from toolview.shared.formatters.partial_json import (
    extract_string_field,
    parse_partial_json,
    scrape_string_field,
)


class TestParsePartialJson:
    def test_complete_object(self):
        assert parse_partial_json('{"a": 1, "b": "x"}') == {"a": 1, "b": "x"}

    def test_truncated_key_dropped(self):
        assert parse_partial_json('{"path": "/src/app.py", "limi') == {"path": "/src/app.py"}

    def test_open_string_closed(self):
        assert parse_partial_json('{"path": "/src/ap') == {"path": "/src/ap"}

    def test_nested_containers_closed(self):
        assert parse_partial_json('{"a": {"b": [1, 2') == {"a": {"b": [1, 2]}}

    def test_dangling_colon(self):
        assert parse_partial_json('{"path":') == {"path": None}

    def test_trailing_comma(self):
        assert parse_partial_json('{"a": 1,') == {"a": 1}

    def test_escaped_quote_inside_string(self):
        assert parse_partial_json('{"cmd": "echo \\"hi') == {"cmd": 'echo "hi'}

    def test_dangling_escape(self):
        assert parse_partial_json('{"cmd": "a\\') == {"cmd": "a"}

    def test_non_object_yields_empty(self):
        assert parse_partial_json("[1, 2]") == {}
        assert parse_partial_json('"text"') == {}

    def test_empty_input(self):
        assert parse_partial_json("") == {}
        assert parse_partial_json(None) == {}
        assert parse_partial_json("   ") == {}

    def test_garbage(self):
        assert parse_partial_json("not json at all") == {}


class TestScrapeStringField:
    def test_finds_pair(self):
        assert scrape_string_field('junk "path": "x.py" more', ("path",)) == "x.py"

    def test_earliest_occurrence_wins(self):
        text = '"file_path": "a.py", "path": "b.py"'
        assert scrape_string_field(text, ("path", "file_path")) == "a.py"

    def test_no_match(self):
        assert scrape_string_field('{"other": 1}', ("path",)) is None
        assert scrape_string_field(None, ("path",)) is None


class TestExtractStringField:
    def test_arguments_preferred(self):
        assert extract_string_field({"path": "a"}, '{"path": "b"}', ("path",)) == "a"

    def test_key_order(self):
        args = {"file_path": "second", "path": "first"}
        assert extract_string_field(args, None, ("path", "file_path")) == "first"

    def test_non_string_values_skipped(self):
        assert extract_string_field({"path": 3, "file": "f.txt"}, None, ("path", "file")) == "f.txt"

    def test_tolerant_parse(self):
        assert extract_string_field({}, '{"url": "https://x.org", "ti', ("url",)) == "https://x.org"

    def test_regex_fallback(self):
        assert extract_string_field(None, 'xx "path": "q.py" }}}', ("path",)) == "q.py"

    def test_nothing_found(self):
        assert extract_string_field({}, None, ("path",)) is None
