import pytest

from services.config_store_service.src.properties import PropertiesSyntaxError, parse_properties


def test_separators_and_whitespace():
    """Test that '=', ':' and whitespace all separate keys from values."""
    text = "a=1\nb : 2\n  c   3\nd=\ne\n"
    assert parse_properties(text) == {"a": "1", "b": "2", "c": "3", "d": "", "e": ""}


def test_comments_and_blank_lines_are_skipped():
    text = "# comment\n! other comment\n\n   \nkey=value\n  # indented comment\n"
    assert parse_properties(text) == {"key": "value"}


def test_line_continuation():
    text = "groups=/\\d+: /{id}, \\\n    (.*)\\\\.js: *.js\nnext=1"
    properties = parse_properties(text)
    assert properties["groups"] == "/d+: /{id}, (.*)\\.js: *.js"
    assert properties["next"] == "1"


def test_escaped_backslash_does_not_continue():
    properties = parse_properties("path=C:\\\\\nother=x")
    assert properties == {"path": "C:\\", "other": "x"}


def test_escapes_in_keys_and_values():
    text = "key\\=with\\:separators = tab\\tnewline\\nunicode\\u00e9\n"
    assert parse_properties(text) == {"key=with:separators": "tab\tnewline\nunicode\u00e9"}


def test_value_may_contain_separators():
    assert parse_properties("url=http://host:2003/a=b") == {"url": "http://host:2003/a=b"}


def test_later_duplicates_win():
    assert parse_properties("a=1\na=2") == {"a": "2"}


def test_windows_line_endings():
    assert parse_properties("a=1\r\nb=2\rc=3") == {"a": "1", "b": "2", "c": "3"}


def test_malformed_unicode_escape():
    with pytest.raises(PropertiesSyntaxError) as exc_info:
        parse_properties("ok=1\nbad=\\u12G4")
    assert exc_info.value.line_number == 2
