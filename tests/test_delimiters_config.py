"""
Delimiter configuration tests

Tests building delimiter definitions from strings and YAML files.
"""

import pytest

from fileinjector.lib.delimiters import (
    delimiter_make,
    delimiters_fromConfig,
    delimiters_load,
    delimiters_merge,
)
from fileinjector.lib.errors import DelimiterConfigError
from fileinjector.lib.matcher import DelimiterMatcher
from fileinjector.models.delimiters import BUILTIN_DELIMITERS


class TestDelimiterMake:
    """Test single definitions"""

    def test_literal_patterns_escaped(self):
        """Literal patterns match regex metacharacters verbatim"""
        delimiter = delimiter_make("file", "{{include ", "}}")
        found = DelimiterMatcher([delimiter]).match_findNext("a {{include b.txt}} c", 0)

        assert found.rawString == "{{include b.txt}}"
        assert found.parsedOptions.path == "b.txt"

    def test_regex_patterns(self):
        """regex=True compiles patterns as regular expressions"""
        delimiter = delimiter_make("file", r"@@\s*include\(", r"\)", regex=True)
        found = DelimiterMatcher([delimiter]).match_findNext("@@   include(x.txt)", 0)

        assert found.contentRaw == "x.txt"

    def test_missing_end(self):
        with pytest.raises(DelimiterConfigError):
            delimiter_make("file", "<<", "")

    def test_invalid_regex(self):
        with pytest.raises(DelimiterConfigError, match="Invalid delimiter pattern"):
            delimiter_make("file", "(unclosed", ")", regex=True)


class TestConfig:
    """Test parsed configuration structures"""

    def test_none_is_empty(self):
        assert delimiters_fromConfig(None) == []

    def test_entries_in_order(self):
        definitions = delimiters_fromConfig({
            "delimiters": [
                {"type": "file", "start": "[[", "end": "]]"},
                {"start": "<<", "end": ">>"},
            ]
        })

        assert [d.type for d in definitions] == ["file", "file"]
        assert definitions[0].start.pattern == r"\[\["
        assert definitions[1].end.pattern == ">>"

    def test_not_a_mapping(self):
        with pytest.raises(DelimiterConfigError):
            delimiters_fromConfig(["not", "a", "mapping"])

    def test_delimiters_not_a_list(self):
        with pytest.raises(DelimiterConfigError):
            delimiters_fromConfig({"delimiters": "oops"})

    def test_entry_not_a_mapping(self):
        with pytest.raises(DelimiterConfigError, match="#2"):
            delimiters_fromConfig({"delimiters": [{"start": "a", "end": "b"}, "oops"]})

    def test_merge_appends(self):
        extra = delimiters_fromConfig({"delimiters": [{"start": "[[", "end": "]]"}]})
        merged = delimiters_merge(extra)

        assert merged[:len(BUILTIN_DELIMITERS)] == BUILTIN_DELIMITERS
        assert merged[-1] is extra[0]


class TestLoad:
    """Test loading YAML files"""

    def test_load(self, tmp_path):
        config = tmp_path / "inject.yaml"
        config.write_text(
            "delimiters:\n"
            "  - type: file\n"
            "    start: '{{include '\n"
            "    end: '}}'\n"
            "  - type: file\n"
            "    start: '@@\\s*include\\('\n"
            "    end: '\\)'\n"
            "    regex: true\n",
            encoding="utf-8",
        )

        definitions = delimiters_load(config)

        assert len(definitions) == 2
        matcher = DelimiterMatcher(definitions)
        assert matcher.match_findNext("{{include a.txt}}", 0).parsedOptions.path == "a.txt"
        assert matcher.match_findNext("@@ include(b.txt)", 0).parsedOptions.path == "b.txt"

    def test_empty_file(self, tmp_path):
        config = tmp_path / "inject.yaml"
        config.write_text("", encoding="utf-8")

        assert delimiters_load(config) == []

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "inject.yaml"
        config.write_text("delimiters: [unclosed\n", encoding="utf-8")

        with pytest.raises(DelimiterConfigError, match="Failed to parse"):
            delimiters_load(config)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DelimiterConfigError, match="Failed to load"):
            delimiters_load(tmp_path / "missing.yaml")
