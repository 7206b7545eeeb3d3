"""
Position mapping tests

Tests VLQ encoding, the PositionMapBuilder, SourceMap lookups and JSON
output, and mapping fidelity through nested injections.
"""

import json

import pytest

from fileinjector.lib.reader import MemoryReader
from fileinjector.lib.sourcemap import (
    OriginalPosition,
    PositionMapBuilder,
    vlq_encode,
)
from fileinjector.lib.unfolder import FileInjector
from fileinjector.models.document import OutputFragment


class TestVLQ:
    """Test Base64 VLQ encoding"""

    @pytest.mark.parametrize("value, expected", [
        (0, "A"),
        (1, "C"),
        (-1, "D"),
        (15, "e"),
        (16, "gB"),
        (-16, "hB"),
        (28, "4B"),
        (1000, "w+B"),
    ])
    def test_encode(self, value, expected):
        assert vlq_encode(value) == expected


class TestBuilder:
    """Test fragment accumulation and finalize()"""

    def test_concatenation_and_entries(self):
        """Mapped fragments get one entry each, newlines none"""
        builder = PositionMapBuilder()
        builder.fragment_add("ab", "a.txt", 1, 0)
        builder.fragment_add("cd", "b.txt", 3, 4)
        builder.newline_add()
        builder.fragment_add("ef", "a.txt", 2, 0)

        result = builder.finalize("out.txt")

        assert result.text == "abcd\nef"
        entries = [
            (m.generatedLine, m.generatedColumn, m.source, m.originalLine, m.originalColumn)
            for m in result.positionMap.mappings
        ]
        assert entries == [
            (1, 0, "a.txt", 1, 0),
            (1, 2, "b.txt", 3, 4),
            (2, 0, "a.txt", 2, 0),
        ]

    def test_string_is_untagged(self):
        """add() with a bare string creates an untagged fragment"""
        builder = PositionMapBuilder()
        builder.add("plain")
        builder.add(OutputFragment("mapped", "a.txt", 1, 0))

        result = builder.finalize("out.txt")

        assert result.text == "plainmapped"
        assert len(result.positionMap.mappings) == 1
        assert result.positionMap.mappings[0].generatedColumn == 5

    def test_empty_fragments_skipped(self):
        """Empty fragments produce no entries"""
        builder = PositionMapBuilder()
        builder.fragment_add("", "a.txt", 1, 0)
        builder.fragment_add("x", "a.txt", 1, 0)

        assert len(builder.finalize("out.txt").positionMap.mappings) == 1

    def test_multiline_fragment(self):
        """A fragment spanning lines is mapped at every line start"""
        builder = PositionMapBuilder()
        builder.fragment_add("ab\ncd", "a.txt", 5, 2)

        mappings = builder.finalize("out.txt").positionMap.mappings

        assert [(m.generatedLine, m.originalLine, m.originalColumn) for m in mappings] == [
            (1, 5, 2),
            (2, 6, 0),
        ]

    def test_entries_sorted(self):
        """Entries come out in non-decreasing output order"""
        builder = PositionMapBuilder()
        for i in range(3):
            builder.fragment_add(f"line{i}", "a.txt", i + 1, 0)
            builder.newline_add()

        mappings = builder.finalize("out.txt").positionMap.mappings
        keys = [(m.generatedLine, m.generatedColumn) for m in mappings]

        assert keys == sorted(keys)


class TestSourceMap:
    """Test lookups and serialization"""

    def test_lookup_inside_fragment(self):
        """Columns inside a fragment are offset from its origin"""
        builder = PositionMapBuilder()
        builder.add("0123456789")
        builder.fragment_add("abc", "a.txt", 2, 4)

        source_map = builder.finalize("out.txt").positionMap

        assert source_map.originalPosition_for(1, 11) == OriginalPosition("a.txt", 2, 5)

    def test_lookup_unmapped(self):
        """Untagged text and positions past a fragment are unmapped"""
        builder = PositionMapBuilder()
        builder.add("xx")
        builder.fragment_add("abc", "a.txt", 1, 0)
        builder.newline_add()

        source_map = builder.finalize("out.txt").positionMap

        assert source_map.originalPosition_for(1, 0) is None
        assert source_map.originalPosition_for(1, 5) is None
        assert source_map.originalPosition_for(2, 0) is None

    def test_mappings_directive_free(self):
        """Two plain lines encode as one segment per line"""
        reader = MemoryReader({"/site/index.txt": "a\nb"})
        result = FileInjector(cwd="/site", reader=reader).process(
            reader.document_get("/site/index.txt")
        )

        assert result.positionMap.mappings_encode() == "AAAA;AACA"

    def test_json(self):
        """Revision 3 JSON with embedded sources"""
        reader = MemoryReader({
            "/site/index.txt": "A $file(b.txt) C",
            "/site/b.txt": "B",
        })
        result = FileInjector(cwd="/site", reader=reader).process(
            reader.document_get("/site/index.txt"), file="out.txt"
        )

        data = json.loads(result.positionMap.json_dump())

        assert data == {
            "version": 3,
            "file": "out.txt",
            "sources": ["index.txt", "b.txt"],
            "sourcesContent": ["A $file(b.txt) C", "B"],
            "names": [],
            "mappings": "AAAA,ECAA,CDAc",
        }

    def test_default_file_name(self):
        """The map names the input document when no file is given"""
        reader = MemoryReader({"/site/index.txt": "a"})
        result = FileInjector(cwd="/site", reader=reader).process(
            reader.document_get("/site/index.txt")
        )

        assert result.positionMap.file == "index.txt"


class TestMappingFidelity:
    """Test that nested injections map back to the innermost file"""

    @pytest.fixture
    def result(self):
        reader = MemoryReader({
            "/site/index.txt": "a0 $file(b.txt) a1",
            "/site/b.txt": "b0 $file(c.txt) b1",
            "/site/c.txt": "ccc",
        })
        return FileInjector(cwd="/site", reader=reader).process(
            reader.document_get("/site/index.txt")
        )

    def test_text(self, result):
        assert result.text == "a0 b0 ccc b1 a1\n"

    def test_innermost_characters_map_to_c(self, result):
        """Characters from c.txt map into c.txt, not a or b"""
        for column in range(6, 9):
            position = result.positionMap.originalPosition_for(1, column)
            assert position == OriginalPosition("c.txt", 1, column - 6)

    def test_surrounding_characters(self, result):
        """Text after a directive maps past the directive in its own file"""
        assert result.positionMap.originalPosition_for(1, 3) == OriginalPosition("b.txt", 1, 0)
        assert result.positionMap.originalPosition_for(1, 9) == OriginalPosition("b.txt", 1, 15)
        assert result.positionMap.originalPosition_for(1, 12) == OriginalPosition("index.txt", 1, 15)

    def test_positions_inside_recorded_sources(self, result):
        """Every entry points at a real position of the recorded text"""
        source_map = result.positionMap
        for mapping in source_map.mappings:
            lines = source_map.sourcesContent[mapping.source].split("\n")
            line = lines[mapping.originalLine - 1]
            assert mapping.originalColumn + mapping.length <= len(line)

    def test_sources_content(self, result):
        assert result.positionMap.sourcesContent == {
            "index.txt": "a0 $file(b.txt) a1",
            "b.txt": "b0 $file(c.txt) b1",
            "c.txt": "ccc",
        }
