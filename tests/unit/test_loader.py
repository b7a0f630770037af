"""Unit tests for textid/catalog/loader.py.

Verifies:
  - the bundled catalog reads and parses
  - CatalogLoadError for unreadable files, invalid JSON and non-array documents
  - malformed records are skipped, never fatal
  - output is stable-sorted by descending rarity
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from textid.catalog.loader import (
    CatalogLoadError,
    load_patterns,
    parse_records,
    read_records,
)
from textid.models.pattern import Pattern


class TestBundledCatalog:
    def test_reads_non_empty_array(self) -> None:
        records = read_records()
        assert isinstance(records, list)
        assert len(records) > 100

    def test_every_bundled_record_parses(self) -> None:
        records = read_records()
        assert len(parse_records(records)) == len(records)

    def test_first_pattern_is_youtube_channel_id(self) -> None:
        assert load_patterns()[0].name == "YouTube Channel ID"

    def test_rarity_is_non_increasing(self) -> None:
        rarities = [p.rarity for p in load_patterns()]
        assert rarities == sorted(rarities, reverse=True)

    def test_names_are_unique(self) -> None:
        names = [p.name for p in load_patterns()]
        assert len(names) == len(set(names))


class TestReadRecordsErrors:
    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogLoadError, match="Could not read catalog"):
            read_records(str(tmp_path / "missing.json"))

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("[{not json", encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="not valid JSON"):
            read_records(str(path))

    def test_non_array_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "obj.json"
        path.write_text('{"Name": "x"}', encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="JSON array"):
            read_records(str(path))

    def test_custom_file_loads(self, tmp_path: Path, record_factory) -> None:
        path = tmp_path / "custom.json"
        path.write_text(json.dumps([record_factory("Only", r"^x$", 0.5)]), encoding="utf-8")
        patterns = load_patterns(str(path))
        assert [p.name for p in patterns] == ["Only"]


class TestParseRecords:
    def test_fields_mapped(self, record_factory) -> None:
        record = record_factory(
            "Thing",
            r"^thing$",
            0.7,
            ["A", "B", "A"],
            plural_name=True,
            Description="A thing",
            URL="https://example.com/",
            Exploit="Do the thing",
        )
        (pattern,) = parse_records([record])
        assert isinstance(pattern, Pattern)
        assert pattern.name == "Thing"
        assert pattern.regex == r"^thing$"
        assert pattern.boundaryless == "thing"
        assert pattern.rarity == 0.7
        assert pattern.tags == ("A", "B")
        assert pattern.plural_name is True
        assert pattern.description == "A thing"
        assert pattern.url == "https://example.com/"
        assert pattern.exploit == "Do the thing"

    def test_optional_fields_default(self) -> None:
        (pattern,) = parse_records([{"Name": "N", "Regex": "^n$", "Rarity": 1, "Tags": []}])
        assert pattern.description is None
        assert pattern.url is None
        assert pattern.exploit is None
        assert pattern.plural_name is False

    def test_stable_sort_by_descending_rarity(self, record_factory) -> None:
        records = [
            record_factory("low", "^a$", 0.1),
            record_factory("high-1", "^b$", 0.9),
            record_factory("mid", "^c$", 0.5),
            record_factory("high-2", "^d$", 0.9),
        ]
        assert [p.name for p in parse_records(records)] == ["high-1", "high-2", "mid", "low"]

    @pytest.mark.parametrize(
        "record",
        [
            "not a dict",
            {"Regex": "^a$", "Rarity": 0.5, "Tags": []},
            {"Name": "x", "Rarity": 0.5, "Tags": []},
            {"Name": "x", "Regex": 5, "Rarity": 0.5, "Tags": []},
            {"Name": "x", "Regex": "^a$", "Rarity": "high", "Tags": []},
            {"Name": "x", "Regex": "^a$", "Rarity": True, "Tags": []},
            {"Name": "x", "Regex": "^a$", "Rarity": 1.5, "Tags": []},
            {"Name": "x", "Regex": "^a$", "Rarity": -0.1, "Tags": []},
            {"Name": "x", "Regex": "^a$", "Rarity": 0.5, "Tags": "Tag"},
            {"Name": "x", "Regex": "^a$", "Rarity": 0.5, "Tags": [1, 2]},
        ],
    )
    def test_malformed_record_skipped(self, record, record_factory) -> None:
        good = record_factory("good", "^g$", 0.5)
        patterns = parse_records([record, good])
        assert [p.name for p in patterns] == ["good"]

    def test_empty_input(self) -> None:
        assert parse_records([]) == []
