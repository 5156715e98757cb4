"""Tests for JSONLoader and JSONLLoader in lens_viewer/data_formats/."""

from __future__ import annotations

import json

import pytest

from lens_viewer.data_formats import JSONLLoader, JSONLoader, LineDelimited, PlainJson

from conftest import write_jsonl


class TestJSONLoaderProperties:
    """Tests for loader properties."""

    def test_format_name(self):
        assert JSONLoader().format_name == "json"
        assert JSONLLoader().format_name == "jsonl"

    def test_supported_extensions(self):
        assert ".json" in JSONLoader().supported_extensions
        assert ".jsonl" in JSONLLoader().supported_extensions

    def test_chunk_size_must_be_positive(self):
        with pytest.raises(ValueError):
            JSONLLoader(chunk_size=0)


class TestJSONLoaderLoad:
    """JSONLoader returns the file text untouched."""

    @pytest.mark.asyncio
    async def test_text_is_returned_verbatim(self, tmp_path):
        """Whitespace, key order and line endings survive unchanged."""
        raw = '{\r\n  "b": 1,\n\t"a" : [1,2 ,3]\n}\n\n'
        filepath = tmp_path / "doc.json"
        filepath.write_bytes(raw.encode("utf-8"))

        result = await JSONLoader().load(str(filepath))

        assert isinstance(result, PlainJson)
        assert result.raw_text == raw
        assert result.path == str(filepath)

    @pytest.mark.asyncio
    async def test_invalid_json_is_not_rejected(self, tmp_path):
        """Validation is left to the renderer."""
        filepath = tmp_path / "broken.json"
        filepath.write_text("{not json", encoding="utf-8")
        result = await JSONLoader().load(str(filepath))
        assert result.raw_text == "{not json"

    @pytest.mark.asyncio
    async def test_progress_reports_full_size(self, tmp_path):
        filepath = tmp_path / "doc.json"
        filepath.write_text(json.dumps({"k": "v"}), encoding="utf-8")
        calls = []
        await JSONLoader().load(str(filepath), lambda done, total: calls.append((done, total)))
        size = filepath.stat().st_size
        assert calls == [(size, size)]


class TestJSONLLoaderLoad:
    """JSONLLoader streams the file through the line decoder."""

    @pytest.mark.asyncio
    async def test_load_records(self, tmp_path):
        records = [{"id": i, "text": "ünïcode " * i} for i in range(50)]
        filepath = write_jsonl(tmp_path / "data.jsonl", records)

        result = await JSONLLoader(chunk_size=7).load(str(filepath))

        assert isinstance(result, LineDelimited)
        assert result.entries == records
        assert result.errors == []
        assert result.entry_line_numbers == list(range(1, 51))
        assert result.total_lines == 50

    @pytest.mark.asyncio
    async def test_chunk_size_does_not_change_result(self, tmp_path):
        filepath = tmp_path / "mixed.jsonl"
        filepath.write_text('{"a": "é"}\n{bad\n\n[1, 2]', encoding="utf-8")

        small = await JSONLLoader(chunk_size=1).load(str(filepath))
        large = await JSONLLoader().load(str(filepath))

        assert small.entries == large.entries == [{"a": "é"}, [1, 2]]
        assert small.errors == large.errors
        assert [e.line_number for e in small.errors] == [2]

    @pytest.mark.asyncio
    async def test_progress_reports_bytes(self, tmp_path):
        filepath = write_jsonl(tmp_path / "data.jsonl", [{"n": n} for n in range(10)])
        size = filepath.stat().st_size
        calls = []

        await JSONLLoader(chunk_size=16).load(str(filepath), lambda d, t: calls.append((d, t)))

        assert calls[-1] == (size, size)
        assert [done for done, _ in calls] == sorted(done for done, _ in calls)

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await JSONLLoader().load(str(tmp_path / "missing.jsonl"))
