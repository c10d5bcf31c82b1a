"""Tests for atomic document writing and stale file removal."""

import pytest

from nodegql.core.writer import OutputWriter
from nodegql.renderers.base import RenderedDocument


class TestOutputWriter:
    def test_write_creates_directories(self, tmp_path):
        writer = OutputWriter(tmp_path / "a" / "b")
        path = writer.write(RenderedDocument(file_name="schema.graphql", content="type X {\n}\n"))

        assert path == tmp_path / "a" / "b" / "schema.graphql"
        assert path.read_text(encoding="utf-8") == "type X {\n}\n"
        assert [p.name for p in path.parent.iterdir()] == ["schema.graphql"]

    def test_overwrites_existing(self, tmp_path):
        writer = OutputWriter(tmp_path)
        writer.write(RenderedDocument(file_name="x.query", content="old"))
        path = writer.write(RenderedDocument(file_name="x.query", content="new"))
        assert path.read_text(encoding="utf-8") == "new"

    def test_failed_write_leaves_no_file(self, tmp_path, monkeypatch):
        def boom(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("nodegql.core.writer.shutil.move", boom)
        writer = OutputWriter(tmp_path)

        with pytest.raises(OSError, match="disk full"):
            writer.write(RenderedDocument(file_name="schema.graphql", content="x"))
        assert list(tmp_path.iterdir()) == []

    def test_write_all(self, tmp_path):
        documents = [RenderedDocument(file_name=f"{n}.fragment", content=n) for n in ("A", "B")]
        paths = OutputWriter(tmp_path).write_all(documents)
        assert [p.name for p in paths] == ["A.fragment", "B.fragment"]

    def test_remove_stale(self, tmp_path):
        writer = OutputWriter(tmp_path)
        kept = writer.write(RenderedDocument(file_name="KeepRepository.java", content=""))
        (tmp_path / "OldRepository.java").write_text("", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("", encoding="utf-8")

        removed = writer.remove_stale([kept], suffix=".java")

        assert [p.name for p in removed] == ["OldRepository.java"]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["KeepRepository.java", "notes.txt"]

    def test_remove_stale_missing_root(self, tmp_path):
        assert OutputWriter(tmp_path / "absent").remove_stale([]) == []
