"""Tests for metadata index loading and the index-backed class loader."""

import json

import pytest

from builders import ann, fqn, key, member, node, plain
from nodegql.core.index import CompositeMetadataIndex, JsonMetadataIndex, load_index
from nodegql.core.loader import IndexClassLoader
from nodegql.errors import IndexNotFoundError
from nodegql.models.metadata import AnnotationTargetKind, ClassMetadata, IndexDocument, MemberKind


def _write(path, *classes):
    path.write_text(IndexDocument(classes=list(classes)).model_dump_json(by_alias=True), encoding="utf-8")
    return path


class TestJsonMetadataIndex:
    """Test index file parsing and annotation queries."""

    def test_reads_camel_case_document(self, tmp_path):
        document = {
            "classes": [
                {
                    "name": "com.example.model.Person",
                    "superName": "java.lang.Object",
                    "annotations": [{"name": "com.example.nodeentity.NodeEntity", "values": {"label": ["Human"]}}],
                    "fields": [
                        {
                            "name": "id",
                            "type": {"kind": "class", "name": "java.lang.String"},
                            "annotations": [{"name": "NodeKey"}],
                        }
                    ],
                    "methods": [
                        {"name": "getName", "type": {"kind": "class", "name": "java.lang.String"}, "nullable": False}
                    ],
                }
            ]
        }
        path = tmp_path / "index.json"
        path.write_text(json.dumps(document), encoding="utf-8")

        index = JsonMetadataIndex.from_file(path)
        person = index.get_class("com.example.model.Person")

        assert person.simple_name == "Person"
        assert person.annotation("NodeEntity").value("label") == ["Human"]
        assert person.fields[0].declaring_class == "com.example.model.Person"
        assert person.methods[0].kind == MemberKind.METHOD
        assert person.methods[0].nullable is False

    def test_round_trip_through_file(self, tmp_path):
        path = _write(tmp_path / "index.json", node("Person", fields=(key(),)))
        index = JsonMetadataIndex.from_file(path)
        assert index.get_class(fqn("Person")).fields[0].has_annotation("NodeKey")

    def test_missing_file(self, tmp_path):
        with pytest.raises(IndexNotFoundError):
            JsonMetadataIndex.from_file(tmp_path / "absent.json")

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "index.json"
        path.write_text('{"classes": [{"fields": 3}]}', encoding="utf-8")
        with pytest.raises(ValueError, match="Malformed index file"):
            JsonMetadataIndex.from_file(path)

    def test_classes_annotated_with(self):
        person = node("Person", fields=(key(), member("name", "java.lang.String", ann("com.acme.NodeKey"))))
        index = JsonMetadataIndex([person, plain("Other")])

        usages = index.classes_annotated_with("NodeKey")
        assert [(u.target_kind, u.target_name) for u in usages] == [
            (AnnotationTargetKind.FIELD, "id"),
            (AnnotationTargetKind.FIELD, "name"),
        ]
        (usage,) = index.classes_annotated_with("com.example.NodeEntity")
        assert usage.target_kind == AnnotationTargetKind.CLASS
        assert usage.class_info.name == person.name


class TestCompositeMetadataIndex:
    def test_first_index_wins(self):
        project = JsonMetadataIndex([node("Person", fields=(key(),))])
        dependency = JsonMetadataIndex([plain("Person"), node("Audit", fields=(key(),))])
        index = CompositeMetadataIndex([project, dependency])

        assert index.get_class(fqn("Person")).has_annotation("NodeEntity")
        assert [c.name for c in index.all_classes()] == [fqn("Person"), fqn("Audit")]
        assert [u.class_info.name for u in index.classes_annotated_with("NodeEntity")] == [
            fqn("Person"),
            fqn("Audit"),
        ]

    def test_load_index_with_extras(self, tmp_path):
        primary = _write(tmp_path / "project.json", node("Person", fields=(key(),)))
        extra = _write(tmp_path / "dependency.json", node("Audit", fields=(key(),)))

        assert isinstance(load_index(primary), JsonMetadataIndex)
        combined = load_index(primary, [extra])
        assert combined.get_class(fqn("Audit")) is not None

    def test_load_index_missing_extra(self, tmp_path):
        primary = _write(tmp_path / "project.json", node("Person", fields=(key(),)))
        with pytest.raises(IndexNotFoundError):
            load_index(primary, [tmp_path / "missing.json"])


class TestIndexClassLoader:
    def test_unknown_class(self):
        assert IndexClassLoader(JsonMetadataIndex([])).load_class("com.acme.Missing") is None

    def test_known_collection_without_index_entry(self):
        loaded = IndexClassLoader(JsonMetadataIndex([])).load_class("java.util.Set")
        assert loaded.is_collection

    def test_collection_through_supertypes(self):
        tags = ClassMetadata(name="com.acme.TagList", super_name="com.acme.BaseList")
        base = ClassMetadata(name="com.acme.BaseList", interface_names=["java.util.List"])
        loader = IndexClassLoader(JsonMetadataIndex([tags, base]))
        assert loader.load_class("com.acme.TagList").is_collection

    def test_extra_collection_types(self):
        loader = IndexClassLoader(JsonMetadataIndex([]), frozenset({"com.acme.Bag"}))
        assert loader.load_class("com.acme.Bag").is_collection

    def test_enum_and_nullability(self):
        color = ClassMetadata(name="com.acme.Color", is_enum=True, enum_constants=["RED", "BLUE"])
        owner = plain("Owner", fields=(member("title", "kotlin.String", nullable=False), member("note")))
        loader = IndexClassLoader(JsonMetadataIndex([color, owner]))

        loaded = loader.load_class("com.acme.Color")
        assert loaded.is_enum
        assert loaded.enum_constant_names == ["RED", "BLUE"]

        owner_view = loader.load_class(fqn("Owner"))
        assert owner_view.is_declared_nullable("title") is False
        assert owner_view.is_declared_nullable("note") is None

    def test_cached(self):
        loader = IndexClassLoader(JsonMetadataIndex([plain("Owner")]))
        assert loader.load_class(fqn("Owner")) is loader.load_class(fqn("Owner"))
