"""Tests for the scalar registry and member type classification."""

import pytest

from builders import ann, enum, fqn, list_of, member, plain
from nodegql.config import ScalarMapping
from nodegql.core.classifier import EntityReference, EnumOutcome, ScalarOutcome, TypeClassifier
from nodegql.core.index import JsonMetadataIndex
from nodegql.core.loader import IndexClassLoader
from nodegql.core.scalars import ScalarRegistry
from nodegql.errors import ModelError
from nodegql.models.metadata import TypeDescriptor
from nodegql.models.schema import EnumType


def _classifier(*classes, registry=None):
    index = JsonMetadataIndex(classes)
    registry = registry or ScalarRegistry()
    return TypeClassifier(registry, IndexClassLoader(index)), registry


class TestScalarRegistry:
    """Test scalar lookup, declaration and enum registration."""

    def test_builtin_scalars(self):
        registry = ScalarRegistry()
        assert registry.get_scalar("int").name == "Int"
        assert registry.get_scalar("java.lang.Long").name == "Int"
        assert registry.get_scalar("kotlin.Double").name == "Float"
        assert registry.get_scalar("java.lang.String").name == "String"
        assert registry.get_scalar("boolean").name == "Boolean"

    def test_builtins_are_not_declared(self):
        assert ScalarRegistry().declared_scalars == []

    def test_neo4j_scalars_declared_when_enabled(self):
        registry = ScalarRegistry(include_neo4j_scalars=True)
        names = [s.name for s in registry.declared_scalars]
        assert names[0] == "Point"
        assert "DateTime" in names
        assert registry.get_scalar("java.time.Instant").name == "DateTime"

    def test_neo4j_scalars_absent_by_default(self):
        assert not ScalarRegistry().has_scalar("java.time.LocalDate")

    def test_user_mapping(self):
        registry = ScalarRegistry()
        registry.add_scalar_mapping(ScalarMapping(scalar_name="Money", classes=["com.acme.Money"]))
        assert registry.get_scalar("com.acme.Money").name == "Money"
        assert [s.name for s in registry.declared_scalars] == ["Money"]

    def test_add_enum_twice_is_noop(self):
        registry = ScalarRegistry()
        first = EnumType.create("Color", ["RED", "GREEN"])
        second = EnumType.create("Colour", ["BLUE"])

        assert registry.add_enum_type("com.acme.Color", first) is True
        assert registry.add_enum_type("com.acme.Color", second) is False

        assert len(registry.enums) == 1
        assert registry.get_enum("com.acme.Color") is first

    def test_enums_excluded_from_declared(self):
        registry = ScalarRegistry()
        registry.add_enum_type("com.acme.Color", EnumType.create("Color", ["RED"]))
        assert registry.declared_scalars == []

    def test_enum_values_deduplicated(self):
        assert EnumType.create("E", ["A", "B", "A"]).allowed_values == ["A", "B"]


class TestTypeClassifier:
    """Test unwrapping, outcome and required-ness of member types."""

    def test_primitive_is_required_scalar(self):
        classifier, _ = _classifier()
        result = classifier.classify(member("age", "int"))
        assert isinstance(result.outcome, ScalarOutcome)
        assert result.scalar.name == "Int"
        assert result.is_required
        assert not result.is_collection

    def test_boxed_is_optional(self):
        classifier, _ = _classifier()
        result = classifier.classify(member("age", "java.lang.Integer"))
        assert not result.is_required

    def test_key_is_required(self):
        classifier, _ = _classifier()
        assert classifier.classify(member("id", "java.lang.String", ann("NodeKey"))).is_required

    def test_explicit_required(self):
        classifier, _ = _classifier()
        attr = member("name", "java.lang.String", ann("NodeAttribute", required=True))
        assert classifier.classify(attr).is_required

    def test_declared_non_nullable(self):
        owner = plain("Owner", fields=(member("title", "kotlin.String", nullable=False),))
        classifier, _ = _classifier(owner)
        assert classifier.classify(owner.fields[0]).is_required

    def test_array_unwrapped(self):
        classifier, _ = _classifier()
        declared = TypeDescriptor.array_of(TypeDescriptor.of_class("java.lang.String"))
        result = classifier.classify(member("tags", declared))
        assert result.is_collection
        assert result.element_type.name == "java.lang.String"

    def test_list_unwrapped(self):
        classifier, _ = _classifier()
        result = classifier.classify(member("tags", list_of("java.lang.String")))
        assert result.is_collection
        assert result.scalar.name == "String"

    def test_two_argument_collection_rejected(self):
        classifier, _ = _classifier()
        declared = TypeDescriptor.parameterized(
            "java.util.List",
            TypeDescriptor.of_class("java.lang.String"),
            TypeDescriptor.of_class("java.lang.String"),
        )
        with pytest.raises(ModelError, match="Unable to handle parameterized type"):
            classifier.classify(member("bad", declared))

    def test_non_collection_generic_is_reference(self):
        classifier, _ = _classifier()
        declared = TypeDescriptor.parameterized("java.util.Optional", TypeDescriptor.of_class("java.lang.String"))
        result = classifier.classify(member("maybe", declared))
        assert isinstance(result.outcome, EntityReference)
        assert not result.is_collection

    def test_implicit_enum_registered(self):
        color = enum("Color", ["RED", "GREEN"], schema_enum=False)
        classifier, registry = _classifier(color)

        result = classifier.classify(member("color", fqn("Color")))

        assert isinstance(result.outcome, EnumOutcome)
        assert result.scalar.name == "Color"
        assert registry.has_enum(fqn("Color"))
        assert registry.get_enum(fqn("Color")).allowed_values == ["RED", "GREEN"]

    def test_unknown_class_is_reference(self):
        classifier, _ = _classifier()
        result = classifier.classify(member("owner", fqn("Person")))
        assert result.is_reference
        assert result.outcome.class_name == fqn("Person")

    def test_referenced_class_skips_scalars_and_enums(self):
        color = enum("Color", ["RED"], schema_enum=False)
        classifier, registry = _classifier(color)
        assert classifier.referenced_class(TypeDescriptor.of_class("java.lang.String")) is None
        assert classifier.referenced_class(TypeDescriptor.of_class(fqn("Color"))) is None
        assert classifier.referenced_class(list_of(fqn("Person"))) == fqn("Person")
        assert not registry.has_enum(fqn("Color"))
