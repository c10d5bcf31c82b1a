"""In-memory metadata builders shared by the test modules."""

from __future__ import annotations

from typing import Optional, Union

from nodegql.core.index import JsonMetadataIndex
from nodegql.core.loader import IndexClassLoader
from nodegql.core.scalars import ScalarRegistry
from nodegql.core.scanner import SchemaScanner
from nodegql.core.schema_model import SchemaModel
from nodegql.errors import ModelError
from nodegql.models.metadata import (
    AnnotationInstance,
    ClassMetadata,
    MemberKind,
    MemberMetadata,
    TypeDescriptor,
)

PKG = "com.example.model"
STRING = "java.lang.String"

TypeLike = Union[str, TypeDescriptor]


def fqn(simple: str) -> str:
    return f"{PKG}.{simple}"


def ann(annotation: str, /, **values) -> AnnotationInstance:
    return AnnotationInstance(name=annotation, values=values)


def as_type(type_: TypeLike) -> TypeDescriptor:
    if isinstance(type_, TypeDescriptor):
        return type_
    if type_ in ("int", "long", "short", "float", "double", "boolean", "char", "byte"):
        return TypeDescriptor.primitive(type_)
    return TypeDescriptor.of_class(type_)


def list_of(element: TypeLike) -> TypeDescriptor:
    return TypeDescriptor.parameterized("java.util.List", as_type(element))


def member(
    name: str,
    type_: TypeLike = STRING,
    *annotations: AnnotationInstance,
    nullable: Optional[bool] = None,
    static: bool = False,
) -> MemberMetadata:
    """A field."""
    return MemberMetadata(
        name=name,
        kind=MemberKind.FIELD,
        type=as_type(type_),
        annotations=list(annotations),
        is_static=static,
        nullable=nullable,
    )


def getter(
    name: str,
    type_: TypeLike = STRING,
    *annotations: AnnotationInstance,
    nullable: Optional[bool] = None,
) -> MemberMetadata:
    """A public zero-argument method."""
    return MemberMetadata(
        name=name,
        kind=MemberKind.METHOD,
        type=as_type(type_),
        annotations=list(annotations),
        nullable=nullable,
    )


def node(
    simple: str,
    fields: tuple[MemberMetadata, ...] = (),
    methods: tuple[MemberMetadata, ...] = (),
    label: Optional[str] = None,
    super_name: Optional[str] = None,
    interfaces: tuple[str, ...] = (),
) -> ClassMetadata:
    values = {"label": [label]} if label else {}
    return ClassMetadata(
        name=fqn(simple),
        super_name=super_name,
        interface_names=list(interfaces),
        annotations=[ann("NodeEntity", **values)],
        fields=list(fields),
        methods=list(methods),
    )


def relation(
    simple: str,
    label: str,
    fields: tuple[MemberMetadata, ...] = (),
    methods: tuple[MemberMetadata, ...] = (),
    super_name: Optional[str] = None,
) -> ClassMetadata:
    return ClassMetadata(
        name=fqn(simple),
        super_name=super_name,
        annotations=[ann("NodeEntity", type="RELATION", label=[label])],
        fields=list(fields),
        methods=list(methods),
    )


def plain(
    simple: str,
    fields: tuple[MemberMetadata, ...] = (),
    methods: tuple[MemberMetadata, ...] = (),
    super_name: Optional[str] = None,
    annotations: tuple[AnnotationInstance, ...] = (),
) -> ClassMetadata:
    return ClassMetadata(
        name=fqn(simple),
        super_name=super_name,
        annotations=list(annotations),
        fields=list(fields),
        methods=list(methods),
    )


def interface(
    simple: str,
    methods: tuple[MemberMetadata, ...] = (),
    schema_name: Optional[str] = None,
    extends: tuple[str, ...] = (),
) -> ClassMetadata:
    values = {"schemaName": schema_name} if schema_name else {}
    return ClassMetadata(
        name=fqn(simple),
        is_interface=True,
        interface_names=list(extends),
        annotations=[ann("SchemaInterface", **values)],
        methods=list(methods),
    )


def enum(simple: str, constants: list[str], schema_enum: bool = True, schema_name: Optional[str] = None) -> ClassMetadata:
    annotations = []
    if schema_enum:
        annotations.append(ann("SchemaEnum", **({"schemaName": schema_name} if schema_name else {})))
    return ClassMetadata(
        name=fqn(simple),
        is_enum=True,
        enum_constants=constants,
        super_name="java.lang.Enum",
        annotations=annotations,
    )


def key(name: str = "id", type_: TypeLike = STRING) -> MemberMetadata:
    return member(name, type_, ann("NodeKey"))


def scan(*classes: ClassMetadata, include_neo4j_scalars: bool = False) -> tuple[SchemaModel, list[ModelError]]:
    """Scan *classes* and return the model with scan errors only."""
    index = JsonMetadataIndex(classes)
    model = SchemaModel(ScalarRegistry(include_neo4j_scalars=include_neo4j_scalars))
    errors = SchemaScanner(index, model, IndexClassLoader(index)).scan()
    return model, errors


def build(*classes: ClassMetadata, include_neo4j_scalars: bool = False) -> tuple[SchemaModel, list[ModelError]]:
    """Scan and validate *classes*, returning every collected error."""
    model, errors = scan(*classes, include_neo4j_scalars=include_neo4j_scalars)
    errors.extend(model.validate())
    return model, errors


def messages(errors: list[ModelError]) -> list[str]:
    return [e.message for e in errors]
