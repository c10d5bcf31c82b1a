"""Class metadata models for the annotation index consumed by the scanner.

These Pydantic v2 models define the JSON index format read by
:class:`nodegql.core.index.JsonMetadataIndex`.  Field names use camelCase
aliases so an index exported by a JVM-side tool can be read verbatim; the
snake_case names are accepted as well.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

OBJECT_CLASS = "java.lang.Object"


def simple_name_of(name: str) -> str:
    """Return the simple class name of a fully-qualified (possibly nested) name."""
    return name.rsplit(".", 1)[-1].rsplit("$", 1)[-1]


class _IndexModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TypeKind(str, enum.Enum):
    """Shape of a member's declared type."""

    PRIMITIVE = "primitive"
    CLASS = "class"
    ARRAY = "array"
    PARAMETERIZED = "parameterized"
    VOID = "void"


class MemberKind(str, enum.Enum):
    """Whether a member is a field or a method."""

    FIELD = "field"
    METHOD = "method"


class AnnotationTargetKind(str, enum.Enum):
    """Element an annotation is applied to."""

    CLASS = "class"
    FIELD = "field"
    METHOD = "method"


class AnnotationInstance(_IndexModel):
    """An annotation applied to a class or member.

    Attributes:
        name: Fully-qualified or simple annotation name.
        values: Annotation element values (strings, booleans, lists).
    """

    name: str = Field(..., description="Annotation type name.")
    values: dict[str, Any] = Field(default_factory=dict, description="Annotation element values.")

    @property
    def simple_name(self) -> str:
        return simple_name_of(self.name)

    def value(self, key: str, default: Any = None) -> Any:
        """Return the element value for *key*, or *default* when absent or ``None``."""
        found = self.values.get(key)
        return default if found is None else found


class TypeDescriptor(_IndexModel):
    """A raw type as declared on a field or returned by a getter.

    Attributes:
        kind: Type shape.
        name: Fully-qualified class name, primitive keyword, or the raw
            generic class name for parameterized types.
        component: Component type when ``kind`` is ``array``.
        arguments: Type arguments when ``kind`` is ``parameterized``.
    """

    kind: TypeKind = Field(..., description="Type shape.")
    name: str = Field(..., description="Class, primitive or raw generic name.")
    component: Optional[TypeDescriptor] = Field(None, description="Array component type.")
    arguments: list[TypeDescriptor] = Field(default_factory=list, description="Generic type arguments.")

    @classmethod
    def of_class(cls, name: str) -> TypeDescriptor:
        return cls(kind=TypeKind.CLASS, name=name)

    @classmethod
    def primitive(cls, name: str) -> TypeDescriptor:
        return cls(kind=TypeKind.PRIMITIVE, name=name)

    @classmethod
    def array_of(cls, component: TypeDescriptor) -> TypeDescriptor:
        return cls(kind=TypeKind.ARRAY, name=f"{component.name}[]", component=component)

    @classmethod
    def parameterized(cls, raw_name: str, *arguments: TypeDescriptor) -> TypeDescriptor:
        return cls(kind=TypeKind.PARAMETERIZED, name=raw_name, arguments=list(arguments))

    def __str__(self) -> str:
        if self.kind == TypeKind.PARAMETERIZED:
            return f"{self.name}<{', '.join(str(a) for a in self.arguments)}>"
        return self.name


class MemberMetadata(_IndexModel):
    """A field or method of an indexed class.

    Field and getter scanning share this one shape; only ``kind`` and
    ``parameters_count`` tell them apart.

    Attributes:
        name: Member name as declared.
        kind: Field or method.
        type: Field type or method return type.
        annotations: Annotations on the member.
        is_static: Whether the member is static.
        is_public: Whether the member is public.
        parameters_count: Number of method parameters (0 for fields).
        declaring_class: Owning class; filled from the enclosing class.
        nullable: Declared nullability when the source language records it,
            ``None`` when unknown.
    """

    name: str
    kind: MemberKind = MemberKind.FIELD
    type: TypeDescriptor
    annotations: list[AnnotationInstance] = Field(default_factory=list)
    is_static: bool = False
    is_public: bool = True
    parameters_count: int = 0
    declaring_class: str = ""
    nullable: Optional[bool] = None

    def annotation(self, name: str) -> Optional[AnnotationInstance]:
        """Return the annotation whose simple name is *name*, if present."""
        wanted = simple_name_of(name)
        for ann in self.annotations:
            if ann.simple_name == wanted:
                return ann
        return None

    def has_annotation(self, name: str) -> bool:
        return self.annotation(name) is not None


class ClassMetadata(_IndexModel):
    """An indexed class, interface or enum.

    Attributes:
        name: Fully-qualified class name.
        is_interface: Whether the type is an interface.
        is_enum: Whether the type is an enum.
        enum_constants: Declared enum constant names, in order.
        super_name: Superclass name, ``None`` for interfaces and roots.
        interface_names: Directly implemented (or extended) interfaces.
        annotations: Class-level annotations.
        fields: Declared fields.
        methods: Declared methods.
    """

    name: str
    is_interface: bool = False
    is_enum: bool = False
    enum_constants: list[str] = Field(default_factory=list)
    super_name: Optional[str] = None
    interface_names: list[str] = Field(default_factory=list)
    annotations: list[AnnotationInstance] = Field(default_factory=list)
    fields: list[MemberMetadata] = Field(default_factory=list)
    methods: list[MemberMetadata] = Field(default_factory=list)

    @model_validator(mode="after")
    def _own_members(self) -> ClassMetadata:
        for member in self.fields:
            member.kind = MemberKind.FIELD
            member.declaring_class = member.declaring_class or self.name
        for member in self.methods:
            member.kind = MemberKind.METHOD
            member.declaring_class = member.declaring_class or self.name
        return self

    @property
    def simple_name(self) -> str:
        return simple_name_of(self.name)

    def annotation(self, name: str) -> Optional[AnnotationInstance]:
        """Return the class-level annotation whose simple name is *name*."""
        wanted = simple_name_of(name)
        for ann in self.annotations:
            if ann.simple_name == wanted:
                return ann
        return None

    def has_annotation(self, name: str) -> bool:
        return self.annotation(name) is not None


class AnnotationUsage(BaseModel):
    """One application of an annotation found through the index.

    Attributes:
        class_info: The class declaring the annotated element.
        target_kind: Kind of element annotated.
        target_name: Class, field or method name.
        annotation: The annotation instance itself.
    """

    class_info: ClassMetadata
    target_kind: AnnotationTargetKind
    target_name: str
    annotation: AnnotationInstance


class IndexDocument(_IndexModel):
    """Root of an on-disk JSON metadata index."""

    classes: list[ClassMetadata] = Field(default_factory=list)
