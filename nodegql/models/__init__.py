"""Pydantic v2 data models for class metadata and the schema model."""

from nodegql.models.metadata import (
    AnnotationInstance,
    AnnotationTargetKind,
    AnnotationUsage,
    ClassMetadata,
    IndexDocument,
    MemberKind,
    MemberMetadata,
    TypeDescriptor,
    TypeKind,
)
from nodegql.models.schema import (
    Direction,
    Endpoint,
    EntityKind,
    EntityTypeModel,
    EnumType,
    Mention,
    RelationshipAttribute,
    ScalarType,
    SimpleAttribute,
)

__all__ = [
    "AnnotationInstance",
    "AnnotationTargetKind",
    "AnnotationUsage",
    "ClassMetadata",
    "IndexDocument",
    "MemberKind",
    "MemberMetadata",
    "TypeDescriptor",
    "TypeKind",
    "Direction",
    "Endpoint",
    "EntityKind",
    "EntityTypeModel",
    "EnumType",
    "Mention",
    "RelationshipAttribute",
    "ScalarType",
    "SimpleAttribute",
]
