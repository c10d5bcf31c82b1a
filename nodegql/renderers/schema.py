"""Schema text renderer.

The document has four sections in fixed order: declared scalars (in
declaration order), enums, interfaces and concrete types (each sorted by
schema name).  A blank line follows the scalar section and every block.
"""

from __future__ import annotations

from nodegql.constants import INDENT
from nodegql.core.schema_model import SchemaModel
from nodegql.models.metadata import simple_name_of
from nodegql.models.schema import (
    EntityKind,
    EntityTypeModel,
    EnumType,
    RelationshipAttribute,
    SimpleAttribute,
)
from nodegql.renderers.base import RenderedDocument


def _type_ref(name: str, required: bool, collection: bool) -> str:
    rendered = f"[{name}!]" if collection else name
    return f"{rendered}!" if required else rendered


def render_simple_attribute(attr: SimpleAttribute) -> str:
    """``name : Type`` with ``!`` when required and ``[Type!]`` for lists."""
    return f"{attr.name} : {_type_ref(attr.scalar.name, attr.required, attr.collection)}"


def render_relationship_attribute(attr: RelationshipAttribute) -> str:
    target = attr.target_schema_name or simple_name_of(attr.target_class)
    return (
        f"{attr.name} : {_type_ref(target, attr.required, attr.collection)}"
        f' @relation(name: "{attr.relation_name}", direction: "{attr.direction.value}")'
    )


def render_enum(enum_type: EnumType) -> str:
    lines = [f"enum {enum_type.name} {{"]
    lines.extend(f"{INDENT}{value}" for value in enum_type.allowed_values)
    lines.append("}")
    return "\n".join(lines)


def _header(type_model: EntityTypeModel) -> str:
    if type_model.is_interface:
        return f"interface {type_model.schema_name} {{"
    if type_model.kind == EntityKind.RELATIONSHIP:
        return (
            f"type {type_model.schema_name} @relation(name: \"{type_model.relation_name}\", "
            f'from: "{type_model.from_role}", to: "{type_model.to_role}") {{'
        )
    if type_model.interface_names:
        return f"type {type_model.schema_name} implements {' & '.join(type_model.interface_names)} {{"
    return f"type {type_model.schema_name} {{"


def render_type(type_model: EntityTypeModel) -> str:
    """Render one type or interface block, without the trailing blank line.

    A relationship entity renders its simple attributes followed by the
    ``from`` and ``to`` endpoint fields instead of relationship attributes.
    """
    lines = [_header(type_model)]
    lines.extend(INDENT + render_simple_attribute(a) for a in type_model.simple_attributes)
    if type_model.kind == EntityKind.RELATIONSHIP:
        from_name = type_model.from_endpoint.schema_name if type_model.from_endpoint else None
        to_name = type_model.to_endpoint.schema_name if type_model.to_endpoint else None
        lines.append(f"{INDENT}{type_model.from_role} : {from_name}!")
        lines.append(f"{INDENT}{type_model.to_role} : {to_name}!")
    else:
        lines.extend(INDENT + render_relationship_attribute(a) for a in type_model.relationship_attributes)
    lines.append("}")
    return "\n".join(lines)


def render_schema(model: SchemaModel, file_name: str = "schema.graphql") -> RenderedDocument:
    """Render the full schema document for a resolved *model*."""
    parts: list[str] = []
    for scalar in model.scalars.declared_scalars:
        parts.append(f"scalar {scalar.name}\n")
    parts.append("\n")

    for enum_type in sorted(model.scalars.enums, key=lambda e: e.name):
        parts.append(render_enum(enum_type) + "\n\n")

    for interface in sorted(model.interfaces, key=lambda t: t.schema_name):
        parts.append(render_type(interface) + "\n\n")

    for type_model in sorted(model.concrete_types, key=lambda t: t.schema_name):
        parts.append(render_type(type_model) + "\n\n")

    return RenderedDocument(file_name=file_name, content="".join(parts))
