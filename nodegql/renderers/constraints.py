"""Constraint script renderer for single-key node types."""

from __future__ import annotations

from nodegql.core.schema_model import SchemaModel
from nodegql.renderers.base import RenderedDocument


def constraint_file_name(schema_file: str) -> str:
    """``schema.graphql`` becomes ``schema.constraint``."""
    if schema_file.endswith(".graphql"):
        return schema_file[: -len(".graphql")] + ".constraint"
    return schema_file + ".constraint"


def render_constraints(model: SchemaModel, file_name: str = "schema.constraint") -> RenderedDocument:
    """Render an index and a uniqueness constraint per single-key concrete node type.

    Types are visited in registration order; relationship entities,
    interfaces and types with zero or several key attributes are skipped.
    """
    statements: list[str] = []
    for type_model in model.concrete_types:
        if type_model.is_relationship or len(type_model.key_attributes) != 1:
            continue
        label = type_model.schema_name
        key = type_model.key_attributes[0].name
        statements.append(
            f"CREATE INDEX index_{label}_{key} IF NOT EXISTS FOR (n:{label}) ON (n.{key});\n"
            f"CREATE CONSTRAINT constraint_{label}_{key} IF NOT EXISTS FOR (n:{label}) "
            f"REQUIRE n.{key} IS UNIQUE;\n"
            "\n"
        )
    return RenderedDocument(file_name=file_name, content="".join(statements))
