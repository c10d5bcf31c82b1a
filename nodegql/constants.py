"""Annotation names and schema naming constants shared across the generator."""

from __future__ import annotations

# Annotations are matched by simple name so both ``NodeEntity`` and the
# fully-qualified ``com.example.nodeentity.NodeEntity`` are recognised.
NODE_ENTITY = "NodeEntity"
NODE_KEY = "NodeKey"
NODE_ATTRIBUTE = "NodeAttribute"
NODE_IGNORE = "NodeIgnore"
START_NODE = "StartNode"
END_NODE = "EndNode"
SCHEMA_INTERFACE = "SchemaInterface"
SCHEMA_ENUM = "SchemaEnum"
JSON_PROPERTY = "JsonProperty"

# Values of ``@NodeEntity(type=...)``.
ENTITY_TYPE_NODE = "NODE"
ENTITY_TYPE_RELATION = "RELATION"

# Schema name suffix for abstract superclasses promoted to interfaces.
ABSTRACT_INTERFACE_SUFFIX = "Intf"

# Role name of an inferred relationship-entity start node.
DEFAULT_FROM_ROLE = "sourceNode"

# Cascades that make a relationship expand deeply in generated queries.
DEEP_CASCADES = frozenset({"DELETE", "ALL"})

INDENT = "    "
