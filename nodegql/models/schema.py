"""Schema model types: scalars, enums, attributes and entity type models.

An :class:`EntityTypeModel` is one schema type.  Its :class:`EntityKind`
is a closed enumeration and both resolution and rendering branch on it:
node entities, relationship entities (graph edges with ``from``/``to``
endpoints), true interfaces, and abstract superclasses promoted to
interfaces.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

from nodegql.constants import (
    ABSTRACT_INTERFACE_SUFFIX,
    DEEP_CASCADES,
    DEFAULT_FROM_ROLE,
    ENTITY_TYPE_NODE,
    NODE_ENTITY,
)
from nodegql.errors import AttributeModelError, ClassModelError
from nodegql.models.metadata import ClassMetadata, simple_name_of

if TYPE_CHECKING:
    from nodegql.core.schema_model import SchemaModel


class ScalarType(BaseModel):
    """A named leaf type.  Identity is by name."""

    name: str = Field(..., description="Schema scalar name.")


class EnumType(ScalarType):
    """An enum scalar with its ordered, deduplicated allowed values."""

    allowed_values: list[str] = Field(default_factory=list, description="Enum constant names.")

    @classmethod
    def create(cls, name: str, values: list[str]) -> EnumType:
        return cls(name=name, allowed_values=list(dict.fromkeys(values)))


INT = ScalarType(name="Int")
FLOAT = ScalarType(name="Float")
STRING = ScalarType(name="String")
BOOLEAN = ScalarType(name="Boolean")
ID = ScalarType(name="ID")


class Direction(str, enum.Enum):
    """Direction of a graph relationship."""

    OUT = "OUT"
    IN = "IN"


class EntityKind(str, enum.Enum):
    """Closed set of schema type kinds."""

    NODE = "node"
    RELATIONSHIP = "relationship"
    INTERFACE = "interface"
    ABSTRACT_SUPERCLASS = "abstract_superclass"


class SimpleAttribute(BaseModel):
    """An attribute whose type is a scalar, an enum, or a list thereof.

    Attributes:
        name: Schema attribute name.
        scalar: Scalar or enum type of the element.
        required: Whether the attribute is non-null.
        collection: Whether the attribute is a list.
        source_type: Fully-qualified element class the attribute came from.
    """

    name: str
    scalar: ScalarType
    required: bool = False
    collection: bool = False
    source_type: str = ""


class RelationshipAttribute(BaseModel):
    """An attribute referring to another entity type.

    The target is held by class name until :meth:`EntityTypeModel.resolve`
    fills in ``target_schema_name``.

    Attributes:
        name: Schema attribute name.
        target_class: Fully-qualified element class of the target.
        relation_name: Relationship label.
        direction: Relationship direction.
        required: Whether the attribute is non-null.
        collection: Whether the attribute is a list.
        cascades: Cascade markers such as ``DELETE`` or ``ALL``.
        across_relation_entity: The target is a relationship entity.
        target_schema_name: Resolved schema name of the target.
    """

    name: str
    target_class: str
    relation_name: str
    direction: Direction = Direction.OUT
    required: bool = False
    collection: bool = False
    cascades: list[str] = Field(default_factory=list)
    across_relation_entity: bool = False
    target_schema_name: Optional[str] = None

    @property
    def is_cascading(self) -> bool:
        """Whether the cascades carry a query closure past this relationship."""
        return any(c in DEEP_CASCADES for c in self.cascades)


class Endpoint(BaseModel):
    """One end (``from`` or ``to``) of a relationship entity.

    Attributes:
        attr_name: Name of the marker member, ``None`` when inferred.
        class_name: Declared class of the marker member, ``None`` when inferred.
        resolved_class: Class name of the resolved endpoint type.
        schema_name: Schema name of the resolved endpoint type.
    """

    attr_name: Optional[str] = None
    class_name: Optional[str] = None
    resolved_class: Optional[str] = None
    schema_name: Optional[str] = None


class Mention(BaseModel):
    """A reference from an attribute of one class to another type."""

    model_config = {"frozen": True}

    mentioned_class: str
    source_class: str
    attribute_name: Optional[str] = None


class EntityTypeModel(BaseModel):
    """One schema type built from a scanned class.

    Attributes:
        class_name: Fully-qualified name of the originating class.
        schema_name: Name of the type in the schema.
        kind: Kind of schema type.
        simple_attributes: Scalar and enum attributes in scan order.
        relationship_attributes: Entity-valued attributes in scan order.
        interface_names: Schema names of implemented interfaces.
        ignored_attributes: Attribute names suppressed for this type.
        key_attributes: Natural key, a subset of ``simple_attributes``.
        relation_name: Relationship label (relationship entities only).
        from_endpoint: Start node (relationship entities only).
        to_endpoint: End node (relationship entities only).
    """

    class_name: str
    schema_name: str
    kind: EntityKind = EntityKind.NODE
    simple_attributes: list[SimpleAttribute] = Field(default_factory=list)
    relationship_attributes: list[RelationshipAttribute] = Field(default_factory=list)
    interface_names: list[str] = Field(default_factory=list)
    ignored_attributes: list[str] = Field(default_factory=list)
    key_attributes: list[SimpleAttribute] = Field(default_factory=list)
    relation_name: Optional[str] = None
    from_endpoint: Optional[Endpoint] = None
    to_endpoint: Optional[Endpoint] = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def for_node(cls, class_info: ClassMetadata) -> EntityTypeModel:
        """Build an empty node entity model named from ``@NodeEntity(label)``."""
        entity = class_info.annotation(NODE_ENTITY)
        if entity is None:
            raise ClassModelError(class_info.name, "Scanned but no @NodeEntity annotation")
        labels = labels_of(entity.value("label", []))
        name = labels[0] if labels else class_info.simple_name
        return cls(class_name=class_info.name, schema_name=name, kind=EntityKind.NODE)

    @classmethod
    def for_relationship(cls, class_info: ClassMetadata) -> EntityTypeModel:
        """Build an empty relationship entity model.

        Raises:
            ClassModelError: If the class does not carry exactly one label.
        """
        entity = class_info.annotation(NODE_ENTITY)
        if entity is None:
            raise ClassModelError(class_info.name, "Scanned but no @NodeEntity annotation")
        labels = labels_of(entity.value("label", []))
        if len(labels) != 1:
            raise ClassModelError(class_info.name, "Relation entity requires exactly one label")
        return cls(
            class_name=class_info.name,
            schema_name=class_info.simple_name,
            kind=EntityKind.RELATIONSHIP,
            relation_name=labels[0],
            from_endpoint=Endpoint(),
            to_endpoint=Endpoint(),
        )

    @classmethod
    def for_interface(
        cls,
        class_info: ClassMetadata,
        schema_name: Optional[str] = None,
    ) -> EntityTypeModel:
        """Build an interface model.

        A real interface keeps its name (or *schema_name*); a class promoted
        to an interface gets the ``Intf`` suffix unless *schema_name* is given.
        """
        if class_info.is_interface:
            kind = EntityKind.INTERFACE
            default_name = class_info.simple_name
        else:
            kind = EntityKind.ABSTRACT_SUPERCLASS
            default_name = f"{class_info.simple_name}{ABSTRACT_INTERFACE_SUFFIX}"
        name = schema_name if schema_name and schema_name.strip() else default_name
        return cls(class_name=class_info.name, schema_name=name, kind=kind)

    # ------------------------------------------------------------------
    # Kind helpers
    # ------------------------------------------------------------------

    @property
    def simple_name(self) -> str:
        return simple_name_of(self.class_name)

    @property
    def is_interface(self) -> bool:
        return self.kind in (EntityKind.INTERFACE, EntityKind.ABSTRACT_SUPERCLASS)

    @property
    def is_relationship(self) -> bool:
        return self.kind == EntityKind.RELATIONSHIP

    @property
    def from_role(self) -> str:
        """Role name of the start node, defaulting to ``sourceNode`` when inferred."""
        if self.from_endpoint is not None and self.from_endpoint.attr_name:
            return self.from_endpoint.attr_name
        return DEFAULT_FROM_ROLE

    @property
    def to_role(self) -> Optional[str]:
        return self.to_endpoint.attr_name if self.to_endpoint is not None else None

    def fragment_name(self) -> str:
        """Name of the fragment selecting this type's simple attributes."""
        base = self.schema_name
        if self.is_interface and base.endswith(ABSTRACT_INTERFACE_SUFFIX) and base != ABSTRACT_INTERFACE_SUFFIX:
            base = base[: -len(ABSTRACT_INTERFACE_SUFFIX)]
        return f"{base}Fields"

    # ------------------------------------------------------------------
    # Attribute registration
    # ------------------------------------------------------------------

    def ignore_attribute(self, attr_name: str) -> None:
        """Suppress *attr_name* now and for the rest of the scan."""
        if attr_name not in self.ignored_attributes:
            self.ignored_attributes.append(attr_name)
        self.simple_attributes = [a for a in self.simple_attributes if a.name != attr_name]
        self.relationship_attributes = [a for a in self.relationship_attributes if a.name != attr_name]
        self.key_attributes = [a for a in self.key_attributes if a.name != attr_name]

    def add_simple_attribute(self, attr: SimpleAttribute) -> bool:
        """Add *attr* unless ignored or already present; returns whether it was added."""
        if self.is_relationship and attr.name in (self.from_endpoint.attr_name, self.to_endpoint.attr_name):
            return False
        if attr.name in self.ignored_attributes:
            return False
        if any(a.name == attr.name for a in self.simple_attributes):
            return False
        self.simple_attributes.append(attr)
        return True

    def add_relationship_attribute(self, attr: RelationshipAttribute) -> bool:
        """Add *attr* unless ignored or already present; returns whether it was added.

        Raises:
            AttributeModelError: On a relationship entity, which cannot carry
                relationship attributes.
        """
        if self.is_relationship:
            raise AttributeModelError(
                attr.name, self.class_name, "Unable to add relationship attribute on relationship entity."
            )
        if attr.name in self.ignored_attributes:
            return False
        if any(a.name == attr.name for a in self.relationship_attributes):
            return False
        self.relationship_attributes.append(attr)
        return True

    def add_key_attribute(self, attr: SimpleAttribute) -> None:
        if not any(k.name == attr.name for k in self.key_attributes):
            self.key_attributes.append(attr)

    def add_interface(self, schema_name: str) -> None:
        if schema_name not in self.interface_names:
            self.interface_names.append(schema_name)

    def set_from(self, attr_name: str, class_name: str) -> None:
        """Record the explicit start node member; it never becomes a plain attribute."""
        self.from_endpoint = Endpoint(attr_name=attr_name, class_name=class_name)
        self.simple_attributes = [a for a in self.simple_attributes if a.name != attr_name]

    def set_to(self, attr_name: str, class_name: str) -> None:
        """Record the end node member; it never becomes a plain attribute."""
        self.to_endpoint = Endpoint(attr_name=attr_name, class_name=class_name)
        self.simple_attributes = [a for a in self.simple_attributes if a.name != attr_name]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, model: SchemaModel) -> None:
        """Resolve relationship targets and, for relationship entities, endpoints.

        Raises:
            ClassModelError: If any reference cannot be resolved.
        """
        for attr in self.relationship_attributes:
            target = model.get_type_model(attr.target_class)
            if target is None:
                raise ClassModelError(
                    self.class_name,
                    f"Attribute '{attr.name}' of type '{self.schema_name}' could not resolve type {attr.target_class}",
                )
            attr.target_schema_name = target.schema_name

        if not self.is_relationship:
            return

        if self.to_endpoint is None or self.to_endpoint.class_name is None:
            raise ClassModelError(self.class_name, "Relation entity does not have @EndNode")
        to_model = model.get_type_model(self.to_endpoint.class_name)
        if to_model is None:
            raise ClassModelError(self.class_name, "Relation entity end node is not a valid entity")
        self.to_endpoint.resolved_class = to_model.class_name
        self.to_endpoint.schema_name = to_model.schema_name

        from_model = None
        if self.from_endpoint is not None and self.from_endpoint.class_name is not None:
            from_model = model.get_type_model(self.from_endpoint.class_name)
        if from_model is None:
            from_model = model.find_from_type_model(self)
        if from_model is None:
            raise ClassModelError(self.class_name, "Relation entity not referenced from any source node.")
        if self.from_endpoint is None:
            self.from_endpoint = Endpoint()
        self.from_endpoint.resolved_class = from_model.class_name
        self.from_endpoint.schema_name = from_model.schema_name


def labels_of(raw: object) -> list[str]:
    """Normalise a ``label`` annotation value to a list of strings."""
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw] if raw else []
    return [str(item) for item in raw]


def entity_type_of(class_info: ClassMetadata) -> Optional[str]:
    """Return ``NODE``/``RELATION`` for a ``@NodeEntity`` class, else ``None``."""
    entity = class_info.annotation(NODE_ENTITY)
    if entity is None:
        return None
    return str(entity.value("type", ENTITY_TYPE_NODE)).rsplit(".", 1)[-1].upper()
