"""Scanning of annotated classes into schema type models.

:class:`SchemaScanner` is the scan driver.  It runs three passes over the
metadata index, in dependency order:

1. ``@SchemaEnum`` enums, so declared enum names win over implicit ones.
2. ``@SchemaInterface`` interfaces, so entity types can attach them.
3. ``@NodeEntity`` classes, promoting unscanned non-entity superclasses
   to interfaces along the way.

:class:`EntityScanner` scans one class.  Whether getters or fields are the
primary attribute source is decided once per class by where the governing
marker (``@NodeKey`` for nodes, ``@EndNode`` for relationship entities)
sits on the class or its nearest ancestor.  Per-member failures are
collected; a class with any failure is dropped as a whole.
"""

from __future__ import annotations

import enum
from typing import Iterator, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from nodegql.constants import (
    END_NODE,
    ENTITY_TYPE_NODE,
    ENTITY_TYPE_RELATION,
    JSON_PROPERTY,
    NODE_ATTRIBUTE,
    NODE_ENTITY,
    NODE_IGNORE,
    NODE_KEY,
    SCHEMA_ENUM,
    SCHEMA_INTERFACE,
    START_NODE,
)
from nodegql.core.classifier import TypeClassifier
from nodegql.core.index import MetadataIndex
from nodegql.core.loader import ClassLoader
from nodegql.core.schema_model import SchemaModel
from nodegql.errors import AttributeModelError, ClassModelError, ModelError
from nodegql.models.metadata import (
    OBJECT_CLASS,
    AnnotationTargetKind,
    ClassMetadata,
    MemberKind,
    MemberMetadata,
)
from nodegql.models.schema import (
    Direction,
    EntityTypeModel,
    EnumType,
    RelationshipAttribute,
    SimpleAttribute,
    entity_type_of,
    labels_of,
)
from nodegql.naming import attribute_name_from_getter, is_getter_name

logger = structlog.get_logger(__name__)


class ScanLocation(str, enum.Enum):
    """Primary attribute source of a class."""

    METHODS = "methods"
    FIELDS = "fields"


class EntityScan(BaseModel):
    """Outcome of scanning one class.

    Attributes:
        model: The scanned type, ``None`` when any error occurred.
        errors: Every error found while scanning the class.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: Optional[EntityTypeModel] = None
    errors: list[ModelError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.model is not None


def attribute_name(member: MemberMetadata) -> str:
    """Schema name of *member*: ``@NodeAttribute(name)``, ``@JsonProperty``, or derived."""
    node_attribute = member.annotation(NODE_ATTRIBUTE)
    if node_attribute is not None and node_attribute.value("name"):
        return str(node_attribute.value("name"))
    json_property = member.annotation(JSON_PROPERTY)
    if json_property is not None and json_property.value("value"):
        return str(json_property.value("value"))
    if member.kind == MemberKind.METHOD:
        return attribute_name_from_getter(member.name)
    return member.name


def _is_getter(member: MemberMetadata) -> bool:
    return (
        member.is_public
        and not member.is_static
        and member.parameters_count == 0
        and is_getter_name(member.name)
    )


class EntityScanner:
    """Builds an :class:`EntityTypeModel` for one class from its members.

    Args:
        index: Metadata index used to walk superclass and interface chains.
        model: Schema model receiving mentions and supplying interfaces.
        classifier: Member type classifier.
    """

    def __init__(self, index: MetadataIndex, model: SchemaModel, classifier: TypeClassifier) -> None:
        self._index = index
        self._model = model
        self._classifier = classifier
        self._scan_locations: dict[tuple[str, str], ScanLocation] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def scan_entity(self, cls: ClassMetadata, relationship: bool = False) -> EntityScan:
        """Scan *cls* as a node entity, or as a relationship entity.

        Args:
            cls: The ``@NodeEntity`` class.
            relationship: Scan as a relationship entity (``@EndNode`` governs).

        Returns:
            The scanned model, or ``None`` with the errors that prevented it.
        """
        try:
            if relationship:
                type_model = EntityTypeModel.for_relationship(cls)
            else:
                type_model = EntityTypeModel.for_node(cls)
            location = self.scan_location(cls, END_NODE if relationship else NODE_KEY)
        except ClassModelError as exc:
            return EntityScan(errors=[exc])

        for interface_name in self._all_interface_names(cls):
            interface = self._model.get_interface(interface_name)
            if interface is not None:
                type_model.add_interface(interface.schema_name)

        errors: list[ModelError] = []
        if location == ScanLocation.METHODS:
            errors.extend(self.scan_getters(cls, type_model, require_attribute=False))
            errors.extend(self.scan_fields(cls, type_model, require_attribute=True))
        else:
            errors.extend(self.scan_fields(cls, type_model, require_attribute=False))
            errors.extend(self.scan_getters(cls, type_model, require_attribute=True))

        if errors:
            logger.warning("class_discarded", cls=cls.name, errors=len(errors))
            return EntityScan(errors=errors)
        return EntityScan(model=type_model)

    def build_interface(self, cls: ClassMetadata, schema_name: Optional[str] = None) -> EntityScan:
        """Scan *cls* as an interface model.

        A real interface contributes its getters and those of its
        super-interfaces.  A class promoted to an interface contributes its
        fields (walking the superclass chain) and any ``@NodeAttribute``
        getters.
        """
        type_model = EntityTypeModel.for_interface(cls, schema_name)
        errors: list[ModelError] = []
        if not cls.is_interface:
            errors.extend(self.scan_fields(cls, type_model, require_attribute=False))
        errors.extend(self._scan_interface_getters(cls, type_model, set()))
        if errors:
            return EntityScan(errors=errors)
        return EntityScan(model=type_model)

    def scan_location(self, cls: ClassMetadata, marker: str) -> ScanLocation:
        """Decide whether getters or fields are the primary source for *cls*.

        The nearest class in the superclass chain carrying *marker* on any
        member decides.  A field marker wins over a method marker declared on
        the same class.

        Raises:
            ClassModelError: If no class in the chain carries *marker*.
        """
        cache_key = (cls.name, marker)
        if cache_key in self._scan_locations:
            return self._scan_locations[cache_key]

        location: Optional[ScanLocation] = None
        for ancestor in self._superclass_chain(cls):
            if any(f.has_annotation(marker) for f in ancestor.fields):
                location = ScanLocation.FIELDS
                break
            if any(m.has_annotation(marker) for m in ancestor.methods):
                location = ScanLocation.METHODS
                break
        if location is None:
            raise ClassModelError(cls.name, f"Unable to find @{marker} for class")

        self._scan_locations[cache_key] = location
        return location

    def scan_fields(
        self,
        cls: ClassMetadata,
        type_model: EntityTypeModel,
        require_attribute: bool,
    ) -> list[ModelError]:
        """Scan non-static fields of *cls* and its superclasses."""
        errors: list[ModelError] = []
        for owner in self._superclass_chain(cls):
            for field in owner.fields:
                if field.is_static:
                    continue
                errors.extend(self._scan_member(cls, field, type_model, require_attribute))
        return errors

    def scan_getters(
        self,
        cls: ClassMetadata,
        type_model: EntityTypeModel,
        require_attribute: bool,
    ) -> list[ModelError]:
        """Scan public zero-argument ``getX``/``isX`` methods of *cls* and its superclasses."""
        errors: list[ModelError] = []
        for owner in self._superclass_chain(cls):
            errors.extend(self._scan_declared_getters(cls, owner, type_model, require_attribute))
        return errors

    # ------------------------------------------------------------------
    # Member scanning
    # ------------------------------------------------------------------

    def _scan_interface_getters(
        self,
        cls: ClassMetadata,
        type_model: EntityTypeModel,
        visited: set[str],
    ) -> list[ModelError]:
        if cls.name in visited:
            return []
        visited.add(cls.name)
        # getters on a promoted class may shadow its fields, so they need @NodeAttribute
        errors = self._scan_declared_getters(cls, cls, type_model, not cls.is_interface)
        for name in cls.interface_names:
            parent = self._index.get_class(name)
            if parent is not None:
                errors.extend(self._scan_interface_getters(parent, type_model, visited))
        return errors

    def _scan_declared_getters(
        self,
        scanned: ClassMetadata,
        owner: ClassMetadata,
        type_model: EntityTypeModel,
        require_attribute: bool,
    ) -> list[ModelError]:
        errors: list[ModelError] = []
        for method in owner.methods:
            if _is_getter(method):
                errors.extend(self._scan_member(scanned, method, type_model, require_attribute))
        return errors

    def _scan_member(
        self,
        scanned: ClassMetadata,
        member: MemberMetadata,
        type_model: EntityTypeModel,
        require_attribute: bool,
    ) -> list[ModelError]:
        """Scan one field or getter, returning the errors it produced."""
        name = attribute_name(member)

        if member.has_annotation(START_NODE) or member.has_annotation(END_NODE):
            # endpoint markers take precedence over @NodeIgnore
            if require_attribute and not member.has_annotation(NODE_ATTRIBUTE):
                return []
            marker = START_NODE if member.has_annotation(START_NODE) else END_NODE
            if not type_model.is_relationship:
                return [
                    AttributeModelError(
                        member.name, scanned.name, f"Encountered @{marker} in non-relation node entity"
                    )
                ]
            if marker == START_NODE:
                type_model.set_from(name, member.type.name)
            else:
                type_model.set_to(name, member.type.name)
            return []

        if member.has_annotation(NODE_IGNORE):
            referenced = self._classifier.referenced_class(member.type)
            if referenced is not None:
                self._model.ignore_mention(referenced, member.declaring_class, name)
            type_model.ignore_attribute(name)
            return []

        if require_attribute and not member.has_annotation(NODE_ATTRIBUTE):
            return []

        try:
            self._add_attribute(member, name, type_model)
        except AttributeModelError as exc:
            return [exc]
        except ModelError as exc:
            return [AttributeModelError(member.name, scanned.name, exc.message)]
        return []

    def _add_attribute(self, member: MemberMetadata, name: str, type_model: EntityTypeModel) -> None:
        classification = self._classifier.classify(member)
        scalar = classification.scalar
        if scalar is not None:
            attr = SimpleAttribute(
                name=name,
                scalar=scalar,
                required=classification.is_required,
                collection=classification.is_collection,
                source_type=classification.element_type.name,
            )
            if type_model.add_simple_attribute(attr) and member.has_annotation(NODE_KEY):
                type_model.add_key_attribute(attr)
            return

        target = classification.element_type.name
        node_attribute = member.annotation(NODE_ATTRIBUTE)
        relation_name = self._relation_label(target)
        across_relation_entity = relation_name is not None
        if relation_name is None and node_attribute is not None:
            relation_name = node_attribute.value("relation") or None
        if relation_name is None:
            raise AttributeModelError(
                member.name,
                member.declaring_class,
                "Non-scalar property requires @NodeAttribute with relationship.",
            )

        raw_direction = node_attribute.value("direction", Direction.OUT.value) if node_attribute else "OUT"
        try:
            direction = Direction(str(raw_direction).rsplit(".", 1)[-1].upper())
        except ValueError as exc:
            raise AttributeModelError(
                member.name, member.declaring_class, f"Unknown relationship direction '{raw_direction}'"
            ) from exc

        cascades = node_attribute.value("cascade", []) if node_attribute else []
        if isinstance(cascades, str):
            cascades = [cascades]

        attr = RelationshipAttribute(
            name=name,
            target_class=target,
            relation_name=str(relation_name),
            direction=direction,
            required=classification.is_required,
            collection=classification.is_collection,
            cascades=[str(c).rsplit(".", 1)[-1] for c in cascades],
            across_relation_entity=across_relation_entity,
        )
        type_model.add_relationship_attribute(attr)
        self._model.add_mention(target, member.declaring_class, name)

    # ------------------------------------------------------------------
    # Index walking
    # ------------------------------------------------------------------

    def _relation_label(self, class_name: str) -> Optional[str]:
        """Single label of *class_name* when it is a relationship entity."""
        target = self._index.get_class(class_name)
        if target is None or entity_type_of(target) != ENTITY_TYPE_RELATION:
            return None
        labels = labels_of(target.annotation(NODE_ENTITY).value("label", []))
        return labels[0] if len(labels) == 1 else None

    def _superclass_chain(self, cls: ClassMetadata) -> Iterator[ClassMetadata]:
        """Yield *cls* then each indexed superclass, stopping at the first gap."""
        seen: set[str] = set()
        current: Optional[ClassMetadata] = cls
        while current is not None and current.name not in seen:
            seen.add(current.name)
            yield current
            if not current.super_name or current.super_name == OBJECT_CLASS:
                return
            current = self._index.get_class(current.super_name)

    def _all_interface_names(self, cls: ClassMetadata) -> list[str]:
        names: list[str] = []
        for ancestor in self._superclass_chain(cls):
            for name in ancestor.interface_names:
                if name not in names:
                    names.append(name)
        return names


class SchemaScanner:
    """Scan driver populating a :class:`SchemaModel` from a metadata index.

    Usage::

        model = SchemaModel(registry)
        errors = SchemaScanner(index, model, loader).scan()

    Args:
        index: Metadata index to scan.
        model: Model receiving scanned enums, interfaces and types.
        loader: Class-loading oracle.
    """

    def __init__(self, index: MetadataIndex, model: SchemaModel, loader: ClassLoader) -> None:
        self._index = index
        self._model = model
        self._loader = loader
        self._entities = EntityScanner(index, model, TypeClassifier(model.scalars, loader))
        self._errors: list[ModelError] = []
        # classes already scanned as entities or promoted interfaces, successfully or not
        self._attempted: set[str] = set()

    def scan(self) -> list[ModelError]:
        """Run the enum, interface and type passes.

        Returns:
            Every error collected; the model holds whatever scanned cleanly.
        """
        logger.info("scan_started")
        self._scan_enums()
        self._scan_interfaces()
        self._scan_types()
        logger.info(
            "scan_finished",
            types=len(self._model.types),
            enums=len(self._model.scalars.enums),
            errors=len(self._errors),
        )
        return list(self._errors)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _class_usages(self, annotation: str) -> Iterator[ClassMetadata]:
        for usage in self._index.classes_annotated_with(annotation):
            if usage.target_kind == AnnotationTargetKind.CLASS:
                yield usage.class_info

    def _scan_enums(self) -> None:
        for cls in self._class_usages(SCHEMA_ENUM):
            logger.debug("scan_enum", cls=cls.name)
            if self._model.has_enum(cls.name):
                continue
            loaded = self._loader.load_class(cls.name)
            if loaded is None or not loaded.is_enum:
                self._errors.append(ClassModelError(cls.name, "@SchemaEnum is only supported on enums"))
                continue
            declared = cls.annotation(SCHEMA_ENUM).value("schemaName", "")
            name = declared if str(declared).strip() else cls.simple_name
            self._model.add_enum_type(cls.name, EnumType.create(name, loaded.enum_constant_names))

    def _scan_interfaces(self) -> None:
        for cls in self._class_usages(SCHEMA_INTERFACE):
            logger.debug("scan_interface", cls=cls.name)
            if not cls.is_interface:
                self._errors.append(ClassModelError(cls.name, "@SchemaInterface is only supported on interfaces"))
                continue
            declared = cls.annotation(SCHEMA_INTERFACE).value("schemaName", "")
            name = declared if str(declared).strip() else cls.simple_name
            scan = self._entities.build_interface(cls, name)
            self._errors.extend(scan.errors)
            if scan.model is not None:
                self._model.add_interface(scan.model)

    def _scan_types(self) -> None:
        for cls in self._class_usages(NODE_ENTITY):
            logger.debug("scan_entity", cls=cls.name)
            if cls.is_interface:
                self._errors.append(ClassModelError(cls.name, "@NodeEntity is only supported on classes"))
                continue
            kind = entity_type_of(cls) or ENTITY_TYPE_NODE
            try:
                promoted = self._scan_super(cls.super_name, cls.name, kind) if cls.super_name else []
            except ModelError as exc:
                self._errors.append(exc)
                continue
            self._register_entity(cls, kind, promoted)

    def _register_entity(self, cls: ClassMetadata, kind: str, promoted: list[EntityTypeModel]) -> None:
        if cls.name in self._attempted:
            return
        self._attempted.add(cls.name)
        scan = self._entities.scan_entity(cls, relationship=kind == ENTITY_TYPE_RELATION)
        self._errors.extend(scan.errors)
        if scan.model is None:
            return
        for interface in promoted:
            scan.model.add_interface(interface.schema_name)
        self._model.add_type(scan.model)

    def _scan_super(self, super_name: str, sub_name: str, sub_kind: str) -> list[EntityTypeModel]:
        """Classify the ancestors of a class, root first.

        Entity ancestors are scanned and registered, ``@NodeIgnore`` ancestors
        are skipped, and any other indexed ancestor is promoted to an
        interface.

        Returns:
            The promoted interfaces found along the chain, root first.

        Raises:
            ClassModelError: If an ancestor declares a different entity kind.
        """
        discovered: list[EntityTypeModel] = []
        super_cls = self._index.get_class(super_name)
        if super_cls is None or super_cls.name == OBJECT_CLASS:
            return discovered
        if super_cls.super_name:
            discovered.extend(self._scan_super(super_cls.super_name, super_name, sub_kind))

        if super_cls.has_annotation(NODE_IGNORE):
            return discovered

        kind = entity_type_of(super_cls) or sub_kind
        if kind != sub_kind:
            raise ClassModelError(super_name, f"Entity type {kind} does not match subclass {sub_name}.")

        if self._model.has_type_model(super_name):
            interface = self._model.get_interface(super_name)
            if interface is not None:
                discovered.append(interface)
            return discovered

        if super_name in self._attempted:
            return discovered

        if super_cls.has_annotation(NODE_ENTITY):
            self._register_entity(super_cls, kind, list(discovered))
            return discovered

        self._attempted.add(super_name)
        scan = self._entities.build_interface(super_cls)
        self._errors.extend(scan.errors)
        if scan.model is not None:
            self._model.add_interface(scan.model)
            discovered.append(scan.model)
        return discovered
