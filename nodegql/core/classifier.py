"""Classification of member types into scalars, enums and entity references.

Given the declared type of a field or getter, :class:`TypeClassifier`
unwraps one level of array or collection, decides whether the element is
a scalar, an enum or a reference to another entity, and works out whether
the attribute is required.

Nested collections (``List<List<String>>``) are only unwrapped once; the
inner collection is then classified like any other class.
"""

from __future__ import annotations

from typing import Optional, Union

import structlog
from pydantic import BaseModel

from nodegql.constants import NODE_ATTRIBUTE, NODE_KEY
from nodegql.core.loader import ClassLoader
from nodegql.core.scalars import ScalarRegistry
from nodegql.errors import ModelError
from nodegql.models.metadata import MemberMetadata, TypeDescriptor, TypeKind, simple_name_of
from nodegql.models.schema import EnumType, ScalarType

logger = structlog.get_logger(__name__)


class ScalarOutcome(BaseModel):
    """The element maps to a registered scalar."""

    scalar: ScalarType


class EnumOutcome(BaseModel):
    """The element is an enum, registered explicitly or on first sight."""

    enum: EnumType


class EntityReference(BaseModel):
    """The element is neither scalar nor enum; it should name another entity."""

    class_name: str


Outcome = Union[ScalarOutcome, EnumOutcome, EntityReference]


class Classification(BaseModel):
    """Result of classifying one member type.

    Attributes:
        element_type: The array component or collection argument, else the
            declared type itself.
        is_collection: Whether the declared type is an array or collection.
        is_required: Whether the attribute is non-null in the schema.
        outcome: What the element type turned out to be.
    """

    element_type: TypeDescriptor
    is_collection: bool
    is_required: bool
    outcome: Outcome

    @property
    def scalar(self) -> Optional[ScalarType]:
        """The scalar or enum type, ``None`` for entity references."""
        if isinstance(self.outcome, ScalarOutcome):
            return self.outcome.scalar
        if isinstance(self.outcome, EnumOutcome):
            return self.outcome.enum
        return None

    @property
    def is_reference(self) -> bool:
        return isinstance(self.outcome, EntityReference)


class TypeClassifier:
    """Classifies member types against a scalar registry and a class loader.

    Args:
        registry: Scalar and enum registry; implicitly discovered enums are
            registered here.
        loader: Oracle for enum constants, collection types and nullability.
    """

    def __init__(self, registry: ScalarRegistry, loader: ClassLoader) -> None:
        self._registry = registry
        self._loader = loader

    def classify(self, member: MemberMetadata) -> Classification:
        """Classify the declared type of *member*.

        Raises:
            ModelError: If a collection type does not carry exactly one
                type argument.
        """
        element, is_collection = self.unwrap(member.type)
        return Classification(
            element_type=element,
            is_collection=is_collection,
            is_required=self.is_required(member),
            outcome=self._outcome(element),
        )

    def unwrap(self, declared: TypeDescriptor) -> tuple[TypeDescriptor, bool]:
        """Return ``(element_type, is_collection)`` for *declared*.

        Raises:
            ModelError: If a collection type does not carry exactly one
                type argument.
        """
        if declared.kind == TypeKind.ARRAY and declared.component is not None:
            return declared.component, True
        if declared.kind == TypeKind.PARAMETERIZED and self._is_collection(declared.name):
            if len(declared.arguments) != 1:
                raise ModelError(f"Unable to handle parameterized type {declared}")
            return declared.arguments[0], True
        return declared, False

    def is_required(self, member: MemberMetadata) -> bool:
        """Whether *member* is non-null: primitive, key, explicit, or known non-nullable."""
        if member.type.kind == TypeKind.PRIMITIVE:
            return True
        if member.has_annotation(NODE_KEY):
            return True
        attribute = member.annotation(NODE_ATTRIBUTE)
        if attribute is not None and bool(attribute.value("required", False)):
            return True
        owner = self._loader.load_class(member.declaring_class) if member.declaring_class else None
        if owner is None:
            return False
        return owner.is_declared_nullable(member.name) is False

    def referenced_class(self, declared: TypeDescriptor) -> Optional[str]:
        """Element class name of *declared* if it would be an entity reference.

        Unlike :meth:`classify` this never registers enums and never raises;
        a malformed collection type yields ``None``.
        """
        if declared.kind == TypeKind.PARAMETERIZED and self._is_collection(declared.name):
            if len(declared.arguments) != 1:
                return None
            element = declared.arguments[0]
        elif declared.kind == TypeKind.ARRAY and declared.component is not None:
            element = declared.component
        else:
            element = declared
        if self._registry.has_scalar(element.name) or self._registry.has_enum(element.name):
            return None
        loaded = self._loader.load_class(element.name)
        if loaded is not None and loaded.is_enum:
            return None
        return element.name

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _is_collection(self, raw_name: str) -> bool:
        loaded = self._loader.load_class(raw_name)
        return loaded is not None and loaded.is_collection

    def _outcome(self, element: TypeDescriptor) -> Outcome:
        if element.kind != TypeKind.VOID:
            scalar = self._registry.get_scalar(element.name)
            if scalar is not None:
                if isinstance(scalar, EnumType):
                    return EnumOutcome(enum=scalar)
                return ScalarOutcome(scalar=scalar)

        enum_type = self._registry.get_enum(element.name)
        if enum_type is not None:
            return EnumOutcome(enum=enum_type)

        loaded = self._loader.load_class(element.name)
        if loaded is not None and loaded.is_enum:
            enum_type = EnumType.create(simple_name_of(element.name), loaded.enum_constant_names)
            self._registry.add_enum_type(element.name, enum_type)
            logger.warning("enum_added_implicitly", enum=element.name, schema_name=enum_type.name)
            return EnumOutcome(enum=enum_type)

        return EntityReference(class_name=element.name)
