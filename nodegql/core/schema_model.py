"""The mutable schema model accumulated by one generation run.

A :class:`SchemaModel` is created by the pipeline, filled by the scanner,
resolved and validated once, and then handed read-only to the renderers.
Types and interfaces are keyed by originating class name; interfaces are
also visible as types so relationship targets and fragments can refer to
them.
"""

from __future__ import annotations

from typing import Optional

import structlog

from nodegql.core.scalars import ScalarRegistry
from nodegql.errors import ModelError
from nodegql.models.schema import EntityTypeModel, EnumType, Mention

logger = structlog.get_logger(__name__)


class SchemaModel:
    """Registry of scalars, enums, entity types, interfaces and mentions.

    Args:
        registry: Scalar registry; a fresh one with only built-in scalars is
            created when omitted.
    """

    def __init__(self, registry: Optional[ScalarRegistry] = None) -> None:
        self.scalars = registry or ScalarRegistry()
        self._types: dict[str, EntityTypeModel] = {}
        self._interfaces: dict[str, EntityTypeModel] = {}
        self._mentions: list[Mention] = []
        self._ignored_mentions: list[Mention] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_type(self, type_model: EntityTypeModel) -> None:
        """Register *type_model*, replacing any earlier model for the same class."""
        logger.info("type_added", schema_name=type_model.schema_name, cls=type_model.class_name)
        self._types[type_model.class_name] = type_model

    def add_interface(self, interface: EntityTypeModel) -> None:
        """Register *interface* both as an interface and as a type."""
        logger.info("interface_added", schema_name=interface.schema_name, cls=interface.class_name)
        self._interfaces[interface.class_name] = interface
        self._types[interface.class_name] = interface

    def remove_type(self, class_name: str) -> None:
        removed = self._types.pop(class_name, None)
        self._interfaces.pop(class_name, None)
        if removed is not None:
            logger.warning("type_removed", schema_name=removed.schema_name, cls=class_name)

    def add_enum_type(self, class_name: str, enum_type: EnumType) -> bool:
        return self.scalars.add_enum_type(class_name, enum_type)

    def add_mention(self, mentioned_class: str, source_class: str, attribute_name: Optional[str]) -> None:
        self._mentions.append(
            Mention(mentioned_class=mentioned_class, source_class=source_class, attribute_name=attribute_name)
        )

    def ignore_mention(self, mentioned_class: str, source_class: str, attribute_name: Optional[str]) -> None:
        self._ignored_mentions.append(
            Mention(mentioned_class=mentioned_class, source_class=source_class, attribute_name=attribute_name)
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def has_type_model(self, class_name: str) -> bool:
        return class_name in self._types or class_name in self._interfaces

    def has_enum(self, class_name: str) -> bool:
        return self.scalars.has_enum(class_name)

    def get_enum(self, class_name: str) -> Optional[EnumType]:
        return self.scalars.get_enum(class_name)

    def get_type_model(self, class_name: str) -> Optional[EntityTypeModel]:
        return self._types.get(class_name)

    def get_interface(self, class_name: str) -> Optional[EntityTypeModel]:
        return self._interfaces.get(class_name)

    def get_type_or_interface(self, class_name: str) -> Optional[EntityTypeModel]:
        return self.get_type_model(class_name) or self.get_interface(class_name)

    def find_from_type_model(self, referencing: EntityTypeModel) -> Optional[EntityTypeModel]:
        """Return the first type with a relationship attribute targeting *referencing*.

        Used to infer the start node of a relationship entity that has no
        ``@StartNode`` member.
        """
        for candidate in self._types.values():
            if any(a.target_class == referencing.class_name for a in candidate.relationship_attributes):
                return candidate
        return None

    @property
    def types(self) -> list[EntityTypeModel]:
        """Every registered type, interfaces included, in registration order."""
        return list(self._types.values())

    @property
    def interfaces(self) -> list[EntityTypeModel]:
        return list(self._interfaces.values())

    @property
    def concrete_types(self) -> list[EntityTypeModel]:
        """Registered types that are not interfaces."""
        return [t for t in self._types.values() if not t.is_interface]

    @property
    def mentions(self) -> list[Mention]:
        return list(self._mentions)

    # ------------------------------------------------------------------
    # Resolution and validation
    # ------------------------------------------------------------------

    def resolve(self) -> list[ModelError]:
        """Resolve every registered type once, removing those that fail.

        Types registered while resolving are not visited.

        Returns:
            One error per removed type.
        """
        errors: list[ModelError] = []
        for class_name in list(self._types.keys()):
            type_model = self._types.get(class_name)
            if type_model is None:
                continue
            try:
                type_model.resolve(self)
            except ModelError as exc:
                errors.append(exc)
                self.remove_type(class_name)
        return errors

    def validate(self) -> list[ModelError]:
        """Resolve the model, then check every recorded mention.

        A mention not covered by an identical ignored mention must name a
        known scalar or a registered type.  Each unrecognised
        ``(mentioned, source, attribute)`` triple is reported once.

        Returns:
            Resolution errors followed by mention errors.
        """
        errors = self.resolve()
        ignored = set(self._ignored_mentions)
        reported: set[Mention] = set()
        for mention in self._mentions:
            if mention in ignored or mention in reported:
                continue
            if self.scalars.has_scalar(mention.mentioned_class) or mention.mentioned_class in self._types:
                continue
            reported.add(mention)
            error = ModelError(
                f"Unrecognized type '{mention.mentioned_class}' was encountered in type "
                f"'{mention.source_class}' at '{mention.attribute_name}'"
            )
            logger.warning("validation_error", error=error.message)
            errors.append(error)
        return errors
