"""Registry mapping classes to schema scalars and enums.

Language primitives, their boxed forms and Kotlin equivalents are always
mapped.  Graph-database native types (``Point``, ``Date``, ``DateTime``,
...) and user mappings are *declared* scalars: they are emitted as
``scalar X`` lines at the top of the schema.
"""

from __future__ import annotations

from typing import Optional

import structlog

from nodegql.config import ScalarMapping
from nodegql.models.schema import BOOLEAN, FLOAT, INT, STRING, EnumType, ScalarType

logger = structlog.get_logger(__name__)

BUILTIN_SCALARS: dict[str, ScalarType] = {
    "int": INT,
    "long": INT,
    "short": INT,
    "java.lang.Integer": INT,
    "java.lang.Long": INT,
    "java.lang.Short": INT,
    "kotlin.Int": INT,
    "kotlin.Long": INT,
    "kotlin.Short": INT,
    "float": FLOAT,
    "double": FLOAT,
    "java.lang.Float": FLOAT,
    "java.lang.Double": FLOAT,
    "java.lang.Number": FLOAT,
    "kotlin.Float": FLOAT,
    "kotlin.Double": FLOAT,
    "boolean": BOOLEAN,
    "java.lang.Boolean": BOOLEAN,
    "kotlin.Boolean": BOOLEAN,
    "java.lang.String": STRING,
    "kotlin.String": STRING,
}

NEO4J_POINT = ScalarType(name="Point")
NEO4J_DATE = ScalarType(name="Date")
NEO4J_TIME = ScalarType(name="Time")
NEO4J_LOCALTIME = ScalarType(name="LocalTime")
NEO4J_DATETIME = ScalarType(name="DateTime")
NEO4J_LOCALDATETIME = ScalarType(name="LocalDateTime")
NEO4J_DURATION = ScalarType(name="Duration")

# Native graph-database bindings, plus Instant rendered as DateTime.
NEO4J_SCALARS: dict[str, ScalarType] = {
    "org.neo4j.graphdb.spatial.Point": NEO4J_POINT,
    "java.time.LocalDate": NEO4J_DATE,
    "java.time.LocalTime": NEO4J_LOCALTIME,
    "java.time.OffsetTime": NEO4J_TIME,
    "java.time.ZonedDateTime": NEO4J_DATETIME,
    "java.time.LocalDateTime": NEO4J_LOCALDATETIME,
    "java.time.Instant": NEO4J_DATETIME,
    "java.time.Duration": NEO4J_DURATION,
}


class ScalarRegistry:
    """Class-name to scalar mapping, declared scalars, and enum registrations.

    Args:
        include_neo4j_scalars: Declare and map the graph-database native types.
    """

    def __init__(self, include_neo4j_scalars: bool = False) -> None:
        self._scalars: dict[str, ScalarType] = dict(BUILTIN_SCALARS)
        self._declared: dict[str, ScalarType] = {}
        self._enums: dict[str, EnumType] = {}

        if include_neo4j_scalars:
            for scalar in NEO4J_SCALARS.values():
                self._declare(scalar)
            self._scalars.update(NEO4J_SCALARS)

    def _declare(self, scalar: ScalarType) -> None:
        # first declaration of a name fixes its position
        self._declared.setdefault(scalar.name, scalar)

    def add_scalar_mapping(self, mapping: ScalarMapping) -> None:
        """Declare ``mapping.scalar_name`` and map each of its classes onto it."""
        scalar = self._declared.get(mapping.scalar_name) or ScalarType(name=mapping.scalar_name)
        logger.info("scalar_added", scalar=scalar.name, classes=len(mapping.classes))
        self._declare(scalar)
        for class_name in mapping.classes:
            self._scalars[class_name] = scalar

    def get_scalar(self, class_name: str) -> Optional[ScalarType]:
        """Return the scalar (or enum) a class maps to, if any."""
        return self._scalars.get(class_name)

    def has_scalar(self, class_name: str) -> bool:
        return class_name in self._scalars

    def get_enum(self, class_name: str) -> Optional[EnumType]:
        return self._enums.get(class_name)

    def has_enum(self, class_name: str) -> bool:
        return class_name in self._enums

    def add_enum_type(self, class_name: str, enum_type: EnumType) -> bool:
        """Register *enum_type* for *class_name*.

        Returns:
            ``True`` if registered, ``False`` if the class already had an enum
            (the call is then a no-op).
        """
        if class_name in self._enums:
            return False
        self._enums[class_name] = enum_type
        self._scalars[class_name] = enum_type
        self._declare(enum_type)
        return True

    @property
    def enums(self) -> list[EnumType]:
        return list(self._enums.values())

    @property
    def declared_scalars(self) -> list[ScalarType]:
        """Declared scalars in insertion order, excluding enums."""
        enum_names = {e.name for e in self._enums.values()}
        return [s for s in self._declared.values() if s.name not in enum_names]
