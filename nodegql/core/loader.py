"""Class-loading oracle used for enum constants, collection and nullability checks.

The scanner never loads classes itself.  It asks a :class:`ClassLoader`
for a :class:`LoadedClass` view, and treats ``None`` as "not loadable".
:class:`IndexClassLoader` answers from the metadata index plus a table of
well-known JVM collection types.
"""

from __future__ import annotations

from typing import Optional, Protocol

from pydantic import BaseModel, Field

from nodegql.core.index import MetadataIndex

# Raw generic types assignable to java.util.Collection or kotlin.collections.Collection.
KNOWN_COLLECTION_TYPES: frozenset[str] = frozenset(
    {
        "java.util.Collection",
        "java.util.List",
        "java.util.Set",
        "java.util.SortedSet",
        "java.util.NavigableSet",
        "java.util.Queue",
        "java.util.Deque",
        "java.util.ArrayList",
        "java.util.LinkedList",
        "java.util.HashSet",
        "java.util.LinkedHashSet",
        "java.util.TreeSet",
        "java.util.ArrayDeque",
        "java.util.Vector",
        "kotlin.collections.Collection",
        "kotlin.collections.MutableCollection",
        "kotlin.collections.List",
        "kotlin.collections.MutableList",
        "kotlin.collections.Set",
        "kotlin.collections.MutableSet",
        "kotlin.collections.ArrayList",
        "kotlin.collections.HashSet",
        "kotlin.collections.LinkedHashSet",
    }
)


class LoadedClass(BaseModel):
    """What the scanner may learn about a loadable class.

    Attributes:
        name: Fully-qualified class name.
        is_enum: Whether the class is an enum.
        enum_constant_names: Enum constants in declaration order.
        is_collection: Whether the class is assignable to a collection type.
        member_nullability: Declared nullability per member name; members
            missing here, or mapped to ``None``, are of unknown nullability.
    """

    name: str
    is_enum: bool = False
    enum_constant_names: list[str] = Field(default_factory=list)
    is_collection: bool = False
    member_nullability: dict[str, Optional[bool]] = Field(default_factory=dict)

    def is_declared_nullable(self, member_name: str) -> Optional[bool]:
        """Return declared nullability of *member_name*, ``None`` when unknown."""
        return self.member_nullability.get(member_name)


class ClassLoader(Protocol):
    """Oracle answering questions the index alone cannot."""

    def load_class(self, name: str) -> Optional[LoadedClass]:
        """Return a view of class *name*, or ``None`` if it cannot be loaded."""


class IndexClassLoader:
    """Class loader backed by the metadata index.

    Args:
        index: Index to answer from.
        extra_collection_types: Additional raw types treated as collections.
    """

    def __init__(self, index: MetadataIndex, extra_collection_types: frozenset[str] = frozenset()) -> None:
        self._index = index
        self._collection_types = KNOWN_COLLECTION_TYPES | extra_collection_types
        self._cache: dict[str, Optional[LoadedClass]] = {}

    def load_class(self, name: str) -> Optional[LoadedClass]:
        if name in self._cache:
            return self._cache[name]

        loaded: Optional[LoadedClass]
        cls = self._index.get_class(name)
        if cls is None:
            loaded = LoadedClass(name=name, is_collection=True) if name in self._collection_types else None
        else:
            nullability: dict[str, Optional[bool]] = {}
            for member in (*cls.fields, *cls.methods):
                if member.nullable is not None:
                    nullability.setdefault(member.name, member.nullable)
            loaded = LoadedClass(
                name=name,
                is_enum=cls.is_enum,
                enum_constant_names=list(cls.enum_constants),
                is_collection=self._is_collection(name, set()),
                member_nullability=nullability,
            )
        self._cache[name] = loaded
        return loaded

    def _is_collection(self, name: str, visited: set[str]) -> bool:
        """Walk the supertypes of *name* in the index looking for a collection type."""
        if name in self._collection_types:
            return True
        if name in visited:
            return False
        visited.add(name)
        cls = self._index.get_class(name)
        if cls is None:
            return False
        supertypes = list(cls.interface_names)
        if cls.super_name:
            supertypes.append(cls.super_name)
        return any(self._is_collection(s, visited) for s in supertypes)
