"""Read-only metadata index over the annotated classes to scan.

The scanner only needs two queries: look up a class by name, and list the
elements an annotation is applied to.  :class:`JsonMetadataIndex` answers
them from a JSON index document; :class:`CompositeMetadataIndex` layers
dependency indexes behind the project index.
"""

from __future__ import annotations

import pathlib
from typing import Iterable, Optional, Protocol

import structlog
from pydantic import ValidationError

from nodegql.errors import IndexNotFoundError
from nodegql.models.metadata import (
    AnnotationTargetKind,
    AnnotationUsage,
    ClassMetadata,
    IndexDocument,
    simple_name_of,
)

logger = structlog.get_logger(__name__)


class MetadataIndex(Protocol):
    """Queryable view of class, member and annotation metadata."""

    def get_class(self, name: str) -> Optional[ClassMetadata]:
        """Return the indexed class called *name*, or ``None``."""

    def classes_annotated_with(self, annotation: str) -> list[AnnotationUsage]:
        """Return every element carrying *annotation*, in index order."""

    def all_classes(self) -> list[ClassMetadata]:
        """Return every indexed class, in index order."""


class JsonMetadataIndex:
    """In-memory index built from a list of :class:`ClassMetadata`.

    Usage::

        index = JsonMetadataIndex.from_file(path)
        cls = index.get_class("com.example.Person")

    Args:
        classes: Indexed classes; a later duplicate name replaces an earlier one.
    """

    def __init__(self, classes: Iterable[ClassMetadata]) -> None:
        self._classes: dict[str, ClassMetadata] = {}
        for cls in classes:
            self._classes[cls.name] = cls

    @classmethod
    def from_file(cls, path: pathlib.Path) -> JsonMetadataIndex:
        """Load an index document from *path*.

        Args:
            path: JSON index file.

        Returns:
            The loaded index.

        Raises:
            IndexNotFoundError: If *path* is not a regular file.
            ValueError: If the document does not match the index format.
        """
        if not path.is_file():
            raise IndexNotFoundError(f"index file {path} not found")

        logger.info("index_loading", path=str(path))
        try:
            document = IndexDocument.model_validate_json(path.read_bytes())
        except ValidationError as exc:
            raise ValueError(f"Malformed index file {path}: {exc}") from exc

        logger.debug("index_loaded", path=str(path), classes=len(document.classes))
        return cls(document.classes)

    def get_class(self, name: str) -> Optional[ClassMetadata]:
        return self._classes.get(name)

    def all_classes(self) -> list[ClassMetadata]:
        return list(self._classes.values())

    def classes_annotated_with(self, annotation: str) -> list[AnnotationUsage]:
        wanted = simple_name_of(annotation)
        usages: list[AnnotationUsage] = []
        for cls in self._classes.values():
            for ann in cls.annotations:
                if ann.simple_name == wanted:
                    usages.append(
                        AnnotationUsage(
                            class_info=cls,
                            target_kind=AnnotationTargetKind.CLASS,
                            target_name=cls.name,
                            annotation=ann,
                        )
                    )
            for kind, members in (
                (AnnotationTargetKind.FIELD, cls.fields),
                (AnnotationTargetKind.METHOD, cls.methods),
            ):
                for member in members:
                    ann = member.annotation(wanted)
                    if ann is not None:
                        usages.append(
                            AnnotationUsage(
                                class_info=cls,
                                target_kind=kind,
                                target_name=member.name,
                                annotation=ann,
                            )
                        )
        return usages


class CompositeMetadataIndex:
    """Several indexes queried in order; the first index defining a class wins.

    Args:
        indexes: Project index first, then dependency indexes.
    """

    def __init__(self, indexes: list[MetadataIndex]) -> None:
        self._indexes = list(indexes)

    def get_class(self, name: str) -> Optional[ClassMetadata]:
        for index in self._indexes:
            found = index.get_class(name)
            if found is not None:
                return found
        return None

    def all_classes(self) -> list[ClassMetadata]:
        seen: set[str] = set()
        classes: list[ClassMetadata] = []
        for index in self._indexes:
            for cls in index.all_classes():
                if cls.name not in seen:
                    seen.add(cls.name)
                    classes.append(cls)
        return classes

    def classes_annotated_with(self, annotation: str) -> list[AnnotationUsage]:
        usages: list[AnnotationUsage] = []
        for position, index in enumerate(self._indexes):
            earlier = self._indexes[:position]
            for usage in index.classes_annotated_with(annotation):
                # a class shadowed by an earlier index is reported from there only
                if not any(e.get_class(usage.class_info.name) is not None for e in earlier):
                    usages.append(usage)
        return usages


def load_index(index_file: pathlib.Path, extra_index_files: Iterable[pathlib.Path] = ()) -> MetadataIndex:
    """Load the project index and any dependency indexes behind it.

    Args:
        index_file: The project's index; required.
        extra_index_files: Dependency indexes; each is required if listed.

    Returns:
        A single index, composite when more than one file is given.

    Raises:
        IndexNotFoundError: If any listed index file is missing.
    """
    primary = JsonMetadataIndex.from_file(index_file)
    extras = [JsonMetadataIndex.from_file(p) for p in extra_index_files]
    if not extras:
        return primary
    return CompositeMetadataIndex([primary, *extras])
