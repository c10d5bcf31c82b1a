"""Shared renderer types and the repository renderer contract.

Every renderer is a pure function of a resolved :class:`SchemaModel` that
returns :class:`RenderedDocument` objects; writing them is left to
:class:`nodegql.core.writer.OutputWriter`.  Repository renderers, which
come in one flavour per host language, subclass
:class:`BaseRepositoryRenderer`.
"""

from __future__ import annotations

import abc
from typing import Callable, Optional

import structlog
from pydantic import BaseModel, Field

from nodegql.core.schema_model import SchemaModel
from nodegql.models.schema import EntityTypeModel

logger = structlog.get_logger(__name__)


class RenderedDocument(BaseModel):
    """One generated text artifact.

    Attributes:
        file_name: File name relative to the renderer's output directory.
        content: Full UTF-8 text of the document.
    """

    file_name: str = Field(..., description="Relative output file name.")
    content: str = Field(..., description="Document text.")


ABSTRACT_NODE_REPOSITORY = "com.artisanecm.graphql.repository.AbstractNodeRepository"

RUNTIME_IMPORTS = (
    "com.artisanecm.graphql.provider.GraphQLProvider",
    "com.artisanecm.graphql.repository.KeyGeneratorFactory",
    "com.artisanecm.graphql.repository.nodeentity.NodeConverterFactory",
)
JSON_SUPPORT_IMPORT = "com.artisanecm.neo4j.util.JsonSupport"
INJECTION_IMPORTS = (
    "jakarta.enterprise.context.ApplicationScoped",
    "jakarta.inject.Inject",
)


class BaseRepositoryRenderer(abc.ABC):
    """Contract that every repository source renderer must fulfil.

    Subclasses provide the host-language file extension and the text of one
    repository class; :meth:`render_all` picks the eligible types.

    Args:
        package: Package of the generated repositories.
        base_class: Optional base class.  Empty means the runtime's
            ``AbstractNodeRepository``; a bare name is looked up in
            *package*; a dotted name is imported.
    """

    file_extension: str = ""

    def __init__(self, package: str, base_class: Optional[str] = None) -> None:
        self.package = package
        self.base_class = (base_class or "").strip()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def render(self, type_model: EntityTypeModel) -> RenderedDocument:
        """Render the repository source for one concrete node type.

        Args:
            type_model: A resolved, concrete, non-relationship type.

        Returns:
            The repository source document.
        """

    def file_name_for(self, type_model: EntityTypeModel) -> str:
        return f"{self.repository_name(type_model)}{self.file_extension}"

    def render_all(
        self,
        model: SchemaModel,
        keep: Optional[Callable[[str], bool]] = None,
    ) -> list[RenderedDocument]:
        """Render repositories for every concrete node type in *model*.

        Args:
            model: The resolved schema model.
            keep: Predicate on the output file name; files it rejects (for
                example because a hand-written source exists) are skipped.

        Returns:
            The documents rendered, which is also the set of files to retain.
        """
        documents: list[RenderedDocument] = []
        for type_model in model.concrete_types:
            if type_model.is_relationship:
                continue
            file_name = self.file_name_for(type_model)
            if keep is not None and not keep(file_name):
                logger.info("repository_skipped", file=file_name, reason="existing_source")
                continue
            documents.append(self.render(type_model))
        return documents

    # ------------------------------------------------------------------
    # Helpers available to all subclasses
    # ------------------------------------------------------------------

    @staticmethod
    def repository_name(type_model: EntityTypeModel) -> str:
        return f"{type_model.simple_name}Repository"

    def runtime_imports(self) -> list[str]:
        """Imports of the repository runtime, including the default base class."""
        imports = list(RUNTIME_IMPORTS)
        if not self.base_class:
            imports.append(ABSTRACT_NODE_REPOSITORY)
        imports.append(JSON_SUPPORT_IMPORT)
        return imports

    def base_class_import(self) -> Optional[str]:
        """Fully-qualified custom base class to import, or ``None``."""
        if not self.base_class or "." not in self.base_class:
            return None
        base_package = self.base_class.rsplit(".", 1)[0]
        return None if base_package == self.package else self.base_class

    def base_class_reference(self, model_class: str) -> str:
        """Base class as written in the ``extends`` clause, with its type argument."""
        if not self.base_class:
            simple = ABSTRACT_NODE_REPOSITORY.rsplit(".", 1)[-1]
        else:
            simple = self.base_class.rsplit(".", 1)[-1]
        return f"{simple}<{model_class}>"
