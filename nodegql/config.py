"""Generator configuration and settings.

Uses ``pydantic-settings`` so values can be overridden via environment
variables prefixed with ``NODEGQL_`` (or a ``.env`` file).  Complex values
such as ``NODEGQL_SCALAR_MAPPINGS`` are given as JSON.
"""

from __future__ import annotations

import enum
import pathlib
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class RepositoryLanguage(str, enum.Enum):
    """Host language of generated repository sources."""

    JAVA = "java"
    KOTLIN = "kotlin"


class ScalarMapping(BaseModel):
    """A user-declared scalar and the classes that map onto it.

    Attributes:
        scalar_name: Name of the scalar as it appears in the schema.
        classes: Fully-qualified class names rendered as this scalar.
    """

    scalar_name: str = Field(..., min_length=1, description="Schema scalar name.")
    classes: list[str] = Field(default_factory=list, description="Fully-qualified class names.")


class Settings(BaseSettings):
    """Global settings for a generation run.

    Attributes:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        index_file: JSON metadata index of the project classes.
        extra_index_files: Indexes of dependencies merged behind the project index.
        include_neo4j_scalars: Declare the graph-database native scalars
            (``Point``, ``Date``, ``DateTime``, ...).
        scalar_mappings: Additional user scalar declarations.
        output_directory: Root for generated resources (schema, fragments,
            constraints, queries).
        resource_package: Dotted package under which resources are placed.
        schema_file: File name of the schema document.
        generate_fragments: Whether fragment files are written.
        fragment_directory: Fragment directory relative to the package dir.
        generate_constraints: Whether the constraint script is written.
        query_directory: Query directory relative to the package dir.
        repository_output: Root for generated repository sources.
        repository_package: Repository package; blank means
            ``<resource_package>.repository``, a bare name is appended to
            ``resource_package``.
        repository_base_class: Optional base class for generated repositories.
        repository_language: Host language of generated repositories.
        source_roots: Hand-maintained source roots; a repository whose file
            already exists there is never generated.
        fail_on_errors: Raise after writing when the model reported errors.
    """

    log_level: str = "INFO"

    index_file: pathlib.Path = pathlib.Path("target/classes/META-INF/entity-index.json")
    extra_index_files: list[pathlib.Path] = []

    include_neo4j_scalars: bool = False
    scalar_mappings: list[ScalarMapping] = []

    output_directory: pathlib.Path = pathlib.Path("target/generated-resources/graphql-schema")
    resource_package: str = ""
    schema_file: str = "schema.graphql"
    generate_fragments: bool = True
    fragment_directory: str = "fragments"
    generate_constraints: bool = True
    query_directory: str = "queries"

    repository_output: pathlib.Path = pathlib.Path("target/generated-sources/graphql-repos")
    repository_package: str = ""
    repository_base_class: Optional[str] = None
    repository_language: RepositoryLanguage = RepositoryLanguage.JAVA
    source_roots: list[pathlib.Path] = [
        pathlib.Path("src/main/java"),
        pathlib.Path("src/main/kotlin"),
    ]

    fail_on_errors: bool = False

    model_config = {"env_prefix": "NODEGQL_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def package_directory(self) -> pathlib.Path:
        """Resource directory for the configured package."""
        if not self.resource_package:
            return self.output_directory
        return self.output_directory.joinpath(*self.resource_package.split("."))

    @property
    def resolved_repository_package(self) -> str:
        """Package name used for generated repository sources."""
        if not self.repository_package.strip():
            return f"{self.resource_package}.repository" if self.resource_package else "repository"
        if "." not in self.repository_package:
            if self.resource_package:
                return f"{self.resource_package}.{self.repository_package}"
            return self.repository_package
        return self.repository_package


settings = Settings()
