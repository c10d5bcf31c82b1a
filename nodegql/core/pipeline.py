"""Generation orchestrator that ties the index, scanner, model and renderers together.

Each ``generate_*`` function is one pipeline run: it loads the metadata
index, scans it into a fresh :class:`SchemaModel`, resolves and validates
the model, then renders and writes its artifacts.  Model errors are logged
and returned; artifacts for everything that resolved are still written.
"""

from __future__ import annotations

import pathlib
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from nodegql.config import Settings, settings as default_settings
from nodegql.core.index import MetadataIndex, load_index
from nodegql.core.loader import IndexClassLoader
from nodegql.core.scalars import ScalarRegistry
from nodegql.core.scanner import SchemaScanner
from nodegql.core.schema_model import SchemaModel
from nodegql.core.writer import OutputWriter
from nodegql.errors import GenerationError, GenerationFailedError, ModelError
from nodegql.renderers.constraints import constraint_file_name, render_constraints
from nodegql.renderers.factory import RepositoryRendererFactory
from nodegql.renderers.fragments import render_fragments
from nodegql.renderers.queries import render_queries
from nodegql.renderers.schema import render_schema

logger = structlog.get_logger(__name__)


class GenerationResult(BaseModel):
    """Outcome of a generation run.

    Attributes:
        errors: Model errors collected while scanning, resolving and validating.
        files_written: Every artifact written, in write order.
        files_removed: Stale generated files deleted by the run.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    errors: list[ModelError] = Field(default_factory=list)
    files_written: list[pathlib.Path] = Field(default_factory=list)
    files_removed: list[pathlib.Path] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def build_model(
    config: Settings,
    index: Optional[MetadataIndex] = None,
) -> tuple[SchemaModel, list[ModelError]]:
    """Scan, resolve and validate a schema model.

    Args:
        config: Run settings.
        index: Metadata index to scan; loaded from ``config.index_file``
            (plus ``config.extra_index_files``) when omitted.

    Returns:
        The resolved model and every collected model error.

    Raises:
        IndexNotFoundError: If an index file is missing.
    """
    if index is None:
        index = load_index(config.index_file, config.extra_index_files)

    registry = ScalarRegistry(include_neo4j_scalars=config.include_neo4j_scalars)
    for mapping in config.scalar_mappings:
        registry.add_scalar_mapping(mapping)

    model = SchemaModel(registry)
    logger.info("model_build_started")
    errors = SchemaScanner(index, model, IndexClassLoader(index)).scan()
    logger.info("model_validation_started")
    errors.extend(model.validate())

    if errors:
        logger.warning("model_built_with_errors", errors=len(errors))
        for error in errors:
            logger.warning("model_error", error=error.message)
    else:
        logger.info("model_built", types=len(model.types))
    return model, errors


# ----------------------------------------------------------------------
# Artifact writers
# ----------------------------------------------------------------------


def write_schema_artifacts(model: SchemaModel, config: Settings) -> list[pathlib.Path]:
    """Write the schema document, fragments and constraint script."""
    package_dir = config.package_directory
    writer = OutputWriter(package_dir)
    written = [writer.write(render_schema(model, config.schema_file))]
    logger.info("schema_written", path=str(written[0]))

    if config.generate_fragments:
        fragment_writer = OutputWriter(package_dir / config.fragment_directory)
        fragments = fragment_writer.write_all(render_fragments(model))
        logger.info("fragments_written", count=len(fragments), directory=str(fragment_writer.root))
        written.extend(fragments)

    if config.generate_constraints:
        path = writer.write(render_constraints(model, constraint_file_name(config.schema_file)))
        logger.info("constraints_written", path=str(path))
        written.append(path)
    return written


def write_queries(model: SchemaModel, config: Settings) -> list[pathlib.Path]:
    """Write the get-all and get-by-key query documents."""
    writer = OutputWriter(config.package_directory / config.query_directory)
    written = writer.write_all(render_queries(model))
    logger.info("queries_written", count=len(written), directory=str(writer.root))
    return written


def write_repositories(model: SchemaModel, config: Settings) -> tuple[list[pathlib.Path], list[pathlib.Path]]:
    """Write repository stubs and delete stale previously generated ones.

    A repository whose file already exists in the package directory of any
    configured source root is hand-maintained and never generated.

    Returns:
        ``(written, removed)`` paths.

    Raises:
        GenerationError: If no renderer is registered for the configured language.
    """
    package = config.resolved_repository_package
    package_path = pathlib.Path(*package.split("."))
    renderer = RepositoryRendererFactory.default().get(
        config.repository_language.value,
        package=package,
        base_class=config.repository_base_class,
    )
    if renderer is None:
        raise GenerationError(f"No repository renderer for language {config.repository_language.value}")

    def keep(file_name: str) -> bool:
        return not any((root / package_path / file_name).exists() for root in config.source_roots)

    writer = OutputWriter(config.repository_output / package_path)
    logger.info("repositories_generating", directory=str(writer.root), package=package)
    written = writer.write_all(renderer.render_all(model, keep))
    removed = writer.remove_stale(written, suffix=renderer.file_extension)
    logger.info("repositories_written", count=len(written), removed=len(removed))
    return written, removed


# ----------------------------------------------------------------------
# Pipeline runs
# ----------------------------------------------------------------------


def _finish(result: GenerationResult, config: Settings) -> GenerationResult:
    if result.errors and config.fail_on_errors:
        raise GenerationFailedError(result.errors)
    return result


def generate_schema(config: Optional[Settings] = None, index: Optional[MetadataIndex] = None) -> GenerationResult:
    """Build the model and write the schema, fragments and constraints."""
    config = config or default_settings
    model, errors = build_model(config, index)
    result = GenerationResult(errors=errors, files_written=write_schema_artifacts(model, config))
    return _finish(result, config)


def generate_queries(config: Optional[Settings] = None, index: Optional[MetadataIndex] = None) -> GenerationResult:
    """Build the model and write the query documents."""
    config = config or default_settings
    model, errors = build_model(config, index)
    result = GenerationResult(errors=errors, files_written=write_queries(model, config))
    return _finish(result, config)


def generate_repositories(
    config: Optional[Settings] = None,
    index: Optional[MetadataIndex] = None,
) -> GenerationResult:
    """Build the model and write repository sources."""
    config = config or default_settings
    model, errors = build_model(config, index)
    written, removed = write_repositories(model, config)
    result = GenerationResult(errors=errors, files_written=written, files_removed=removed)
    return _finish(result, config)


def generate_all(config: Optional[Settings] = None, index: Optional[MetadataIndex] = None) -> GenerationResult:
    """Build the model once and write every artifact."""
    config = config or default_settings
    model, errors = build_model(config, index)
    written = write_schema_artifacts(model, config)
    written.extend(write_queries(model, config))
    repositories, removed = write_repositories(model, config)
    written.extend(repositories)
    result = GenerationResult(errors=errors, files_written=written, files_removed=removed)
    logger.info("generation_finished", files=len(written), errors=len(errors))
    return _finish(result, config)
