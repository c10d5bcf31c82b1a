"""nodegql CLI - generate a GraphQL schema, queries and repositories.

Uses tyro for type-driven CLI generation from dataclasses.  Every option
left unset falls back to :class:`nodegql.config.Settings`, which reads
``NODEGQL_*`` environment variables and ``.env``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Callable, Optional

import structlog
import tyro
from dotenv import load_dotenv

from nodegql.config import RepositoryLanguage, Settings
from nodegql.core.pipeline import (
    GenerationResult,
    generate_all,
    generate_queries,
    generate_repositories,
    generate_schema,
)
from nodegql.errors import GenerationError
from nodegql.logging import setup_logging

logger = structlog.get_logger(__name__)


@dataclass
class _Run:
    index_file: Optional[Path] = field(
        default=None,
        metadata={"help": "JSON metadata index of the project classes"},
    )
    extra_index_file: list[Path] = field(
        default_factory=list,
        metadata={"help": "Dependency index merged behind the project index"},
    )
    output_directory: Optional[Path] = field(
        default=None,
        metadata={"help": "Root directory for generated resources"},
    )
    resource_package: Optional[str] = field(
        default=None,
        metadata={"help": "Dotted package the resources are placed under"},
    )
    neo4j_scalars: Optional[bool] = field(
        default=None,
        metadata={"help": "Declare the graph-database native scalars"},
    )
    fail_on_errors: Optional[bool] = field(
        default=None,
        metadata={"help": "Exit non-zero when the model reported errors"},
    )
    log_level: Optional[str] = field(
        default=None,
        metadata={"help": "Minimum log level"},
    )

    def overrides(self) -> dict[str, Any]:
        values: dict[str, Any] = {
            "index_file": self.index_file,
            "output_directory": self.output_directory,
            "resource_package": self.resource_package,
            "include_neo4j_scalars": self.neo4j_scalars,
            "fail_on_errors": self.fail_on_errors,
            "log_level": self.log_level,
        }
        if self.extra_index_file:
            values["extra_index_files"] = self.extra_index_file
        return values

    def settings(self) -> Settings:
        return Settings(**{k: v for k, v in self.overrides().items() if v is not None})

    def command_name(self) -> str:
        return type(self).__name__.lower()

    def execute(self, generate: Callable[[Settings], GenerationResult]) -> int:
        """Run *generate* with every log event tagged by the command and index file."""
        config = self.settings()
        setup_logging(config.log_level, tool="nodegql")
        with structlog.contextvars.bound_contextvars(
            command=self.command_name(),
            index_file=str(config.index_file),
        ):
            try:
                result = generate(config)
            except GenerationError as exc:
                logger.error("generation_aborted", error=str(exc))
                return 1
            except ValueError as exc:
                logger.error("generation_aborted", error=str(exc))
                return 1
            logger.info(
                "generation_complete",
                files_written=len(result.files_written),
                errors=len(result.errors),
            )
        return 0


@dataclass
class Schema(_Run):
    """Generate the schema document, fragments and constraint script."""

    schema_file: Optional[str] = field(
        default=None,
        metadata={"help": "File name of the schema document"},
    )
    no_fragments: bool = field(
        default=False,
        metadata={"help": "Skip writing fragment files"},
    )
    no_constraints: bool = field(
        default=False,
        metadata={"help": "Skip writing the constraint script"},
    )

    def overrides(self) -> dict[str, Any]:
        values = super().overrides()
        values["schema_file"] = self.schema_file
        if self.no_fragments:
            values["generate_fragments"] = False
        if self.no_constraints:
            values["generate_constraints"] = False
        return values

    def run(self) -> int:
        return self.execute(generate_schema)


@dataclass
class Queries(_Run):
    """Generate get-all and get-by-key query documents."""

    query_directory: Optional[str] = field(
        default=None,
        metadata={"help": "Query directory relative to the package directory"},
    )

    def overrides(self) -> dict[str, Any]:
        values = super().overrides()
        values["query_directory"] = self.query_directory
        return values

    def run(self) -> int:
        return self.execute(generate_queries)


@dataclass
class Repos(_Run):
    """Generate repository sources for the concrete node types."""

    repository_output: Optional[Path] = field(
        default=None,
        metadata={"help": "Root directory for generated repository sources"},
    )
    repository_package: Optional[str] = field(
        default=None,
        metadata={"help": "Repository package (bare name is appended to the resource package)"},
    )
    base_class: Optional[str] = field(
        default=None,
        metadata={"help": "Fully-qualified base class for generated repositories"},
    )
    language: Optional[RepositoryLanguage] = field(
        default=None,
        metadata={"help": "Host language of generated repositories"},
    )
    source_root: list[Path] = field(
        default_factory=list,
        metadata={"help": "Hand-maintained source root; existing repositories there are not generated"},
    )

    def overrides(self) -> dict[str, Any]:
        values = super().overrides()
        values["repository_output"] = self.repository_output
        values["repository_package"] = self.repository_package
        values["repository_base_class"] = self.base_class
        values["repository_language"] = self.language
        if self.source_root:
            values["source_roots"] = self.source_root
        return values

    def run(self) -> int:
        return self.execute(generate_repositories)


@dataclass
class All(Repos):
    """Generate every artifact from a single model build."""

    def run(self) -> int:
        return self.execute(generate_all)


_Schema = Annotated[Schema, tyro.conf.subcommand("schema")]
_Queries = Annotated[Queries, tyro.conf.subcommand("queries")]
_Repos = Annotated[Repos, tyro.conf.subcommand("repos")]
_All = Annotated[All, tyro.conf.subcommand("all")]

Command = _Schema | _Queries | _Repos | _All


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI."""
    load_dotenv()
    try:
        cmd = tyro.cli(
            Command,
            prog="nodegql",
            description="Generate a GraphQL schema from annotated entity classes.",
            args=argv,
        )
        return cmd.run()
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except KeyboardInterrupt:
        return 130
