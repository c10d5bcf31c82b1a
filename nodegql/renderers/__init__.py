"""Text renderers for schema, fragments, constraints, queries and repositories."""

from nodegql.renderers.base import BaseRepositoryRenderer, RenderedDocument
from nodegql.renderers.constraints import render_constraints
from nodegql.renderers.factory import RepositoryRendererFactory
from nodegql.renderers.fragments import render_fragments
from nodegql.renderers.queries import render_queries
from nodegql.renderers.schema import render_schema

__all__ = [
    "BaseRepositoryRenderer",
    "RenderedDocument",
    "RepositoryRendererFactory",
    "render_constraints",
    "render_fragments",
    "render_queries",
    "render_schema",
]
