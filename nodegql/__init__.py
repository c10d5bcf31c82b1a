"""nodegql - GraphQL schema, query and repository generation from annotated graph entities."""

__version__ = "0.1.0"
