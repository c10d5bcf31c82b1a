"""Query document renderer.

Each concrete node type gets two documents:

* ``<plural>.query`` selecting every instance, and
* ``<name>ByKey.query`` selecting one instance by its key attributes.

Both expand the type's relationships into a closure tree of
:class:`RecursiveRelation` nodes.  A relationship to a relationship entity
always passes through to the opposite endpoint.  A relationship to a plain
entity expands further only when it cascades (``DELETE`` or ``ALL``) and
its target has not been visited on the current path.  Every type reached
contributes its fragment to the document's fragment list.

Document layout::

    params: {}
    fragments:
      - PersonFields
    query: |
      query persons {
        person {
          ...PersonFields
        }
      }
"""

from __future__ import annotations

from typing import Callable, Optional

import structlog
from pydantic import BaseModel, Field

from nodegql.core.schema_model import SchemaModel
from nodegql.models.schema import Direction, EntityTypeModel, RelationshipAttribute
from nodegql.naming import decapitalize, pluralize
from nodegql.renderers.base import RenderedDocument

logger = structlog.get_logger(__name__)

QUERY_EXTENSION = ".query"

# Base indentation of relationship blocks inside the query body.
RELATION_DEPTH = 3


class RecursiveRelation(BaseModel):
    """One relationship block of a query closure.

    Attributes:
        name: Field name selected in the query.
        related: Type the relationship leads to.
        deep: Whether nested relationships of ``related`` are expanded.
        children: Nested relationship blocks, present only when ``deep``.
    """

    name: str
    related: EntityTypeModel
    deep: bool = False
    children: list[RecursiveRelation] = Field(default_factory=list)

    def collect_fragments(self, fragments: dict[str, None]) -> None:
        """Add the fragment of every type in this subtree, preserving order."""
        fragments.setdefault(self.related.fragment_name())
        for child in self.children:
            child.collect_fragments(fragments)


class QueryClosureBuilder:
    """Builds relationship closures against one resolved model.

    Args:
        model: The resolved schema model.
    """

    def __init__(self, model: SchemaModel) -> None:
        self._model = model

    def build(self, root: EntityTypeModel, force_deep: bool = False) -> list[RecursiveRelation]:
        """Return the top-level relationship blocks of *root*.

        Args:
            root: The queried type.
            force_deep: Expand every top-level plain relationship regardless
                of its cascades.
        """
        seen = frozenset({root.schema_name})
        relations: list[RecursiveRelation] = []
        for attr in root.relationship_attributes:
            relation = self._relation_for(attr, seen, force_deep)
            if relation is not None:
                relations.append(relation)
        return relations

    def _relation_for(
        self,
        attr: RelationshipAttribute,
        seen: frozenset[str],
        force_deep: bool = False,
    ) -> Optional[RecursiveRelation]:
        related = self._model.get_type_or_interface(attr.target_class)
        if related is None:
            return None
        if related.is_relationship:
            return self._through_relationship(attr, related, seen)
        return self._deep(attr.name, force_deep or attr.is_cascading, related, seen)

    def _deep(
        self,
        name: str,
        cascading: bool,
        related: EntityTypeModel,
        seen: frozenset[str],
    ) -> RecursiveRelation:
        relation = RecursiveRelation(
            name=name,
            related=related,
            deep=cascading and related.schema_name not in seen,
        )
        if relation.deep:
            below = seen | {related.schema_name}
            for attr in related.relationship_attributes:
                child = self._relation_for(attr, below)
                if child is not None:
                    relation.children.append(child)
        return relation

    def _through_relationship(
        self,
        attr: RelationshipAttribute,
        relationship: EntityTypeModel,
        seen: frozenset[str],
    ) -> RecursiveRelation:
        """Pass through a relationship entity to the endpoint opposite the source.

        The endpoint inherits the cascades of *attr*.
        """
        if attr.direction == Direction.OUT:
            endpoint, role = relationship.to_endpoint, relationship.to_role
        else:
            endpoint, role = relationship.from_endpoint, relationship.from_role
        if endpoint is None or endpoint.resolved_class is None or role is None:
            raise ValueError(f"Incomplete relation model {relationship.class_name}: endpoint not resolved")
        target = self._model.get_type_or_interface(endpoint.resolved_class)
        if target is None:
            raise ValueError(f"Incomplete relation model {relationship.class_name}: endpoint not registered")

        relation = RecursiveRelation(name=attr.name, related=relationship, deep=True)
        relation.children.append(self._deep(role, attr.is_cascading, target, seen))
        return relation


def _render_relation(relation: RecursiveRelation, depth: int) -> list[str]:
    indent = "  " * depth
    lines = [f"{indent}{relation.name} {{", f"{indent}  ...{relation.related.fragment_name()}"]
    for child in relation.children:
        lines.extend(_render_relation(child, depth + 1))
    lines.append(f"{indent}}}")
    return lines


def _render_document(
    params: list[str],
    root: EntityTypeModel,
    relations: list[RecursiveRelation],
    operation: str,
    selection: str,
) -> str:
    fragments: dict[str, None] = {root.fragment_name(): None}
    for relation in relations:
        relation.collect_fragments(fragments)

    lines = params + ["fragments:"]
    lines.extend(f"  - {name}" for name in fragments)
    lines.append("query: |")
    lines.append(f"  query {operation} {{")
    lines.append(f"    {selection} {{")
    lines.append(f"      ...{root.fragment_name()}")
    for relation in relations:
        lines.extend(_render_relation(relation, RELATION_DEPTH))
    lines.append("    }")
    lines.append("  }")
    return "\n".join(lines) + "\n"


def get_all_query_name(type_model: EntityTypeModel) -> str:
    return pluralize(decapitalize(type_model.schema_name))


def get_by_key_query_name(type_model: EntityTypeModel) -> str:
    return f"{decapitalize(type_model.schema_name)}ByKey"


def render_get_all_query(model: SchemaModel, type_model: EntityTypeModel) -> RenderedDocument:
    name = get_all_query_name(type_model)
    relations = QueryClosureBuilder(model).build(type_model)
    content = _render_document(
        ["params: {}"], type_model, relations, name, decapitalize(type_model.schema_name)
    )
    return RenderedDocument(file_name=f"{name}{QUERY_EXTENSION}", content=content)


def render_get_by_key_query(model: SchemaModel, type_model: EntityTypeModel) -> RenderedDocument:
    """Render the by-key query; every top-level plain relationship is expanded."""
    name = get_by_key_query_name(type_model)
    relations = QueryClosureBuilder(model).build(type_model, force_deep=True)
    keys = type_model.key_attributes

    if keys:
        params = ["params:"] + [f"  {k.name}: {k.scalar.name}" for k in keys]
        variables = ", ".join(f"${k.name}: {k.scalar.name}!" for k in keys)
        conditions = ", ".join(f"{k.name}: ${k.name}" for k in keys)
        operation = f"{name}({variables})"
        selection = f"{decapitalize(type_model.schema_name)}({conditions})"
    else:
        params = ["params: {}"]
        operation = name
        selection = decapitalize(type_model.schema_name)

    content = _render_document(params, type_model, relations, operation, selection)
    return RenderedDocument(file_name=f"{name}{QUERY_EXTENSION}", content=content)


def render_queries(
    model: SchemaModel,
    keep: Optional[Callable[[EntityTypeModel, str], bool]] = None,
) -> list[RenderedDocument]:
    """Render both queries for every concrete, non-relationship type.

    Args:
        model: The resolved schema model.
        keep: Predicate on ``(type, file_name)``; rejected documents are skipped.
    """
    documents: list[RenderedDocument] = []
    for type_model in model.concrete_types:
        if type_model.is_relationship:
            continue
        for document in (render_get_all_query(model, type_model), render_get_by_key_query(model, type_model)):
            if keep is not None and not keep(type_model, document.file_name):
                logger.info("query_skipped", file=document.file_name)
                continue
            documents.append(document)
    return documents
