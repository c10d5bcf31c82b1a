"""Fragment renderer: one ``<Name>Fields`` fragment per registered type."""

from __future__ import annotations

from nodegql.constants import INDENT
from nodegql.core.schema_model import SchemaModel
from nodegql.models.schema import EntityTypeModel
from nodegql.renderers.base import RenderedDocument

FRAGMENT_EXTENSION = ".fragment"


def render_fragment(type_model: EntityTypeModel) -> RenderedDocument:
    """Render the fragment selecting every simple attribute of *type_model*."""
    name = type_model.fragment_name()
    lines = [f"fragment {name} on {type_model.schema_name} {{"]
    lines.extend(INDENT + attr.name for attr in type_model.simple_attributes)
    lines.append("}")
    return RenderedDocument(file_name=f"{name}{FRAGMENT_EXTENSION}", content="\n".join(lines) + "\n")


def render_fragments(model: SchemaModel) -> list[RenderedDocument]:
    """Render fragments for every type in *model*, interfaces included."""
    return [render_fragment(type_model) for type_model in model.types]
