"""Repository source renderers for Java and Kotlin.

Each generated repository exposes ``getAll<Plural>()`` and
``get<Name>ByKey(...)`` backed by the generated ``.query`` documents; the
key parameters follow the type's key attributes.
"""

from __future__ import annotations

from nodegql.models.schema import EntityTypeModel, SimpleAttribute
from nodegql.naming import pluralize
from nodegql.renderers.base import INJECTION_IMPORTS, BaseRepositoryRenderer, RenderedDocument
from nodegql.renderers.queries import get_all_query_name, get_by_key_query_name

_KOTLIN_TYPES = {
    "int": "Int",
    "long": "Long",
    "short": "Short",
    "byte": "Byte",
    "char": "Char",
    "float": "Float",
    "double": "Double",
    "boolean": "Boolean",
    "java.lang.Integer": "Int",
    "java.lang.Long": "Long",
    "java.lang.Short": "Short",
    "java.lang.Byte": "Byte",
    "java.lang.Character": "Char",
    "java.lang.Float": "Float",
    "java.lang.Double": "Double",
    "java.lang.Boolean": "Boolean",
    "java.lang.String": "String",
    "java.lang.Number": "Number",
}


def java_type_name(attr: SimpleAttribute) -> str:
    """Java parameter type for a key attribute."""
    source = attr.source_type or "java.lang.String"
    if "." not in source:
        return source
    if source.startswith("java.lang.") and source.count(".") == 2:
        return source.rsplit(".", 1)[-1]
    if source.startswith("kotlin."):
        return {"kotlin.Int": "Integer", "kotlin.String": "String"}.get(source, source.rsplit(".", 1)[-1])
    return source.replace("$", ".")


def kotlin_type_name(attr: SimpleAttribute) -> str:
    """Kotlin parameter type for a key attribute."""
    source = attr.source_type or "kotlin.String"
    if source in _KOTLIN_TYPES:
        return _KOTLIN_TYPES[source]
    if source.startswith("kotlin.") and source.count(".") == 1:
        return source.rsplit(".", 1)[-1]
    return source.replace("$", ".")


class JavaRepositoryRenderer(BaseRepositoryRenderer):
    """Renders ``<Name>Repository.java``."""

    file_extension = ".java"

    def render(self, type_model: EntityTypeModel) -> RenderedDocument:
        model_class = type_model.simple_name
        repo_class = self.repository_name(type_model)
        keys = type_model.key_attributes
        key_params = ", ".join(f"final {java_type_name(k)} {k.name}" for k in keys)
        key_map = ", ".join(f'"{k.name}", {k.name}' for k in keys)

        lines = [f"package {self.package};", "", f"import {type_model.class_name.replace('$', '.')};"]
        custom_base = self.base_class_import()
        if custom_base:
            lines.append(f"import {custom_base};")
        lines.append("")
        lines.extend(f"import {name};" for name in self.runtime_imports())
        lines.append("")
        lines.extend(f"import {name};" for name in INJECTION_IMPORTS)
        lines.extend(["import java.util.List;", "import java.util.Map;", ""])
        lines.extend(
            [
                "/**",
                f" * Basic generated repository for {model_class}.",
                " * Changes made here may not be retained if the class is regenerated.",
                " */",
                "@ApplicationScoped",
                f"public class {repo_class} extends {self.base_class_reference(model_class)} {{",
                "  JsonSupport json;",
                "",
                "  @Inject",
                f"  public {repo_class}(final GraphQLProvider graphQLProvider, "
                "final NodeConverterFactory nodeConverterFactory, "
                "final KeyGeneratorFactory keyGeneratorFactory, final JsonSupport json) {",
                f"    super(graphQLProvider, {model_class}.class, nodeConverterFactory, keyGeneratorFactory);",
                "    this.json = json;",
                "  }",
                "",
                "  /**",
                f"   * Find all instances of {model_class}.",
                f"   * @return a list of all {model_class} instances.",
                "   */",
                f"  public List<{model_class}> getAll{pluralize(model_class)}() {{",
                f'    return json.toObjectList(entityListQuery("{get_all_query_name(type_model)}", Map.of()), '
                f"{model_class}.class);",
                "  }",
                "",
                "  /**",
                f"   * Find a single instance of {model_class} by its primary key.",
            ]
        )
        lines.extend(f"   * @param {k.name} Primary key value" for k in keys)
        lines.extend(
            [
                f"   * @return the matching {model_class} instance, or null if not found.",
                "   */",
                f"  public {model_class} get{model_class}ByKey({key_params}) {{",
                f"    final Map<String, Object> params = Map.of({key_map});",
                f'    final Map<String, Object> row = singleEntityQuery("{get_by_key_query_name(type_model)}", '
                "params);",
                "    if (row == null) {",
                "      return null;",
                "    }",
                f"    return json.toObject(row, {model_class}.class);",
                "  }",
                "}",
            ]
        )
        return RenderedDocument(file_name=self.file_name_for(type_model), content="\n".join(lines) + "\n")


class KotlinRepositoryRenderer(BaseRepositoryRenderer):
    """Renders ``<Name>Repository.kt``."""

    file_extension = ".kt"

    def render(self, type_model: EntityTypeModel) -> RenderedDocument:
        model_class = type_model.simple_name
        repo_class = self.repository_name(type_model)
        keys = type_model.key_attributes
        key_params = ", ".join(f"{k.name}: {kotlin_type_name(k)}" for k in keys)
        key_map = ", ".join(f'"{k.name}" to {k.name}' for k in keys)

        lines = [f"package {self.package}", "", f"import {type_model.class_name.replace('$', '.')}"]
        custom_base = self.base_class_import()
        if custom_base:
            lines.append(f"import {custom_base}")
        lines.append("")
        lines.extend(f"import {name}" for name in self.runtime_imports())
        lines.append("")
        lines.extend(f"import {name}" for name in INJECTION_IMPORTS)
        lines.append("")
        lines.extend(
            [
                "/**",
                f" * Basic generated repository for {model_class}.",
                " * Changes made here may not be retained if the class is regenerated.",
                " */",
                "@ApplicationScoped",
                f"class {repo_class} @Inject constructor(graphQLProvider: GraphQLProvider, "
                "nodeConverters: NodeConverterFactory, keyGenerators: KeyGeneratorFactory, val json: JsonSupport)",
                f"    : {self.base_class_reference(model_class)}(graphQLProvider, {model_class}::class.java, "
                "nodeConverters, keyGenerators) {",
                "",
                "  /**",
                f"   * Find all instances of {model_class}.",
                f"   * @return a list of all {model_class} instances.",
                "   */",
                f"  fun getAll{pluralize(model_class)}() : List<{model_class}> {{",
                f'    return json.toObjectList(entityListQuery("{get_all_query_name(type_model)}", '
                f"mapOf<String, Any>()), {model_class}::class.java)",
                "  }",
                "",
                "  /**",
                f"   * Find a single instance of {model_class} by its primary key.",
            ]
        )
        lines.extend(f"   * @param {k.name} Primary key value" for k in keys)
        lines.extend(
            [
                f"   * @return the matching {model_class} instance, or null if not found.",
                "   */",
                f"  fun get{model_class}ByKey({key_params}) : {model_class}? {{",
                f"    val params = mapOf<String, Any>({key_map})",
                f'    val row = singleEntityQuery("{get_by_key_query_name(type_model)}", params)',
                "    if (row == null) {",
                "      return null",
                "    }",
                f"    return json.toObject(row, {model_class}::class.java)",
                "  }",
                "}",
            ]
        )
        return RenderedDocument(file_name=self.file_name_for(type_model), content="\n".join(lines) + "\n")
