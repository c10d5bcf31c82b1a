"""Tests for repository source rendering and the renderer factory."""

import pytest

from builders import ann, build, fqn, key, list_of, member, node, relation
from nodegql.renderers.factory import RepositoryRendererFactory
from nodegql.renderers.repositories import JavaRepositoryRenderer, KotlinRepositoryRenderer


@pytest.fixture
def model():
    order = node("Order", fields=(key("number"), member("items", list_of(fqn("LineItem")))))
    product = node("Product", fields=(key("sku"), key("revision", "int"), member("title")))
    line_item = relation("LineItem", "CONTAINS", fields=(member("product", fqn("Product"), ann("EndNode")),))
    built, errors = build(order, product, line_item)
    assert errors == []
    return built


class TestJavaRepositoryRenderer:
    def test_file_per_concrete_node_type(self, model):
        documents = JavaRepositoryRenderer("com.example.repository").render_all(model)
        assert [d.file_name for d in documents] == ["OrderRepository.java", "ProductRepository.java"]

    def test_source(self, model):
        document = JavaRepositoryRenderer("com.example.repository").render(model.get_type_model(fqn("Product")))
        source = document.content

        assert source.startswith("package com.example.repository;\n\nimport com.example.model.Product;\n")
        assert "import com.artisanecm.graphql.repository.AbstractNodeRepository;" in source
        assert "public class ProductRepository extends AbstractNodeRepository<Product> {" in source
        assert "  public List<Product> getAllProducts() {" in source
        assert 'entityListQuery("products", Map.of())' in source
        assert "  public Product getProductByKey(final String sku, final int revision) {" in source
        assert 'Map.of("sku", sku, "revision", revision)' in source
        assert 'singleEntityQuery("productByKey", params)' in source

    def test_custom_base_class(self, model):
        renderer = JavaRepositoryRenderer("com.example.repository", "com.acme.repo.BaseRepository")
        source = renderer.render(model.get_type_model(fqn("Order"))).content

        assert "import com.acme.repo.BaseRepository;" in source
        assert "AbstractNodeRepository" not in source
        assert "extends BaseRepository<Order> {" in source

    def test_base_class_in_same_package_not_imported(self, model):
        renderer = JavaRepositoryRenderer("com.example.repository", "com.example.repository.BaseRepository")
        source = renderer.render(model.get_type_model(fqn("Order"))).content
        assert "import com.example.repository.BaseRepository;" not in source

    def test_keep_predicate(self, model):
        renderer = JavaRepositoryRenderer("com.example.repository")
        documents = renderer.render_all(model, keep=lambda name: name != "OrderRepository.java")
        assert [d.file_name for d in documents] == ["ProductRepository.java"]


class TestKotlinRepositoryRenderer:
    def test_source(self, model):
        document = KotlinRepositoryRenderer("com.example.repository").render(model.get_type_model(fqn("Product")))
        source = document.content

        assert document.file_name == "ProductRepository.kt"
        assert source.startswith("package com.example.repository\n\nimport com.example.model.Product\n")
        assert "class ProductRepository @Inject constructor(" in source
        assert "    : AbstractNodeRepository<Product>(graphQLProvider, Product::class.java, " in source
        assert "  fun getAllProducts() : List<Product> {" in source
        assert "  fun getProductByKey(sku: String, revision: Int) : Product? {" in source
        assert 'mapOf<String, Any>("sku" to sku, "revision" to revision)' in source


class TestRepositoryRendererFactory:
    def test_default_languages(self):
        assert RepositoryRendererFactory.default().supported_languages == ["java", "kotlin"]

    def test_get(self):
        renderer = RepositoryRendererFactory.default().get("kotlin", package="com.example.repository")
        assert isinstance(renderer, KotlinRepositoryRenderer)
        assert renderer.package == "com.example.repository"

    def test_unknown_language(self):
        assert RepositoryRendererFactory.default().get("scala", package="com.example") is None

    def test_register(self):
        factory = RepositoryRendererFactory()
        factory.register("jvm", JavaRepositoryRenderer)
        assert isinstance(factory.get("jvm", package="p"), JavaRepositoryRenderer)
