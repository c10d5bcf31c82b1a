"""Tests for settings defaults, derived paths and environment overrides."""

import pathlib

from nodegql.config import RepositoryLanguage, Settings


class TestSettings:
    def test_defaults(self):
        config = Settings(_env_file=None)
        assert config.schema_file == "schema.graphql"
        assert config.generate_fragments
        assert config.repository_language == RepositoryLanguage.JAVA
        assert not config.fail_on_errors

    def test_package_directory(self, tmp_path):
        config = Settings(_env_file=None, output_directory=tmp_path, resource_package="com.example.graph")
        assert config.package_directory == tmp_path / "com" / "example" / "graph"

    def test_package_directory_without_package(self, tmp_path):
        assert Settings(_env_file=None, output_directory=tmp_path).package_directory == tmp_path

    def test_repository_package_default(self):
        config = Settings(_env_file=None, resource_package="com.example")
        assert config.resolved_repository_package == "com.example.repository"

    def test_repository_package_bare_name(self):
        config = Settings(_env_file=None, resource_package="com.example", repository_package="repos")
        assert config.resolved_repository_package == "com.example.repos"

    def test_repository_package_dotted(self):
        config = Settings(_env_file=None, resource_package="com.example", repository_package="org.acme.data")
        assert config.resolved_repository_package == "org.acme.data"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("NODEGQL_RESOURCE_PACKAGE", "com.env")
        monkeypatch.setenv("NODEGQL_REPOSITORY_LANGUAGE", "kotlin")
        monkeypatch.setenv("NODEGQL_INCLUDE_NEO4J_SCALARS", "true")
        monkeypatch.setenv("NODEGQL_SCALAR_MAPPINGS", '[{"scalar_name": "Money", "classes": ["com.acme.Money"]}]')
        monkeypatch.setenv("NODEGQL_SOURCE_ROOTS", '["src/main/java"]')

        config = Settings(_env_file=None)

        assert config.resource_package == "com.env"
        assert config.repository_language == RepositoryLanguage.KOTLIN
        assert config.include_neo4j_scalars
        assert config.scalar_mappings[0].scalar_name == "Money"
        assert config.source_roots == [pathlib.Path("src/main/java")]
