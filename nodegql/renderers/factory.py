"""Factory for obtaining the repository renderer for a host language.

Adding support for a new host language requires only:

1. Creating a new subclass of :class:`BaseRepositoryRenderer`.
2. Registering it via :meth:`RepositoryRendererFactory.register`.
"""

from __future__ import annotations

from typing import Optional, Type

import structlog

from nodegql.config import RepositoryLanguage
from nodegql.renderers.base import BaseRepositoryRenderer
from nodegql.renderers.repositories import JavaRepositoryRenderer, KotlinRepositoryRenderer

logger = structlog.get_logger(__name__)


class RepositoryRendererFactory:
    """Registry-based factory that maps languages to repository renderer classes.

    Usage::

        factory = RepositoryRendererFactory.default()
        renderer = factory.get("java", package="com.example.repository")
    """

    def __init__(self) -> None:
        self._registry: dict[str, Type[BaseRepositoryRenderer]] = {}

    @classmethod
    def default(cls) -> RepositoryRendererFactory:
        """Return a factory pre-loaded with the Java and Kotlin renderers."""
        factory = cls()
        factory.register(RepositoryLanguage.JAVA.value, JavaRepositoryRenderer)
        factory.register(RepositoryLanguage.KOTLIN.value, KotlinRepositoryRenderer)
        return factory

    def register(self, language: str, renderer_cls: Type[BaseRepositoryRenderer]) -> None:
        """Register a renderer class for *language*.

        Args:
            language: Lowercase language identifier (e.g. ``"kotlin"``).
            renderer_cls: A concrete subclass of :class:`BaseRepositoryRenderer`.
        """
        self._registry[language] = renderer_cls
        logger.debug("renderer_registered", language=language, cls=renderer_cls.__name__)

    def get(
        self,
        language: str,
        package: str,
        base_class: Optional[str] = None,
    ) -> Optional[BaseRepositoryRenderer]:
        """Return a renderer for *language* configured for *package*.

        Returns:
            A renderer instance, or ``None`` if no renderer is registered for
            the requested language.
        """
        renderer_cls = self._registry.get(language)
        if renderer_cls is None:
            logger.warning("no_renderer_registered", language=language)
            return None
        return renderer_cls(package, base_class)

    @property
    def supported_languages(self) -> list[str]:
        """Return a sorted list of registered language identifiers."""
        return sorted(self._registry.keys())
