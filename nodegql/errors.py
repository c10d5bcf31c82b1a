"""Error taxonomy for model construction and generation runs.

:class:`ModelError` and its subclasses are *collected*: scanning and
resolution catch them per member, per class or per type and return them as
a list.  :class:`GenerationError` subclasses are fatal and propagate to the
caller, aborting the run.
"""

from __future__ import annotations


class ModelError(Exception):
    """A recoverable problem found while building or resolving the model."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AttributeModelError(ModelError):
    """A single field or getter could not be turned into an attribute.

    Args:
        attr_name: Member name as declared on the class.
        class_name: Fully-qualified name of the owning class.
        message: Human-readable cause.
    """

    def __init__(self, attr_name: str, class_name: str, message: str) -> None:
        super().__init__(f"{class_name}.{attr_name} {message}")
        self.attr_name = attr_name
        self.class_name = class_name


class ClassModelError(ModelError):
    """A class could not be scanned or resolved as a whole.

    Args:
        class_name: Fully-qualified name of the class.
        message: Human-readable cause.
    """

    def __init__(self, class_name: str, message: str) -> None:
        super().__init__(f"{class_name}: {message}")
        self.class_name = class_name


class GenerationError(Exception):
    """Unrecoverable condition that terminates a generation run."""


class IndexNotFoundError(GenerationError):
    """The metadata index file required for scanning is missing."""


class GenerationFailedError(GenerationError):
    """Artifacts were written but the run is configured to fail on model errors.

    Args:
        errors: The accumulated model errors.
    """

    def __init__(self, errors: list[ModelError]) -> None:
        super().__init__(f"Schema generation failed with {len(errors)} reported error(s)")
        self.errors = errors
