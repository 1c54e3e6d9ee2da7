"""
Exceptions raised by the generator pipeline.

Unsupported metamodel constructs are not errors: they are logged and skipped.
The exceptions below abort the transformation of the current resource.
"""

from __future__ import annotations


class EcoreToGraphQLError(Exception):
    """Base class for all generator errors."""

    pass


class MetamodelLoadError(EcoreToGraphQLError):
    """Raised when a metamodel file cannot be read or resolved."""

    pass


class EngineInvariantError(EcoreToGraphQLError):
    """Raised when the engine's own bookkeeping is inconsistent.

    This signals a defect, e.g. a member whose declaring class was never seen
    by the registrar. The resource is abandoned; no partial schema is emitted.
    """

    pass


class NameCollisionError(EcoreToGraphQLError):
    """Raised when two classifiers map to the same schema name."""

    pass


class SchemaBuildError(EcoreToGraphQLError):
    """Raised when the IR cannot be turned into a graphql-core schema."""

    pass


class OutputError(EcoreToGraphQLError):
    """Raised when generated text is invalid or cannot be written.

    This can happen when:
    - The output file exists and overwriting was not requested
    - The generated SDL does not build a valid schema
    """

    pass


def invariant(condition: bool, message: str) -> None:
    """Raise EngineInvariantError unless ``condition`` holds."""
    if not condition:
        raise EngineInvariantError(message)
