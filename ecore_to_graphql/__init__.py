"""Ecore to GraphQL Schema Generator

A Python package for generating GraphQL schemas from Ecore metamodels.
Maps classes, enums and data types to GraphQL types and synthesizes
paginated collections, root queries and containment mutations.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    EcoreToGraphQLError,
    GeneratorConfig,
    NameCollisionPolicy,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    convert_path,
    load_metamodel,
)

__all__ = [
    "PipelineGenerator",
    "GeneratorConfig",
    "NameCollisionPolicy",
    "OutputConfig",
    "OutputMode",
    "EcoreToGraphQLError",
    "AtomicWriter",
    "convert_path",
    "load_metamodel",
]
