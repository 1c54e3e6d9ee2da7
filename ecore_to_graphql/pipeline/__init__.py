"""
Pipeline - Ecore metamodel to GraphQL schema generator.

This module provides a multi-phase architecture for generating GraphQL
schemas from metamodels:

1. Phase 1 (Loader): Parse an Ecore XMI or JSON metamodel into metamodel nodes
2. Phase 2 (Analyzer): Register classifiers, map members and synthesize the
   collection, query and mutation types into the schema IR
3. Phase 3 (Backend): Print the IR as SDL (Jinja2 templates) or through a
   graphql-core schema
4. Phase 4 (Output): Validate and write the schema atomically
"""

from __future__ import annotations

from .config import GeneratorConfig, NameCollisionPolicy, OutputConfig, OutputMode
from .errors import (
    EcoreToGraphQLError,
    EngineInvariantError,
    MetamodelLoadError,
    NameCollisionError,
    OutputError,
    SchemaBuildError,
)
from .generator import PipelineGenerator, convert_path
from .metamodel import load_metamodel
from .output import AtomicWriter

__all__ = [
    "AtomicWriter",
    "EcoreToGraphQLError",
    "EngineInvariantError",
    "GeneratorConfig",
    "MetamodelLoadError",
    "NameCollisionError",
    "NameCollisionPolicy",
    "OutputConfig",
    "OutputError",
    "OutputMode",
    "PipelineGenerator",
    "SchemaBuildError",
    "convert_path",
    "load_metamodel",
]
