"""
Backends module.

Contains the backends that turn the schema IR into GraphQL schema text.
"""

from __future__ import annotations

from .base import SchemaBackend
from .graphql_backend import GraphQLCoreBackend
from .sdl_backend import SdlBackend

BACKENDS: dict[str, type[SchemaBackend]] = {
    SdlBackend.NAME: SdlBackend,
    GraphQLCoreBackend.NAME: GraphQLCoreBackend,
}

__all__ = [
    "BACKENDS",
    "GraphQLCoreBackend",
    "SchemaBackend",
    "SdlBackend",
]
