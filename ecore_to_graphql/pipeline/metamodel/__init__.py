"""
Metamodel module.

Contains the metamodel node definitions and the loaders for Ecore XMI and
JSON metamodel documents.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import MetamodelLoadError
from .ecore_loader import EcoreLoader
from .json_loader import JsonMetamodelLoader, is_metamodel_document
from .nodes import (
    BUILTIN_PACKAGE,
    BUILTIN_TYPES,
    UNBOUNDED,
    Annotation,
    Attribute,
    Classifier,
    ClassType,
    EnumLiteral,
    EnumType,
    Member,
    MetamodelResource,
    Multiplicity,
    Operation,
    Package,
    Parameter,
    Reference,
    ScalarType,
)

METAMODEL_SUFFIXES = (".ecore", ".json")


def load_metamodel(path: Path | str) -> MetamodelResource:
    """Load a metamodel file, choosing the loader from its extension."""
    path = Path(path)
    match path.suffix:
        case ".ecore":
            return EcoreLoader().load(path)
        case ".json":
            return JsonMetamodelLoader().load(path)
        case suffix:
            raise MetamodelLoadError(f"Unsupported metamodel file type {suffix!r}: {path}")


__all__ = [
    "Annotation",
    "Attribute",
    "BUILTIN_PACKAGE",
    "BUILTIN_TYPES",
    "ClassType",
    "Classifier",
    "EcoreLoader",
    "EnumLiteral",
    "EnumType",
    "JsonMetamodelLoader",
    "METAMODEL_SUFFIXES",
    "Member",
    "MetamodelResource",
    "Multiplicity",
    "Operation",
    "Package",
    "Parameter",
    "Reference",
    "ScalarType",
    "UNBOUNDED",
    "is_metamodel_document",
    "load_metamodel",
]
