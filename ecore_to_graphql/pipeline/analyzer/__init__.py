"""
Analyzer module.

Contains the two-pass mapping engine (registrar, member mapper) and the
synthesis stages that build the schema IR.
"""

from __future__ import annotations

from .analyzer import SchemaAnalyzer
from .inheritance import flatten_fields
from .ir_nodes import (
    ArgumentDef,
    Coercion,
    EnumDef,
    EnumValueDef,
    FieldDef,
    ObjectKind,
    ObjectTypeDef,
    ScalarDef,
    SchemaIR,
    TypeKind,
    TypeRef,
)
from .member_mapper import MemberIndex, map_members
from .mutations import synthesize_mutations
from .registrar import Registry, register_classifiers
from .roots import infer_root_classes

__all__ = [
    "ArgumentDef",
    "Coercion",
    "EnumDef",
    "EnumValueDef",
    "FieldDef",
    "MemberIndex",
    "ObjectKind",
    "ObjectTypeDef",
    "Registry",
    "ScalarDef",
    "SchemaAnalyzer",
    "SchemaIR",
    "TypeKind",
    "TypeRef",
    "flatten_fields",
    "infer_root_classes",
    "map_members",
    "register_classifiers",
    "synthesize_mutations",
]
