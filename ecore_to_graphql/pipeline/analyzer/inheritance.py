"""
Inheritance flattener.

GraphQL types do not inherit fields, so every interface and object type gets
a copy of the fields declared by its transitive supertypes. A field is only
copied when no field of that name is present yet: own fields win, then
supertypes in `ClassType.all_supertypes()` order.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from ..metamodel.nodes import ClassType
from .ir_nodes import FieldDef
from .member_mapper import MemberIndex
from .registrar import Registry


def add_specific_fields(fields: list[FieldDef], inherited: tuple[FieldDef, ...]) -> None:
    present = {f.name for f in fields}
    for f in inherited:
        if f.name not in present:
            fields.append(f)
            present.add(f.name)


def flatten_fields(registry: Registry, members: MemberIndex) -> Mapping[ClassType, tuple[FieldDef, ...]]:
    """Own plus inherited fields for every registered class."""
    flattened: dict[ClassType, tuple[FieldDef, ...]] = {}
    for skeleton in registry.classes:
        c = skeleton.metaclass
        fields = list(members.own_fields(c))
        for sup in c.all_supertypes():
            add_specific_fields(fields, members.own_fields(sup))
        flattened[c] = tuple(fields)
    return MappingProxyType(flattened)
