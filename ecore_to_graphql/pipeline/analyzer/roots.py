"""
Root operation inference.

A root class is an entry point of the schema: a class whose instances are not
owned through any containment reference. Each root class gets a top-level
`Query.all<Plural>` field.
"""

from __future__ import annotations

from collections.abc import Iterable

from ...utils import pluralize, sorted_case_insensitive
from ..metamodel.nodes import ClassType
from .ir_nodes import FieldDef, ObjectTypeDef, TypeRef
from .registrar import Registry


def candidate_root_classes(metaclasses: Iterable[ClassType], contained: frozenset[ClassType] | set[ClassType]) -> list[ClassType]:
    """
    Classes that may be roots.

    A candidate:
    - is not a contained metaclass
    - is not a superclass of a contained metaclass
    - has no contained metaclass among its superclasses
    """
    contained_supertypes = set()
    for c in contained:
        contained_supertypes.update(c.all_supertypes())

    return [
        c
        for c in metaclasses
        if c not in contained and c not in contained_supertypes and not any(sup in contained for sup in c.all_supertypes())
    ]


def infer_root_classes(metaclasses: Iterable[ClassType], contained: frozenset[ClassType] | set[ClassType]) -> list[ClassType]:
    """
    Root classes, sorted by name ignoring case.

    A candidate is a root if it is concrete, or abstract with at least one
    concrete specialization that is also a candidate.
    """
    candidates = candidate_root_classes(metaclasses, contained)
    candidate_set = set(candidates)
    roots = [
        c
        for c in candidates
        if not c.is_abstract
        or any(not other.is_abstract and c in other.all_supertypes() for other in candidate_set)
    ]
    return sorted_case_insensitive(roots, key=lambda c: c.name)


def root_query_fields(roots: list[ClassType], registry: Registry) -> list[FieldDef]:
    fields = []
    for c in roots:
        if c not in registry.skeletons:
            continue
        name = registry.name_of(c)
        fields.append(FieldDef(name="all" + pluralize(name), type_ref=TypeRef.list_of(TypeRef.named(name))))
    return fields


def build_query_type(roots: list[ClassType], registry: Registry) -> ObjectTypeDef | None:
    fields = root_query_fields(roots, registry)
    if not fields:
        return None
    return ObjectTypeDef(name="Query", fields=fields)
