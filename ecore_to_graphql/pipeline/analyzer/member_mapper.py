"""
Member mapper.

Pass 2 of the analyzer: map every attribute, reference and operation of the
registered classes to a field definition, and every enum literal to an enum
value. Runs after the registrar so that target types, subclasses and schema
names are all known.

Also records, per class, the identifier fields and the containment references
used later for root inference and mutation synthesis.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ..config import GeneratorConfig
from ..errors import invariant
from ..metamodel.nodes import (
    BUILTIN_SCALAR_NAMES,
    Attribute,
    Classifier,
    ClassType,
    EnumType,
    Member,
    MetamodelResource,
    Operation,
    Reference,
    TypedElement,
    is_builtin,
)
from .ir_nodes import ArgumentDef, EnumValueDef, FieldDef, TypeRef
from .pagination import as_collection_field
from .registrar import Registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberIndex:
    """Snapshot produced by the member mapper."""

    # Own (not inherited) fields of each registered class, in declaration order
    fields: Mapping[ClassType, tuple[FieldDef, ...]]
    identifiers: Mapping[ClassType, tuple[FieldDef, ...]]
    containments: Mapping[ClassType, tuple[Reference, ...]]
    contained: frozenset[ClassType]
    # Element types of paginated collections, in first-use order
    collection_elements: tuple[ClassType, ...]
    enum_values: Mapping[EnumType, tuple[EnumValueDef, ...]]

    def own_fields(self, c: ClassType) -> tuple[FieldDef, ...]:
        return self.fields.get(c, ())


def type_ref_of(classifier: Classifier, registry: Registry) -> TypeRef:
    """Named type reference for a classifier: built-ins map to GraphQL scalars."""
    if is_builtin(classifier):
        return TypeRef.named(BUILTIN_SCALAR_NAMES[classifier.name])
    return TypeRef.named(registry.name_of(classifier))


def with_multiplicity(element: TypedElement, t: TypeRef) -> TypeRef:
    """many -> [T]; unique or upper bound 1 -> T!; otherwise T."""
    if element.multiplicity.is_many:
        return TypeRef.list_of(t)
    if element.multiplicity.is_required:
        return TypeRef.non_null(t)
    return t


class MemberMapper:
    """Maps the members of one resource (pass 2)."""

    def __init__(self, registry: Registry, config: GeneratorConfig):
        self.registry = registry
        self.config = config

        self._fields: dict[ClassType, list[FieldDef]] = {s.metaclass: [] for s in registry.classes}
        self._identifiers: dict[ClassType, list[FieldDef]] = {s.metaclass: [] for s in registry.classes}
        self._containments: dict[ClassType, list[Reference]] = {s.metaclass: [] for s in registry.classes}
        self._contained: set[ClassType] = set()
        self._collection_elements: dict[ClassType, None] = {}
        self._enum_values: dict[EnumType, list[EnumValueDef]] = {e: [] for e in registry.enums}

    def map(self, resource: MetamodelResource) -> MemberIndex:
        for classifier in resource.all_classifiers():
            match classifier:
                case EnumType():
                    self._map_enum(classifier)
                case ClassType():
                    self._map_class(classifier)

        return MemberIndex(
            fields=MappingProxyType({c: tuple(fs) for c, fs in self._fields.items()}),
            identifiers=MappingProxyType({c: tuple(ids) for c, ids in self._identifiers.items()}),
            containments=MappingProxyType({c: tuple(rs) for c, rs in self._containments.items()}),
            contained=frozenset(self._contained),
            collection_elements=tuple(self._collection_elements),
            enum_values=MappingProxyType({e: tuple(vs) for e, vs in self._enum_values.items()}),
        )

    def _map_enum(self, enum: EnumType) -> None:
        values = self._enum_values.get(enum)
        if values is None:
            return
        seen: dict[str, str] = {}
        for literal in enum.literals:
            name = literal.name.upper()
            if name in seen:
                logger.warning(
                    "EEnumLiteral: %s::%s -- same enum value %s as literal %s, skipped",
                    enum.name,
                    literal.name,
                    name,
                    seen[name],
                )
                continue
            seen[name] = literal.name
            values.append(EnumValueDef(name=name, value=literal.value))

    def _map_class(self, c: ClassType) -> None:
        if c in self.registry.rejected:
            logger.debug("Skipping members of unsupported class %s", c.name)
            return
        for member in c.members():
            owner = member.containing_class
            invariant(
                owner is not None and owner in self._fields,
                f"{type(member).__name__}: {member.label} -- missing fields for {owner.name if owner else '<no class>'}",
            )
            match member:
                case Attribute():
                    self._map_attribute(owner, member)
                case Reference():
                    self._map_reference(owner, member)
                case Operation():
                    self._map_operation(owner, member)

    def _describe(self, kind: str, member: Member) -> str | None:
        if not self.config.include_descriptions:
            return None
        return f"{kind} {member.label}"

    def _has_type_parameters(self, member: Member, classifier: Classifier) -> bool:
        if classifier.type_parameters:
            logger.warning("%s -- unsupported case with type parameters on type %s!", member.label, classifier.name)
            return True
        return False

    def _add_field(self, c: ClassType, f: FieldDef) -> None:
        fs = self._fields.get(c)
        invariant(fs is not None, f"missing fields for {c.name}")
        fs.append(f)

    def _map_attribute(self, c: ClassType, a: Attribute) -> None:
        if not self.registry.is_processed(a.type):
            logger.warning("EAttribute: %s -- type %s is outside of the metamodel, skipped", a.label, a.type.qualified_name)
            return
        if self._has_type_parameters(a, a.type):
            return

        f = FieldDef(
            name=a.name,
            type_ref=with_multiplicity(a, type_ref_of(a.type, self.registry)),
            description=self._describe("EAttribute", a),
        )
        self._add_field(c, f)

        flag = a.annotation_detail(self.config.identifier_annotation_source, self.config.identifier_annotation_key)
        if flag is not None and flag.lower() == "true":
            ids = self._identifiers.get(c)
            invariant(ids is not None, f"missing identifiers for {c.name}")
            ids.append(f)

    def _is_getter_target(self, c: ClassType, name: str) -> bool:
        source = self.config.getter_annotation_source
        key = self.config.getter_annotation_key
        return any(op.annotation_detail(source, key) == name for op in c.all_operations())

    def _map_reference(self, c: ClassType, r: Reference) -> None:
        if self._is_getter_target(c, r.name):
            logger.warning("skip EReference: %s -- provided by a getter operation", r.label)
            return
        target = r.type
        if self._has_type_parameters(r, target):
            return

        if r.containment:
            logger.debug("EReference containment: %s", r.label)
            self._contained.add(target)
            self._contained.update(s for s in self.registry.subclasses_of(target) if not s.is_abstract)
            self._containments[c].append(r)

        f = FieldDef(
            name=r.name,
            type_ref=with_multiplicity(r, type_ref_of(target, self.registry)),
            description=self._describe("EReference", r),
        )
        if r.is_many:
            f = self._collection(f, target)
        self._add_field(c, f)

    def _map_operation(self, c: ClassType, o: Operation) -> None:
        if o.type_parameters:
            logger.warning("EOperation: %s -- unsupported case with type parameters!", o.label)
            return
        t = o.type
        if t is None:
            logger.debug("EOperation: %s -- no return type, skipped", o.label)
            return
        if not self.registry.is_processed(t):
            logger.warning("EOperation: %s -- return type %s is outside of the metamodel, skipped", o.label, t.qualified_name)
            return
        if self._has_type_parameters(o, t):
            return

        arguments = []
        for p in o.parameters:
            if not self.registry.is_processed(p.type):
                logger.warning("EOperation: %s -- type of parameter %s is outside of the metamodel, skipped", o.label, p.name)
                return
            if p.type.type_parameters:
                logger.warning("EOperation: %s -- unsupported case with type parameters for parameter: %s", o.label, p.name)
                return
            arguments.append(ArgumentDef(name=p.name, type_ref=with_multiplicity(p, type_ref_of(p.type, self.registry))))

        name = o.annotation_detail(self.config.getter_annotation_source, self.config.getter_annotation_key) or o.name
        f = FieldDef(
            name=name,
            type_ref=with_multiplicity(o, type_ref_of(t, self.registry)),
            arguments=arguments,
            description=self._describe("EOperation", o),
        )
        if o.is_many and isinstance(t, ClassType):
            f = self._collection(f, t)
        self._add_field(c, f)

    def _collection(self, f: FieldDef, element: ClassType) -> FieldDef:
        self._collection_elements.setdefault(element, None)
        return as_collection_field(f, element, self.registry, self.config.include_descriptions)


def map_members(resource: MetamodelResource, registry: Registry, config: GeneratorConfig | None = None) -> MemberIndex:
    return MemberMapper(registry, config or GeneratorConfig()).map(resource)
