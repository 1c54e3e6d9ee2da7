"""
IR (Intermediate Representation) node definitions.

These nodes represent the synthesized GraphQL schema, ready for a backend to
print. Types refer to each other by name only, so a reference to a classifier
that was skipped stays printable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TypeKind(Enum):
    """Kind of type reference in the IR."""

    NAMED = "named"  # String, Shape, ...
    LIST = "list"  # [T]
    NON_NULL = "non_null"  # T!


class Coercion(Enum):
    """Value coercion of a custom scalar, chosen from its representation."""

    STRING = "string"
    INT = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


class ObjectKind(Enum):
    OBJECT = "object"
    INTERFACE = "interface"


@dataclass(frozen=True)
class TypeRef:
    """A reference to a named type, possibly wrapped in list / non-null."""

    kind: TypeKind = TypeKind.NAMED
    name: str = ""
    of_type: TypeRef | None = None

    @staticmethod
    def named(name: str) -> TypeRef:
        return TypeRef(kind=TypeKind.NAMED, name=name)

    @staticmethod
    def list_of(t: TypeRef) -> TypeRef:
        return TypeRef(kind=TypeKind.LIST, of_type=t)

    @staticmethod
    def non_null(t: TypeRef) -> TypeRef:
        return TypeRef(kind=TypeKind.NON_NULL, of_type=t)

    @property
    def named_type(self) -> str:
        """The innermost type name."""
        t = self
        while t.of_type is not None:
            t = t.of_type
        return t.name

    def __str__(self) -> str:
        match self.kind:
            case TypeKind.NAMED:
                return self.name
            case TypeKind.LIST:
                return f"[{self.of_type}]"
            case TypeKind.NON_NULL:
                return f"{self.of_type}!"


STRING = TypeRef.named("String")
INT = TypeRef.named("Int")
FLOAT = TypeRef.named("Float")
BOOLEAN = TypeRef.named("Boolean")


@dataclass
class ArgumentDef:
    """An argument of a field."""

    name: str = ""
    type_ref: TypeRef = STRING
    default_value: Any = None
    has_default: bool = False
    description: str | None = None


@dataclass
class FieldDef:
    """A field of an object or interface type."""

    name: str = ""
    type_ref: TypeRef = STRING
    arguments: list[ArgumentDef] = field(default_factory=list)
    description: str | None = None


@dataclass
class ScalarDef:
    name: str = ""
    coercion: Coercion = Coercion.STRING
    description: str | None = None


@dataclass
class EnumValueDef:
    name: str = ""
    value: Any = None


@dataclass
class EnumDef:
    """An enum type: a metamodel enum or a synthesized subtype enumeration."""

    name: str = ""
    values: list[EnumValueDef] = field(default_factory=list)
    description: str | None = None


@dataclass
class ObjectTypeDef:
    """An object or interface type with its (flattened) fields."""

    name: str = ""
    kind: ObjectKind = ObjectKind.OBJECT
    interfaces: list[str] = field(default_factory=list)
    fields: list[FieldDef] = field(default_factory=list)
    description: str | None = None

    @property
    def is_interface(self) -> bool:
        return self.kind == ObjectKind.INTERFACE


@dataclass
class SchemaIR:
    """The complete schema, in print order."""

    name: str = ""
    scalars: list[ScalarDef] = field(default_factory=list)
    enums: list[EnumDef] = field(default_factory=list)
    interfaces: list[ObjectTypeDef] = field(default_factory=list)
    objects: list[ObjectTypeDef] = field(default_factory=list)

    # Paginated collection wrappers, followed by the shared page info type
    wrappers: list[ObjectTypeDef] = field(default_factory=list)
    page_info: ObjectTypeDef | None = None

    # AllSubtypesOf* and AllConcreteSubtypesOf* enumerations
    subtype_enums: list[EnumDef] = field(default_factory=list)

    query: ObjectTypeDef | None = None
    mutation: ObjectTypeDef | None = None

    generation_comment: str = ""

    def all_types(self) -> list[ScalarDef | EnumDef | ObjectTypeDef]:
        types: list[ScalarDef | EnumDef | ObjectTypeDef] = [*self.scalars, *self.enums, *self.interfaces, *self.objects, *self.wrappers]
        if self.page_info is not None:
            types.append(self.page_info)
        types.extend(self.subtype_enums)
        if self.query is not None:
            types.append(self.query)
        if self.mutation is not None:
            types.append(self.mutation)
        return types
