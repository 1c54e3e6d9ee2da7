"""
graphql-core backend.

Builds a `graphql.GraphQLSchema` from the schema IR and prints it with
`graphql.print_schema`. Custom scalars get the serialization and parsing
functions of the built-in scalar matching their representation, and enum
values carry the metamodel literal, so the schema can be used to execute
queries against a resolver layer.

Unlike the SDL backend this one needs every referenced type to exist.
"""

from __future__ import annotations

import logging

from graphql import (
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLEnumType,
    GraphQLEnumValue,
    GraphQLField,
    GraphQLFloat,
    GraphQLInt,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLString,
    print_schema,
)
from graphql.pyutils import Undefined

from ..analyzer.ir_nodes import (
    ArgumentDef,
    Coercion,
    EnumDef,
    FieldDef,
    ObjectTypeDef,
    ScalarDef,
    SchemaIR,
    TypeKind,
    TypeRef,
)
from ..errors import SchemaBuildError
from .base import SchemaBackend

logger = logging.getLogger(__name__)

BUILTIN_SCALARS: dict[str, GraphQLScalarType] = {
    "String": GraphQLString,
    "Int": GraphQLInt,
    "Float": GraphQLFloat,
    "Boolean": GraphQLBoolean,
}

COERCING_SCALARS: dict[Coercion, GraphQLScalarType] = {
    Coercion.STRING: GraphQLString,
    Coercion.INT: GraphQLInt,
    Coercion.FLOAT: GraphQLFloat,
    Coercion.BOOLEAN: GraphQLBoolean,
}


def resolve_object_type(value, info, abstract_type):
    """Resolve an interface value to the name of its object type.

    Values are dicts carrying `__typename`, or objects whose class name is the
    object type name.
    """
    if isinstance(value, dict):
        return value.get("__typename")
    return type(value).__name__


class GraphQLCoreBackend(SchemaBackend):
    """Backend producing a graphql-core schema."""

    NAME = "graphql"

    def generate(self, ir: SchemaIR) -> str:
        text = print_schema(self.build_schema(ir))
        comment = "".join(f"# {line}\n" for line in self._comment_lines(ir))
        if comment:
            return comment + "\n" + text + "\n"
        return text + "\n"

    def build_schema(self, ir: SchemaIR) -> GraphQLSchema:
        """
        Build an executable schema from IR.

        Raises:
            SchemaBuildError: A type is unknown or used where it is not allowed
        """
        self._types: dict[str, GraphQLNamedType] = dict(BUILTIN_SCALARS)
        self._kinds: dict[str, str] = {name: "scalar" for name in BUILTIN_SCALARS}

        for t in ir.all_types():
            if t.name in self._kinds:
                raise SchemaBuildError(f"Type {t.name} is defined more than once")
            self._kinds[t.name] = self._kind_of(t)

        self._check_references(ir)

        for t in ir.all_types():
            self._types[t.name] = self._named_type(t)

        query = self._types.get(ir.query.name) if ir.query else None
        mutation = self._types.get(ir.mutation.name) if ir.mutation else None
        roots = {n for n in (ir.query and ir.query.name, ir.mutation and ir.mutation.name) if n}
        types = [t for name, t in self._types.items() if name not in BUILTIN_SCALARS and name not in roots]
        logger.debug("Building graphql-core schema with %d named types", len(types) + len(roots))
        return GraphQLSchema(query=query, mutation=mutation, types=types)

    def _kind_of(self, t: ScalarDef | EnumDef | ObjectTypeDef) -> str:
        match t:
            case ScalarDef():
                return "scalar"
            case EnumDef():
                return "enum"
            case ObjectTypeDef():
                return "interface" if t.is_interface else "object"

    def _check_references(self, ir: SchemaIR) -> None:
        """Fail early: errors raised inside graphql-core field thunks are rewrapped as TypeError."""
        for t in ir.all_types():
            if not isinstance(t, ObjectTypeDef):
                continue
            for name in t.interfaces:
                if self._kinds.get(name) != "interface":
                    raise SchemaBuildError(f"{t.name} implements {name}, which is not an interface type")
            for f in t.fields:
                self._check_named(f.type_ref, f"{t.name}.{f.name}")
                for a in f.arguments:
                    where = f"{t.name}.{f.name}({a.name})"
                    self._check_named(a.type_ref, where)
                    if self._kinds[a.type_ref.named_type] not in ("scalar", "enum"):
                        raise SchemaBuildError(f"{where}: {a.type_ref.named_type} is not an input type")

    def _check_named(self, type_ref: TypeRef, where: str) -> None:
        if type_ref.named_type not in self._kinds:
            raise SchemaBuildError(f"{where}: unknown type {type_ref.named_type}")

    def _named_type(self, t: ScalarDef | EnumDef | ObjectTypeDef) -> GraphQLNamedType:
        match t:
            case ScalarDef():
                coercing = COERCING_SCALARS[t.coercion]
                return GraphQLScalarType(
                    name=t.name,
                    description=t.description,
                    serialize=coercing.serialize,
                    parse_value=coercing.parse_value,
                    parse_literal=coercing.parse_literal,
                )
            case EnumDef():
                return GraphQLEnumType(
                    name=t.name,
                    values={v.name: GraphQLEnumValue(v.value) for v in t.values},
                    description=t.description,
                )
            case ObjectTypeDef() if t.is_interface:
                return GraphQLInterfaceType(
                    name=t.name,
                    fields=lambda t=t: self._fields(t.fields),
                    description=t.description,
                    resolve_type=resolve_object_type,
                )
            case ObjectTypeDef():
                return GraphQLObjectType(
                    name=t.name,
                    fields=lambda t=t: self._fields(t.fields),
                    interfaces=lambda t=t: [self._types[n] for n in t.interfaces],
                    description=t.description,
                )

    def _fields(self, fields: list[FieldDef]) -> dict[str, GraphQLField]:
        return {
            f.name: GraphQLField(
                self._type(f.type_ref),
                args={a.name: self._argument(a) for a in f.arguments},
                description=f.description,
            )
            for f in fields
        }

    def _argument(self, a: ArgumentDef) -> GraphQLArgument:
        return GraphQLArgument(
            self._type(a.type_ref),
            default_value=a.default_value if a.has_default else Undefined,
            description=a.description,
        )

    def _type(self, type_ref: TypeRef):
        match type_ref.kind:
            case TypeKind.NAMED:
                return self._types[type_ref.name]
            case TypeKind.LIST:
                return GraphQLList(self._type(type_ref.of_type))
            case TypeKind.NON_NULL:
                return GraphQLNonNull(self._type(type_ref.of_type))
