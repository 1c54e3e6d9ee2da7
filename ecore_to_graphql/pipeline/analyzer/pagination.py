"""
Collection argument synthesis.

A multi-valued field whose element type is a class is exposed as a paginated
collection:

    items(type: AllSubtypesOfItem, filter: String, sort: String,
          reverse: Boolean = false, skip: Int = 0, take: Int = -1): ItemPaginatedCollection!

The `type` argument only exists when the element type has subclasses. The
wrapper types, the shared page info type and the subtype enumerations are
built once the whole metamodel has been mapped.
"""

from __future__ import annotations

from ..config import GeneratorConfig
from ..metamodel.nodes import ClassType
from ...utils import sorted_case_insensitive
from .ir_nodes import (
    BOOLEAN,
    INT,
    STRING,
    ArgumentDef,
    EnumDef,
    EnumValueDef,
    FieldDef,
    ObjectTypeDef,
    TypeRef,
)
from .registrar import Registry


def paginated_collection_name(type_name: str) -> str:
    return type_name + "PaginatedCollection"


def all_subtypes_enum_name(type_name: str) -> str:
    return "AllSubtypesOf" + type_name


def all_concrete_subtypes_enum_name(type_name: str) -> str:
    return "AllConcreteSubtypesOf" + type_name


def collection_arguments(type_name: str, has_subclasses: bool, describe: bool = True) -> list[ArgumentDef]:
    """Arguments of a paginated collection field, in declaration order."""

    def d(text: str) -> str | None:
        return text if describe else None

    args = []
    if has_subclasses:
        args.append(
            ArgumentDef(
                name="type",
                type_ref=TypeRef.named(all_subtypes_enum_name(type_name)),
                description=d(f"Input enum for filtering the results to one of the subclasses of {type_name}"),
            )
        )
    args.extend(
        [
            ArgumentDef(
                name="filter",
                type_ref=STRING,
                description=d("AQL boolean expression in the context of `type` that will be the body of a `select(...)` call on the returned collection."),
            ),
            ArgumentDef(
                name="sort",
                type_ref=STRING,
                description=d("AQL expression in the context of type that will be the body of a sortedBy(...) call on the filtered collection."),
            ),
            ArgumentDef(
                name="reverse",
                type_ref=BOOLEAN,
                default_value=False,
                has_default=True,
                description=d("if true, reverse the results of the filtered and sorted collection."),
            ),
            ArgumentDef(
                name="skip",
                type_ref=INT,
                default_value=0,
                has_default=True,
                description=d("number of elements to skip from the sorted sequence of elements."),
            ),
            ArgumentDef(
                name="take",
                type_ref=INT,
                default_value=-1,
                has_default=True,
                description=d(
                    "max number of elements to return following `skip` number of elements in the sorted sequence of elements; "
                    "defaults to -1, which means taking all available elements."
                ),
            ),
        ]
    )
    return args


def as_collection_field(field_def: FieldDef, element: ClassType, registry: Registry, describe: bool = True) -> FieldDef:
    """Return a copy of a multi-valued field rewritten as a paginated collection."""
    type_name = registry.name_of(element)
    has_subclasses = bool(registry.subclasses_of(element))
    return FieldDef(
        name=field_def.name,
        type_ref=TypeRef.non_null(TypeRef.named(paginated_collection_name(type_name))),
        arguments=[*field_def.arguments, *collection_arguments(type_name, has_subclasses, describe)],
        description=field_def.description,
    )


def build_page_info(config: GeneratorConfig) -> ObjectTypeDef:
    describe = config.include_descriptions
    return ObjectTypeDef(
        name=config.page_info_type_name,
        fields=[
            FieldDef(
                name="nextSkip",
                type_ref=INT,
                description="The value for the skip argument of a subsequent call if hasNext is true." if describe else None,
            ),
            FieldDef(
                name="hasNext",
                type_ref=TypeRef.non_null(BOOLEAN),
                description="If true, nextSkip provides the value for the skip argument of a subsequent call." if describe else None,
            ),
            FieldDef(
                name="totalCount",
                type_ref=TypeRef.non_null(INT),
                description=(
                    "The total count of elements of the filtered collection; "
                    "if hasNext=true, the remaining number of elements will be totalCount - nextSkip."
                )
                if describe
                else None,
            ),
        ],
    )


def build_collection_wrapper(type_name: str, config: GeneratorConfig) -> ObjectTypeDef:
    describe = config.include_descriptions
    return ObjectTypeDef(
        name=paginated_collection_name(type_name),
        description=f"Paginated Collection of {type_name} elements." if describe else None,
        fields=[
            FieldDef(
                name="collection",
                type_ref=TypeRef.non_null(TypeRef.list_of(TypeRef.named(type_name))),
                description=f"A collection of {type_name} elements." if describe else None,
            ),
            FieldDef(
                name="pageInfo",
                type_ref=TypeRef.non_null(TypeRef.named(config.page_info_type_name)),
                description=f"The pagination data for the collection of {type_name} elements." if describe else None,
            ),
        ],
    )


def build_subtypes_enum(element: ClassType, registry: Registry) -> EnumDef | None:
    """AllSubtypesOf<T>: T and every subclass of T, or None when T has no subclass."""
    subclasses = registry.subclasses_of(element)
    if not subclasses:
        return None
    names = sorted_case_insensitive([registry.name_of(s) for s in subclasses] + [registry.name_of(element)])
    return EnumDef(
        name=all_subtypes_enum_name(registry.name_of(element)),
        values=[EnumValueDef(name=n, value=n) for n in names],
    )


def build_collection_types(
    elements: list[ClassType], registry: Registry, config: GeneratorConfig
) -> tuple[list[ObjectTypeDef], ObjectTypeDef | None, list[EnumDef]]:
    """
    Build the synthesized types for every element type used in a collection.

    Args:
        elements: Element types in first-use order, without duplicates
        registry: Registrar snapshot (names and subclasses)
        config: Generator configuration

    Returns:
        (wrapper types, shared page info type or None, subtype enumerations)
    """
    wrappers = [build_collection_wrapper(registry.name_of(e), config) for e in elements]
    page_info = build_page_info(config) if wrappers else None
    subtype_enums = [enum for enum in (build_subtypes_enum(e, registry) for e in elements) if enum is not None]
    return wrappers, page_info, subtype_enums
