"""
Mutation synthesis.

For every class that owns containment references and has an identifier
field, each containment reference yields a creation mutation:

    itemsOfFolderById(id: String, item: AllConcreteSubtypesOfItem): String

The first argument locates the container, the second picks the concrete
subtype to instantiate; the result is the identifier of the new instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...utils import capitalize_first, decapitalize_first, sorted_case_insensitive
from ..config import GeneratorConfig
from ..metamodel.nodes import ClassType, Reference
from .ir_nodes import STRING, ArgumentDef, EnumDef, EnumValueDef, FieldDef, ObjectTypeDef, TypeRef
from .member_mapper import MemberIndex
from .pagination import all_concrete_subtypes_enum_name
from .registrar import Registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationContext:
    """A container class, the identifier addressing it and its containment references."""

    metaclass: ClassType
    identifier: FieldDef
    containments: tuple[Reference, ...]


@dataclass(frozen=True)
class MutationPlan:
    mutation: ObjectTypeDef | None
    subtype_enums: tuple[EnumDef, ...]


def collect_identifiers(c: ClassType, members: MemberIndex) -> list[FieldDef]:
    """Identifier fields of a class and its supertypes, supertypes first."""
    ids: list[FieldDef] = []
    for sup in c.all_supertypes():
        ids.extend(members.identifiers.get(sup, ()))
    ids.extend(members.identifiers.get(c, ()))
    return ids


def mutation_contexts(registry: Registry, members: MemberIndex) -> list[MutationContext]:
    contexts = []
    for skeleton in sorted_case_insensitive(registry.classes, key=lambda s: s.name):
        c = skeleton.metaclass
        containments = members.containments.get(c, ())
        if not containments:
            continue
        ids = collect_identifiers(c, members)
        if not ids:
            continue
        if len(ids) > 1:
            logger.warning(
                "%s has %d identifier fields; using %s and ignoring %s",
                c.name,
                len(ids),
                ids[0].name,
                ", ".join(f.name for f in ids[1:]),
            )
        contexts.append(MutationContext(metaclass=c, identifier=ids[0], containments=containments))
    return contexts


def synthesize_mutations(registry: Registry, members: MemberIndex, config: GeneratorConfig | None = None) -> MutationPlan:
    config = config or GeneratorConfig()
    describe = config.include_descriptions

    enums: dict[ClassType, EnumDef] = {}
    fields: list[FieldDef] = []
    for context in mutation_contexts(registry, members):
        owner = registry.name_of(context.metaclass)
        id_name = context.identifier.name
        logger.info("mutations for: %s; id: %s", owner, id_name)

        for r in context.containments:
            t = r.type
            concrete = registry.concrete_subclasses_of(t)
            if not concrete:
                logger.debug("No concrete subtype of %s to create through %s", t.name, r.label)
                continue

            subtypes = enums.get(t)
            if subtypes is None:
                names = sorted_case_insensitive(registry.name_of(s) for s in concrete)
                subtypes = EnumDef(
                    name=all_concrete_subtypes_enum_name(registry.name_of(t)),
                    values=[EnumValueDef(name=n, value=n) for n in names],
                )
                enums[t] = subtypes

            fields.append(
                FieldDef(
                    name=f"{r.name}Of{owner}By{capitalize_first(id_name)}",
                    type_ref=STRING,
                    arguments=[
                        ArgumentDef(
                            name=id_name,
                            type_ref=STRING,
                            description=f"Identifies the {owner} mutation context via its {id_name} property." if describe else None,
                        ),
                        ArgumentDef(
                            name=decapitalize_first(registry.name_of(t)),
                            type_ref=TypeRef.named(subtypes.name),
                            description=f"Specifies one of {subtypes.name} to create." if describe else None,
                        ),
                    ],
                    description=(
                        f"Returns the ID of creating one of {subtypes.name} in the collection {owner}.{r.name} "
                        f"where the container is identified via {id_name}"
                    )
                    if describe
                    else None,
                )
            )

    mutation = ObjectTypeDef(name="Mutation", fields=fields) if fields else None
    return MutationPlan(mutation=mutation, subtype_enums=tuple(enums.values()))
