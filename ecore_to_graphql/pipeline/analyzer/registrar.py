"""
Classifier registrar.

Pass 1 of the analyzer: visit every classifier of a resource once and create
its schema skeleton (scalar, enum, interface or object shell), decide its
schema name and index the subclass relation. Members are not looked at here;
see member_mapper.py for pass 2.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ..config import GeneratorConfig, NameCollisionPolicy
from ..errors import NameCollisionError
from ..metamodel.nodes import (
    Classifier,
    ClassType,
    EnumType,
    MetamodelResource,
    Package,
    ScalarType,
    is_builtin,
)
from .ir_nodes import Coercion, ObjectKind, ScalarDef

logger = logging.getLogger(__name__)

COERCIONS = {
    "string": Coercion.STRING,
    "integer": Coercion.INT,
    "float": Coercion.FLOAT,
    "boolean": Coercion.BOOLEAN,
}


@dataclass(frozen=True)
class ClassSkeleton:
    """Interface or object shell of a metaclass, before any field is known."""

    metaclass: ClassType
    name: str
    kind: ObjectKind
    interfaces: tuple[str, ...] = ()
    description: str | None = None


@dataclass(frozen=True)
class Registry:
    """Snapshot produced by the registrar."""

    packages: tuple[Package, ...]
    type_names: Mapping[Classifier, str]
    scalars: tuple[ScalarDef, ...]
    enums: tuple[EnumType, ...]
    classes: tuple[ClassSkeleton, ...]
    skeletons: Mapping[ClassType, ClassSkeleton]
    subclasses: Mapping[ClassType, frozenset[ClassType]]
    rejected: frozenset[Classifier]

    def is_processed(self, classifier: Classifier) -> bool:
        """Whether the classifier is a built-in or belongs to one of the resource's packages."""
        return is_builtin(classifier) or classifier.package in self.packages

    def name_of(self, classifier: Classifier) -> str:
        """Schema name of a classifier; unregistered classifiers keep their own name."""
        return self.type_names.get(classifier, classifier.name)

    def subclasses_of(self, c: ClassType) -> frozenset[ClassType]:
        return self.subclasses.get(c, frozenset())

    def concrete_subclasses_of(self, c: ClassType, include_self: bool = True) -> list[ClassType]:
        result = [s for s in self.subclasses_of(c) if not s.is_abstract]
        if include_self and not c.is_abstract and c in self.skeletons:
            result.append(c)
        return result

    @property
    def metaclasses(self) -> list[ClassType]:
        return [s.metaclass for s in self.classes]


class ClassifierRegistrar:
    """Registers the classifiers of one resource (pass 1)."""

    def __init__(self, config: GeneratorConfig):
        self.config = config

    def register(self, resource: MetamodelResource) -> Registry:
        packages = resource.all_packages()
        if len(packages) > 1:
            logger.warning(
                "The generated GraphQL schema corresponds to mapping the union of all %d input metamodel packages.",
                len(packages),
            )

        seen: set[Classifier] = set()
        accepted: list[Classifier] = []
        rejected: set[Classifier] = set()
        for classifier in resource.all_classifiers():
            if classifier in seen:
                continue
            seen.add(classifier)
            if self._accept(classifier):
                accepted.append(classifier)
            else:
                rejected.add(classifier)

        type_names = self._resolve_names(accepted)

        scalars: list[ScalarDef] = []
        enums: list[EnumType] = []
        classes: list[ClassSkeleton] = []
        subclasses: dict[ClassType, set[ClassType]] = {}
        for classifier in accepted:
            match classifier:
                case ScalarType():
                    scalars.append(
                        ScalarDef(
                            name=type_names[classifier],
                            coercion=COERCIONS[classifier.representation],
                            description=classifier.documentation,
                        )
                    )
                case EnumType():
                    enums.append(classifier)
                case ClassType():
                    classes.append(self._class_skeleton(classifier, type_names))
                    for sup in classifier.all_supertypes():
                        subclasses.setdefault(sup, set()).add(classifier)

        return Registry(
            packages=tuple(packages),
            type_names=MappingProxyType(type_names),
            scalars=tuple(scalars),
            enums=tuple(enums),
            classes=tuple(classes),
            skeletons=MappingProxyType({s.metaclass: s for s in classes}),
            subclasses=MappingProxyType({k: frozenset(v) for k, v in subclasses.items()}),
            rejected=frozenset(rejected),
        )

    def _accept(self, classifier: Classifier) -> bool:
        """Check for unsupported constructs; log and reject them."""
        match classifier:
            case ScalarType():
                if classifier.type_parameters:
                    logger.warning("EDataType: %s -- unsupported case with type parameters!", classifier.name)
                    return False
                if classifier.representation not in COERCIONS:
                    logger.warning(
                        "EDataType: %s -- unsupported instance class %s",
                        classifier.name,
                        classifier.instance_class_name or classifier.representation,
                    )
                    return False
                logger.debug("EDataType: %s -> scalar type", classifier.name)
                return True
            case EnumType():
                logger.debug("EEnum: %s -> enum type", classifier.name)
                return True
            case ClassType():
                if classifier.type_parameters:
                    logger.warning("EClass: %s -- unsupported case with type parameters!", classifier.name)
                    return False
                logger.debug(
                    "EClass: %s -> %s type",
                    classifier.name,
                    "interface" if classifier.is_abstract else "object",
                )
                return True
            case _:
                raise TypeError(f"Unknown classifier variant {type(classifier).__name__}")

    def _resolve_names(self, classifiers: list[Classifier]) -> dict[Classifier, str]:
        """Map each classifier to its schema name, applying the collision policy."""
        by_name: dict[str, list[Classifier]] = {}
        for c in classifiers:
            by_name.setdefault(c.name, []).append(c)

        if self.config.page_info_type_name in by_name:
            logger.warning(
                "Classifier %s has the same name as the page info type",
                self.config.page_info_type_name,
            )

        collisions = {name: cs for name, cs in by_name.items() if len(cs) > 1}
        if collisions and self.config.name_collision_policy == NameCollisionPolicy.ERROR:
            details = "; ".join(f"{name} in {', '.join(c.qualified_name for c in cs)}" for name, cs in collisions.items())
            raise NameCollisionError(f"Classifier names collide across packages: {details}")

        names: dict[Classifier, str] = {}
        for c in classifiers:
            if c.name in collisions:
                package_name = c.package.name if c.package else ""
                names[c] = f"{package_name}_{c.name}"
                logger.warning("Renamed %s to %s", c.qualified_name, names[c])
            else:
                names[c] = c.name
        return names

    def _class_skeleton(self, c: ClassType, type_names: dict[Classifier, str]) -> ClassSkeleton:
        if c.is_abstract:
            return ClassSkeleton(
                metaclass=c,
                name=type_names[c],
                kind=ObjectKind.INTERFACE,
                description=c.documentation,
            )
        interfaces = tuple(type_names.get(sup, sup.name) for sup in c.all_supertypes() if sup.is_abstract)
        return ClassSkeleton(
            metaclass=c,
            name=type_names[c],
            kind=ObjectKind.OBJECT,
            interfaces=interfaces,
            description=c.documentation,
        )


def register_classifiers(resource: MetamodelResource, config: GeneratorConfig | None = None) -> Registry:
    return ClassifierRegistrar(config or GeneratorConfig()).register(resource)
