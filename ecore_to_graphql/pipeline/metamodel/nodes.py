"""
Metamodel node definitions.

These nodes represent a loaded Ecore-style metamodel: packages of classifiers
(data types, enums and classes) with their typed members. They are produced by
the loaders and are read-only input for the analyzer.

Nodes compare and hash by identity, so two classifiers with the same name in
different packages remain distinct keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field

UNBOUNDED = -1
UNSPECIFIED = -2


@dataclass(eq=False)
class Annotation:
    """An annotation attached to a model element (source URI + string details)."""

    source: str = ""
    details: dict[str, str] = field(default_factory=dict)


@dataclass(eq=False)
class ModelElement:
    """Base class for all named metamodel nodes."""

    name: str = ""
    annotations: list[Annotation] = field(default_factory=list)

    def annotation(self, source: str) -> Annotation | None:
        for a in self.annotations:
            if a.source == source:
                return a
        return None

    def annotation_detail(self, source: str, key: str) -> str | None:
        a = self.annotation(source)
        if a is None:
            return None
        return a.details.get(key)

    @property
    def documentation(self) -> str | None:
        return self.annotation_detail(GENMODEL_URI, "documentation")


GENMODEL_URI = "http://www.eclipse.org/emf/2002/GenModel"


@dataclass(frozen=True)
class Multiplicity:
    """Bounds of a typed element.

    ``upper`` is ``UNBOUNDED`` (-1) for ``*`` and ``UNSPECIFIED`` (-2) when the
    model leaves it open. ``unique`` defaults to true as in Ecore.
    """

    lower: int = 0
    upper: int = 1
    unique: bool = True

    @property
    def is_many(self) -> bool:
        return self.upper > 1 or self.upper == UNBOUNDED

    @property
    def is_required(self) -> bool:
        return not self.is_many and (self.unique or self.upper == 1)


@dataclass(eq=False)
class Classifier(ModelElement):
    """Base class for scalar, enum and class types."""

    package: Package | None = None
    type_parameters: list[str] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        if self.package is None:
            return self.name
        return f"{self.package.name}::{self.name}"


@dataclass(eq=False)
class ScalarType(Classifier):
    """A data type backed by a primitive representation.

    ``representation`` is one of "string", "integer", "float", "boolean" or
    None when the loader could not determine it.
    """

    representation: str | None = None
    instance_class_name: str | None = None


@dataclass(eq=False)
class EnumLiteral(ModelElement):
    value: str = ""
    enum: EnumType | None = None


@dataclass(eq=False)
class EnumType(Classifier):
    literals: list[EnumLiteral] = field(default_factory=list)


@dataclass(eq=False)
class TypedElement(ModelElement):
    """An element with a classifier type and a multiplicity."""

    type: Classifier | None = None
    multiplicity: Multiplicity = field(default_factory=Multiplicity)

    @property
    def is_many(self) -> bool:
        return self.multiplicity.is_many


@dataclass(eq=False)
class Member(TypedElement):
    containing_class: ClassType | None = None

    @property
    def label(self) -> str:
        owner = self.containing_class.name if self.containing_class else "?"
        return f"{owner}::{self.name}"


@dataclass(eq=False)
class Attribute(Member):
    pass


@dataclass(eq=False)
class Reference(Member):
    containment: bool = False


@dataclass(eq=False)
class Parameter(TypedElement):
    pass


@dataclass(eq=False)
class Operation(Member):
    parameters: list[Parameter] = field(default_factory=list)
    type_parameters: list[str] = field(default_factory=list)


@dataclass(eq=False)
class ClassType(Classifier):
    abstract: bool = False
    interface: bool = False
    supertypes: list[ClassType] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)
    operations: list[Operation] = field(default_factory=list)

    @property
    def is_abstract(self) -> bool:
        return self.abstract or self.interface

    def all_supertypes(self) -> list[ClassType]:
        """Transitive supertypes, each one listed after its own ancestors."""
        result: list[ClassType] = []
        seen: set[int] = set()

        def visit(c: ClassType) -> None:
            for sup in c.supertypes:
                if id(sup) in seen:
                    continue
                visit(sup)
                if id(sup) not in seen:
                    seen.add(id(sup))
                    result.append(sup)

        visit(self)
        return result

    def all_operations(self) -> list[Operation]:
        ops = list(self.operations)
        for sup in self.all_supertypes():
            ops.extend(sup.operations)
        return ops

    def members(self) -> list[Member]:
        """Own members in declaration order: attributes, references, operations."""
        return [*self.attributes, *self.references, *self.operations]


@dataclass(eq=False)
class Package(ModelElement):
    ns_uri: str = ""
    classifiers: list[Classifier] = field(default_factory=list)
    subpackages: list[Package] = field(default_factory=list)

    def all_packages(self) -> list[Package]:
        result = [self]
        for sub in self.subpackages:
            result.extend(sub.all_packages())
        return result


@dataclass(eq=False)
class MetamodelResource:
    """One input resource: the root packages read from a single file."""

    name: str = ""
    packages: list[Package] = field(default_factory=list)
    source_path: str = ""

    def all_packages(self) -> list[Package]:
        result: list[Package] = []
        for p in self.packages:
            result.extend(p.all_packages())
        return result

    def all_classifiers(self) -> list[Classifier]:
        """Every classifier of every package, in document order."""
        result: list[Classifier] = []
        for p in self.all_packages():
            result.extend(p.classifiers)
        return result


# Ecore built-in data types, mapped to GraphQL built-in scalars.
BUILTIN_PACKAGE = Package(name="ecore", ns_uri="http://www.eclipse.org/emf/2002/Ecore")

BUILTIN_SCALAR_NAMES = {
    "EString": "String",
    "String": "String",
    "EBoolean": "Boolean",
    "EBooleanObject": "Boolean",
    "Boolean": "Boolean",
    "EInt": "Int",
    "EIntegerObject": "Int",
    "ELong": "Int",
    "ELongObject": "Int",
    "EShort": "Int",
    "UnsignedInteger": "Int",
    "Int": "Int",
    "EDouble": "Float",
    "EDoubleObject": "Float",
    "EFloat": "Float",
    "EFloatObject": "Float",
    "Float": "Float",
}

_BUILTIN_REPRESENTATIONS = {"String": "string", "Boolean": "boolean", "Int": "integer", "Float": "float"}

BUILTIN_TYPES: dict[str, ScalarType] = {}
for _name, _graphql_name in BUILTIN_SCALAR_NAMES.items():
    _builtin = ScalarType(name=_name, package=BUILTIN_PACKAGE, representation=_BUILTIN_REPRESENTATIONS[_graphql_name])
    BUILTIN_TYPES[_name] = _builtin
    BUILTIN_PACKAGE.classifiers.append(_builtin)


def is_builtin(classifier: Classifier) -> bool:
    return classifier.package is BUILTIN_PACKAGE


# Java instance class names of Ecore data types, by primitive representation.
INSTANCE_CLASS_REPRESENTATIONS = {
    "java.lang.String": "string",
    "long": "integer",
    "java.lang.Long": "integer",
    "int": "integer",
    "java.lang.Integer": "integer",
    "java.math.BigInteger": "integer",
    "java.math.BigDecimal": "integer",
    "double": "float",
    "java.lang.Double": "float",
    "float": "float",
    "java.lang.Float": "float",
    "boolean": "boolean",
    "java.lang.Boolean": "boolean",
}

REPRESENTATIONS = {"string", "integer", "float", "boolean"}


def representation_of(instance_class_name: str | None) -> str | None:
    if instance_class_name is None:
        return None
    return INSTANCE_CLASS_REPRESENTATIONS.get(instance_class_name)
