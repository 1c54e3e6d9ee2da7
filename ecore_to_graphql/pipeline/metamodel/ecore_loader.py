"""
Ecore XMI loader.

Reads `.ecore` files (an `ecore:EPackage` root, or an `xmi:XMI` root holding
several packages) into metamodel nodes. Type references use the XMI fragment
syntax: `#//Name` or `#//sub/Name` for local classifiers, `#/1/Name` for the
second root package, and `<uri>#//Name` for classifiers of other resources.

Classifiers of other resources become placeholders in a package of their own,
so the analyzer treats them as outside the processed packages. Ecore's own
data types (`EString`, `EInt`, ...) resolve to the built-in types.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from .nodes import (
    BUILTIN_TYPES,
    Annotation,
    Attribute,
    Classifier,
    ClassType,
    EnumLiteral,
    EnumType,
    MetamodelResource,
    Multiplicity,
    Operation,
    Package,
    Parameter,
    Reference,
    ScalarType,
    TypedElement,
    representation_of,
)
from ..errors import MetamodelLoadError

logger = logging.getLogger(__name__)

XSI_TYPE = "{http://www.w3.org/2001/XMLSchema-instance}type"
ECORE_NS_URI = "http://www.eclipse.org/emf/2002/Ecore"
XMI_ROOT = "{http://www.omg.org/XMI}XMI"


def _local_tag(element: ET.Element) -> str:
    return element.tag.rsplit("}", 1)[-1]


def _xsi_kind(element: ET.Element) -> str:
    """'ecore:EClass' -> 'EClass'."""
    return element.get(XSI_TYPE, "").rsplit(":", 1)[-1]


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.lower() == "true"


class EcoreLoader:
    """Parses Ecore XMI documents into metamodel nodes."""

    def __init__(self):
        self._roots: list[Package] = []
        self._external_packages: dict[str, Package] = {}
        self._external_classifiers: dict[str, Classifier] = {}
        self._pending: list[tuple[ClassType, ET.Element]] = []

    def load(self, path: Path | str) -> MetamodelResource:
        path = Path(path)
        try:
            tree = ET.parse(path)
        except (OSError, ET.ParseError) as e:
            raise MetamodelLoadError(f"Cannot read metamodel {path}: {e}") from e
        resource = self.parse(tree.getroot(), name=path.stem)
        resource.source_path = str(path)
        return resource

    def parse_string(self, text: str, name: str = "") -> MetamodelResource:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise MetamodelLoadError(f"Cannot parse Ecore document: {e}") from e
        return self.parse(root, name=name)

    def parse(self, root: ET.Element, name: str = "") -> MetamodelResource:
        self._roots = []
        self._external_packages = {}
        self._external_classifiers = {}
        self._pending = []

        if root.tag == XMI_ROOT:
            package_elements = [e for e in root if _local_tag(e) == "EPackage"]
        elif _local_tag(root) == "EPackage":
            package_elements = [root]
        else:
            raise MetamodelLoadError(f"Unexpected root element {root.tag!r}; expected an ecore:EPackage")

        for element in package_elements:
            self._roots.append(self._parse_package(element))

        for c, element in self._pending:
            self._resolve_class(c, element)

        return MetamodelResource(name=name or (self._roots[0].name if self._roots else ""), packages=list(self._roots))

    def _parse_package(self, element: ET.Element) -> Package:
        package = Package(
            name=element.get("name", ""),
            ns_uri=element.get("nsURI", ""),
            annotations=self._parse_annotations(element),
        )
        for child in element:
            match _local_tag(child):
                case "eClassifiers":
                    package.classifiers.append(self._parse_classifier(child, package))
                case "eSubpackages":
                    package.subpackages.append(self._parse_package(child))
        return package

    def _parse_classifier(self, element: ET.Element, package: Package) -> Classifier:
        name = element.get("name", "")
        annotations = self._parse_annotations(element)
        type_parameters = [tp.get("name", "") for tp in element if _local_tag(tp) == "eTypeParameters"]

        match _xsi_kind(element):
            case "EClass":
                c = ClassType(
                    name=name,
                    package=package,
                    annotations=annotations,
                    type_parameters=type_parameters,
                    abstract=_as_bool(element.get("abstract")),
                    interface=_as_bool(element.get("interface")),
                )
                self._pending.append((c, element))
                return c
            case "EEnum":
                enum = EnumType(name=name, package=package, annotations=annotations, type_parameters=type_parameters)
                for child in element:
                    if _local_tag(child) == "eLiterals":
                        literal_name = child.get("name", "")
                        enum.literals.append(
                            EnumLiteral(
                                name=literal_name,
                                value=child.get("literal", literal_name),
                                enum=enum,
                                annotations=self._parse_annotations(child),
                            )
                        )
                return enum
            case "EDataType":
                instance_class_name = element.get("instanceClassName")
                return ScalarType(
                    name=name,
                    package=package,
                    annotations=annotations,
                    type_parameters=type_parameters,
                    representation=representation_of(instance_class_name),
                    instance_class_name=instance_class_name,
                )
            case kind:
                raise MetamodelLoadError(f"Classifier {name!r} in package {package.name!r} has unsupported kind {kind!r}")

    def _parse_annotations(self, element: ET.Element) -> list[Annotation]:
        annotations = []
        for child in element:
            if _local_tag(child) != "eAnnotations":
                continue
            details = {d.get("key", ""): d.get("value", "") for d in child if _local_tag(d) == "details"}
            annotations.append(Annotation(source=child.get("source", ""), details=details))
        return annotations

    def _resolve_class(self, c: ClassType, element: ET.Element) -> None:
        for ref in element.get("eSuperTypes", "").split():
            sup = self._resolve_reference(ref, "EClass")
            if not isinstance(sup, ClassType):
                raise MetamodelLoadError(f"Supertype {ref!r} of {c.name} is not a class")
            c.supertypes.append(sup)

        for child in element:
            match _local_tag(child), _xsi_kind(child):
                case "eStructuralFeatures", "EAttribute":
                    attribute = Attribute(containing_class=c)
                    self._parse_typed_element(attribute, child, "EDataType")
                    c.attributes.append(attribute)
                case "eStructuralFeatures", "EReference":
                    reference = Reference(containing_class=c, containment=_as_bool(child.get("containment")))
                    self._parse_typed_element(reference, child, "EClass")
                    if not isinstance(reference.type, ClassType):
                        raise MetamodelLoadError(f"Reference {reference.label} must target a class")
                    c.references.append(reference)
                case "eOperations", _:
                    operation = Operation(
                        containing_class=c,
                        type_parameters=[tp.get("name", "") for tp in child if _local_tag(tp) == "eTypeParameters"],
                    )
                    self._parse_typed_element(operation, child, "EDataType", allow_void=True)
                    for p in child:
                        if _local_tag(p) == "eParameters":
                            parameter = Parameter()
                            self._parse_typed_element(parameter, p, "EDataType")
                            operation.parameters.append(parameter)
                    c.operations.append(operation)

    def _parse_typed_element(self, typed: TypedElement, element: ET.Element, default_kind: str, allow_void: bool = False) -> None:
        typed.name = element.get("name", "")
        typed.annotations = self._parse_annotations(element)
        typed.multiplicity = Multiplicity(
            lower=int(element.get("lowerBound", "0")),
            upper=int(element.get("upperBound", "1")),
            unique=_as_bool(element.get("unique"), default=True),
        )

        ref = element.get("eType")
        if ref is None:
            for child in element:
                if _local_tag(child) == "eGenericType" and child.get("eClassifier"):
                    ref = child.get("eClassifier")
                    break
        if ref is None:
            if allow_void:
                return
            raise MetamodelLoadError(f"Typed element {typed.name!r} has no eType")
        typed.type = self._resolve_reference(ref, default_kind)

    def _resolve_reference(self, ref: str, default_kind: str) -> Classifier:
        """Resolve an XMI type reference such as `ecore:EClass other.ecore#//Foo` or `#//sub/Bar`."""
        kind = default_kind
        if " " in ref:
            prefix, ref = ref.split(" ", 1)
            kind = prefix.rsplit(":", 1)[-1]

        uri, _, fragment = ref.partition("#")
        if not fragment.startswith("/"):
            raise MetamodelLoadError(f"Unsupported type reference {ref!r}")

        if uri == ECORE_NS_URI:
            builtin = BUILTIN_TYPES.get(fragment.rsplit("/", 1)[-1])
            if builtin is not None:
                return builtin
        if uri:
            return self._external_placeholder(uri, fragment, kind)

        segments = fragment.split("/")[1:]
        # "//a/b" addresses the first root, "/1/a/b" the second
        index = int(segments[0]) if segments[0] else 0
        if index >= len(self._roots):
            raise MetamodelLoadError(f"Unresolved type reference {ref!r}")
        package = self._roots[index]
        path = segments[1:]
        for sub_name in path[:-1]:
            package = next((s for s in package.subpackages if s.name == sub_name), None)
            if package is None:
                raise MetamodelLoadError(f"Unresolved type reference {ref!r}")
        for classifier in package.classifiers:
            if classifier.name == path[-1]:
                return classifier
        raise MetamodelLoadError(f"Unresolved type reference {ref!r}")

    def _external_placeholder(self, uri: str, fragment: str, kind: str) -> Classifier:
        key = f"{uri}#{fragment}"
        found = self._external_classifiers.get(key)
        if found is not None:
            return found

        package = self._external_packages.setdefault(uri, Package(name=uri, ns_uri=uri))
        name = fragment.rsplit("/", 1)[-1]
        if kind == "EClass":
            placeholder: Classifier = ClassType(name=name, package=package)
        elif kind == "EEnum":
            placeholder = EnumType(name=name, package=package)
        else:
            placeholder = ScalarType(name=name, package=package)
        package.classifiers.append(placeholder)
        self._external_classifiers[key] = placeholder
        logger.debug("External type %s from %s", name, uri)
        return placeholder
