"""
JSON metamodel loader.

Phase 1 of the pipeline for JSON input: parse a metamodel document into
metamodel nodes. Classifiers are created first and member types are resolved
in a second step, so members may refer to classifiers declared later.

Document shape::

    {
      "name": "shapes",
      "packages": [
        {
          "name": "shapes",
          "nsURI": "http://example.org/shapes",
          "classifiers": [
            {"kind": "datatype", "name": "Identifier", "representation": "string"},
            {"kind": "enum", "name": "Color", "literals": ["red", {"name": "blue", "value": "B"}]},
            {
              "kind": "class", "name": "Shape", "abstract": true, "supertypes": ["Named"],
              "attributes": [{"name": "id", "type": "EString", "identifier": true}],
              "references": [{"name": "parts", "type": "Part", "upper": "*", "containment": true}],
              "operations": [{"name": "area", "type": "EDouble", "parameters": []}]
            }
          ],
          "subpackages": []
        }
      ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..config import ECORE_URI, OML_ECORE_URI
from ..errors import MetamodelLoadError
from .nodes import (
    BUILTIN_TYPES,
    GENMODEL_URI,
    UNBOUNDED,
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

logger = logging.getLogger(__name__)


def is_metamodel_document(path: Path | str) -> bool:
    """
    Whether a JSON file holds a metamodel document rather than, say, a config file.

    Files that cannot be decoded count as metamodels so that loading them
    reports the error.
    """
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError):
        return True
    return isinstance(document, dict) and "packages" in document


class JsonMetamodelLoader:
    """Parses JSON metamodel documents into metamodel nodes."""

    CLASSIFIER_KINDS = {"class", "enum", "datatype"}

    def __init__(self):
        self._by_qualified_name: dict[str, Classifier] = {}
        self._by_name: dict[str, list[Classifier]] = {}
        # (classifier, raw dict) pairs awaiting member resolution
        self._pending: list[tuple[ClassType, dict[str, Any]]] = []

    def load(self, path: Path | str) -> MetamodelResource:
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise MetamodelLoadError(f"Cannot read metamodel {path}: {e}") from e
        resource = self.parse(document, default_name=path.stem)
        resource.source_path = str(path)
        return resource

    def parse(self, document: dict[str, Any], default_name: str = "") -> MetamodelResource:
        """
        Parse a JSON metamodel document.

        Args:
            document: The decoded JSON document
            default_name: Resource name used when the document has none

        Returns:
            MetamodelResource with fully resolved types
        """
        if not isinstance(document, dict) or "packages" not in document:
            raise MetamodelLoadError("Metamodel document must be an object with a 'packages' list")

        self._by_qualified_name = {}
        self._by_name = {}
        self._pending = []

        resource = MetamodelResource(name=document.get("name", default_name))
        for raw_package in document["packages"]:
            resource.packages.append(self._parse_package(raw_package))

        for c, raw in self._pending:
            self._resolve_class(c, raw)

        logger.debug("Loaded %d classifiers from %s", len(self._by_qualified_name), resource.name)
        return resource

    def _parse_package(self, raw: dict[str, Any]) -> Package:
        package = Package(
            name=raw.get("name", ""),
            ns_uri=raw.get("nsURI", ""),
            annotations=self._parse_annotations(raw),
        )
        for raw_classifier in raw.get("classifiers", []):
            classifier = self._parse_classifier(raw_classifier, package)
            package.classifiers.append(classifier)
            self._index(classifier)
        for raw_sub in raw.get("subpackages", []):
            package.subpackages.append(self._parse_package(raw_sub))
        return package

    def _index(self, classifier: Classifier) -> None:
        self._by_qualified_name[classifier.qualified_name] = classifier
        self._by_name.setdefault(classifier.name, []).append(classifier)

    def _parse_classifier(self, raw: dict[str, Any], package: Package) -> Classifier:
        kind = raw.get("kind")
        if kind not in self.CLASSIFIER_KINDS:
            raise MetamodelLoadError(f"Classifier {raw.get('name')!r} in package {package.name!r} has unknown kind {kind!r}")

        name = raw.get("name")
        if not name:
            raise MetamodelLoadError(f"Classifier without a name in package {package.name!r}")

        annotations = self._parse_annotations(raw)
        type_parameters = list(raw.get("typeParameters", []))

        match kind:
            case "datatype":
                instance_class_name = raw.get("instanceClassName")
                representation = raw.get("representation") or representation_of(instance_class_name)
                return ScalarType(
                    name=name,
                    package=package,
                    annotations=annotations,
                    type_parameters=type_parameters,
                    representation=representation,
                    instance_class_name=instance_class_name,
                )
            case "enum":
                enum = EnumType(name=name, package=package, annotations=annotations, type_parameters=type_parameters)
                for raw_literal in raw.get("literals", []):
                    enum.literals.append(self._parse_literal(raw_literal, enum))
                return enum
            case "class":
                c = ClassType(
                    name=name,
                    package=package,
                    annotations=annotations,
                    type_parameters=type_parameters,
                    abstract=bool(raw.get("abstract", False)),
                    interface=bool(raw.get("interface", False)),
                )
                self._pending.append((c, raw))
                return c

    def _parse_literal(self, raw: str | dict[str, Any], enum: EnumType) -> EnumLiteral:
        if isinstance(raw, str):
            return EnumLiteral(name=raw, value=raw, enum=enum)
        name = raw["name"]
        return EnumLiteral(
            name=name,
            value=str(raw.get("value", raw.get("literal", name))),
            enum=enum,
            annotations=self._parse_annotations(raw),
        )

    def _parse_annotations(self, raw: dict[str, Any]) -> list[Annotation]:
        annotations = [Annotation(source=a.get("source", ""), details=dict(a.get("details", {}))) for a in raw.get("annotations", [])]

        # Shortcuts for the annotations the generator reads
        if raw.get("identifier"):
            annotations.append(Annotation(source=OML_ECORE_URI, details={"identifier": "true"}))
        if raw.get("getterOf"):
            annotations.append(Annotation(source=ECORE_URI, details={"getterOf": raw["getterOf"]}))
        if raw.get("documentation"):
            annotations.append(Annotation(source=GENMODEL_URI, details={"documentation": raw["documentation"]}))
        return annotations

    def _resolve_class(self, c: ClassType, raw: dict[str, Any]) -> None:
        for sup_name in raw.get("supertypes", []):
            sup = self._lookup(sup_name, c.package)
            if not isinstance(sup, ClassType):
                raise MetamodelLoadError(f"Supertype {sup_name!r} of {c.name} is not a class")
            c.supertypes.append(sup)

        for raw_attribute in raw.get("attributes", []):
            attribute = Attribute(containing_class=c)
            self._parse_typed_element(attribute, raw_attribute, c.package)
            c.attributes.append(attribute)

        for raw_reference in raw.get("references", []):
            reference = Reference(containing_class=c, containment=bool(raw_reference.get("containment", False)))
            self._parse_typed_element(reference, raw_reference, c.package)
            if not isinstance(reference.type, ClassType):
                raise MetamodelLoadError(f"Reference {reference.label} must target a class, not {raw_reference.get('type')!r}")
            c.references.append(reference)

        for raw_operation in raw.get("operations", []):
            operation = Operation(containing_class=c, type_parameters=list(raw_operation.get("typeParameters", [])))
            self._parse_typed_element(operation, raw_operation, c.package, allow_void=True)
            for raw_parameter in raw_operation.get("parameters", []):
                parameter = Parameter()
                self._parse_typed_element(parameter, raw_parameter, c.package)
                operation.parameters.append(parameter)
            c.operations.append(operation)

    def _parse_typed_element(self, element: TypedElement, raw: dict[str, Any], package: Package | None, allow_void: bool = False) -> None:
        element.name = raw.get("name", "")
        if not element.name:
            raise MetamodelLoadError(f"Unnamed typed element in package {package.name if package else '?'}")
        element.multiplicity = self._parse_multiplicity(raw)
        element.annotations = self._parse_annotations(raw)
        if raw.get("type") is None:
            if allow_void:
                return
            raise MetamodelLoadError(f"Typed element {element.name!r} has no type")
        element.type = self._lookup(raw["type"], package)

    def _parse_multiplicity(self, raw: dict[str, Any]) -> Multiplicity:
        upper = raw.get("upper", 1)
        if upper == "*" or raw.get("many"):
            upper = UNBOUNDED
        return Multiplicity(
            lower=int(raw.get("lower", 0)),
            upper=int(upper),
            unique=bool(raw.get("unique", True)),
        )

    def _lookup(self, type_name: str, package: Package | None) -> Classifier:
        """Resolve a type name: qualified, then same package, then unique global, then built-in."""
        if "::" in type_name:
            found = self._by_qualified_name.get(type_name)
            if found is None:
                raise MetamodelLoadError(f"Unknown type {type_name!r}")
            return found

        candidates = self._by_name.get(type_name, [])
        local = [c for c in candidates if c.package is package]
        if local:
            return local[0]
        if len(candidates) == 1:
            return candidates[0]
        if len(candidates) > 1:
            packages = ", ".join(c.package.name for c in candidates if c.package)
            raise MetamodelLoadError(f"Ambiguous type {type_name!r} (declared in {packages}); use 'package::{type_name}'")

        builtin = BUILTIN_TYPES.get(type_name)
        if builtin is not None:
            return builtin
        raise MetamodelLoadError(f"Unknown type {type_name!r}")
