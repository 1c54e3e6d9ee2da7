import logging

import pytest

from ecore_to_graphql.pipeline.analyzer import SchemaAnalyzer, infer_root_classes, map_members, register_classifiers
from ecore_to_graphql.pipeline.analyzer.roots import build_query_type, candidate_root_classes
from ecore_to_graphql.pipeline.metamodel import JsonMetamodelLoader


def analyzed(resource):
    registry = register_classifiers(resource)
    return registry, map_members(resource, registry)


def names(classes):
    return [c.name for c in classes]


def test_roots_without_containment(shapes):
    registry, members = analyzed(shapes)
    assert names(infer_root_classes(registry.metaclasses, members.contained)) == ["Circle", "Shape", "Square"]


def test_contained_classes_are_not_roots(folders):
    registry, members = analyzed(folders)
    assert names(infer_root_classes(registry.metaclasses, members.contained)) == ["Folder"]


def test_abstract_candidate_needs_a_concrete_candidate():
    resource = JsonMetamodelLoader().parse(
        {
            "packages": [
                {
                    "name": "p",
                    "classifiers": [
                        {"kind": "class", "name": "Model", "references": [{"name": "parts", "type": "Part", "upper": "*", "containment": True}]},
                        {"kind": "class", "name": "Element", "abstract": True},
                        {"kind": "class", "name": "Part", "supertypes": ["Element"]},
                        {"kind": "class", "name": "Lonely", "abstract": True},
                    ],
                }
            ]
        }
    )
    registry, members = analyzed(resource)

    # Element is a supertype of a contained class, Lonely has no concrete specialization
    assert names(candidate_root_classes(registry.metaclasses, members.contained)) == ["Model", "Lonely"]
    assert names(infer_root_classes(registry.metaclasses, members.contained)) == ["Model"]


def test_subclass_of_contained_class_is_not_a_root():
    resource = JsonMetamodelLoader().parse(
        {
            "packages": [
                {
                    "name": "p",
                    "classifiers": [
                        {"kind": "class", "name": "Model", "references": [{"name": "parts", "type": "Part", "containment": True}]},
                        {"kind": "class", "name": "Part", "abstract": True},
                        {"kind": "class", "name": "Gear", "supertypes": ["Part"]},
                        {"kind": "class", "name": "Sprocket", "supertypes": ["Gear"]},
                    ],
                }
            ]
        }
    )
    registry, members = analyzed(resource)
    assert names(infer_root_classes(registry.metaclasses, members.contained)) == ["Model"]


@pytest.mark.parametrize("fixture", ["shapes", "folders", "library"])
def test_root_inference_is_idempotent(fixture, request):
    registry, members = analyzed(request.getfixturevalue(fixture))
    first = infer_root_classes(registry.metaclasses, members.contained)
    second = infer_root_classes(list(reversed(registry.metaclasses)), set(members.contained))
    assert first == second


def test_query_field_names(library):
    registry, members = analyzed(library)
    query = build_query_type(infer_root_classes(registry.metaclasses, members.contained), registry)
    assert [(f.name, str(f.type_ref)) for f in query.fields] == [("allLibraries", "[Library]")]


def test_no_roots_no_query():
    resource = JsonMetamodelLoader().parse({"packages": [{"name": "p", "classifiers": [{"kind": "class", "name": "Ghost", "abstract": True}]}]})
    registry, members = analyzed(resource)
    assert build_query_type(infer_root_classes(registry.metaclasses, members.contained), registry) is None


TREE = {
    "packages": [
        {
            "name": "tree",
            "classifiers": [
                {
                    "kind": "class",
                    "name": "Node",
                    "attributes": [{"name": "id", "type": "EString", "identifier": True}],
                    "references": [{"name": "children", "type": "Node", "upper": "*", "containment": True}],
                }
            ],
        }
    ]
}


def test_no_roots_no_mutation(caplog):
    resource = JsonMetamodelLoader().parse(TREE, default_name="tree")
    with caplog.at_level(logging.WARNING):
        ir = SchemaAnalyzer().analyze(resource)

    assert ir.query is None
    assert ir.mutation is None
    assert [t.name for t in ir.objects] == ["Node"]
    assert "No root class found in tree" in caplog.text
