from ecore_to_graphql.pipeline.analyzer import flatten_fields, map_members, register_classifiers
from ecore_to_graphql.pipeline.analyzer.inheritance import add_specific_fields
from ecore_to_graphql.pipeline.analyzer.ir_nodes import INT, STRING, FieldDef
from ecore_to_graphql.pipeline.metamodel import JsonMetamodelLoader

DIAMOND = {
    "packages": [
        {
            "name": "p",
            "classifiers": [
                {"kind": "class", "name": "Named", "abstract": True, "attributes": [{"name": "name", "type": "EString"}]},
                {"kind": "class", "name": "Tagged", "abstract": True, "supertypes": ["Named"], "attributes": [{"name": "tag", "type": "EString"}]},
                {"kind": "class", "name": "Dated", "abstract": True, "supertypes": ["Named"], "attributes": [{"name": "year", "type": "EInt"}]},
                {
                    "kind": "class",
                    "name": "Photo",
                    "supertypes": ["Tagged", "Dated"],
                    "attributes": [{"name": "name", "type": "EInt"}, {"name": "width", "type": "EInt"}],
                },
            ],
        }
    ]
}


def flattened_by_name():
    resource = JsonMetamodelLoader().parse(DIAMOND)
    registry = register_classifiers(resource)
    flattened = flatten_fields(registry, map_members(resource, registry))
    return {c.name: fields for c, fields in flattened.items()}


def test_add_specific_fields_keeps_present_names():
    fields = [FieldDef(name="a", type_ref=INT)]
    add_specific_fields(fields, (FieldDef(name="a", type_ref=STRING), FieldDef(name="b", type_ref=STRING)))
    assert [(f.name, str(f.type_ref)) for f in fields] == [("a", "Int"), ("b", "String")]


def test_union_of_own_and_inherited_fields():
    flattened = flattened_by_name()
    assert [f.name for f in flattened["Named"]] == ["name"]
    assert [f.name for f in flattened["Tagged"]] == ["tag", "name"]
    assert [f.name for f in flattened["Photo"]] == ["name", "width", "tag", "year"]


def test_own_field_wins_over_inherited():
    photo = flattened_by_name()["Photo"]
    assert str(photo[0].type_ref) == "Int!"


def test_diamond_contributes_once():
    names = [f.name for f in flattened_by_name()["Photo"]]
    assert len(names) == len(set(names))
