import pytest
from graphql import build_schema, graphql_sync

from ecore_to_graphql.pipeline.analyzer import SchemaAnalyzer
from ecore_to_graphql.pipeline.analyzer.ir_nodes import (
    STRING,
    ArgumentDef,
    FieldDef,
    ObjectTypeDef,
    ScalarDef,
    SchemaIR,
    TypeRef,
)
from ecore_to_graphql.pipeline.analyzer.ir_nodes import Coercion
from ecore_to_graphql.pipeline.backends import BACKENDS, GraphQLCoreBackend, SdlBackend
from ecore_to_graphql.pipeline.backends.sdl_backend import format_description, format_value
from ecore_to_graphql.pipeline.config import GeneratorConfig
from ecore_to_graphql.pipeline.errors import SchemaBuildError
from ecore_to_graphql.pipeline.metamodel import JsonMetamodelLoader


def ir_of(resource, **config):
    return SchemaAnalyzer(GeneratorConfig(**config)).analyze(resource)


def test_backend_registry():
    assert BACKENDS == {"sdl": SdlBackend, "graphql": GraphQLCoreBackend}


class TestSdlHelpers:
    def test_single_line_description(self):
        assert format_description('Say "hi"') == '"Say \\"hi\\""'

    def test_block_description(self):
        assert format_description("first\nsecond", indent=2) == '"""\n  first\n  second\n  """'

    @pytest.mark.parametrize("value, expected", [(None, "null"), (False, "false"), (True, "true"), (-1, "-1"), (1.5, "1.5"), ("a", '"a"')])
    def test_format_value(self, value, expected):
        assert format_value(value) == expected


class TestSdlBackend:
    def test_print_order(self, folders):
        text = SdlBackend(GeneratorConfig()).generate(ir_of(folders, include_descriptions=False))
        positions = [
            text.index(marker)
            for marker in (
                "schema {",
                "type Folder",
                "interface Item",
                "type File",
                "type ItemPaginatedCollection",
                "type PageInfo",
                "enum AllSubtypesOfItem",
                "enum AllConcreteSubtypesOfItem",
                "type Query",
                "type Mutation",
            )
        ]
        assert positions == sorted(positions)

    def test_empty_types_have_no_braces(self):
        resource = JsonMetamodelLoader().parse(
            {"packages": [{"name": "p", "classifiers": [{"kind": "class", "name": "Marker"}, {"kind": "enum", "name": "Nothing"}]}]}
        )
        text = SdlBackend(GeneratorConfig(add_generation_comment=False)).generate(ir_of(resource))
        assert "type Marker\n" in text
        assert "enum Nothing\n" in text
        build_schema(text)

    def test_multiline_documentation(self):
        resource = JsonMetamodelLoader().parse(
            {"packages": [{"name": "p", "classifiers": [{"kind": "class", "name": "Doc", "documentation": "Line one.\nLine two."}]}]}
        )
        text = SdlBackend(GeneratorConfig()).generate(ir_of(resource))
        assert '"""\nLine one.\nLine two.\n"""\ntype Doc' in text
        assert build_schema(text).get_type("Doc").description == "Line one.\nLine two."

    def test_dangling_references_are_printed(self):
        resource = JsonMetamodelLoader().parse(
            {
                "packages": [
                    {
                        "name": "p",
                        "classifiers": [
                            {"kind": "datatype", "name": "Date", "instanceClassName": "java.util.Date"},
                            {"kind": "class", "name": "Event", "attributes": [{"name": "at", "type": "Date"}]},
                        ],
                    }
                ]
            }
        )
        text = SdlBackend(GeneratorConfig(include_descriptions=False)).generate(ir_of(resource))
        assert "  at: Date!" in text
        assert "scalar Date" not in text


class TestGraphQLCoreBackend:
    def test_equivalent_to_sdl(self, library):
        ir = ir_of(library)
        from_sdl = build_schema(SdlBackend(GeneratorConfig()).generate(ir))
        from_core = GraphQLCoreBackend(GeneratorConfig()).build_schema(ir)

        assert set(from_sdl.type_map) == set(from_core.type_map)
        for name in ("Library", "Book", "Query", "Mutation", "BookPaginatedCollection"):
            assert list(from_sdl.get_type(name).fields) == list(from_core.get_type(name).fields)

    def test_output_is_valid_sdl(self, folders):
        text = GraphQLCoreBackend(GeneratorConfig(include_descriptions=False)).generate(ir_of(folders))
        assert not text.startswith("#")
        assert "itemsOfFolderById(id: String, item: AllConcreteSubtypesOfItem): String" in text
        build_schema(text)

    def test_enum_values_carry_literals(self, library):
        schema = GraphQLCoreBackend(GeneratorConfig()).build_schema(ir_of(library))
        genre = schema.get_type("Genre")
        assert genre.values["SCIENCEFICTION"].value == "SciFi"

    def test_scalar_coercion(self):
        ir = SchemaIR(
            scalars=[ScalarDef(name="Count", coercion=Coercion.INT)],
            query=ObjectTypeDef(name="Query", fields=[FieldDef(name="count", type_ref=TypeRef.named("Count"))]),
        )
        schema = GraphQLCoreBackend(GeneratorConfig()).build_schema(ir)
        result = graphql_sync(schema, "{ count }", root_value={"count": "42"})
        assert result.errors is None
        assert result.data == {"count": 42}

    def test_unknown_type_is_an_error(self):
        resource = JsonMetamodelLoader().parse(
            {
                "packages": [
                    {
                        "name": "p",
                        "classifiers": [
                            {"kind": "datatype", "name": "Date", "instanceClassName": "java.util.Date"},
                            {"kind": "class", "name": "Event", "attributes": [{"name": "at", "type": "Date"}]},
                        ],
                    }
                ]
            }
        )
        with pytest.raises(SchemaBuildError, match="Event.at: unknown type Date"):
            GraphQLCoreBackend(GeneratorConfig()).build_schema(ir_of(resource))

    def test_object_argument_is_an_error(self):
        ir = SchemaIR(
            objects=[ObjectTypeDef(name="Node", fields=[FieldDef(name="id", type_ref=STRING)])],
            query=ObjectTypeDef(
                name="Query",
                fields=[
                    FieldDef(
                        name="find",
                        type_ref=TypeRef.named("Node"),
                        arguments=[ArgumentDef(name="like", type_ref=TypeRef.non_null(TypeRef.named("Node")))],
                    )
                ],
            ),
        )
        with pytest.raises(SchemaBuildError, match=r"Query.find\(like\): Node is not an input type"):
            GraphQLCoreBackend(GeneratorConfig()).build_schema(ir)
