import json
import logging
import shutil

import pytest

from ecore_to_graphql import __version__
from ecore_to_graphql.pipeline import GeneratorConfig, PipelineGenerator, convert_path
from ecore_to_graphql.pipeline.errors import NameCollisionError
from ecore_to_graphql.pipeline.generator import collect_input_files, output_path_for


@pytest.fixture
def model_tree(tmp_path, test_data_dir):
    """A folder of metamodels with a nested directory and files that are not metamodels."""
    root = tmp_path / "model"
    (root / "nested").mkdir(parents=True)
    shutil.copy(test_data_dir / "metamodels" / "shapes.json", root / "shapes.json")
    shutil.copy(test_data_dir / "ecore" / "library.ecore", root / "nested" / "library.ecore")
    (root / "notes.txt").write_text("not a metamodel")
    (root / "config.json").write_text(json.dumps({"include_descriptions": False}))
    return root


def test_from_file(test_data_dir):
    text = PipelineGenerator.from_file(test_data_dir / "ecore" / "library.ecore").generate()
    assert text.startswith(f"# Generated by ecore_to_graphql {__version__} from library.ecore\n")
    assert "type Library {" in text


def test_command_line_in_comment(shapes):
    text = PipelineGenerator(shapes, command_line="ecore_to_graphql shapes.json out.graphqls").generate()
    assert "# Command: ecore_to_graphql shapes.json out.graphqls\n" in text


def test_unknown_backend(shapes):
    with pytest.raises(ValueError, match="Unknown backend 'xml'"):
        PipelineGenerator(shapes, backend="xml")


def test_graphql_backend(folders):
    text = PipelineGenerator(folders, GeneratorConfig(include_descriptions=False), backend="graphql").generate()
    assert "type ItemPaginatedCollection {" in text


def test_collect_input_files(model_tree):
    assert [p.relative_to(model_tree).as_posix() for p in collect_input_files(model_tree)] == ["nested/library.ecore", "shapes.json"]


def test_output_path_for(tmp_path):
    assert output_path_for(tmp_path / "in" / "a" / "m.ecore", tmp_path / "in", tmp_path / "out") == tmp_path / "out" / "a" / "m.graphqls"


def test_convert_folder(model_tree, tmp_path):
    out = tmp_path / "out"
    written, failed = convert_path(model_tree, out)

    assert failed == []
    assert sorted(p.relative_to(out).as_posix() for p in written) == ["nested/library.graphqls", "shapes.graphqls"]
    assert "interface Shape {" in (out / "shapes.graphqls").read_text()


def test_convert_single_file_into_folder(model_tree, tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    written, _ = convert_path(model_tree / "shapes.json", out)
    assert written == [out / "shapes.graphqls"]


def test_existing_output_needs_force(model_tree, tmp_path, caplog):
    target = tmp_path / "shapes.graphqls"
    target.write_text("old")

    with caplog.at_level(logging.ERROR):
        written, failed = convert_path(model_tree / "shapes.json", target)
    assert written == []
    assert failed == [model_tree / "shapes.json"]
    assert "already exists" in caplog.text
    assert target.read_text() == "old"

    written, failed = convert_path(model_tree / "shapes.json", target, force=True)
    assert written == [target]
    assert "type Query {" in target.read_text()


def test_force_does_not_modify_the_given_config(model_tree, tmp_path):
    config = GeneratorConfig()
    convert_path(model_tree / "shapes.json", tmp_path / "s.graphqls", config, force=True)
    assert config.output.mode.value == "error"


def test_failed_resource_does_not_stop_the_others(model_tree, tmp_path):
    (model_tree / "broken.json").write_text("{")
    written, failed = convert_path(model_tree, tmp_path / "out")

    assert [p.name for p in failed] == ["broken.json"]
    assert len(written) == 2


def test_name_collision_propagates(tmp_path):
    from ecore_to_graphql.pipeline.metamodel import JsonMetamodelLoader

    resource = JsonMetamodelLoader().parse(
        {
            "packages": [
                {"name": "a", "classifiers": [{"kind": "class", "name": "Node"}]},
                {"name": "b", "classifiers": [{"kind": "class", "name": "Node"}]},
            ]
        }
    )
    with pytest.raises(NameCollisionError):
        PipelineGenerator(resource).generate()


def test_non_atomic_write(model_tree, tmp_path):
    config = GeneratorConfig.from_dict({"output": {"atomic_write": False}})
    written, failed = convert_path(model_tree / "shapes.json", tmp_path / "direct" / "shapes.graphqls", config)
    assert failed == []
    assert written[0].exists()


def test_schema_without_query_is_not_written(tmp_path, caplog):
    source = tmp_path / "tree.json"
    source.write_text(
        json.dumps(
            {
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
        )
    )
    target = tmp_path / "tree.graphqls"

    with caplog.at_level(logging.ERROR):
        written, failed = convert_path(source, target)

    assert written == []
    assert failed == [source]
    assert "Query root type must be provided" in caplog.text
    assert not target.exists()


def test_existing_output_is_kept_without_atomic_write(model_tree, tmp_path):
    target = tmp_path / "shapes.graphqls"
    target.write_text("old")
    config = GeneratorConfig.from_dict({"output": {"atomic_write": False}})

    written, failed = convert_path(model_tree / "shapes.json", target, config)
    assert failed == [model_tree / "shapes.json"]
    assert target.read_text() == "old"
