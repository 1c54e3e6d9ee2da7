from ecore_to_graphql.pipeline.config import GeneratorConfig, NameCollisionPolicy, OutputMode


def test_defaults():
    config = GeneratorConfig()
    assert config.identifier_annotation_source == "https://opencaesar.io/oml/Ecore"
    assert config.getter_annotation_source == "https://www.eclipse.org/emf/2002/Ecore"
    assert config.page_info_type_name == "PageInfo"
    assert config.name_collision_policy == NameCollisionPolicy.ERROR
    assert config.output.mode == OutputMode.ERROR_IF_EXISTS


def test_from_dict_converts_enums():
    config = GeneratorConfig.from_dict(
        {
            "name_collision_policy": "qualify",
            "page_info_type_name": "Pagination",
            "output": {"mode": "force", "atomic_write": False},
            "unknown_key": 1,
        }
    )
    assert config.name_collision_policy == NameCollisionPolicy.QUALIFY
    assert config.page_info_type_name == "Pagination"
    assert config.output.mode == OutputMode.FORCE
    assert config.output.atomic_write is False
    assert config.output.validate_before_write is True
    assert not hasattr(config, "unknown_key")


def test_round_trip():
    config = GeneratorConfig(include_descriptions=False, name_collision_policy=NameCollisionPolicy.QUALIFY)
    assert GeneratorConfig.from_dict(config.to_dict()) == config
