import pytest

from ecore_to_graphql.pipeline.errors import OutputError
from ecore_to_graphql.pipeline.output import AtomicWriter, validate_sdl

VALID = "type Query {\n  hello: String\n}\n"


class TestAtomicWriter:
    def test_write_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "schema.graphqls"
        AtomicWriter().write(path, VALID)
        assert path.read_text() == VALID

    def test_invalid_content_leaves_target_untouched(self, tmp_path):
        path = tmp_path / "schema.graphqls"
        path.write_text(VALID)

        with pytest.raises(OutputError, match="not valid GraphQL"):
            AtomicWriter().write(path, "type Query {")

        assert path.read_text() == VALID
        assert [p.name for p in tmp_path.iterdir()] == ["schema.graphqls"]

    def test_validation_can_be_skipped(self, tmp_path):
        path = tmp_path / "schema.graphqls"
        AtomicWriter().write(path, "not graphql", validate=False)
        assert path.read_text() == "not graphql"

    def test_custom_validator(self, tmp_path):
        seen = []
        AtomicWriter(validate=seen.append).write(tmp_path / "s.graphqls", VALID)
        assert seen == [VALID]

    def test_write_if_not_exists(self, tmp_path):
        path = tmp_path / "schema.graphqls"
        writer = AtomicWriter()
        writer.write_if_not_exists(path, VALID)

        with pytest.raises(OutputError, match="already exists"):
            writer.write_if_not_exists(path, VALID)


def test_validate_sdl():
    validate_sdl(VALID)
    with pytest.raises(OutputError):
        validate_sdl("interface {")


@pytest.mark.parametrize(
    "content,message",
    [
        ("type Node {\n  id: String\n}\n", "Query root type must be provided"),
        ("type Query {\n  node: Node\n}\n", "Unknown type:? 'Node'"),
        ("type Query {\n  mode: Mode\n}\n\nenum Mode {\n  FAST\n  FAST\n}\n", "can only be defined once"),
    ],
)
def test_validate_sdl_builds_the_schema(content, message):
    with pytest.raises(OutputError, match=message):
        validate_sdl(content)
