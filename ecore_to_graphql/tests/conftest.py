from pathlib import Path

import pytest

from ecore_to_graphql.pipeline.metamodel import load_metamodel

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def test_data_dir() -> Path:
    return TEST_DATA


@pytest.fixture
def shapes():
    """Abstract Shape with concrete Circle and Square, no containment."""
    return load_metamodel(TEST_DATA / "metamodels" / "shapes.json")


@pytest.fixture
def folders():
    """Folder containing many abstract Items (File, Link)."""
    return load_metamodel(TEST_DATA / "metamodels" / "folders.json")


@pytest.fixture
def library():
    return load_metamodel(TEST_DATA / "ecore" / "library.ecore")
