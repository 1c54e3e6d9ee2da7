"""
Configuration for the schema generator pipeline.

A config file is a JSON object whose keys are the attribute names below;
unknown keys are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

ECORE_URI = "https://www.eclipse.org/emf/2002/Ecore"
OML_ECORE_URI = "https://opencaesar.io/oml/Ecore"


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


class NameCollisionPolicy(str, Enum):
    """What to do when classifiers of different packages share a name."""

    ERROR = "error"  # Abort the resource
    QUALIFY = "qualify"  # Rename colliding classifiers to <package>_<Name>


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to parse the SDL before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class GeneratorConfig:
    """Configuration options for schema generation."""

    # Annotation marking an attribute as the identifier of its class
    identifier_annotation_source: str = OML_ECORE_URI
    identifier_annotation_key: str = "identifier"

    # Annotation renaming an operation to the feature it is a getter of
    getter_annotation_source: str = ECORE_URI
    getter_annotation_key: str = "getterOf"

    # Name of the shared pagination metadata type
    page_info_type_name: str = "PageInfo"

    # Emit descriptions on fields, arguments and synthesized types
    include_descriptions: bool = True

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Emit the explicit `schema { query: ... mutation: ... }` block
    include_schema_definition: bool = True

    name_collision_policy: NameCollisionPolicy = NameCollisionPolicy.ERROR

    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if k == "name_collision_policy":
                v = NameCollisionPolicy(v)
            elif k == "output":
                v = OutputConfig(
                    mode=OutputMode(v.get("mode", OutputMode.ERROR_IF_EXISTS.value)),
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "identifier_annotation_source": self.identifier_annotation_source,
            "identifier_annotation_key": self.identifier_annotation_key,
            "getter_annotation_source": self.getter_annotation_source,
            "getter_annotation_key": self.getter_annotation_key,
            "page_info_type_name": self.page_info_type_name,
            "include_descriptions": self.include_descriptions,
            "add_generation_comment": self.add_generation_comment,
            "include_schema_definition": self.include_schema_definition,
            "name_collision_policy": self.name_collision_policy.value,
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
