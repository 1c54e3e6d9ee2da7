"""
Pipeline generator and directory driver.

PipelineGenerator runs the phases on one metamodel resource; convert_path
applies it to a single file or to every metamodel found under a folder.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from .analyzer import SchemaAnalyzer
from .backends import BACKENDS, SchemaBackend
from .config import GeneratorConfig, OutputMode
from .errors import EcoreToGraphQLError
from .metamodel import METAMODEL_SUFFIXES, MetamodelResource, is_metamodel_document, load_metamodel
from .output import AtomicWriter, ensure_absent, validate_sdl

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Generates a GraphQL schema from one metamodel resource.

    Phases:
    1. Loader: metamodel file to metamodel nodes (see `from_file`)
    2. Analyzer: metamodel nodes to schema IR
    3. Backend: schema IR to GraphQL schema text
    """

    def __init__(
        self,
        resource: MetamodelResource,
        config: GeneratorConfig | None = None,
        backend: str = "sdl",
        command_line: str | None = None,
    ):
        """
        Initialize the generator.

        Args:
            resource: The loaded metamodel
            config: Generation configuration
            backend: Name of the backend ("sdl" or "graphql")
            command_line: Command line recorded in the generation comment
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend {backend!r}, expected one of {', '.join(BACKENDS)}")
        self.resource = resource
        self.config = config or GeneratorConfig()
        self.backend_name = backend
        self.command_line = command_line

    @classmethod
    def from_file(cls, path: Path | str, config: GeneratorConfig | None = None, backend: str = "sdl", command_line: str | None = None) -> PipelineGenerator:
        """Create a generator for the metamodel stored at ``path``."""
        return cls(load_metamodel(path), config, backend, command_line)

    def generate(self) -> str:
        """
        Generate the schema text.

        Returns:
            GraphQL schema as a string

        Raises:
            EcoreToGraphQLError: The resource cannot be transformed
        """
        ir = SchemaAnalyzer(self.config).analyze(self.resource)
        ir.generation_comment = self._generation_comment()
        return self._create_backend().generate(ir)

    def _create_backend(self) -> SchemaBackend:
        return BACKENDS[self.backend_name](self.config)

    def _generation_comment(self) -> str:
        from .. import __version__

        source = Path(self.resource.source_path).name if self.resource.source_path else self.resource.name
        lines = [f"Generated by ecore_to_graphql {__version__} from {source}"]
        if self.command_line:
            lines.append(f"Command: {self.command_line}")
        return "\n".join(lines)


def collect_input_files(folder: Path | str) -> list[Path]:
    """Metamodel files under ``folder``, recursively, in a stable order.

    JSON files that are not metamodel documents (e.g. a config file kept next
    to the models) are left out.
    """
    folder = Path(folder)
    files = []
    for p in sorted(folder.rglob("*")):
        if not p.is_file() or p.suffix not in METAMODEL_SUFFIXES:
            continue
        if p.suffix == ".json" and not is_metamodel_document(p):
            logger.debug("Skipping %s: not a metamodel document", p)
            continue
        files.append(p)
    return files


def output_path_for(input_file: Path, input_root: Path, output_root: Path) -> Path:
    """Mirror ``input_file``'s path relative to ``input_root`` under ``output_root``."""
    relative = input_file.relative_to(input_root)
    return (output_root / relative).with_suffix(f".{SchemaBackend.FILE_EXTENSION}")


def write_schema(path: Path, content: str, config: GeneratorConfig) -> None:
    """Write a generated schema according to the output configuration."""
    output = config.output
    must_be_new = output.mode == OutputMode.ERROR_IF_EXISTS

    if output.atomic_write:
        writer = AtomicWriter()
        if must_be_new:
            writer.write_if_not_exists(path, content, validate=output.validate_before_write)
        else:
            writer.write(path, content, validate=output.validate_before_write)
        return

    if must_be_new:
        ensure_absent(path)
    if output.validate_before_write:
        validate_sdl(content)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def convert_path(
    input_path: Path | str,
    output_path: Path | str,
    config: GeneratorConfig | None = None,
    backend: str = "sdl",
    force: bool = False,
    command_line: str | None = None,
) -> tuple[list[Path], list[Path]]:
    """
    Convert one metamodel file, or every metamodel under a folder.

    A resource that fails is logged and skipped; the others are still written.

    Args:
        input_path: Metamodel file or folder
        output_path: Schema file (file input) or folder (folder input)
        config: Generation configuration
        backend: Name of the backend
        force: Overwrite existing outputs
        command_line: Command line recorded in the generation comments

    Returns:
        (written schema paths, metamodel paths that failed)
    """
    config = config or GeneratorConfig()
    if force:
        config = replace(config, output=replace(config.output, mode=OutputMode.FORCE))

    input_path = Path(input_path)
    output_path = Path(output_path)

    if input_path.is_dir():
        jobs = [(f, output_path_for(f, input_path, output_path)) for f in collect_input_files(input_path)]
        if not jobs:
            logger.warning("No metamodel found in %s", input_path)
    else:
        if output_path.is_dir():
            output_path = output_path / f"{input_path.stem}.{SchemaBackend.FILE_EXTENSION}"
        jobs = [(input_path, output_path)]

    written: list[Path] = []
    failed: list[Path] = []
    for source, target in jobs:
        logger.info("Reading: %s", source)
        try:
            content = PipelineGenerator.from_file(source, config, backend, command_line).generate()
            write_schema(target, content, config)
        except EcoreToGraphQLError as e:
            logger.error("%s: %s", source, e)
            failed.append(source)
            continue
        logger.info("Saved: %s", target)
        written.append(target)

    return written, failed
