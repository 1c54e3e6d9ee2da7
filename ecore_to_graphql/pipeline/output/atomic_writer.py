"""
Atomic file writer for generated schemas.

Ensures that file writes are atomic, so an interrupted run never leaves a
truncated schema behind.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

from graphql import GraphQLError, build_schema, validate_schema

from ..errors import OutputError

logger = logging.getLogger(__name__)


def validate_sdl(content: str) -> None:
    """
    Check that content builds a valid GraphQL schema.

    The document is built with graphql-core and must then pass its schema
    validation, which among other rules requires a Query root type.

    Raises:
        OutputError: If the content is not a valid schema
    """
    try:
        schema = build_schema(content)
    except GraphQLError as e:
        raise OutputError(f"Generated schema is not valid GraphQL: {e.message}") from e
    except TypeError as e:
        raise OutputError(f"Generated schema is not valid GraphQL: {e}") from e

    errors = validate_schema(schema)
    if errors:
        raise OutputError("Generated schema is not valid GraphQL: " + " ".join(e.message for e in errors))


def ensure_absent(path: Path) -> None:
    """Raise OutputError if ``path`` already exists."""
    if Path(path).exists():
        raise OutputError(f"Output file already exists: {path}. Use --force to overwrite.")


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(self, validate: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate: Optional validation function, defaults to validate_sdl
        """
        self._validate = validate or validate_sdl

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            OutputError: If validation fails
            OSError: If file operations fail
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory: the final rename stays on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate(content)

            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        logger.debug("Wrote %s", path)

    def write_if_not_exists(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content only if the file doesn't exist.

        Raises:
            OutputError: If the file already exists or validation fails
        """
        ensure_absent(path)
        self.write(path, content, validate)
