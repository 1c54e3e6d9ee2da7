"""
Base class for schema backends.

A backend turns the schema IR into GraphQL schema text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..analyzer.ir_nodes import SchemaIR
from ..config import GeneratorConfig


class SchemaBackend(ABC):
    """Abstract base class for schema backends."""

    # Name used on the command line
    NAME: str = ""

    # Extension of the generated files
    FILE_EXTENSION: str = "graphqls"

    def __init__(self, config: GeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Generation configuration
        """
        self.config = config

    @abstractmethod
    def generate(self, ir: SchemaIR) -> str:
        """
        Generate schema text from IR.

        Args:
            ir: The intermediate representation

        Returns:
            GraphQL SDL as a string
        """

    def _comment_lines(self, ir: SchemaIR) -> list[str]:
        if not self.config.add_generation_comment or not ir.generation_comment:
            return []
        return ir.generation_comment.splitlines()
