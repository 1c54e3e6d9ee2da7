"""
SDL backend.

Renders the schema IR with the Jinja2 templates in templates/graphql. The
printer works on names only, so dangling references (to classifiers that were
skipped) are printed as they are.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2

from ..analyzer.ir_nodes import ArgumentDef, EnumDef, FieldDef, ObjectTypeDef, ScalarDef, SchemaIR
from .base import SchemaBackend


def format_description(text: str, indent: int = 0) -> str:
    """Format a description as a GraphQL string or block string."""
    if "\n" not in text:
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    pad = " " * indent
    body = "\n".join(pad + line if line else "" for line in text.replace('"""', '\\"""').splitlines())
    return f'"""\n{body}\n{pad}"""'


def format_value(value: Any) -> str:
    """Format a default value as a GraphQL literal."""
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case int() | float():
            return str(value)
        case _:
            return json.dumps(str(value))


class SdlBackend(SchemaBackend):
    """GraphQL SDL backend based on Jinja2 templates."""

    NAME = "sdl"
    TEMPLATE_DIR = "graphql"

    def __init__(self, config):
        super().__init__(config)
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_DIR
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.jinja_env.filters["description"] = format_description

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.type_template = self.jinja_env.get_template(f"type.{self.FILE_EXTENSION}.jinja2")

    def generate(self, ir: SchemaIR) -> str:
        include_schema = self.config.include_schema_definition and ir.query is not None
        prefix = self.prefix_template.render(
            generation_comment="\n".join(self._comment_lines(ir)),
            query=ir.query.name if include_schema else None,
            mutation=ir.mutation.name if include_schema and ir.mutation else None,
        )
        blocks = [self.type_template.render(self._type_context(t)) for t in ir.all_types()]
        return prefix + "\n".join(blocks)

    def _type_context(self, type_def: ScalarDef | EnumDef | ObjectTypeDef) -> dict[str, Any]:
        """
        Prepare the template context for a type.

        Args:
            type_def: Any named type of the IR

        Returns:
            Dictionary of template variables
        """
        context: dict[str, Any] = {
            "NAME": type_def.name,
            "DESCRIPTION": type_def.description,
        }
        match type_def:
            case ScalarDef():
                context["KIND"] = "scalar"
            case EnumDef():
                context["KIND"] = "enum"
                context["VALUES"] = [v.name for v in type_def.values]
            case ObjectTypeDef():
                context["KIND"] = "interface" if type_def.is_interface else "type"
                context["IMPLEMENTS"] = type_def.interfaces
                context["FIELDS"] = [self._field_context(f) for f in type_def.fields]
        return context

    def _field_context(self, field: FieldDef) -> dict[str, Any]:
        return {
            "name": field.name,
            "type": str(field.type_ref),
            "description": field.description,
            "arguments": [self._argument_context(a) for a in field.arguments],
        }

    def _argument_context(self, arg: ArgumentDef) -> dict[str, Any]:
        declaration = f"{arg.name}: {arg.type_ref}"
        if arg.has_default:
            declaration += f" = {format_value(arg.default_value)}"
        return {"declaration": declaration, "description": arg.description}
