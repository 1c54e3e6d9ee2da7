"""
Naming utilities for derived schema names.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")


def pluralize(name: str) -> str:
    """Pluralize a class name for a root query field.

    Examples:
        "Box" -> "Boxes"
        "Class" -> "Classes"
        "Category" -> "Categories"
        "Node" -> "Nodes"
    """
    if name.endswith("x") or name.endswith("ss"):
        return name + "es"
    if name.endswith("y"):
        return name[:-1] + "ies"
    return name + "s"


def capitalize_first(text: str) -> str:
    """Upper-case the first character only ("id" -> "Id", "uuidKey" -> "UuidKey")."""
    return text[:1].upper() + text[1:]


def decapitalize_first(text: str) -> str:
    """Lower-case the first character only ("Item" -> "item")."""
    return text[:1].lower() + text[1:]


def sorted_case_insensitive(items: Iterable[T], key: Callable[[T], str] | None = None) -> list[T]:
    """Sort by name ignoring case; ties keep a stable case-sensitive order."""
    name_of = key or (lambda x: x)
    return sorted(items, key=lambda x: (name_of(x).lower(), name_of(x)))
