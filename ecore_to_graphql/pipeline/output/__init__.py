"""
Output module.

Contains the atomic writer used to save generated schemas.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, ensure_absent, validate_sdl

__all__ = ["AtomicWriter", "ensure_absent", "validate_sdl"]
