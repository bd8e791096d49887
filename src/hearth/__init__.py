from __future__ import annotations

"""Hearth: resolve a target from a project manifest and run its build logic."""

__version__ = "0.1.0"
