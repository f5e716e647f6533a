"""
Shared utilities for VELLUM.

Common functionality used across contexts:
- HTML escaping
- Logger setup
"""

from vellum.utils.escaping import ESCAPE_SETTINGS, EscapeSettings, escape_html

__all__ = ["ESCAPE_SETTINGS", "EscapeSettings", "escape_html"]
