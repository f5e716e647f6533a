"""
Rendering Context

Responsibilities:
- Captures template output into nested, exception-safe capture regions
- Stores named sections and merges them (rewrite, append, prepend)
- Runs template bodies and delegates composition to layouts

Owns: Output capture stack, section store, render pipeline
Never: Locates template sources or decides which functions exist
"""

from vellum.contexts.rendering.capture import OutputCapture, output_capture
from vellum.contexts.rendering.sections import CONTENT_SECTION, SectionMode, SectionStore
from vellum.contexts.rendering.template import Body, Template

__all__ = [
    # Output capture
    "OutputCapture",
    "output_capture",
    # Sections
    "CONTENT_SECTION",
    "SectionMode",
    "SectionStore",
    # Render pipeline
    "Body",
    "Template",
]
