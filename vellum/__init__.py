"""
VELLUM - Views Encapsulated by Layouts, Layered Under Merged sections

A native template engine: template bodies are callables (or Jinja2 files) that
write into captured output, declare named sections, and delegate final
composition to parent layouts.

Architecture:
- Templating Context: identifiers, folders, registered functions, shared data, Engine
- Rendering Context: output capture, section store, render pipeline
"""

from loguru import logger

# Templating first: the engine pulls in the rendering context
from vellum.contexts.templating import Engine
from vellum.contexts.rendering import SectionMode, Template, output_capture

__version__ = "0.1.0"

# Library stays silent until setup_logger() enables it
logger.disable("vellum")

__all__ = ["Engine", "SectionMode", "Template", "output_capture"]
