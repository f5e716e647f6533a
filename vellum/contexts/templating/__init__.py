"""
Templating Context

Responsibilities:
- Parses template identifiers and resolves them to files (default directory and folders)
- Registers in-memory template bodies and compiles Jinja2 template files
- Holds registered template functions and shared template data
- Loads engine configuration

Owns: Engine, template name resolution, function registry, shared data, configuration
Never: Captures output or manages sections
"""

from vellum.contexts.templating.engine import Engine
from vellum.contexts.templating.exceptions import (
    CaptureError,
    FolderError,
    FunctionNotFoundError,
    FunctionRegistrationError,
    InvalidTemplateNameError,
    NestedSectionError,
    NotOpenError,
    ReservedNameError,
    SectionError,
    TemplateError,
    TemplateNotFound,
    UnclosedSectionError,
    UnknownBatchFunctionError,
)

__all__ = [
    "Engine",
    # Exceptions
    "CaptureError",
    "FolderError",
    "FunctionNotFoundError",
    "FunctionRegistrationError",
    "InvalidTemplateNameError",
    "NestedSectionError",
    "NotOpenError",
    "ReservedNameError",
    "SectionError",
    "TemplateError",
    "TemplateNotFound",
    "UnclosedSectionError",
    "UnknownBatchFunctionError",
]
