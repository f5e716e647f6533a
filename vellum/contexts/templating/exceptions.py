"""Custom exceptions for template resolution and rendering."""

from pathlib import Path
from typing import List, Optional, Sequence


class TemplateError(Exception):
    """Base exception for all engine and rendering faults."""

    pass


class SectionError(TemplateError):
    """Structural misuse of the section store."""

    pass


class ReservedNameError(SectionError):
    """Raised when a template tries to open the reserved "content" section."""

    def __init__(self, name: str = "content"):
        self.name = name
        super().__init__(f'The section name "{name}" is reserved.')


class NestedSectionError(SectionError):
    """
    Raised when a section is opened while another one is still open.

    Attributes:
        name: Section that was being opened
        open_name: Section that is currently open
    """

    def __init__(self, name: str, open_name: str):
        self.name = name
        self.open_name = open_name
        super().__init__(
            f'You cannot nest sections within other sections '
            f'(tried to open "{name}" while "{open_name}" is open).'
        )


class NotOpenError(SectionError):
    """Raised when a section is stopped without a matching start."""

    def __init__(self):
        super().__init__("You must start a section before you can stop it.")


class UnclosedSectionError(SectionError):
    """Raised when a template body finishes with a section still open."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'The section "{name}" was started but never stopped.')


class CaptureError(TemplateError):
    """Raised when a capture region is closed while none is open."""

    pass


class UnknownBatchFunctionError(TemplateError, LookupError):
    """Raised when a batch pipeline names a function that cannot be resolved."""

    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f'The batch function could not find the "{function_name}" function.')


class FunctionNotFoundError(TemplateError, AttributeError):
    """Raised when a template calls a function that was never registered."""

    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f'The template function "{function_name}" was not found.')


class FunctionRegistrationError(TemplateError):
    """Raised when a template function cannot be registered."""

    pass


class InvalidTemplateNameError(TemplateError, ValueError):
    """Raised when a template identifier cannot be parsed."""

    pass


class FolderError(TemplateError):
    """Raised for duplicate, missing, or invalid template folders."""

    pass


class TemplateNotFound(TemplateError, LookupError):
    """
    Exception raised when no source exists for a template identifier.

    Attributes:
        name: Template identifier that was resolved (e.g., 'emails::welcome')
        paths: Every candidate path that was attempted, in order
    """

    def __init__(self, name: str, paths: Optional[Sequence[Path]] = None, message: Optional[str] = None):
        self.name = name
        self.paths: List[Path] = list(paths or [])

        if message is None:
            message = f'The template "{name}" could not be found.'
            if self.paths:
                tried = ", ".join(str(p) for p in self.paths)
                message += f"\nTried: {tried}"

        super().__init__(message)
