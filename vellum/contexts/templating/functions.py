"""
Template Functions

Explicit capability lookup for template helpers: the Engine holds a mapping of
function name to callable, and templates call through it by name.
"""

import builtins
import pkgutil
import re
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from vellum.contexts.templating.exceptions import FunctionNotFoundError, FunctionRegistrationError

if TYPE_CHECKING:
    from vellum.contexts.rendering.template import Template

FUNCTION_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class TemplateFunction:
    """A named callable available to templates."""

    def __init__(self, name: str, callback: Callable[..., Any], pass_template: bool = False):
        """
        Args:
            name: Name templates call the function by
            callback: The function itself
            pass_template: Pass the calling Template as the first argument
        """
        if not FUNCTION_NAME_PATTERN.match(name):
            raise FunctionRegistrationError(f'Not a valid function name: "{name}".')
        if not callable(callback):
            raise FunctionRegistrationError(f'The callback for "{name}" must be callable.')

        self.name = name
        self.callback = callback
        self.pass_template = pass_template

    def call(self, template: Optional["Template"], *args: Any, **kwargs: Any) -> Any:
        if self.pass_template:
            return self.callback(template, *args, **kwargs)
        return self.callback(*args, **kwargs)


class Functions:
    """Collection of registered template functions."""

    def __init__(self):
        self._functions: Dict[str, TemplateFunction] = {}

    def add(self, name: str, callback: Callable[..., Any], pass_template: bool = False) -> TemplateFunction:
        """
        Register a function.

        Raises:
            FunctionRegistrationError: If the name is invalid or already registered
        """
        if self.exists(name):
            raise FunctionRegistrationError(f'The template function name "{name}" is already registered.')

        function = TemplateFunction(name, callback, pass_template=pass_template)
        self._functions[name] = function
        return function

    def remove(self, name: str) -> None:
        """
        Remove a registered function.

        Raises:
            FunctionNotFoundError: If no function is registered under name
        """
        if not self.exists(name):
            raise FunctionNotFoundError(name)
        del self._functions[name]

    def get(self, name: str) -> TemplateFunction:
        """
        Raises:
            FunctionNotFoundError: If no function is registered under name
        """
        if not self.exists(name):
            raise FunctionNotFoundError(name)
        return self._functions[name]

    def exists(self, name: str) -> bool:
        return name in self._functions

    def names(self) -> List[str]:
        return sorted(self._functions)


def resolve_external_callable(name: str) -> Optional[Callable[..., Any]]:
    """
    Resolve a function name outside the engine's registry.

    Tries a builtin first ("str", "len", "str.upper"), then an importable dotted path
    ("string.capwords", "html:escape").

    Returns:
        The callable, or None if the name does not resolve to one
    """
    head, _, rest = name.partition(".")
    candidate = getattr(builtins, head, None)
    if candidate is not None and rest:
        for attribute in rest.split("."):
            candidate = getattr(candidate, attribute, None)

    if candidate is None and ("." in name or ":" in name):
        try:
            candidate = pkgutil.resolve_name(name)
        except (ImportError, AttributeError, ValueError):
            return None

    return candidate if callable(candidate) else None
