"""Shared data handed to templates when they are created."""

from typing import Any, Dict, Iterable, Mapping, Optional, Union


class Data:
    """
    Data shared with all templates, or with specific templates only.

    Template-specific data is layered over the shared data.
    """

    def __init__(self):
        self._shared: Dict[str, Any] = {}
        self._templates: Dict[str, Dict[str, Any]] = {}

    def add(self, data: Mapping[str, Any], templates: Optional[Union[str, Iterable[str]]] = None) -> None:
        """
        Add data.

        Args:
            data: Key-value pairs to add
            templates: Template name(s) to scope the data to; shared with all
                       templates when None
        """
        if templates is None:
            self._shared.update(data)
            return

        if isinstance(templates, str):
            templates = [templates]

        for template in templates:
            self._templates.setdefault(template, {}).update(data)

    def get(self, template: Optional[str] = None) -> Dict[str, Any]:
        """Return the data for a template (shared data when template is None)."""
        if template is None:
            return dict(self._shared)
        return {**self._shared, **self._templates.get(template, {})}
