"""
Render Pipeline

A Template is the per-render context: it holds the merged data mapping and the
section store, executes its body under capture, and hands the result up to a
layout when one was declared.
"""

from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Union

from vellum.contexts.rendering.logger import (
    log_layout_delegation,
    log_render_failure,
    log_render_start,
)
from vellum.contexts.rendering.sections import SectionStore
from vellum.contexts.templating.exceptions import (
    TemplateNotFound,
    UnclosedSectionError,
    UnknownBatchFunctionError,
)
from vellum.contexts.templating.functions import resolve_external_callable
from vellum.utils.escaping import escape_html

if TYPE_CHECKING:
    from vellum.contexts.templating.engine import Engine

# A template body writes its output through the Template it is given
Body = Callable[["Template"], None]


class Template:
    """
    Container for template data and sections, and the entry point for rendering.

    Template bodies receive the instance and use it to write output, read data,
    manage sections, declare a layout, and pull in other templates:

        def profile(t):
            t.layout("layout", {"title": "User Profile"})
            t.write(f"<p>Hello, {t.e(t.data()['name'])}!</p>")
            t.push("scripts")
            t.write("<script src='/profile.js'></script>")
            t.stop()
    """

    def __init__(self, engine: "Engine", name: str):
        self.engine = engine
        self.name = name
        self.capture = engine.capture
        self.store = SectionStore(self.capture)

        self._data: Dict[str, Any] = {}
        self._layout_name: Optional[str] = None
        self._layout_data: Dict[str, Any] = {}

        self.data(engine.get_data(name))

    def __repr__(self) -> str:
        return f"<Template {self.name!r}>"

    def __str__(self) -> str:
        return self.render()

    def __getattr__(self, name: str) -> Callable[..., Any]:
        # Only reached for names that are not real attributes
        engine = self.__dict__.get("engine")
        if name.startswith("_") or engine is None:
            raise AttributeError(name)
        engine.get_function(name)
        return partial(self.call, name)

    # Data

    def data(self, data: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Assign or get template data.

        Assigned data is merged into the existing mapping; existing keys are
        overwritten, other keys are kept.

        Returns:
            Copy of the current data mapping
        """
        if data is not None:
            self._data.update(data)
        return dict(self._data)

    # Resolution

    def exists(self) -> bool:
        """Check whether the engine can locate this template."""
        try:
            self.engine.resolve_path(self.name)
            return True
        except TemplateNotFound:
            return False

    def path(self) -> Optional[Path]:
        """Resolved template path, or the first candidate path if it is missing."""
        try:
            return self.engine.resolve_path(self.name)
        except TemplateNotFound as e:
            return e.paths[0] if e.paths else None

    # Rendering

    def render(self, data: Optional[Mapping[str, Any]] = None) -> str:
        """
        Render the template and, recursively, its layout.

        Args:
            data: Data merged into the template data before the body runs

        Returns:
            Rendered output

        Raises:
            Any exception raised by the body, unchanged, after every capture
            region opened during this call has been discarded
        """
        self.data(data or {})

        level = self.capture.depth
        nested = self.engine.active_renders > 0
        log_render_start(self.name, level)

        self.engine.active_renders += 1
        try:
            self.capture.begin()
            self.display()

            if self.store.is_open:
                raise UnclosedSectionError(self.store.open_name)

            content = self.capture.end()

            if self._layout_name is not None:
                log_layout_delegation(self.name, self._layout_name, self.store.sections)
                self.store.set_content(content)

                layout = self.engine.make(self._layout_name)
                layout.store.adopt(self.store.sections, self.store.modes)
                content = layout.render(self._layout_data)

            return content
        except BaseException as e:
            discarded = self.capture.unwind(level)
            log_render_failure(self.name, e, discarded, nested)
            raise
        finally:
            self.engine.active_renders -= 1

    def display(self) -> None:
        """Run the template body against this instance."""
        body = self.engine.get_body(self.name)
        body(self)

    def layout(self, name: str, data: Optional[Mapping[str, Any]] = None) -> None:
        """
        Set the template's layout.

        The layout receives the data this template holds right now, with
        `data` merged over it.
        """
        self._layout_name = name
        self._layout_data = {**self._data, **(data or {})}

    @property
    def layout_name(self) -> Optional[str]:
        return self._layout_name

    def fetch(
        self,
        name: str,
        data: Optional[Mapping[str, Any]] = None,
        use_template_data: bool = True,
    ) -> str:
        """Render another template and return its output."""
        data = dict(data or {})
        if use_template_data:
            data = {**self._data, **data}
        return self.engine.render(name, data)

    def insert(
        self,
        name: str,
        data: Optional[Mapping[str, Any]] = None,
        use_template_data: bool = False,
    ) -> None:
        """Render another template straight into the current output."""
        self.write(self.fetch(name, data, use_template_data))

    # Output

    def write(self, value: Any) -> None:
        """Write a value (None writes nothing) to the active capture region."""
        if value is None:
            return
        self.capture.write(str(value))

    echo = write

    # Sections

    def start(self, name: str) -> bool:
        """Start a section block. Returns False if its body should be skipped."""
        return self.store.start(name)

    def push(self, name: str) -> bool:
        """Start a section block in APPEND mode."""
        return self.store.push(name)

    def unshift(self, name: str) -> bool:
        """Start a section block in PREPEND mode."""
        return self.store.unshift(name)

    def stop(self) -> None:
        """Stop the current section block."""
        self.store.stop()

    def end(self) -> None:
        """Alias of stop()."""
        self.store.stop()

    def section(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Returns the content for a section block."""
        return self.store.section(name, default)

    def start_section(self, name: str, default: Optional[str] = None) -> Union[bool, str]:
        """Echo a section inline; see SectionStore.start_section."""
        return self.store.start_section(name, default)

    def stop_section(self) -> None:
        """Close the open section, if any, and echo its merged content."""
        self.store.stop_section()

    # Functions

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Call an engine-registered template function.

        Raises:
            FunctionNotFoundError: If no function is registered under name
        """
        return self.engine.get_function(name).call(self, *args, **kwargs)

    def batch(self, value: Any, functions: str) -> Any:
        """
        Apply multiple functions to a value, in order.

        Each name is looked up among the engine's registered functions first,
        then as an external callable (a builtin such as "str" or an importable
        dotted path such as "string.capwords").

        Example:
            t.batch("  Jane  ", "strip|upper")

        Raises:
            UnknownBatchFunctionError: If a name resolves to nothing callable
        """
        for function_name in functions.split(self.engine.batch_separator):
            if self.engine.does_function_exist(function_name):
                value = self.call(function_name, value)
                continue

            external = resolve_external_callable(function_name)
            if external is None:
                raise UnknownBatchFunctionError(function_name)
            value = external(value)

        return value

    def escape(self, value: Any, functions: Optional[str] = None) -> str:
        """Escape a value for HTML, running it through batch() first if functions are given."""
        if functions:
            value = self.batch(value, functions)
        return escape_html(value)

    def e(self, value: Any, functions: Optional[str] = None) -> str:
        """Alias of escape()."""
        return self.escape(value, functions)
