"""
Template Body Registry

Maps template identifiers to executable bodies. In-memory bodies are plain
callables registered by name; file templates are compiled once with Jinja2 and
cached by path.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from jinja2 import Environment, StrictUndefined
from jinja2 import Template as JinjaTemplate

from vellum.contexts.templating.defaults import JINJA_EXTENSIONS, TEMPLATE_VARIABLE
from vellum.contexts.templating.logger import _log_debug

if TYPE_CHECKING:
    from vellum.contexts.rendering.template import Template


def _finalize(value: Any) -> Any:
    # Missing sections come back as None; render them as nothing
    return "" if value is None else value


class JinjaBody:
    """
    Template body backed by a Jinja2 source file.

    Output is streamed chunk by chunk into the active capture region, so section
    calls made from the source ({% do this.start("x") %}) capture exactly the
    text produced between them.
    """

    def __init__(self, template: JinjaTemplate, path: Path):
        self.template = template
        self.path = path

    def __call__(self, view: "Template") -> None:
        context = view.data()
        context[TEMPLATE_VARIABLE] = view

        for chunk in self.template.generate(context):
            view.write(chunk)

    def __repr__(self) -> str:
        return f"<JinjaBody {self.path}>"


class BodyRegistry:
    """
    Registry for in-memory template bodies and cached Jinja2 file bodies.

    File templates use the stock Jinja2 delimiters and see their Template
    instance as `this`:

        {% do this.layout("layout", {"title": "Profile"}) %}
        <p>Hello, {{ this.e(name) }}!</p>
        {% do this.push("scripts") %}<script src="/profile.js"></script>{% do this.stop() %}
    """

    def __init__(self):
        self._bodies: Dict[str, Callable[["Template"], None]] = {}
        self._cache: Dict[Path, JinjaBody] = {}

        self.env = Environment(
            # Catches silent failures
            undefined=StrictUndefined,
            extensions=JINJA_EXTENSIONS,
            finalize=_finalize,
            # Escaping is explicit through this.e()
            autoescape=False,
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
        )

    def register(self, name: str, body: Callable[["Template"], None]) -> None:
        """Register an in-memory body under a template identifier."""
        if not callable(body):
            raise TypeError(f"Template body for '{name}' must be callable")
        self._bodies[name] = body

    def is_registered(self, name: str) -> bool:
        return name in self._bodies

    def get_registered(self, name: str) -> Optional[Callable[["Template"], None]]:
        return self._bodies.get(name)

    def get_file_body(self, path: Path) -> JinjaBody:
        """
        Get the body for a template file, compiling and caching it if necessary.

        Raises:
            TemplateSyntaxError: If the file has Jinja2 syntax errors
        """
        if path in self._cache:
            return self._cache[path]

        source = path.read_text(encoding="utf-8")
        template = self.env.from_string(source)

        body = JinjaBody(template, path)
        self._cache[path] = body
        _log_debug(f"Compiled template file {path}")
        return body

    def clear_cache(self) -> None:
        """Clear the compiled file cache."""
        self._cache.clear()

    def is_cached(self, path: Path) -> bool:
        return path in self._cache
