"""
Template Engine

Resolves template identifiers to bodies, and holds the registered functions
and shared data every Template created through it can use.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from vellum.contexts.rendering.capture import OutputCapture, output_capture
from vellum.contexts.rendering.template import Body, Template
from vellum.contexts.templating.config_resolver import load_engine_config
from vellum.contexts.templating.data import Data
from vellum.contexts.templating.defaults import DEFAULT_BATCH_SEPARATOR, DEFAULT_FILE_EXTENSION
from vellum.contexts.templating.exceptions import FolderError, TemplateNotFound
from vellum.contexts.templating.functions import Functions, TemplateFunction
from vellum.contexts.templating.logger import _log_debug, _log_info
from vellum.contexts.templating.names import Folder, Folders, TemplateName, resolve_template_path
from vellum.contexts.templating.registries import BodyRegistry


class Engine:
    """
    Template engine: directory, folders, functions, shared data, and rendering.

    Example:
        engine = Engine(Path("views"))
        engine.add_folder("emails", Path("views/emails"), fallback=True)
        engine.register_function("upper", str.upper)
        engine.add_data({"site_name": "Example"})

        html = engine.render("profile", {"name": "Jane"})
    """

    def __init__(
        self,
        directory: Optional[Path] = None,
        file_extension: Optional[str] = DEFAULT_FILE_EXTENSION,
        batch_separator: str = DEFAULT_BATCH_SEPARATOR,
        capture: Optional[OutputCapture] = None,
    ):
        """
        Initialize the engine.

        Args:
            directory: Default template directory (file templates need it
                       unless every name is folder-qualified)
            file_extension: Appended to template names ("profile" ->
                            "profile.jinja"); None to use names as-is
            batch_separator: Splits function names in batch() pipelines
            capture: Capture stack to render into (defaults to the shared
                     process-wide output_capture)
        """
        self.directory: Optional[Path] = None
        self.file_extension = file_extension
        self.batch_separator = batch_separator
        self.capture = capture if capture is not None else output_capture
        # Renders currently in progress (layouts and fetch/insert nest)
        self.active_renders = 0

        self.folders = Folders()
        self.functions = Functions()
        self.shared_data = Data()
        self.bodies = BodyRegistry()

        if directory is not None:
            self.set_directory(directory)

    @classmethod
    def from_config(cls, config_path: Optional[Path] = None, **kwargs: Any) -> "Engine":
        """
        Build an engine from a YAML config file (see config_resolver).

        Args:
            config_path: Config file (defaults to VELLUM_CONFIG_PATH, then defaults)
            **kwargs: Passed to Engine() (e.g., capture)
        """
        config = load_engine_config(config_path)

        engine = cls(
            directory=config["directory"],
            file_extension=config["file_extension"],
            batch_separator=config["batch_separator"],
            **kwargs,
        )
        for name, folder in config["folders"].items():
            engine.add_folder(name, folder["path"], fallback=folder["fallback"])
        if config["data"]:
            engine.add_data(config["data"])

        _log_info(f"Engine configured from {config_path or 'defaults'}")
        return engine

    # Directory and folders

    def set_directory(self, directory: Optional[Path]) -> "Engine":
        """
        Set the default template directory.

        Raises:
            FolderError: If the directory does not exist
        """
        if directory is not None:
            directory = Path(directory)
            if not directory.is_dir():
                raise FolderError(f'The specified path "{directory}" does not exist.')
        self.directory = directory
        return self

    def add_folder(self, name: str, directory: Path, fallback: bool = False) -> "Engine":
        """Add a template folder for "name::template" identifiers."""
        self.folders.add(name, directory, fallback)
        _log_debug(f"Added folder '{name}' -> {directory} (fallback={fallback})")
        return self

    def remove_folder(self, name: str) -> "Engine":
        self.folders.remove(name)
        return self

    def get_folders(self) -> List[Folder]:
        return list(self.folders)

    # Data

    def add_data(self, data: Mapping[str, Any], templates: Optional[Union[str, Iterable[str]]] = None) -> "Engine":
        """Add data shared with all templates, or only with the named ones."""
        self.shared_data.add(data, templates)
        return self

    def get_data(self, template: Optional[str] = None) -> Dict[str, Any]:
        """Data a new Template for this identifier starts with."""
        return self.shared_data.get(template)

    # Functions

    def register_function(self, name: str, callback: Callable[..., Any], pass_template: bool = False) -> "Engine":
        """
        Register a template function.

        Args:
            name: Name templates call it by (t.call(name, ...), t.name(...), batch)
            callback: The function
            pass_template: Pass the calling Template as the first argument
        """
        self.functions.add(name, callback, pass_template=pass_template)
        _log_debug(f"Registered function '{name}'")
        return self

    def drop_function(self, name: str) -> "Engine":
        self.functions.remove(name)
        return self

    def get_function(self, name: str) -> TemplateFunction:
        return self.functions.get(name)

    def does_function_exist(self, name: str) -> bool:
        return self.functions.exists(name)

    # Resolution

    def register_template(self, name: str, body: Body) -> "Engine":
        """Register an in-memory template body; it takes precedence over files."""
        self.bodies.register(name, body)
        return self

    def parse_name(self, name: str) -> TemplateName:
        return TemplateName.parse(name, self.folders, self.file_extension)

    def resolve_path(self, name: str) -> Optional[Path]:
        """
        Resolve a template identifier to its source file.

        Returns:
            Path of the template file, or None for an in-memory template

        Raises:
            TemplateNotFound: With every candidate path, if no file exists
        """
        if self.bodies.is_registered(name):
            return None
        return resolve_template_path(self.parse_name(name), self.directory)

    def get_body(self, name: str) -> Body:
        """
        Get the executable body for a template identifier.

        Raises:
            TemplateNotFound: If neither a registered body nor a file exists
        """
        body = self.bodies.get_registered(name)
        if body is not None:
            return body
        return self.bodies.get_file_body(self.resolve_path(name))

    def path(self, name: str) -> Optional[Path]:
        """Resolved path for a template, or its first candidate path if missing."""
        return self.make(name).path()

    def exists(self, name: str) -> bool:
        """Check whether a template exists."""
        try:
            self.resolve_path(name)
            return True
        except TemplateNotFound:
            return False

    # Rendering

    def make(self, name: str, data: Optional[Mapping[str, Any]] = None) -> Template:
        """Create a new Template, seeded with the shared data for its name."""
        template = Template(self, name)
        if data:
            template.data(data)
        return template

    def render(self, name: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """Create and render a template."""
        return self.make(name).render(data)
