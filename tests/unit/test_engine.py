"""Unit tests for the Engine: names, folders, path resolution, functions, and data."""

from pathlib import Path

import pytest

from vellum.contexts.rendering.capture import OutputCapture
from vellum.contexts.templating.data import Data
from vellum.contexts.templating.engine import Engine
from vellum.contexts.templating.exceptions import (
    FolderError,
    FunctionNotFoundError,
    FunctionRegistrationError,
    InvalidTemplateNameError,
    TemplateNotFound,
)
from vellum.contexts.templating.functions import Functions, resolve_external_callable
from vellum.contexts.templating.names import Folders, TemplateName


def write_template(directory: Path, name: str, source: str) -> Path:
    """Write a template file and return its path."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path


# Names and folders


@pytest.mark.unit
def test_parse_plain_name():
    """Test that a plain name gets the file extension appended."""
    name = TemplateName.parse("profile", Folders(), "jinja")

    assert name.file == "profile.jinja"
    assert name.folder is None


@pytest.mark.unit
def test_parse_name_without_extension():
    """Test that no extension is appended when the engine has none."""
    assert TemplateName.parse("profile.html", Folders(), None).file == "profile.html"


@pytest.mark.unit
def test_parse_folder_name(tmp_path):
    """Test that folder::file names bind to the registered folder."""
    folders = Folders()
    folders.add("emails", tmp_path)

    name = TemplateName.parse("emails::welcome", folders, "jinja")

    assert name.folder.name == "emails"
    assert name.candidate_paths(None) == [tmp_path / "welcome.jinja"]


@pytest.mark.unit
@pytest.mark.parametrize("bad_name", ["", "a::b::c", "::welcome", "emails::"])
def test_parse_invalid_names(bad_name, tmp_path):
    """Test that empty names and repeated separators are rejected."""
    folders = Folders()
    folders.add("emails", tmp_path)

    with pytest.raises(InvalidTemplateNameError):
        TemplateName.parse(bad_name, folders, "jinja")


@pytest.mark.unit
def test_parse_unknown_folder():
    """Test that a name using an unregistered folder fails."""
    with pytest.raises(FolderError, match="was not found"):
        TemplateName.parse("missing::welcome", Folders(), "jinja")


@pytest.mark.unit
def test_folder_errors(tmp_path):
    """Test duplicate folder names and missing directories."""
    folders = Folders()
    folders.add("emails", tmp_path)

    with pytest.raises(FolderError, match="already being used"):
        folders.add("emails", tmp_path)
    with pytest.raises(FolderError, match="does not exist"):
        folders.add("other", tmp_path / "nope")

    folders.remove("emails")
    assert not folders.exists("emails")
    with pytest.raises(FolderError):
        folders.remove("emails")


# Path resolution


@pytest.mark.unit
def test_resolve_path_in_default_directory(tmp_path):
    """Test that plain names resolve against the default directory."""
    path = write_template(tmp_path, "profile.jinja", "x")
    engine = Engine(tmp_path)

    assert engine.resolve_path("profile") == path
    assert engine.exists("profile")
    assert engine.path("profile") == path


@pytest.mark.unit
def test_missing_template_reports_candidate_paths(tmp_path):
    """Test that TemplateNotFound carries every path that was tried."""
    engine = Engine(tmp_path)

    with pytest.raises(TemplateNotFound) as exc_info:
        engine.resolve_path("missing")

    assert exc_info.value.paths == [tmp_path / "missing.jinja"]
    assert exc_info.value.name == "missing"
    assert not engine.exists("missing")
    # path() falls back to the first candidate
    assert engine.path("missing") == tmp_path / "missing.jinja"


@pytest.mark.unit
def test_folder_fallback_to_default_directory(tmp_path):
    """Test that fallback folders look in the default directory when a file is missing."""
    default_dir = tmp_path / "views"
    emails_dir = tmp_path / "emails"
    emails_dir.mkdir()
    shared = write_template(default_dir, "footer.jinja", "footer")
    own = write_template(emails_dir, "welcome.jinja", "welcome")

    engine = Engine(default_dir)
    engine.add_folder("emails", emails_dir, fallback=True)

    assert engine.resolve_path("emails::welcome") == own
    assert engine.resolve_path("emails::footer") == shared

    with pytest.raises(TemplateNotFound) as exc_info:
        engine.resolve_path("emails::missing")
    assert exc_info.value.paths == [emails_dir / "missing.jinja", default_dir / "missing.jinja"]


@pytest.mark.unit
def test_folder_without_fallback(tmp_path):
    """Test that folders without fallback only look in their own directory."""
    default_dir = tmp_path / "views"
    emails_dir = tmp_path / "emails"
    emails_dir.mkdir()
    write_template(default_dir, "footer.jinja", "footer")

    engine = Engine(default_dir)
    engine.add_folder("emails", emails_dir)

    assert not engine.exists("emails::footer")


@pytest.mark.unit
def test_set_directory_must_exist(tmp_path):
    """Test that a missing default directory is rejected."""
    with pytest.raises(FolderError):
        Engine(tmp_path / "missing")


@pytest.mark.unit
def test_registered_body_takes_precedence(tmp_path):
    """Test that in-memory bodies win over files with the same identifier."""
    write_template(tmp_path, "profile.jinja", "from file")
    engine = Engine(tmp_path, capture=OutputCapture())
    engine.register_template("profile", lambda t: t.write("from memory"))

    assert engine.render("profile") == "from memory"
    assert engine.resolve_path("profile") is None


@pytest.mark.unit
def test_file_bodies_are_cached(tmp_path):
    """Test that a template file is compiled once and reused."""
    path = write_template(tmp_path, "cached.jinja", "v1")
    engine = Engine(tmp_path, capture=OutputCapture())

    assert engine.render("cached") == "v1"
    assert engine.bodies.is_cached(path)

    path.write_text("v2", encoding="utf-8")
    assert engine.render("cached") == "v1"

    engine.bodies.clear_cache()
    assert engine.render("cached") == "v2"


# Functions


@pytest.mark.unit
def test_register_and_drop_function():
    """Test function registration lifecycle on the engine."""
    engine = Engine()
    engine.register_function("upper", str.upper)

    assert engine.does_function_exist("upper")
    assert engine.get_function("upper").call(None, "a") == "A"

    engine.drop_function("upper")
    assert not engine.does_function_exist("upper")
    with pytest.raises(FunctionNotFoundError):
        engine.get_function("upper")


@pytest.mark.unit
@pytest.mark.parametrize("bad_name", ["", "1abc", "has space", "dash-name"])
def test_invalid_function_names(bad_name):
    """Test that function names must be identifiers."""
    with pytest.raises(FunctionRegistrationError):
        Functions().add(bad_name, str.upper)


@pytest.mark.unit
def test_duplicate_and_non_callable_functions():
    """Test that duplicates and non-callables are rejected."""
    functions = Functions()
    functions.add("upper", str.upper)

    with pytest.raises(FunctionRegistrationError, match="already registered"):
        functions.add("upper", str.lower)
    with pytest.raises(FunctionRegistrationError, match="callable"):
        functions.add("value", "not callable")

    assert functions.names() == ["upper"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, argument, expected",
    [
        ("str", 5, "5"),
        ("len", "abc", 3),
        ("str.upper", "abc", "ABC"),
        ("string.capwords", "hello world", "Hello World"),
        ("html:escape", "<b>", "&lt;b&gt;"),
    ],
)
def test_resolve_external_callable(name, argument, expected):
    """Test builtin and importable fallbacks used by batch()."""
    function = resolve_external_callable(name)

    assert function is not None
    assert function(argument) == expected


@pytest.mark.unit
@pytest.mark.parametrize("name", ["nope", "str.nope", "no_such_module.func", "True", "string.ascii_letters"])
def test_resolve_external_callable_rejects_unknown(name):
    """Test that unresolvable or non-callable names resolve to None."""
    assert resolve_external_callable(name) is None


# Data


@pytest.mark.unit
def test_shared_and_scoped_data():
    """Test that template-scoped data layers over shared data."""
    data = Data()
    data.add({"site": "Example", "title": "Shared"})
    data.add({"title": "Profile"}, templates=["profile", "emails::welcome"])

    assert data.get() == {"site": "Example", "title": "Shared"}
    assert data.get("profile") == {"site": "Example", "title": "Profile"}
    assert data.get("emails::welcome")["title"] == "Profile"
    assert data.get("other")["title"] == "Shared"


@pytest.mark.unit
def test_make_seeds_template_data():
    """Test that make() seeds shared data and merges the given data over it."""
    engine = Engine()
    engine.register_template("view", lambda t: None)
    engine.add_data({"site": "Example"})

    template = engine.make("view", {"user": "jane"})

    assert template.data() == {"site": "Example", "user": "jane"}


@pytest.mark.unit
def test_engine_folder_lifecycle(tmp_path):
    """Test adding and removing folders through the engine."""
    engine = Engine()
    engine.add_folder("emails", tmp_path).add_folder("partials", tmp_path, fallback=True)

    assert [(f.name, f.fallback) for f in engine.get_folders()] == [("emails", False), ("partials", True)]

    engine.remove_folder("emails")
    assert [f.name for f in engine.get_folders()] == ["partials"]
    with pytest.raises(FolderError):
        engine.parse_name("emails::welcome")
