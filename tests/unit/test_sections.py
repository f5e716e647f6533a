"""Unit tests for the section store state machine."""

import pytest

from vellum.contexts.rendering.capture import OutputCapture
from vellum.contexts.rendering.sections import SectionMode, SectionStore
from vellum.contexts.templating.exceptions import NestedSectionError, NotOpenError, ReservedNameError


def make_store():
    """Section store over a fresh capture stack with one open region (the template body)."""
    capture = OutputCapture()
    capture.begin()
    return SectionStore(capture), capture


@pytest.mark.unit
@pytest.mark.parametrize("name", ["title", "scripts", "a", "Content"])
def test_empty_section(name):
    """Test that starting and stopping with no writes stores an empty string."""
    store, _ = make_store()

    store.start(name)
    store.stop()

    assert store.section(name) == ""


@pytest.mark.unit
def test_content_is_reserved():
    """Test that no start-class call may open the content section."""
    store, capture = make_store()

    with pytest.raises(ReservedNameError):
        store.start("content")
    with pytest.raises(ReservedNameError):
        store.push("content")
    with pytest.raises(ReservedNameError):
        store.unshift("content")

    assert store.open_name is None
    assert capture.depth == 1


@pytest.mark.unit
@pytest.mark.parametrize("first, second", [("a", "b"), ("a", "a")])
def test_nested_start_raises(first, second):
    """Test that opening a second section while one is open fails."""
    store, _ = make_store()
    store.start(first)

    with pytest.raises(NestedSectionError):
        store.start(second)
    with pytest.raises(NestedSectionError):
        store.push(second)

    # The first section is still open and can be closed normally
    assert store.open_name == first
    store.stop()


@pytest.mark.unit
def test_stop_without_start_raises():
    """Test that stopping with nothing open fails."""
    store, _ = make_store()

    with pytest.raises(NotOpenError):
        store.stop()


@pytest.mark.unit
def test_rewrite_is_idempotent():
    """Test that a second REWRITE start short-circuits and keeps the first value."""
    store, capture = make_store()

    assert store.start("title") is True
    capture.write("A")
    store.stop()

    assert store.start("title") is False
    # Skipped sections do not open a capture region
    assert capture.depth == 1
    store.stop()

    assert store.section("title") == "A"


@pytest.mark.unit
def test_push_accumulates():
    """Test that push appends each new block after the stored content."""
    store, capture = make_store()

    store.push("scripts")
    capture.write("A")
    store.stop()
    store.push("scripts")
    capture.write("B")
    store.stop()

    assert store.section("scripts") == "AB"
    assert store.mode_of("scripts") == SectionMode.APPEND


@pytest.mark.unit
def test_unshift_prepends():
    """Test that unshift puts each new block ahead of the stored content."""
    store, capture = make_store()

    store.unshift("styles")
    capture.write("A")
    store.stop()
    store.unshift("styles")
    capture.write("B")
    store.stop()

    assert store.section("styles") == "BA"
    assert store.mode_of("styles") == SectionMode.PREPEND


@pytest.mark.unit
def test_push_over_rewrite_content():
    """Test that push always re-opens, even when REWRITE content already exists."""
    store, capture = make_store()

    store.start("nav")
    capture.write("Home")
    store.stop()

    assert store.push("nav") is True
    capture.write("|About")
    store.stop()

    assert store.section("nav") == "Home|About"


@pytest.mark.unit
def test_stop_resets_working_mode():
    """Test that a plain start after push uses REWRITE again."""
    store, capture = make_store()

    store.push("a")
    capture.write("1")
    store.stop()

    assert store.working_mode == SectionMode.REWRITE

    store.start("b")
    capture.write("x")
    store.stop()
    store.start("b")
    store.stop()

    assert store.section("b") == "x"


@pytest.mark.unit
def test_section_is_a_pure_read():
    """Test that section() returns defaults without storing anything."""
    store, _ = make_store()

    assert store.section("missing") is None
    assert store.section("missing", "fallback") == "fallback"
    assert not store.has_section("missing")
    assert store.open_name is None


@pytest.mark.unit
def test_snapshots_are_copies():
    """Test that sections and modes are returned as copies, never aliases."""
    store, capture = make_store()
    store.push("a")
    capture.write("1")
    store.stop()

    sections = store.sections
    sections["a"] = "changed"
    modes = store.modes
    modes["a"] = SectionMode.REWRITE

    assert store.section("a") == "1"
    assert store.mode_of("a") == SectionMode.APPEND


# start_section / stop_section truth table


@pytest.mark.unit
def test_start_section_without_content_block_form():
    """Test that a missing section asks the caller to render its default body."""
    store, capture = make_store()

    assert store.start_section("sidebar") is True
    capture.write("Default")
    store.stop_section()

    assert capture.peek() == "Default"


@pytest.mark.unit
def test_start_section_without_content_inline_default():
    """Test that a missing section echoes nothing, even with an inline default."""
    store, capture = make_store()

    assert store.start_section("sidebar", "Default") == ""
    assert capture.peek() == ""
    assert not store.is_open


@pytest.mark.unit
def test_start_section_rewrite_echoes_stored():
    """Test that stored REWRITE content is echoed and the default body skipped."""
    store, capture = make_store()
    store.start("sidebar")
    capture.write("Stored")
    store.stop()

    assert store.start_section("sidebar") is False
    assert store.start_section("sidebar", "Default") == ""
    assert capture.peek() == "StoredStored"


@pytest.mark.unit
def test_start_section_prepend_echoes_stored_then_default():
    """Test that PREPEND content is echoed, followed by the inline default."""
    store, capture = make_store()
    store.unshift("head")
    capture.write("Stored")
    store.stop()

    assert store.start_section("head", "Default") == ""
    assert capture.peek() == "StoredDefault"


@pytest.mark.unit
def test_start_section_prepend_block_form():
    """Test that PREPEND content is echoed and the default body still renders."""
    store, capture = make_store()
    store.unshift("head")
    capture.write("Stored")
    store.stop()

    assert store.start_section("head") is True
    assert capture.peek() == "Stored"


@pytest.mark.unit
def test_start_section_append_block_form_folds_default_in():
    """Test that for APPEND content the default body is prepended and echoed merged."""
    store, capture = make_store()
    store.push("footer")
    capture.write("<br>Extra")
    store.stop()

    assert store.start_section("footer") is True
    assert store.open_name == "footer"
    capture.write("<footer>Default</footer>")
    store.stop_section()

    assert capture.peek() == "<footer>Default</footer><br>Extra"
    assert store.section("footer") == "<footer>Default</footer><br>Extra"
    assert store.open_name is None


@pytest.mark.unit
def test_start_section_append_inline_default():
    """Test that an inline default for APPEND content is merged and closed at once."""
    store, capture = make_store()
    store.push("footer")
    capture.write("Extra")
    store.stop()

    assert store.start_section("footer", "Default") == ""

    assert store.open_name is None
    assert capture.peek() == "DefaultExtra"
    assert store.section("footer") == "DefaultExtra"
    # The stored mode is still APPEND for later pushes
    assert store.mode_of("footer") == SectionMode.APPEND


@pytest.mark.unit
def test_stop_section_without_open_section_is_noop():
    """Test that stop_section() does nothing when no section is open."""
    store, capture = make_store()

    store.stop_section()

    assert capture.peek() == ""


@pytest.mark.unit
def test_rejected_push_leaves_store_unchanged():
    """Test that push() into an open or reserved section changes neither modes nor the open section."""
    store, capture = make_store()
    store.start("a")

    with pytest.raises(NestedSectionError):
        store.push("b")
    with pytest.raises(ReservedNameError):
        store.unshift("content")

    assert store.open_name == "a"
    assert store.working_mode == SectionMode.REWRITE
    assert store.modes == {}
