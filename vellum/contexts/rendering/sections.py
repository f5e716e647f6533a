"""
Section Store

Per-render mapping of section name to accumulated content, plus the merge mode
for each name and the "currently open section" state machine.
"""

from enum import Enum
from typing import Dict, Mapping, Optional, Union

from vellum.contexts.rendering.capture import OutputCapture
from vellum.contexts.templating.exceptions import NestedSectionError, NotOpenError, ReservedNameError

CONTENT_SECTION = "content"


class SectionMode(Enum):
    """How repeated writes to the same section combine."""

    REWRITE = 1
    PREPEND = 2
    APPEND = 3


class SectionStore:
    """
    Named sections for a single template render.

    At most one section is open at a time. Opening a section starts a capture
    region; stopping it merges the captured text according to the working mode.
    """

    def __init__(self, capture: OutputCapture):
        self.capture = capture
        self._sections: Dict[str, str] = {}
        self._modes: Dict[str, SectionMode] = {}
        self.open_name: Optional[str] = None
        self.working_mode = SectionMode.REWRITE

    @property
    def sections(self) -> Dict[str, str]:
        """Copy of the stored section content."""
        return dict(self._sections)

    @property
    def modes(self) -> Dict[str, SectionMode]:
        """Copy of the stored per-section modes."""
        return dict(self._modes)

    @property
    def is_open(self) -> bool:
        return self.open_name is not None

    def adopt(self, sections: Mapping[str, str], modes: Mapping[str, SectionMode]) -> None:
        """Replace this store's sections and modes with copies of the given ones."""
        self._sections = dict(sections)
        self._modes = dict(modes)

    def set_content(self, content: str) -> None:
        """Store the rendered body as the reserved content section."""
        self._sections[CONTENT_SECTION] = content

    def has_section(self, name: str) -> bool:
        return name in self._sections

    def mode_of(self, name: str) -> SectionMode:
        return self._modes.get(name, SectionMode.REWRITE)

    def _must_skip(self) -> bool:
        return self.open_name in self._sections and self.working_mode == SectionMode.REWRITE

    def start(self, name: str) -> bool:
        """
        Open a section using the current working mode.

        Args:
            name: Section name

        Returns:
            False when the section already holds content and the mode is
            REWRITE (the caller should skip its body), True otherwise

        Raises:
            ReservedNameError: If name is "content"
            NestedSectionError: If another section is already open
        """
        if name == CONTENT_SECTION:
            raise ReservedNameError(name)

        if self.open_name is not None:
            raise NestedSectionError(name, self.open_name)

        self.open_name = name

        if self._must_skip():
            return False

        self.capture.begin()
        return True

    def push(self, name: str) -> bool:
        """Open a section whose output is appended to existing content."""
        return self._start_with_mode(name, SectionMode.APPEND)

    def unshift(self, name: str) -> bool:
        """Open a section whose output is prepended to existing content."""
        return self._start_with_mode(name, SectionMode.PREPEND)

    def _start_with_mode(self, name: str, mode: SectionMode) -> bool:
        if name == CONTENT_SECTION:
            raise ReservedNameError(name)
        if self.open_name is not None:
            raise NestedSectionError(name, self.open_name)

        self.working_mode = mode
        self._modes[name] = mode
        self.start(name)
        return True

    def stop(self) -> None:
        """
        Close the open section and merge its captured output.

        Raises:
            NotOpenError: If no section is open
        """
        if self.open_name is None:
            raise NotOpenError()

        name = self.open_name

        if not self._must_skip():
            captured = self.capture.end()
            existing = self._sections.get(name, "")

            if self.working_mode == SectionMode.APPEND:
                self._sections[name] = existing + captured
            elif self.working_mode == SectionMode.PREPEND:
                self._sections[name] = captured + existing
            else:
                self._sections[name] = captured

        self.open_name = None
        self.working_mode = SectionMode.REWRITE

    def end(self) -> None:
        """Alias of stop()."""
        self.stop()

    def section(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return a section's content, or default if it was never stored."""
        return self._sections.get(name, default)

    def start_section(self, name: str, default: Optional[str] = None) -> Union[bool, str]:
        """
        Echo a section inline, falling back to (or combining with) a default.

        Block usage, where the body is the default content:

            if t.start_section("sidebar"):
                t.write("Default sidebar")
            t.stop_section()

        Inline usage, with the default given as an argument (a section that
        was never stored echoes nothing):

            t.start_section("sidebar", "Default sidebar")

        Returns:
            "" whenever a default argument is given; otherwise False only when
            stored REWRITE content was echoed (skip the default body), True
            when the caller should render its default body
        """
        inline = default is not None

        if name not in self._sections:
            return "" if inline else True

        mode = self.mode_of(name)

        if mode == SectionMode.REWRITE:
            self.capture.write(self._sections[name])
            return "" if inline else False

        if mode == SectionMode.PREPEND:
            self.capture.write(self._sections[name])
            if inline:
                self.capture.write(default)
                return ""
            return True

        # APPEND: whatever comes next goes ahead of the stored append chain
        if self.open_name is not None:
            raise NestedSectionError(name, self.open_name)
        self.working_mode = SectionMode.PREPEND
        self.start(name)
        if inline:
            self.capture.write(default)
            self.stop_section()
            return ""
        return True

    def stop_section(self) -> None:
        """Close the open section, if any, and echo its merged content."""
        if self.open_name is None:
            return

        name = self.open_name
        self.stop()
        self.capture.write(self._sections.get(name, ""))
