"""
Output Capture

Nested capture regions that divert written output into in-memory buffers.
A single process-wide stack (output_capture) is shared by every render so that
sections, template bodies and nested fetch/insert calls unwind together.
"""

import sys
from io import StringIO
from typing import List, Optional, TextIO

from vellum.contexts.templating.exceptions import CaptureError


class OutputCapture:
    """
    Stack of capture regions.

    Writes go to the innermost open region, or straight to the sink when no
    region is open.
    """

    def __init__(self, sink: Optional[TextIO] = None):
        """
        Initialize an empty capture stack.

        Args:
            sink: Stream receiving output written outside any region.
                  Defaults to sys.stdout (looked up at write time).
        """
        self._sink = sink
        self._buffers: List[StringIO] = []

    @property
    def depth(self) -> int:
        """Number of currently open capture regions."""
        return len(self._buffers)

    def begin(self) -> int:
        """
        Open a new nested capture region.

        Returns:
            Depth after opening
        """
        self._buffers.append(StringIO())
        return self.depth

    def end(self) -> str:
        """
        Close the innermost region and return everything written to it.

        Raises:
            CaptureError: If no region is open
        """
        if not self._buffers:
            raise CaptureError("Cannot end capture: no capture region is open.")
        return self._buffers.pop().getvalue()

    def discard(self) -> None:
        """Close the innermost region, dropping its contents."""
        if not self._buffers:
            raise CaptureError("Cannot discard capture: no capture region is open.")
        self._buffers.pop().close()

    def unwind(self, depth: int) -> int:
        """
        Discard regions until only `depth` remain open.

        Args:
            depth: Depth recorded before the regions were opened

        Returns:
            Number of regions discarded
        """
        discarded = 0
        while self.depth > depth:
            self.discard()
            discarded += 1
        return discarded

    def write(self, text: str) -> None:
        """Write text to the innermost region (or the sink if none is open)."""
        if self._buffers:
            self._buffers[-1].write(text)
        else:
            (self._sink or sys.stdout).write(text)

    def peek(self) -> str:
        """Return what the innermost region holds so far without closing it."""
        if not self._buffers:
            return ""
        return self._buffers[-1].getvalue()


output_capture = OutputCapture()
