"""HTML escaping for template output."""

import html
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EscapeSettings:
    """
    Process-wide escaping behaviour, fixed at import.

    Attributes:
        quote: Escape single and double quotes as well as <, > and &
        none_as_empty: Render None as an empty string instead of "None"
    """

    quote: bool = True
    none_as_empty: bool = True


ESCAPE_SETTINGS = EscapeSettings()


def escape_html(value: Any, settings: EscapeSettings = ESCAPE_SETTINGS) -> str:
    """
    HTML-entity-escape a value for safe inclusion in markup.

    Args:
        value: Value to escape (non-strings are converted with str())
        settings: Escaping behaviour (defaults to ESCAPE_SETTINGS)

    Returns:
        Escaped string

    Examples:
        >>> escape_html("<a>")
        '&lt;a&gt;'
        >>> escape_html(None)
        ''
    """
    if value is None and settings.none_as_empty:
        value = ""
    return html.escape(str(value), quote=settings.quote)
