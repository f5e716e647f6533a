"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[render]"


# Wrapper functions with automatic [render] prefix


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_render_start(name: str, depth: int) -> None:
    """Log start of a template render with the capture depth at entry."""
    _log_debug(f"Rendering '{name}' (capture depth {depth})")


def log_layout_delegation(name: str, layout_name: str, section_names) -> None:
    """Log hand-off of a rendered body to its layout."""
    sections = ", ".join(sorted(section_names)) or "none"
    _log_debug(f"'{name}' delegates to layout '{layout_name}' (sections: {sections})")


def log_render_failure(name: str, error: BaseException, discarded: int, nested: bool = False) -> None:
    """
    Log a failed render after the capture stack was unwound.

    Only the outermost render warns; nested renders (layouts, fetch, insert)
    pass the same error up and log it at debug level.
    """
    message = (
        f"Render of '{name}' failed with {type(error).__name__}; "
        f"discarded {discarded} capture region(s)"
    )
    if nested:
        _log_debug(message)
    else:
        _log_warning(message)
