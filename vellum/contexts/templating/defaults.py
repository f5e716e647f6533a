"""
Default values for VELLUM engine configuration.

Used by config_resolver.py as the base that YAML config files are merged over.
"""

from typing import Any, Dict

DEFAULT_FILE_EXTENSION = "jinja"

# Splits function names in batch() and escape() pipelines
DEFAULT_BATCH_SEPARATOR = "|"

# Name under which file templates see their Template instance
TEMPLATE_VARIABLE = "this"

# Jinja2 extensions enabled for file templates ("do" allows {% do this.stop() %})
JINJA_EXTENSIONS = ["jinja2.ext.do"]


def get_default_config() -> Dict[str, Any]:
    """
    Get the complete default engine configuration.

    Returns:
        Dict with every key an engine config file may set
    """
    return {
        "directory": None,
        "file_extension": DEFAULT_FILE_EXTENSION,
        "batch_separator": DEFAULT_BATCH_SEPARATOR,
        "folders": {},
        "data": {},
    }
