"""
Engine Configuration

Loads engine settings from an optional YAML file merged over the defaults.
Environment variables (read from .env when present) point at the file and can
override the default template directory.

Example config:
    directory: views
    file_extension: html.jinja
    folders:
      emails:
        path: views/emails
        fallback: true
    data:
      site_name: Example
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from vellum.contexts.templating.defaults import get_default_config

load_dotenv()
VELLUM_CONFIG_PATH = os.getenv("VELLUM_CONFIG_PATH")
VELLUM_TEMPLATES_PATH = os.getenv("VELLUM_TEMPLATES_PATH")


def load_engine_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load engine configuration and merge it over the defaults.

    Relative directory and folder paths are resolved against the config file's
    own directory.

    Args:
        config_path: YAML config file (defaults to VELLUM_CONFIG_PATH; defaults
                     only if neither is set)

    Returns:
        Plain dict with keys directory, file_extension, batch_separator,
        folders, data

    Raises:
        FileNotFoundError: If an explicit config file does not exist
    """
    if config_path is None and VELLUM_CONFIG_PATH:
        config_path = Path(VELLUM_CONFIG_PATH)

    merged = OmegaConf.create(get_default_config())
    base_dir = Path.cwd()

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Engine config not found at {config_path}")

        merged = OmegaConf.merge(merged, OmegaConf.load(config_path))
        base_dir = config_path.parent

    config = OmegaConf.to_container(merged, resolve=True)

    if VELLUM_TEMPLATES_PATH:
        # Environment paths are relative to the working directory
        config["directory"] = _resolve_relative(VELLUM_TEMPLATES_PATH, Path.cwd())
    elif config["directory"] is not None:
        config["directory"] = _resolve_relative(config["directory"], base_dir)

    for name, folder in config["folders"].items():
        if isinstance(folder, str):
            folder = {"path": folder}
        config["folders"][name] = {
            "path": _resolve_relative(folder["path"], base_dir),
            "fallback": bool(folder.get("fallback", False)),
        }

    return config


def _resolve_relative(path: str, base_dir: Path) -> Path:
    path = Path(path).expanduser()
    return path if path.is_absolute() else base_dir / path
