#!/usr/bin/env python3
"""
Template Rendering CLI

Renders templates through the engine, and checks or locates template files.

Commands:
    render - Render a template (and its layouts) to stdout or a file
    exists - Exit 0 if a template can be found, 1 otherwise
    path   - Print the resolved (or first candidate) path of a template

Examples:\n

    render_template.py render profile --directory views --data name=Jane

    render_template.py render emails::welcome --config vellum.yaml --data-file user.yaml

    render_template.py exists profile --directory views

    render_template.py path emails::welcome --config vellum.yaml
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
import yaml
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException
from typing_extensions import Annotated

from vellum.contexts.templating import Engine, TemplateError
from vellum.contexts.templating.logger import setup_templating_logger

app = typer.Typer(
    help="Render templates with sections and layouts",
    add_completion=False,
    invoke_without_command=True,
)

DirectoryOption = Annotated[
    Optional[Path],
    typer.Option("--directory", "-d", help="Default template directory"),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Engine config YAML (directory, folders, data)"),
]


def build_engine(directory: Optional[Path], config: Optional[Path]) -> Engine:
    """Build an engine from a config file, with --directory taking precedence."""
    engine = Engine.from_config(config)
    if directory is not None:
        engine.set_directory(directory)
    return engine


def parse_data_pairs(pairs: List[str]) -> Dict[str, str]:
    """Parse key=value pairs from the command line."""
    data = {}
    for pair in pairs:
        if "=" not in pair:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--data")
        key, value = pair.split("=", 1)
        data[key.strip()] = value
    return data


def load_data_file(data_file: Path) -> Dict[str, Any]:
    """
    Load template data from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file does not hold a mapping
    """
    if not data_file.exists():
        raise FileNotFoundError(f"Data file not found at {data_file}")

    data = OmegaConf.to_container(OmegaConf.load(data_file), resolve=True)
    if not isinstance(data, dict):
        raise ValueError(f"Data file {data_file} must contain a mapping of keys to values")
    return data


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    name: Annotated[str, typer.Argument(help="Template identifier (e.g., 'profile' or 'emails::welcome')")],
    directory: DirectoryOption = None,
    config: ConfigOption = None,
    data: Annotated[
        Optional[List[str]],
        typer.Option("--data", help="Template data as key=value (repeatable)"),
    ] = None,
    data_file: Annotated[
        Optional[Path],
        typer.Option("--data-file", help="YAML file with template data"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write output to this file instead of stdout"),
    ] = None,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Write a DEBUG session log (template.log) to this directory"),
    ] = None,
):
    """
    Render a template.

    Data from --data-file is loaded first; --data pairs override it.

    Examples:\n

        $ render_template.py render profile -d views --data name=Jane

        $ render_template.py render profile -d views -o profile.html
    """
    if log_dir is not None:
        setup_templating_logger(log_dir, directory=directory)

    pairs = parse_data_pairs(data or [])

    try:
        template_data = load_data_file(data_file) if data_file is not None else {}
    except (FileNotFoundError, ValueError, yaml.YAMLError, OmegaConfBaseException) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    template_data.update(pairs)

    try:
        engine = build_engine(directory, config)
        result = engine.render(name, template_data)
    except (TemplateError, FileNotFoundError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output is None:
        typer.echo(result, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")
    typer.secho(f"Wrote {output}", fg=typer.colors.GREEN, err=True)


@app.command("exists")
def exists_command(
    name: Annotated[str, typer.Argument(help="Template identifier")],
    directory: DirectoryOption = None,
    config: ConfigOption = None,
):
    """Exit with code 0 if the template exists, 1 otherwise."""
    try:
        found = build_engine(directory, config).exists(name)
    except (TemplateError, FileNotFoundError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if found:
        typer.secho(f"✓ {name}", fg=typer.colors.GREEN)
        return

    typer.secho(f"✗ {name} not found", fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.command("path")
def path_command(
    name: Annotated[str, typer.Argument(help="Template identifier")],
    directory: DirectoryOption = None,
    config: ConfigOption = None,
):
    """Print the resolved path of a template, or the first path tried if it is missing."""
    try:
        path = build_engine(directory, config).path(name)
    except (TemplateError, FileNotFoundError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo("(in-memory)" if path is None else str(path))


if __name__ == "__main__":
    app()
