"""Command-line interface for gitdiff."""

from pathlib import Path
from typing import Optional

import click

from gitdiff import __version__
from gitdiff.config_loader import ConfigLoadError, load_config, validate_config_file
from gitdiff.diff_fetcher import DiffExecutionError, fetch_diff


@click.group()
@click.version_option(version=__version__, prog_name="gitdiff")
def main():
    """
    gitdiff - fetch git diff output safely.

    Runs git diff with an explicit argument list (never through a shell),
    so revision ranges and paths with spaces or special characters are
    passed through untouched.

    \b
    Examples:
      gitdiff fetch                          Uncommitted changes
      gitdiff fetch -r HEAD~1..HEAD          Last commit
      gitdiff fetch "file with spaces.txt"   Restrict to one path
      gitdiff fetch --raw -o out.diff        Save raw bytes to a file
    """
    pass


@main.command()
@click.argument("paths", nargs=-1)
@click.option(
    "--range",
    "-r",
    "rev_range",
    help="Revision range, e.g. HEAD~1..HEAD (default: working tree vs index)",
)
@click.option(
    "--cwd",
    "-C",
    "working_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Run git in this directory",
)
@click.option(
    "--raw",
    is_flag=True,
    help="Emit raw bytes without UTF-8 decoding",
)
@click.option(
    "--max-output-bytes",
    type=click.IntRange(min=1),
    help="Fail if git writes more than this many bytes",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the diff to a file instead of stdout",
)
def fetch(
    paths: tuple[str, ...],
    rev_range: Optional[str],
    working_dir: Optional[Path],
    raw: bool,
    max_output_bytes: Optional[int],
    output: Optional[Path],
) -> None:
    """
    Print the output of git diff.

    \b
    PATHS: Optional path filters, passed to git after "--"
    """
    try:
        config = load_config()
    except ConfigLoadError as e:
        click.secho(f"Error loading configuration: {e}", fg="red", err=True)
        raise click.exceptions.Exit(1) from e

    validation_errors = config.validate()
    if validation_errors:
        click.secho("Invalid configuration:", fg="red", err=True)
        for error in validation_errors:
            click.secho(f"  - {error}", fg="red", err=True)
        raise click.exceptions.Exit(1)

    options = config.to_diff_options(
        working_dir=working_dir,
        raw=True if raw else None,
        max_output_bytes=max_output_bytes,
    )

    try:
        diff = fetch_diff(rev_range or config.default_range, list(paths), options)
    except (DiffExecutionError, ValueError) as e:
        click.secho(str(e), fg="red", err=True)
        raise click.exceptions.Exit(1) from e

    if output is not None:
        if isinstance(diff, bytes):
            output.write_bytes(diff)
        else:
            output.write_text(diff, encoding="utf-8")
        click.secho(f"✓ Diff written to {output}", fg="green", err=True)
    elif isinstance(diff, bytes):
        stdout = click.get_binary_stream("stdout")
        stdout.write(diff)
        stdout.flush()
    else:
        click.echo(diff, nl=False)


@main.group()
def config():
    """Manage gitdiff configuration."""
    pass


@config.command("validate")
@click.option(
    "--global-config",
    "-g",
    type=click.Path(exists=True, path_type=Path),
    help="Path to global config file (default: ~/.gitdiff/config.yml)",
)
@click.option(
    "--project-config",
    "-p",
    type=click.Path(exists=True, path_type=Path),
    help="Path to project config file (default: ./.gitdiff.yml)",
)
def validate_config(global_config: Optional[Path], project_config: Optional[Path]) -> None:
    """
    Validate configuration files.

    Checks global and/or project configuration for errors.
    """
    from gitdiff.config import get_default_config_path, get_project_config_path

    if global_config is None:
        global_config = get_default_config_path()
    if project_config is None:
        project_config = get_project_config_path()

    has_errors = False

    for label, path in (("global", global_config), ("project", project_config)):
        if not path.exists():
            click.secho(f"  ⚠ {label.capitalize()} config not found: {path}", fg="yellow")
            continue

        click.echo(f"Validating {label} config: {path}")
        is_valid, errors = validate_config_file(path, project=(label == "project"))
        if is_valid:
            click.secho(f"  ✓ {label.capitalize()} config is valid", fg="green")
        else:
            click.secho(f"  ✗ {label.capitalize()} config has errors:", fg="red")
            for error in errors:
                click.secho(f"    - {error}", fg="red")
            has_errors = True

    click.echo("\nLoading merged configuration...")
    try:
        merged_config = load_config(global_config, project_config)
    except ConfigLoadError as e:
        click.secho(f"  ✗ Failed to load merged config: {e}", fg="red")
        has_errors = True
    else:
        validation_errors = merged_config.validate()
        if validation_errors:
            click.secho("  ✗ Merged config has errors:", fg="red")
            for error in validation_errors:
                click.secho(f"    - {error}", fg="red")
            has_errors = True
        else:
            click.secho("  ✓ Merged config is valid", fg="green")

    click.echo("\n" + "=" * 50)
    if has_errors:
        click.secho("Configuration validation FAILED", fg="red", bold=True)
        raise click.exceptions.Exit(1)
    click.secho("Configuration validation PASSED", fg="green", bold=True)


@config.command("show")
@click.option(
    "--global-config",
    "-g",
    type=click.Path(exists=True, path_type=Path),
    help="Path to global config file",
)
@click.option(
    "--project-config",
    "-p",
    type=click.Path(exists=True, path_type=Path),
    help="Path to project config file",
)
def show_config(global_config: Optional[Path], project_config: Optional[Path]) -> None:
    """Display the current merged configuration."""
    try:
        merged_config = load_config(global_config, project_config)
    except ConfigLoadError as e:
        click.secho(f"Error loading configuration: {e}", fg="red")
        raise click.exceptions.Exit(1) from e

    click.echo("Current gitdiff Configuration")
    click.echo("=" * 50)
    click.echo(f"Git Executable: {merged_config.git_executable}")
    click.echo(f"Max Output Bytes: {merged_config.max_output_bytes}")
    click.echo(f"Raw Output: {merged_config.raw}")
    click.echo(f"Default Range: {merged_config.default_range or '(working tree)'}")

    if merged_config.metadata:
        click.echo("\nMetadata:")
        for key, value in merged_config.metadata.items():
            click.echo(f"  {key}: {value}")


if __name__ == "__main__":
    main()
