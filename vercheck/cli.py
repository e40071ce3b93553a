"""CLI interface for VERCHECK.

This module provides the Typer-based command-line interface:

    vercheck check      Compare the running version against a manifest
    vercheck compare    Order two version strings
    vercheck publish    Write an application's manifest
    vercheck show       Print an application's published version
    vercheck list       Print every published manifest
    vercheck config     Show or change configuration
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer

from vercheck.config.manager import ConfigManager
from vercheck.manifest import ManifestStore, check_for_update, source_for
from vercheck.utils.console import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
    show_version,
)
from vercheck.utils.errors import ExitCode, VercheckError
from vercheck.utils.logging import setup_logging
from vercheck.version import compare_versions

app = typer.Typer(
    name="vercheck",
    help="VERCHECK - Plain-text version manifests and update checks",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        show_version()
        raise typer.Exit()


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Turn library errors into a printed message and an exit code."""
    try:
        yield
    except VercheckError as e:
        print_error(str(e))
        raise typer.Exit(int(e.exit_code)) from e
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(int(ExitCode.GENERAL_ERROR)) from e
    except KeyboardInterrupt as e:
        print_error("Interrupted")
        raise typer.Exit(int(ExitCode.GENERAL_ERROR)) from e


def _load_config() -> ConfigManager:
    config = ConfigManager()
    config.load()
    return config


def _store_for(directory: Path | None, config: ConfigManager) -> ManifestStore:
    return ManifestStore(directory or Path(config.settings.manifest_dir))


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """VERCHECK - Plain-text version manifests and update checks."""
    setup_logging()


@app.command()
def check(
    url: Annotated[
        str | None,
        typer.Option(
            "--url",
            "-u",
            help="Manifest URL or path (default: MANIFEST_URL, or MANIFEST_BASE_URL + app name)",
        ),
    ] = None,
    app_name: Annotated[
        str | None,
        typer.Option("--app", "-a", help="Application name (default: APP_NAME)"),
    ] = None,
    current: Annotated[
        str | None,
        typer.Option("--current", "-c", help="Running version (default: CURRENT_VERSION)"),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="Fetch timeout in seconds (default: FETCH_TIMEOUT_SECONDS)"),
    ] = None,
    fail_on_update: Annotated[
        bool,
        typer.Option(
            "--fail-on-update",
            help=f"Exit with code {int(ExitCode.UPDATE_AVAILABLE)} when an update is available",
        ),
    ] = False,
) -> None:
    """Check whether a newer version has been published."""
    with _handle_errors():
        config = _load_config()
        settings = config.settings

        if timeout is not None and timeout <= 0:
            print_error(f"Invalid --timeout: {timeout} (must be greater than 0)")
            raise typer.Exit(int(ExitCode.GENERAL_ERROR))

        if url and app_name:
            print_warning("--app is ignored when --url is given")
        elif app_name and settings.manifest_url and not settings.manifest_base_url:
            print_warning("--app is ignored: MANIFEST_BASE_URL is not set, using MANIFEST_URL")

        location = url or settings.resolve_manifest_url(app_name)
        if not location:
            print_error(
                "No manifest location: pass --url, or configure MANIFEST_URL "
                "or MANIFEST_BASE_URL and APP_NAME"
            )
            raise typer.Exit(int(ExitCode.GENERAL_ERROR))

        current_version = current or settings.current_version
        if not current_version:
            print_error("No current version: pass --current or configure CURRENT_VERSION")
            raise typer.Exit(int(ExitCode.GENERAL_ERROR))

        source = source_for(
            location,
            timeout_seconds=timeout if timeout is not None else settings.fetch_timeout_seconds,
            user_agent=settings.user_agent,
        )
        result = check_for_update(source, current_version)

    if result.update_available:
        print_warning(
            f"Update available: {result.remote_version} (current {result.current_version})"
        )
        if fail_on_update:
            raise typer.Exit(int(ExitCode.UPDATE_AVAILABLE))
    else:
        print_success(f"Up to date ({result.current_version})")


@app.command()
def compare(
    first: Annotated[str, typer.Argument(help="First version")],
    second: Annotated[str, typer.Argument(help="Second version")],
) -> None:
    """Compare two versions by semantic versioning precedence."""
    with _handle_errors():
        ordering = compare_versions(first, second)
    console.print(
        f"{first.strip()} {ordering.symbol} {second.strip()}", markup=False, soft_wrap=True
    )


@app.command()
def publish(
    app_name: Annotated[str, typer.Argument(help="Application name")],
    version: Annotated[str, typer.Argument(help="Version to publish")],
    directory: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Manifest directory (default: MANIFEST_DIR)"),
    ] = None,
) -> None:
    """Create or overwrite an application's manifest."""
    with _handle_errors():
        store = _store_for(directory, _load_config())
        entry = store.publish(app_name, version)
    print_success(f"Published {entry.app_name} {entry.version} to {entry.path}")


@app.command()
def show(
    app_name: Annotated[str, typer.Argument(help="Application name")],
    directory: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Manifest directory (default: MANIFEST_DIR)"),
    ] = None,
) -> None:
    """Print the version published for an application."""
    with _handle_errors():
        entry = _store_for(directory, _load_config()).read(app_name)
    console.print(entry.version, markup=False, soft_wrap=True)


@app.command("list")
def list_manifests(
    directory: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Manifest directory (default: MANIFEST_DIR)"),
    ] = None,
) -> None:
    """List every published manifest."""
    with _handle_errors():
        store = _store_for(directory, _load_config())
        entries = store.list_entries()

    if not entries:
        print_info(f"No manifests in {store.directory}")
        return
    for entry in entries:
        console.print(f"{entry.app_name} {entry.version}", markup=False, soft_wrap=True)


@app.command("config")
def config_command(
    key: Annotated[str | None, typer.Argument(help="Config key to read or set")] = None,
    value: Annotated[str | None, typer.Argument(help="Value to save for KEY")] = None,
    local: Annotated[
        bool,
        typer.Option("--local", help="Save to the project's .vercheck instead of the global file"),
    ] = False,
) -> None:
    """Show configuration, read one key, or save KEY VALUE."""
    with _handle_errors():
        config = _load_config()

        if key is None:
            config.show()
            return

        if value is None:
            console.print(
                f"{key}={config.get(key)} ({config.get_config_source(key)})",
                markup=False,
                soft_wrap=True,
            )
            return

        if config.settings.get_attribute_for_key(key) is None:
            print_warning(f"Unknown config key '{key}' (saved anyway)")
        warning = config.save(key, value, scope="local" if local else "global")

    print_success(f"Saved {key}")
    if warning:
        print_warning(warning)


__all__ = [
    "app",
    "main",
    "check",
    "compare",
    "publish",
    "show",
    "list_manifests",
    "config_command",
]
