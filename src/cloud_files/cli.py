# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/cloud_files/cli.py

"""
Cloud Files Command Line Interface

Thin wrapper around the operations module.
"""

from pathlib import Path
import json
import re
import sys

import click
import requests

from cloud_files import config as config_module
from cloud_files.errors import CloudFilesError
from cloud_files.operations import FileOperations
from cloud_files.paths import parent
from cloud_files.webdav import TransportError


def handle_api_error(func):
    """Decorator to catch API and connection errors."""
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TransportError as e:
            click.echo(f"Error: Server error: {e}", err=True)
            sys.exit(1)
        except CloudFilesError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        except (FileNotFoundError, ValueError) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        except requests.exceptions.ConnectionError as e:
            msg = str(e)
            click.echo("Error: Could not connect to server", err=True)
            if "host=" in msg:
                match = re.search(r"host='([^']+)'", msg)
                if match:
                    click.echo(f"  Host: {match.group(1)}", err=True)
            click.echo("  Check [server].url in the config", err=True)
            sys.exit(1)
        except requests.exceptions.RequestException as e:
            click.echo(f"Error: Network error: {e}", err=True)
            sys.exit(1)
    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper


def remote_path(ctx, param, value):
    """Remote paths are always absolute; accept "Documents/x" as "/Documents/x"."""
    if value is None or value.startswith("/"):
        return value
    return "/" + value


def _operations(config_file: Path) -> FileOperations:
    config = config_module.load_config(config_file)
    return config_module.make_operations(config)


config_file_option = click.option(
    "--config-file",
    type=click.Path(exists=True, path_type=Path),
    help="Config file path (default: $CLOUD_FILES_CONFIG or /etc/cloud-files/config.toml)",
)


@click.group()
def cli():
    """Cloud Files CLI."""
    pass


@cli.command()
@click.argument("path", default="/", callback=remote_path)
@click.option("--details", is_flag=True, help="Print full details as JSON")
@config_file_option
@handle_api_error
def ls(path: str, details: bool, config_file: Path) -> None:
    """
    List the entries of a remote folder.

    Examples:

        cloud-files ls /Documents

        cloud-files ls "/Shared/Annual reports" --details
    """
    ops = _operations(config_file)
    if details:
        entries = ops.get_folder_file_details(path)
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
    else:
        for name in ops.get_files(path):
            click.echo(name)


@cli.command()
@click.argument("path", callback=remote_path)
@config_file_option
@handle_api_error
def mkdir(path: str, config_file: Path) -> None:
    """
    Create a remote folder, including any missing parent folders.
    """
    ops = _operations(config_file)
    created = ops.create_folder_hierarchy(path)
    click.echo(f"{path}: {created} folder(s) created")


@cli.command()
@click.argument("local", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("remote", callback=remote_path)
@click.option("--parents/--no-parents", default=True, help="Create missing remote folders first")
@config_file_option
@handle_api_error
def upload(local: Path, remote: str, parents: bool, config_file: Path) -> None:
    """
    Upload a local file, streaming it to the server.

    Examples:

        cloud-files upload report.pdf "/Shared/Annual reports/2026.pdf"
    """
    ops = _operations(config_file)
    folder = parent(remote).rstrip("/")
    if parents and folder:
        ops.create_folder_hierarchy(folder)

    size = local.stat().st_size
    with open(local, "rb") as f:
        sent = ops.pipe_stream(remote, f, length=size)
    click.echo(f"uploaded {local} to {remote} ({sent} bytes)")


@cli.command()
@click.argument("remote", callback=remote_path)
@click.argument("local", required=False, type=click.Path(dir_okay=False, path_type=Path))
@config_file_option
@handle_api_error
def download(remote: str, local: Path, config_file: Path) -> None:
    """
    Download a remote file to LOCAL, or to stdout when LOCAL is omitted.
    """
    ops = _operations(config_file)
    if local is None:
        ops.download_to_stream(remote, click.get_binary_stream("stdout"))
        return

    with open(local, "wb") as f:
        received = ops.download_to_stream(remote, f)
    click.echo(f"downloaded {remote} to {local} ({received} bytes)")


@cli.command()
@click.argument("path", callback=remote_path)
@config_file_option
@handle_api_error
def rm(path: str, config_file: Path) -> None:
    """
    Delete a remote file or folder.
    """
    ops = _operations(config_file)
    ops.remove(path)
    click.echo(f"removed {path}")


@cli.command()
@click.argument("src", callback=remote_path)
@click.argument("dest", callback=remote_path)
@config_file_option
@handle_api_error
def mv(src: str, dest: str, config_file: Path) -> None:
    """
    Move a remote file or folder. Fails if DEST exists.
    """
    ops = _operations(config_file)
    ops.move(src, dest)
    click.echo(f"moved {src} to {dest}")


@cli.command()
@click.argument("src", callback=remote_path)
@click.argument("dest", callback=remote_path)
@config_file_option
@handle_api_error
def cp(src: str, dest: str, config_file: Path) -> None:
    """
    Copy a remote file or folder. Fails if DEST exists.
    """
    ops = _operations(config_file)
    ops.copy(src, dest)
    click.echo(f"copied {src} to {dest}")


@cli.command()
@click.argument("path", callback=remote_path)
@click.argument("new_name")
@config_file_option
@handle_api_error
def rename(path: str, new_name: str, config_file: Path) -> None:
    """
    Rename a remote file or folder in place, replacing NEW_NAME if it exists.
    """
    ops = _operations(config_file)
    ops.rename(path, new_name)
    click.echo(f"renamed {path} to {new_name}")


@cli.command()
@click.argument("path", callback=remote_path)
@config_file_option
@handle_api_error
def exists(path: str, config_file: Path) -> None:
    """
    Exit 0 if PATH and all of its parent folders exist, 1 otherwise.
    """
    ops = _operations(config_file)
    found = ops.exists(path)
    click.echo("yes" if found else "no")
    sys.exit(0 if found else 1)


@cli.command()
@config_file_option
@handle_api_error
def check(config_file: Path) -> None:
    """
    Check that the server is reachable and the credentials work.
    """
    ops = _operations(config_file)
    if ops.check_connectivity():
        click.echo(f"✓ Connected to {ops.transport.root_url}")
    else:
        click.echo(f"✗ Cannot list {ops.transport.root_url}", err=True)
        sys.exit(1)


@cli.command()
@config_file_option
@click.option(
    "--validate-only",
    is_flag=True,
    help="Only validate config, don't display it",
)
def config(config_file: Path, validate_only: bool) -> None:
    """
    Display and validate the client configuration.

    Examples:

        cloud-files config                    # Display config with validation

        cloud-files config --validate-only    # Just check for errors
    """
    config_path = config_file or config_module.default_config_path()

    try:
        cfg = config_module.load_config(config_file)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(f"Create config at {config_path} or use --config-file", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    errors, warnings = cfg.validate()

    if not validate_only:
        click.echo(f"Config file: {config_path}")
        click.echo()
        click.echo("Settings:")
        click.echo(f"  url: {cfg.url or '(not set)'}")
        click.echo(f"  auth: {'configured for ' + cfg.auth.user if cfg.auth else '(not set)'}")
        click.echo(f"  dav root: {cfg.dav_root() or '(unknown)'}")
        click.echo(f"  verify_ssl: {cfg.verify_ssl}")
        click.echo(f"  timeout: {cfg.timeout if cfg.timeout is not None else '(none)'}")
        click.echo(f"  chunk_size: {cfg.chunk_size}")
        click.echo()

    if errors:
        click.echo("Errors:", err=True)
        for e in errors:
            click.echo(f"  ✗ {e}", err=True)
    if warnings:
        click.echo("Warnings:")
        for w in warnings:
            click.echo(f"  ⚠ {w}")
    if not errors and not warnings:
        click.echo("✓ Config is valid")
    sys.exit(1 if errors else 0)


def main():
    cli()


if __name__ == "__main__":
    main()
