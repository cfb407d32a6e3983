# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/cloud_files/config.py

"""
Cloud Files Configuration Management

Reads a toml config file:
  /etc/cloud-files/config.toml  -- server url, auth file path, transfer settings

The location can be overridden with the CLOUD_FILES_CONFIG environment
variable. Auth credentials live in a separate file referenced by
[server].auth_file.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from cloud_files.operations import FileOperations
from cloud_files.streams import DEFAULT_CHUNK_SIZE
from cloud_files.webdav import DEFAULT_DAV_PATH, WebDAVTransport


DEFAULT_CONFIG = Path("/etc/cloud-files/config.toml")
CONFIG_ENV_VAR = "CLOUD_FILES_CONFIG"


@dataclass
class ServerAuth:
    """Credentials for the WebDAV endpoint."""
    user: str
    password: str

    def to_auth_string(self) -> str:
        return f"{self.user}:{self.password}"

    def to_tuple(self) -> tuple:
        return (self.user, self.password)


@dataclass
class ClientConfig:
    """Complete client configuration."""
    url: Optional[str] = None
    auth: Optional[ServerAuth] = None
    dav_path: str = DEFAULT_DAV_PATH
    verify_ssl: bool = True
    timeout: Optional[float] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def dav_root(self) -> Optional[str]:
        """Full URL of the configured user's DAV root."""
        if not self.url or not self.auth:
            return None
        return self.url.rstrip("/") + self.dav_path.format(user=self.auth.user)

    def validate(self) -> tuple[list[str], list[str]]:
        """
        Validate configuration, return (errors, warnings).
        Empty errors list means config is valid for operations.
        """
        errors = []
        warnings = []

        if not self.url:
            errors.append("server url is not set")
        else:
            scheme = urlparse(self.url).scheme
            if scheme not in ("http", "https"):
                errors.append(f"server url '{self.url}' must start with http:// or https://")
            elif scheme == "http":
                warnings.append("server url uses plain http; credentials are sent unencrypted")

        if not self.auth:
            errors.append("no server auth configured")

        if "{user}" not in self.dav_path:
            warnings.append(f"dav_path '{self.dav_path}' has no {{user}} placeholder")

        if self.chunk_size <= 0:
            errors.append(f"chunk_size must be positive, got {self.chunk_size}")

        if not self.verify_ssl:
            warnings.append("TLS certificate verification is disabled")

        return errors, warnings


def _load_auth(auth_file: Path) -> ServerAuth:
    """Read auth file containing 'user:password'.

    Raises:
        FileNotFoundError: If auth file doesn't exist
        ValueError: If auth file format is invalid
    """
    if not auth_file.exists():
        raise FileNotFoundError(f"Auth file not found: {auth_file}")

    text = auth_file.read_text().strip()
    if ":" not in text:
        raise ValueError(f"Invalid auth file format (expected 'user:password'): {auth_file}")

    user, password = text.split(":", 1)
    return ServerAuth(user=user, password=password)


def default_config_path() -> Path:
    """Config path from CLOUD_FILES_CONFIG, falling back to DEFAULT_CONFIG."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG


def load_config(config_path: Path = None) -> ClientConfig:
    """Load config from a toml file. Returns ClientConfig.

    Args:
        config_path: Path to config.toml. Default: $CLOUD_FILES_CONFIG or
                     /etc/cloud-files/config.toml

    Returns:
        ClientConfig object

    Raises:
        FileNotFoundError: If config file or auth file doesn't exist
        ValueError: If config file is invalid
    """
    config_file = config_path or default_config_path()

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    with open(config_file, "rb") as f:
        try:
            config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config file {config_file}: {e}") from e

    server = config.get("server", {})
    transfer = config.get("transfer", {})

    # Parse auth from file; relative paths are relative to the config file
    auth = None
    if "auth_file" in server:
        auth_file = Path(server["auth_file"])
        if not auth_file.is_absolute():
            auth_file = config_file.parent / auth_file
        auth = _load_auth(auth_file)

    return ClientConfig(
        url=server.get("url"),
        auth=auth,
        dav_path=server.get("dav_path", DEFAULT_DAV_PATH),
        verify_ssl=server.get("verify_ssl", True),
        timeout=server.get("timeout"),
        chunk_size=transfer.get("chunk_size", DEFAULT_CHUNK_SIZE),
    )


def make_transport(config: ClientConfig) -> WebDAVTransport:
    """Create a WebDAVTransport from config."""
    errors, _ = config.validate()
    if errors:
        raise ValueError(f"Invalid config: {'; '.join(errors)}")

    return WebDAVTransport(
        config.url,
        config.auth.user,
        config.auth.password,
        dav_path=config.dav_path,
        verify=config.verify_ssl,
        timeout=config.timeout,
    )


def make_operations(config: ClientConfig) -> FileOperations:
    """Create FileOperations bound to a new transport from config."""
    return FileOperations(make_transport(config), chunk_size=config.chunk_size)
