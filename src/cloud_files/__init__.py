# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/cloud_files/__init__.py

"""
Cloud Files Library

A Python client for the WebDAV file interface of a Nextcloud-style server:
upload, download, list, move and organise remote files.

Basic usage:
    from cloud_files import load_config, make_operations

    files = make_operations(load_config())
    files.create_folder_hierarchy("/Reports/2026/Q1")
    with open("summary.pdf", "rb") as f:
        files.pipe_stream("/Reports/2026/Q1/summary.pdf", f)

For more control:
    from cloud_files.webdav import WebDAVTransport
    from cloud_files.operations import FileOperations

    transport = WebDAVTransport("https://cloud.example.org", "alice", "app-token")
    files = FileOperations(transport)
"""

# Config
from cloud_files.config import (
    ClientConfig,
    ServerAuth,
    load_config,
    make_operations,
    make_transport,
)

# Errors
from cloud_files.errors import (
    CloudFilesError,
    ForbiddenError,
    NotConnectedError,
    NotFoundError,
    NotReadyError,
)

# Operations
from cloud_files.operations import FileOperations, translate_errors
from cloud_files.paths import ancestors, sanitize
from cloud_files.streams import RemoteReader, RemoteWriter
from cloud_files.types import FileDetails
from cloud_files.webdav import TransportError, WebDAVTransport

# CLI
from cloud_files.cli import cli

__all__ = [
    # Config
    "ClientConfig",
    "ServerAuth",
    "load_config",
    "make_operations",
    "make_transport",
    # Errors
    "CloudFilesError",
    "ForbiddenError",
    "NotConnectedError",
    "NotFoundError",
    "NotReadyError",
    "TransportError",
    # Operations
    "FileOperations",
    "translate_errors",
    "ancestors",
    "sanitize",
    # Types
    "FileDetails",
    "RemoteReader",
    "RemoteWriter",
    "WebDAVTransport",
    # CLI
    "cli",
]
