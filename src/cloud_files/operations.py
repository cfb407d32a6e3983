# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/cloud_files/operations.py

"""
Cloud Files Operations

File-level operations on top of a WebDAV transport. Every public method takes
a raw, unescaped remote path as its first argument; it is sanitized once on
the way in, and HTTP 404/403 failures come back out as NotFoundError and
ForbiddenError carrying that raw path.

The transport is any object with the raw operations of WebDAVTransport
(put, get, move, copy, mkdir, exists, delete, readdir, propfind,
prepare_for_streaming, open_write_stream, open_read_stream).
"""

import logging
from urllib.parse import unquote

from cloud_files.errors import (
    ForbiddenError,
    NotConnectedError,
    NotFoundError,
    NotReadyError,
)
from cloud_files.paths import ancestors, parent, sanitize
from cloud_files.streams import DEFAULT_CHUNK_SIZE, RemoteReader, RemoteWriter, drain, pipe
from cloud_files.types import FileDetails

# Configure logger for this module
logger = logging.getLogger(__name__)


def translate_errors(func):
    """Decorator for operations whose first argument (after self) is a raw path.

    Sanitizes the path, calls through, and maps HTTP 404 and 403 failures to
    NotFoundError / ForbiddenError carrying the raw path. Any other failure
    is re-raised unchanged.
    """
    def wrapper(self, path, *args, **kwargs):
        try:
            return func(self, sanitize(path), *args, **kwargs)
        except Exception as e:
            status_code = getattr(e, "status_code", None)
            if status_code == 404:
                raise NotFoundError(path) from e
            if status_code == 403:
                raise ForbiddenError(path) from e
            raise
    wrapper.__name__ = func.__name__
    wrapper.__qualname__ = func.__qualname__
    wrapper.__doc__ = func.__doc__
    return wrapper


def _exists(transport, sane_path: str) -> bool:
    """
    True only if every ancestor of the path, and the path itself, exists.

    Stops at the first missing ancestor. The server may keep a record for a
    path whose parent folder was never created; such a path is reported as
    missing here.
    """
    for sane_ancestor in ancestors(sane_path):
        if not transport.exists(sane_ancestor):
            logger.debug(f"exists: {sane_ancestor} is missing")
            return False
    return True


def _touch_folder(transport, sane_path: str) -> bool:
    """Create one folder unless the server already has it. True if created."""
    if transport.exists(sane_path):
        return False
    transport.mkdir(sane_path)
    logger.info(f"created folder {sane_path}")
    return True


def _create_folder_hierarchy(transport, sane_path: str) -> int:
    """
    Create every missing folder of the path, parents before children.

    Folders created before a failure are left in place; calling again picks
    up where the failed call stopped.

    Returns:
        Number of folders created
    """
    created = 0
    for sane_folder in ancestors(sane_path):
        if _touch_folder(transport, sane_folder):
            created += 1
    return created


class FileOperations:
    """File operations against one remote account."""

    def __init__(self, transport, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Args:
            transport: Connected WebDAVTransport (or compatible object); not
                       owned, closing it is up to the caller
            chunk_size: Bytes per read when streaming
        """
        if transport is None:
            raise NotConnectedError("No transport configured")
        self.transport = transport
        self.chunk_size = chunk_size

    # -------------------------------------------------------------------------
    # Folders
    # -------------------------------------------------------------------------

    @translate_errors
    def create_folder_hierarchy(self, path: str) -> int:
        """Create a folder and all of its missing parents. Returns the number created."""
        return _create_folder_hierarchy(self.transport, path)

    @translate_errors
    def touch_folder(self, path: str) -> bool:
        """Create a single folder if absent. The parent must exist."""
        return _touch_folder(self.transport, path)

    @translate_errors
    def get_files(self, path: str) -> list[str]:
        """Names of the entries in a folder.

        Raises NotReadyError if the server answers with something that is not
        a listing, so an empty folder can be told apart from a broken one.
        """
        files = self.transport.readdir(path)
        if not isinstance(files, list):
            raise NotReadyError(f"Listing of {path} is not ready")
        return files

    @translate_errors
    def get_folder_file_details(
        self, path: str, extra_properties: list[tuple[str, str]] = None
    ) -> list[FileDetails]:
        """Details of every entry in a folder (the folder itself excluded)."""
        details = self.transport.propfind(path, depth=1, extra_properties=extra_properties)
        if not isinstance(details, list):
            raise NotReadyError(f"Listing of {path} is not ready")
        own_path = "/" + unquote(path).strip("/")
        return [entry for entry in details if entry.path != own_path]

    @translate_errors
    def get_properties(self, path: str, extra_properties: list[tuple[str, str]] = None) -> FileDetails:
        """Details of a single file or folder."""
        details = self.transport.propfind(path, depth=0, extra_properties=extra_properties)
        if not details:
            raise NotReadyError(f"Properties of {path} are not ready")
        return details[0]

    def check_connectivity(self) -> bool:
        """True if the root folder can be listed."""
        try:
            self.get_files("/")
        except Exception as e:
            logger.debug(f"check_connectivity: {type(e).__name__}: {e}")
            return False
        return True

    # -------------------------------------------------------------------------
    # Files and folders
    # -------------------------------------------------------------------------

    @translate_errors
    def exists(self, path: str) -> bool:
        """True if the path and every folder above it exist."""
        return _exists(self.transport, path)

    @translate_errors
    def remove(self, path: str) -> None:
        self.transport.delete(path)

    @translate_errors
    def rename(self, path: str, new_name: str) -> None:
        """
        Give a file or folder a new name in the same folder.

        Replaces an existing entry called new_name.
        """
        if "/" in new_name:
            raise ValueError(f"New name must not contain '/': {new_name}")
        self.transport.move(path, parent(path) + sanitize(new_name), overwrite=True)

    @translate_errors
    def move(self, path: str, dest: str) -> None:
        """Move to another path. Fails if dest already exists."""
        self.transport.move(path, sanitize(dest), overwrite=False)

    @translate_errors
    def copy(self, path: str, dest: str) -> None:
        """Copy to another path. Fails if dest already exists."""
        self.transport.copy(path, sanitize(dest), overwrite=False)

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------

    @translate_errors
    def put(self, path: str, content) -> None:
        """Write a whole file from bytes or str."""
        self.transport.put(path, content)

    @translate_errors
    def get(self, path: str) -> bytes:
        """Read a whole file into memory."""
        return self.transport.get(path)

    @translate_errors
    def get_read_stream(self, path: str) -> RemoteReader:
        """Open a file for streamed reading. Close the reader when done."""
        return self._open_read_stream(path)

    @translate_errors
    def get_write_stream(self, path: str) -> RemoteWriter:
        """Open a file for writing; the content is uploaded when the writer is closed."""
        return self._open_write_stream(path)

    @translate_errors
    def pipe_stream(self, path: str, source, length: int = None) -> int:
        """
        Upload a local stream to a file without holding it in memory.

        Args:
            path: Remote file path
            source: File-like object with read(), or an iterable of byte chunks
            length: Exact size of the source if known

        Returns:
            Number of bytes uploaded
        """
        writer = self._open_write_stream(path)
        return pipe(source, writer, self.chunk_size, length=length)

    @translate_errors
    def download_to_stream(self, path: str, sink) -> int:
        """Stream a file into anything with write(). Returns the number of bytes."""
        reader = self._open_read_stream(path)
        return drain(reader, sink, self.chunk_size)

    def _open_write_stream(self, sane_path: str) -> RemoteWriter:
        # The server needs the file to exist before a stream is opened on it
        self.transport.put(sane_path, b"")
        self.transport.prepare_for_streaming(sane_path)
        return self.transport.open_write_stream(sane_path)

    def _open_read_stream(self, sane_path: str) -> RemoteReader:
        self.transport.prepare_for_streaming(sane_path)
        return self.transport.open_read_stream(sane_path, chunk_size=self.chunk_size)
