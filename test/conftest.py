# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# test/conftest.py

"""Shared fixtures: an in-memory stand-in for WebDAVTransport."""

import io
from urllib.parse import unquote

import pytest

from cloud_files.paths import basename
from cloud_files.streams import RemoteWriter
from cloud_files.types import FileDetails, TYPE_DIRECTORY, TYPE_FILE
from cloud_files.webdav import TransportError


class FakeTransport:
    """
    Keeps folders and files in memory, keyed by sanitized path, and records
    every raw call in order.

    Args:
        folders: Sanitized folder paths that exist ("/" always does)
        files: Sanitized file path -> bytes
        records: Paths the server reports as existing without their parents
    """

    def __init__(self, folders=(), files=None, records=()):
        self.folders = {"/"} | set(folders)
        self.files = dict(files or {})
        self.records = set(records)
        self.calls = []
        self.errors = {}            # (method, path) -> exception to raise
        self.listings = {}          # path -> raw readdir/propfind result override
        self.stream_error = None    # raised after the first chunk of a streamed put
        self.readers = []

    def _call(self, method, *args):
        self.calls.append((method,) + args)
        error = self.errors.get((method, args[0]))
        if error is not None:
            raise error

    def calls_to(self, method):
        return [call[1:] for call in self.calls if call[0] == method]

    def _missing(self, path):
        return TransportError(f"{path}: not found", 404)

    def _children(self, path):
        found = []
        for entry in sorted(self.folders | set(self.files)):
            if entry == "/" or entry == path:
                continue
            if (entry.rsplit("/", 1)[0] or "/") == path:
                found.append(entry)
        return found

    def _details(self, path):
        return FileDetails(
            path=unquote(path),
            name=basename(path),
            type=TYPE_DIRECTORY if path in self.folders else TYPE_FILE,
            size=len(self.files.get(path, b"")),
        )

    def exists(self, path):
        self._call("exists", path)
        return path in self.folders or path in self.files or path in self.records

    def mkdir(self, path):
        self._call("mkdir", path)
        self.folders.add(path)

    def put(self, path, content, length=None):
        self._call("put", path, length)
        if isinstance(content, str):
            content = content.encode("utf-8")
        if not isinstance(content, (bytes, bytearray)):
            chunks = []
            for chunk in content:
                chunks.append(chunk)
                if self.stream_error is not None:
                    raise self.stream_error
            content = b"".join(chunks)
        self.files[path] = bytes(content)

    def get(self, path):
        self._call("get", path)
        if path not in self.files:
            raise self._missing(path)
        return self.files[path]

    def move(self, path, dest, overwrite=False):
        self._call("move", path, dest, overwrite)
        if path not in self.files:
            raise self._missing(path)
        if dest in self.files and not overwrite:
            raise TransportError(f"{dest}: exists", 412)
        self.files[dest] = self.files.pop(path)

    def copy(self, path, dest, overwrite=False):
        self._call("copy", path, dest, overwrite)
        if path not in self.files:
            raise self._missing(path)
        if dest in self.files and not overwrite:
            raise TransportError(f"{dest}: exists", 412)
        self.files[dest] = self.files[path]

    def delete(self, path):
        self._call("delete", path)
        if path in self.files:
            del self.files[path]
        elif path in self.folders:
            self.folders.discard(path)
        else:
            raise self._missing(path)

    def readdir(self, path):
        self._call("readdir", path)
        if path in self.listings:
            return self.listings[path]
        if path not in self.folders:
            raise self._missing(path)
        return [basename(entry) for entry in self._children(path)]

    def propfind(self, path, depth=1, extra_properties=None):
        self._call("propfind", path, depth)
        if path in self.listings:
            return self.listings[path]
        if path not in self.folders and path not in self.files:
            raise self._missing(path)
        details = [self._details(path)]
        if depth:
            details.extend(self._details(entry) for entry in self._children(path))
        return details

    def prepare_for_streaming(self, path):
        self._call("prepare_for_streaming", path)

    def open_write_stream(self, path):
        self._call("open_write_stream", path)
        return RemoteWriter(self, path)

    def open_read_stream(self, path, chunk_size=None):
        self._call("open_read_stream", path)
        if path not in self.files:
            raise self._missing(path)
        reader = io.BytesIO(self.files[path])
        self.readers.append(reader)
        return reader


@pytest.fixture
def transport():
    return FakeTransport()
