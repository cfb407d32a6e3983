# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/cloud_files/streams.py

"""
Stream bridging between local byte streams and remote files.

Uploads are a single pull loop: the transport asks for the next chunk of the
source only after it has sent the previous one, so a slow server slows the
reads down instead of filling memory. Whichever side fails first decides the
error the caller sees, and the remote endpoint is closed on every exit path.
"""

import logging
import tempfile

# Configure logger for this module
logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

# write() buffers in memory up to this size, then spills to a temp file
SPOOL_MAX_SIZE = 8 * 1024 * 1024


def iter_chunks(source, chunk_size: int = DEFAULT_CHUNK_SIZE):
    """Yield byte chunks from a file-like object or an iterable of chunks."""
    if not hasattr(source, "read"):
        for chunk in source:
            if chunk:
                yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk
        return

    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            return
        yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk


class RemoteWriter:
    """Writable endpoint for one remote file.

    Bytes given to write() are spooled locally and uploaded when the writer
    is closed. send() streams an iterable straight into the upload instead.
    The remote file must already be primed (see WebDAVTransport.open_write_stream).
    """

    def __init__(self, transport, path: str, spool_size: int = SPOOL_MAX_SIZE):
        self.path = path
        self.bytes_written = 0
        self.closed = False
        self._transport = transport
        self._spool = tempfile.SpooledTemporaryFile(max_size=spool_size)
        self._sent = False

    def writable(self) -> bool:
        return not self.closed

    def write(self, data) -> int:
        if self.closed:
            raise ValueError(f"write to closed remote stream: {self.path}")
        if self._sent:
            raise ValueError(f"remote stream already uploaded: {self.path}")
        if isinstance(data, str):
            data = data.encode("utf-8")
        return self._spool.write(data)

    def send(self, chunks, length: int = None) -> int:
        """Upload an iterable of byte chunks as the file's content.

        Args:
            chunks: Iterable of bytes, consumed lazily by the transport
            length: Exact total size if known, sent as Content-Length

        Returns:
            Number of bytes handed to the transport
        """
        if self.closed:
            raise ValueError(f"send on closed remote stream: {self.path}")
        self._sent = True
        self._transport.put(self.path, self._count(chunks), length=length)
        logger.debug(f"RemoteWriter: uploaded {self.bytes_written} bytes to {self.path}")
        return self.bytes_written

    def _count(self, chunks):
        for chunk in chunks:
            self.bytes_written += len(chunk)
            yield chunk

    def close(self) -> None:
        """Upload anything spooled by write(), then release the spool."""
        if self.closed:
            return
        try:
            size = self._spool.tell()
            if size and not self._sent:
                self._spool.seek(0)
                self.send(iter_chunks(self._spool), length=size)
        finally:
            self._spool.close()
            self.closed = True

    def discard(self) -> None:
        """Release the spool without uploading it."""
        self._spool.close()
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.discard()
        else:
            self.close()


class RemoteReader:
    """Readable endpoint over a streamed HTTP response."""

    def __init__(self, response, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.chunk_size = chunk_size
        self.closed = False
        self._response = response

    def readable(self) -> bool:
        return not self.closed

    def read(self, size: int = -1) -> bytes:
        if self.closed:
            raise ValueError("read from closed remote stream")
        if size is None or size < 0:
            return self._response.raw.read(decode_content=True)
        return self._response.raw.read(size, decode_content=True)

    def __iter__(self):
        return self._response.iter_content(chunk_size=self.chunk_size)

    def close(self) -> None:
        if not self.closed:
            self._response.close()
            self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def pipe(source, writer: RemoteWriter, chunk_size: int = DEFAULT_CHUNK_SIZE, length: int = None) -> int:
    """
    Stream a local source into a remote writer.

    Args:
        source: File-like object with read(), or an iterable of byte chunks
        writer: Primed remote endpoint
        chunk_size: Bytes pulled from the source per read
        length: Exact source size, if known

    Returns:
        Number of bytes transferred

    Raises whatever the source raised if it failed first, otherwise whatever
    the transport raised. The writer is always closed; the source is left to
    the caller.
    """
    source_errors = []

    def chunks():
        try:
            yield from iter_chunks(source, chunk_size)
        except Exception as e:
            source_errors.append(e)
            raise

    try:
        writer.send(chunks(), length=length)
    except Exception:
        if source_errors:
            raise source_errors[0]
        raise
    finally:
        writer.close()

    # A transport that swallowed the source error must not turn a truncated
    # upload into a success
    if source_errors:
        raise source_errors[0]

    return writer.bytes_written


def drain(reader, sink, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """
    Copy a remote reader into a caller-provided sink.

    The reader is always closed; the sink is left to the caller.

    Returns:
        Number of bytes transferred
    """
    total = 0
    try:
        for chunk in iter_chunks(reader, chunk_size):
            sink.write(chunk)
            total += len(chunk)
    finally:
        reader.close()

    logger.debug(f"drain: transferred {total} bytes")
    return total
