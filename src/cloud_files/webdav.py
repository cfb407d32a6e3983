# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/cloud_files/webdav.py

"""
HTTP transport for a WebDAV file server (Nextcloud / ownCloud layout).

Every method takes an already sanitized path below the DAV root and performs
exactly one request. Failures are raised as TransportError carrying the HTTP
status code; mapping status codes to domain errors happens one layer up, in
cloud_files.operations.

WebDAV Reference: https://www.rfc-editor.org/rfc/rfc4918

Debug logging:
    Enable with: CLOUD_FILES_DEBUG=1 or by setting log level to DEBUG
    Example: CLOUD_FILES_DEBUG=1 cloud-files ls /Documents
"""

import logging
import os
import xml.etree.ElementTree as ET
from urllib.parse import quote, unquote, urlparse

import requests
from requests_toolbelt import StreamingIterator

from cloud_files.errors import NotConnectedError
from cloud_files.streams import DEFAULT_CHUNK_SIZE, RemoteReader, RemoteWriter
from cloud_files.types import DAV_NS, OWNCLOUD_NS, FileDetails, dav

DEFAULT_DAV_PATH = "/remote.php/dav/files/{user}"

SABRE_NS = "http://sabredav.org/ns"

# Properties requested for every PROPFIND listing
DETAIL_PROPERTIES = [
    (DAV_NS, "resourcetype"),
    (DAV_NS, "getlastmodified"),
    (DAV_NS, "getcontentlength"),
    (DAV_NS, "getcontenttype"),
    (DAV_NS, "getetag"),
    (OWNCLOUD_NS, "size"),
]

# Configure logger for this module
logger = logging.getLogger(__name__)

# Enable debug logging via environment variable
if os.environ.get("CLOUD_FILES_DEBUG"):
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    logger.setLevel(logging.DEBUG)


class TransportError(Exception):
    """Raised when the server rejects a request."""

    def __init__(self, message: str, status_code: int = None, response: requests.Response = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


def _error_message(response: requests.Response) -> str:
    """Pull the human readable message out of a WebDAV error body."""
    try:
        body = ET.fromstring(response.content)
        message = body.findtext(f"{{{SABRE_NS}}}message")
        if message:
            return message
    except ET.ParseError:
        pass
    return response.text[:200] if response.text else (response.reason or "(empty)")


def _propfind_body(properties: list[tuple[str, str]]) -> bytes:
    root = ET.Element(dav("propfind"))
    prop = ET.SubElement(root, dav("prop"))
    for namespace, name in properties:
        ET.SubElement(prop, f"{{{namespace}}}{name}")
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


class WebDAVTransport:
    """HTTP client for the WebDAV endpoint of a file server."""

    def __init__(
        self,
        url: str,
        username: str,
        password: str = None,
        dav_path: str = DEFAULT_DAV_PATH,
        verify: bool = True,
        timeout: float = None,
    ):
        """
        Initialize WebDAV transport.

        Args:
            url: Base URL of the server, e.g. https://cloud.example.org
            username: Account name; also substituted into dav_path
            password: Password or app token, None for anonymous access
            dav_path: Path of the user's DAV root below url, "{user}" is replaced
            verify: Verify TLS certificates
            timeout: Seconds to wait for each response, None waits forever
        """
        self.url = url.rstrip("/")
        self.username = username
        self.dav_path = dav_path
        self.timeout = timeout
        self.root_url = self.url + dav_path.format(user=quote(username, safe="")).rstrip("/")
        self.root_path = unquote(urlparse(self.root_url).path)

        self.session = requests.Session()
        self.session.verify = verify
        if password is not None:
            self.session.auth = (username, password)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def connected(self) -> bool:
        return self.session is not None

    def close(self) -> None:
        """Release the HTTP session. Later requests raise NotConnectedError."""
        if self.session is not None:
            self.session.close()
            self.session = None

    def as_user(self, username: str, password: str) -> "WebDAVTransport":
        """Transport for another account on the same server."""
        return WebDAVTransport(
            self.url,
            username,
            password,
            dav_path=self.dav_path,
            verify=self.session.verify if self.session else True,
            timeout=self.timeout,
        )

    def url_for(self, path: str) -> str:
        """Absolute URL of a sanitized path."""
        return f"{self.root_url}{path}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Make HTTP request against the DAV root."""
        if self.session is None:
            raise NotConnectedError()

        url = self.url_for(path)
        kwargs.setdefault("timeout", self.timeout)

        logger.debug(f"Request: {method} {url}")
        if kwargs.get("headers"):
            logger.debug(f"Request headers: {kwargs['headers']}")

        response = self.session.request(method, url, **kwargs)

        logger.debug(f"Response status: {response.status_code}")
        if logger.isEnabledFor(logging.DEBUG) and not kwargs.get("stream"):
            logger.debug(f"Response headers: {dict(response.headers)}")
            body_preview = response.text[:2000] if response.text else "(empty)"
            logger.debug(f"Response body: {body_preview}")

        if response.status_code == 401:
            response.close()
            raise TransportError("Unauthorized: check username and password", 401, response)
        if response.status_code >= 400:
            msg = _error_message(response)
            response.close()
            raise TransportError(f"{method} {path}: {msg}", response.status_code, response)

        return response

    def put(self, path: str, content, length: int = None) -> None:
        """
        Upload content to a file, replacing it if it exists.

        Args:
            path: Sanitized remote path
            content: bytes, str (sent as UTF-8) or an iterable of byte chunks
            length: Total size of an iterable body; when given the body is sent
                    with a Content-Length header instead of chunked encoding
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        if length is not None and not isinstance(content, (bytes, bytearray)):
            content = StreamingIterator(length, iter(content))
        self._request("PUT", path, data=content)

    def get(self, path: str) -> bytes:
        """Download a whole file into memory."""
        return self._request("GET", path).content

    def _transfer(self, method: str, path: str, dest: str, overwrite: bool) -> None:
        headers = {
            "Destination": self.url_for(dest),
            "Overwrite": "T" if overwrite else "F",
        }
        self._request(method, path, headers=headers)

    def move(self, path: str, dest: str, overwrite: bool = False) -> None:
        self._transfer("MOVE", path, dest, overwrite)

    def copy(self, path: str, dest: str, overwrite: bool = False) -> None:
        self._transfer("COPY", path, dest, overwrite)

    def mkdir(self, path: str) -> None:
        self._request("MKCOL", path)

    def delete(self, path: str) -> None:
        self._request("DELETE", path)

    def exists(self, path: str) -> bool:
        """True if the server has a record for this exact path."""
        try:
            self._request(
                "PROPFIND",
                path,
                headers={"Depth": "0", "Content-Type": "application/xml"},
                data=_propfind_body([(DAV_NS, "resourcetype")]),
            )
        except TransportError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    def propfind(
        self, path: str, depth: int = 1, extra_properties: list[tuple[str, str]] = None
    ) -> list[FileDetails] | None:
        """
        Query resource properties.

        Args:
            path: Sanitized remote path
            depth: 0 for the resource itself, 1 to include its children
            extra_properties: (namespace, name) pairs requested on top of
                              DETAIL_PROPERTIES, returned in FileDetails.extra

        Returns:
            One FileDetails per <d:response>, the resource itself first, or
            None when the body is not a multistatus document.
        """
        properties = DETAIL_PROPERTIES + list(extra_properties or [])
        response = self._request(
            "PROPFIND",
            path,
            headers={"Depth": str(depth), "Content-Type": "application/xml"},
            data=_propfind_body(properties),
        )

        if response.status_code != 207:
            logger.warning(f"PROPFIND {path}: expected 207 Multi-Status, got {response.status_code}")
            return None
        try:
            body = ET.fromstring(response.content)
        except ET.ParseError as e:
            logger.warning(f"PROPFIND {path}: unparseable body: {e}")
            return None
        if body.tag != dav("multistatus"):
            logger.warning(f"PROPFIND {path}: unexpected root element {body.tag}")
            return None

        return [
            FileDetails.from_dav_response(entry, self.root_path, extra_properties)
            for entry in body.findall(dav("response"))
        ]

    def readdir(self, path: str) -> list[str] | None:
        """Names of the entries in a folder, or None if the listing is malformed."""
        details = self.propfind(path, depth=1)
        if details is None:
            return None
        own_path = "/" + unquote(path).strip("/")
        return [entry.name for entry in details if entry.path != own_path]

    def prepare_for_streaming(self, path: str) -> None:
        """Priming round trip before a streamed transfer.

        Settles authentication on the session and confirms the resource is
        reachable, so a rejected stream fails here rather than mid-transfer.
        """
        self._request(
            "PROPFIND",
            path,
            headers={"Depth": "0", "Content-Type": "application/xml"},
            data=_propfind_body([(DAV_NS, "resourcetype")]),
        ).close()

    def open_write_stream(self, path: str) -> RemoteWriter:
        return RemoteWriter(self, path)

    def open_read_stream(self, path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> RemoteReader:
        response = self._request("GET", path, stream=True)
        return RemoteReader(response, chunk_size=chunk_size)
