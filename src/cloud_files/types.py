# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/cloud_files/types.py

"""
Cloud Files Type Definitions

Dataclasses for library return types with serialization support.
"""

from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional
from urllib.parse import unquote, urlparse
import json
import xml.etree.ElementTree as ET


DAV_NS = "DAV:"
OWNCLOUD_NS = "http://owncloud.org/ns"
NEXTCLOUD_NS = "http://nextcloud.org/ns"

TYPE_FILE = "file"
TYPE_DIRECTORY = "directory"


def dav(name: str) -> str:
    """Clark notation for a DAV: element name."""
    return f"{{{DAV_NS}}}{name}"


@dataclass
class FileDetails:
    """A single remote file or directory, as reported by PROPFIND."""
    path: str                                   # Decoded path below the DAV root
    name: str                                   # Final segment of path
    type: str                                   # "file" or "directory"
    size: int = 0                               # Bytes (folder size when the server reports it)
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
    content_type: Optional[str] = None
    extra: dict[str, Optional[str]] = field(default_factory=dict)  # Requested extra properties

    @property
    def is_directory(self) -> bool:
        return self.type == TYPE_DIRECTORY

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "name": self.name,
            "type": self.type,
            "size": self.size,
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
            "etag": self.etag,
            "content_type": self.content_type,
            "extra": self.extra,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "FileDetails":
        last_modified = data.get("last_modified")
        if isinstance(last_modified, str):
            last_modified = datetime.fromisoformat(last_modified)

        return cls(
            path=data["path"],
            name=data["name"],
            type=data["type"],
            size=data.get("size", 0),
            last_modified=last_modified,
            etag=data.get("etag"),
            content_type=data.get("content_type"),
            extra=data.get("extra", {}),
        )

    @classmethod
    def from_dav_response(
        cls,
        response: ET.Element,
        root_path: str = "",
        extra_properties: list[tuple[str, str]] = None,
    ) -> "FileDetails":
        """
        Create from a <d:response> element of a multistatus body.

        Args:
            response: The <d:response> element
            root_path: URL path of the DAV root, stripped from each href
            extra_properties: (namespace, name) pairs to copy into `extra`

        Only properties inside a propstat with a 200 status are read; servers
        report the properties they do not know in a separate 404 propstat.
        """
        href = unquote(urlparse(response.findtext(dav("href"), "")).path)
        if root_path and href.startswith(root_path):
            href = href[len(root_path):]
        path = "/" + href.strip("/")

        prop = ET.Element(dav("prop"))
        for propstat in response.findall(dav("propstat")):
            status = propstat.findtext(dav("status"), "")
            if " 200 " in f"{status} ":
                found = propstat.find(dav("prop"))
                if found is not None:
                    prop.extend(list(found))

        is_directory = prop.find(f"{dav('resourcetype')}/{dav('collection')}") is not None

        # getcontentlength is absent on collections; Nextcloud reports oc:size instead
        size_text = prop.findtext(dav("getcontentlength")) or prop.findtext(f"{{{OWNCLOUD_NS}}}size")
        try:
            size = int(size_text) if size_text else 0
        except ValueError:
            size = 0

        last_modified = None
        modified_text = prop.findtext(dav("getlastmodified"))
        if modified_text:
            try:
                last_modified = parsedate_to_datetime(modified_text)
            except (TypeError, ValueError):
                last_modified = None

        etag = prop.findtext(dav("getetag"))
        if etag:
            etag = etag.strip('"')

        extra = {}
        for namespace, name in extra_properties or []:
            extra[name] = prop.findtext(f"{{{namespace}}}{name}")

        return cls(
            path=path,
            name=path.rsplit("/", 1)[-1],
            type=TYPE_DIRECTORY if is_directory else TYPE_FILE,
            size=size,
            last_modified=last_modified,
            etag=etag or None,
            content_type=prop.findtext(dav("getcontenttype")),
            extra=extra,
        )
