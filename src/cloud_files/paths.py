# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/cloud_files/paths.py

"""
Remote path helpers.

Remote paths are always "/"-separated strings starting with "/". They are
handled as plain strings on purpose: no drive letters, no case folding, and
no os.path or pathlib involvement.
"""

from urllib.parse import quote, unquote

# Left unescaped inside a segment, in addition to letters, digits and "_.-~"
SEGMENT_SAFE = "!*'()"


def sanitize(raw_path: str) -> str:
    """Percent-escape every segment of a path, keeping the "/" separators.

    Not idempotent: an already escaped path gets escaped again ("%" becomes
    "%25"), so call it once, on the raw path a caller handed in.

        >>> sanitize("/a b/c")
        '/a%20b/c'
    """
    return "/".join(quote(segment, safe=SEGMENT_SAFE) for segment in raw_path.split("/"))


def ancestors(path: str) -> list[str]:
    """
    Every prefix of a path, shallowest first, ending with the path itself.

        >>> ancestors("/a/b/c")
        ['/a', '/a/b', '/a/b/c']
    """
    segments = path[1:].split("/")
    return ["/" + "/".join(segments[:position + 1]) for position in range(len(segments))]


def parent(path: str) -> str:
    """Directory part of a path, trailing "/" included."""
    return path[:path.rfind("/") + 1]


def basename(path: str) -> str:
    """Final segment of a (possibly escaped) path, decoded."""
    return unquote(path.rstrip("/").rsplit("/", 1)[-1])
