# File: docsweep/utils.py
"""docsweep.utils: URL canonicalisation, artifact naming and content hashing helpers."""

from __future__ import annotations

import hashlib
import os
import re
import tempfile
from pathlib import Path
from typing import Collection, Iterable, List, Sequence, Union
from urllib.parse import urlsplit, urlunsplit

from docsweep.logger import get_logger

__all__: Sequence[str] = (
    "normalize_url",
    "is_allowed",
    "extract_category",
    "url_slug",
    "artifact_path",
    "sha256_hex",
    "remove_duplicates",
    "format_duration",
    "write_text_atomic",
)

log = get_logger("utils")

_SLUG_UNSAFE = re.compile(r"[^a-z0-9._-]+")
_SLUG_RUNS = re.compile(r"_+")


def normalize_url(url: str) -> str:
    """Canonical frontier key: drop fragment and query, strip one trailing slash.

    Scheme, host and the rest of the path are kept verbatim.
    """
    parts = urlsplit(url.strip())
    path = parts.path
    if path.endswith("/"):
        path = path[:-1]
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def is_allowed(url: str, prefixes: Iterable[str]) -> bool:
    """True if *url* starts with one of the allow-listed *prefixes*.

    The match has to end on a boundary: ``https://d.example.com`` allows
    ``https://d.example.com/x`` but not ``https://d.example.com.evil.net/x``,
    and ``.../documentation`` does not allow ``.../documentation-old``.
    """
    for prefix in prefixes:
        if not url.startswith(prefix):
            continue
        rest = url[len(prefix):]
        if not rest or prefix.endswith("/") or rest[0] in "/?#":
            return True
    return False


def extract_category(url: str) -> str:
    """Grouping label derived from the URL path.

    ``/documentation/<name>/...`` yields ``<name>``; otherwise the first path
    segment is used, and ``"root"`` when the path is empty.
    """
    segments = [s for s in urlsplit(url).path.split("/") if s]
    if "documentation" in segments:
        idx = segments.index("documentation")
        if idx + 1 < len(segments):
            return segments[idx + 1].lower()
    if segments:
        return segments[0].lower()
    return "root"


def url_slug(url: str) -> str:
    """Filesystem-safe file stem for *url* (host and scheme removed)."""
    parts = urlsplit(url)
    cleaned = parts.path.lower()
    cleaned = _SLUG_UNSAFE.sub("_", cleaned)
    cleaned = _SLUG_RUNS.sub("_", cleaned).strip("_")
    return cleaned or "index"


def artifact_path(output_directory: Union[str, Path], url: str, extension: str = ".md") -> Path:
    """``<output_directory>/<category>/<slug><extension>`` for *url*."""
    return Path(output_directory) / extract_category(url) / f"{url_slug(url)}{extension}"


def sha256_hex(text: str) -> str:
    """Hex SHA-256 digest of the UTF-8 encoding of *text*."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Remove duplicate URLs while keeping the original order."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        log.debug("Removed %d duplicate URLs", removed)
    return unique


def format_duration(seconds: float) -> str:
    """``1h 2m 3s`` / ``2m 3s`` / ``3s``."""
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def write_text_atomic(path: Union[str, Path], text: str) -> Path:
    """Write *text* to a temporary sibling, then rename it over *path*."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return target
