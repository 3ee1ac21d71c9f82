# docsweep/crawler/change_detector.py
"""
Change detection: decide whether a rendered page has to be (re)written.

The content digest is taken over the rendered text after an optional
*stabilizer* has been applied. The default stabilizer returns the text
unchanged, so volatile markup (session ids, timestamps) still changes the
hash unless a stabilizer that removes it is plugged in.
"""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Callable, Mapping, Optional, Pattern, Union

from docsweep.crawler.models import PageFingerprint
from docsweep.utils import sha256_hex

Stabilizer = Callable[[str], str]
PathLike = Union[str, Path]


def passthrough(text: str) -> str:
    return text


def regex_stabilizer(*patterns: Union[str, Pattern[str]], replacement: str = "") -> Stabilizer:
    """Build a stabilizer that substitutes every match of *patterns* before hashing."""
    compiled = [re.compile(p) if isinstance(p, str) else p for p in patterns]

    def _stabilize(text: str) -> str:
        for pattern in compiled:
            text = pattern.sub(replacement, text)
        return text

    return _stabilize


def content_digest(text: str, stabilizer: Optional[Stabilizer] = None) -> str:
    """SHA-256 of *text* after stabilization."""
    return sha256_hex((stabilizer or passthrough)(text))


def should_recrawl(
    url: str,
    content_hash: str,
    artifact_path: PathLike,
    *,
    fingerprints: Mapping[str, PageFingerprint],
    force_recrawl: bool = False,
    enabled: bool = True,
    file_exists: Callable[[PathLike], bool] = os.path.exists,
) -> bool:
    """Return True unless the page is known, unchanged and its artifact exists."""
    if force_recrawl:
        return True
    if not enabled:
        return True
    fingerprint = fingerprints.get(url)
    if fingerprint is None:
        return True
    if fingerprint.content_hash != content_hash:
        return True
    if not file_exists(artifact_path):
        return True
    return False


class ChangeDetector:
    """Binds the detection flags, the fingerprint table and the stabilizer."""

    def __init__(
        self,
        fingerprints: Mapping[str, PageFingerprint],
        *,
        force_recrawl: bool = False,
        enabled: bool = True,
        stabilizer: Optional[Stabilizer] = None,
    ) -> None:
        self.fingerprints = fingerprints
        self.force_recrawl = force_recrawl
        self.enabled = enabled
        self.stabilizer = stabilizer or passthrough

    def digest(self, text: str) -> str:
        return content_digest(text, self.stabilizer)

    def should_recrawl(self, url: str, content_hash: str, artifact_path: PathLike) -> bool:
        return should_recrawl(
            url,
            content_hash,
            artifact_path,
            fingerprints=self.fingerprints,
            force_recrawl=self.force_recrawl,
            enabled=self.enabled,
        )


__all__ = [
    "Stabilizer",
    "passthrough",
    "regex_stabilizer",
    "content_digest",
    "should_recrawl",
    "ChangeDetector",
]
