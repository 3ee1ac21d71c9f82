# === FILE: docsweep/config.py ===
"""
Loading and validation of the DocSweep crawler configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union
from urllib.parse import urlparse

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
    model_validator,
)


class CrawlerConfig(BaseModel):
    """Settings for a single crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: HttpUrl = Field(..., description="URL the crawl starts from (depth 0).")
    allowed_prefixes: List[str] = Field(
        default_factory=list,
        description="Only URLs starting with one of these prefixes are enqueued.",
    )
    max_pages: int = Field(15000, ge=1, description="Hard limit on visited pages.")
    max_depth: int = Field(15, ge=0, description="Maximum link depth from the start URL.")
    request_delay: float = Field(0.5, ge=0, description="Pause between two pages (seconds).")
    page_load_timeout: float = Field(30.0, gt=0, description="Render timeout per page (seconds).")
    checkpoint_interval: float = Field(
        30.0, ge=0, description="Minimum seconds between two checkpoint saves (0 = every page)."
    )
    force_recrawl: bool = Field(False, description="Rewrite every page regardless of fingerprints.")
    change_detection: bool = Field(True, description="Skip pages whose content hash is unchanged.")
    output_directory: Path = Field(Path("docs"), description="Root directory for converted pages.")
    metadata_file: Optional[Path] = Field(
        None, description="Metadata JSON path; defaults to <output_directory>/metadata.json."
    )
    artifact_extension: str = Field(".md", min_length=2, description="Suffix of stored pages.")
    user_agent: str = Field("DocSweep/0.1", min_length=1, description="User-Agent header.")
    progress_log_every: int = Field(50, ge=1, description="Log a progress block every N pages.")

    @field_validator("artifact_extension")
    def _dotted_extension(cls, v: str) -> str:
        if not v.startswith("."):
            raise ValueError("artifact_extension must start with '.'")
        return v

    @model_validator(mode="before")
    @classmethod
    def _derive_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        start = data.get("start_url")
        if not data.get("allowed_prefixes") and start is not None:
            parsed = urlparse(str(start))
            if parsed.netloc:
                data["allowed_prefixes"] = [f"{parsed.scheme or 'https'}://{parsed.netloc}"]
        if data.get("metadata_file") is None:
            out = Path(data.get("output_directory") or "docs")
            data["metadata_file"] = out / "metadata.json"
        return data

    @property
    def start(self) -> str:
        """Start URL as a plain string."""
        return str(self.start_url)

    @property
    def metadata_path(self) -> Path:
        """Metadata file, falling back to <output_directory>/metadata.json."""
        if self.metadata_file is None:
            return self.output_directory / "metadata.json"
        return self.metadata_file


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None], **overrides: Any) -> CrawlerConfig:
    """
    Read a YAML or JSON file and return a validated CrawlerConfig.
    Keyword overrides (e.g. from the CLI) replace values from the file;
    ``None`` overrides are ignored.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "load_config"]
