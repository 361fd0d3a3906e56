"""
Loading and validation of the url_hasher configuration.
Pydantic describes the schema; YAML and JSON files are accepted.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from url_hasher import __version__

_SCHEME_PREFIX_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://$")


class HasherConfig(BaseModel):
    """Settings for one batch run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    parallel: int = Field(10, ge=1, description="Number of parallel fetch workers.")
    request_timeout: float = Field(3.0, gt=0, description="Timeout of a single request (seconds).")
    default_scheme: str = Field("http://", description="Prefix added to URLs without a scheme.")
    recognized_schemes: Tuple[str, ...] = Field(
        ("http://", "https://"), min_length=1, description="Prefixes that count as a scheme."
    )
    user_agent: str = Field(f"url-hasher/{__version__}", min_length=1, description="User-Agent header.")
    deduplicate: bool = Field(False, description="Fetch each distinct URL only once.")

    @field_validator("default_scheme", "recognized_schemes", mode="after")
    def _check_prefixes(cls, v: Any) -> Any:
        prefixes = (v,) if isinstance(v, str) else v
        for prefix in prefixes:
            if not _SCHEME_PREFIX_RE.match(prefix):
                raise ValueError(f"not a scheme prefix: {prefix!r}")
        return v

    @model_validator(mode="after")
    def _default_is_recognized(self) -> HasherConfig:
        if self.default_scheme not in self.recognized_schemes:
            raise ValueError("default_scheme must be one of recognized_schemes")
        return self


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Malformed JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> HasherConfig:
    """
    Read YAML or JSON and return a validated HasherConfig.

    Without *path* the default ``configs/default.yaml`` is used when it exists,
    otherwise built-in defaults apply. An explicit path that does not exist
    raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return HasherConfig()
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

    return HasherConfig(**data)


__all__ = ["HasherConfig", "load_config", "ValidationError"]
