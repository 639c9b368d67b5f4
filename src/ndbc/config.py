"""
Client configuration for ndbc.
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigError

try:
    from importlib import metadata

    _VERSION = metadata.version("py-ndbc")
except Exception:
    _VERSION = "unknown"

DEFAULT_BASE_URL = "https://www.ndbc.noaa.gov/data/realtime2"
DEFAULT_METADATA_URL = "https://www.ndbc.noaa.gov/metadata/stationmetadata.xml"

# Environment variable -> ClientConfig field
ENV_VARS = {
    "NDBC_BASE_URL": "base_url",
    "NDBC_METADATA_URL": "metadata_url",
    "NDBC_TIMEOUT": "timeout",
    "NDBC_OUT_DIR": "out_dir",
    "NDBC_MAX_CONCURRENT": "max_concurrent",
}


@dataclass(frozen=True)
class ClientConfig:
    """Settings shared by the HTTP client and the batch driver."""

    base_url: str = DEFAULT_BASE_URL
    metadata_url: str = DEFAULT_METADATA_URL
    timeout: float = 30.0
    user_agent: str = f"py-ndbc/{_VERSION}"
    out_dir: str = "data"
    gitignore_path: str = ".gitignore"
    max_concurrent: int = 1

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.max_concurrent < 1:
            raise ConfigError(
                f"max_concurrent must be at least 1, got {self.max_concurrent}"
            )

    def station_url(self, station_id: str) -> str:
        return f"{self.base_url.rstrip('/')}/{station_id}.txt"

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> "ClientConfig":
        """
        Build a config from ``NDBC_*`` environment variables.

        Keyword overrides that are not None take precedence over the
        environment.

        Raises:
            ConfigError: If a numeric variable cannot be parsed
        """
        if environ is None:
            environ = os.environ

        types = {f.name: f.type for f in fields(cls)}
        values: Dict[str, Any] = {}
        for var, name in ENV_VARS.items():
            raw = environ.get(var)
            if raw is None or raw == "":
                continue
            values[name] = _coerce(var, raw, types[name])

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "ClientConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _coerce(var: str, raw: str, type_: Any) -> Any:
    if type_ in (float, "float"):
        caster: Any = float
    elif type_ in (int, "int"):
        caster = int
    else:
        return raw
    try:
        return caster(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {var}: {raw!r}") from e
