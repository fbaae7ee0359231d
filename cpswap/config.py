"""
Deployment configuration.

Loaded once at startup from (lowest to highest precedence) dataclass
defaults, an optional YAML file, and environment variables:

    program_id         -> CPSWAP_PROGRAM_ID
    pool_seed          -> CPSWAP_POOL_SEED
    chain_id           -> CPSWAP_CHAIN_ID
    require_signatures -> CPSWAP_REQUIRE_SIGNATURES
    log_level          -> CPSWAP_LOG_LEVEL

The YAML path defaults to ``$CPSWAP_CONFIG`` when not given.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from .state.canonical import canonical_identity, sha256_hex


# Fixed identity of this program; every deployment derives its addresses under it.
DEFAULT_PROGRAM_ID = sha256_hex(b"cpswap:program:v1")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class SwapConfig:
    program_id: str = DEFAULT_PROGRAM_ID
    pool_seed: str = "pool"
    chain_id: str = "cpswap-local"
    require_signatures: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        object.__setattr__(self, "program_id", canonical_identity(self.program_id, name="program_id"))
        if not isinstance(self.pool_seed, str) or not self.pool_seed:
            raise ValueError("pool_seed must be a non-empty string")
        try:
            seed_len = len(self.pool_seed.encode("ascii"))
        except UnicodeEncodeError as exc:
            raise ValueError("pool_seed must be ASCII") from exc
        if seed_len > 32:
            raise ValueError("pool_seed must be at most 32 bytes")
        if not isinstance(self.chain_id, str) or not self.chain_id:
            raise ValueError("chain_id must be a non-empty string")
        object.__setattr__(self, "require_signatures", _parse_bool("require_signatures", self.require_signatures))
        level = str(self.log_level).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}: {self.log_level!r}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SwapConfig":
        if not isinstance(data, Mapping):
            raise TypeError("config must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {unknown}")
        return cls(**{k: v for k, v in data.items()})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SwapConfig":
        raw = Path(path).read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
        if data is None:
            return cls()
        return cls.from_dict(data)

    def apply_env(self) -> "SwapConfig":
        """Return a copy with environment overrides applied."""
        return replace(
            self,
            program_id=_env_str("CPSWAP_PROGRAM_ID", self.program_id),
            pool_seed=_env_str("CPSWAP_POOL_SEED", self.pool_seed),
            chain_id=_env_str("CPSWAP_CHAIN_ID", self.chain_id),
            require_signatures=_env_str("CPSWAP_REQUIRE_SIGNATURES", None) or self.require_signatures,
            log_level=_env_str("CPSWAP_LOG_LEVEL", self.log_level),
        )


@lru_cache(maxsize=1)
def load_config(path: Optional[str] = None) -> SwapConfig:
    """Resolve the process-wide configuration (cached)."""
    path = path or _env_str("CPSWAP_CONFIG", None)
    config = SwapConfig.from_file(path) if path else SwapConfig()
    return config.apply_env()


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install one stream handler on the `cpswap` logger (idempotent)."""
    root = logging.getLogger("cpswap")
    root.setLevel(level.upper())
    if not any(getattr(h, "_cpswap_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._cpswap_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root
