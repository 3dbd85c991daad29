from __future__ import annotations
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

LAYOUTS = ("nested", "flat")
DIRECTIONS = ("to-json", "to-sheet")

# upper-case names accepted in config files and the environment
ENV_KEYS = {
    "GOOGLE_SHEET_ID": "sheet_id",
    "GOOGLE_API_CREDENTIALS": "credentials_path",
    "GOOGLE_CLIENT_ID": "client_id",
    "GOOGLE_CLIENT_SECRET": "client_secret",
    "GOOGLE_TOKEN_PATH": "token_path",
    "LOCALES_DIR": "locales_dir",
    "LOCALES_LAYOUT": "layout",
    "OAUTH_PORT": "oauth_port",
}


@dataclass
class SyncConfig:
    sheet_id: Optional[str] = None
    credentials_path: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    token_path: str = ".google-token.json"
    locales_dir: str = "./locales"
    layout: str = "nested"
    direction: str = "to-json"
    oauth_port: int = 8591

    clean_output: bool = True
    dry_run: bool = False
    report_path: Optional[str] = None

    max_retries: int = 5
    backoff_base: float = 1.5
    timeout: int = 60
    log_level: str = "INFO"

    def validate(self, require_sheet: bool = True) -> None:
        if require_sheet and not self.sheet_id:
            raise ConfigError("Missing Google Sheet ID (--sheet-id, GOOGLE_SHEET_ID)")
        if not self.credentials_path and not (self.client_id and self.client_secret):
            raise ConfigError(
                "Missing Google API credentials (--credentials, GOOGLE_API_CREDENTIALS "
                "or GOOGLE_CLIENT_ID/GOOGLE_CLIENT_SECRET)"
            )
        if self.layout not in LAYOUTS:
            raise ConfigError(f"Unknown locales layout {self.layout!r}; expected one of {', '.join(LAYOUTS)}")
        if self.direction not in DIRECTIONS:
            raise ConfigError(f"Unknown direction {self.direction!r}; expected one of {', '.join(DIRECTIONS)}")


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML (or JSON) mapping of settings. Missing file -> ConfigError."""
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _normalize(values: Mapping[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(SyncConfig)}
    out: Dict[str, Any] = {}
    for k, v in values.items():
        if v is None:
            continue
        name = ENV_KEYS.get(k, k)
        if name in names:
            out[name] = v
    return out


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    types = {f.name: f.type for f in fields(SyncConfig)}
    out = dict(values)
    for k, v in values.items():
        t = str(types[k])
        try:
            if t == "int":
                out[k] = int(v)
            elif t == "float":
                out[k] = float(v)
            elif t == "bool" and isinstance(v, str):
                out[k] = v.strip().lower() in ("1", "true", "yes", "on")
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {k}: {v!r}") from e
    return out


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    config_path: Optional[str] = None,
    environ: Mapping[str, str] | None = None,
) -> SyncConfig:
    """CLI overrides > config file > environment > defaults."""
    environ = os.environ if environ is None else environ
    merged: Dict[str, Any] = {}
    merged.update(_normalize({k: v for k, v in environ.items() if k in ENV_KEYS}))
    if config_path:
        merged.update(_normalize(load_config_file(config_path)))
    merged.update(_normalize(overrides or {}))
    return SyncConfig(**_coerce(merged))
