# src/nelproxy/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object per process, built once at startup and passed down.
- CLI flags override environment values via Settings.with_overrides().
- Validation happens before any networking and raises ConfigurationError.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

ENV_PREFIX = "NELPROXY"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_file: Optional[Path]

    # ---- Endpoint ----
    server: str
    port: int
    ssl_enabled: bool
    ssl_cert: Optional[Path]
    ssl_key: Optional[Path]
    ca_bundle: Optional[Path]
    request_timeout: float

    # ---- Worker ----
    inventory: str
    json_output: bool
    stop_on_ack_failure: bool
    playbook_bin: str
    inventory_root: str

    @staticmethod
    def from_env(*, dotenv: bool = True) -> "Settings":
        if dotenv:
            # Existing environment wins over .env values.
            load_dotenv(override=False)

        return Settings(
            app_name=_env(_k("APP_NAME"), "nelproxy") or "nelproxy",
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            log_file=_env_path(_k("LOG_FILE")),
            server=_env(_k("SERVER"), "").strip(),
            port=_env_int(_k("PORT"), 8080),
            ssl_enabled=_env_bool(_k("SSL"), False),
            ssl_cert=_env_path(_k("SSL_CERT")),
            ssl_key=_env_path(_k("SSL_KEY")),
            ca_bundle=_env_path(_k("CA_BUNDLE")),
            request_timeout=_env_float(_k("REQUEST_TIMEOUT"), 10.0),
            inventory=_env(_k("INVENTORY"), "").strip(),
            json_output=_env_bool(_k("JSON_OUTPUT"), False),
            stop_on_ack_failure=_env_bool(_k("STOP_ON_ACK_FAILURE"), False),
            playbook_bin=_env(_k("PLAYBOOK_BIN"), "ansible-playbook") or "ansible-playbook",
            inventory_root=_env(_k("INVENTORY_ROOT"), "inventories") or "inventories",
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with the given fields replaced; None values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    @property
    def base_url(self) -> str:
        scheme = "https" if self.ssl_enabled else "http"
        return f"{scheme}://{self.server}:{self.port}"

    # ---- validation ----

    def _validate_endpoint(self) -> None:
        if not self.server:
            raise ConfigurationError("Server address is not set. Use --server or NELPROXY_SERVER.")
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid port: {self.port}")
        if self.request_timeout <= 0:
            raise ConfigurationError(f"Invalid request timeout: {self.request_timeout}")

    def validate_for_server(self) -> None:
        self._validate_endpoint()
        if self.ssl_enabled:
            if self.ssl_cert is None or self.ssl_key is None:
                raise ConfigurationError("SSL is enabled but --ssl-cert/--ssl-key are not both set.")
            for p in (self.ssl_cert, self.ssl_key):
                if not p.is_file():
                    raise ConfigurationError(f"SSL file not found: {p}")

    def validate_for_worker(self) -> None:
        self._validate_endpoint()
        if not self.inventory:
            raise ConfigurationError("Worker inventory is not set. Use --inventory or NELPROXY_INVENTORY.")
        if self.ca_bundle is not None and not self.ca_bundle.is_file():
            raise ConfigurationError(f"CA bundle not found: {self.ca_bundle}")

    def validate_for_client(self) -> None:
        self._validate_endpoint()


def get_settings() -> Settings:
    return Settings.from_env()
