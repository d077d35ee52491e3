from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .client import HalClient, RetryConfig

ENV_BASE_URL = "HAL_CLIENT_BASE_URL"
ENV_TIMEOUT = "HAL_CLIENT_TIMEOUT"
ENV_MAX_RETRIES = "HAL_CLIENT_MAX_RETRIES"
ENV_LOG_LEVEL = "HAL_CLIENT_LOG_LEVEL"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = ""
    timeout_seconds: float = 10.0
    max_retries: int = 2
    log_level: str = "INFO"


def _env_number(name: str, cast, default):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a {cast.__name__}, got {raw!r}") from None


def load_env_config(*, use_dotenv: bool = True) -> ClientConfig:
    """Load client settings from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    return ClientConfig(
        base_url=os.getenv(ENV_BASE_URL, "").strip(),
        timeout_seconds=_env_number(ENV_TIMEOUT, float, 10.0),
        max_retries=_env_number(ENV_MAX_RETRIES, int, 2),
        log_level=os.getenv(ENV_LOG_LEVEL, "").strip() or "INFO",
    )


def create_client_from_env(
    config: Optional[ClientConfig] = None, **kwargs
) -> HalClient:
    """Create a HalClient from environment variables."""
    cfg = config or load_env_config()
    kwargs.setdefault("retry", RetryConfig(max_retries=cfg.max_retries))
    return HalClient(
        base_url=cfg.base_url or None, timeout_seconds=cfg.timeout_seconds, **kwargs
    )


__all__ = ["ClientConfig", "load_env_config", "create_client_from_env"]
