"""
tck_core.config
---------------
Harness settings read from the environment.

| Variable | Default |
|---|---|
| TCK_TRANSPORT | http |
| JSON_RPC_SERVER_URL | http://localhost:8544 |
| OPERATOR_ACCOUNT_ID | (unset) |
| OPERATOR_ACCOUNT_PRIVATE_KEY | (unset) |
| NODE_IP / NODE_ACCOUNT_ID | (unset) |
| MIRROR_NODE_REST_URL | http://127.0.0.1:5551 |
| TCK_RPC_TIMEOUT | 30 |
| TCK_TEST_TIMEOUT | 30 |
| TCK_RETRY_MAX_ATTEMPTS | 5 |
| TCK_RETRY_DELAY | 1.0 |
| TCK_LOG_LEVEL | INFO (read by get_logger) |
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar
import os

from .constants import (
    DEFAULT_SERVER_URL, DEFAULT_MIRROR_URL, DEFAULT_RPC_TIMEOUT,
    DEFAULT_TEST_TIMEOUT, DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_DELAY,
)

T = TypeVar("T")


def _env(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name}: invalid value {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    transport: str = "http"
    server_url: str = DEFAULT_SERVER_URL
    operator_account_id: Optional[str] = None
    operator_private_key: Optional[str] = None
    node_ip: Optional[str] = None
    node_account_id: Optional[str] = None
    mirror_url: str = DEFAULT_MIRROR_URL
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    test_timeout: float = DEFAULT_TEST_TIMEOUT
    retry_max_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY

    def __post_init__(self):
        if self.retry_max_attempts < 1:
            raise ValueError("retry_max_attempts must be >= 1")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")
        if self.test_timeout <= 0 or self.rpc_timeout <= 0:
            raise ValueError("timeouts must be positive")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            transport=os.getenv("TCK_TRANSPORT", "http"),
            server_url=os.getenv("JSON_RPC_SERVER_URL", DEFAULT_SERVER_URL),
            operator_account_id=os.getenv("OPERATOR_ACCOUNT_ID"),
            operator_private_key=os.getenv("OPERATOR_ACCOUNT_PRIVATE_KEY"),
            node_ip=os.getenv("NODE_IP"),
            node_account_id=os.getenv("NODE_ACCOUNT_ID"),
            mirror_url=os.getenv("MIRROR_NODE_REST_URL", DEFAULT_MIRROR_URL),
            rpc_timeout=_env("TCK_RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT, float),
            test_timeout=_env("TCK_TEST_TIMEOUT", DEFAULT_TEST_TIMEOUT, float),
            retry_max_attempts=_env("TCK_RETRY_MAX_ATTEMPTS", DEFAULT_RETRY_ATTEMPTS, int),
            retry_delay=_env("TCK_RETRY_DELAY", DEFAULT_RETRY_DELAY, float),
        )
