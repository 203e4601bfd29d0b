# tck_core/transport/transport_http.py
from typing import Optional

import requests

from tck_core.logger import get_logger
from tck_core.transport.transport_base import BaseTransport, TransportError

log = get_logger("TCK.Transport.HTTP")


class HTTPTransport(BaseTransport):
    """
    HTTP transport posting JSON-RPC payloads to the server-under-test.

    One POST per call on a shared requests.Session. Connection failures,
    resets and timeouts surface as TransportError and are never retried here:
    resubmitting a transaction is not idempotent.
    """
    name = "http"

    def __init__(self, base_url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None

    def send(self, payload: bytes, timeout: Optional[float] = None) -> bytes:
        headers = {"Content-Type": "application/json"}
        # a per-call timeout (the case's remaining budget) may shorten the wait, never extend it
        if timeout is None or (self.timeout is not None and self.timeout < timeout):
            timeout = self.timeout
        log.debug(f"[HTTP RPC] → {self.base_url} | {len(payload)} bytes")
        try:
            res = self._session.post(
                self.base_url,
                data=payload,
                headers=headers,
                timeout=timeout,
            )
        except requests.RequestException as e:
            log.error(f"[HTTP RPC] transport failure: {e}")
            raise TransportError(f"{self.base_url}: {e}") from e

        log.debug(f"[HTTP RPC] ← {res.status_code} {res.reason}")
        # JSON-RPC servers may put an error envelope on a non-2xx reply; only an
        # empty body is a channel failure
        if not res.ok and not res.content:
            raise TransportError(f"{self.base_url}: HTTP {res.status_code} {res.reason}")
        return res.content

    def close(self) -> None:
        if self._owns_session:
            self._session.close()
