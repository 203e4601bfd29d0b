# tck_core/transport/transport_local.py
from __future__ import annotations
from typing import Any, Callable, Optional

from tck_core import codec
from tck_core.logger import get_logger
from tck_core.transport.transport_base import BaseTransport, TransportError

log = get_logger("TCK.Transport.Local")

Handler = Callable[[Any], Any]


class LocalTransport(BaseTransport):
    """
    In-process transport: decodes the request bytes, hands the object to a
    handler and encodes whatever it returns. Useful for embedding a server
    in the same process and for tests.
    """
    name = "local"

    def __init__(self, handler: Optional[Handler] = None):
        self.handler = handler
        self.sent = 0

    def send(self, payload: bytes, timeout: Optional[float] = None) -> bytes:
        if self.handler is None:
            raise TransportError("local transport has no handler attached")
        self.sent += 1
        request = codec.loads(payload)
        log.debug(f"[LOCAL RPC] {request.get('method') if isinstance(request, dict) else request!r}")
        response = self.handler(request)
        if isinstance(response, (bytes, bytearray)):
            return bytes(response)
        return codec.dumps(response)
