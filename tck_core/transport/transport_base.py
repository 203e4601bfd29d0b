from __future__ import annotations
from typing import Optional

from tck_core.errors import TransportError


class BaseTransport:
    """
    Request/response channel to the server-under-test.

    Canonical payload at the transport boundary is bytes in both directions;
    framing and JSON decoding belong to the client.
    Implementations raise TransportError for channel-level failures and
    never retry on their own.
    """
    name: str = "base"

    def send(self, payload: bytes, timeout: Optional[float] = None) -> bytes:
        raise NotImplementedError

    def close(self) -> None:
        return

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()


__all__ = ["BaseTransport", "TransportError"]
