# tck_core/transport/__init__.py
from tck_core.transport.transport_base import BaseTransport, TransportError
from tck_core.transport.transport_local import LocalTransport
from tck_core.transport.transport_http import HTTPTransport


def transport_factory(settings=None):
    """
    Pick the channel to the server-under-test from settings:
      - "http"  → HTTPTransport(settings.server_url)
      - "local" → LocalTransport() with no handler; attach one before use
    """
    from tck_core.config import Settings

    settings = settings or Settings.from_env()
    mode = settings.transport.lower()

    if mode == "http":
        return HTTPTransport(settings.server_url, timeout=settings.rpc_timeout)

    if mode == "local":
        return LocalTransport()

    raise ValueError(f"Unknown transport: {settings.transport}")


__all__ = [
    "BaseTransport",
    "TransportError",
    "LocalTransport",
    "HTTPTransport",
    "transport_factory",
]
