"""
tck_core.envelope
-----------------
Defines the JSON-RPC request/response records exchanged with the
server-under-test.

Every call is ``{"jsonrpc": "2.0", "method", "params", "id"}``; the reply
carries the same id and either ``result`` or ``error``.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .constants import JSONRPC_VERSION, INVALID_REQUEST
from .errors import MalformedResponseError
from . import codec


@dataclass
class RpcRequest:
    method: str
    id: int
    params: Dict[str, Any] = field(default_factory=dict)
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }

    def to_bytes(self) -> bytes:
        return codec.dumps(self.to_dict())


@dataclass
class RpcResponse:
    id: Any
    result: Any = None
    error: Optional[Dict[str, Any]] = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            d["error"] = self.error
        else:
            d["result"] = self.result
        return d

    @classmethod
    def from_dict(cls, data: Any) -> "RpcResponse":
        """Rebuild a response from a decoded reply.

        Raises MalformedResponseError when the reply is not a JSON-RPC 2.0
        response object.
        """
        if not isinstance(data, dict):
            raise MalformedResponseError(INVALID_REQUEST, f"response is not an object: {data!r}")
        if data.get("jsonrpc") != JSONRPC_VERSION:
            raise MalformedResponseError(INVALID_REQUEST, f"unsupported jsonrpc version: {data.get('jsonrpc')!r}")
        if "error" in data and data["error"] is not None:
            if not isinstance(data["error"], dict):
                raise MalformedResponseError(INVALID_REQUEST, f"error member is not an object: {data['error']!r}")
            return cls(id=data.get("id"), error=data["error"])
        if "result" not in data:
            raise MalformedResponseError(INVALID_REQUEST, "response carries neither result nor error")
        return cls(id=data.get("id"), result=data["result"])

    @classmethod
    def from_bytes(cls, raw: bytes) -> "RpcResponse":
        try:
            data = codec.loads(raw)
        except ValueError as exc:
            raise MalformedResponseError(INVALID_REQUEST, f"response is not valid JSON: {exc}") from exc
        return cls.from_dict(data)


__all__ = ["RpcRequest", "RpcResponse"]
