"""
tck_core.client
---------------
JSON-RPC 2.0 driver for the server-under-test.

- call(): fresh correlation id, exact-integer JSON encoding, typed errors
- setup/reset/generate_key/create_file: the reserved methods tests use

The client keeps no state across calls besides its transport and the id
counter. It never retries: a failed submission is reported, not resent.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union
import itertools

from .constants import INVALID_REQUEST
from .envelope import RpcRequest, RpcResponse
from .errors import JsonRpcError, MalformedResponseError, ParamsError, from_envelope
from .keys import KeySpec, KeyGenerationResult, RawKey, parse_spec
from .logger import get_logger
from .params import CreateFileParams, SetupParams
from .transport.transport_base import BaseTransport

log = get_logger("TCK.Client")

Params = Union[Mapping[str, Any], Any, None]


def _to_params(params: Params) -> Dict[str, Any]:
    if params is None:
        return {}
    if hasattr(params, "to_params"):
        return params.to_params()
    if isinstance(params, Mapping):
        return dict(params)
    raise ParamsError(f"params must be a mapping or a params object, got {type(params).__name__}")


@dataclass(frozen=True)
class RemoteKeyResult:
    """``generateKey`` answer: the server's wire key plus its private keys."""
    key: Any
    private_keys: List[str]

    @classmethod
    def from_result(cls, result: Mapping[str, Any]) -> "RemoteKeyResult":
        return cls(key=result["key"], private_keys=list(result.get("privateKeys") or []))


class JsonRpcClient:
    def __init__(self, transport: BaseTransport, context=None, ids: Optional[Iterator[int]] = None):
        self.transport = transport
        self.context = context
        # shared between with_context() copies: ids stay unique per connection
        self._ids = ids if ids is not None else itertools.count(1)

    def with_context(self, context) -> "JsonRpcClient":
        return JsonRpcClient(self.transport, context, ids=self._ids)

    # ------------------------------------------------------------------
    # Core call
    # ------------------------------------------------------------------
    def call(self, method: str, params: Params = None) -> Any:
        """Send one request and return its ``result``.

        Raises JsonRpcError (classified by code) for error envelopes,
        TransportError for channel failures and TestCaseTimeout when the
        bound context's deadline has passed.
        """
        timeout = None
        deadline = getattr(self.context, "deadline", None)
        if deadline is not None:
            deadline.check()
            timeout = deadline.remaining()

        req = RpcRequest(method=method, id=next(self._ids), params=_to_params(params))
        log.debug(f"[RPC →] {method} id={req.id}")
        raw = self.transport.send(req.to_bytes(), timeout=timeout)

        res = RpcResponse.from_bytes(raw)
        # parse errors and invalid requests come back with a null id
        if res.id != req.id and not (res.id is None and not res.ok):
            raise MalformedResponseError(
                INVALID_REQUEST, f"response id {res.id!r} does not match request id {req.id}", method=method,
            )
        if not res.ok:
            err = from_envelope(res.error, method=method)
            log.warning(f"[RPC ←] {method} id={req.id} {err.kind} code={err.code} status={err.status}")
            raise err
        log.debug(f"[RPC ←] {method} id={req.id} ok")
        return res.result

    # ------------------------------------------------------------------
    # Reserved methods
    # ------------------------------------------------------------------
    def setup(self, params: Union[SetupParams, Mapping[str, Any]]) -> Any:
        return self.call("setup", params)

    def reset(self) -> Any:
        return self.call("reset")

    def generate_key(self, spec: Union[KeySpec, Mapping[str, Any]], from_key: Optional[str] = None) -> RemoteKeyResult:
        """Ask the server to generate key material for ``spec``."""
        if isinstance(spec, Mapping):
            spec = parse_spec(spec)
        params = spec.to_params()
        if from_key is not None:
            params["fromKey"] = from_key
        return RemoteKeyResult.from_result(self.call("generateKey", params))

    def generate_private_key(self, spec: KeySpec) -> str:
        return self.generate_key(spec).key

    def generate_public_key(self, spec: KeySpec, private_key: str) -> str:
        params = spec.to_params(nested=True)
        params["fromKey"] = private_key
        return RemoteKeyResult.from_result(self.call("generateKey", params)).key

    def create_file(self, params: Union[CreateFileParams, Mapping[str, Any]]) -> str:
        result = self.call("createFile", params)
        return result["fileId"]


def signer_wire(keys: Union[KeyGenerationResult, List[RawKey]]) -> List[str]:
    """Private keys as the ``commonTransactionParams.signers`` list."""
    if isinstance(keys, KeyGenerationResult):
        return keys.private_keys_wire()
    return [k.private_to_wire() for k in keys]


__all__ = ["JsonRpcClient", "RemoteKeyResult", "JsonRpcError", "signer_wire"]
