"""
tck_core.params
---------------
Typed parameter sets for the JSON-RPC methods the harness calls.

Each class validates at construction and renders the server's camelCase
shape with ``to_params()``; fields left as None are omitted from the wire.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union

from .codec import encode_int64, decode_int64
from .errors import ParamsError, Int64RangeError
from .keys import Key, RawKey
from .utils import camel

WireKey = Union[str, Dict[str, Any]]


def _wire_key(k: Union[Key, WireKey]) -> WireKey:
    if isinstance(k, (str, dict)):
        return k
    return k.to_wire()


def _wire_signer(s: Union[RawKey, str]) -> str:
    if isinstance(s, str):
        return s
    return s.private_to_wire()


def _compact(obj) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if hasattr(value, "to_params"):
            value = value.to_params()
        out[camel(f.name)] = value
    return out


@dataclass
class SetupParams:
    operator_account_id: str
    operator_private_key: str
    node_ip: Optional[str] = None
    node_account_id: Optional[str] = None
    mirror_network_ip: Optional[str] = None

    def __post_init__(self):
        if not self.operator_account_id or not self.operator_private_key:
            raise ParamsError("setup needs an operator account id and private key")

    def to_params(self) -> Dict[str, Any]:
        return _compact(self)


@dataclass
class CommonTransactionParams:
    signers: List[Union[RawKey, str]] = field(default_factory=list)
    transaction_id: Optional[str] = None
    max_transaction_fee: Optional[int] = None
    valid_transaction_duration: Optional[int] = None
    memo: Optional[str] = None
    regenerate_transaction_id: Optional[bool] = None

    def __post_init__(self):
        for name in ("max_transaction_fee", "valid_transaction_duration"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise ParamsError(f"{name} must be an int")

    def to_params(self) -> Dict[str, Any]:
        params = _compact(self)
        params["signers"] = [_wire_signer(s) for s in self.signers]
        for name in ("maxTransactionFee", "validTransactionDuration"):
            if name in params:
                params[name] = encode_int64(params[name])
        return params


@dataclass
class CreateFileParams:
    keys: Optional[List[Union[Key, WireKey]]] = None
    contents: Optional[str] = None
    memo: Optional[str] = None
    # seconds since epoch; sent as an exact int64 string
    expiration_time: Optional[Union[int, str]] = None
    common_transaction_params: Optional[CommonTransactionParams] = None
    # lets boundary tests push INT64_MIN to the server on purpose
    allow_int64_min: bool = field(default=False, repr=False)

    def __post_init__(self):
        if self.keys is not None and not isinstance(self.keys, list):
            raise ParamsError("keys must be a list")
        if self.expiration_time is not None:
            try:
                decode_int64(self.expiration_time, allow_min=self.allow_int64_min)
            except Int64RangeError as exc:
                raise ParamsError(f"expiration_time: {exc}") from exc

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.keys is not None:
            params["keys"] = [_wire_key(k) for k in self.keys]
        if self.contents is not None:
            params["contents"] = self.contents
        if self.memo is not None:
            params["memo"] = self.memo
        if self.expiration_time is not None:
            value = decode_int64(self.expiration_time, allow_min=self.allow_int64_min)
            params["expirationTime"] = encode_int64(value, allow_min=self.allow_int64_min)
        if self.common_transaction_params is not None:
            params["commonTransactionParams"] = self.common_transaction_params.to_params()
        return params
