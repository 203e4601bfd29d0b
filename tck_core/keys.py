"""
tck_core.keys
-------------
Key structures and the key-material generator.

A Key is one of:

- RawKey: one ed25519 or ecdsa-secp256k1 public key (optionally carrying
  its private half)
- KeyList: every member must sign
- ThresholdKey: at least ``threshold`` of the members must sign

Composite keys nest arbitrarily. generate_key() walks a KeySpec depth-first,
keeps member order at every level and returns the public structure together
with every private key it created, in generation order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from . import crypto
from .constants import ED25519, ECDSA_SECP256K1, KEY_ALGORITHMS
from .errors import KeySpecError
from .utils import hexe, hexd

Signatures = Dict[str, bytes]


def _check_threshold(threshold: Any, size: int) -> None:
    if isinstance(threshold, bool) or not isinstance(threshold, int):
        raise KeySpecError(f"threshold must be an int, got {threshold!r}")
    if not 1 <= threshold <= size:
        raise KeySpecError(f"threshold {threshold} outside 1..{size}")


# --------- Key structures ----------
@dataclass(frozen=True)
class RawKey:
    algorithm: str
    public_bytes: bytes
    private_bytes: Optional[bytes] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.algorithm not in KEY_ALGORITHMS:
            raise KeySpecError(f"unsupported key algorithm: {self.algorithm!r}")

    @property
    def key_id(self) -> str:
        """Hex of the raw public key; signature maps are keyed by it."""
        return hexe(self.public_bytes)

    @property
    def has_private(self) -> bool:
        return self.private_bytes is not None

    def public(self) -> "RawKey":
        return RawKey(self.algorithm, self.public_bytes)

    def sign(self, message: bytes) -> bytes:
        if self.private_bytes is None:
            raise KeySpecError(f"key {self.key_id} has no private material")
        return crypto.sign(self.algorithm, self.private_bytes, message)

    def to_wire(self) -> str:
        return hexe(crypto.public_der(self.algorithm, self.public_bytes))

    def private_to_wire(self) -> str:
        if self.private_bytes is None:
            raise KeySpecError(f"key {self.key_id} has no private material")
        return hexe(crypto.private_der(self.algorithm, self.private_bytes))

    def leaves(self) -> Iterator["RawKey"]:
        yield self

    def minimal_signers(self) -> List["RawKey"]:
        return [self]

    def is_satisfied_by(self, signatures: Mapping[str, bytes], message: bytes) -> bool:
        sig = signatures.get(self.key_id)
        return sig is not None and crypto.verify(self.algorithm, self.public_bytes, sig, message)

    @classmethod
    def from_private(cls, algorithm: str, private_bytes: bytes) -> "RawKey":
        return cls(algorithm, crypto.public_from_private(algorithm, private_bytes), private_bytes)

    @classmethod
    def from_private_wire(cls, der_hex: str) -> "RawKey":
        algorithm, raw = crypto.load_private_der(hexd(der_hex))
        return cls.from_private(algorithm, raw)


@dataclass(frozen=True)
class KeyList:
    keys: Tuple["Key", ...]

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))
        if not self.keys:
            raise KeySpecError("key list needs at least one member")

    def leaves(self) -> Iterator[RawKey]:
        for k in self.keys:
            yield from k.leaves()

    def minimal_signers(self) -> List[RawKey]:
        out: List[RawKey] = []
        for k in self.keys:
            out.extend(k.minimal_signers())
        return out

    def is_satisfied_by(self, signatures: Mapping[str, bytes], message: bytes) -> bool:
        return all(k.is_satisfied_by(signatures, message) for k in self.keys)

    def to_wire(self) -> Dict[str, Any]:
        return {"keyList": [k.to_wire() for k in self.keys]}


@dataclass(frozen=True)
class ThresholdKey:
    keys: Tuple["Key", ...]
    threshold: int

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))
        _check_threshold(self.threshold, len(self.keys))

    def leaves(self) -> Iterator[RawKey]:
        for k in self.keys:
            yield from k.leaves()

    def minimal_signers(self) -> List[RawKey]:
        # first `threshold` members, each satisfied minimally
        out: List[RawKey] = []
        for k in self.keys[: self.threshold]:
            out.extend(k.minimal_signers())
        return out

    def is_satisfied_by(self, signatures: Mapping[str, bytes], message: bytes) -> bool:
        met = sum(1 for k in self.keys if k.is_satisfied_by(signatures, message))
        return met >= self.threshold

    def to_wire(self) -> Dict[str, Any]:
        return {"thresholdKey": {"threshold": self.threshold, "keys": [k.to_wire() for k in self.keys]}}


Key = Union[RawKey, KeyList, ThresholdKey]


def key_from_wire(obj: Any) -> Key:
    """Inverse of ``Key.to_wire()``; raw keys come back public-only."""
    if isinstance(obj, str):
        algorithm, raw = crypto.load_public_der(hexd(obj))
        return RawKey(algorithm, raw)
    if isinstance(obj, dict) and "keyList" in obj:
        return KeyList(tuple(key_from_wire(k) for k in obj["keyList"]))
    if isinstance(obj, dict) and "thresholdKey" in obj:
        body = obj["thresholdKey"]
        return ThresholdKey(tuple(key_from_wire(k) for k in body["keys"]), body["threshold"])
    raise KeySpecError(f"not a wire key: {obj!r}")


def sign(private_keys: Iterable[RawKey], message: bytes) -> Signatures:
    """Sign ``message`` with every key; result is keyed by public key hex."""
    return {k.key_id: k.sign(message) for k in private_keys}


# --------- Generation specs ----------
_TYPE_NAMES = {ED25519: "ed25519", ECDSA_SECP256K1: "ecdsaSecp256k1"}


@dataclass(frozen=True)
class SingleKeySpec:
    algorithm: str = ED25519

    def __post_init__(self):
        if self.algorithm not in KEY_ALGORITHMS:
            raise KeySpecError(f"unsupported key algorithm: {self.algorithm!r}")

    def to_params(self, nested: bool = False) -> Dict[str, Any]:
        """``generateKey`` params; members of a list are requested as public keys."""
        suffix = "PublicKey" if nested else "PrivateKey"
        return {"type": _TYPE_NAMES[self.algorithm] + suffix}


@dataclass(frozen=True)
class KeyListSpec:
    members: Tuple["KeySpec", ...]
    threshold: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "members", tuple(self.members))
        if not self.members:
            raise KeySpecError("key list spec needs at least one member")
        for m in self.members:
            if not isinstance(m, (SingleKeySpec, KeyListSpec)):
                raise KeySpecError(f"not a key spec: {m!r}")
        if self.threshold is not None:
            _check_threshold(self.threshold, len(self.members))

    def to_params(self, nested: bool = False) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "type": "keyList" if self.threshold is None else "thresholdKey",
            "keys": [m.to_params(nested=True) for m in self.members],
        }
        if self.threshold is not None:
            params["threshold"] = self.threshold
        return params


KeySpec = Union[SingleKeySpec, KeyListSpec]


def ed25519() -> SingleKeySpec:
    return SingleKeySpec(ED25519)

def ecdsa_secp256k1() -> SingleKeySpec:
    return SingleKeySpec(ECDSA_SECP256K1)

def key_list(*members: KeySpec) -> KeyListSpec:
    return KeyListSpec(members)

def threshold_key(threshold: int, *members: KeySpec) -> KeyListSpec:
    return KeyListSpec(members, threshold)


FOUR_KEYS_KEY_LIST = key_list(ed25519(), ecdsa_secp256k1(), ed25519(), ecdsa_secp256k1())


def parse_spec(params: Mapping[str, Any]) -> KeySpec:
    """Build a KeySpec from ``generateKey``-style params.

    Accepts ``{"type": "ed25519PrivateKey"}``-style leaves (private or public
    variants) and ``keyList`` / ``thresholdKey`` containers.
    """
    kind = params.get("type")
    if kind in ("keyList", "thresholdKey"):
        members = tuple(parse_spec(m) for m in params.get("keys") or ())
        threshold = params.get("threshold") if kind == "thresholdKey" else None
        if kind == "thresholdKey" and threshold is None:
            raise KeySpecError("thresholdKey spec without threshold")
        return KeyListSpec(members, threshold)
    for algorithm, prefix in _TYPE_NAMES.items():
        if kind in (prefix + "PrivateKey", prefix + "PublicKey"):
            return SingleKeySpec(algorithm)
    raise KeySpecError(f"unknown key type: {kind!r}")


# --------- Generator ----------
@dataclass(frozen=True)
class KeyGenerationResult:
    key: Key
    private_keys: Tuple[RawKey, ...]

    def private_keys_wire(self) -> List[str]:
        return [k.private_to_wire() for k in self.private_keys]

    def minimal_signers(self) -> List[RawKey]:
        """Private keys of a smallest subset that satisfies ``key``'s policy."""
        by_public = {k.public_bytes: k for k in self.private_keys}
        return [by_public[leaf.public_bytes] for leaf in self.key.minimal_signers()]

    def sign(self, message: bytes, signers: Optional[Iterable[RawKey]] = None) -> Signatures:
        return sign(self.private_keys if signers is None else signers, message)

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key.to_wire(), "privateKeys": self.private_keys_wire()}


def _build(spec: KeySpec, out: List[RawKey]) -> Key:
    if isinstance(spec, SingleKeySpec):
        priv, pub = crypto.generate(spec.algorithm)
        out.append(RawKey(spec.algorithm, pub, priv))
        return RawKey(spec.algorithm, pub)
    if isinstance(spec, KeyListSpec):
        members = tuple(_build(m, out) for m in spec.members)
        if spec.threshold is None:
            return KeyList(members)
        return ThresholdKey(members, spec.threshold)
    raise KeySpecError(f"not a key spec: {spec!r}")


def generate_key(spec: Union[KeySpec, Mapping[str, Any]]) -> KeyGenerationResult:
    """Generate fresh key material for ``spec``.

    Every call draws new randomness; nothing is cached. ``spec`` may also be
    given in ``generateKey`` params form.
    """
    if isinstance(spec, Mapping):
        spec = parse_spec(spec)
    private_keys: List[RawKey] = []
    key = _build(spec, private_keys)
    return KeyGenerationResult(key, tuple(private_keys))
