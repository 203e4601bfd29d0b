"""
tck_core.crypto
---------------
Key primitives for the two algorithms the ledger accepts:

- Ed25519: raw 32-byte private/public keys
- ECDSA over secp256k1: raw 32-byte private scalar, 33-byte compressed point

Signatures over secp256k1 use SHA-256 as the message digest. Wire helpers
render keys as hex DER (PKCS#8 for private, SubjectPublicKeyInfo for public),
the form the server-under-test accepts for ``keys`` and ``signers``.
"""

from __future__ import annotations
from typing import Tuple
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from .constants import ED25519, ECDSA_SECP256K1, KEY_ALGORITHMS
from .errors import KeySpecError

_SECP256K1 = ec.SECP256K1()
_ECDSA = ec.ECDSA(hashes.SHA256())


# --------- Ed25519 ----------
def ed25519_generate() -> Tuple[bytes, bytes]:
    sk = ed25519.Ed25519PrivateKey.generate()
    pk = sk.public_key()
    return sk.private_bytes_raw(), pk.public_bytes_raw()

def ed25519_sign(priv_raw: bytes, data: bytes) -> bytes:
    sk = ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw)
    return sk.sign(data)

def ed25519_verify(pub_raw: bytes, sig: bytes, data: bytes) -> bool:
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(pub_raw).verify(sig, data)
        return True
    except (InvalidSignature, ValueError):
        return False


# --------- ECDSA secp256k1 ----------
def _secp256k1_private(priv_raw: bytes) -> ec.EllipticCurvePrivateKey:
    return ec.derive_private_key(int.from_bytes(priv_raw, "big"), _SECP256K1)

def secp256k1_generate() -> Tuple[bytes, bytes]:
    sk = ec.generate_private_key(_SECP256K1)
    priv = sk.private_numbers().private_value.to_bytes(32, "big")
    pub = sk.public_key().public_bytes(serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint)
    return priv, pub

def secp256k1_sign(priv_raw: bytes, data: bytes) -> bytes:
    return _secp256k1_private(priv_raw).sign(data, _ECDSA)

def secp256k1_verify(pub_raw: bytes, sig: bytes, data: bytes) -> bool:
    try:
        pk = ec.EllipticCurvePublicKey.from_encoded_point(_SECP256K1, pub_raw)
        pk.verify(sig, data, _ECDSA)
        return True
    except (InvalidSignature, ValueError):
        return False


# --------- Dispatch by algorithm ----------
def _require(algorithm: str) -> str:
    if algorithm not in KEY_ALGORITHMS:
        raise KeySpecError(f"unsupported key algorithm: {algorithm!r}")
    return algorithm

def generate(algorithm: str) -> Tuple[bytes, bytes]:
    if _require(algorithm) == ED25519:
        return ed25519_generate()
    return secp256k1_generate()

def sign(algorithm: str, priv_raw: bytes, data: bytes) -> bytes:
    if _require(algorithm) == ED25519:
        return ed25519_sign(priv_raw, data)
    return secp256k1_sign(priv_raw, data)

def verify(algorithm: str, pub_raw: bytes, sig: bytes, data: bytes) -> bool:
    if _require(algorithm) == ED25519:
        return ed25519_verify(pub_raw, sig, data)
    return secp256k1_verify(pub_raw, sig, data)

def public_from_private(algorithm: str, priv_raw: bytes) -> bytes:
    if _require(algorithm) == ED25519:
        return ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw).public_key().public_bytes_raw()
    return _secp256k1_private(priv_raw).public_key().public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
    )


# --------- DER wire forms ----------
def private_der(algorithm: str, priv_raw: bytes) -> bytes:
    if _require(algorithm) == ED25519:
        sk = ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw)
    else:
        sk = _secp256k1_private(priv_raw)
    return sk.private_bytes(
        serialization.Encoding.DER,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )

def public_der(algorithm: str, pub_raw: bytes) -> bytes:
    if _require(algorithm) == ED25519:
        pk = ed25519.Ed25519PublicKey.from_public_bytes(pub_raw)
    else:
        pk = ec.EllipticCurvePublicKey.from_encoded_point(_SECP256K1, pub_raw)
    return pk.public_bytes(serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)

def load_private_der(der: bytes) -> Tuple[str, bytes]:
    """Return (algorithm, raw private bytes) for a PKCS#8 DER key."""
    sk = serialization.load_der_private_key(der, password=None)
    if isinstance(sk, ed25519.Ed25519PrivateKey):
        return ED25519, sk.private_bytes_raw()
    if isinstance(sk, ec.EllipticCurvePrivateKey) and isinstance(sk.curve, ec.SECP256K1):
        return ECDSA_SECP256K1, sk.private_numbers().private_value.to_bytes(32, "big")
    raise KeySpecError(f"unsupported private key type: {type(sk).__name__}")

def load_public_der(der: bytes) -> Tuple[str, bytes]:
    pk = serialization.load_der_public_key(der)
    if isinstance(pk, ed25519.Ed25519PublicKey):
        return ED25519, pk.public_bytes_raw()
    if isinstance(pk, ec.EllipticCurvePublicKey) and isinstance(pk.curve, ec.SECP256K1):
        return ECDSA_SECP256K1, pk.public_bytes(serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint)
    raise KeySpecError(f"unsupported public key type: {type(pk).__name__}")
