"""
tck_core.utils
--------------
Lightweight helpers for hex/base64 conversion and wire field naming.
"""

from __future__ import annotations
import base64


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"))

def hexe(b: bytes) -> str:
    return b.hex()

def hexd(s: str) -> bytes:
    if s.startswith("0x"):
        s = s[2:]
    return bytes.fromhex(s)

def camel(name: str) -> str:
    # operator_account_id -> operatorAccountId
    head, *rest = name.split("_")
    return head + "".join(p[:1].upper() + p[1:] for p in rest)
