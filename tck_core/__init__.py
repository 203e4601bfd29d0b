"""
TCK Core Package
================
Harness primitives shared by every SDK compliance test case.

Provides:
- JSON-RPC 2.0 client with precision-preserving numeric codec
- Structured error taxonomy for protocol, domain and transport failures
- Ed25519/ECDSA(secp256k1) key material, key lists and threshold keys
- Query-service client and retry helper for eventual consistency
"""

__version__ = "0.3.0"
