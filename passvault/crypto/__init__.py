"""
Cryptographic primitives for PassVault.

This package provides implementations of:
- AES-256 block cipher (key schedule, round transform and inverse)
- CBC chaining mode with PKCS#7 padding
- Base64 encoding
- Password-based key derivation
- HMAC-SHA256 message authentication
- CipherEngine facade composing the above
"""

from .engine import CipherEngine
from .kdf import derive, derive_key, pbkdf2_derive, split_key_material
from .encoding import b64encode, b64decode
from .padding import pkcs7_pad, pkcs7_unpad

__all__ = [
    'CipherEngine',
    'derive',
    'derive_key',
    'pbkdf2_derive',
    'split_key_material',
    'b64encode',
    'b64decode',
    'pkcs7_pad',
    'pkcs7_unpad',
]
