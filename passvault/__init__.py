"""
PassVault

Encryption core of a password manager:
- AES-256 block cipher implemented in pure Python
- CBC chaining with PKCS#7 padding and Base64 text encoding
- Password-based key derivation
- Optional per-message IVs and HMAC-SHA256 authentication
- File-based key store
"""

__version__ = "1.0.0"
