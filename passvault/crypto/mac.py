"""
HMAC-SHA256 Message Authentication

Encrypt-then-MAC tags over IV || ciphertext. The tag is checked before
any ciphertext block is decrypted.
"""

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from passvault.common.exceptions import InvalidKeyMaterialError

TAG_SIZE = 32
MIN_MAC_KEY_SIZE = 16


def _check_key(mac_key: bytes) -> None:
    if not isinstance(mac_key, (bytes, bytearray)) or len(mac_key) < MIN_MAC_KEY_SIZE:
        raise InvalidKeyMaterialError(f"MAC key must be at least {MIN_MAC_KEY_SIZE} bytes")


def compute_tag(mac_key: bytes, data: bytes) -> bytes:
    """
    Compute an HMAC-SHA256 tag.
    
    Args:
        mac_key: Authentication key (>= 16 bytes)
        data: Data to authenticate
    
    Returns:
        32-byte tag
    """
    _check_key(mac_key)
    
    h = hmac.HMAC(bytes(mac_key), hashes.SHA256())
    h.update(data)
    return h.finalize()


def verify_tag(mac_key: bytes, data: bytes, tag: bytes) -> bool:
    """
    Verify an HMAC-SHA256 tag in constant time.
    
    Args:
        mac_key: Authentication key
        data: Authenticated data
        tag: Tag to check
    
    Returns:
        True if the tag is valid, False otherwise
    """
    _check_key(mac_key)
    
    try:
        h = hmac.HMAC(bytes(mac_key), hashes.SHA256())
        h.update(data)
        h.verify(tag)
        return True
    
    except InvalidSignature:
        return False
