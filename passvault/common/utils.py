"""
Utility functions for PassVault.
"""

import secrets
import time


def now_ms() -> int:
    """
    Get current Unix timestamp in milliseconds.
    
    Returns:
        Current timestamp in milliseconds
    """
    return int(time.time() * 1000)


def generate_random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.
    
    Used for fresh keys, IVs and salts when no password-derived
    material exists.
    
    Args:
        length: Number of bytes to generate
    
    Returns:
        Random bytes
    
    Raises:
        ValueError: If length is negative
    """
    if length < 0:
        raise ValueError(f"Length must be non-negative, got {length}")
    
    return secrets.token_bytes(length)


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """
    XOR two equal-length byte strings.
    
    Args:
        a: First operand
        b: Second operand
    
    Returns:
        a XOR b
    
    Raises:
        ValueError: If the lengths differ
    """
    if len(a) != len(b):
        raise ValueError(f"Cannot XOR {len(a)} bytes with {len(b)} bytes")
    
    return bytes(x ^ y for x, y in zip(a, b))


def secure_zero(buffer) -> None:
    """
    Overwrite a mutable buffer with zeros in place.
    
    Accepts a bytearray or a list of integers (e.g. expanded round-key
    words). Immutable objects are ignored since they cannot be wiped.
    
    Args:
        buffer: Buffer to wipe
    """
    if isinstance(buffer, (bytearray, list)):
        for i in range(len(buffer)):
            buffer[i] = 0


# Test function
if __name__ == "__main__":
    print("[*] Testing utility functions")
    
    # Test timestamp
    ts = now_ms()
    print(f"\n[1] Current timestamp: {ts} ms")
    
    # Test random bytes
    rnd = generate_random_bytes(16)
    print(f"\n[2] Random bytes (16): {rnd.hex()}")
    
    # Test XOR
    x = xor_bytes(b"\x0f\xf0", b"\xff\xff")
    print(f"\n[3] XOR: {x.hex()}")
    assert x == b"\xf0\x0f", "XOR failed!"
    
    # Test wipe
    buf = bytearray(b"secret")
    secure_zero(buf)
    print(f"\n[4] Wiped buffer: {bytes(buf)}")
    assert buf == bytearray(6), "Wipe failed!"
    
    print("\n[✓] Utility functions test passed!")
