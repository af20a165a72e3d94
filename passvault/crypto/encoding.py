"""
Base64 Encoding

Standard alphabet (A-Z a-z 0-9 + /) with '=' padding to a multiple of
four characters. Used to carry ciphertext bytes as text.
"""

from passvault.common.exceptions import InvalidEncodingError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
PAD = "="

_DECODE_TABLE = {ch: i for i, ch in enumerate(ALPHABET)}


def b64encode(data: bytes) -> str:
    """
    Base64 encode bytes to string.
    
    Args:
        data: Bytes to encode
    
    Returns:
        Base64-encoded string
    """
    out = []
    for i in range(0, len(data), 3):
        chunk = data[i:i + 3]
        n = len(chunk)
        # Pack up to 3 bytes into a 24-bit group
        group = int.from_bytes(bytes(chunk) + b"\x00" * (3 - n), "big")
        out.append(ALPHABET[(group >> 18) & 0x3F])
        out.append(ALPHABET[(group >> 12) & 0x3F])
        out.append(ALPHABET[(group >> 6) & 0x3F] if n > 1 else PAD)
        out.append(ALPHABET[group & 0x3F] if n > 2 else PAD)
    return "".join(out)


def b64decode(text: str) -> bytes:
    """
    Base64 decode string to bytes.
    
    Args:
        text: Base64-encoded string
    
    Returns:
        Decoded bytes
    
    Raises:
        InvalidEncodingError: If the length, padding or any character is
            not valid Base64, or the encoding is not canonical
    """
    if not isinstance(text, str):
        raise InvalidEncodingError("Base64 input must be a string")
    if not text:
        return b""
    if len(text) % 4 != 0:
        raise InvalidEncodingError(f"Base64 length must be a multiple of 4, got {len(text)}")
    
    body = text.rstrip(PAD)
    pad_count = len(text) - len(body)
    if pad_count > 2:
        raise InvalidEncodingError(f"Too much Base64 padding: {pad_count} characters")
    
    out = bytearray()
    accumulator = 0
    bits = 0
    for position, ch in enumerate(body):
        value = _DECODE_TABLE.get(ch)
        if value is None:
            raise InvalidEncodingError(f"Invalid Base64 character {ch!r} at position {position}")
        accumulator = ((accumulator << 6) | value) & 0xFFFF
        bits += 6
        if bits >= 8:
            bits -= 8
            out.append((accumulator >> bits) & 0xFF)

    # Leftover bits of the last character must be zero
    if accumulator & ((1 << bits) - 1):
        raise InvalidEncodingError(
            f"Non-zero trailing bits in Base64 character at position {len(body) - 1}"
        )

    return bytes(out)


# Test function
if __name__ == "__main__":
    import base64
    
    print("[*] Testing Base64 codec")
    
    for sample in (b"", b"f", b"fo", b"foo", b"foob", b"fooba", b"foobar"):
        encoded = b64encode(sample)
        assert encoded == base64.b64encode(sample).decode("ascii"), f"Mismatch for {sample!r}"
        assert b64decode(encoded) == sample, f"Roundtrip failed for {sample!r}"
        print(f"    {sample!r:10} -> {encoded}")
    
    print("\n[✓] Base64 codec test passed!")
