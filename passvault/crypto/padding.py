"""
PKCS#7 Padding

Aligns plaintext to the cipher block size and recovers the exact length
on decrypt.
"""

from passvault.common.exceptions import InvalidPaddingError


def pkcs7_pad(data: bytes, block_size: int = 16) -> bytes:
    """
    Apply PKCS#7 padding to data.
    
    A full block of padding is appended when data is already aligned.
    
    Args:
        data: Data to pad
        block_size: Block size in bytes (default: 16 for AES)
    
    Returns:
        Padded data
    """
    if not 1 <= block_size <= 255:
        raise ValueError(f"Block size must be in 1..255, got {block_size}")
    
    padding_length = block_size - (len(data) % block_size)
    padding = bytes([padding_length] * padding_length)
    return bytes(data) + padding


def pkcs7_unpad(data: bytes, block_size: int = 16) -> bytes:
    """
    Remove PKCS#7 padding from data.
    
    Args:
        data: Padded data
        block_size: Block size in bytes (default: 16 for AES)
    
    Returns:
        Unpadded data
    
    Raises:
        InvalidPaddingError: If padding is invalid
    """
    if not data:
        raise InvalidPaddingError("Cannot unpad empty data")
    
    padding_length = data[-1]
    
    if padding_length < 1 or padding_length > block_size:
        raise InvalidPaddingError(f"Invalid padding length: {padding_length}")
    
    if padding_length > len(data):
        raise InvalidPaddingError("Padding length exceeds data length")
    
    # Verify all padding bytes are correct
    for i in range(padding_length):
        if data[-(i + 1)] != padding_length:
            raise InvalidPaddingError("Invalid PKCS#7 padding")
    
    return bytes(data[:-padding_length])
