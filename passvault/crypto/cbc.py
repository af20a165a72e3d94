"""
CBC Chaining Mode

Drives the AES block transform across a block-aligned buffer. Each
plaintext block is XORed with the previous ciphertext block (the IV for
the first block) before encryption.
"""

from typing import List

from passvault.common.exceptions import InvalidCiphertextLengthError, InvalidKeyMaterialError
from passvault.common.utils import xor_bytes
from passvault.crypto.block import BLOCK_SIZE, encrypt_block, decrypt_block


def _check_iv(iv: bytes) -> None:
    if not isinstance(iv, (bytes, bytearray)) or len(iv) != BLOCK_SIZE:
        raise InvalidKeyMaterialError(f"IV must be {BLOCK_SIZE} bytes")


def _check_length(data: bytes) -> None:
    if len(data) == 0 or len(data) % BLOCK_SIZE != 0:
        raise InvalidCiphertextLengthError(
            f"Length must be a positive multiple of {BLOCK_SIZE}, got {len(data)}"
        )


def cbc_encrypt(padded: bytes, iv: bytes, schedule: List[int]) -> bytes:
    """
    Encrypt block-aligned data in CBC mode.
    
    Args:
        padded: Plaintext, already padded to a multiple of 16 bytes
        iv: 16-byte initialization vector
        schedule: Expanded key
    
    Returns:
        Ciphertext of the same length
    
    Raises:
        InvalidKeyMaterialError: If IV is not 16 bytes
        InvalidCiphertextLengthError: If input is not block-aligned
    """
    _check_iv(iv)
    _check_length(padded)
    
    out = bytearray()
    previous = bytes(iv)
    for i in range(0, len(padded), BLOCK_SIZE):
        block = xor_bytes(padded[i:i + BLOCK_SIZE], previous)
        previous = encrypt_block(block, schedule)
        out.extend(previous)
    
    return bytes(out)


def cbc_decrypt(ciphertext: bytes, iv: bytes, schedule: List[int]) -> bytes:
    """
    Decrypt CBC ciphertext. Padding is left in place.
    
    Args:
        ciphertext: Ciphertext, a positive multiple of 16 bytes
        iv: 16-byte initialization vector
        schedule: Expanded key
    
    Returns:
        Padded plaintext
    
    Raises:
        InvalidKeyMaterialError: If IV is not 16 bytes
        InvalidCiphertextLengthError: If ciphertext is not block-aligned
    """
    _check_iv(iv)
    _check_length(ciphertext)
    
    out = bytearray()
    previous = bytes(iv)
    for i in range(0, len(ciphertext), BLOCK_SIZE):
        block = bytes(ciphertext[i:i + BLOCK_SIZE])
        out.extend(xor_bytes(decrypt_block(block, schedule), previous))
        previous = block
    
    return bytes(out)
