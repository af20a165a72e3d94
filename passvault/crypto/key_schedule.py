"""
AES-256 Key Expansion

Expands a 32-byte key into 60 32-bit words (15 round keys of 4 words).
"""

from typing import List

from passvault.common.exceptions import InvalidKeyMaterialError
from passvault.crypto.tables import SBOX, RCON

KEY_SIZE = 32
KEY_WORDS = 8       # Nk
ROUNDS = 14         # Nr
SCHEDULE_WORDS = 4 * (ROUNDS + 1)


def sub_word(word: int) -> int:
    """Apply the S-box to each byte of a 32-bit word."""
    return (
        (SBOX[(word >> 24) & 0xFF] << 24)
        | (SBOX[(word >> 16) & 0xFF] << 16)
        | (SBOX[(word >> 8) & 0xFF] << 8)
        | SBOX[word & 0xFF]
    )


def rot_word(word: int) -> int:
    """Rotate a 32-bit word left by one byte."""
    return ((word << 8) & 0xFFFFFFFF) | ((word >> 24) & 0xFF)


def expand_key(key: bytes) -> List[int]:
    """
    Expand an AES-256 key into its round-key schedule.
    
    Words 0..7 are the key itself (big-endian). Every later word is
    w[i-8] XOR T(w[i-1]), where T is RotWord+SubWord+Rcon on multiples
    of 8, SubWord alone at offset 4, and identity otherwise.
    
    Args:
        key: 32-byte key
    
    Returns:
        List of 60 round-key words
    
    Raises:
        InvalidKeyMaterialError: If key is not 32 bytes
    """
    if not isinstance(key, (bytes, bytearray)):
        raise InvalidKeyMaterialError("Key must be bytes")
    if len(key) != KEY_SIZE:
        raise InvalidKeyMaterialError(f"AES-256 requires 32-byte key, got {len(key)} bytes")
    
    words = [0] * SCHEDULE_WORDS
    
    # First 8 words come straight from the key
    for i in range(KEY_WORDS):
        words[i] = int.from_bytes(key[4 * i:4 * i + 4], "big")
    
    for i in range(KEY_WORDS, SCHEDULE_WORDS):
        temp = words[i - 1]
        if i % KEY_WORDS == 0:
            temp = sub_word(rot_word(temp)) ^ (RCON[i // KEY_WORDS] << 24)
        elif i % KEY_WORDS == 4:
            temp = sub_word(temp)
        words[i] = words[i - KEY_WORDS] ^ temp
    
    return words


def round_key(schedule: List[int], round_index: int) -> bytes:
    """
    Return the 16 bytes of one round key.
    
    Args:
        schedule: Expanded key from expand_key()
        round_index: Round number (0-14)
    
    Returns:
        16-byte round key
    """
    if not 0 <= round_index <= ROUNDS:
        raise ValueError(f"Round index must be in 0..{ROUNDS}, got {round_index}")
    
    start = 4 * round_index
    return b"".join(w.to_bytes(4, "big") for w in schedule[start:start + 4])
