"""
Password-Based Key Derivation

Turns a passphrase plus salt into key and IV material.

derive() is the vault's own iterative mixing routine. It is simple and
NOT a vetted key-derivation function; pbkdf2_derive() provides
PBKDF2-HMAC-SHA256 for new vaults.
"""

from typing import Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from passvault.common.exceptions import KeyDerivationError
from passvault.common.utils import secure_zero
from passvault.crypto.block import BLOCK_SIZE
from passvault.crypto.key_schedule import KEY_SIZE

SALT_SIZE = 16
DEFAULT_ITERATIONS = 10000
KEY_MATERIAL_SIZE = KEY_SIZE + BLOCK_SIZE

# Big-endian block counter 1 appended to password || salt
COUNTER_BLOCK = b"\x00\x00\x00\x01"


def _check_params(password, salt, iterations: int, output_length: int) -> None:
    if not isinstance(password, (bytes, bytearray)):
        raise KeyDerivationError("Password must be bytes")
    if not isinstance(salt, (bytes, bytearray)):
        raise KeyDerivationError("Salt must be bytes")
    if iterations < 1:
        raise KeyDerivationError(f"Iterations must be positive, got {iterations}")
    if output_length < 1:
        raise KeyDerivationError(f"Output length must be positive, got {output_length}")


def derive(password: bytes, salt: bytes, iterations: int, output_length: int) -> bytearray:
    """
    Derive key material with the vault's iterative mixing routine.
    
    The working buffer is password || salt || 00 00 00 01. A single-byte
    hash runs across the buffer for every iteration; each byte is rotated
    left by one bit and XORed with (hash + iteration) mod 256. The buffer
    is then folded into output_length bytes and every output byte is
    mixed with the sum of its two cyclic neighbours.
    
    Args:
        password: Passphrase bytes
        salt: Salt bytes
        iterations: Number of mixing rounds (>= 1)
        output_length: Number of bytes to produce (>= 1)
    
    Returns:
        Derived bytes as a bytearray the caller can wipe
    
    Raises:
        KeyDerivationError: If any parameter is invalid
    """
    _check_params(password, salt, iterations, output_length)
    
    buffer = bytearray(password) + bytearray(salt) + bytearray(COUNTER_BLOCK)
    running_hash = 0
    
    for iteration in range(iterations):
        for j in range(len(buffer)):
            running_hash ^= buffer[j]
            rotated = ((buffer[j] << 1) | (buffer[j] >> 7)) & 0xFF
            buffer[j] = rotated ^ ((running_hash + iteration) & 0xFF)
    
    # Fold the buffer into the output
    output = bytearray(output_length)
    for j, value in enumerate(buffer):
        output[j % output_length] ^= value
    
    # Final neighbour mixing over a snapshot
    previous = bytearray(output)
    for k in range(output_length):
        left = previous[(k - 1) % output_length]
        right = previous[(k + 1) % output_length]
        output[k] ^= (left + right) & 0xFF
    
    secure_zero(buffer)
    secure_zero(previous)
    return output


def derive_key(
    password: str,
    salt: bytes,
    iterations: int = DEFAULT_ITERATIONS,
    output_length: int = KEY_MATERIAL_SIZE
) -> bytearray:
    """
    Derive key material from a text password and a 16-byte salt.
    
    Args:
        password: User passphrase
        salt: 16-byte salt
        iterations: Number of mixing rounds
        output_length: Number of bytes to produce
    
    Returns:
        output_length bytes of key material
    
    Raises:
        KeyDerivationError: If the salt is not 16 bytes or parameters are invalid
    """
    if not isinstance(password, str):
        raise KeyDerivationError("Password must be a string")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_SIZE:
        raise KeyDerivationError(f"Salt must be {SALT_SIZE} bytes")
    
    return derive(password.encode("utf-8"), bytes(salt), iterations, output_length)


def pbkdf2_derive(
    password: str,
    salt: bytes,
    iterations: int = 200_000,
    output_length: int = KEY_MATERIAL_SIZE
) -> bytearray:
    """
    Derive key material with PBKDF2-HMAC-SHA256.
    
    Args:
        password: User passphrase
        salt: Salt (16 bytes recommended)
        iterations: PBKDF2 work factor
        output_length: Number of bytes to produce
    
    Returns:
        output_length bytes of key material
    
    Raises:
        KeyDerivationError: If parameters are invalid
    """
    if not isinstance(password, str):
        raise KeyDerivationError("Password must be a string")
    _check_params(password.encode("utf-8"), salt, iterations, output_length)
    
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=output_length,
        salt=bytes(salt),
        iterations=iterations,
    )
    return bytearray(kdf.derive(password.encode("utf-8")))


def split_key_material(material: bytes) -> Tuple[bytearray, bytearray, bytearray]:
    """
    Split derived material into (key, iv, remainder).
    
    Args:
        material: At least 48 bytes of derived material
    
    Returns:
        Tuple of (32-byte key, 16-byte IV, remaining bytes) as bytearrays
    
    Raises:
        KeyDerivationError: If material is shorter than 48 bytes
    """
    if len(material) < KEY_MATERIAL_SIZE:
        raise KeyDerivationError(
            f"Need at least {KEY_MATERIAL_SIZE} bytes of material, got {len(material)}"
        )
    
    key = bytearray(material[:KEY_SIZE])
    iv = bytearray(material[KEY_SIZE:KEY_MATERIAL_SIZE])
    rest = bytearray(material[KEY_MATERIAL_SIZE:])
    return key, iv, rest
