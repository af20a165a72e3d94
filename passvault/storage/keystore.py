"""
Key Material Storage

Persists the AES key and IV as two raw binary blobs (32 and 16 bytes)
at caller-specified paths, and key-derivation parameters as JSON.

A missing or truncated blob means "no existing key": a fresh pair is
generated and saved. Key bytes are never printed.
"""

import os
from typing import Optional, Tuple

from pydantic import ValidationError

from passvault.common.exceptions import KeystoreError
from passvault.common.models import KeyDerivationParams
from passvault.common.utils import generate_random_bytes, secure_zero

KEY_FILE_SIZE = 32
IV_FILE_SIZE = 16


def _read_blob(path: str, size: int) -> Optional[bytearray]:
    """Read the first `size` bytes of a file, or None if missing/short."""
    try:
        with open(path, "rb") as f:
            data = bytearray(f.read(size))
    except FileNotFoundError:
        return None
    except OSError as e:
        raise KeystoreError(f"Could not read {path}: {e}")
    
    if len(data) < size:
        secure_zero(data)
        return None
    return data


def _write_blob(path: str, data: bytes):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    
    with open(path, "wb") as f:
        f.write(bytes(data))
    # Owner read/write only
    os.chmod(path, 0o600)


def load_key_material(key_path: str, iv_path: str) -> Optional[Tuple[bytearray, bytearray]]:
    """
    Load key and IV blobs.
    
    Args:
        key_path: Path to the 32-byte key file
        iv_path: Path to the 16-byte IV file
    
    Returns:
        Tuple of (key, iv) as wipeable bytearrays, or None if either file
        is missing or truncated
    
    Raises:
        KeystoreError: If a file exists but cannot be read
    """
    key = _read_blob(key_path, KEY_FILE_SIZE)
    iv = _read_blob(iv_path, IV_FILE_SIZE)
    
    if key is None or iv is None:
        for blob in (key, iv):
            if blob is not None:
                secure_zero(blob)
        return None
    
    return key, iv


def save_key_material(key: bytes, iv: bytes, key_path: str, iv_path: str):
    """
    Save key and IV blobs with owner-only permissions.
    
    Args:
        key: 32-byte key
        iv: 16-byte IV
        key_path: Destination of the key file
        iv_path: Destination of the IV file
    
    Raises:
        KeystoreError: If sizes are wrong or the files cannot be written
    """
    if len(key) != KEY_FILE_SIZE or len(iv) != IV_FILE_SIZE:
        raise KeystoreError(
            f"Key/IV must be {KEY_FILE_SIZE}/{IV_FILE_SIZE} bytes, got {len(key)}/{len(iv)}"
        )
    
    try:
        _write_blob(key_path, key)
        _write_blob(iv_path, iv)
    except OSError as e:
        raise KeystoreError(f"Could not save key material: {e}")


def load_or_generate_key_material(key_path: str, iv_path: str) -> Tuple[bytearray, bytearray, bool]:
    """
    Load key material, generating and saving a fresh pair if absent.
    
    Args:
        key_path: Path to the 32-byte key file
        iv_path: Path to the 16-byte IV file
    
    Returns:
        Tuple of (key, iv, created)
        created: True if new material was generated
    """
    loaded = load_key_material(key_path, iv_path)
    if loaded is not None:
        print("[✓] Loaded existing AES key and IV")
        key, iv = loaded
        return key, iv, False
    
    print("[*] No usable key material found, generating new AES key and IV...")
    key = bytearray(generate_random_bytes(KEY_FILE_SIZE))
    iv = bytearray(generate_random_bytes(IV_FILE_SIZE))
    save_key_material(key, iv, key_path, iv_path)
    print(f"[+] AES key saved to: {key_path}")
    print(f"[+] AES IV saved to: {iv_path}")
    return key, iv, True


def destroy_key_material(key_path: str, iv_path: str) -> bool:
    """
    Overwrite key and IV files with zeros and delete them.
    
    Args:
        key_path: Path to the key file
        iv_path: Path to the IV file
    
    Returns:
        True if at least one file was removed
    
    Raises:
        KeystoreError: If a file exists but cannot be wiped
    """
    removed = False
    for path in (key_path, iv_path):
        if not os.path.exists(path):
            continue
        try:
            size = os.path.getsize(path)
            with open(path, "r+b") as f:
                f.write(bytes(size))
                f.flush()
                os.fsync(f.fileno())
            os.remove(path)
            removed = True
        except OSError as e:
            raise KeystoreError(f"Could not destroy {path}: {e}")
    
    if removed:
        print("[✓] Cleared AES key and IV")
    return removed


def save_kdf_params(path: str, params: KeyDerivationParams):
    """
    Save key-derivation parameters to JSON.
    
    Args:
        path: Destination file
        params: Parameters to save
    """
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w") as f:
            f.write(params.model_dump_json(indent=2))
    except OSError as e:
        raise KeystoreError(f"Could not save KDF parameters: {e}")
    
    print(f"[+] KDF parameters saved to: {path}")


def load_kdf_params(path: str) -> Optional[KeyDerivationParams]:
    """
    Load key-derivation parameters from JSON.
    
    Args:
        path: Source file
    
    Returns:
        KeyDerivationParams, or None if the file does not exist
    
    Raises:
        KeystoreError: If the file is unreadable or invalid
    """
    try:
        with open(path, "r") as f:
            return KeyDerivationParams.model_validate_json(f.read())
    except FileNotFoundError:
        return None
    except (OSError, ValidationError) as e:
        raise KeystoreError(f"Could not load KDF parameters: {e}")
