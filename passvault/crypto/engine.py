"""
AES-256-CBC Cipher Engine

Composes padding, CBC chaining, the AES block transform and Base64 into
text-in/text-out encrypt() and decrypt().

Wire layout of an encoded message:

    Base64( [iv]  ciphertext  [tag] )

The IV prefix is present only with per_message_iv=True and the 32-byte
HMAC-SHA256 tag only when a MAC key is configured. The default layout is
plain Base64(ciphertext) under the engine's fixed IV.

An engine is not thread-safe; give each thread its own instance or guard
it with a lock.
"""

from typing import Optional

from passvault.common.exceptions import (
    PassVaultException,
    InvalidKeyMaterialError,
    InvalidCiphertextLengthError,
    InvalidEncodingError,
    NotInitializedError,
    IntegrityError,
    KeyDerivationError,
    EncryptionError,
    DecryptionError,
)
from passvault.common.utils import generate_random_bytes, secure_zero
from passvault.crypto.block import BLOCK_SIZE
from passvault.crypto.cbc import cbc_encrypt, cbc_decrypt
from passvault.crypto.encoding import b64encode, b64decode
from passvault.crypto.kdf import (
    DEFAULT_ITERATIONS,
    KEY_MATERIAL_SIZE,
    derive_key,
    pbkdf2_derive,
    split_key_material,
)
from passvault.crypto.key_schedule import KEY_SIZE, expand_key
from passvault.crypto.mac import TAG_SIZE, MIN_MAC_KEY_SIZE, compute_tag, verify_tag
from passvault.crypto.padding import pkcs7_pad, pkcs7_unpad

IV_SIZE = BLOCK_SIZE
MAC_KEY_SIZE = 32


class CipherEngine:
    """
    Caller-owned AES-256-CBC engine holding one key/IV pair.

    The engine starts Uninitialized unless key material is passed in, and
    becomes Ready once a key and IV are set. Use it as a context manager to
    guarantee the key material is wiped on exit.
    """

    def __init__(
        self,
        key: Optional[bytes] = None,
        iv: Optional[bytes] = None,
        *,
        per_message_iv: bool = False,
        mac_key: Optional[bytes] = None
    ):
        """
        Initialize the engine.

        Args:
            key: 32-byte AES key (optional; engine stays Uninitialized without it)
            iv: 16-byte IV (required with a key unless per_message_iv is set)
            per_message_iv: Draw a fresh random IV for every message
            mac_key: Optional key (>= 16 bytes) enabling HMAC-SHA256 tags

        Raises:
            InvalidKeyMaterialError: If key, IV or MAC key has the wrong size
        """
        self.per_message_iv = per_message_iv
        self._key: Optional[bytearray] = None
        self._iv: Optional[bytearray] = None
        self._mac_key: Optional[bytearray] = None
        self._schedule = None

        if key is not None or iv is not None or mac_key is not None:
            self.set_key(key, iv, mac_key=mac_key)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def generate(cls, *, per_message_iv: bool = False, authenticate: bool = False) -> "CipherEngine":
        """Create a Ready engine with fresh random key material."""
        engine = cls(per_message_iv=per_message_iv)
        engine.generate_key(authenticate=authenticate)
        return engine

    @classmethod
    def from_password(
        cls,
        password: str,
        salt: bytes,
        iterations: int = DEFAULT_ITERATIONS,
        *,
        kdf: str = "simple",
        per_message_iv: bool = False,
        authenticate: bool = False
    ) -> "CipherEngine":
        """Create a Ready engine from a password and 16-byte salt."""
        engine = cls(per_message_iv=per_message_iv)
        engine.derive_from_password(
            password, salt, iterations, kdf=kdf, authenticate=authenticate
        )
        return engine

    @classmethod
    def from_key_files(
        cls,
        key_path: str,
        iv_path: str,
        *,
        per_message_iv: bool = False
    ) -> "CipherEngine":
        """Create a Ready engine from key/IV files, generating them if absent."""
        engine = cls(per_message_iv=per_message_iv)
        engine.load_or_generate(key_path, iv_path)
        return engine

    # ------------------------------------------------------------------
    # Key management
    # ------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        """True once a key (and IV, in fixed-IV mode) is set."""
        if self._key is None:
            return False
        return self._iv is not None or self.per_message_iv

    @property
    def authenticated(self) -> bool:
        return self._mac_key is not None

    def set_key(self, key: bytes, iv: Optional[bytes] = None, mac_key: Optional[bytes] = None):
        """
        Replace the engine's key material.

        The previous material is wiped and the key schedule is rebuilt
        before the next operation.

        Args:
            key: 32-byte AES key
            iv: 16-byte IV (optional only with per_message_iv)
            mac_key: Optional MAC key (>= 16 bytes); None disables tags

        Raises:
            InvalidKeyMaterialError: If any component has the wrong size
        """
        if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_SIZE:
            raise InvalidKeyMaterialError(f"Key must be {KEY_SIZE} bytes")

        if iv is None:
            if not self.per_message_iv:
                raise InvalidKeyMaterialError("IV is required unless per_message_iv is enabled")
        elif not isinstance(iv, (bytes, bytearray)) or len(iv) != IV_SIZE:
            raise InvalidKeyMaterialError(f"IV must be {IV_SIZE} bytes")

        if mac_key is not None and (
            not isinstance(mac_key, (bytes, bytearray)) or len(mac_key) < MIN_MAC_KEY_SIZE
        ):
            raise InvalidKeyMaterialError(f"MAC key must be at least {MIN_MAC_KEY_SIZE} bytes")

        self.clear()
        self._key = bytearray(key)
        self._iv = bytearray(iv) if iv is not None else None
        self._mac_key = bytearray(mac_key) if mac_key is not None else None

    def generate_key(self, authenticate: bool = False):
        """
        Set fresh random key material.

        Args:
            authenticate: Also generate a 32-byte MAC key
        """
        key = generate_random_bytes(KEY_SIZE)
        iv = generate_random_bytes(IV_SIZE)
        mac_key = generate_random_bytes(MAC_KEY_SIZE) if authenticate else None
        self.set_key(key, iv, mac_key)

    def derive_from_password(
        self,
        password: str,
        salt: bytes,
        iterations: int = DEFAULT_ITERATIONS,
        *,
        kdf: str = "simple",
        authenticate: bool = False
    ):
        """
        Derive and set key material from a password.

        48 bytes are derived (key || IV), plus 32 more for the MAC key when
        authenticate is set.

        Args:
            password: User passphrase
            salt: 16-byte salt
            iterations: Work factor for the chosen KDF
            kdf: "simple" (vault mixing routine) or "pbkdf2"
            authenticate: Also derive a MAC key

        Raises:
            KeyDerivationError: If the KDF name or parameters are invalid
        """
        length = KEY_MATERIAL_SIZE + (MAC_KEY_SIZE if authenticate else 0)

        if kdf == "simple":
            material = derive_key(password, salt, iterations, length)
        elif kdf == "pbkdf2":
            material = pbkdf2_derive(password, salt, iterations, length)
        else:
            raise KeyDerivationError(f"Unknown KDF: {kdf}")

        try:
            key, iv, rest = split_key_material(material)
        finally:
            secure_zero(material)
        try:
            self.set_key(key, iv, rest if authenticate else None)
        finally:
            for buffer in (key, iv, rest):
                secure_zero(buffer)

    def load_or_generate(self, key_path: str, iv_path: str):
        """
        Load key/IV blobs from disk, generating and saving them if absent.

        Args:
            key_path: Path of the 32-byte key file
            iv_path: Path of the 16-byte IV file

        Returns:
            True if new material was generated, False if loaded
        """
        from passvault.storage.keystore import load_or_generate_key_material

        key, iv, created = load_or_generate_key_material(key_path, iv_path)
        try:
            self.set_key(key, iv, None)
        finally:
            secure_zero(key)
            secure_zero(iv)
        return created

    def clear(self):
        """Overwrite all key material with zeros and return to Uninitialized."""
        for buffer in (self._key, self._iv, self._mac_key, self._schedule):
            if buffer is not None:
                secure_zero(buffer)
        self._key = None
        self._iv = None
        self._mac_key = None
        self._schedule = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.clear()
        return False

    def __repr__(self):
        state = "ready" if self.is_ready else "uninitialized"
        return (
            f"CipherEngine(state={state}, per_message_iv={self.per_message_iv}, "
            f"authenticated={self.authenticated})"
        )

    def _require_ready(self):
        if not self.is_ready:
            raise NotInitializedError("Cipher engine has no key material")

    def _round_keys(self):
        if self._schedule is None:
            self._schedule = expand_key(self._key)
        return self._schedule

    # ------------------------------------------------------------------
    # Encryption / decryption
    # ------------------------------------------------------------------

    def encrypt_bytes(self, data: bytes) -> bytes:
        """
        Encrypt raw bytes.

        Args:
            data: Plaintext bytes

        Returns:
            [iv] || ciphertext || [tag]; empty input returns b""

        Raises:
            NotInitializedError: If no key is set
            EncryptionError: If encryption fails
        """
        if not data:
            return b""
        self._require_ready()

        try:
            iv = generate_random_bytes(IV_SIZE) if self.per_message_iv else bytes(self._iv)
            ciphertext = cbc_encrypt(pkcs7_pad(data, BLOCK_SIZE), iv, self._round_keys())

            payload = iv + ciphertext if self.per_message_iv else ciphertext
            if self._mac_key is not None:
                payload += compute_tag(self._mac_key, iv + ciphertext)
            return payload

        except PassVaultException as e:
            raise EncryptionError("Encryption failed") from e

    def decrypt_bytes(self, payload: bytes) -> bytes:
        """
        Decrypt raw bytes produced by encrypt_bytes().

        Args:
            payload: [iv] || ciphertext || [tag]

        Returns:
            Plaintext bytes; empty input returns b""

        Raises:
            NotInitializedError: If no key is set
            DecryptionError: If the payload is malformed, tampered with or
                was produced under different key material
        """
        if not payload:
            return b""
        self._require_ready()

        try:
            payload = bytes(payload)
            tag = None
            if self._mac_key is not None:
                if len(payload) < TAG_SIZE:
                    raise IntegrityError("Authentication tag missing")
                payload, tag = payload[:-TAG_SIZE], payload[-TAG_SIZE:]

            if self.per_message_iv:
                if len(payload) < IV_SIZE:
                    raise InvalidCiphertextLengthError("Message too short to hold an IV")
                iv, ciphertext = payload[:IV_SIZE], payload[IV_SIZE:]
            else:
                iv, ciphertext = bytes(self._iv), payload

            # Authenticate before touching the cipher
            if tag is not None and not verify_tag(self._mac_key, iv + ciphertext, tag):
                raise IntegrityError("Authentication tag mismatch")

            padded = cbc_decrypt(ciphertext, iv, self._round_keys())
            return pkcs7_unpad(padded, BLOCK_SIZE)

        except PassVaultException as e:
            raise DecryptionError("Decryption failed") from e

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt text to Base64.

        Args:
            plaintext: Text to encrypt

        Returns:
            Base64-encoded ciphertext ("" for empty input)

        Raises:
            NotInitializedError: If no key is set
            EncryptionError: If encryption fails
        """
        if not isinstance(plaintext, str):
            raise TypeError("Plaintext must be a string")
        if plaintext == "":
            return ""

        return b64encode(self.encrypt_bytes(plaintext.encode("utf-8")))

    def decrypt(self, encoded: str) -> str:
        """
        Decrypt Base64 ciphertext to text.

        Args:
            encoded: Base64-encoded ciphertext

        Returns:
            Original text ("" for empty input)

        Raises:
            NotInitializedError: If no key is set
            DecryptionError: If decoding, cipher processing, unpadding or
                UTF-8 decoding fails
        """
        if not isinstance(encoded, str):
            raise TypeError("Ciphertext must be a string")
        if encoded == "":
            return ""
        self._require_ready()

        try:
            payload = b64decode(encoded)
        except InvalidEncodingError as e:
            raise DecryptionError("Decryption failed") from e

        plaintext = self.decrypt_bytes(payload)
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("Decryption failed") from e


# Test function for development
if __name__ == "__main__":
    test_key = bytes(range(32))
    test_iv = bytes(range(16))
    test_message = "Hello World"

    print(f"Original: {test_message}")

    with CipherEngine(test_key, test_iv) as engine:
        encrypted = engine.encrypt(test_message)
        print(f"Encrypted (base64): {encrypted}")

        decrypted = engine.decrypt(encrypted)
        print(f"Decrypted: {decrypted}")

    assert decrypted == test_message, "Encryption/Decryption test failed!"
    print("\n[✓] AES-256-CBC encryption/decryption test passed!")
