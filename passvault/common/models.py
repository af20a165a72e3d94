"""
Data model definitions using Pydantic.

Key-derivation parameters are serialized to JSON so a password-derived key
can be recreated; password entries carry the secret fields that pass
through the cipher engine.
"""

import uuid
from enum import Enum
from typing import Optional, Literal

from pydantic import BaseModel, Field

from passvault.common.utils import now_ms
from passvault.crypto.encoding import b64encode, b64decode


class KeyDerivationParams(BaseModel):
    """Parameters needed to re-derive a vault key from its password."""
    kdf: Literal["simple", "pbkdf2"] = "simple"
    salt: str = Field(..., description="Base64-encoded 16-byte salt")
    iterations: int = Field(10000, ge=1, description="KDF work factor")
    output_length: int = Field(48, ge=48, description="Bytes of key material (key || IV [|| MAC key])")

    @classmethod
    def from_salt(cls, salt: bytes, **kwargs) -> "KeyDerivationParams":
        """Build parameters from raw salt bytes."""
        return cls(salt=b64encode(salt), **kwargs)

    def salt_bytes(self) -> bytes:
        """Return the decoded salt."""
        return b64decode(self.salt)


class Category(str, Enum):
    """Password entry category."""
    BANKING = "banking"
    SOCIAL_MEDIA = "social_media"
    EMAIL = "email"
    WORK = "work"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    OTHER = "other"


class PasswordEntry(BaseModel):
    """A vault record. Only `password` and `notes` are secret."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    username: str = ""
    password: str = Field("", description="Plaintext or Base64 ciphertext")
    website: str = ""
    category: Category = Category.OTHER
    notes: str = Field("", description="Plaintext or Base64 ciphertext")
    created_at: int = Field(default_factory=now_ms, description="Unix time in milliseconds")
    modified_at: Optional[int] = None

    def touch(self) -> "PasswordEntry":
        """Mark the entry as modified now."""
        self.modified_at = now_ms()
        return self

    def encrypt_secrets(self, engine) -> "PasswordEntry":
        """
        Return a copy with `password` and `notes` encrypted.
        
        Args:
            engine: Ready CipherEngine
        
        Returns:
            New PasswordEntry holding ciphertext
        """
        return self.model_copy(update={
            "password": engine.encrypt(self.password),
            "notes": engine.encrypt(self.notes),
        })

    def decrypt_secrets(self, engine) -> "PasswordEntry":
        """
        Return a copy with `password` and `notes` decrypted.
        
        Args:
            engine: CipherEngine holding the key the entry was sealed with
        
        Returns:
            New PasswordEntry holding plaintext
        
        Raises:
            DecryptionError: If either field cannot be decrypted
        """
        return self.model_copy(update={
            "password": engine.decrypt(self.password),
            "notes": engine.decrypt(self.notes),
        })


# Test function
if __name__ == "__main__":
    print("[*] Testing data models")
    
    params = KeyDerivationParams.from_salt(bytes(16), iterations=5000)
    print(f"\n[1] KeyDerivationParams:")
    print(f"    {params.model_dump_json(indent=2)}")
    assert params.salt_bytes() == bytes(16)
    
    entry = PasswordEntry(title="Mail", username="me@example.com", password="hunter2",
                          category=Category.EMAIL)
    print(f"\n[2] PasswordEntry:")
    print(f"    {entry.model_dump_json(indent=2)}")
    
    print("\n[✓] Data model test passed!")
