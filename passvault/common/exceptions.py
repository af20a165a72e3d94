"""
Custom exceptions for PassVault.
"""


class PassVaultException(Exception):
    """Base exception for PassVault errors."""
    pass


class InvalidKeyMaterialError(PassVaultException):
    """Key, IV or MAC key has the wrong type or length."""
    pass


class InvalidPaddingError(PassVaultException):
    """PKCS#7 padding is corrupt (tampered data or wrong key/IV)."""
    pass


class InvalidEncodingError(PassVaultException):
    """Base64 text is malformed."""
    pass


class InvalidCiphertextLengthError(PassVaultException):
    """Ciphertext is not a positive multiple of the block size."""
    pass


class NotInitializedError(PassVaultException):
    """Operation attempted before a key and IV were set."""
    pass


class IntegrityError(PassVaultException):
    """Authentication tag is missing or does not match."""
    pass


class KeyDerivationError(PassVaultException):
    """Key derivation parameters are invalid."""
    pass


class EncryptionError(PassVaultException):
    """Encryption failed."""
    pass


class DecryptionError(PassVaultException):
    """Decryption failed."""
    pass


class KeystoreError(PassVaultException):
    """Key material could not be read or written."""
    pass
