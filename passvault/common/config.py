"""
Runtime configuration for PassVault.

Values come from the environment (optionally a .env file loaded with
python-dotenv) and are validated into a VaultSettings model.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()


class VaultSettings(BaseModel):
    """Validated PassVault settings."""
    key_path: str = Field("keys/aes_key.bin", description="32-byte key blob")
    iv_path: str = Field("keys/aes_iv.bin", description="16-byte IV blob")
    kdf_params_path: str = Field("keys/kdf.json", description="Saved KeyDerivationParams")
    kdf_iterations: int = Field(10000, ge=1)
    per_message_iv: bool = False


def load_settings() -> VaultSettings:
    """
    Build settings from PASSVAULT_* environment variables.
    
    Returns:
        VaultSettings with defaults for unset variables
    """
    return VaultSettings(
        key_path=os.getenv('PASSVAULT_KEY_PATH', 'keys/aes_key.bin'),
        iv_path=os.getenv('PASSVAULT_IV_PATH', 'keys/aes_iv.bin'),
        kdf_params_path=os.getenv('PASSVAULT_KDF_PARAMS_PATH', 'keys/kdf.json'),
        kdf_iterations=os.getenv('PASSVAULT_KDF_ITERATIONS', 10000),
        per_message_iv=os.getenv('PASSVAULT_PER_MESSAGE_IV', 'false'),
    )
