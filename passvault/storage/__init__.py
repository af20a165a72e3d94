"""
Storage modules for PassVault.

Includes:
- Key store for raw key/IV blobs and key-derivation parameters
"""

from .keystore import (
    load_key_material,
    save_key_material,
    load_or_generate_key_material,
    destroy_key_material,
    save_kdf_params,
    load_kdf_params,
)

__all__ = [
    'load_key_material',
    'save_key_material',
    'load_or_generate_key_material',
    'destroy_key_material',
    'save_kdf_params',
    'load_kdf_params',
]
