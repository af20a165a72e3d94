#!/usr/bin/env python3
"""
Generate Vault Key Material

Creates the random AES-256 key and IV blobs used by the cipher engine
when no password-derived material exists, and a fresh salt + KDF
parameter file that `passvault --password` reads when no --salt is given.

Usage:
    python scripts/gen_keys.py
    python scripts/gen_keys.py --key keys/aes_key.bin --iv keys/aes_iv.bin --force
    python scripts/gen_keys.py --kdf-params keys/kdf.json --kdf pbkdf2 --iterations 200000
"""

import argparse
import os

from passvault.common.config import load_settings
from passvault.common.models import KeyDerivationParams
from passvault.common.utils import generate_random_bytes, secure_zero
from passvault.crypto.kdf import SALT_SIZE
from passvault.storage.keystore import (
    destroy_key_material,
    load_or_generate_key_material,
    save_kdf_params,
)


def generate_key_files(key_path: str, iv_path: str, force: bool = False) -> bool:
    """
    Generate key and IV files.

    Args:
        key_path: Destination of the 32-byte key
        iv_path: Destination of the 16-byte IV
        force: Destroy existing material first

    Returns:
        True if new material was written
    """
    if force:
        print("[*] Destroying existing key material...")
        destroy_key_material(key_path, iv_path)

    key, iv, created = load_or_generate_key_material(key_path, iv_path)
    secure_zero(key)
    secure_zero(iv)

    if not created:
        print("[*] Existing key material kept (use --force to replace it)")
    return created


def generate_kdf_params(path: str, kdf: str, iterations: int) -> KeyDerivationParams:
    """
    Write a fresh salt and KDF parameters.

    Args:
        path: Destination JSON file
        kdf: "simple" or "pbkdf2"
        iterations: KDF work factor

    Returns:
        The saved parameters
    """
    print(f"[*] Generating {SALT_SIZE}-byte salt for {kdf} KDF ({iterations} iterations)...")
    params = KeyDerivationParams.from_salt(
        generate_random_bytes(SALT_SIZE),
        kdf=kdf,
        iterations=iterations,
    )
    save_kdf_params(path, params)
    return params


def main():
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Generate AES-256 key/IV files and KDF parameters"
    )
    parser.add_argument(
        "--key",
        default=settings.key_path,
        help=f"Key file path (default: {settings.key_path})"
    )
    parser.add_argument(
        "--iv",
        default=settings.iv_path,
        help=f"IV file path (default: {settings.iv_path})"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Replace existing key material"
    )
    parser.add_argument(
        "--kdf-params",
        default=settings.kdf_params_path,
        help=f"Salt + KDF parameter file (default: {settings.kdf_params_path})"
    )
    parser.add_argument(
        "--no-kdf-params",
        action="store_true",
        help="Skip writing the KDF parameter file"
    )
    parser.add_argument(
        "--kdf",
        choices=["simple", "pbkdf2"],
        default="simple",
        help="KDF recorded in the parameter file (default: simple)"
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=settings.kdf_iterations,
        help=f"KDF iterations (default: {settings.kdf_iterations})"
    )

    args = parser.parse_args()

    generate_key_files(args.key, args.iv, force=args.force)

    if not args.no_kdf_params:
        if os.path.exists(args.kdf_params) and not args.force:
            print(f"[*] {args.kdf_params} exists (use --force to replace it)")
        else:
            generate_kdf_params(args.kdf_params, args.kdf, args.iterations)

    print("\n[✓] Key material ready!")


if __name__ == "__main__":
    main()
