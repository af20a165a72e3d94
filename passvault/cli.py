#!/usr/bin/env python3
"""
PassVault command line.

Usage:
    passvault encrypt --text "hunter2"
    passvault decrypt --text "q1b...=="
    passvault encrypt --text "hunter2" --password "master" --salt 00112233445566778899aabbccddeeff
    passvault encrypt --text "hunter2" --password "master"
    passvault derive --password "master" --salt 00112233445566778899aabbccddeeff --json

Without --password the key and IV are read from the files configured by
PASSVAULT_KEY_PATH / PASSVAULT_IV_PATH (see scripts/gen_keys.py). With
--password but no --salt, the salt, KDF and iteration count come from the
parameter file at PASSVAULT_KDF_PARAMS_PATH.
"""

import argparse
import json
from typing import List, Optional

from passvault.common.config import load_settings
from passvault.common.exceptions import PassVaultException
from passvault.common.utils import secure_zero
from passvault.crypto.engine import CipherEngine
from passvault.crypto.kdf import derive_key, pbkdf2_derive
from passvault.storage.keystore import load_kdf_params, load_key_material


def _hex(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid hex: {e}")


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()

    parser = argparse.ArgumentParser(
        prog="passvault",
        description="AES-256-CBC encryption for password vault fields"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("encrypt", "Encrypt text to Base64"),
                            ("decrypt", "Decrypt Base64 to text")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--text", required=True, help="Input text")
        p.add_argument("--key-file", default=settings.key_path,
                       help=f"32-byte key file (default: {settings.key_path})")
        p.add_argument("--iv-file", default=settings.iv_path,
                       help=f"16-byte IV file (default: {settings.iv_path})")
        p.add_argument("--password", help="Derive key material from this password")
        p.add_argument("--salt", type=_hex,
                       help="16-byte salt in hex (default: read from --kdf-params)")
        p.add_argument("--kdf-params", default=settings.kdf_params_path,
                       help=f"Saved KDF parameters (default: {settings.kdf_params_path})")
        p.add_argument("--kdf", choices=["simple", "pbkdf2"],
                       help="KDF (default: saved parameters, else simple)")
        p.add_argument("--iterations", type=int,
                       help=f"KDF iterations (default: saved parameters, else {settings.kdf_iterations})")
        p.add_argument("--random-iv", action="store_true", default=settings.per_message_iv,
                       help="Use a fresh IV per message (prepended to the output)")
        p.add_argument("--authenticate", action="store_true",
                       help="Append an HMAC-SHA256 tag (password mode only)")
        p.add_argument("--json", action="store_true", help="Output JSON to stdout")
        p.set_defaults(default_iterations=settings.kdf_iterations)

    p = sub.add_parser("derive", help="Derive key material from a password")
    p.add_argument("--password", required=True)
    p.add_argument("--salt", type=_hex, required=True, help="16-byte salt in hex")
    p.add_argument("--kdf", choices=["simple", "pbkdf2"], default="simple")
    p.add_argument("--iterations", type=int, default=settings.kdf_iterations)
    p.add_argument("--length", type=int, default=48, help="Output length in bytes")
    p.add_argument("--json", action="store_true", help="Output JSON to stdout")

    return parser


def _emit(args, payload: dict, text: str):
    if args.json:
        print(json.dumps(payload))
    else:
        print(text)


def _fail(args, message: str, code: int) -> int:
    if args.json:
        print(json.dumps({"error": message}))
    else:
        print(f"[✗] {message}")
    return code


def _resolve_kdf(args):
    """Return (salt, kdf, iterations), or None if no salt is available."""
    if args.salt is not None:
        return (
            args.salt,
            args.kdf or "simple",
            args.iterations if args.iterations is not None else args.default_iterations,
        )

    params = load_kdf_params(args.kdf_params)
    if params is None:
        return None
    return (
        params.salt_bytes(),
        args.kdf or params.kdf,
        args.iterations if args.iterations is not None else params.iterations,
    )


def _build_engine(args) -> Optional[CipherEngine]:
    if args.password is not None:
        resolved = _resolve_kdf(args)
        if resolved is None:
            return None
        salt, kdf, iterations = resolved
        return CipherEngine.from_password(
            args.password,
            salt,
            iterations,
            kdf=kdf,
            per_message_iv=args.random_iv,
            authenticate=args.authenticate,
        )

    loaded = load_key_material(args.key_file, args.iv_file)
    if loaded is None:
        return None
    key, iv = loaded
    try:
        return CipherEngine(key, iv, per_message_iv=args.random_iv)
    finally:
        secure_zero(key)
        secure_zero(iv)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "derive":
            if args.kdf == "pbkdf2":
                material = pbkdf2_derive(args.password, args.salt, args.iterations, args.length)
            else:
                material = derive_key(args.password, args.salt, args.iterations, args.length)
            try:
                _emit(args, {"kdf": args.kdf, "material": material.hex()}, f"material={material.hex()}")
            finally:
                secure_zero(material)
            return 0

        if args.authenticate and args.password is None:
            return _fail(args, "--authenticate requires --password", 2)

        engine = _build_engine(args)
        if engine is None:
            if args.password is not None:
                return _fail(
                    args,
                    f"--salt is required with --password (no KDF parameters at {args.kdf_params})",
                    2
                )
            return _fail(args, f"No key material at {args.key_file} / {args.iv_file}", 2)

        with engine:
            if args.command == "encrypt":
                result = engine.encrypt(args.text)
                _emit(args, {"op": "encrypt", "ciphertext": result}, f"ciphertext={result}")
            else:
                result = engine.decrypt(args.text)
                _emit(args, {"op": "decrypt", "plaintext": result}, f"plaintext={result}")
        return 0

    except PassVaultException as e:
        # Same message for every failure cause
        return _fail(args, str(e), 1)


if __name__ == "__main__":
    raise SystemExit(main())
