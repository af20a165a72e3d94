import os
import unittest
from unittest import mock

from pydantic import ValidationError

from passvault.common.config import VaultSettings, load_settings
from passvault.common.exceptions import DecryptionError
from passvault.common.models import Category, KeyDerivationParams, PasswordEntry
from passvault.crypto.engine import CipherEngine

KEY = bytes(range(32))
IV = bytes(range(16))


class KeyDerivationParamsTests(unittest.TestCase):
    def test_defaults_and_salt(self):
        params = KeyDerivationParams.from_salt(b"\x01" * 16)
        self.assertEqual(params.kdf, "simple")
        self.assertEqual(params.iterations, 10000)
        self.assertEqual(params.output_length, 48)
        self.assertEqual(params.salt_bytes(), b"\x01" * 16)

    def test_validation(self):
        with self.assertRaises(ValidationError):
            KeyDerivationParams(salt="AAAA", iterations=0)
        with self.assertRaises(ValidationError):
            KeyDerivationParams(salt="AAAA", kdf="md5")
        with self.assertRaises(ValidationError):
            KeyDerivationParams(salt="AAAA", output_length=16)

    def test_params_rebuild_engine(self):
        params = KeyDerivationParams.from_salt(bytes(16), iterations=50)
        restored = KeyDerivationParams.model_validate_json(params.model_dump_json())
        a = CipherEngine.from_password("pw", params.salt_bytes(), params.iterations, kdf=params.kdf)
        b = CipherEngine.from_password("pw", restored.salt_bytes(), restored.iterations, kdf=restored.kdf)
        self.assertEqual(a.encrypt("x"), b.encrypt("x"))


class PasswordEntryTests(unittest.TestCase):
    def test_encrypt_and_decrypt_secrets(self):
        engine = CipherEngine(KEY, IV)
        entry = PasswordEntry(
            title="Bank",
            username="alice",
            password="s3cr3t!",
            category=Category.BANKING,
            notes="PIN is elsewhere",
        )
        sealed = entry.encrypt_secrets(engine)
        self.assertEqual(sealed.title, "Bank")
        self.assertEqual(sealed.username, "alice")
        self.assertNotEqual(sealed.password, "s3cr3t!")
        self.assertEqual(sealed.password, engine.encrypt("s3cr3t!"))
        self.assertEqual(entry.password, "s3cr3t!")

        opened = sealed.decrypt_secrets(engine)
        self.assertEqual(opened, entry)

    def test_empty_secrets_stay_empty(self):
        engine = CipherEngine(KEY, IV)
        entry = PasswordEntry(title="No notes", password="pw")
        sealed = entry.encrypt_secrets(engine)
        self.assertEqual(sealed.notes, "")

    def test_corrupt_ciphertext_fails(self):
        sealed = PasswordEntry(title="t", password="pw").encrypt_secrets(CipherEngine(KEY, IV))
        sealed = sealed.model_copy(update={"password": "****"})
        with self.assertRaises(DecryptionError):
            sealed.decrypt_secrets(CipherEngine(KEY, IV))

    def test_touch_and_serialization(self):
        entry = PasswordEntry(title="Mail", category="email")
        self.assertIsNone(entry.modified_at)
        entry.touch()
        self.assertIsNotNone(entry.modified_at)
        self.assertEqual(entry.category, Category.EMAIL)
        self.assertEqual(PasswordEntry.model_validate_json(entry.model_dump_json()), entry)


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        self.assertEqual(settings, VaultSettings())
        self.assertEqual(settings.key_path, "keys/aes_key.bin")
        self.assertFalse(settings.per_message_iv)

    def test_environment_overrides(self):
        env = {
            "PASSVAULT_KEY_PATH": "/tmp/k.bin",
            "PASSVAULT_IV_PATH": "/tmp/iv.bin",
            "PASSVAULT_KDF_ITERATIONS": "2500",
            "PASSVAULT_PER_MESSAGE_IV": "true",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.key_path, "/tmp/k.bin")
        self.assertEqual(settings.iv_path, "/tmp/iv.bin")
        self.assertEqual(settings.kdf_iterations, 2500)
        self.assertTrue(settings.per_message_iv)

    def test_invalid_environment(self):
        with mock.patch.dict(os.environ, {"PASSVAULT_KDF_ITERATIONS": "0"}, clear=True):
            with self.assertRaises(ValidationError):
                load_settings()


if __name__ == "__main__":
    unittest.main(verbosity=2)
