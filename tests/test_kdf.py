import hashlib
import unittest

from passvault.common.exceptions import KeyDerivationError
from passvault.common.utils import secure_zero
from passvault.crypto.kdf import (
    derive,
    derive_key,
    pbkdf2_derive,
    split_key_material,
    KEY_MATERIAL_SIZE,
)

SALT = bytes.fromhex("00112233aabbccdd00112233aabbccdd")


class DeriveTests(unittest.TestCase):
    def test_hand_computed_values(self):
        # buffer 00 00 00 01 -> 00 00 00 03 after one round; fold; neighbour mix
        self.assertEqual(derive(b"", b"", 1, 1), b"\x05")
        self.assertEqual(derive(b"", b"", 1, 4), b"\x03\x00\x03\x03")
        # Running hash carries into the second round
        self.assertEqual(derive(b"", b"", 2, 1), b"\x09")

    def test_deterministic(self):
        a = derive_key("correct horse", SALT, 500, 48)
        b = derive_key("correct horse", SALT, 500, 48)
        self.assertEqual(a, b)
        self.assertEqual(len(a), 48)

    def test_output_length(self):
        for length in (1, 16, 32, 48, 80, 200):
            self.assertEqual(len(derive_key("pw", SALT, 10, length)), length)

    def test_inputs_change_output(self):
        base = derive_key("password", SALT, 100, 48)
        self.assertNotEqual(base, derive_key("passwore", SALT, 100, 48))
        self.assertNotEqual(base, derive_key("password", SALT[:-1] + b"\xde", 100, 48))
        self.assertNotEqual(base, derive_key("password", SALT, 101, 48))

    def test_invalid_parameters(self):
        with self.assertRaises(KeyDerivationError):
            derive_key("pw", SALT, 0, 48)
        with self.assertRaises(KeyDerivationError):
            derive_key("pw", SALT, 10, 0)
        with self.assertRaises(KeyDerivationError):
            derive_key("pw", bytes(8), 10, 48)
        with self.assertRaises(KeyDerivationError):
            derive_key(b"pw", SALT, 10, 48)
        with self.assertRaises(KeyDerivationError):
            derive("pw", SALT, 10, 48)


class PBKDF2Tests(unittest.TestCase):
    def test_matches_hashlib(self):
        ours = pbkdf2_derive("pass", SALT, 1000, 48)
        ref = hashlib.pbkdf2_hmac("sha256", b"pass", SALT, 1000, dklen=48)
        self.assertEqual(ours, ref)

    def test_invalid_parameters(self):
        with self.assertRaises(KeyDerivationError):
            pbkdf2_derive("pass", SALT, 0, 48)
        with self.assertRaises(KeyDerivationError):
            pbkdf2_derive(b"pass", SALT, 10, 48)


class SplitTests(unittest.TestCase):
    def test_split(self):
        material = bytes(range(80))
        key, iv, rest = split_key_material(material)
        self.assertEqual(key, bytes(range(32)))
        self.assertEqual(iv, bytes(range(32, 48)))
        self.assertEqual(rest, bytes(range(48, 80)))

    def test_split_exact_and_short(self):
        key, iv, rest = split_key_material(bytes(KEY_MATERIAL_SIZE))
        self.assertEqual((len(key), len(iv), rest), (32, 16, b""))
        with self.assertRaises(KeyDerivationError):
            split_key_material(bytes(47))


class WipeableMaterialTests(unittest.TestCase):
    def test_derived_material_can_be_wiped(self):
        for material in (derive_key("master", bytes(16), 10),
                         pbkdf2_derive("master", bytes(16), 10)):
            self.assertIsInstance(material, bytearray)
            self.assertNotEqual(material, bytes(48))
            secure_zero(material)
            self.assertEqual(material, bytes(48))

    def test_split_parts_are_independent_copies(self):
        material = bytearray(range(80))
        parts = split_key_material(material)
        secure_zero(material)
        for part in parts:
            self.assertIsInstance(part, bytearray)
        self.assertEqual(parts[0], bytes(range(32)))


if __name__ == "__main__":
    unittest.main(verbosity=2)
