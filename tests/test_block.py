import unittest

from passvault.common.exceptions import InvalidKeyMaterialError
from passvault.crypto.block import (
    encrypt_block,
    decrypt_block,
    shift_rows,
    inv_shift_rows,
    mix_columns,
    inv_mix_columns,
)
from passvault.crypto.gf import multiply, xtime
from passvault.crypto.key_schedule import expand_key, round_key, rot_word, sub_word
from passvault.crypto.tables import SBOX, INV_SBOX, RCON

# FIPS-197 Appendix A.3 key
A3_KEY = bytes.fromhex(
    "603deb1015ca71be2b73aef0857d7781"
    "1f352c073b6108d72d9810a30914dff4"
)
# FIPS-197 Appendix C.3 example
C3_KEY = bytes.fromhex("000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f")
C3_PT = bytes.fromhex("00112233445566778899aabbccddeeff")
C3_CT = bytes.fromhex("8ea2b7ca516745bfeafc49904b496089")


class GaloisFieldTests(unittest.TestCase):
    def test_known_products(self):
        # FIPS-197 section 4.2 examples
        self.assertEqual(multiply(0x57, 0x83), 0xC1)
        self.assertEqual(multiply(0x57, 0x13), 0xFE)
        self.assertEqual(xtime(0x57), 0xAE)
        self.assertEqual(xtime(0xAE), 0x47)

    def test_identity_and_zero(self):
        for a in range(256):
            self.assertEqual(multiply(a, 1), a)
            self.assertEqual(multiply(a, 0), 0)
            self.assertEqual(multiply(a, 2), xtime(a))

    def test_commutative(self):
        for a in (0x01, 0x53, 0x80, 0xCA, 0xFF):
            for b in (0x02, 0x03, 0x09, 0x0B, 0x0D, 0x0E, 0xFF):
                self.assertEqual(multiply(a, b), multiply(b, a))


class TableTests(unittest.TestCase):
    def test_sbox_is_a_permutation_with_inverse(self):
        self.assertEqual(sorted(SBOX), list(range(256)))
        for i in range(256):
            self.assertEqual(INV_SBOX[SBOX[i]], i)
        self.assertEqual(SBOX[0x00], 0x63)
        self.assertEqual(INV_SBOX[0x63], 0x00)

    def test_round_constants(self):
        self.assertEqual(len(RCON), 11)
        self.assertEqual(RCON[1:], (0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1B, 0x36))


class KeyScheduleTests(unittest.TestCase):
    def test_word_helpers(self):
        self.assertEqual(rot_word(0x09CF4F3C), 0xCF4F3C09)
        self.assertEqual(sub_word(0xCF4F3C09), 0x8A84EB01)

    def test_fips197_a3_expansion(self):
        words = expand_key(A3_KEY)
        self.assertEqual(len(words), 60)
        self.assertEqual(words[0], 0x603DEB10)
        self.assertEqual(words[7], 0x0914DFF4)
        self.assertEqual(words[8], 0x9BA35411)
        self.assertEqual(words[59], 0x706C631E)

    def test_fips197_c3_round_keys(self):
        words = expand_key(C3_KEY)
        self.assertEqual(round_key(words, 0), C3_KEY[:16])
        self.assertEqual(round_key(words, 1), C3_KEY[16:])
        self.assertEqual(round_key(words, 14).hex(), "24fc79ccbf0979e9371ac23c6d68de36")

    def test_rejects_wrong_key_length(self):
        for bad in (b"", bytes(16), bytes(24), bytes(33)):
            with self.assertRaises(InvalidKeyMaterialError):
                expand_key(bad)
        with self.assertRaises(InvalidKeyMaterialError):
            expand_key("not bytes" * 4)

    def test_round_key_index_bounds(self):
        words = expand_key(C3_KEY)
        with self.assertRaises(ValueError):
            round_key(words, 15)


class BlockTransformTests(unittest.TestCase):
    def test_fips197_c3_vector(self):
        words = expand_key(C3_KEY)
        self.assertEqual(encrypt_block(C3_PT, words), C3_CT)
        self.assertEqual(decrypt_block(C3_CT, words), C3_PT)

    def test_all_zero_and_all_ones_vectors(self):
        self.assertEqual(
            encrypt_block(bytes(16), expand_key(bytes(32))).hex(),
            "dc95c078a2408989ad48a21492842087",
        )
        self.assertEqual(
            encrypt_block(b"\xff" * 16, expand_key(b"\xff" * 32)).hex(),
            "d5f93d6d3311cb309f23621b02fbd5e2",
        )

    def test_row_and_column_steps_invert(self):
        original = bytes(range(16))
        state = bytearray(original)
        shift_rows(state)
        # Row 1 rotated left by one: s1 <- s5
        self.assertEqual(state[1], original[5])
        self.assertEqual(state[0], original[0])
        inv_shift_rows(state)
        self.assertEqual(bytes(state), original)

        mix_columns(state)
        inv_mix_columns(state)
        self.assertEqual(bytes(state), original)

    def test_mix_columns_known_column(self):
        # Classic test column db 13 53 45 -> 8e 4d a1 bc
        state = bytearray(bytes.fromhex("db135345") + bytes(12))
        mix_columns(state)
        self.assertEqual(bytes(state[:4]).hex(), "8e4da1bc")

    def test_rejects_wrong_block_length(self):
        words = expand_key(C3_KEY)
        with self.assertRaises(ValueError):
            encrypt_block(bytes(15), words)
        with self.assertRaises(ValueError):
            decrypt_block(bytes(17), words)


if __name__ == "__main__":
    unittest.main(verbosity=2)
