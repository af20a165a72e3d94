"""
AES-256 Block Transform

Encrypts and decrypts a single 16-byte block with an expanded key
schedule. The state is a 4x4 byte matrix stored column-major:

    [ s0 s4 s8  s12 ]
    [ s1 s5 s9  s13 ]
    [ s2 s6 s10 s14 ]
    [ s3 s7 s11 s15 ]
"""

from typing import List

from passvault.common.utils import secure_zero
from passvault.crypto.gf import multiply
from passvault.crypto.key_schedule import ROUNDS, SCHEDULE_WORDS
from passvault.crypto.tables import SBOX, INV_SBOX

BLOCK_SIZE = 16

# MixColumns matrix and its inverse over GF(2^8)
MIX_MATRIX = (
    (2, 3, 1, 1),
    (1, 2, 3, 1),
    (1, 1, 2, 3),
    (3, 1, 1, 2),
)
INV_MIX_MATRIX = (
    (0x0E, 0x0B, 0x0D, 0x09),
    (0x09, 0x0E, 0x0B, 0x0D),
    (0x0D, 0x09, 0x0E, 0x0B),
    (0x0B, 0x0D, 0x09, 0x0E),
)


def add_round_key(state: bytearray, schedule: List[int], round_index: int) -> None:
    """XOR the state with round key words 4*round_index .. 4*round_index+3."""
    for c in range(4):
        word = schedule[4 * round_index + c]
        state[4 * c] ^= (word >> 24) & 0xFF
        state[4 * c + 1] ^= (word >> 16) & 0xFF
        state[4 * c + 2] ^= (word >> 8) & 0xFF
        state[4 * c + 3] ^= word & 0xFF


def sub_bytes(state: bytearray) -> None:
    for i in range(BLOCK_SIZE):
        state[i] = SBOX[state[i]]


def inv_sub_bytes(state: bytearray) -> None:
    for i in range(BLOCK_SIZE):
        state[i] = INV_SBOX[state[i]]


def shift_rows(state: bytearray) -> None:
    """Rotate row r of the state left by r positions."""
    s = bytes(state)
    for r in range(1, 4):
        for c in range(4):
            state[r + 4 * c] = s[r + 4 * ((c + r) % 4)]


def inv_shift_rows(state: bytearray) -> None:
    """Rotate row r of the state right by r positions."""
    s = bytes(state)
    for r in range(1, 4):
        for c in range(4):
            state[r + 4 * ((c + r) % 4)] = s[r + 4 * c]


def _mix(state: bytearray, matrix) -> None:
    for c in range(4):
        col = state[4 * c:4 * c + 4]
        for r in range(4):
            row = matrix[r]
            state[4 * c + r] = (
                multiply(col[0], row[0])
                ^ multiply(col[1], row[1])
                ^ multiply(col[2], row[2])
                ^ multiply(col[3], row[3])
            )


def mix_columns(state: bytearray) -> None:
    _mix(state, MIX_MATRIX)


def inv_mix_columns(state: bytearray) -> None:
    _mix(state, INV_MIX_MATRIX)


def _check(block: bytes, schedule: List[int]) -> None:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"Block must be {BLOCK_SIZE} bytes, got {len(block)}")
    if len(schedule) != SCHEDULE_WORDS:
        raise ValueError(f"Key schedule must hold {SCHEDULE_WORDS} words, got {len(schedule)}")


def encrypt_block(block: bytes, schedule: List[int]) -> bytes:
    """
    Encrypt one 16-byte block.
    
    Args:
        block: 16-byte plaintext block
        schedule: Expanded key from expand_key()
    
    Returns:
        16-byte ciphertext block
    """
    _check(block, schedule)
    state = bytearray(block)
    
    # Initial whitening
    add_round_key(state, schedule, 0)
    
    # Rounds 1..13
    for rnd in range(1, ROUNDS):
        sub_bytes(state)
        shift_rows(state)
        mix_columns(state)
        add_round_key(state, schedule, rnd)
    
    # Final round has no MixColumns
    sub_bytes(state)
    shift_rows(state)
    add_round_key(state, schedule, ROUNDS)
    
    out = bytes(state)
    secure_zero(state)
    return out


def decrypt_block(block: bytes, schedule: List[int]) -> bytes:
    """
    Decrypt one 16-byte block (exact inverse of encrypt_block).
    
    Args:
        block: 16-byte ciphertext block
        schedule: Expanded key from expand_key()
    
    Returns:
        16-byte plaintext block
    """
    _check(block, schedule)
    state = bytearray(block)
    
    add_round_key(state, schedule, ROUNDS)
    
    for rnd in range(ROUNDS - 1, 0, -1):
        inv_shift_rows(state)
        inv_sub_bytes(state)
        add_round_key(state, schedule, rnd)
        inv_mix_columns(state)
    
    inv_shift_rows(state)
    inv_sub_bytes(state)
    add_round_key(state, schedule, 0)
    
    out = bytes(state)
    secure_zero(state)
    return out
