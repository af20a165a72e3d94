"""
GF(2^8) Arithmetic

Finite field multiplication under the AES reduction polynomial
x^8 + x^4 + x^3 + x + 1 (0x11B), used by MixColumns and its inverse.
"""

# Low byte of the reduction polynomial
REDUCTION = 0x1B


def xtime(a: int) -> int:
    """Multiply a field element by x (i.e. by 2)."""
    a <<= 1
    if a & 0x100:
        a ^= 0x100 | REDUCTION
    return a


def multiply(a: int, b: int) -> int:
    """
    Multiply two field elements.
    
    Walks the 8 bits of b; for each set bit the current a is XORed into
    the product, then a is shifted left and reduced by 0x1B when its high
    bit was set before the shift.
    
    Args:
        a: First byte (0-255)
        b: Second byte (0-255)
    
    Returns:
        a * b in GF(2^8)
    """
    product = 0
    for _ in range(8):
        if b & 1:
            product ^= a
        high_bit_set = a & 0x80
        a = (a << 1) & 0xFF
        if high_bit_set:
            a ^= REDUCTION
        b >>= 1
    return product
