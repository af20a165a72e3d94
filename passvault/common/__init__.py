"""
Common utilities, errors, configuration and data models for PassVault.
"""

from .exceptions import *
from .utils import now_ms, generate_random_bytes, xor_bytes, secure_zero

__all__ = [
    'now_ms',
    'generate_random_bytes',
    'xor_bytes',
    'secure_zero',
]
