"""
Cryptographic layer of the encrypted images pipeline.

Modules:
    alphabet: Validation and byte mapping for the restricted alphabet
    kdf: Deterministic key/IV derivation from an optional passphrase
    engine: AES-128-CBC encryption over alphabet-safe strings

Usage:
    >>> from encrypted_images.crypto import CipherEngine
    >>> engine = CipherEngine()
    >>> ciphertext = engine.encrypt_text("ThisIsJustaTestString")
    >>> engine.decrypt_text(ciphertext)
    'ThisIsJustaTestString'
"""

from .alphabet import (
    ALPHABET,
    MIN_LENGTH,
    MAX_LENGTH,
    validate,
    encode_bytes_to_alphabet,
    decode_alphabet_to_bytes,
)
from .kdf import Key, KeyMaterial, KeyDerivation, DEFAULT_KEY_DERIVATION, derive
from .engine import CipherEngine, BLOCK_SIZE

__all__ = [
    # Alphabet
    "ALPHABET",
    "MIN_LENGTH",
    "MAX_LENGTH",
    "validate",
    "encode_bytes_to_alphabet",
    "decode_alphabet_to_bytes",
    # Key derivation
    "Key",
    "KeyMaterial",
    "KeyDerivation",
    "DEFAULT_KEY_DERIVATION",
    "derive",
    # Cipher
    "CipherEngine",
    "BLOCK_SIZE",
]
