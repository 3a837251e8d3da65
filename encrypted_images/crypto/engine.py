"""
Cipher Engine - AES-128-CBC over the restricted alphabet.

This module provides the block cipher layer of the pipeline. Raw bytes are
encrypted with AES-128 in CBC mode using PKCS#7 padding, and the text-level
helpers wrap that with alphabet validation on the way in and alphabet
encoding on the way out, so ciphertext strings are drawn from the same
64-symbol alphabet as plaintext.

Key and IV come from KeyDerivation and are deterministic, so encrypting the
same text with the same key always yields the same ciphertext.

Example Usage:
    >>> from encrypted_images.crypto import CipherEngine
    >>> engine = CipherEngine()
    >>> ciphertext = engine.encrypt_text("ThisIsJustaTestString", key="secret")
    >>> engine.decrypt_text(ciphertext, key="secret")
    'ThisIsJustaTestString'
"""

import logging
from typing import Optional, Union

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from . import alphabet
from .kdf import Key, KeyDerivation, KeyMaterial, DEFAULT_KEY_DERIVATION, KEY_SIZE, IV_SIZE
from ..exceptions import AlphabetError, CryptoError, EncryptError, PaddingError

logger = logging.getLogger(__name__)

BLOCK_SIZE = 16


class CipherEngine:
    """
    AES-128-CBC engine for alphabet-safe text.

    Attributes:
        key_derivation: KeyDerivation used to resolve key selectors

    Example:
        >>> engine = CipherEngine()
        >>> material = engine.key_derivation.derive(None)
        >>> ciphertext = engine.encrypt(b"Data", material)
        >>> engine.decrypt(ciphertext, material)
        b'Data'
    """

    def __init__(self, key_derivation: Optional[KeyDerivation] = None):
        self._key_derivation = key_derivation or DEFAULT_KEY_DERIVATION

    @property
    def key_derivation(self) -> KeyDerivation:
        return self._key_derivation

    def encrypt(self, plaintext: bytes, material: KeyMaterial) -> bytes:
        """
        Encrypt bytes with AES-128-CBC and PKCS#7 padding.

        Args:
            plaintext: Data to encrypt
            material: Key and IV

        Returns:
            Ciphertext, a non-empty multiple of BLOCK_SIZE bytes

        Raises:
            CryptoError: If the key material has the wrong size
        """
        self._check_material(material)
        encryptor = self._cipher(material).encryptor()
        return encryptor.update(self._pad_pkcs7(plaintext)) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes, material: KeyMaterial) -> bytes:
        """
        Decrypt AES-128-CBC ciphertext and strip PKCS#7 padding.

        Args:
            ciphertext: Data to decrypt
            material: Key and IV used for encryption

        Returns:
            Plaintext bytes

        Raises:
            PaddingError: If the length is not a positive multiple of the
                block size or the padding is inconsistent
        """
        self._check_material(material)
        if not ciphertext or len(ciphertext) % BLOCK_SIZE:
            raise PaddingError(
                f"Ciphertext length {len(ciphertext)} is not a positive multiple of {BLOCK_SIZE}",
                code=3001,
                details={"length": len(ciphertext)},
            )

        decryptor = self._cipher(material).decryptor()
        padded_plaintext = decryptor.update(ciphertext) + decryptor.finalize()
        return self._unpad_pkcs7(padded_plaintext)

    def encrypt_text(self, text: str, key: Union[Key, str, None] = None) -> str:
        """
        Encrypt alphabet text and return alphabet-encoded ciphertext.

        Args:
            text: Plaintext drawn from the restricted alphabet
            key: Key selector; None selects the default key

        Returns:
            Ciphertext encoded with the restricted alphabet

        Raises:
            EncryptError: If text is rejected by alphabet validation
        """
        try:
            alphabet.validate(text)
        except AlphabetError as e:
            raise EncryptError(e) from e

        material = self._key_derivation.derive(key)
        ciphertext = self.encrypt(text.encode("ascii"), material)
        logger.debug(f"Encrypted {len(text)} characters into {len(ciphertext)} bytes")
        return alphabet.encode_bytes_to_alphabet(ciphertext)

    def decrypt_text(self, encoded_ciphertext: str, key: Union[Key, str, None] = None) -> str:
        """
        Decrypt alphabet-encoded ciphertext back to plaintext.

        Raises:
            AlphabetError: If the input or the recovered text is not valid
                alphabet text
            PaddingError: If decryption fails, typically a wrong key
        """
        ciphertext = alphabet.decode_alphabet_to_bytes(encoded_ciphertext)
        material = self._key_derivation.derive(key)
        plaintext = self.decrypt(ciphertext, material)

        try:
            text = plaintext.decode("utf-8")
        except UnicodeDecodeError:
            raise AlphabetError("Decrypted data is not valid UTF-8 text", code=1006)

        alphabet.validate(text)
        return text

    @staticmethod
    def _cipher(material: KeyMaterial) -> Cipher:
        return Cipher(algorithms.AES(material.key), modes.CBC(material.iv))

    @staticmethod
    def _check_material(material: KeyMaterial) -> None:
        if len(material.key) != KEY_SIZE or len(material.iv) != IV_SIZE:
            raise CryptoError(
                "AES-128-CBC requires a 16-byte key and a 16-byte IV",
                code=3002,
                details={"key_size": len(material.key), "iv_size": len(material.iv)},
            )

    @staticmethod
    def _pad_pkcs7(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
        """Apply PKCS#7 padding."""
        padding_length = block_size - (len(data) % block_size)
        return data + bytes([padding_length] * padding_length)

    @staticmethod
    def _unpad_pkcs7(padded_data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
        """Remove PKCS#7 padding."""
        if not padded_data:
            raise PaddingError("Invalid padding: empty data", code=3003)

        padding_length = padded_data[-1]
        if padding_length < 1 or padding_length > block_size:
            raise PaddingError(f"Invalid padding length: {padding_length}", code=3004)

        if padding_length > len(padded_data):
            raise PaddingError("Invalid padding: exceeds data length", code=3005)

        expected_padding = bytes([padding_length] * padding_length)
        if padded_data[-padding_length:] != expected_padding:
            raise PaddingError("Invalid padding: mismatch", code=3006)

        return padded_data[:-padding_length]
