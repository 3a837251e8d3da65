"""
Encrypted Images

Encrypts restricted-alphabet text with AES-128-CBC and packs the ciphertext
losslessly into a generated PNG image, optionally stamped with a watermark,
then recovers the exact plaintext from that image.

Subpackages:
    crypto: Alphabet codec, key derivation and cipher engine
    stego: Watermark registry, pixel codec and PNG container

Version: 1.0.0
"""

from .exceptions import (
    EncryptedImagesError,
    AlphabetError,
    InvalidCharacterError,
    TooShortError,
    TooLongError,
    EncryptError,
    CryptoError,
    PaddingError,
    ImageStegoError,
    CorruptPayloadError,
    FormatError,
)
from .pipeline import (
    Pipeline,
    ExtractionResult,
    encrypts,
    decrypts,
    create_img,
    decode_image_and_extract_text,
)

__all__ = [
    "encrypts",
    "decrypts",
    "create_img",
    "decode_image_and_extract_text",
    "Pipeline",
    "ExtractionResult",
    "EncryptedImagesError",
    "AlphabetError",
    "InvalidCharacterError",
    "TooShortError",
    "TooLongError",
    "EncryptError",
    "CryptoError",
    "PaddingError",
    "ImageStegoError",
    "CorruptPayloadError",
    "FormatError",
]

__version__ = "1.0.0"
