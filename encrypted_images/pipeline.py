"""
Pipeline façade.

Composes the cipher engine, watermark registry, pixel codec and image
container into the four public operations:

    encrypts(text, key)                   -> alphabet ciphertext (raises)
    decrypts(ciphertext, key)             -> plaintext or None
    create_img(text, watermark)           -> base64 PNG string or None
    decode_image_and_extract_text(image)  -> plaintext or None

The Pipeline methods raise EncryptedImagesError subclasses. The image-facing
module functions collapse every failure into None, since a corrupted image,
an unknown format and a wrong key look the same to the caller.

Example Usage:
    >>> from encrypted_images import create_img, decode_image_and_extract_text
    >>> image = create_img("ThisIsJustaTestString", "bitcoin")
    >>> decode_image_and_extract_text(image)
    'ThisIsJustaTestString'
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from .crypto import CipherEngine, Key
from .exceptions import EncryptedImagesError
from .stego import ImageContainer, PixelCodec, WatermarkTag, stamp, tag_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    """
    Ciphertext recovered from an image.

    Attributes:
        ciphertext: Alphabet ciphertext string
        tag: Watermark tag found in the payload header
    """

    ciphertext: str
    tag: WatermarkTag


class Pipeline:
    """
    Text to encrypted image pipeline.

    Attributes:
        engine: Cipher engine for text encryption
        codec: Pixel codec for packing ciphertext
        container: Image container for transport strings
        stamp_watermark: Whether to draw the visible watermark stamp
    """

    def __init__(
        self,
        engine: Optional[CipherEngine] = None,
        codec: Optional[PixelCodec] = None,
        container: Optional[ImageContainer] = None,
        stamp_watermark: bool = True,
    ):
        self.engine = engine or CipherEngine()
        self.codec = codec or PixelCodec()
        self.container = container or ImageContainer()
        self.stamp_watermark = stamp_watermark

    def encrypt_text(self, text: str, key: Union[Key, str, None] = None) -> str:
        return self.engine.encrypt_text(text, key)

    def decrypt_text(self, ciphertext: str, key: Union[Key, str, None] = None) -> str:
        return self.engine.decrypt_text(ciphertext, key)

    def create_pixels(self, text: str, watermark: Optional[str] = None) -> np.ndarray:
        """
        Encrypt text with the default key and rasterize it.

        Returns:
            H x W x 4 grid when stamping is enabled, H x W x 3 otherwise
        """
        ciphertext = self.engine.encrypt_text(text)
        tag = tag_for(watermark)
        pixels = self.codec.to_pixels(self.codec.pack(ciphertext, tag))
        if self.stamp_watermark:
            pixels = stamp(pixels, tag)
        return pixels

    def create_image(self, text: str, watermark: Optional[str] = None) -> str:
        """
        Encrypt text with the default key and encode it as a PNG string.

        Args:
            text: Plaintext drawn from the restricted alphabet
            watermark: "bitcoin", "ethereum", "cardano" (any case), or
                anything else for no watermark

        Returns:
            Base64 encoded PNG

        Raises:
            EncryptError: If text is rejected
        """
        return self.container.serialize(self.create_pixels(text, watermark))

    def extract_from_pixels(self, pixels: np.ndarray) -> ExtractionResult:
        payload = self.codec.from_pixels(pixels)
        return ExtractionResult(ciphertext=payload.text, tag=payload.tag)

    def extract_ciphertext(self, image: str) -> ExtractionResult:
        """
        Recover the ciphertext and watermark tag from a PNG string.

        The ciphertext can then be decrypted with any key.

        Raises:
            FormatError: If the string is not a readable image
            CorruptPayloadError: If the pixels do not hold a valid payload
        """
        return self.extract_from_pixels(self.container.deserialize(image))

    def extract_from_image(self, image: str) -> str:
        """
        Recover plaintext from a PNG string made by create_image.

        The watermark tag is ignored; extraction succeeds for any tag.
        """
        result = self.extract_ciphertext(image)
        logger.debug(f"Extracted {len(result.ciphertext)} ciphertext characters, watermark={result.tag.name.lower()}")
        return self.engine.decrypt_text(result.ciphertext)


DEFAULT_PIPELINE = Pipeline()


def encrypts(text: str, key: Optional[str] = None) -> str:
    """
    Encrypt alphabet text, using the default key when key is None.

    Raises:
        EncryptError: If text has invalid characters or a bad length
    """
    return DEFAULT_PIPELINE.encrypt_text(text, key)


def decrypts(ciphertext: str, key: Optional[str] = None) -> Optional[str]:
    """Decrypt alphabet ciphertext; None on any failure, including a wrong key."""
    try:
        return DEFAULT_PIPELINE.decrypt_text(ciphertext, key)
    except EncryptedImagesError as e:
        logger.debug(f"Decryption failed: {e}")
        return None


def create_img(text: str, watermark: Optional[str] = None) -> Optional[str]:
    """Encrypt text with the default key into a base64 PNG string; None on failure."""
    try:
        return DEFAULT_PIPELINE.create_image(text, watermark)
    except EncryptedImagesError as e:
        logger.warning(f"Image creation failed: {e}")
        return None


def decode_image_and_extract_text(image: str) -> Optional[str]:
    """Recover plaintext from a string made by create_img; None on failure."""
    try:
        return DEFAULT_PIPELINE.extract_from_image(image)
    except EncryptedImagesError as e:
        logger.warning(f"Image extraction failed: {e}")
        return None
