"""
Image layer of the encrypted images pipeline.

Modules:
    watermark: Watermark tags, name lookup and the visible alpha stamp
    pixels: Packed payload and the ciphertext to pixel grid codec
    container: PNG container serialized as base64 text

Usage:
    >>> from encrypted_images.stego import PixelCodec, ImageContainer, tag_for
    >>> codec = PixelCodec()
    >>> pixels = codec.to_pixels(codec.pack("U29tZUNpcGhlcnRleHQ", tag_for("bitcoin")))
    >>> image = ImageContainer().serialize(pixels)
"""

from .watermark import WatermarkTag, tag_for, stamp, read_stamp
from .pixels import PackedPayload, PixelCodec
from .container import ImageContainer

__all__ = [
    "WatermarkTag",
    "tag_for",
    "stamp",
    "read_stamp",
    "PackedPayload",
    "PixelCodec",
    "ImageContainer",
]
