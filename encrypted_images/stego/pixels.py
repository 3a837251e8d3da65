"""
Ciphertext to pixel codec.

The packed payload is a 9-byte header followed by the ciphertext bytes:

    +----------------------------+-----------+------------------+
    | length (8 bytes, uint64 BE)| tag (1 B) | ciphertext bytes |
    +----------------------------+-----------+------------------+

The packed bytes are written row-major into the R, G and B channels of a
near-square grid. The grid shape is a pure function of the declared length,
so the decoder recomputes it from the header without any extra metadata.
Unused trailing channel slots are zero-filled.
"""

import logging
import math
import struct
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .watermark import WatermarkTag
from ..exceptions import CorruptPayloadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackedPayload:
    """
    Header plus ciphertext.

    Attributes:
        ciphertext: Ciphertext bytes (the alphabet string, ASCII encoded)
        tag: Watermark tag carried in the header
    """

    ciphertext: bytes
    tag: WatermarkTag = WatermarkTag.NONE

    @property
    def length(self) -> int:
        return len(self.ciphertext)

    @property
    def text(self) -> str:
        try:
            return self.ciphertext.decode("ascii")
        except UnicodeDecodeError:
            raise CorruptPayloadError("Payload holds non-ASCII ciphertext bytes", code=4004)

    def to_bytes(self) -> bytes:
        return struct.pack(PixelCodec.HEADER_FORMAT, self.length, self.tag.byte) + self.ciphertext


class PixelCodec:
    """
    Packs ciphertext into a pixel grid and reads it back.

    Example:
        >>> codec = PixelCodec()
        >>> payload = codec.pack("U29tZUNpcGhlcnRleHQ", WatermarkTag.BITCOIN)
        >>> pixels = codec.to_pixels(payload)
        >>> codec.from_pixels(pixels) == payload
        True
    """

    HEADER_FORMAT = ">QB"
    HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
    CHANNELS_PER_PIXEL = 3
    MAX_LENGTH = 2 ** 64 - 1

    def pack(self, ciphertext: str, tag: WatermarkTag = WatermarkTag.NONE) -> PackedPayload:
        """
        Build a payload from an alphabet ciphertext string.

        Raises:
            CorruptPayloadError: If the ciphertext is empty, not ASCII, or
                too long for the length field
        """
        try:
            data = ciphertext.encode("ascii")
        except UnicodeEncodeError:
            raise CorruptPayloadError("Ciphertext must be ASCII text", code=4001)

        if not data:
            raise CorruptPayloadError("Cannot pack an empty ciphertext", code=4002)
        if len(data) > self.MAX_LENGTH:
            raise CorruptPayloadError(
                f"Ciphertext length {len(data)} does not fit the length header",
                code=4003,
            )
        return PackedPayload(ciphertext=data, tag=tag)

    def grid_shape(self, length: int) -> Tuple[int, int]:
        """
        Grid (height, width) for a payload of length ciphertext bytes.

        The width is the ceiling of the square root of the pixel count, and
        the height is the fewest rows of that width that hold every byte.
        """
        total_bytes = self.HEADER_SIZE + length
        pixel_count = -(-total_bytes // self.CHANNELS_PER_PIXEL)
        width = math.isqrt(pixel_count)
        if width * width < pixel_count:
            width += 1
        height = -(-pixel_count // width)
        return height, width

    def to_pixels(self, payload: PackedPayload) -> np.ndarray:
        """
        Lay the payload out row-major across RGB channel slots.

        Returns:
            H x W x 3 uint8 array
        """
        packed = payload.to_bytes()
        height, width = self.grid_shape(payload.length)

        flat = np.zeros(height * width * self.CHANNELS_PER_PIXEL, dtype=np.uint8)
        flat[:len(packed)] = np.frombuffer(packed, dtype=np.uint8)

        logger.debug(f"Packed {payload.length} ciphertext bytes into a {width}x{height} grid")
        return flat.reshape(height, width, self.CHANNELS_PER_PIXEL)

    def from_pixels(self, pixels: np.ndarray) -> PackedPayload:
        """
        Read the payload back from a pixel grid.

        Only the first three channels are read, so an alpha channel (or any
        further channel) is ignored.

        Raises:
            CorruptPayloadError: If the grid is malformed, the declared
                length is zero, the grid is smaller than the declared length
                implies, or its shape differs from the recomputed one
        """
        if pixels.ndim != 3 or pixels.shape[2] < self.CHANNELS_PER_PIXEL:
            raise CorruptPayloadError(
                f"Expected an H x W x C grid with C >= {self.CHANNELS_PER_PIXEL}, got shape {pixels.shape}",
                code=4010,
            )

        data = np.ascontiguousarray(pixels[:, :, :self.CHANNELS_PER_PIXEL], dtype=np.uint8).tobytes()
        if len(data) < self.HEADER_SIZE:
            raise CorruptPayloadError(
                f"Grid holds {len(data)} bytes, fewer than the {self.HEADER_SIZE}-byte header",
                code=4011,
            )

        length, tag_byte = struct.unpack(self.HEADER_FORMAT, data[:self.HEADER_SIZE])
        if length == 0:
            raise CorruptPayloadError("Declared payload length is zero", code=4012)

        available = len(data) - self.HEADER_SIZE
        if length > available:
            raise CorruptPayloadError(
                f"Declared length {length} exceeds the {available} bytes available",
                code=4013,
                details={"declared": length, "available": available},
            )

        expected_shape = self.grid_shape(length)
        if tuple(pixels.shape[:2]) != expected_shape:
            raise CorruptPayloadError(
                f"Grid shape {pixels.shape[:2]} does not match {expected_shape} for length {length}",
                code=4014,
                details={"shape": tuple(pixels.shape[:2]), "expected": expected_shape},
            )

        ciphertext = data[self.HEADER_SIZE:self.HEADER_SIZE + length]
        return PackedPayload(ciphertext=ciphertext, tag=WatermarkTag.from_byte(tag_byte))
