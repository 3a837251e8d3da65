"""
PNG image container.

Serializes a pixel grid to PNG and wraps it in standard base64 text so the
image can travel as a plain string, and reverses both steps. PNG is
lossless, so the grid read back is byte-identical to the one written.
"""

import base64
import binascii
import logging
from io import BytesIO
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from ..exceptions import FormatError

logger = logging.getLogger(__name__)

_IMAGE_ERRORS = (OSError, SyntaxError, ValueError, EOFError, Image.DecompressionBombError)


class ImageContainer:
    """
    PNG container for pixel grids.

    Grids with three channels are stored as RGB, grids with four as RGBA.
    """

    FORMAT = "PNG"

    def serialize(self, pixels: np.ndarray) -> str:
        """Encode a pixel grid as base64 PNG text."""
        return base64.b64encode(self.to_png(pixels)).decode("ascii")

    def deserialize(self, text: str) -> np.ndarray:
        """
        Decode base64 PNG text into a pixel grid.

        Raises:
            FormatError: If the text is not base64 or not a readable image
        """
        try:
            data = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise FormatError(f"Image string is not valid base64: {e}", code=5001)
        return self.from_png(data)

    def to_png(self, pixels: np.ndarray) -> bytes:
        image = self._to_image(pixels)
        buffer = BytesIO()
        image.save(buffer, format=self.FORMAT)
        return buffer.getvalue()

    def from_png(self, data: bytes) -> np.ndarray:
        """
        Read image bytes into an H x W x C uint8 array.

        Raises:
            FormatError: If the bytes are not a complete readable image
        """
        try:
            with Image.open(BytesIO(data)) as image:
                image.load()
                if image.mode not in ("RGB", "RGBA"):
                    image = image.convert("RGBA")
                pixels = np.array(image, dtype=np.uint8)
        except _IMAGE_ERRORS as e:
            logger.debug(f"Image decode failed: {e}")
            raise FormatError(f"Cannot read image data: {e}", code=5002)

        logger.debug(f"Decoded {pixels.shape[1]}x{pixels.shape[0]} image with {pixels.shape[2]} channels")
        return pixels

    def save(self, pixels: np.ndarray, path: Union[str, Path]) -> None:
        """
        Write a pixel grid to a PNG file.

        Raises:
            FormatError: If the grid cannot be stored or the file cannot be written
        """
        image = self._to_image(pixels)
        try:
            image.save(str(path), format=self.FORMAT)
        except OSError as e:
            raise FormatError(f"Cannot write {path}: {e}", code=5005)
        logger.info(f"Image written to {path}")

    def load(self, path: Union[str, Path]) -> np.ndarray:
        """
        Read a pixel grid from an image file.

        Raises:
            FormatError: If the file is missing or not a readable image
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise FormatError(f"Cannot read {path}: {e}", code=5003)
        return self.from_png(data)

    @staticmethod
    def _to_image(pixels: np.ndarray) -> Image.Image:
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise FormatError(f"Cannot store a grid of shape {pixels.shape} as an image", code=5004)
        # uint8 H x W x 3 maps to RGB and H x W x 4 to RGBA.
        return Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
