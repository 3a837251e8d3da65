"""
Watermark registry and visible stamp.

A watermark is a closed set of names. Its tag byte travels in the packed
payload header and is informational only: extraction never depends on it.
Optionally the tag is also stamped visibly into the alpha channel of the
generated image; the payload lives in the RGB channels, so the stamp never
touches it.
"""

import logging
from enum import Enum
from typing import Optional

import numpy as np
from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)

# Alpha inside the stamped mark; everything else stays fully opaque.
MARK_ALPHA = 160
OPAQUE = 255
MIN_STAMP_SIZE = 3


class WatermarkTag(Enum):
    """Watermark tags and their header byte values."""

    NONE = 0
    BITCOIN = 1
    ETHEREUM = 2
    CARDANO = 3

    @property
    def byte(self) -> int:
        return self.value

    @classmethod
    def from_byte(cls, value: int) -> 'WatermarkTag':
        """Tag for a header byte; unknown values degrade to NONE."""
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown watermark tag byte {value}, treating as none")
            return cls.NONE


_NAMES = {
    "bitcoin": WatermarkTag.BITCOIN,
    "ethereum": WatermarkTag.ETHEREUM,
    "cardano": WatermarkTag.CARDANO,
}


def tag_for(name: Optional[str]) -> WatermarkTag:
    """
    Map a watermark name to its tag.

    Names are matched case-insensitively after trimming whitespace. Any
    other value, including None and the empty string, maps to NONE.
    """
    if not name:
        return WatermarkTag.NONE
    return _NAMES.get(name.strip().lower(), WatermarkTag.NONE)


def stamp(pixels: np.ndarray, tag: WatermarkTag) -> np.ndarray:
    """
    Add an alpha channel carrying a visible mark for tag.

    Args:
        pixels: H x W x 3 uint8 grid holding the payload
        tag: Watermark to draw

    Returns:
        H x W x 4 uint8 grid with the RGB channels unchanged
    """
    height, width = pixels.shape[:2]
    mask = Image.new("L", (width, height), 0)

    if tag is not WatermarkTag.NONE and min(width, height) >= MIN_STAMP_SIZE:
        _draw_mark(ImageDraw.Draw(mask), tag, width, height)
    elif tag is not WatermarkTag.NONE:
        logger.debug(f"Grid {width}x{height} too small for a {tag.name.lower()} stamp")

    alpha = np.where(np.asarray(mask) > 0, MARK_ALPHA, OPAQUE).astype(np.uint8)
    return np.dstack([pixels[:, :, :3], alpha])


def _draw_mark(draw: ImageDraw.ImageDraw, tag: WatermarkTag, width: int, height: int) -> None:
    # Centered square box covering half of the shorter side.
    side = max(min(width, height) // 2, 2)
    left = (width - side) // 2
    top = (height - side) // 2
    right = left + side - 1
    bottom = top + side - 1

    if tag is WatermarkTag.BITCOIN:
        draw.ellipse((left, top, right, bottom), fill=1)
    elif tag is WatermarkTag.ETHEREUM:
        center_x = (left + right) // 2
        center_y = (top + bottom) // 2
        draw.polygon([(center_x, top), (right, center_y), (center_x, bottom), (left, center_y)], fill=1)
    elif tag is WatermarkTag.CARDANO:
        draw.ellipse((left, top, right, bottom), outline=1, width=max(side // 6, 1))


def read_stamp(pixels: np.ndarray) -> bool:
    """Whether the grid carries a visible alpha mark."""
    if pixels.ndim != 3 or pixels.shape[2] < 4:
        return False
    return bool(np.any(pixels[:, :, 3] != OPAQUE))
