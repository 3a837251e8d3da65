"""
Integration Tests for the Complete Workflow

This module tests the public functions end to end: text encryption,
image creation with each watermark, and extraction back to plaintext.
"""

import base64

import numpy as np
import pytest

from encrypted_images import (
    EncryptError,
    create_img,
    decode_image_and_extract_text,
    decrypts,
    encrypts,
)
from encrypted_images.crypto import alphabet
from encrypted_images.exceptions import CorruptPayloadError, FormatError
from encrypted_images.pipeline import DEFAULT_PIPELINE, Pipeline
from encrypted_images.stego import ImageContainer, WatermarkTag, read_stamp


WATERMARKS = ["bitcoin", "ethereum", "cardano", "none", "", "Bitcoin", "unknown"]


class TestTextWorkflow:
    """Text encryption through the public functions."""

    @pytest.mark.parametrize("key", [None, "your_secret_key", ""])
    def test_roundtrip(self, key):
        """Test text round trip through encrypts and decrypts."""
        text = "ThisIsJustaTestString"
        assert decrypts(encrypts(text, key), key) == text

    def test_alphabet_rejection(self):
        """Test that characters outside the alphabet are rejected."""
        with pytest.raises(EncryptError) as exc_info:
            encrypts("bad text with spaces!", None)

        assert exc_info.value.reason == "invalid_character"

    def test_minimum_length(self):
        """Test the ten character minimum."""
        with pytest.raises(EncryptError) as exc_info:
            encrypts("short", None)

        assert exc_info.value.reason == "too_short"
        assert encrypts("abcdefghij", None)

    def test_wrong_key(self):
        """Test that decrypting with the wrong key yields None."""
        assert decrypts(encrypts("ValidText1", "keyA"), "keyB") is None

    def test_default_versus_custom_key(self):
        """Test that the default key equals the default passphrase only."""
        assert decrypts(encrypts("ValidText1"), "welovenfts2") is None
        assert decrypts(encrypts("ValidText1", "welovenfts")) == "ValidText1"

    def test_ciphertext_is_plaintext_shaped(self):
        """Test that ciphertext can itself be encrypted."""
        ciphertext = encrypts("ThisIsJustaTestString")

        alphabet.validate(ciphertext)
        assert decrypts(encrypts(ciphertext)) == ciphertext

    def test_deterministic(self):
        """Test that encryption is deterministic."""
        assert encrypts("ThisIsJustaTestString") == encrypts("ThisIsJustaTestString")

    @pytest.mark.parametrize("garbage", ["", "!!!!", "TQ", "TWFuT", "A" * 43])
    def test_decrypts_garbage(self, garbage):
        """Test that garbage ciphertext yields None."""
        assert decrypts(garbage) is None

    def test_long_text(self):
        """Test a ten thousand character plaintext."""
        text = ("Lorem/ipsum+dolor0sit9amet" * 400)[:10000]
        assert decrypts(encrypts(text)) == text

    def test_undecodable_key_bytes(self):
        """Test keys carrying surrogate escapes from undecodable argv bytes."""
        ciphertext = encrypts("ThisIsJustaTestString", "\udcff")

        assert decrypts(ciphertext, "\udcff") == "ThisIsJustaTestString"
        assert decrypts(ciphertext, "\udc80") is None
        assert decrypts(encrypts("ThisIsJustaTestString"), "\udc80") is None


class TestImageWorkflow:
    """Image creation and extraction through the public functions."""

    @pytest.mark.parametrize("watermark", WATERMARKS)
    def test_roundtrip(self, watermark):
        """Test image round trip for every watermark name."""
        image = create_img("ThisIsJustaTestString", watermark)

        assert image is not None
        assert decode_image_and_extract_text(image) == "ThisIsJustaTestString"

    def test_watermark_independence(self):
        """Test that extraction does not depend on the watermark."""
        with_mark = create_img("SampleText1", "bitcoin")
        without_mark = create_img("SampleText1", "none")

        assert with_mark != without_mark
        assert decode_image_and_extract_text(with_mark) == "SampleText1"
        assert decode_image_and_extract_text(without_mark) == "SampleText1"

    def test_output_is_base64_png(self):
        """Test that create_img returns base64 PNG text."""
        data = base64.b64decode(create_img("ThisIsJustaTestString", "ethereum"))
        assert data.startswith(b"\x89PNG")

    def test_watermark_tag_is_recorded(self):
        """Test that the watermark tag is stored in the header."""
        text = "Watermarked" * 20
        result = DEFAULT_PIPELINE.extract_ciphertext(create_img(text, "Cardano"))

        assert result.tag is WatermarkTag.CARDANO
        assert result.ciphertext == encrypts(text)

    def test_stamp_is_visible(self):
        """Test that a watermarked image carries an alpha stamp."""
        pixels = ImageContainer().deserialize(create_img("Watermarked" * 20, "bitcoin"))

        assert pixels.shape[2] == 4
        assert read_stamp(pixels)

    def test_invalid_text_gives_none(self):
        """Test that invalid plaintext yields no image."""
        assert create_img("bad text with spaces!", "bitcoin") is None
        assert create_img("short", "") is None

    def test_truncated_pixel_buffer(self):
        """Test that a truncated pixel grid is rejected."""
        container = ImageContainer()
        pixels = container.deserialize(create_img("ThisIsJustaTestString" * 10, "bitcoin"))

        truncated = container.serialize(pixels[:pixels.shape[0] // 2])

        assert decode_image_and_extract_text(truncated) is None
        with pytest.raises(CorruptPayloadError):
            DEFAULT_PIPELINE.extract_from_image(truncated)

    def test_truncated_image_string(self):
        """Test that a truncated image string yields None."""
        image = create_img("ThisIsJustaTestString" * 10, "none")
        truncated = image[:len(image) // 2]
        truncated = truncated[:len(truncated) - len(truncated) % 4]

        assert decode_image_and_extract_text(truncated) is None

    def test_not_an_image(self):
        """Test that non-image text is rejected."""
        assert decode_image_and_extract_text("definitely not an image") is None
        with pytest.raises(FormatError):
            DEFAULT_PIPELINE.extract_from_image("definitely not an image")

    def test_blank_image(self):
        """Test that an image without a payload yields None."""
        blank = ImageContainer().serialize(np.zeros((10, 10, 3), dtype=np.uint8))
        assert decode_image_and_extract_text(blank) is None

    def test_chained_extract_then_decrypt_with_custom_key(self):
        """Test extracting ciphertext and decrypting it with a custom key."""
        ciphertext = encrypts("ThisIsJustaTestString", "secret")
        pixels = DEFAULT_PIPELINE.codec.to_pixels(DEFAULT_PIPELINE.codec.pack(ciphertext, WatermarkTag.NONE))
        image = ImageContainer().serialize(pixels)

        result = DEFAULT_PIPELINE.extract_ciphertext(image)

        assert decrypts(result.ciphertext, "secret") == "ThisIsJustaTestString"
        assert decode_image_and_extract_text(image) is None


class TestPipelineObject:
    """Pipeline instances with their own components."""

    def test_roundtrip_with_fast_engine(self, pipeline, sample_text):
        """Test image round trip with a custom engine."""
        image = pipeline.create_image(sample_text, "ethereum")
        assert pipeline.extract_from_image(image) == sample_text

    def test_without_stamp(self, cipher_engine, sample_text):
        """Test a pipeline that skips the visible stamp."""
        plain = Pipeline(engine=cipher_engine, stamp_watermark=False)
        pixels = plain.create_pixels(sample_text, "bitcoin")

        assert pixels.shape[2] == 3
        assert plain.extract_from_pixels(pixels).tag is WatermarkTag.BITCOIN

    def test_engines_with_different_defaults_do_not_interoperate(self, pipeline, sample_text):
        """Test that images from another configuration do not decrypt."""
        image = pipeline.create_image(sample_text)
        assert pipeline.extract_from_image(image) == sample_text
        assert decode_image_and_extract_text(image) is None
