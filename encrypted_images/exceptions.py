"""
Exception hierarchy for the encrypted images pipeline.

Every failure raised by the package derives from EncryptedImagesError,
which carries a numeric code and a details dictionary in addition to the
message. Helpers raise these; only the public façade functions turn them
into an absent result.
"""

from typing import Optional, Dict, Any


class EncryptedImagesError(Exception):
    """Base exception for all encrypted images errors."""

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        base = f"{type(self).__name__}: {self.message}"
        if self.code:
            base += f" (Code: {self.code})"
        return base


class AlphabetError(EncryptedImagesError):
    """Text does not conform to the restricted alphabet."""


class InvalidCharacterError(AlphabetError):
    """Raised when a character falls outside A-Z, a-z, 0-9, '+' and '/'."""

    def __init__(self, character: str, position: int):
        self.character = character
        self.position = position
        super().__init__(
            f"Invalid character {character!r} at position {position}",
            code=1001,
            details={"character": character, "position": position},
        )


class TooShortError(AlphabetError):
    """Text is shorter than the minimum length."""

    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"Text length {length} is below the minimum of {minimum}",
            code=1002,
            details={"length": length, "minimum": minimum},
        )


class TooLongError(AlphabetError):
    """Text is longer than the maximum length."""

    def __init__(self, length: int, maximum: int):
        self.length = length
        self.maximum = maximum
        super().__init__(
            f"Text length {length} exceeds the maximum of {maximum}",
            code=1003,
            details={"length": length, "maximum": maximum},
        )


class EncryptError(EncryptedImagesError):
    """
    Raised by text encryption when the input is rejected.

    The alphabet failure that caused it is chained as __cause__ and
    summarised in ``reason``.
    """

    REASONS = {
        InvalidCharacterError: "invalid_character",
        TooShortError: "too_short",
        TooLongError: "too_long",
    }

    def __init__(self, cause: AlphabetError):
        self.reason = self.REASONS.get(type(cause), "invalid_text")
        super().__init__(
            f"Cannot encrypt text: {cause.message}",
            code=2001,
            details={"reason": self.reason, **cause.details},
        )


class CryptoError(EncryptedImagesError):
    """Block cipher or key derivation failure."""


class PaddingError(CryptoError):
    """Ciphertext length or PKCS#7 padding is inconsistent."""


class ImageStegoError(EncryptedImagesError):
    """Failure while packing ciphertext into, or reading it from, pixels."""


class CorruptPayloadError(ImageStegoError):
    """The pixel buffer does not hold the payload its header declares."""


class FormatError(ImageStegoError):
    """The image container could not be parsed."""
