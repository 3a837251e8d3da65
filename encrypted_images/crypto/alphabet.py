"""
Restricted alphabet handling.

Plaintext and ciphertext strings are both drawn from the 64 symbols of
the standard base64 alphabet: A-Z, a-z, 0-9, '+' and '/'. Arbitrary bytes
are mapped onto that alphabet with unpadded base64, so the encoded length
is always ceil(4 * n / 3) for n input bytes.
"""

import base64
import binascii
import logging
import string

from ..exceptions import AlphabetError, InvalidCharacterError, TooShortError, TooLongError

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/"
ALPHABET_SET = frozenset(ALPHABET)

MIN_LENGTH = 10
MAX_LENGTH = 2 ** 64 - 1


def find_invalid_character(text: str) -> int:
    """Return the index of the first character outside the alphabet, or -1."""
    for index, character in enumerate(text):
        if character not in ALPHABET_SET:
            return index
    return -1


def validate(text: str) -> None:
    """
    Check that text is usable as plaintext.

    Args:
        text: Candidate plaintext

    Raises:
        InvalidCharacterError: If any character is outside the alphabet
        TooShortError: If text has fewer than MIN_LENGTH characters
        TooLongError: If text has more than MAX_LENGTH characters
    """
    index = find_invalid_character(text)
    if index >= 0:
        raise InvalidCharacterError(text[index], index)
    if len(text) < MIN_LENGTH:
        raise TooShortError(len(text), MIN_LENGTH)
    if len(text) > MAX_LENGTH:
        raise TooLongError(len(text), MAX_LENGTH)


def encoded_length(byte_count: int) -> int:
    """Number of alphabet symbols produced for byte_count input bytes."""
    return (4 * byte_count + 2) // 3


def encode_bytes_to_alphabet(data: bytes) -> str:
    """Map arbitrary bytes onto the alphabet (unpadded base64)."""
    return base64.b64encode(data).rstrip(b"=").decode("ascii")


def decode_alphabet_to_bytes(text: str) -> bytes:
    """
    Exact inverse of encode_bytes_to_alphabet.

    Args:
        text: Alphabet string

    Returns:
        Decoded bytes

    Raises:
        InvalidCharacterError: If text contains a symbol outside the alphabet
        AlphabetError: If text length cannot come from the encoder
    """
    index = find_invalid_character(text)
    if index >= 0:
        raise InvalidCharacterError(text[index], index)

    if len(text) % 4 == 1:
        raise AlphabetError(
            f"Encoded length {len(text)} cannot be produced by the encoder",
            code=1004,
            details={"length": len(text)},
        )

    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except binascii.Error as e:
        logger.debug(f"Alphabet decode failed: {e}")
        raise AlphabetError(f"Malformed alphabet string: {e}", code=1005)
