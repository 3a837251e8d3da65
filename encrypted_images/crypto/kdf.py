"""
Deterministic key derivation.

A passphrase is stretched once with PBKDF2-HMAC-SHA256 over a fixed salt,
then expanded twice with HKDF-Expand under distinct labels: once for the
128-bit AES key and once for the 128-bit CBC initialization vector. No
randomness is involved, so the same passphrase always yields the same
key/IV pair and nothing besides the passphrase needs to be stored.

When no passphrase is given, the process-wide default pair is returned.
It is derived exactly once, from CipherConfig.default_passphrase, when the
KeyDerivation is constructed.

Example Usage:
    >>> from encrypted_images.crypto.kdf import KeyDerivation, Key
    >>> kdf = KeyDerivation()
    >>> material = kdf.derive(Key.custom("correct horse"))
    >>> len(material.key), len(material.iv)
    (16, 16)
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDFExpand
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..config import CipherConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)

KEY_SIZE = 16
IV_SIZE = 16


@dataclass(frozen=True)
class Key:
    """
    Key selector: either the default key or a custom passphrase.

    ``passphrase`` is None for the default key. An empty string is a
    valid custom passphrase and is distinct from the default.
    """

    passphrase: Optional[str] = None

    @classmethod
    def default(cls) -> 'Key':
        return cls(None)

    @classmethod
    def custom(cls, passphrase: str) -> 'Key':
        if passphrase is None:
            raise ValueError("Custom key requires a passphrase")
        return cls(passphrase)

    @classmethod
    def of(cls, key: Union['Key', str, None]) -> 'Key':
        """Resolve an optional string (or an existing Key) to a Key."""
        if isinstance(key, Key):
            return key
        return cls.default() if key is None else cls.custom(key)

    @property
    def is_default(self) -> bool:
        return self.passphrase is None

    def __repr__(self) -> str:
        return "Key.default()" if self.is_default else "Key.custom(<redacted>)"


@dataclass(frozen=True)
class KeyMaterial:
    """
    AES-128-CBC key and initialization vector.

    Attributes:
        key: 16-byte AES key
        iv: 16-byte CBC initialization vector
    """

    key: bytes
    iv: bytes

    def __repr__(self) -> str:
        return "KeyMaterial(<redacted>)"


class KeyDerivation:
    """
    Turns an optional passphrase into a KeyMaterial.

    The instance is immutable after construction and safe to share between
    threads.
    """

    def __init__(self, config: CipherConfig = DEFAULT_CONFIG):
        self._config = config
        self._default = self._derive_passphrase(config.default_passphrase)
        logger.info(f"Key derivation initialized with {config.iterations} PBKDF2 iterations")

    @property
    def config(self) -> CipherConfig:
        return self._config

    @property
    def default_material(self) -> KeyMaterial:
        return self._default

    def derive(self, key: Union[Key, str, None] = None) -> KeyMaterial:
        """
        Derive key and IV for a key selector.

        Args:
            key: Key selector, passphrase string, or None for the default

        Returns:
            KeyMaterial for the selector
        """
        key = Key.of(key)
        if key.is_default:
            return self._default
        return self._derive_passphrase(key.passphrase)

    def _derive_passphrase(self, passphrase: str) -> KeyMaterial:
        stretched = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=self._config.salt,
            iterations=self._config.iterations,
        ).derive(passphrase.encode("utf-8", "surrogatepass"))

        key = HKDFExpand(algorithm=hashes.SHA256(), length=KEY_SIZE, info=self._config.key_info).derive(stretched)
        iv = HKDFExpand(algorithm=hashes.SHA256(), length=IV_SIZE, info=self._config.iv_info).derive(stretched)
        return KeyMaterial(key=key, iv=iv)


DEFAULT_KEY_DERIVATION = KeyDerivation(DEFAULT_CONFIG)


def derive(passphrase: Optional[str] = None) -> KeyMaterial:
    """Derive key material with the shared default configuration."""
    return DEFAULT_KEY_DERIVATION.derive(passphrase)
