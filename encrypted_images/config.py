"""
Configuration for the encrypted images pipeline.

The configuration is an immutable value built once at import time and
handed by reference to the components that need it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CipherConfig:
    """
    Parameters for deterministic key derivation.

    Attributes:
        default_passphrase: Passphrase for the process-wide default key/IV
        salt: Fixed salt for passphrase stretching
        iterations: PBKDF2-HMAC-SHA256 iteration count
        key_info: HKDF-Expand label for the AES key
        iv_info: HKDF-Expand label for the CBC initialization vector
    """

    default_passphrase: str
    salt: bytes
    iterations: int
    key_info: bytes
    iv_info: bytes

    @classmethod
    def default(cls) -> 'CipherConfig':
        """Get default configuration."""
        return cls(
            default_passphrase="welovenfts",
            salt=b"encrypted-images/v1",
            iterations=100000,
            key_info=b"encrypted-images/aes-128-key",
            iv_info=b"encrypted-images/aes-128-cbc-iv",
        )


DEFAULT_CONFIG = CipherConfig.default()
