# Encrypted Images Test Configuration
# This file contains test settings and fixtures

import pytest
import sys
import os

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from encrypted_images.config import CipherConfig
from encrypted_images.crypto import CipherEngine, KeyDerivation
from encrypted_images.pipeline import Pipeline


@pytest.fixture(scope="session")
def fast_config():
    """Default configuration with a low iteration count for quick tests."""
    default = CipherConfig.default()
    return CipherConfig(
        default_passphrase=default.default_passphrase,
        salt=default.salt,
        iterations=1000,
        key_info=default.key_info,
        iv_info=default.iv_info,
    )


@pytest.fixture(scope="session")
def key_derivation(fast_config):
    return KeyDerivation(fast_config)


@pytest.fixture
def cipher_engine(key_derivation):
    return CipherEngine(key_derivation)


@pytest.fixture
def pipeline(cipher_engine):
    return Pipeline(engine=cipher_engine)


@pytest.fixture
def sample_text():
    """Provide a valid plaintext for testing."""
    return "ThisIsJustaTestString"


@pytest.fixture
def rgb_grid():
    """A small RGB grid that does not hold a payload."""
    img_array = np.zeros((8, 8, 3), dtype=np.uint8)
    img_array[:, :, 0] = 255
    return img_array
