"""Pytest configuration and shared fixtures."""

import pytest

# Concrete scenario: secret key 0x01..01, message 0x02..02
SECRET_KEY = b"\x01" * 32
MESSAGE = b"\x02" * 32


@pytest.fixture(scope="module")
def secret_key():
    return SECRET_KEY


@pytest.fixture(scope="module")
def message():
    return MESSAGE


@pytest.fixture(scope="module")
def signed_package(secret_key, message):
    """
    A valid package signed once per module.

    Packages are immutable, so sharing one across tests is safe; tests
    build tampered copies with SignaturePackage.replace().
    """
    from sigpackage import sign
    return sign(message, secret_key)
