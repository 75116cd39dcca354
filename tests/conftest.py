# tests/conftest.py
import pytest
from cryptography.hazmat.primitives.asymmetric import ec, ed25519


@pytest.fixture(scope="session")
def es256_private_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def es384_private_key():
    return ec.generate_private_key(ec.SECP384R1())


@pytest.fixture(scope="session")
def ed25519_private_key():
    return ed25519.Ed25519PrivateKey.generate()
