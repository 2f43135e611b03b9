import pytest

from navigator_cookie import init


SECRET = b"abcdef0123456789" * 8

DEFAULT_OPTS = {
    "encryption_salt": "encrypted cookie salt",
    "signing_salt": "signing salt",
}


@pytest.fixture
def secret():
    """A 128-byte master secret."""
    return SECRET


@pytest.fixture
def signing_config():
    """Store configuration that only signs cookies."""
    return init(DEFAULT_OPTS, encrypt=False)


@pytest.fixture
def encrypted_config():
    """Store configuration that encrypts and signs cookies."""
    return init(DEFAULT_OPTS)


@pytest.fixture
def default_opts():
    """Options shared by the store tests."""
    return dict(DEFAULT_OPTS)
