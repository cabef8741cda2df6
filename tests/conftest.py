import os
# Disable production validation and Key Vault access for all tests BEFORE any app imports
os.environ["TESTING"] = "True"
os.environ["ENVIRONMENT"] = "development"
os.environ["KEY_SOURCE"] = "static"

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from cryptography.hazmat.primitives.asymmetric import rsa

from lti_trust.modules.keys.adapters.static import StaticKeyMaterialSource, material_from_public_key
from lti_trust.shared.core.config import Settings, get_settings

TOOL_KEY_ID = "https://tool-vault.vault.azure.net/keys/lti-tool/0123456789abcdef"


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """A real 2048-bit key, generated once per session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        TESTING=True,
        KEY_SOURCE="static",
        TOOL_KEY_IDENTIFIER=TOOL_KEY_ID,
        PLATFORM_KEY_IDENTIFIER=None,
    )


@pytest.fixture
def static_source(rsa_private_key) -> StaticKeyMaterialSource:
    return StaticKeyMaterialSource({TOOL_KEY_ID: material_from_public_key(rsa_private_key.public_key())})


@pytest.fixture
def app(static_source, test_settings):
    from lti_trust.main import create_app
    application = create_app(key_source=static_source)
    application.dependency_overrides[get_settings] = lambda: test_settings
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def ac(app) -> AsyncGenerator[AsyncClient, None]:
    """Async client fixture for testing API endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
