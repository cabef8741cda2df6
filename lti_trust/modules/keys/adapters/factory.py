"""
Key Material Source Factory

Builds the KeyMaterialSource selected by KEY_SOURCE.
"""

from lti_trust.modules.keys.adapters.key_vault import KeyVaultKeyMaterialSource
from lti_trust.modules.keys.adapters.static import StaticKeyMaterialSource
from lti_trust.modules.keys.domain.ports import KeyMaterialSource
from lti_trust.shared.core.config import Settings
from lti_trust.shared.core.exceptions import ConfigurationError


class KeySourceFactory:
    @staticmethod
    def create(settings: Settings) -> KeyMaterialSource:
        if settings.KEY_SOURCE == "key_vault":
            return KeyVaultKeyMaterialSource(retry_attempts=settings.KEY_VAULT_RETRY_ATTEMPTS)
        if settings.KEY_SOURCE == "static":
            return StaticKeyMaterialSource.from_pem_files(settings.STATIC_KEY_PEM_PATHS)
        raise ConfigurationError(f"Unsupported key source: {settings.KEY_SOURCE}")
