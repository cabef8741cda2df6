"""
Azure Key Vault Key Material Source

Resolves Key Vault key URLs (https://<vault>.vault.azure.net/keys/<name>[/<version>])
to raw RSA public parameters using the official Azure SDK. Authentication uses
DefaultAzureCredential, which picks up the managed identity in deployment.
"""

from typing import Dict, Optional
import structlog
import tenacity
from azure.core.exceptions import AzureError, ServiceRequestError, ServiceResponseError
from azure.identity.aio import DefaultAzureCredential
from azure.keyvault.keys import KeyType, KeyVaultKeyIdentifier
from azure.keyvault.keys.aio import KeyClient

from lti_trust.modules.keys.domain.ports import KeyMaterialSource, RsaPublicKeyMaterial
from lti_trust.shared.core.exceptions import KeySourceUnavailableError

logger = structlog.get_logger()

RSA_KEY_TYPES = (KeyType.rsa, KeyType.rsa_hsm)


def _log_retry(retry_state: tenacity.RetryCallState) -> None:
    logger.warning(
        "key_vault_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


class KeyVaultKeyMaterialSource(KeyMaterialSource):
    """
    KeyMaterialSource backed by Azure Key Vault.

    Transient transport failures are retried here with exponential backoff;
    everything else surfaces as KeySourceUnavailableError.
    """

    def __init__(
        self,
        credential=None,
        retry_attempts: int = 3,
        retry_wait: Optional[tenacity.wait.wait_base] = None,
    ):
        self._credential = credential
        self._owns_credential = credential is None
        self._clients: Dict[str, KeyClient] = {}
        self.retry_attempts = retry_attempts
        self.retry_wait = retry_wait or tenacity.wait_exponential(multiplier=1, min=2, max=10)

    def _get_credential(self):
        if self._credential is None:
            self._credential = DefaultAzureCredential()
        return self._credential

    def _get_client(self, vault_url: str) -> KeyClient:
        if vault_url not in self._clients:
            self._clients[vault_url] = KeyClient(vault_url=vault_url, credential=self._get_credential())
        return self._clients[vault_url]

    async def _fetch_key(self, key_id: KeyVaultKeyIdentifier):
        client = self._get_client(key_id.vault_url)
        retrying = tenacity.AsyncRetrying(
            retry=tenacity.retry_if_exception_type((ServiceRequestError, ServiceResponseError)),
            wait=self.retry_wait,
            stop=tenacity.stop_after_attempt(self.retry_attempts),
            before_sleep=_log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await client.get_key(key_id.name, version=key_id.version)

    async def get_key(self, identifier: str) -> RsaPublicKeyMaterial:
        try:
            key_id = KeyVaultKeyIdentifier(identifier)
        except ValueError as e:
            raise KeySourceUnavailableError(
                f"Invalid Key Vault key identifier: {identifier}",
                details={"reason": str(e)},
            ) from e

        try:
            key = await self._fetch_key(key_id)
        except AzureError as e:
            logger.error("key_vault_get_key_failed", key_name=key_id.name, vault_url=key_id.vault_url, error=str(e))
            raise KeySourceUnavailableError(
                f"Key Vault could not return key '{key_id.name}'",
                details={"vault_url": key_id.vault_url},
            ) from e

        if key.key_type not in RSA_KEY_TYPES or not key.key.n or not key.key.e:
            raise KeySourceUnavailableError(
                f"Key '{key_id.name}' is not an RSA key",
                details={"key_type": str(key.key_type)},
            )

        logger.info("key_vault_key_resolved", key_name=key_id.name, version=key.properties.version)
        return RsaPublicKeyMaterial(modulus=bytes(key.key.n), exponent=bytes(key.key.e))

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
        if self._owns_credential and self._credential is not None:
            await self._credential.close()
            self._credential = None
