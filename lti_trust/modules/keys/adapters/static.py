from pathlib import Path
from typing import Dict, Mapping, Optional
import structlog
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from lti_trust.modules.keys.domain.ports import KeyMaterialSource, RsaPublicKeyMaterial
from lti_trust.shared.core.exceptions import KeySourceUnavailableError

logger = structlog.get_logger()


def _int_to_bytes(value: int) -> bytes:
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def material_from_public_key(public_key: rsa.RSAPublicKey) -> RsaPublicKeyMaterial:
    numbers = public_key.public_numbers()
    return RsaPublicKeyMaterial(modulus=_int_to_bytes(numbers.n), exponent=_int_to_bytes(numbers.e))


def material_from_pem(pem: bytes) -> RsaPublicKeyMaterial:
    """Load RSA public parameters from a PEM public key or unencrypted private key."""
    try:
        key = serialization.load_pem_public_key(pem)
    except ValueError:
        key = serialization.load_pem_private_key(pem, password=None).public_key()
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError("PEM does not contain an RSA key")
    return material_from_public_key(key)


class StaticKeyMaterialSource(KeyMaterialSource):
    """
    In-memory KeyMaterialSource for local development and tests.
    """

    def __init__(self, keys: Optional[Mapping[str, RsaPublicKeyMaterial]] = None):
        self._keys: Dict[str, RsaPublicKeyMaterial] = dict(keys or {})

    def add_pem(self, identifier: str, pem: bytes) -> None:
        self._keys[identifier] = material_from_pem(pem)

    @classmethod
    def from_pem_files(cls, paths: Mapping[str, str]) -> "StaticKeyMaterialSource":
        source = cls()
        for identifier, path in paths.items():
            source.add_pem(identifier, Path(path).read_bytes())
            logger.info("static_key_loaded", identifier=identifier, path=path)
        return source

    async def get_key(self, identifier: str) -> RsaPublicKeyMaterial:
        material = self._keys.get(identifier)
        if material is None:
            raise KeySourceUnavailableError(f"No key registered for identifier '{identifier}'")
        return material
