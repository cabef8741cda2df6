from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RsaPublicKeyMaterial:
    """Raw RSA public parameters as big-endian unsigned magnitudes."""
    modulus: bytes
    exponent: bytes


class KeyMaterialSource(ABC):
    """
    Resolves an opaque key identifier to raw RSA public parameters.

    Implementations fetch fresh material on every call and raise
    KeySourceUnavailableError when the identifier cannot be resolved.
    Any retry policy lives in the implementation.
    """

    @abstractmethod
    async def get_key(self, identifier: str) -> RsaPublicKeyMaterial:
        """Return the public parameters of the key named by identifier."""

    async def close(self) -> None:
        """Release any clients held by the source."""
