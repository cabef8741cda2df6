"""
DER/PEM Public Key Exporter

Turns RSA public parameters into a PEM "PUBLIC KEY" block
(RFC 5280 SubjectPublicKeyInfo, rsaEncryption) for JWKS publishing and display.
"""

import base64

from lti_trust.modules.keys.domain.der import rsa_subject_public_key_info
from lti_trust.modules.keys.domain.ports import KeyMaterialSource

PEM_HEADER = "-----BEGIN PUBLIC KEY-----"
PEM_FOOTER = "-----END PUBLIC KEY-----"
PEM_LINE_LENGTH = 64


def pem_wrap(der: bytes) -> str:
    encoded = base64.b64encode(der).decode("ascii")
    lines = [PEM_HEADER]
    lines.extend(encoded[i:i + PEM_LINE_LENGTH] for i in range(0, len(encoded), PEM_LINE_LENGTH))
    lines.append(PEM_FOOTER)
    return "\n".join(lines) + "\n"


def export_public_key(modulus: bytes, exponent: bytes) -> str:
    """
    Encode an RSA public key as PEM.

    Pure and deterministic. No key size or primality checks are made; any
    byte sequences yield a structurally valid document.
    """
    return pem_wrap(rsa_subject_public_key_info(modulus, exponent))


class DerPemKeyExporter:
    """Resolves keys through a KeyMaterialSource and exports them as PEM."""

    def __init__(self, source: KeyMaterialSource):
        self.source = source

    async def resolve_and_export(self, key_identifier: str) -> str:
        """
        Fetch the key once and export it.

        Raises:
            KeySourceUnavailableError: propagated unchanged from the source.
        """
        material = await self.source.get_key(key_identifier)
        return export_public_key(material.modulus, material.exponent)
