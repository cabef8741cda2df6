"""
Keys Module

Exports RSA key material held in a secret store as PEM:
- DerPemKeyExporter: SubjectPublicKeyInfo DER encoding + PEM wrapping
- KeyMaterialSource: resolves key identifiers to raw RSA parameters
"""

from .domain.exporter import DerPemKeyExporter, export_public_key
from .domain.ports import KeyMaterialSource, RsaPublicKeyMaterial
