"""
Login Module

Normalizes LTI 1.3 OIDC third-party-initiated login requests:
- LoginRequestNormalizer: form-or-query parameters to LoginParams
"""

from .domain.normalizer import LoginRequestNormalizer, normalize_login_request
from .domain.params import LoginParams
