# clinic/security/__init__.py
"""Field encryption and the PII boundary filter.

:func:`get_pii_filter` builds the cipher from settings once per process.
"""

from functools import lru_cache

from clinic.config import get_settings
from .cipher import FieldCipher, normalize_key
from .pii import PIIFilter, SENSITIVE_FIELDS


@lru_cache(maxsize=1)
def get_pii_filter() -> PIIFilter:
    settings = get_settings()
    return PIIFilter(FieldCipher.from_secret(settings.encryption_key))


__all__ = [
    "FieldCipher",
    "normalize_key",
    "PIIFilter",
    "SENSITIVE_FIELDS",
    "get_pii_filter",
]
