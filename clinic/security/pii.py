# clinic/security/pii.py
"""
Applies :class:`~clinic.security.cipher.FieldCipher` to the personally
identifying keys of request and response payloads.

Only top-level keys of a flat dict are touched.  A list is treated as a
list of flat dicts, each processed on its own.
"""

from __future__ import annotations

from typing import Any, Callable, FrozenSet

import structlog

from clinic.security.cipher import FieldCipher

logger = structlog.get_logger(__name__)

#: Exact, case-sensitive key names holding PII.
SENSITIVE_FIELDS: FrozenSet[str] = frozenset(
    {
        "first_name",
        "last_name",
        "cnp",
        "email",
        "phone",
        "address",
        "allergy_list",
        "medication_list",
        "representative_name",
        # legacy medical_history_records columns
        "allergies",
        "medications",
    }
)


class PIIFilter:
    def __init__(self, cipher: FieldCipher, fields: FrozenSet[str] = SENSITIVE_FIELDS):
        self.cipher = cipher
        self.fields = fields

    def _apply(self, obj: dict, transform: Callable[[Any], Any]) -> dict:
        out = dict(obj)
        for key in self.fields:
            value = out.get(key)
            if value and isinstance(value, str):
                out[key] = transform(value)
        return out

    def protect_on_write(self, obj: Any) -> Any:
        """Encrypt the sensitive keys of an inbound payload."""
        if not isinstance(obj, dict):
            return obj
        return self._apply(obj, self.cipher.encrypt_field)

    def reveal_on_read(self, obj: Any) -> Any:
        """Decrypt the sensitive keys of an outbound dict or list of dicts."""
        if isinstance(obj, list):
            return [self.reveal_on_read(item) for item in obj]
        if not isinstance(obj, dict):
            return obj
        return self._apply(obj, self.cipher.decrypt_field)
