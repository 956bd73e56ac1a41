"""Label-bound content encryption.

Encrypted content is wrapped in an envelope naming the label it was
encrypted under::

    ENCRYPTED:<labelId>:<base64(nonce || ciphertext || tag)>

The payload is AES-256-GCM with the label id as associated data.
Decrypting with any other label is a hard ``ENCRYPTION_FAILURE``; the
content is never returned under the wrong policy.

Example
-------
>>> service = EncryptionService()
>>> token = service.encrypt("Quarterly revenue", confidential)
>>> token.startswith("ENCRYPTED:confidential:")
True
>>> service.decrypt(token, confidential)
'Quarterly revenue'
"""
from __future__ import annotations

import base64
import binascii
import logging
import os
import secrets
from typing import Protocol, runtime_checkable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from grounding_labels.errors import LabelError
from grounding_labels.labels.models import Label
from grounding_labels.protection.policy import requires_encryption

logger = logging.getLogger(__name__)

ENVELOPE_PREFIX = "ENCRYPTED:"
KEY_ENV_VAR = "GROUNDING_LABELS_KEY"
KEY_SIZE = 32
NONCE_SIZE = 12


@runtime_checkable
class Encryptor(Protocol):
    """Encryption collaborator consumed by the service."""

    def should_encrypt(self, label: Label) -> bool: ...

    def encrypt(self, content: str, label: Label) -> str: ...

    def decrypt(self, content: str, label: Label) -> str: ...

    def can_decrypt(self, content: str, label: Label) -> bool: ...


class EncryptionService:
    """AES-256-GCM encryption gated by label policy.

    Parameters
    ----------
    key:
        32-byte key.  When omitted the key is read (base64) from the
        environment variable named by ``key_env_var``; failing that a
        random per-process key is generated.
    key_env_var:
        Environment variable holding a base64-encoded key.
    """

    def __init__(self, key: bytes | None = None, key_env_var: str = KEY_ENV_VAR) -> None:
        resolved = key if key is not None else _key_from_env(key_env_var)
        if resolved is None:
            logger.warning(
                "No encryption key configured (%s); using an ephemeral key", key_env_var
            )
            resolved = AESGCM.generate_key(bit_length=256)
        if len(resolved) != KEY_SIZE:
            raise ValueError(f"Encryption key must be {KEY_SIZE} bytes, got {len(resolved)}")
        self._aesgcm = AESGCM(resolved)

    # ------------------------------------------------------------------
    # Policy
    # ------------------------------------------------------------------

    def should_encrypt(self, label: Label | None) -> bool:
        """Encryption applies only to Confidential-or-higher labels that ask for it."""
        return label is not None and requires_encryption(label)

    # ------------------------------------------------------------------
    # Encrypt / decrypt
    # ------------------------------------------------------------------

    def encrypt(self, content: str, label: Label) -> str:
        """Encrypt ``content`` under ``label``.

        Content is returned unchanged when it is empty or the label does not
        require encryption.

        Raises
        ------
        LabelError
            ``ENCRYPTION_FAILURE`` with operation ``"encrypt"``.
        """
        if not content or not self.should_encrypt(label):
            return content
        try:
            nonce = secrets.token_bytes(NONCE_SIZE)
            sealed = self._aesgcm.encrypt(nonce, content.encode("utf-8"), label.id.encode("utf-8"))
        except (ValueError, OverflowError) as exc:
            raise LabelError.encryption_failure(label.id, "encrypt", str(exc)) from exc
        payload = base64.b64encode(nonce + sealed).decode("ascii")
        return f"{ENVELOPE_PREFIX}{label.id}:{payload}"

    def decrypt(self, content: str, label: Label) -> str:
        """Decrypt an envelope produced by :meth:`encrypt`.

        Content without the ``ENCRYPTED:`` prefix is returned unchanged.

        Raises
        ------
        LabelError
            ``ENCRYPTION_FAILURE`` with operation ``"decrypt"`` when the
            envelope is malformed, names a different label, or fails
            authentication.
        """
        if not content or not is_encrypted(content):
            return content

        envelope_label, payload = _split_envelope(content)
        if envelope_label is None or payload is None:
            raise LabelError.encryption_failure(label.id, "decrypt", "malformed encrypted content")
        if envelope_label != label.id:
            raise LabelError.encryption_failure(
                label.id,
                "decrypt",
                f"label mismatch: content was encrypted under '{envelope_label}'",
            )

        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise LabelError.encryption_failure(label.id, "decrypt", f"invalid payload: {exc}") from exc
        if len(raw) <= NONCE_SIZE:
            raise LabelError.encryption_failure(label.id, "decrypt", "ciphertext too short")

        try:
            plain = self._aesgcm.decrypt(raw[:NONCE_SIZE], raw[NONCE_SIZE:], label.id.encode("utf-8"))
        except InvalidTag as exc:
            raise LabelError.encryption_failure(
                label.id, "decrypt", "authentication failed (wrong key or tampered content)"
            ) from exc
        return plain.decode("utf-8")

    def can_decrypt(self, content: str, label: Label | None) -> bool:
        """Return ``True`` when ``content`` is an envelope for ``label``."""
        if not content or label is None or not is_encrypted(content):
            return False
        envelope_label, payload = _split_envelope(content)
        return payload is not None and envelope_label == label.id


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_encrypted(content: str) -> bool:
    return content.startswith(ENVELOPE_PREFIX)


def envelope_label_id(content: str) -> str | None:
    """Return the label id named by an envelope, or ``None``."""
    if not is_encrypted(content):
        return None
    label_id, _ = _split_envelope(content)
    return label_id


def generate_key() -> str:
    """Return a new base64-encoded key suitable for ``GROUNDING_LABELS_KEY``."""
    return base64.b64encode(AESGCM.generate_key(bit_length=256)).decode("ascii")


def _split_envelope(content: str) -> tuple[str | None, str | None]:
    parts = content.split(":", 2)
    if len(parts) != 3 or not parts[1]:
        return None, None
    return parts[1], parts[2]


def _key_from_env(name: str) -> bytes | None:
    value = os.environ.get(name)
    if not value:
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"{name} is not valid base64: {exc}") from exc
