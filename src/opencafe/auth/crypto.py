"""
opencafe.auth.crypto

Encryption-at-rest for credential-like fields.

Responsibilities:
- Map a logical collection name (admins/customers/cards) to its own key.
- Encrypt/decrypt single string fields with that key (Fernet, AES-128-CBC + HMAC).
"""

from __future__ import annotations

from collections.abc import Mapping

from cryptography.fernet import Fernet, InvalidToken

from opencafe.errors import EncryptionKeyMissing, InvalidArgument
from opencafe.settings import Settings


class DecryptionError(Exception):
    pass


class CollectionCipher:
    def __init__(self, *, collection: str, key: str) -> None:
        self.collection = collection
        try:
            self._fernet = Fernet(key.encode())
        except (ValueError, TypeError) as e:
            raise EncryptionKeyMissing(f"Malformed encryption key for '{collection}'") from e

    def encrypt(self, plaintext: str) -> str:
        if not plaintext:
            raise InvalidArgument("Plain text cannot be null or empty.")
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str | None) -> str:
        if not ciphertext:
            raise DecryptionError("Cipher text cannot be null or empty.")
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except (InvalidToken, UnicodeError) as e:
            raise DecryptionError(f"Undecryptable value in '{self.collection}'") from e


class KeyedEncryptionProvider:
    """
    Resolves the cipher for a collection. Ciphers are built eagerly so a
    misconfigured key fails at startup rather than on first use.
    """

    def __init__(self, keys: Mapping[str, str]) -> None:
        self._ciphers: dict[str, CollectionCipher] = {}
        for collection, key in keys.items():
            if not key:
                raise EncryptionKeyMissing(f"No encryption key configured for '{collection}'")
            self._ciphers[collection] = CollectionCipher(collection=collection, key=key)

    @classmethod
    def from_settings(cls, settings: Settings) -> KeyedEncryptionProvider:
        return cls(settings.collection_keys())

    def cipher_for(self, collection: str) -> CollectionCipher:
        try:
            return self._ciphers[collection]
        except KeyError:
            raise EncryptionKeyMissing(
                f"No encryption key configured for '{collection}'"
            ) from None


# --- Module Notes -----------------------------------------------------------
# Fernet ciphertexts embed a random IV, so equal plaintexts never produce equal
# ciphertexts; token lookup therefore has to decrypt (see `auth.resolver`).
