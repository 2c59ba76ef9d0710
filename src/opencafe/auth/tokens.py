"""
opencafe.auth.tokens

Admin bearer token generation.

Responsibilities:
- Generate 48-character tokens from the unreserved URI alphabet with `secrets`.
- Encrypt them for storage, keeping the plaintext only for the one-time hand-over.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass, field

from opencafe.auth.crypto import CollectionCipher

TOKEN_ALPHABET = string.ascii_letters + string.digits + "-_.~"
TOKEN_LENGTH = 48


@dataclass(frozen=True, slots=True)
class IssuedToken:
    ciphertext: str
    # Hand this to the new holder once; it is not recoverable afterwards.
    plaintext: str = field(repr=False)


def generate_token() -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def issue_token(cipher: CollectionCipher) -> IssuedToken:
    plaintext = generate_token()
    return IssuedToken(ciphertext=cipher.encrypt(plaintext), plaintext=plaintext)
