"""Password hashing and random secret generation.

bcrypt embeds the salt and cost factor in the hash it returns, so a stored
hash is all that is needed to verify a password later.
"""

import secrets
import string

import bcrypt

DEFAULT_ROUNDS = 10
DEFAULT_TOKEN_BYTES = 24
DEFAULT_PASSWORD_LENGTH = 12

_PASSWORD_ALPHABET = string.ascii_letters + string.digits
# bcrypt only looks at the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plaintext: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with a fresh random salt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(plaintext), salt).decode("utf-8")


def verify_password(plaintext: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(_encode(plaintext), password_hash.encode("utf-8"))
    except ValueError:
        return False


def generate_opaque_token(nbytes: int = DEFAULT_TOKEN_BYTES) -> str:
    """Return an unguessable URL-safe token (used for email verification)."""
    return secrets.token_urlsafe(nbytes)


def generate_password(length: int = DEFAULT_PASSWORD_LENGTH) -> str:
    """Return a random alphanumeric password."""
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))
