"""Credential hashing and code generation."""

import secrets

import bcrypt

from caretrek.runtime.context import get_config


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Hash ``plain`` with bcrypt.

    Args:
        plain: The clear-text password
        rounds: bcrypt cost factor; defaults to ``persons.bcrypt_rounds``

    Returns:
        The bcrypt hash as text (``$2b$...``)
    """
    if rounds is None:
        rounds = get_config().persons.bcrypt_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check ``plain`` against a bcrypt hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def generate_senior_code(length: int | None = None) -> str:
    """Random zero-padded numeric code, e.g. ``"0427"`` for length 4."""
    if length is None:
        length = get_config().persons.senior_code_length
    return f"{secrets.randbelow(10**length):0{length}d}"
