from typing import Optional

import bcrypt

from settings.config import get_settings


def hash_password(plain_password: str, rounds: Optional[int] = None) -> str:
    """
    bcrypt hash of an admin password. Cost factor comes from BCRYPT_ROUNDS.
    """
    if not isinstance(plain_password, str):
        raise TypeError("Password must be a string")
    salt = bcrypt.gensalt(rounds=rounds or get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.
    A missing or malformed hash never matches.
    """
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
