"""Password hashing with bcrypt."""

import bcrypt

from storefront.config import get_settings


def hash_password(password: str) -> str:
    rounds = get_settings().security.password_hash_rounds
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plain password against a stored hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
