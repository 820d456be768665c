# utils/hashing.py
from passlib.context import CryptContext

# Salted PBKDF2-SHA256; the salt and round count are stored inside the hash string
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Constant-time check of a candidate password against a stored hash."""
    if not password_hash:
        return False
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        # Malformed or unknown hash format
        return False


def dummy_verify() -> None:
    """Burn the same time as a real verification when no account matched."""
    pwd_context.dummy_verify()
