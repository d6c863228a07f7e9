import secrets
import string

from passlib.context import CryptContext

from ..config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)

TEMP_PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def generate_temp_password(length: int = settings.temp_password_length) -> str:
    """Random lowercase/digit credential handed to newly added members."""
    return "".join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))
