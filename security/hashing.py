from passlib.context import CryptContext

from config import MIN_PASSWORD_LENGTH
from errors import ValidationError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MAX_BCRYPT_BYTES = 72


def hash_password(password: str) -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_BCRYPT_BYTES:
        # reject rather than let bcrypt truncate
        raise ValidationError("Password is too long (max 72 bytes when UTF-8 encoded)")
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if len(plain.encode("utf-8")) > MAX_BCRYPT_BYTES:
        return False
    return pwd_context.verify(plain, hashed)
