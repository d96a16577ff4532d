"""Security helpers: password hashing, PII masking and safe logging."""
import re

import bcrypt

from ..app.config import Config

_EMAIL_RE = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*(@[A-Za-z0-9.-]+)")
_PHONE_RE = re.compile(r"\+?\d[\d\s-]{8,}\d")


def mask_pii(text: str) -> str:
    if not text:
        return text
    masked = _EMAIL_RE.sub(r"\1***\2", text)
    masked = _PHONE_RE.sub("[REDACTED]", masked)
    return masked


def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=Config.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
