from __future__ import annotations

import hashlib
import hmac


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8", "surrogatepass")).hexdigest()


def verify_password(password: str, password_hash: str) -> bool:
    return hmac.compare_digest(password_hash, hash_password(password))
