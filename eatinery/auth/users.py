from __future__ import annotations

from typing import Any

import bcrypt

from ..storage import Storage
from ..storage.models import UserCreate

# bcrypt only reads the first 72 bytes and bcrypt>=5 rejects anything longer.
MAX_PASSWORD_BYTES = 72


def password_fits(plain: str) -> bool:
    return len(plain.encode("utf-8")) <= MAX_PASSWORD_BYTES


def _hash_password(plain: str) -> str:
    if not password_fits(plain):
        raise ValueError(f"Password longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode()


def _password_matches(plain: str, stored_hash: str) -> bool:
    return password_fits(plain) and bcrypt.checkpw(plain.encode("utf-8"), stored_hash.encode())


def _session_user(user_id: int, username: str) -> dict[str, Any]:
    return {"id": user_id, "username": username}


def register(store: Storage, username: str, password: str) -> dict[str, Any]:
    """
    Create a user with a hashed password.

    Raises ``DuplicateEntryError`` if the username is taken and ``ValueError``
    if the password exceeds ``MAX_PASSWORD_BYTES`` once UTF-8 encoded.
    """
    user = store.create_user(UserCreate(username=username, password=_hash_password(password)))
    return _session_user(user.id, user.username)


def authenticate(store: Storage, username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, username}`` or ``None``."""
    user = store.get_user_by_username(username)
    if user and _password_matches(password, user.password):
        return _session_user(user.id, user.username)
    return None
