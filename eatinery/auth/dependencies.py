from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from ..storage import Storage, get_storage


def require_user(request: Request, store: Storage = Depends(get_storage)) -> dict:
    """
    Raise 401 unless the session names a user the store still knows.

    An in-memory store forgets its users on restart while the signed cookie
    survives, so a session pointing at a missing user is cleared.
    """
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if store.get_user(user["id"]) is None:
        request.session.clear()
        raise HTTPException(status_code=401, detail="Session expired")
    return user
