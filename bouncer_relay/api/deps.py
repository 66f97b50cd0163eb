# bouncer_relay/api/deps.py
"""
Request dependencies.

The host's authentication middleware puts the current user on
request.state.user; the relay only checks the role.
"""

from typing import Callable

from fastapi import HTTPException, Request

from ..models import read_field


def require_roles(*roles: str) -> Callable:
    """Dependency that admits only users holding one of the given roles."""
    allowed = {role.upper() for role in roles}

    async def check(request: Request):
        user = getattr(request.state, "user", None)
        if user is None:
            raise HTTPException(status_code=401, detail="Not authorized")

        role = read_field(user, "role")
        if not role or str(role).upper() not in allowed:
            raise HTTPException(status_code=403, detail="Not authorized")

        return user

    return check
