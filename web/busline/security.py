from __future__ import annotations

import hmac
import time
import uuid
from typing import Annotated, Callable, Iterable

from fastapi import Depends, Header, HTTPException, Request, status
from jose import JWTError, jwt

from .core import get_settings
from .roles import Role

# ---------------------------------------------------------------------------
#  Basic JWT helpers
# ---------------------------------------------------------------------------

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"


def _now() -> int:
    return int(time.time())


def new_owner_id() -> str:
    """Return a fresh, stable-for-the-session owner identifier."""
    return uuid.uuid4().hex


def create_token(
    sub: str,
    role: str,
    *,
    expires_in: int | None = None,
    **extra_claims,
) -> str:
    """Return a signed JWT including any *extra_claims*.

    Standard claims:
    • sub  – owner identifier
    • role – role string
    • exp  – expiry (unix epoch)
    """
    settings = get_settings()
    if expires_in is None:
        expires_in = settings.ACCESS_TOKEN_EXPIRE_SECONDS
    payload = {
        "sub": str(sub),
        "role": role,
        "exp": _now() + expires_in,
    }
    payload.update(extra_claims)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str, *, expected_type: str = TOKEN_TYPE_ACCESS) -> dict:
    """Verify *token* and return its payload."""
    settings = get_settings()
    try:
        payload: dict = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token") from exc
    if payload.get("typ", TOKEN_TYPE_ACCESS) != expected_type:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Wrong token type")
    return payload


# Convenience helper: returns *(access, refresh)* tokens pair
def mint_tokens(sub: str, role: str | Role, **extra_claims) -> tuple[str, str]:
    """Return *(access, refresh)* pair embedding *extra_claims* in both."""
    settings = get_settings()
    role = _to_role_str(role)
    access = create_token(
        sub,
        role,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
        typ=TOKEN_TYPE_ACCESS,
        **extra_claims,
    )
    refresh = create_token(
        sub,
        role,
        expires_in=settings.REFRESH_TOKEN_EXPIRE_SECONDS,
        typ=TOKEN_TYPE_REFRESH,
        **extra_claims,
    )
    return access, refresh


# ---------------------------------------------------------------------------
#  Dependencies
# ---------------------------------------------------------------------------
async def _extract_token(req: Request) -> str | None:
    """Return JWT from Authorization header *or* access_token cookie."""
    auth: str | None = req.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth.split(" ", 1)[1]
    return req.cookies.get("access_token")


async def current_user(req: Request) -> dict:
    """FastAPI dependency returning the JWT payload or raises 401.

    Clients that have not finished starting a session get 401 and should
    retry once their identity is ready.
    """
    token = await _extract_token(req)
    if not token:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Session identity not ready")
    return decode_token(token)


def _to_role_str(value: "str | Role") -> str:
    """Return the *string* value of a Role or raw str."""
    if isinstance(value, Role):
        return value.value
    return str(value)


def role_required(*allowed: "str | Role | Iterable[str | Role]") -> Callable[[dict], dict]:
    """Return a dependency that checks *current_user* role is within *allowed*.

    Usage:
        @router.post("/routes", dependencies=[Depends(role_required(Role.admin))])
        async def seed():
            ...
    """
    # Flatten iterables (allow role_required([Role.admin, Role.guest]))
    if len(allowed) == 1 and isinstance(allowed[0], (list, tuple, set)):
        allowed = tuple(allowed[0])
    allowed_set = {_to_role_str(a) for a in allowed}

    async def _dep(user: Annotated[dict, Depends(current_user)]):
        role: str | None = user.get("role")
        if role not in allowed_set:
            raise HTTPException(status.HTTP_403_FORBIDDEN, "Forbidden")
        return user

    return _dep


def owner_id_of(user: dict) -> str:
    """Owner identifier carried by a decoded token."""
    return str(user["sub"])


# ---------------------------------------------------------------------------
#  Admin key (exchanged for an admin token)
# ---------------------------------------------------------------------------

async def require_admin_key(
    api_key: str | None = Header(None, alias="X-Admin-Key"),
) -> str:
    """FastAPI dependency that raises 401 unless *api_key* matches ADMIN_API_KEY."""
    expected = get_settings().ADMIN_API_KEY
    if api_key is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Missing admin key")
    if not expected or not hmac.compare_digest(api_key, expected):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Invalid admin key")
    return api_key
