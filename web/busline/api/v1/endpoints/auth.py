import logging

from fastapi import APIRouter, Depends, Response, status

from busline.api.v1.schemas.auth_schemas import (
    SessionOut, RefreshTokenRequest, RefreshTokenResponse, IdentityOut
)
from busline.deps import SettingsDep, CurrentUserDep
from busline.roles import Role
from busline.security import (
    create_token, decode_token, mint_tokens, new_owner_id, owner_id_of, require_admin_key,
    TOKEN_TYPE_ACCESS, TOKEN_TYPE_REFRESH,
)


router = APIRouter()
logger = logging.getLogger(__name__)


def _set_session_cookies(response: Response, settings, access_token: str, refresh_token: str) -> None:
    # Cookies are a fallback for browser clients; APIs use Authorization headers
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,
        secure=True,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_SECONDS
    )
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=True,
        samesite="lax",
        max_age=settings.REFRESH_TOKEN_EXPIRE_SECONDS
    )


@router.post("/session", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
async def start_session(response: Response, settings: SettingsDep):
    """Start an anonymous session and hand out its owner identity"""
    owner_id = new_owner_id()
    access_token, refresh_token = mint_tokens(owner_id, Role.guest)
    _set_session_cookies(response, settings, access_token, refresh_token)
    logger.info("Started session %s", owner_id)

    return SessionOut(
        owner_id=owner_id,
        role=Role.guest.value,
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/refresh", response_model=RefreshTokenResponse)
async def refresh_session(payload: RefreshTokenRequest, response: Response, settings: SettingsDep):
    """Exchange a refresh token for a new access token; the owner id is kept"""
    claims = decode_token(payload.refresh_token, expected_type=TOKEN_TYPE_REFRESH)
    access_token = create_token(
        claims["sub"],
        claims["role"],
        expires_in=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
        typ=TOKEN_TYPE_ACCESS,
    )
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,
        secure=True,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_SECONDS
    )
    return RefreshTokenResponse(access_token=access_token)


@router.post(
    "/admin",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_key)],
)
async def start_admin_session(response: Response, settings: SettingsDep):
    """Mint an admin token for holders of the admin key"""
    owner_id = new_owner_id()
    access_token, refresh_token = mint_tokens(owner_id, Role.admin)
    _set_session_cookies(response, settings, access_token, refresh_token)
    logger.info("Started admin session %s", owner_id)

    return SessionOut(
        owner_id=owner_id,
        role=Role.admin.value,
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.get("/me", response_model=IdentityOut)
async def me(user: CurrentUserDep):
    """Identity behind the presented token"""
    return IdentityOut(owner_id=owner_id_of(user), role=user.get("role", Role.guest.value))
