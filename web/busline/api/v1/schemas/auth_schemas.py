from pydantic import BaseModel


class SessionOut(BaseModel):
    """Schema for a freshly started session"""
    owner_id: str
    role: str
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class RefreshTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class IdentityOut(BaseModel):
    owner_id: str
    role: str
