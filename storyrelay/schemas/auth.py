"""Request/response schemas for signup, signin and user endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """
    Credentials for a new account.

    Format rules (nickname pattern, password length, nickname not in password)
    are checked by the registration service so failures map to 412, not 422.
    """

    nickname: str = Field(..., description="Alphanumeric nickname, at least 3 characters")
    password: str = Field(..., description="Password, at least 4 characters")


class SigninRequest(BaseModel):
    """Credentials for signin."""

    nickname: str = Field(..., description="Nickname")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """JWT returned after successful signin (also set in the authorization cookie)."""

    token: str = Field(..., description="JWT identity token")
    token_type: str = Field(default="bearer", description="Token type")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class CurrentUser(BaseModel):
    """Authenticated user (id, nickname, role) resolved for the current request."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    nickname: str
    role: str


class UserListItem(BaseModel):
    """User entry for admin list (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    nickname: str
    role: str


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserListItem]
