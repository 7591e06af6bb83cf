from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | int
    email: str | None = None
    name: str | None = None
    role: str | None = None


class TokenResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    token: str
    user: Optional[UserResponse] = None


class MeResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    user: UserResponse


class SessionData(BaseModel):
    access_token: str
    user: Optional[UserResponse] = None
    env_name: str | None = None
